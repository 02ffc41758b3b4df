"""SQLAlchemy ORM models for companies, employees, policy files and onboarding."""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (sqlite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Company(Base):
    """Company table - top-level tenancy boundary."""

    __tablename__ = "company"

    company_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    employees: Mapped[list["Employee"]] = relationship("Employee", back_populates="company")
    policy_files: Mapped[list["PolicyFile"]] = relationship(
        "PolicyFile", back_populates="company"
    )


class Employee(Base):
    """Employee table - a user who may or may not belong to a company yet."""

    __tablename__ = "employee"
    __table_args__ = (Index("idx_employee_company", "company_id"),)

    employee_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("company.company_id"), nullable=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="employee")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    company: Mapped["Company | None"] = relationship("Company", back_populates="employees")


class PolicyFile(Base):
    """Policy file metadata - the payload lives in policy_chunk rows."""

    __tablename__ = "policy_file"
    __table_args__ = (Index("idx_policy_file_company", "company_id", "uploaded_at"),)

    file_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("company.company_id"), nullable=False
    )
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    content_type: Mapped[str] = mapped_column(Text, nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False)
    chunk_size_bytes: Mapped[int | None] = mapped_column(Integer, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    company: Mapped["Company"] = relationship("Company", back_populates="policy_files")
    chunks: Mapped[list["PolicyChunk"]] = relationship(
        "PolicyChunk",
        back_populates="file",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PolicyChunk(Base):
    """Fixed-size binary segment of a stored policy file."""

    __tablename__ = "policy_chunk"
    __table_args__ = (
        UniqueConstraint("file_id", "sequence_index", name="uq_policy_chunk_seq"),
        Index("idx_policy_chunk_file", "file_id", "sequence_index"),
    )

    chunk_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    file_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("policy_file.file_id", ondelete="CASCADE"), nullable=False
    )
    sequence_index: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    # Relationships
    file: Mapped["PolicyFile"] = relationship("PolicyFile", back_populates="chunks")


class OnboardingRecord(Base):
    """Per-employee onboarding tracker; tasks, policies and documents are JSON lists."""

    __tablename__ = "onboarding_record"
    __table_args__ = (
        UniqueConstraint("employee_id", "company_id", name="uq_onboarding_employee_company"),
    )

    record_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("employee.employee_id"), nullable=False
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("company.company_id"), nullable=False
    )
    status: Mapped[str] = mapped_column(Text, nullable=False, default="not_started")
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    tasks: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    policies: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)
    documents: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType, nullable=False, default=list
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
