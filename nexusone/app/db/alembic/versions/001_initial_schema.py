"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates all tables:
- company, employee
- policy_file, policy_chunk
- onboarding_record
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all tables."""
    # company table
    op.create_table(
        "company",
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("industry", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    )

    # employee table
    op.create_table(
        "employee",
        sa.Column(
            "employee_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("company.company_id"),
            nullable=True,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False, unique=True),
        sa.Column("role", sa.Text(), nullable=False, server_default="employee"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    )
    op.create_index("idx_employee_company", "employee", ["company_id"])

    # policy_file table
    op.create_table(
        "policy_file",
        sa.Column(
            "file_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("company.company_id"),
            nullable=False,
        ),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("content_type", sa.Text(), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False),
        sa.Column("chunk_size_bytes", sa.Integer(), nullable=True),
        sa.Column(
            "uploaded_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
    )
    op.create_index("idx_policy_file_company", "policy_file", ["company_id", "uploaded_at"])

    # policy_chunk table
    op.create_table(
        "policy_chunk",
        sa.Column(
            "chunk_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "file_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("policy_file.file_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence_index", sa.Integer(), nullable=False),
        sa.Column("payload", sa.LargeBinary(), nullable=False),
        sa.UniqueConstraint("file_id", "sequence_index", name="uq_policy_chunk_seq"),
    )
    op.create_index("idx_policy_chunk_file", "policy_chunk", ["file_id", "sequence_index"])

    # onboarding_record table
    op.create_table(
        "onboarding_record",
        sa.Column(
            "record_id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column(
            "employee_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("employee.employee_id"),
            nullable=False,
        ),
        sa.Column(
            "company_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("company.company_id"),
            nullable=False,
        ),
        sa.Column("status", sa.Text(), nullable=False, server_default="not_started"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("tasks", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("policies", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column("documents", postgresql.JSONB(), nullable=False, server_default="[]"),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False
        ),
        sa.UniqueConstraint("employee_id", "company_id", name="uq_onboarding_employee_company"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("onboarding_record")
    op.drop_index("idx_policy_chunk_file", table_name="policy_chunk")
    op.drop_table("policy_chunk")
    op.drop_index("idx_policy_file_company", table_name="policy_file")
    op.drop_table("policy_file")
    op.drop_index("idx_employee_company", table_name="employee")
    op.drop_table("employee")
    op.drop_table("company")
