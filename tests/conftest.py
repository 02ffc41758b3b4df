"""Shared pytest fixtures for all test suites."""

import asyncio
import uuid
from collections.abc import AsyncGenerator, Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from nexusone.app.db.inmemory import (
    InMemoryBlobStore,
    InMemoryCompanyRepository,
    InMemoryOnboardingRepository,
    InMemoryPolicyFileRepository,
)
from nexusone.app.db.models import Base, Company, Employee
from nexusone.app.models.tenancy import CompanyInfo, EmployeeInfo


@dataclass(frozen=True)
class Tenants:
    """IDs of the two seeded tenants and their employees."""

    company_a: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-00000000000a")
    company_b: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-00000000000b")
    employee_a: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000a1")
    employee_b: uuid.UUID = uuid.UUID("00000000-0000-0000-0000-0000000000b1")


TENANTS = Tenants()


@pytest.fixture
def tenants() -> Tenants:
    """Fixed tenant IDs shared by the in-memory and sqlite fixtures."""
    return TENANTS


@pytest.fixture
def companies() -> InMemoryCompanyRepository:
    """Two tenants, each with one employee."""
    repo = InMemoryCompanyRepository()
    repo.add_company(
        CompanyInfo(
            company_id=TENANTS.company_a,
            name="Acme Corp",
            description="Makes anvils",
            industry="Manufacturing",
        )
    )
    repo.add_company(CompanyInfo(company_id=TENANTS.company_b, name="Globex"))
    repo.add_employee(
        EmployeeInfo(
            employee_id=TENANTS.employee_a,
            company_id=TENANTS.company_a,
            name="Alice",
            email="alice@acme.test",
        )
    )
    repo.add_employee(
        EmployeeInfo(
            employee_id=TENANTS.employee_b,
            company_id=TENANTS.company_b,
            name="Bob",
            email="bob@globex.test",
        )
    )
    return repo


@pytest.fixture
def files() -> InMemoryPolicyFileRepository:
    return InMemoryPolicyFileRepository()


@pytest.fixture
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def onboarding() -> InMemoryOnboardingRepository:
    return InMemoryOnboardingRepository()


async def _create_schema_and_tenants(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine) as session:
        session.add(
            Company(
                company_id=TENANTS.company_a,
                name="Acme Corp",
                description="Makes anvils",
                industry="Manufacturing",
            )
        )
        session.add(Company(company_id=TENANTS.company_b, name="Globex"))
        await session.flush()
        session.add(
            Employee(
                employee_id=TENANTS.employee_a,
                company_id=TENANTS.company_a,
                name="Alice",
                email="alice@acme.test",
            )
        )
        session.add(
            Employee(
                employee_id=TENANTS.employee_b,
                company_id=TENANTS.company_b,
                name="Bob",
                email="bob@globex.test",
            )
        )
        await session.commit()


def _sqlite_engine(path: Path) -> AsyncEngine:
    return create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool, echo=False)


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Async engine on a throwaway sqlite file with tenants A and B seeded."""
    engine = _sqlite_engine(tmp_path / "test.db")
    await _create_schema_and_tenants(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sqlite_session(sqlite_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session on the seeded sqlite engine."""
    async with AsyncSession(sqlite_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def route_engine(tmp_path: Path) -> Iterator[AsyncEngine]:
    """Seeded sqlite engine for synchronous TestClient route tests.

    Connections are never pooled, so the engine can be shared between the
    setup event loop and the one TestClient runs the app on.
    """
    engine = _sqlite_engine(tmp_path / "routes.db")
    asyncio.run(_create_schema_and_tenants(engine))

    yield engine

    asyncio.run(engine.dispose())


@pytest.fixture
def auth_headers(tenants: Tenants) -> dict[str, dict[str, str]]:
    """Bearer headers for the employees of tenants A and B."""
    return {
        "a": {"Authorization": f"Bearer {tenants.company_a}:{tenants.employee_a}"},
        "b": {"Authorization": f"Bearer {tenants.company_b}:{tenants.employee_b}"},
    }
