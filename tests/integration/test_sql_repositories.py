"""Integration tests for SQL repositories and the SQL blob store (sqlite)."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from nexusone.app.db.models import PolicyChunk
from nexusone.app.db.sql_repositories import (
    SqlCompanyRepository,
    SqlOnboardingRepository,
    SqlPolicyFileRepository,
)
from nexusone.app.errors import BlobReadError
from nexusone.app.models.onboarding import OnboardingRecordData, OnboardingTask
from nexusone.app.models.policies import PolicyFileInfo
from nexusone.app.storage.blobs import SqlBlobStore

BASE_TIME = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


def _info(company_id: uuid.UUID, filename: str, order: int = 0) -> PolicyFileInfo:
    return PolicyFileInfo(
        file_id=uuid.uuid4(),
        company_id=company_id,
        filename=filename,
        content_type="text/plain",
        size_bytes=10,
        chunk_size_bytes=4,
        uploaded_at=BASE_TIME + timedelta(minutes=order),
    )


class TestSqlCompanyRepository:
    """Test company and employee lookups."""

    @pytest.mark.asyncio
    async def test_get_employee_and_company(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that seeded rows map to domain models."""
        repo = SqlCompanyRepository(sqlite_session)

        employee = await repo.get_employee(tenants.employee_a)
        company = await repo.get_company(tenants.company_a)

        assert employee is not None
        assert employee.company_id == tenants.company_a
        assert employee.name == "Alice"
        assert employee.role == "employee"
        assert company is not None
        assert company.name == "Acme Corp"
        assert company.industry == "Manufacturing"

    @pytest.mark.asyncio
    async def test_missing_rows_return_none(self, sqlite_session: AsyncSession) -> None:
        """Test that unknown IDs return None."""
        repo = SqlCompanyRepository(sqlite_session)

        assert await repo.get_employee(uuid.uuid4()) is None
        assert await repo.get_company(uuid.uuid4()) is None


class TestSqlPolicyFileRepository:
    """Test policy file metadata persistence."""

    @pytest.mark.asyncio
    async def test_list_is_tenant_scoped_and_ordered(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that listing returns only the tenant's files, oldest first."""
        repo = SqlPolicyFileRepository(sqlite_session)
        await repo.create(_info(tenants.company_a, "later.txt", order=5))
        await repo.create(_info(tenants.company_a, "earlier.txt", order=1))
        await repo.create(_info(tenants.company_b, "other.txt", order=3))

        files = await repo.list_for_company(tenants.company_a)

        assert [f.filename for f in files] == ["earlier.txt", "later.txt"]

    @pytest.mark.asyncio
    async def test_get_for_company_enforces_tenancy(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that a file is only visible to its owning tenant."""
        repo = SqlPolicyFileRepository(sqlite_session)
        info = await repo.create(_info(tenants.company_a, "handbook.pdf"))

        assert await repo.get_for_company(info.file_id, tenants.company_a) is not None
        assert await repo.get_for_company(info.file_id, tenants.company_b) is None
        assert (await repo.lookup(info.file_id)) is not None

    @pytest.mark.asyncio
    async def test_delete_for_company(self, sqlite_session: AsyncSession, tenants: Any) -> None:
        """Test that delete only removes the owning tenant's row."""
        repo = SqlPolicyFileRepository(sqlite_session)
        info = await repo.create(_info(tenants.company_a, "handbook.pdf"))

        assert await repo.delete_for_company(info.file_id, tenants.company_b) is False
        assert await repo.delete_for_company(info.file_id, tenants.company_a) is True
        assert await repo.lookup(info.file_id) is None


class TestSqlBlobStore:
    """Test chunk persistence and ordered streaming."""

    @pytest.mark.asyncio
    async def test_put_count_and_stream(self, sqlite_session: AsyncSession, tenants: Any) -> None:
        """Test that a payload is stored as chunks and streams back intact."""
        info = await SqlPolicyFileRepository(sqlite_session).create(
            _info(tenants.company_a, "a.txt")
        )
        store = SqlBlobStore(sqlite_session)

        written = await store.put(info.file_id, b"0123456789", 4)

        assert written == 3
        assert await store.count_chunks(info.file_id) == 3
        streamed = [chunk async for chunk in store.open_stream(info.file_id)]
        assert streamed == [b"0123", b"4567", b"89"]

    @pytest.mark.asyncio
    async def test_stream_orders_by_sequence_index(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that chunks inserted out of order are streamed by sequence index."""
        info = await SqlPolicyFileRepository(sqlite_session).create(
            _info(tenants.company_a, "a.txt")
        )
        for index, payload in [(2, b"C"), (0, b"A"), (1, b"B")]:
            sqlite_session.add(
                PolicyChunk(file_id=info.file_id, sequence_index=index, payload=payload)
            )
        await sqlite_session.flush()

        store = SqlBlobStore(sqlite_session)

        assert [chunk async for chunk in store.open_stream(info.file_id)] == [b"A", b"B", b"C"]

    @pytest.mark.asyncio
    async def test_delete_removes_all_chunks(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that deleting a file's blob removes every chunk."""
        info = await SqlPolicyFileRepository(sqlite_session).create(
            _info(tenants.company_a, "a.txt")
        )
        store = SqlBlobStore(sqlite_session)
        await store.put(info.file_id, b"0123456789", 4)

        await store.delete(info.file_id)

        assert await store.count_chunks(info.file_id) == 0

    @pytest.mark.asyncio
    async def test_database_failure_raises_blob_read_error(
        self, sqlite_session: AsyncSession
    ) -> None:
        """Test that driver errors surface as BlobReadError."""
        await sqlite_session.execute(text("DROP TABLE policy_chunk"))
        store = SqlBlobStore(sqlite_session)

        with pytest.raises(BlobReadError):
            await store.count_chunks(uuid.uuid4())


class TestSqlOnboardingRepository:
    """Test onboarding record persistence."""

    @pytest.mark.asyncio
    async def test_save_and_get_round_trip(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that a saved record reads back with its tasks."""
        repo = SqlOnboardingRepository(sqlite_session)
        record = OnboardingRecordData(
            employee_id=tenants.employee_a,
            company_id=tenants.company_a,
            status="in_progress",
            tasks=[OnboardingTask(task_id="laptop", title="Laptop", required=True)],
        )

        await repo.save(record)
        loaded = await repo.get(tenants.employee_a, tenants.company_a)

        assert loaded is not None
        assert loaded.status == "in_progress"
        assert loaded.tasks[0].task_id == "laptop"
        assert loaded.tasks[0].required is True

    @pytest.mark.asyncio
    async def test_save_updates_existing_record(
        self, sqlite_session: AsyncSession, tenants: Any
    ) -> None:
        """Test that saving again updates the same record."""
        repo = SqlOnboardingRepository(sqlite_session)
        record = OnboardingRecordData(
            employee_id=tenants.employee_a,
            company_id=tenants.company_a,
            tasks=[OnboardingTask(task_id="laptop", title="Laptop")],
        )
        await repo.save(record)

        record.tasks[0].status = "completed"
        record.status = "completed"
        await repo.save(record)

        loaded = await repo.get(tenants.employee_a, tenants.company_a)
        assert loaded is not None
        assert loaded.status == "completed"
        assert loaded.tasks[0].status == "completed"

    @pytest.mark.asyncio
    async def test_get_is_tenant_scoped(self, sqlite_session: AsyncSession, tenants: Any) -> None:
        """Test that a record is not visible under another company."""
        repo = SqlOnboardingRepository(sqlite_session)
        await repo.save(
            OnboardingRecordData(employee_id=tenants.employee_a, company_id=tenants.company_a)
        )

        assert await repo.get(tenants.employee_a, tenants.company_b) is None
