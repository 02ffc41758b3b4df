"""In-memory implementations of repository interfaces."""

import uuid
from collections.abc import AsyncIterator
from datetime import datetime, timedelta

from nexusone.app.db.repositories import RetryAfter
from nexusone.app.models.onboarding import OnboardingRecordData
from nexusone.app.models.policies import PolicyFileInfo
from nexusone.app.models.tenancy import CompanyInfo, EmployeeInfo
from nexusone.app.storage.blobs import split_into_chunks


class InMemoryCompanyRepository:
    """In-memory implementation of CompanyRepository."""

    def __init__(self) -> None:
        self._companies: dict[uuid.UUID, CompanyInfo] = {}
        self._employees: dict[uuid.UUID, EmployeeInfo] = {}

    def add_company(self, company: CompanyInfo) -> None:
        self._companies[company.company_id] = company

    def add_employee(self, employee: EmployeeInfo) -> None:
        self._employees[employee.employee_id] = employee

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Get employee by ID."""
        return self._employees.get(employee_id)

    async def get_company(self, company_id: uuid.UUID) -> CompanyInfo | None:
        """Get company by ID."""
        return self._companies.get(company_id)


class InMemoryPolicyFileRepository:
    """In-memory implementation of PolicyFileRepository."""

    def __init__(self) -> None:
        self._files: dict[uuid.UUID, PolicyFileInfo] = {}

    async def create(self, info: PolicyFileInfo) -> PolicyFileInfo:
        """Persist metadata for a newly uploaded file."""
        self._files[info.file_id] = info
        return info

    async def list_for_company(self, company_id: uuid.UUID) -> list[PolicyFileInfo]:
        """List a tenant's files, oldest upload first."""
        results = [f for f in self._files.values() if f.company_id == company_id]
        results.sort(key=lambda f: (f.uploaded_at, f.filename))
        return results

    async def get_for_company(
        self, file_id: uuid.UUID, company_id: uuid.UUID
    ) -> PolicyFileInfo | None:
        """Get a file only if it belongs to the given tenant."""
        info = self._files.get(file_id)

        # Enforce tenancy
        if info is None or info.company_id != company_id:
            return None

        return info

    async def lookup(self, file_id: uuid.UUID) -> PolicyFileInfo | None:
        """Get a file by ID without tenant scoping."""
        return self._files.get(file_id)

    async def delete_for_company(self, file_id: uuid.UUID, company_id: uuid.UUID) -> bool:
        """Delete a tenant's file metadata."""
        if await self.get_for_company(file_id, company_id) is None:
            return False

        del self._files[file_id]
        return True


class InMemoryBlobStore:
    """In-memory implementation of BlobStore."""

    def __init__(self) -> None:
        self._chunks: dict[uuid.UUID, dict[int, bytes]] = {}

    def put_chunk(self, file_id: uuid.UUID, sequence_index: int, payload: bytes) -> None:
        """Store a single chunk (used to simulate partial uploads)."""
        self._chunks.setdefault(file_id, {})[sequence_index] = payload

    async def put(self, file_id: uuid.UUID, data: bytes, chunk_size: int) -> int:
        """Store a payload as chunks."""
        chunks = split_into_chunks(data, chunk_size)
        self._chunks[file_id] = dict(enumerate(chunks))
        return len(chunks)

    async def count_chunks(self, file_id: uuid.UUID) -> int:
        """Count stored chunks for a file."""
        return len(self._chunks.get(file_id, {}))

    async def open_stream(self, file_id: uuid.UUID) -> AsyncIterator[bytes]:
        """Yield chunk payloads in sequence_index order."""
        stored = self._chunks.get(file_id, {})
        for index in sorted(stored):
            yield stored[index]

    async def delete(self, file_id: uuid.UUID) -> None:
        """Remove every chunk of a file."""
        self._chunks.pop(file_id, None)


class InMemoryOnboardingRepository:
    """In-memory implementation of OnboardingRepository."""

    def __init__(self) -> None:
        self._records: dict[tuple[uuid.UUID, uuid.UUID], OnboardingRecordData] = {}

    async def get(
        self, employee_id: uuid.UUID, company_id: uuid.UUID
    ) -> OnboardingRecordData | None:
        """Get an employee's onboarding record within a tenant."""
        record = self._records.get((employee_id, company_id))
        return record.model_copy(deep=True) if record is not None else None

    async def save(self, record: OnboardingRecordData) -> None:
        """Insert or update an onboarding record."""
        self._records[(record.employee_id, record.company_id)] = record.model_copy(deep=True)


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        if key not in self._windows:
            self._windows[key] = (now, 1)
            return None

        window_start, count = self._windows[key]
        window_end = window_start + timedelta(seconds=self._window_seconds)

        if now >= window_end:
            self._windows[key] = (now, 1)
            return None

        if count >= self._max_requests:
            seconds_remaining = int((window_end - now).total_seconds())
            return RetryAfter(seconds=max(1, seconds_remaining))

        self._windows[key] = (window_start, count + 1)
        return None
