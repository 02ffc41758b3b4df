"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from nexusone.app.models.onboarding import OnboardingRecordData
from nexusone.app.models.policies import PolicyFileInfo
from nexusone.app.models.tenancy import CompanyInfo, EmployeeInfo


class CompanyRepository(Protocol):
    """Repository for company and employee lookups."""

    async def get_employee(self, employee_id: UUID) -> EmployeeInfo | None:
        """Get employee by ID.

        Args:
            employee_id: Employee ID

        Returns:
            Employee or None if not found
        """
        ...

    async def get_company(self, company_id: UUID) -> CompanyInfo | None:
        """Get company by ID.

        Args:
            company_id: Company ID

        Returns:
            Company or None if not found
        """
        ...


class PolicyFileRepository(Protocol):
    """Repository for policy file metadata."""

    async def create(self, info: PolicyFileInfo) -> PolicyFileInfo:
        """Persist metadata for a newly uploaded file."""
        ...

    async def list_for_company(self, company_id: UUID) -> list[PolicyFileInfo]:
        """List a tenant's files, oldest upload first.

        Args:
            company_id: Tenant to scope the query to

        Returns:
            Files owned by the tenant
        """
        ...

    async def get_for_company(self, file_id: UUID, company_id: UUID) -> PolicyFileInfo | None:
        """Get a file only if it belongs to the given tenant."""
        ...

    async def lookup(self, file_id: UUID) -> PolicyFileInfo | None:
        """Get a file by ID without tenant scoping.

        Only for callers that have already resolved the file through a
        tenant-scoped query.
        """
        ...

    async def delete_for_company(self, file_id: UUID, company_id: UUID) -> bool:
        """Delete a tenant's file metadata.

        Returns:
            True if a row was deleted
        """
        ...


class OnboardingRepository(Protocol):
    """Repository for onboarding records."""

    async def get(self, employee_id: UUID, company_id: UUID) -> OnboardingRecordData | None:
        """Get an employee's onboarding record within a tenant."""
        ...

    async def save(self, record: OnboardingRecordData) -> None:
        """Insert or update an onboarding record."""
        ...


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...
