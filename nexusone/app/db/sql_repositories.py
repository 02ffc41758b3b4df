"""SQL implementations of repository interfaces."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from nexusone.app.db.models import Company, Employee, OnboardingRecord, PolicyFile
from nexusone.app.models.onboarding import OnboardingRecordData
from nexusone.app.models.policies import PolicyFileInfo
from nexusone.app.models.tenancy import CompanyInfo, EmployeeInfo


def _file_info(row: PolicyFile) -> PolicyFileInfo:
    return PolicyFileInfo(
        file_id=row.file_id,
        company_id=row.company_id,
        filename=row.filename,
        content_type=row.content_type,
        size_bytes=row.size_bytes,
        chunk_size_bytes=row.chunk_size_bytes,
        uploaded_at=row.uploaded_at,
    )


class SqlCompanyRepository:
    """SQL implementation of CompanyRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Get employee by ID."""
        row = await self._session.get(Employee, employee_id)
        if row is None:
            return None

        return EmployeeInfo(
            employee_id=row.employee_id,
            company_id=row.company_id,
            name=row.name,
            email=row.email,
            role=row.role,
        )

    async def get_company(self, company_id: uuid.UUID) -> CompanyInfo | None:
        """Get company by ID."""
        row = await self._session.get(Company, company_id)
        if row is None:
            return None

        return CompanyInfo(
            company_id=row.company_id,
            name=row.name,
            description=row.description,
            industry=row.industry,
        )


class SqlPolicyFileRepository:
    """SQL implementation of PolicyFileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, info: PolicyFileInfo) -> PolicyFileInfo:
        """Persist metadata for a newly uploaded file."""
        row = PolicyFile(
            file_id=info.file_id,
            company_id=info.company_id,
            filename=info.filename,
            content_type=info.content_type,
            size_bytes=info.size_bytes,
            chunk_size_bytes=info.chunk_size_bytes,
            uploaded_at=info.uploaded_at,
        )
        self._session.add(row)
        await self._session.flush()
        return info

    async def list_for_company(self, company_id: uuid.UUID) -> list[PolicyFileInfo]:
        """List a tenant's files, oldest upload first."""
        result = await self._session.execute(
            select(PolicyFile)
            .where(PolicyFile.company_id == company_id)
            .order_by(PolicyFile.uploaded_at, PolicyFile.filename)
        )
        return [_file_info(row) for row in result.scalars().all()]

    async def get_for_company(
        self, file_id: uuid.UUID, company_id: uuid.UUID
    ) -> PolicyFileInfo | None:
        """Get a file only if it belongs to the given tenant."""
        result = await self._session.execute(
            select(PolicyFile).where(
                PolicyFile.file_id == file_id,
                PolicyFile.company_id == company_id,
            )
        )
        row = result.scalar_one_or_none()
        return _file_info(row) if row is not None else None

    async def lookup(self, file_id: uuid.UUID) -> PolicyFileInfo | None:
        """Get a file by ID without tenant scoping."""
        row = await self._session.get(PolicyFile, file_id)
        return _file_info(row) if row is not None else None

    async def delete_for_company(self, file_id: uuid.UUID, company_id: uuid.UUID) -> bool:
        """Delete a tenant's file metadata."""
        result = await self._session.execute(
            delete(PolicyFile).where(
                PolicyFile.file_id == file_id,
                PolicyFile.company_id == company_id,
            )
        )
        return bool(result.rowcount)


class SqlOnboardingRepository:
    """SQL implementation of OnboardingRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get_row(
        self, employee_id: uuid.UUID, company_id: uuid.UUID
    ) -> OnboardingRecord | None:
        result = await self._session.execute(
            select(OnboardingRecord).where(
                OnboardingRecord.employee_id == employee_id,
                OnboardingRecord.company_id == company_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(
        self, employee_id: uuid.UUID, company_id: uuid.UUID
    ) -> OnboardingRecordData | None:
        """Get an employee's onboarding record within a tenant."""
        row = await self._get_row(employee_id, company_id)
        if row is None:
            return None

        return OnboardingRecordData.model_validate(
            {
                "employee_id": row.employee_id,
                "company_id": row.company_id,
                "status": row.status,
                "started_at": row.started_at,
                "completed_at": row.completed_at,
                "tasks": row.tasks or [],
                "policies": row.policies or [],
                "documents": row.documents or [],
            }
        )

    async def save(self, record: OnboardingRecordData) -> None:
        """Insert or update an onboarding record."""
        data = record.model_dump(mode="json")
        row = await self._get_row(record.employee_id, record.company_id)

        if row is None:
            row = OnboardingRecord(
                record_id=uuid.uuid4(),
                employee_id=record.employee_id,
                company_id=record.company_id,
            )
            self._session.add(row)

        # JSON columns are reassigned wholesale so the change is tracked
        row.status = record.status
        row.started_at = record.started_at
        row.completed_at = record.completed_at
        row.tasks = data["tasks"]
        row.policies = data["policies"]
        row.documents = data["documents"]

        await self._session.commit()
