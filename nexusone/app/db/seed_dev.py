"""Dev seeding helper for stub authentication."""

import asyncio
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from nexusone.app.api.auth import DEV_COMPANY_ID, DEV_EMPLOYEE_ID
from nexusone.app.db.engine import get_async_engine
from nexusone.app.db.models import Company, Employee
from nexusone.app.db.sql_repositories import SqlOnboardingRepository, SqlPolicyFileRepository
from nexusone.app.models.onboarding import (
    OnboardingRecordData,
    OnboardingTask,
    PolicyAcknowledgement,
)
from nexusone.app.models.policies import DEFAULT_CHUNK_SIZE_BYTES, PolicyFileInfo
from nexusone.app.storage.blobs import SqlBlobStore

SAMPLE_HANDBOOK = b"""EMPLOYEE HANDBOOK

1. Working Hours
Core hours are 10:00 to 16:00. Remote work is allowed up to three days a week.

2. Benefits
Health, dental and vision insurance start on your first day.
Employees accrue 20 days of paid time off (PTO) per year.

3. Leave
Sick leave is unlimited with manager approval.
Parental leave: 16 weeks of paid maternity and paternity leave.
"""


async def seed_dev_company_and_employee(session: AsyncSession) -> bool:
    """Seed the dev company, employee, onboarding record and a sample handbook.

    Idempotent; returns False if the dev company already exists.
    """
    if await session.get(Company, DEV_COMPANY_ID) is not None:
        return False

    session.add(
        Company(
            company_id=DEV_COMPANY_ID,
            name="Dev Company",
            description="Sample tenant for local development",
            industry="Software",
        )
    )
    session.add(
        Employee(
            employee_id=DEV_EMPLOYEE_ID,
            company_id=DEV_COMPANY_ID,
            name="Dev Employee",
            email="dev@example.com",
            role="employee",
        )
    )
    await session.flush()

    handbook = PolicyFileInfo(
        file_id=uuid.uuid4(),
        company_id=DEV_COMPANY_ID,
        filename="employee-handbook.txt",
        content_type="text/plain",
        size_bytes=len(SAMPLE_HANDBOOK),
        chunk_size_bytes=DEFAULT_CHUNK_SIZE_BYTES,
        uploaded_at=datetime.now(timezone.utc),
    )
    await SqlPolicyFileRepository(session).create(handbook)
    await SqlBlobStore(session).put(handbook.file_id, SAMPLE_HANDBOOK, DEFAULT_CHUNK_SIZE_BYTES)

    # save() commits the whole unit of work
    await SqlOnboardingRepository(session).save(
        OnboardingRecordData(
            employee_id=DEV_EMPLOYEE_ID,
            company_id=DEV_COMPANY_ID,
            status="in_progress",
            started_at=datetime.now(timezone.utc),
            tasks=[
                OnboardingTask(task_id="laptop", title="Set up your laptop", required=True),
                OnboardingTask(task_id="intro", title="Meet your team"),
            ],
            policies=[
                PolicyAcknowledgement(policy_name="Employee Handbook", required=True),
            ],
        )
    )
    return True


async def main() -> None:
    async with AsyncSession(get_async_engine(), expire_on_commit=False) as session:
        created = await seed_dev_company_and_employee(session)

    if created:
        print(f"Seeded dev company {DEV_COMPANY_ID} and employee {DEV_EMPLOYEE_ID}")
    else:
        print("Dev company already exists")


if __name__ == "__main__":
    asyncio.run(main())
