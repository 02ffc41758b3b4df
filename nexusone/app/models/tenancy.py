"""Company and employee domain models."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class CompanyInfo(BaseModel):
    """Tenant company profile used for prompt context."""

    company_id: UUID
    name: str
    description: str | None = None
    industry: str | None = None


class EmployeeInfo(BaseModel):
    """Employee identity; company_id is None until the employee joins a company."""

    employee_id: UUID
    company_id: UUID | None = None
    name: str
    email: str
    role: Literal["hr_manager", "employee"] = "employee"
