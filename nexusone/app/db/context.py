"""Request context for tenancy enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Request context containing tenant and employee identity.

    Passed explicitly to every collaborator that reads or writes tenant data.
    """

    company_id: UUID
    employee_id: UUID
