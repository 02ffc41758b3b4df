"""Onboarding record domain models."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class OnboardingTask(BaseModel):
    """Single onboarding task assigned to an employee."""

    task_id: str
    title: str
    status: Literal["pending", "in-progress", "completed"] = "pending"
    required: bool = False
    completed_at: datetime | None = None


class PolicyAcknowledgement(BaseModel):
    """Policy the employee must read and acknowledge."""

    policy_name: str
    policy_url: str | None = None
    acknowledged: bool = False
    required: bool = False
    acknowledged_at: datetime | None = None


class OnboardingDocument(BaseModel):
    """Document the employee submitted for HR review."""

    name: str
    url: str | None = None
    status: Literal["pending_review", "approved", "rejected"] = "pending_review"
    uploaded_at: datetime | None = None


class OnboardingRecordData(BaseModel):
    """Employee onboarding tracker as seen by services."""

    employee_id: UUID
    company_id: UUID
    status: Literal["not_started", "in_progress", "completed"] = "not_started"
    started_at: datetime | None = None
    completed_at: datetime | None = None
    tasks: list[OnboardingTask] = Field(default_factory=list)
    policies: list[PolicyAcknowledgement] = Field(default_factory=list)
    documents: list[OnboardingDocument] = Field(default_factory=list)


class OnboardingStatus(BaseModel):
    """Read-only aggregate over an onboarding record, recomputed on every read."""

    model_config = ConfigDict(populate_by_name=True)

    total_tasks: int = Field(0, alias="totalTasks")
    completed_tasks: int = Field(0, alias="completedTasks")
    total_policies: int = Field(0, alias="totalPolicies")
    acknowledged_policies: int = Field(0, alias="acknowledgedPolicies")


class ProgressStatus(OnboardingStatus):
    """Onboarding aggregate plus the completion flag shown on progress endpoints."""

    is_complete: bool = Field(False, alias="isComplete")


class ProgressUpdateRequest(BaseModel):
    """Request body for POST /onboarding/progress."""

    model_config = ConfigDict(populate_by_name=True)

    action: str = Field(..., max_length=50)
    task_id: str | None = Field(None, alias="taskId")
    policy_name: str | None = Field(None, alias="policyName")


class ProgressResponse(BaseModel):
    """Response for the onboarding progress endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str | None = None
    onboarding: OnboardingRecordData | None = None
    onboarding_status: ProgressStatus | None = Field(None, alias="onboardingStatus")
