"""Chat request/response models."""

from pydantic import BaseModel, ConfigDict, Field

from nexusone.app.models.onboarding import OnboardingStatus


class ChatRequest(BaseModel):
    """Request body for POST /onboarding/chat."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field("", max_length=4000)
    session_id: str | None = Field(None, alias="sessionId", max_length=200)


class ChatResponse(BaseModel):
    """Response for POST /onboarding/chat."""

    model_config = ConfigDict(populate_by_name=True)

    response: str
    session_id: str = Field(..., alias="sessionId")
    onboarding_status: OnboardingStatus = Field(..., alias="onboardingStatus")


class ChatContext(BaseModel):
    """Per-request prompt context; built right before the completion call, never persisted."""

    message: str
    company_context: str
    policy_context: str = ""
    included_files: list[str] = Field(default_factory=list)


class CompletionRequest(BaseModel):
    """Payload sent to the completion endpoint of the augmentation service."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    policy_context: str = Field("", alias="policyContext")
    company_context: str = Field("", alias="companyContext")
    session_id: str | None = Field(None, alias="sessionId")
    user_id: str = Field(..., alias="userId")
    user_name: str = Field(..., alias="userName")
    company_name: str = Field(..., alias="companyName")


class CompletionResponse(BaseModel):
    """Answer returned by the completion endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    response: str
    session_id: str | None = Field(None, alias="sessionId")
