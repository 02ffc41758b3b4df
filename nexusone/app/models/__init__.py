"""Models package - re-exports for convenience."""

from nexusone.app.models.chat import (
    ChatContext,
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
)
from nexusone.app.models.onboarding import (
    OnboardingDocument,
    OnboardingRecordData,
    OnboardingStatus,
    OnboardingTask,
    PolicyAcknowledgement,
    ProgressResponse,
    ProgressStatus,
    ProgressUpdateRequest,
)
from nexusone.app.models.policies import (
    CORRUPTED_FILE_SENTINEL,
    DEFAULT_CHUNK_SIZE_BYTES,
    EMPTY_FILE_SENTINEL,
    UNEXTRACTABLE_FILE_SENTINEL,
    ExtractionOutcome,
    ExtractionResult,
    PolicyFileInfo,
    ValidationInfo,
    ValidationResult,
)
from nexusone.app.models.tenancy import CompanyInfo, EmployeeInfo

__all__ = [
    # Chat
    "ChatRequest",
    "ChatResponse",
    "ChatContext",
    "CompletionRequest",
    "CompletionResponse",
    # Onboarding
    "OnboardingRecordData",
    "OnboardingTask",
    "PolicyAcknowledgement",
    "OnboardingDocument",
    "OnboardingStatus",
    "ProgressStatus",
    "ProgressUpdateRequest",
    "ProgressResponse",
    # Policies
    "DEFAULT_CHUNK_SIZE_BYTES",
    "EMPTY_FILE_SENTINEL",
    "CORRUPTED_FILE_SENTINEL",
    "UNEXTRACTABLE_FILE_SENTINEL",
    "PolicyFileInfo",
    "ValidationInfo",
    "ValidationResult",
    "ExtractionOutcome",
    "ExtractionResult",
    # Tenancy
    "CompanyInfo",
    "EmployeeInfo",
]
