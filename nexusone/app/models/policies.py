"""Policy file domain models."""

import math
from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field

# Chunk size assumed when a file record does not carry one
DEFAULT_CHUNK_SIZE_BYTES = 261_120

EMPTY_FILE_SENTINEL = "[File appears to be empty]"
CORRUPTED_FILE_SENTINEL = (
    "[File data is missing or corrupted. "
    "Please re-upload this document through the admin panel.]"
)
UNEXTRACTABLE_FILE_SENTINEL = (
    "[File exists but content could not be extracted. Please re-upload this document.]"
)


class PolicyFileInfo(BaseModel):
    """Policy file metadata as stored in the document store."""

    file_id: UUID
    company_id: UUID
    filename: str
    content_type: str
    size_bytes: int = Field(..., ge=0)
    chunk_size_bytes: int | None = None
    uploaded_at: datetime

    @property
    def effective_chunk_size(self) -> int:
        return self.chunk_size_bytes or DEFAULT_CHUNK_SIZE_BYTES

    @property
    def expected_chunks(self) -> int:
        """Number of chunks a fully uploaded file of this size must have."""
        return math.ceil(self.size_bytes / self.effective_chunk_size)


class ValidationInfo(BaseModel):
    """Diagnostics reported alongside a validation verdict."""

    filename: str
    size_bytes: int
    chunks: int
    expected_chunks: int
    has_chunks: bool


class ValidationResult(BaseModel):
    """Chunk-completeness verdict for a stored file.

    A missing file record and a corrupted file both yield valid=False;
    only the former has info=None.
    """

    valid: bool
    info: ValidationInfo | None = None


class ExtractionOutcome(str, Enum):
    """How a text extraction attempt ended."""

    text = "text"
    empty = "empty"
    unavailable = "unavailable"
    corrupted = "corrupted"


class ExtractionResult(BaseModel):
    """Tagged result of extracting text from a stored policy file."""

    outcome: ExtractionOutcome
    text: str = ""
    filename: str = "unknown"
    fallback: bool = False

    @classmethod
    def ok(cls, text: str, filename: str, *, fallback: bool = False) -> "ExtractionResult":
        return cls(outcome=ExtractionOutcome.text, text=text, filename=filename, fallback=fallback)

    @classmethod
    def empty(cls, filename: str) -> "ExtractionResult":
        return cls(outcome=ExtractionOutcome.empty, filename=filename)

    @classmethod
    def unavailable(cls, filename: str) -> "ExtractionResult":
        return cls(outcome=ExtractionOutcome.unavailable, filename=filename)

    @classmethod
    def corrupted(cls, filename: str) -> "ExtractionResult":
        return cls(outcome=ExtractionOutcome.corrupted, filename=filename)

    @property
    def is_ok(self) -> bool:
        return self.outcome == ExtractionOutcome.text and bool(self.text.strip())

    def as_text(self) -> str:
        """Render the result as a plain string, using inline sentinels for failures."""
        if self.outcome == ExtractionOutcome.text:
            return self.text
        if self.outcome == ExtractionOutcome.empty:
            return EMPTY_FILE_SENTINEL
        if self.outcome == ExtractionOutcome.corrupted:
            return CORRUPTED_FILE_SENTINEL
        return f"[PDF extraction service unavailable for {self.filename}]"
