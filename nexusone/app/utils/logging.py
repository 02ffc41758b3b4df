"""Logging setup and structured logging for the policy pipeline."""

import logging
from typing import Any
from uuid import UUID

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level.upper())


class StructuredPipelineLogger:
    """Structured logger for policy validation and extraction."""

    def log_validation(
        self,
        file_id: UUID,
        valid: bool,
        chunks: int | None = None,
        expected_chunks: int | None = None,
    ) -> None:
        """Log a chunk-completeness verdict."""
        log_data: dict[str, Any] = {
            "file_id": str(file_id),
            "stage": "validate",
            "valid": valid,
        }

        if chunks is not None:
            log_data["chunks"] = chunks
            log_data["expected_chunks"] = expected_chunks

        log_msg = f"Policy validation: {file_id} - {'valid' if valid else 'invalid'}"

        if valid:
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_extraction(
        self,
        file_id: UUID,
        filename: str,
        outcome: str,
        latency_ms: float,
        error_reason: str | None = None,
    ) -> None:
        """Log a text extraction attempt."""
        log_data: dict[str, Any] = {
            "file_id": str(file_id),
            "filename": filename,
            "stage": "extract",
            "outcome": outcome,
            "latency_ms": round(latency_ms, 2),
        }

        if error_reason:
            log_data["error_reason"] = error_reason

        log_msg = f"Policy extraction: {filename} - {outcome}"

        if outcome == "text":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})
