"""Policy ingestion pipeline: chunk validation and text extraction."""

import logging
import time
from uuid import UUID

from nexusone.app.clients.extraction import TextExtractor
from nexusone.app.db.repositories import PolicyFileRepository
from nexusone.app.errors import UpstreamUnavailableError
from nexusone.app.models.policies import ExtractionResult, ValidationInfo, ValidationResult
from nexusone.app.storage.blobs import BlobStore, reassemble
from nexusone.app.utils.logging import StructuredPipelineLogger
from nexusone.app.utils.metrics import PrometheusPipelineMetrics

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/pdf"
DEFAULT_FILENAME = "unknown.pdf"

# Raw-bytes fallback used when the extraction service fails
FALLBACK_TEXT_CHARS = 5000
PDF_MAGIC = "%PDF"


class PolicyIngestionPipeline:
    """Validates stored policy files and turns them into prompt-ready text.

    Both operations are tenant-agnostic: callers resolve the file through a
    tenant-scoped query before handing its ID to the pipeline.
    """

    def __init__(
        self,
        files: PolicyFileRepository,
        blobs: BlobStore,
        extractor: TextExtractor,
        structured_logger: StructuredPipelineLogger | None = None,
        metrics: PrometheusPipelineMetrics | None = None,
    ) -> None:
        self._files = files
        self._blobs = blobs
        self._extractor = extractor
        self._log = structured_logger or StructuredPipelineLogger()
        self._metrics = metrics or PrometheusPipelineMetrics()

    async def validate(self, file_id: UUID) -> ValidationResult:
        """Check that every chunk of a stored file is present.

        A file is valid when it has at least one chunk and exactly
        ceil(size_bytes / chunk_size) of them. A missing file record is
        reported as invalid with no info.

        Raises:
            BlobReadError: If the blob store cannot count chunks
        """
        info = await self._files.lookup(file_id)
        if info is None:
            logger.warning(f"No file record found for {file_id}")
            self._log.log_validation(file_id, valid=False)
            self._metrics.inc_validation(False)
            return ValidationResult(valid=False)

        chunks = await self._blobs.count_chunks(file_id)
        expected = info.expected_chunks
        valid = chunks > 0 and chunks == expected

        self._log.log_validation(file_id, valid=valid, chunks=chunks, expected_chunks=expected)
        self._metrics.inc_validation(valid)

        return ValidationResult(
            valid=valid,
            info=ValidationInfo(
                filename=info.filename,
                size_bytes=info.size_bytes,
                chunks=chunks,
                expected_chunks=expected,
                has_chunks=chunks > 0,
            ),
        )

    async def read_bytes(self, file_id: UUID) -> bytes:
        """Stream and reassemble a file's chunks in sequence order.

        Raises:
            BlobReadError: If the stream fails part way
        """
        return reassemble([chunk async for chunk in self._blobs.open_stream(file_id)])

    async def extract_text(self, file_id: UUID, query: str) -> ExtractionResult:
        """Extract plain text from a stored file.

        Does not re-validate; callers gate on validate() first. Expected
        failures (empty file, extraction service down) are reported through
        the result outcome rather than raised.

        Args:
            file_id: Stored file ID
            query: User query forwarded to the extraction service

        Returns:
            Tagged extraction result

        Raises:
            BlobReadError: If the blob store fails mid-stream
        """
        info = await self._files.lookup(file_id)
        filename = info.filename if info is not None else DEFAULT_FILENAME
        content_type = info.content_type if info is not None else DEFAULT_CONTENT_TYPE

        start = time.perf_counter()
        data = await self.read_bytes(file_id)

        if not data:
            result = ExtractionResult.empty(filename)
            self._record(file_id, result, start)
            return result

        error_reason = None
        try:
            text = await self._extractor.extract(data, content_type, filename, query)
            result = ExtractionResult.ok(text, filename)
        except UpstreamUnavailableError as e:
            error_reason = e.message
            result = self._fallback(data, filename)

        self._record(file_id, result, start, error_reason)
        return result

    def _fallback(self, data: bytes, filename: str) -> ExtractionResult:
        """Treat the raw bytes as text when they do not look like a PDF."""
        decoded = data.decode("utf-8", errors="replace")

        if decoded.strip() and not decoded.startswith(PDF_MAGIC):
            logger.info(f"Using fallback text extraction for {filename} ({len(decoded)} chars)")
            return ExtractionResult.ok(decoded[:FALLBACK_TEXT_CHARS], filename, fallback=True)

        return ExtractionResult.unavailable(filename)

    def _record(
        self,
        file_id: UUID,
        result: ExtractionResult,
        start: float,
        error_reason: str | None = None,
    ) -> None:
        outcome = result.outcome.value
        if result.fallback:
            outcome = "fallback"

        latency_ms = (time.perf_counter() - start) * 1000
        self._log.log_extraction(file_id, result.filename, outcome, latency_ms, error_reason)
        self._metrics.inc_extraction(outcome)
