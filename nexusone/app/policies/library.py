"""Tenant-scoped policy file management: upload, listing, download, delete."""

import logging
import uuid
from datetime import datetime, timezone

from nexusone.app.db.repositories import PolicyFileRepository
from nexusone.app.errors import IncompleteFileError, InvalidRequestError, NotFoundError
from nexusone.app.models.policies import DEFAULT_CHUNK_SIZE_BYTES, PolicyFileInfo
from nexusone.app.policies.ingest import PolicyIngestionPipeline
from nexusone.app.storage.blobs import BlobStore

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    }
)


class PolicyLibrary:
    """Stores policy files for a tenant and serves them back.

    Every method takes the caller's company_id and only touches files owned
    by that company.
    """

    def __init__(
        self,
        files: PolicyFileRepository,
        blobs: BlobStore,
        chunk_size_bytes: int = DEFAULT_CHUNK_SIZE_BYTES,
        max_upload_bytes: int = 10 * 1024 * 1024,
    ) -> None:
        self._files = files
        self._blobs = blobs
        self._chunk_size = chunk_size_bytes
        self._max_upload_bytes = max_upload_bytes

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    def check_upload(self, filename: str, content_type: str, size_bytes: int) -> None:
        """Reject uploads with a bad name, type or size.

        Raises:
            InvalidRequestError: With a caller-facing reason
        """
        if not filename.strip():
            raise InvalidRequestError("No file provided")
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise InvalidRequestError(
                "Invalid file type. Only PDF, DOC, DOCX and TXT files are allowed."
            )
        if size_bytes == 0:
            raise InvalidRequestError("File is empty")
        if size_bytes > self._max_upload_bytes:
            raise InvalidRequestError(
                f"File too large. Maximum size is {self._max_upload_bytes // (1024 * 1024)}MB."
            )

    async def upload(
        self, company_id: uuid.UUID, filename: str, content_type: str, data: bytes
    ) -> PolicyFileInfo:
        """Validate and store a new policy file.

        Raises:
            InvalidRequestError: If the upload is rejected
        """
        self.check_upload(filename, content_type, len(data))

        info = PolicyFileInfo(
            file_id=uuid.uuid4(),
            company_id=company_id,
            filename=filename,
            content_type=content_type,
            size_bytes=len(data),
            chunk_size_bytes=self._chunk_size,
            uploaded_at=datetime.now(timezone.utc),
        )

        await self._files.create(info)
        chunks = await self._blobs.put(info.file_id, data, self._chunk_size)

        logger.info(
            f"Stored policy file {info.filename} ({info.size_bytes} bytes, {chunks} chunks) "
            f"for company {company_id}"
        )
        return info

    async def list_files(self, company_id: uuid.UUID) -> list[PolicyFileInfo]:
        """List a tenant's files, newest first."""
        files = await self._files.list_for_company(company_id)
        return list(reversed(files))

    async def get(self, file_id: uuid.UUID, company_id: uuid.UUID) -> PolicyFileInfo:
        """Get one of the tenant's files.

        Raises:
            NotFoundError: If the file does not exist for this tenant
        """
        info = await self._files.get_for_company(file_id, company_id)
        if info is None:
            raise NotFoundError("File not found")
        return info

    async def download(
        self, file_id: uuid.UUID, company_id: uuid.UUID, pipeline: PolicyIngestionPipeline
    ) -> tuple[PolicyFileInfo, bytes]:
        """Return a tenant's file with its reassembled bytes.

        Raises:
            NotFoundError: If the file does not exist for this tenant
            IncompleteFileError: If chunks are missing
            BlobReadError: If the blob store fails mid-stream
        """
        info = await self.get(file_id, company_id)

        validation = await pipeline.validate(file_id)
        if not validation.valid:
            raise IncompleteFileError(
                "File data is missing or corrupted. Please re-upload this document."
            )

        return info, await pipeline.read_bytes(file_id)

    async def delete(self, file_id: uuid.UUID, company_id: uuid.UUID) -> None:
        """Delete a tenant's file together with all of its chunks.

        Raises:
            NotFoundError: If the file does not exist for this tenant
        """
        await self.get(file_id, company_id)

        await self._blobs.delete(file_id)
        await self._files.delete_for_company(file_id, company_id)

        logger.info(f"Deleted policy file {file_id} for company {company_id}")
