"""Policy file endpoints - upload, list, download, text, delete."""

import logging
import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel

from nexusone.app.api.deps import ContextDep, SessionDep, get_pipeline, get_policy_library
from nexusone.app.errors import (
    BlobReadError,
    IncompleteFileError,
    InvalidRequestError,
    NotFoundError,
)
from nexusone.app.models.policies import ExtractionOutcome, ExtractionResult
from nexusone.app.policies.ingest import PolicyIngestionPipeline
from nexusone.app.policies.library import PolicyLibrary

router = APIRouter(prefix="/policies", tags=["policies"])
logger = logging.getLogger(__name__)

LibraryDep = Annotated[PolicyLibrary, Depends(get_policy_library)]
PipelineDep = Annotated[PolicyIngestionPipeline, Depends(get_pipeline)]


class UploadPolicyResponse(BaseModel):
    """Response for POST /policies."""

    file_id: str
    filename: str
    url: str


class PolicyFileSummary(BaseModel):
    """Single entry of GET /policies."""

    file_id: str
    filename: str
    content_type: str
    size_bytes: int
    uploaded_at: datetime
    url: str


class PolicyListResponse(BaseModel):
    """Response for GET /policies."""

    policies: list[PolicyFileSummary]


class PolicyTextResponse(BaseModel):
    """Response for GET /policies/{file_id}/text."""

    file_id: str
    valid: bool
    outcome: ExtractionOutcome
    text: str


def _file_url(file_id: uuid.UUID) -> str:
    return f"/policies/{file_id}"


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.post("", response_model=UploadPolicyResponse, status_code=status.HTTP_201_CREATED)
async def upload_policy(
    file: Annotated[UploadFile, File()],
    ctx: ContextDep,
    session: SessionDep,
    library: LibraryDep,
) -> UploadPolicyResponse:
    """Store an uploaded policy document (PDF, DOC, DOCX or TXT).

    Raises:
        HTTPException: 400 on unsupported type, empty file or oversize upload
    """
    filename = file.filename or ""
    content_type = file.content_type or "application/octet-stream"

    logger.info(
        f"[POST /policies] company_id={ctx.company_id}, file={filename} "
        f"({file.size} bytes, {content_type})"
    )

    try:
        if file.size is not None:
            library.check_upload(filename, content_type, file.size)

        # Never buffer more than one byte past the limit; upload() rejects it
        data = await file.read(library.max_upload_bytes + 1)
        info = await library.upload(ctx.company_id, filename, content_type, data)
    except InvalidRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    await session.commit()

    return UploadPolicyResponse(
        file_id=str(info.file_id),
        filename=info.filename,
        url=_file_url(info.file_id),
    )


@router.get("", response_model=PolicyListResponse)
async def list_policies(ctx: ContextDep, library: LibraryDep) -> PolicyListResponse:
    """List the tenant's policy files, newest first."""
    files = await library.list_files(ctx.company_id)

    return PolicyListResponse(
        policies=[
            PolicyFileSummary(
                file_id=str(f.file_id),
                filename=f.filename,
                content_type=f.content_type,
                size_bytes=f.size_bytes,
                uploaded_at=f.uploaded_at,
                url=_file_url(f.file_id),
            )
            for f in files
        ]
    )


@router.get("/{file_id}", response_class=Response)
async def download_policy(
    file_id: uuid.UUID,
    ctx: ContextDep,
    library: LibraryDep,
    pipeline: PipelineDep,
) -> Response:
    """Download a policy file's original bytes.

    Raises:
        HTTPException: 404 outside the tenant, 409 if chunks are missing,
            500 if the blob store fails
    """
    try:
        info, data = await library.download(file_id, ctx.company_id, pipeline)
    except NotFoundError as e:
        raise _not_found(e) from e
    except IncompleteFileError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except BlobReadError as e:
        logger.error(f"[GET /policies/{file_id}] read failed: {e.message}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error retrieving file",
        ) from e

    disposition = "inline" if info.content_type == "text/plain" else "attachment"
    return Response(
        content=data,
        media_type=info.content_type,
        headers={"Content-Disposition": f'{disposition}; filename="{info.filename}"'},
    )


@router.get("/{file_id}/text", response_model=PolicyTextResponse)
async def get_policy_text(
    file_id: uuid.UUID,
    ctx: ContextDep,
    library: LibraryDep,
    pipeline: PipelineDep,
    query: Annotated[str, Query(max_length=500)] = "",
) -> PolicyTextResponse:
    """Validate a policy file and return its extracted text.

    Corrupted files are reported with outcome "corrupted" rather than an error.
    """
    try:
        info = await library.get(file_id, ctx.company_id)
    except NotFoundError as e:
        raise _not_found(e) from e

    valid = False
    try:
        validation = await pipeline.validate(file_id)
        valid = validation.valid
        if valid:
            result = await pipeline.extract_text(file_id, query)
        else:
            result = ExtractionResult.corrupted(info.filename)
    except BlobReadError as e:
        logger.error(f"[GET /policies/{file_id}/text] read failed: {e.message}", exc_info=True)
        result = ExtractionResult.unavailable(info.filename)

    return PolicyTextResponse(
        file_id=str(file_id),
        valid=valid,
        outcome=result.outcome,
        text=result.as_text(),
    )


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_policy(
    file_id: uuid.UUID,
    ctx: ContextDep,
    session: SessionDep,
    library: LibraryDep,
) -> Response:
    """Delete a policy file and all of its chunks."""
    try:
        await library.delete(file_id, ctx.company_id)
    except NotFoundError as e:
        raise _not_found(e) from e

    await session.commit()
    logger.info(f"[DELETE /policies/{file_id}] company_id={ctx.company_id}")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
