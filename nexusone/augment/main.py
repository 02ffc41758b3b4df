"""Augmentation service - text extraction and LLM completion for the main API."""

import base64
import binascii
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field

from nexusone.app.config import get_settings
from nexusone.app.errors import UpstreamUnavailableError
from nexusone.app.policies.keywords import PolicyKeywords, get_keywords
from nexusone.app.policies.sections import select_relevant_section
from nexusone.app.utils.logging import configure_logging
from nexusone.augment.extractors import extract_policy_text
from nexusone.augment.llm import LLMClient, get_llm_client
from nexusone.augment.prompts import build_chat_prompt

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="NexusOne Augmentation Service", version="0.1.0")


class ExtractRequest(BaseModel):
    """Request body for POST /api/extract-policy-text."""

    model_config = ConfigDict(populate_by_name=True)

    buffer: str | None = None
    content_type: str = Field("application/pdf", alias="contentType")
    filename: str | None = None
    query: str | None = None


class ExtractResponse(BaseModel):
    """Response for POST /api/extract-policy-text."""

    success: bool = True
    text: str


class ChatProcessRequest(BaseModel):
    """Request body for POST /api/chat-process."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    policy_context: str = Field("", alias="policyContext")
    company_context: str = Field("", alias="companyContext")
    session_id: str | None = Field(None, alias="sessionId")
    user_id: str | None = Field(None, alias="userId")
    user_name: str = Field("there", alias="userName")
    company_name: str = Field("your company", alias="companyName")


class ChatProcessResponse(BaseModel):
    """Response for POST /api/chat-process."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    response: str
    session_id: str = Field(..., alias="sessionId")
    metadata: dict[str, Any]


def get_llm() -> LLMClient:
    return get_llm_client()


@lru_cache
def get_section_keywords() -> PolicyKeywords:
    """Keyword tables, loaded once per process."""
    return get_keywords()


@app.post("/api/extract-policy-text", response_model=ExtractResponse)
async def extract_text(
    request: ExtractRequest,
    keywords: Annotated[PolicyKeywords, Depends(get_section_keywords)],
) -> ExtractResponse:
    """Extract plain text from a base64-encoded document.

    When a query is given, the text is narrowed to its relevant sections.
    Parsing and narrowing run in the threadpool to keep the event loop free.

    Raises:
        HTTPException: 400 if the buffer is missing or not valid base64
    """
    if not request.buffer:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No buffer provided")

    try:
        data = base64.b64decode(request.buffer, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Buffer is not valid base64",
        ) from e

    logger.info(
        f"[POST /api/extract-policy-text] file={request.filename}, "
        f"{len(data)} bytes, type={request.content_type}"
    )

    text = await run_in_threadpool(extract_policy_text, data, request.content_type)

    if request.query:
        text = await run_in_threadpool(select_relevant_section, text, request.query, keywords)

    return ExtractResponse(text=text)


@app.post("/api/chat-process", response_model=ChatProcessResponse)
async def chat_process(
    request: ChatProcessRequest,
    llm: Annotated[LLMClient, Depends(get_llm)],
) -> ChatProcessResponse:
    """Answer an onboarding question with the assembled company context.

    Raises:
        HTTPException: 400 if the message is missing, 500 if the model fails
    """
    if not request.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    logger.info(
        f"[POST /api/chat-process] user={request.user_id}, company={request.company_name}, "
        f"policy_context={len(request.policy_context)} chars"
    )

    prompt = build_chat_prompt(
        message=request.message,
        company_name=request.company_name,
        user_name=request.user_name,
        company_context=request.company_context,
        policy_context=request.policy_context,
    )

    try:
        answer = await llm.generate(prompt)
    except UpstreamUnavailableError as e:
        logger.error(f"[POST /api/chat-process] failed: {e.message}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Chat processing failed",
        ) from e

    now = datetime.now(timezone.utc)
    return ChatProcessResponse(
        response=answer,
        session_id=request.session_id or f"session_{int(now.timestamp() * 1000)}",
        metadata={
            "hasPolicy": bool(request.policy_context),
            "policyLength": len(request.policy_context),
            "companyName": request.company_name,
            "source": llm.source,
            "processedAt": now.isoformat(),
        },
    )


@app.get("/api/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {
        "status": "OK",
        "message": "Augmentation service is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
