"""FastAPI dependency providers wiring repositories, clients and services."""

from datetime import datetime
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from nexusone.app.api.auth import get_current_context
from nexusone.app.chat.context import ContextAssembler
from nexusone.app.chat.service import ChatService
from nexusone.app.clients.completion import Completer, CompletionClient
from nexusone.app.clients.extraction import ExtractionClient, TextExtractor
from nexusone.app.config import get_settings
from nexusone.app.db.context import RequestContext
from nexusone.app.db.engine import get_session
from nexusone.app.db.repositories import OnboardingRepository, RateLimiter
from nexusone.app.db.sql_repositories import (
    SqlCompanyRepository,
    SqlOnboardingRepository,
    SqlPolicyFileRepository,
)
from nexusone.app.policies.ingest import PolicyIngestionPipeline
from nexusone.app.policies.keywords import PolicyKeywords, get_keywords
from nexusone.app.policies.library import PolicyLibrary
from nexusone.app.ratelimit import create_rate_limiter, make_rate_limit_key
from nexusone.app.storage.blobs import SqlBlobStore

SessionDep = Annotated[AsyncSession, Depends(get_session)]
ContextDep = Annotated[RequestContext, Depends(get_current_context)]


@lru_cache
def get_policy_keywords() -> PolicyKeywords:
    """Keyword tables, loaded once per process."""
    return get_keywords()


@lru_cache
def get_rate_limiter() -> RateLimiter:
    """Process-wide chat rate limiter."""
    settings = get_settings()
    return create_rate_limiter(settings.redis_url, settings.chat_requests_per_min)


def get_extractor() -> TextExtractor:
    settings = get_settings()
    return ExtractionClient(settings.augment_base_url, settings.upstream_timeout_seconds)


def get_completer() -> Completer:
    settings = get_settings()
    return CompletionClient(settings.augment_base_url, settings.upstream_timeout_seconds)


def get_pipeline(
    session: SessionDep,
    extractor: Annotated[TextExtractor, Depends(get_extractor)],
) -> PolicyIngestionPipeline:
    return PolicyIngestionPipeline(
        files=SqlPolicyFileRepository(session),
        blobs=SqlBlobStore(session),
        extractor=extractor,
    )


def get_policy_library(session: SessionDep) -> PolicyLibrary:
    settings = get_settings()
    return PolicyLibrary(
        files=SqlPolicyFileRepository(session),
        blobs=SqlBlobStore(session),
        chunk_size_bytes=settings.default_chunk_size_bytes,
        max_upload_bytes=settings.max_upload_bytes,
    )


def get_onboarding_repository(session: SessionDep) -> OnboardingRepository:
    return SqlOnboardingRepository(session)


def get_chat_service(
    session: SessionDep,
    pipeline: Annotated[PolicyIngestionPipeline, Depends(get_pipeline)],
    completer: Annotated[Completer, Depends(get_completer)],
    keywords: Annotated[PolicyKeywords, Depends(get_policy_keywords)],
) -> ChatService:
    settings = get_settings()
    assembler = ContextAssembler(
        files=SqlPolicyFileRepository(session),
        pipeline=pipeline,
        keywords=keywords,
        max_files=settings.policy_max_files,
        excerpt_max_chars=settings.policy_excerpt_max_chars,
        context_max_chars=settings.policy_context_max_chars,
    )
    return ChatService(
        companies=SqlCompanyRepository(session),
        onboarding=SqlOnboardingRepository(session),
        assembler=assembler,
        completer=completer,
        keywords=keywords,
    )


def enforce_chat_rate_limit(
    ctx: ContextDep,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Reject the request with 429 once the employee's chat quota is used up."""
    retry_after = limiter.check_quota(make_rate_limit_key(ctx, "chat"), datetime.now())
    if retry_after is not None:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many chat requests, please try again later",
            headers={"Retry-After": str(retry_after.seconds)},
        )
