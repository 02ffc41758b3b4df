"""Onboarding chat endpoint - POST /onboarding/chat."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from nexusone.app.api.deps import ContextDep, enforce_chat_rate_limit, get_chat_service
from nexusone.app.chat.service import ChatService
from nexusone.app.errors import InvalidRequestError, NotFoundError, UpstreamUnavailableError
from nexusone.app.models.chat import ChatRequest, ChatResponse
from nexusone.app.utils.metrics import PrometheusPipelineMetrics

router = APIRouter(prefix="/onboarding", tags=["onboarding"])
logger = logging.getLogger(__name__)
metrics = PrometheusPipelineMetrics()


@router.post(
    "/chat",
    response_model=ChatResponse,
    dependencies=[Depends(enforce_chat_rate_limit)],
)
async def chat(
    request: ChatRequest,
    ctx: ContextDep,
    service: Annotated[ChatService, Depends(get_chat_service)],
) -> ChatResponse:
    """Answer an onboarding question, grounded in the company's policy documents.

    Raises:
        HTTPException: 400 for a blank message, 404 if the employee or company
            cannot be resolved, 429 when rate limited, 500 on processing failure
    """
    logger.info(
        f"[POST /onboarding/chat] company_id={ctx.company_id}, "
        f"employee_id={ctx.employee_id}, message={request.message[:100]!r}"
    )

    try:
        result = await service.handle_message(
            ctx.company_id,
            ctx.employee_id,
            request.message,
            request.session_id,
        )
    except InvalidRequestError as e:
        metrics.inc_chat("invalid")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except NotFoundError as e:
        metrics.inc_chat("not_found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except UpstreamUnavailableError as e:
        metrics.inc_chat("error")
        logger.error(f"[POST /onboarding/chat] completion failed: {e.message}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process message",
        ) from e

    metrics.inc_chat("success")
    logger.info(
        f"[POST /onboarding/chat] session_id={result.session_id} answered, "
        f"{len(result.context.included_files)} policy files in context"
    )

    return ChatResponse(
        response=result.response,
        session_id=result.session_id,
        onboarding_status=result.onboarding_status,
    )
