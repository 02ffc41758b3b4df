"""Onboarding progress endpoints - GET/POST /onboarding/progress."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from nexusone.app.api.deps import ContextDep, get_onboarding_repository
from nexusone.app.db.repositories import OnboardingRepository
from nexusone.app.errors import InvalidRequestError
from nexusone.app.models.onboarding import ProgressResponse, ProgressUpdateRequest
from nexusone.app.onboarding.progress import (
    ACTION_MESSAGES,
    apply_action,
    compute_status,
    validate_action,
)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])
logger = logging.getLogger(__name__)

RepoDep = Annotated[OnboardingRepository, Depends(get_onboarding_repository)]


@router.get("/progress", response_model=ProgressResponse)
async def get_progress(ctx: ContextDep, repo: RepoDep) -> ProgressResponse:
    """Return the employee's onboarding record and its aggregate."""
    record = await repo.get(ctx.employee_id, ctx.company_id)

    if record is None:
        return ProgressResponse(onboarding=None, message="No onboarding record found")

    return ProgressResponse(onboarding=record, onboarding_status=compute_status(record))


@router.post("/progress", response_model=ProgressResponse)
async def update_progress(
    request: ProgressUpdateRequest,
    ctx: ContextDep,
    repo: RepoDep,
) -> ProgressResponse:
    """Complete a task or acknowledge a policy.

    Raises:
        HTTPException: 400 for an invalid action, 404 if there is no record
    """
    try:
        validate_action(request.action, request.task_id, request.policy_name)
    except InvalidRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e

    record = await repo.get(ctx.employee_id, ctx.company_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Onboarding record not found",
        )

    updated = apply_action(record, request.action, request.task_id, request.policy_name)

    if updated:
        await repo.save(record)
        logger.info(
            f"[POST /onboarding/progress] employee_id={ctx.employee_id} "
            f"action={request.action}, status={record.status}"
        )

    return ProgressResponse(
        message=ACTION_MESSAGES[request.action],
        onboarding_status=compute_status(record),
    )
