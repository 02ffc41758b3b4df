"""Onboarding progress: aggregate computation and task/policy actions."""

import logging
from datetime import datetime, timezone

from nexusone.app.errors import InvalidRequestError
from nexusone.app.models.onboarding import OnboardingRecordData, ProgressStatus

logger = logging.getLogger(__name__)

COMPLETE_TASK = "complete_task"
ACKNOWLEDGE_POLICY = "acknowledge_policy"

ACTION_MESSAGES = {
    COMPLETE_TASK: "Task completed!",
    ACKNOWLEDGE_POLICY: "Policy acknowledged!",
}


def compute_status(record: OnboardingRecordData | None) -> ProgressStatus:
    """Aggregate task and policy counts for a record.

    A missing record yields the all-zero aggregate.
    """
    if record is None:
        return ProgressStatus()

    return ProgressStatus(
        total_tasks=len(record.tasks),
        completed_tasks=sum(1 for t in record.tasks if t.status == "completed"),
        total_policies=len(record.policies),
        acknowledged_policies=sum(1 for p in record.policies if p.acknowledged),
        is_complete=record.status == "completed",
    )


def is_fully_onboarded(record: OnboardingRecordData) -> bool:
    """True when every required task is done and every required policy acknowledged."""
    tasks_done = all(t.status == "completed" for t in record.tasks if t.required)
    policies_done = all(p.acknowledged for p in record.policies if p.required)
    return tasks_done and policies_done


def validate_action(action: str, task_id: str | None, policy_name: str | None) -> None:
    """Raise InvalidRequestError unless the action and its parameter are present."""
    if (
        action not in ACTION_MESSAGES
        or (action == COMPLETE_TASK and not task_id)
        or (action == ACKNOWLEDGE_POLICY and not policy_name)
    ):
        raise InvalidRequestError("Invalid action or missing required parameters")


def apply_action(
    record: OnboardingRecordData,
    action: str,
    task_id: str | None = None,
    policy_name: str | None = None,
    now: datetime | None = None,
) -> bool:
    """Apply a progress action to a record in place.

    Args:
        record: Onboarding record to mutate
        action: "complete_task" or "acknowledge_policy"
        task_id: Task to complete (complete_task)
        policy_name: Policy to acknowledge (acknowledge_policy)
        now: Timestamp to stamp on the change (for testing)

    Returns:
        True if a task or policy matched and was updated

    Raises:
        InvalidRequestError: If the action is unknown or its parameter is missing
    """
    validate_action(action, task_id, policy_name)

    if now is None:
        now = datetime.now(timezone.utc)

    updated = False

    if action == COMPLETE_TASK:
        for task in record.tasks:
            if task.task_id == task_id:
                task.status = "completed"
                task.completed_at = now
                updated = True
                break
    else:
        for policy in record.policies:
            if policy.policy_name == policy_name:
                policy.acknowledged = True
                policy.acknowledged_at = now
                updated = True
                break

    if updated and record.status != "completed" and is_fully_onboarded(record):
        record.status = "completed"
        record.completed_at = now
        logger.info(f"Onboarding completed for employee {record.employee_id}")

    return updated
