"""Onboarding chat relay: one message in, one grounded answer out."""

import logging
import uuid
from dataclasses import dataclass
from uuid import UUID

from nexusone.app.chat.context import ContextAssembler, build_company_context, is_policy_query
from nexusone.app.clients.completion import Completer
from nexusone.app.db.repositories import CompanyRepository, OnboardingRepository
from nexusone.app.errors import InvalidRequestError, NotFoundError
from nexusone.app.models.chat import ChatContext, CompletionRequest
from nexusone.app.models.onboarding import OnboardingStatus
from nexusone.app.onboarding.progress import compute_status
from nexusone.app.policies.keywords import DEFAULT_KEYWORDS, PolicyKeywords

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return f"session_{uuid.uuid4().hex}"


@dataclass
class ChatResult:
    """Answer to one chat message."""

    response: str
    session_id: str
    onboarding_status: OnboardingStatus
    context: ChatContext


class ChatService:
    """Answers employee chat messages using the tenant's policy documents.

    The service keeps no session state; the session ID is an opaque token
    echoed back to the caller.
    """

    def __init__(
        self,
        companies: CompanyRepository,
        onboarding: OnboardingRepository,
        assembler: ContextAssembler,
        completer: Completer,
        keywords: PolicyKeywords = DEFAULT_KEYWORDS,
    ) -> None:
        self._companies = companies
        self._onboarding = onboarding
        self._assembler = assembler
        self._completer = completer
        self._keywords = keywords

    async def handle_message(
        self,
        company_id: UUID,
        employee_id: UUID,
        message: str,
        session_id: str | None = None,
    ) -> ChatResult:
        """Answer a message for an employee of the given tenant.

        Args:
            company_id: Tenant of the authenticated caller
            employee_id: Authenticated employee
            message: User message
            session_id: Optional correlation token from a previous turn

        Returns:
            ChatResult with the answer, session ID and onboarding aggregate

        Raises:
            InvalidRequestError: If the message is blank
            NotFoundError: If the employee or company cannot be resolved
            UpstreamUnavailableError: If the completion call fails
        """
        if not message or not message.strip():
            raise InvalidRequestError("Message is required")

        employee = await self._companies.get_employee(employee_id)
        if employee is None:
            raise NotFoundError("User not found")
        if employee.company_id is None or employee.company_id != company_id:
            raise NotFoundError("User is not associated with a company")

        company = await self._companies.get_company(company_id)
        if company is None:
            raise NotFoundError("Company not found")

        context = ChatContext(message=message, company_context=build_company_context(company))

        if is_policy_query(message, self._keywords):
            assembled = await self._assembler.assemble(company_id, message)
            context.policy_context = assembled.text
            context.included_files = assembled.included_files

        logger.info(
            f"Chat context for company {company_id}: "
            f"{len(context.included_files)} files, {len(context.policy_context)} chars"
        )

        completion = await self._completer.complete(
            CompletionRequest(
                message=message,
                policy_context=context.policy_context,
                company_context=context.company_context,
                session_id=session_id,
                user_id=str(employee.employee_id),
                user_name=employee.name,
                company_name=company.name,
            )
        )

        return ChatResult(
            response=completion.response,
            session_id=completion.session_id or session_id or generate_session_id(),
            onboarding_status=await self.onboarding_status(employee_id, company_id),
            context=context,
        )

    async def onboarding_status(self, employee_id: UUID, company_id: UUID) -> OnboardingStatus:
        """Aggregate the employee's onboarding record; zeros if the lookup fails."""
        try:
            record = await self._onboarding.get(employee_id, company_id)
        except Exception as e:
            logger.error(f"Error getting onboarding status: {e}", exc_info=True)
            return OnboardingStatus()

        status = compute_status(record)
        return OnboardingStatus(
            total_tasks=status.total_tasks,
            completed_tasks=status.completed_tasks,
            total_policies=status.total_policies,
            acknowledged_policies=status.acknowledged_policies,
        )
