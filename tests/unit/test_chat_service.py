"""Tests for the onboarding chat relay."""

import uuid
from datetime import datetime, timezone
from typing import Any

import pytest

from nexusone.app.chat.context import ContextAssembler
from nexusone.app.chat.service import ChatService
from nexusone.app.db.inmemory import (
    InMemoryBlobStore,
    InMemoryCompanyRepository,
    InMemoryOnboardingRepository,
    InMemoryPolicyFileRepository,
)
from nexusone.app.errors import InvalidRequestError, NotFoundError, UpstreamUnavailableError
from nexusone.app.models.chat import CompletionRequest, CompletionResponse
from nexusone.app.models.onboarding import (
    OnboardingRecordData,
    OnboardingStatus,
    OnboardingTask,
    PolicyAcknowledgement,
)
from nexusone.app.models.policies import PolicyFileInfo
from nexusone.app.models.tenancy import EmployeeInfo
from nexusone.app.policies.ingest import PolicyIngestionPipeline


class DecodingExtractor:
    async def extract(self, data: bytes, content_type: str, filename: str, query: str) -> str:
        return data.decode("utf-8")


class RecordingCompleter:
    """Completer that records requests and returns a canned answer."""

    def __init__(self, session_id: str | None = None) -> None:
        self.requests: list[CompletionRequest] = []
        self.session_id = session_id

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        return CompletionResponse(response="Here is your answer.", session_id=self.session_id)


class FailingCompleter:
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        raise UpstreamUnavailableError("completion service down")


class BrokenOnboardingRepository(InMemoryOnboardingRepository):
    """Onboarding repository whose reads always fail."""

    async def get(self, employee_id: uuid.UUID, company_id: uuid.UUID) -> None:
        raise RuntimeError("database unavailable")


async def _add_file(
    files: InMemoryPolicyFileRepository,
    blobs: InMemoryBlobStore,
    company_id: uuid.UUID,
    filename: str,
    data: bytes,
) -> None:
    info = PolicyFileInfo(
        file_id=uuid.uuid4(),
        company_id=company_id,
        filename=filename,
        content_type="text/plain",
        size_bytes=len(data),
        chunk_size_bytes=1024,
        uploaded_at=datetime.now(timezone.utc),
    )
    await files.create(info)
    await blobs.put(info.file_id, data, 1024)


def _service(
    companies: InMemoryCompanyRepository,
    files: InMemoryPolicyFileRepository,
    blobs: InMemoryBlobStore,
    onboarding: InMemoryOnboardingRepository,
    completer: Any,
) -> ChatService:
    pipeline = PolicyIngestionPipeline(files, blobs, DecodingExtractor())
    return ChatService(
        companies=companies,
        onboarding=onboarding,
        assembler=ContextAssembler(files, pipeline),
        completer=completer,
    )


@pytest.fixture
def completer() -> RecordingCompleter:
    return RecordingCompleter()


@pytest.fixture
def service(
    companies: InMemoryCompanyRepository,
    files: InMemoryPolicyFileRepository,
    blobs: InMemoryBlobStore,
    onboarding: InMemoryOnboardingRepository,
    completer: RecordingCompleter,
) -> ChatService:
    return _service(companies, files, blobs, onboarding, completer)


class TestHandleMessage:
    """Test handle_message context building and relay."""

    @pytest.mark.asyncio
    async def test_policy_question_sends_policy_context(
        self,
        service: ChatService,
        completer: RecordingCompleter,
        files: InMemoryPolicyFileRepository,
        blobs: InMemoryBlobStore,
        tenants: Any,
    ) -> None:
        """Test that a policy question relays the tenant's policy text and profile."""
        await _add_file(files, blobs, tenants.company_a, "handbook.txt", b"PTO: 25 days a year")

        result = await service.handle_message(
            tenants.company_a, tenants.employee_a, "What does the handbook say about PTO?"
        )

        assert result.response == "Here is your answer."
        request = completer.requests[0]
        assert "--- handbook.txt ---\nPTO: 25 days a year" in request.policy_context
        assert request.company_context.startswith("Company: Acme Corp\n")
        assert request.user_id == str(tenants.employee_a)
        assert request.user_name == "Alice"
        assert request.company_name == "Acme Corp"
        assert result.context.included_files == ["handbook.txt"]

    @pytest.mark.asyncio
    async def test_small_talk_skips_policy_context(
        self,
        service: ChatService,
        completer: RecordingCompleter,
        files: InMemoryPolicyFileRepository,
        blobs: InMemoryBlobStore,
        tenants: Any,
    ) -> None:
        """Test that messages without policy terms are sent without policy text."""
        await _add_file(files, blobs, tenants.company_a, "handbook.txt", b"PTO: 25 days a year")

        await service.handle_message(tenants.company_a, tenants.employee_a, "Hello!")

        assert completer.requests[0].policy_context == ""
        assert completer.requests[0].company_context != ""

    @pytest.mark.asyncio
    async def test_same_filename_in_two_tenants_never_leaks(
        self,
        service: ChatService,
        completer: RecordingCompleter,
        files: InMemoryPolicyFileRepository,
        blobs: InMemoryBlobStore,
        tenants: Any,
    ) -> None:
        """Test that each tenant only ever sees its own handbook.pdf."""
        await _add_file(files, blobs, tenants.company_a, "handbook.pdf", b"Acme handbook policy")
        await _add_file(files, blobs, tenants.company_b, "handbook.pdf", b"Globex handbook policy")

        await service.handle_message(tenants.company_a, tenants.employee_a, "handbook policy?")
        await service.handle_message(tenants.company_b, tenants.employee_b, "handbook policy?")

        context_a = completer.requests[0].policy_context
        context_b = completer.requests[1].policy_context
        assert "Acme handbook policy" in context_a
        assert "Globex" not in context_a
        assert "Globex handbook policy" in context_b
        assert "Acme" not in context_b

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   ", "\n\t"])
    async def test_blank_message_rejected(
        self, service: ChatService, completer: RecordingCompleter, tenants: Any, message: str
    ) -> None:
        """Test that blank messages are rejected before any lookup."""
        with pytest.raises(InvalidRequestError) as exc_info:
            await service.handle_message(tenants.company_a, tenants.employee_a, message)

        assert exc_info.value.message == "Message is required"
        assert completer.requests == []

    @pytest.mark.asyncio
    async def test_unknown_employee(self, service: ChatService, tenants: Any) -> None:
        """Test that an unknown employee is reported as not found."""
        with pytest.raises(NotFoundError) as exc_info:
            await service.handle_message(tenants.company_a, uuid.uuid4(), "policy?")

        assert exc_info.value.message == "User not found"

    @pytest.mark.asyncio
    async def test_employee_of_other_tenant(self, service: ChatService, tenants: Any) -> None:
        """Test that an employee cannot chat in another tenant's context."""
        with pytest.raises(NotFoundError) as exc_info:
            await service.handle_message(tenants.company_a, tenants.employee_b, "policy?")

        assert exc_info.value.message == "User is not associated with a company"

    @pytest.mark.asyncio
    async def test_employee_without_company(
        self, service: ChatService, companies: InMemoryCompanyRepository, tenants: Any
    ) -> None:
        """Test that an employee who has not joined a company is rejected."""
        loner = EmployeeInfo(employee_id=uuid.uuid4(), name="Lee", email="lee@example.com")
        companies.add_employee(loner)

        with pytest.raises(NotFoundError) as exc_info:
            await service.handle_message(tenants.company_a, loner.employee_id, "hello")

        assert exc_info.value.message == "User is not associated with a company"

    @pytest.mark.asyncio
    async def test_missing_company(
        self, service: ChatService, companies: InMemoryCompanyRepository
    ) -> None:
        """Test that an employee whose company record is gone gets not found."""
        ghost_company = uuid.uuid4()
        employee = EmployeeInfo(
            employee_id=uuid.uuid4(),
            company_id=ghost_company,
            name="Gus",
            email="gus@example.com",
        )
        companies.add_employee(employee)

        with pytest.raises(NotFoundError) as exc_info:
            await service.handle_message(ghost_company, employee.employee_id, "hello")

        assert exc_info.value.message == "Company not found"

    @pytest.mark.asyncio
    async def test_completion_failure_propagates(
        self,
        companies: InMemoryCompanyRepository,
        files: InMemoryPolicyFileRepository,
        blobs: InMemoryBlobStore,
        onboarding: InMemoryOnboardingRepository,
        tenants: Any,
    ) -> None:
        """Test that an upstream completion failure is raised to the caller."""
        service = _service(companies, files, blobs, onboarding, FailingCompleter())

        with pytest.raises(UpstreamUnavailableError):
            await service.handle_message(tenants.company_a, tenants.employee_a, "hello")


class TestSessionId:
    """Test session ID selection."""

    @pytest.mark.asyncio
    async def test_completion_session_id_wins(
        self,
        companies: InMemoryCompanyRepository,
        files: InMemoryPolicyFileRepository,
        blobs: InMemoryBlobStore,
        onboarding: InMemoryOnboardingRepository,
        tenants: Any,
    ) -> None:
        """Test that the completion service's session ID is returned when present."""
        completer = RecordingCompleter(session_id="session_from_llm")
        service = _service(companies, files, blobs, onboarding, completer)

        result = await service.handle_message(
            tenants.company_a, tenants.employee_a, "hello", session_id="session_caller"
        )

        assert result.session_id == "session_from_llm"
        assert completer.requests[0].session_id == "session_caller"

    @pytest.mark.asyncio
    async def test_caller_session_id_echoed(self, service: ChatService, tenants: Any) -> None:
        """Test that the caller's session ID is echoed when the service returns none."""
        result = await service.handle_message(
            tenants.company_a, tenants.employee_a, "hello", session_id="session_caller"
        )

        assert result.session_id == "session_caller"

    @pytest.mark.asyncio
    async def test_session_id_generated(self, service: ChatService, tenants: Any) -> None:
        """Test that a fresh session ID is generated when none is available."""
        first = await service.handle_message(tenants.company_a, tenants.employee_a, "hello")
        second = await service.handle_message(tenants.company_a, tenants.employee_a, "hello")

        assert first.session_id.startswith("session_")
        assert first.session_id != second.session_id


class TestOnboardingStatus:
    """Test the onboarding aggregate attached to chat answers."""

    @pytest.mark.asyncio
    async def test_status_counts_record(
        self, service: ChatService, onboarding: InMemoryOnboardingRepository, tenants: Any
    ) -> None:
        """Test that task and policy counts come from the employee's record."""
        await onboarding.save(
            OnboardingRecordData(
                employee_id=tenants.employee_a,
                company_id=tenants.company_a,
                status="in_progress",
                tasks=[
                    OnboardingTask(task_id="laptop", title="Laptop", status="completed"),
                    OnboardingTask(task_id="intro", title="Intro"),
                ],
                policies=[PolicyAcknowledgement(policy_name="Handbook", acknowledged=True)],
            )
        )

        result = await service.handle_message(tenants.company_a, tenants.employee_a, "hello")

        assert result.onboarding_status == OnboardingStatus(
            total_tasks=2, completed_tasks=1, total_policies=1, acknowledged_policies=1
        )

    @pytest.mark.asyncio
    async def test_missing_record_gives_zeros(self, service: ChatService, tenants: Any) -> None:
        """Test that an employee without a record gets the all-zero aggregate."""
        result = await service.handle_message(tenants.company_a, tenants.employee_a, "hello")

        assert result.onboarding_status == OnboardingStatus()

    @pytest.mark.asyncio
    async def test_lookup_failure_gives_zeros(
        self,
        companies: InMemoryCompanyRepository,
        files: InMemoryPolicyFileRepository,
        blobs: InMemoryBlobStore,
        tenants: Any,
    ) -> None:
        """Test that a failing onboarding lookup still returns the answer."""
        service = _service(
            companies, files, blobs, BrokenOnboardingRepository(), RecordingCompleter()
        )

        result = await service.handle_message(tenants.company_a, tenants.employee_a, "hello")

        assert result.response == "Here is your answer."
        assert result.onboarding_status == OnboardingStatus()
