"""Prompt context assembly for the onboarding chat.

Decides whether a message is about company policy, picks which of the
tenant's policy files to include, and renders them into one bounded
policy context string.
"""

import logging
from dataclasses import dataclass, field
from uuid import UUID

from nexusone.app.db.repositories import PolicyFileRepository
from nexusone.app.errors import BlobReadError
from nexusone.app.models.policies import (
    UNEXTRACTABLE_FILE_SENTINEL,
    ExtractionResult,
    PolicyFileInfo,
)
from nexusone.app.models.tenancy import CompanyInfo
from nexusone.app.policies.ingest import PolicyIngestionPipeline
from nexusone.app.policies.keywords import DEFAULT_KEYWORDS, PolicyKeywords
from nexusone.app.policies.sections import select_relevant_section

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n[...]"


def is_policy_query(message: str, keywords: PolicyKeywords = DEFAULT_KEYWORDS) -> bool:
    """True if the message mentions any policy term."""
    message_lower = message.lower()
    return any(term in message_lower for term in keywords.policy_terms)


@dataclass(frozen=True)
class InclusionDecision:
    """Why a policy file goes into the context."""

    reason: str


def should_include_policy(
    message: str, filename: str, keywords: PolicyKeywords = DEFAULT_KEYWORDS
) -> InclusionDecision:
    """Decide whether a policy file is relevant to a message.

    General phrases ("show me", "policies", ...) include every file. Otherwise
    a topic keyword found in the message or the filename includes the file.
    Files that match nothing are still included.
    """
    message_lower = message.lower()
    filename_lower = filename.lower()

    for phrase in keywords.general_phrases:
        if phrase in message_lower:
            return InclusionDecision(f"general:{phrase}")

    for topic, words in keywords.topics.items():
        for word in words:
            if word in message_lower or word in filename_lower:
                return InclusionDecision(f"topic:{topic}")

    return InclusionDecision("default")


def build_company_context(company: CompanyInfo) -> str:
    """Render the company profile lines sent with every chat message."""
    context = f"Company: {company.name}\n"
    if company.description:
        context += f"About: {company.description}\n"
    context += f"Industry: {company.industry or 'Not specified'}\n"
    return context


def render_section(filename: str, body: str) -> str:
    return f"--- {filename} ---\n{body}"


@dataclass
class AssembledPolicyContext:
    """Policy context plus bookkeeping about what went into it."""

    text: str = ""
    included_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    truncated: bool = False


class ContextAssembler:
    """Builds the policy context for one chat message.

    Files are processed one at a time in enumeration order. A failure on one
    file becomes an inline placeholder and never aborts the others.

    The context is bounded: at most max_files files are rendered, an excerpt
    longer than excerpt_max_chars is first narrowed to its query-relevant
    sections and then cut, and rendering stops once the total reaches
    context_max_chars.
    """

    def __init__(
        self,
        files: PolicyFileRepository,
        pipeline: PolicyIngestionPipeline,
        keywords: PolicyKeywords = DEFAULT_KEYWORDS,
        max_files: int = 10,
        excerpt_max_chars: int = 8_000,
        context_max_chars: int = 24_000,
    ) -> None:
        self._files = files
        self._pipeline = pipeline
        self._keywords = keywords
        self._max_files = max_files
        self._excerpt_max_chars = excerpt_max_chars
        self._context_max_chars = context_max_chars

    async def assemble(self, company_id: UUID, message: str) -> AssembledPolicyContext:
        """Render the tenant's relevant policy files into one context string."""
        result = AssembledPolicyContext()
        sections: list[str] = []
        used = 0

        files = await self._files.list_for_company(company_id)
        logger.info(f"Found {len(files)} policy files for company {company_id}")

        for info in files:
            decision = should_include_policy(message, info.filename, self._keywords)
            logger.debug(f"Including {info.filename} ({decision.reason})")

            if len(result.included_files) >= self._max_files:
                result.skipped_files.append(info.filename)
                result.truncated = True
                continue

            remaining = self._context_max_chars - used
            if remaining <= 0:
                result.skipped_files.append(info.filename)
                result.truncated = True
                continue

            section = render_section(info.filename, await self._render_body(info, message))
            if len(section) > remaining:
                section = section[:remaining] + TRUNCATION_MARKER
                result.truncated = True

            sections.append(section)
            result.included_files.append(info.filename)
            used += len(section)

        if result.skipped_files:
            logger.warning(
                f"Policy context budget reached, skipped {len(result.skipped_files)} files"
            )

        result.text = "\n\n".join(sections)
        return result

    async def _render_body(self, info: PolicyFileInfo, message: str) -> str:
        """Validate and extract one file, falling back to placeholders."""
        try:
            validation = await self._pipeline.validate(info.file_id)
            if not validation.valid:
                reason = (
                    "chunk count mismatch"
                    if validation.info and validation.info.has_chunks
                    else "no chunks found"
                )
                logger.warning(f"File {info.filename} failed validation - {reason}")
                return ExtractionResult.corrupted(info.filename).as_text()

            extraction = await self._pipeline.extract_text(info.file_id, message)
        except BlobReadError as e:
            logger.error(f"Failed to read {info.filename}: {e.message}", exc_info=True)
            return UNEXTRACTABLE_FILE_SENTINEL

        if not extraction.is_ok:
            return UNEXTRACTABLE_FILE_SENTINEL

        return self._fit_excerpt(extraction.text, message)

    def _fit_excerpt(self, text: str, message: str) -> str:
        if len(text) <= self._excerpt_max_chars:
            return text

        narrowed = select_relevant_section(text, message, self._keywords)
        if len(narrowed) <= self._excerpt_max_chars:
            return narrowed

        return narrowed[: self._excerpt_max_chars] + TRUNCATION_MARKER
