"""LLM client for onboarding answers with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides deterministic fallback when no key present for testing.
"""

import logging
from typing import Protocol

from openai import AsyncOpenAI, OpenAIError

from nexusone.app.config import get_settings
from nexusone.app.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

MAX_ANSWER_CHARS = 10000


class LLMClient(Protocol):
    """Protocol for LLM client implementations."""

    source: str

    async def generate(self, prompt: str) -> str:
        """Generate an answer for a fully built prompt.

        Raises:
            UpstreamUnavailableError: If the model call fails
        """
        ...


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    source = "stub"

    async def generate(self, prompt: str) -> str:
        """Generate deterministic stub answer."""
        grounded = "RELEVANT COMPANY DOCUMENTS AND POLICIES:" in prompt

        if grounded:
            body = "Based on your company's policy documents, here is what I found."
        else:
            body = "I could not find a company policy document covering this question."

        return (
            f"{body}\n\n"
            "Please reach out to HR if you need more details.\n\n"
            "*This is a stub response generated without an LLM.*"
        )


class OpenAIClient:
    """OpenAI-backed LLM client."""

    source = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4o-mini"):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model name to use (default: gpt-4o-mini for cost efficiency)
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def generate(self, prompt: str) -> str:
        """Generate answer using OpenAI API."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.7,
                max_tokens=1000,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI API call failed: {e}")
            raise UpstreamUnavailableError("OpenAI API call failed", e) from e

        answer = response.choices[0].message.content or ""

        if not answer.strip():
            raise UpstreamUnavailableError("OpenAI returned empty response")

        if len(answer) > MAX_ANSWER_CHARS:
            logger.warning(
                f"OpenAI response unexpectedly large ({len(answer)} chars), "
                f"truncating to {MAX_ANSWER_CHARS}"
            )
            answer = answer[:MAX_ANSWER_CHARS] + "\n\n[Truncated]"

        return answer


def get_llm_client() -> LLMClient:
    """Factory function to get appropriate LLM client based on config.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    settings = get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info("Using OpenAI client for chat answers")
        return OpenAIClient(api_key=api_key.get_secret_value(), model=settings.openai_model)

    logger.warning("No OpenAI API key configured, using deterministic stub client")
    return DeterministicStubClient()
