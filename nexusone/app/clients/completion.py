"""Client for the chat completion endpoint of the augmentation service."""

import logging
import time
from typing import Protocol

import httpx

from nexusone.app.errors import UpstreamUnavailableError
from nexusone.app.models.chat import CompletionRequest, CompletionResponse
from nexusone.app.utils.metrics import PrometheusPipelineMetrics

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat-process"


class Completer(Protocol):
    """Protocol for LLM completion backends."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Answer one chat message.

        Raises:
            UpstreamUnavailableError: If no answer could be obtained
        """
        ...


class CompletionClient:
    """HTTP client for POST /api/chat-process."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
        metrics: PrometheusPipelineMetrics | None = None,
    ) -> None:
        self._url = base_url.rstrip("/") + CHAT_PATH
        self._timeout = timeout_seconds
        self._client = client
        self._metrics = metrics or PrometheusPipelineMetrics()

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Relay the message and assembled context to the completion endpoint.

        Raises:
            UpstreamUnavailableError: On non-2xx status, transport error,
                timeout, or a malformed body
        """
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        start = time.perf_counter()
        try:
            response = await client.post(
                self._url,
                json=request.model_dump(by_alias=True),
                timeout=self._timeout,
            )
            response.raise_for_status()
            result = CompletionResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            latency_ms = (time.perf_counter() - start) * 1000
            self._metrics.record_upstream("chat", "error", latency_ms)
            logger.error(f"Completion service failed: {e}")
            raise UpstreamUnavailableError("Completion service failed", e) from e
        finally:
            if close_client:
                await client.aclose()

        self._metrics.record_upstream("chat", "success", (time.perf_counter() - start) * 1000)
        return result
