"""Client for the text extraction endpoint of the augmentation service."""

import base64
import logging
import time
from typing import Protocol

import httpx

from nexusone.app.errors import UpstreamUnavailableError
from nexusone.app.utils.metrics import PrometheusPipelineMetrics

logger = logging.getLogger(__name__)

EXTRACT_PATH = "/api/extract-policy-text"


class TextExtractor(Protocol):
    """Protocol for text extraction backends."""

    async def extract(self, data: bytes, content_type: str, filename: str, query: str) -> str:
        """Return best-effort plain text for a document.

        Raises:
            UpstreamUnavailableError: If extraction is not possible
        """
        ...


class ExtractionClient:
    """HTTP client for POST /api/extract-policy-text."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
        metrics: PrometheusPipelineMetrics | None = None,
    ) -> None:
        """Initialize extraction client.

        Args:
            base_url: Augmentation service base URL
            timeout_seconds: Bound on the whole call
            client: Optional httpx client (for testing with mocks)
            metrics: Optional metrics sink
        """
        self._url = base_url.rstrip("/") + EXTRACT_PATH
        self._timeout = timeout_seconds
        self._client = client
        self._metrics = metrics or PrometheusPipelineMetrics()

    async def extract(self, data: bytes, content_type: str, filename: str, query: str) -> str:
        """Submit a document and return its extracted text.

        Raises:
            UpstreamUnavailableError: On non-2xx status, transport error,
                timeout, or a body without a text field
        """
        payload = {
            "buffer": base64.b64encode(data).decode("ascii"),
            "contentType": content_type,
            "filename": filename,
            "query": query,
        }

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        start = time.perf_counter()
        try:
            response = await client.post(self._url, json=payload, timeout=self._timeout)
            response.raise_for_status()
            body = response.json()
            text = body.get("text") if isinstance(body, dict) else None
            if not isinstance(text, str):
                raise ValueError("response has no text field")
        except (httpx.HTTPError, ValueError) as e:
            latency_ms = (time.perf_counter() - start) * 1000
            self._metrics.record_upstream("extract", "error", latency_ms)
            logger.warning(f"Extraction service failed for {filename}: {e}")
            raise UpstreamUnavailableError(f"Extraction failed for {filename}", e) from e
        finally:
            if close_client:
                await client.aclose()

        self._metrics.record_upstream("extract", "success", (time.perf_counter() - start) * 1000)
        return text
