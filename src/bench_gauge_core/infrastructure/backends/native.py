"""
Native (Ollama) backend adapter
"""

from __future__ import annotations

import json
import logging

import httpx

from bench_gauge_core.domain.constants import DEFAULT_TIMEOUT_SECONDS
from bench_gauge_core.infrastructure.backends.base import BackendAdapter, normalize_base_url
from bench_gauge_core.task_catalog import ToolDefinition

logger = logging.getLogger(__name__)


def _decode_body(response: httpx.Response) -> dict:
    """
    Decode a reply body

    /api/generate streams newline-delimited JSON unless told otherwise; the
    chunks are folded into a single reply whose "response" is their concatenation.
    """
    try:
        return response.json()
    except json.JSONDecodeError:
        lines = [line for line in response.text.splitlines() if line.strip()]
        if len(lines) < 2:
            raise
        chunks = [json.loads(line) for line in lines]
        merged = dict(chunks[-1])
        merged["response"] = "".join(chunk.get("response", "") for chunk in chunks)
        return merged


class NativeAdapter(BackendAdapter):
    """Adapter for the native /api/chat and /api/generate endpoints"""

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 256,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ):
        """
        Args:
            base_url: Backend address (scheme optional)
            model: Model id sent in the request body
            temperature: Sampling temperature
            max_tokens: Maximum number of tokens to generate (sent as num_predict)
            timeout_seconds: Request timeout
            http_client: httpx client to send requests through
        """
        self.base_url = normalize_base_url(base_url)
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds
        # Only a client created here is closed by close()
        self._owns_client = http_client is None
        self.client = http_client or httpx.Client()

    def _build_request(self, prompt: str, tools: list[ToolDefinition] | None) -> tuple[str, dict]:
        # Tool definitions are only accepted by the chat endpoint
        if tools:
            return f"{self.base_url}/api/chat", {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
                "tools": [tool.to_dict() for tool in tools],
                "stream": False,
            }
        return f"{self.base_url}/api/generate", {
            "model": self.model,
            "prompt": prompt,
            "temperature": self.temperature,
            "num_predict": self.max_tokens,
        }

    def send(self, prompt: str, tools: list[ToolDefinition] | None = None) -> dict:
        """
        Send a prompt and return the reply body

        Raises:
            httpx.HTTPError: On transport, timeout or HTTP status failures
        """
        url, payload = self._build_request(prompt, tools)
        logger.debug("POST %s (model=%s)", url, self.model)
        response = self.client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return _decode_body(response)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
