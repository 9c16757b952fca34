"""
OpenAI-compatible (LM Studio etc.) backend adapter
"""

from __future__ import annotations

import logging

import httpx
from openai import OpenAI

from bench_gauge_core.domain.constants import DEFAULT_TIMEOUT_SECONDS
from bench_gauge_core.infrastructure.backends.base import BackendAdapter, normalize_base_url
from bench_gauge_core.task_catalog import ToolDefinition

logger = logging.getLogger(__name__)


class OpenAIStyleAdapter(BackendAdapter):
    """Adapter posting to {base}/v1/chat/completions through the OpenAI SDK"""

    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 256,
        api_key: str = "lm-studio",
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ):
        """
        Args:
            base_url: Backend address (scheme optional; may already end in /v1)
            model: Model id sent in the request body
            temperature: Sampling temperature
            max_tokens: Maximum number of tokens to generate
            api_key: API key (usually not required for local servers)
            timeout_seconds: Request timeout
            http_client: httpx client to send requests through
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        base = normalize_base_url(base_url)
        # The SDK appends /chat/completions to the client base URL
        self.api_base_url = base if "/v1" in base else f"{base}/v1"

        self._owns_client = http_client is None
        # Retries are disabled: a failed call is recorded on the prompt result instead
        self.client = OpenAI(
            base_url=self.api_base_url,
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
            http_client=http_client,
        )

    def send(self, prompt: str, tools: list[ToolDefinition] | None = None) -> dict:
        """
        Send a prompt and return the unmodified reply body

        Raises:
            openai.APIError: On transport, timeout or HTTP status failures
        """
        kwargs = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            kwargs["tools"] = [tool.to_dict() for tool in tools]
            kwargs["tool_choice"] = "auto"

        logger.debug("POST %s/chat/completions (model=%s)", self.api_base_url, self.model)
        raw = self.client.chat.completions.with_raw_response.create(**kwargs)
        return raw.http_response.json()

    def close(self) -> None:
        # OpenAI.close() also closes an injected http_client
        if self._owns_client:
            self.client.close()
