"""
Backend adapter factory

Creates the adapter matching a BackendConfig's server type.
"""

from __future__ import annotations

import httpx

from bench_gauge_core.domain.constants import DEFAULT_TIMEOUT_SECONDS
from bench_gauge_core.domain.value_objects import BackendConfig, ServerType
from bench_gauge_core.infrastructure.backends.base import BackendAdapter
from bench_gauge_core.infrastructure.backends.native import NativeAdapter
from bench_gauge_core.infrastructure.backends.openai_style import OpenAIStyleAdapter


def create_adapter(
    config: BackendConfig,
    http_client: httpx.Client | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    api_key: str = "lm-studio",
) -> BackendAdapter:
    """
    Create the appropriate adapter based on the server type

    Args:
        config: BackendConfig
        http_client: httpx client shared by the adapter
        timeout_seconds: Request timeout
        api_key: API key for OpenAI-style servers

    Returns:
        BackendAdapter: The matching adapter instance

    Raises:
        UnsupportedServerTypeError: If the server type is not supported
    """
    server_type = ServerType.parse(config.server_type)

    if server_type is ServerType.NATIVE:
        return NativeAdapter(
            config.base_url,
            config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout_seconds=timeout_seconds,
            http_client=http_client,
        )
    return OpenAIStyleAdapter(
        config.base_url,
        config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
        api_key=api_key,
        timeout_seconds=timeout_seconds,
        http_client=http_client,
    )
