"""
Health Check

Performs a connectivity check against a backend before a run.
"""

import time
from typing import Callable

from bench_gauge_core.domain.entities import HealthCheckResult
from bench_gauge_core.domain.value_objects import BackendConfig
from bench_gauge_core.extraction import extract_content
from bench_gauge_core.infrastructure.backends.base import BackendAdapter
from bench_gauge_core.infrastructure.backends.factory import create_adapter


HEALTH_CHECK_PROMPT = "Reply with only 'OK' if you can read this message."


def health_check_backend(
    config: BackendConfig,
    create_adapter_fn: Callable[[BackendConfig], BackendAdapter] = create_adapter,
) -> HealthCheckResult:
    """
    Execute a health check for a backend.

    Args:
        config: Backend to check
        create_adapter_fn: Function to create a backend adapter

    Returns:
        HealthCheckResult: Health check result

    Raises:
        UnsupportedServerTypeError: If config.server_type is not supported
    """
    adapter = create_adapter_fn(config)
    try:
        start_time = time.time()
        body = adapter.send(HEALTH_CHECK_PROMPT)
        latency_ms = int((time.time() - start_time) * 1000)
    except Exception as e:
        return HealthCheckResult(
            base_url=config.base_url,
            model=config.model,
            success=False,
            latency_ms=None,
            error=str(e),
        )
    finally:
        adapter.close()

    if not extract_content(body):
        return HealthCheckResult(
            base_url=config.base_url,
            model=config.model,
            success=False,
            latency_ms=latency_ms,
            error="Backend returned an empty reply",
        )
    return HealthCheckResult(
        base_url=config.base_url,
        model=config.model,
        success=True,
        latency_ms=latency_ms,
        error=None,
    )
