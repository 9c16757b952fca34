"""
Benchmark Harness Configuration

Manages loading from environment variables and default values.
"""

import os
from dataclasses import dataclass, field, asdict

from bench_gauge_core.domain.constants import DEFAULT_TIMEOUT_SECONDS
from bench_gauge_core.domain.value_objects import BackendConfig


def _env_bool(key: str, default: bool) -> bool:
    """Convert an environment variable to bool"""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    """Convert an environment variable to int"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_float(key: str, default: float) -> float:
    """Convert an environment variable to float"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a number.")


def _env_str(key: str, default: str) -> str:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


def _env_str_list(key: str, default: list[str]) -> list[str]:
    """Convert an environment variable to a comma-separated list of strings"""
    val = os.environ.get(key)
    if val is None:
        return default
    return [x.strip() for x in val.split(",") if x.strip()]


@dataclass
class BackendDefaults:
    """Default run parameters used when the caller does not override them"""
    server_type: str = "openai-style"
    base_url: str = "http://localhost:1234"
    model: str = "unknown"
    temperature: float = 0.7
    max_tokens: int = 256
    task_types: list[str] = field(default_factory=lambda: ["factual"])
    max_prompts: int = 3
    include_tool_calling: bool = True


@dataclass
class RequestConfig:
    """Outbound request configuration"""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    api_key: str = "lm-studio"  # Only sent to OpenAI-style servers


@dataclass
class HistoryConfig:
    """Run history configuration"""
    path: str = "results/benchmark_history.json"
    task_catalog_path: str = ""  # Optional JSON catalog extension


@dataclass
class HarnessConfig:
    """Overall benchmark harness configuration"""
    backend: BackendDefaults = field(default_factory=BackendDefaults)
    request: RequestConfig = field(default_factory=RequestConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"harness_config": asdict(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "HarnessConfig":
        """Create from dictionary (handles presence/absence of harness_config key)"""
        config_data = data.get("harness_config", data)
        return cls(
            backend=BackendDefaults(**config_data.get("backend", {})),
            request=RequestConfig(**config_data.get("request", {})),
            history=HistoryConfig(**config_data.get("history", {})),
        )

    def to_backend_config(self, **overrides) -> BackendConfig:
        """
        Build a BackendConfig from the defaults

        Args:
            **overrides: Fields to override (None values are ignored)

        Returns:
            BackendConfig
        """
        values = asdict(self.backend)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return BackendConfig(**values)


def load_config() -> HarnessConfig:
    """
    Load configuration from environment variables

    Uses default values when environment variables are not set.

    Returns:
        HarnessConfig
    """
    backend = BackendDefaults(
        server_type=_env_str("BENCH_SERVER_TYPE", "openai-style"),
        base_url=_env_str("BENCH_BASE_URL", "http://localhost:1234"),
        model=_env_str("BENCH_MODEL", "unknown"),
        temperature=_env_float("BENCH_TEMPERATURE", 0.7),
        max_tokens=_env_int("BENCH_MAX_TOKENS", 256),
        task_types=_env_str_list("BENCH_TASK_TYPES", ["factual"]),
        max_prompts=_env_int("BENCH_MAX_PROMPTS", 3),
        include_tool_calling=_env_bool("BENCH_INCLUDE_TOOL_CALLING", True),
    )
    request = RequestConfig(
        timeout_seconds=_env_float("BENCH_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
        api_key=_env_str("BENCH_API_KEY", "lm-studio"),
    )
    history = HistoryConfig(
        path=_env_str("BENCH_HISTORY_PATH", "results/benchmark_history.json"),
        task_catalog_path=_env_str("BENCH_TASK_CATALOG", ""),
    )
    return HarnessConfig(backend=backend, request=request, history=history)
