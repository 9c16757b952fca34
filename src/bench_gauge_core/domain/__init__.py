"""
Domain Layer

Defines constants, entities, and value objects that form the core of the benchmark logic.
Has no dependencies on external libraries.
"""

from bench_gauge_core.domain.constants import (
    DEFAULT_TASK_WEIGHT,
    DEFAULT_TIMEOUT_SECONDS,
    HISTORY_KEY,
    HISTORY_LIMIT,
    TASK_WEIGHTS,
    TOOL_CALL_SUCCESS_THRESHOLD,
    TOOL_CALLING_TASK_TYPE,
)
from bench_gauge_core.domain.entities import (
    BenchmarkRun,
    HealthCheckResult,
    PromptResult,
    TaskResult,
    ToolCallingCaseResult,
    ToolCallingSubBenchmark,
)
from bench_gauge_core.domain.value_objects import (
    BackendConfig,
    EvaluationMethod,
    ScoringResult,
    ServerType,
    ToolCall,
    UnsupportedServerTypeError,
)

__all__ = [
    # constants
    "DEFAULT_TASK_WEIGHT",
    "DEFAULT_TIMEOUT_SECONDS",
    "HISTORY_KEY",
    "HISTORY_LIMIT",
    "TASK_WEIGHTS",
    "TOOL_CALL_SUCCESS_THRESHOLD",
    "TOOL_CALLING_TASK_TYPE",
    # entities
    "BenchmarkRun",
    "HealthCheckResult",
    "PromptResult",
    "TaskResult",
    "ToolCallingCaseResult",
    "ToolCallingSubBenchmark",
    # value objects
    "BackendConfig",
    "EvaluationMethod",
    "ScoringResult",
    "ServerType",
    "ToolCall",
    "UnsupportedServerTypeError",
]
