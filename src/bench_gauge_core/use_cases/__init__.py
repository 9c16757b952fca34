"""
Use Cases Layer

Aggregates the benchmark logic and provides use cases called from the runner.
"""

from bench_gauge_core.use_cases.benchmark import (
    BenchmarkOrchestrator,
    build_summary,
    calculate_overall_score,
    estimate_token_count,
)
from bench_gauge_core.use_cases.health_check import (
    HEALTH_CHECK_PROMPT,
    health_check_backend,
)

__all__ = [
    # benchmark
    "BenchmarkOrchestrator",
    "build_summary",
    "calculate_overall_score",
    "estimate_token_count",
    # health_check
    "HEALTH_CHECK_PROMPT",
    "health_check_backend",
]
