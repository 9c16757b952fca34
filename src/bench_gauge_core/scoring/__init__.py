"""
Scoring sub-package

Provides the heuristic evaluators and the dispatch table keyed by evaluation method.
"""

from bench_gauge_core.domain.value_objects import ScoringResult
from bench_gauge_core.scoring.scorer import EVALUATORS, evaluate
from bench_gauge_core.scoring.evaluators import (
    evaluate_code,
    evaluate_creativity,
    evaluate_exact_match,
    evaluate_logical_reasoning,
    evaluate_sql,
    evaluate_tool_call,
)

__all__ = [
    # value objects (re-exported from domain)
    "ScoringResult",
    # dispatcher
    "EVALUATORS",
    "evaluate",
    # evaluators
    "evaluate_code",
    "evaluate_creativity",
    "evaluate_exact_match",
    "evaluate_logical_reasoning",
    "evaluate_sql",
    "evaluate_tool_call",
]
