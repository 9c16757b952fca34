"""
Scoring dispatch function

Routes a prompt case to the evaluator registered for its evaluation method.
"""

from __future__ import annotations

from typing import Callable

from bench_gauge_core.domain.value_objects import EvaluationMethod, ScoringResult, ToolCall
from bench_gauge_core.scoring.evaluators import (
    evaluate_code,
    evaluate_creativity,
    evaluate_exact_match,
    evaluate_logical_reasoning,
    evaluate_sql,
    evaluate_tool_call,
)
from bench_gauge_core.task_catalog import PromptCase

Evaluator = Callable[[PromptCase, str, "list[ToolCall] | None"], ScoringResult]

EVALUATORS: dict[EvaluationMethod, Evaluator] = {
    EvaluationMethod.EXACT_MATCH: evaluate_exact_match,
    EvaluationMethod.LOGICAL_ANALYSIS: evaluate_logical_reasoning,
    EvaluationMethod.CODE: evaluate_code,
    EvaluationMethod.SQL: evaluate_sql,
    EvaluationMethod.CREATIVITY: evaluate_creativity,
    EvaluationMethod.TOOL_CALL: evaluate_tool_call,
}


def evaluate(
    case: PromptCase,
    content: str,
    tool_calls: list[ToolCall] | None = None,
) -> ScoringResult:
    """
    Score a reply using the evaluator for the case's evaluation method

    Args:
        case: Prompt case holding the grading rule
        content: Extracted reply text
        tool_calls: Extracted tool calls (None when the reply made none)

    Returns:
        ScoringResult (score + evaluation details)

    Raises:
        ValueError: When the case's evaluation method has no registered evaluator
    """
    evaluator = EVALUATORS.get(EvaluationMethod(case.evaluation_method))
    if evaluator is None:
        raise ValueError(
            f"Unknown evaluation method: {case.evaluation_method} "
            f"(available: {[m.value for m in EVALUATORS]})"
        )
    return evaluator(case, content or "", tool_calls)
