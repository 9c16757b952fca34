"""
Heuristic evaluators

One pure scoring function per evaluation method. Every function takes the
prompt case, the extracted content and the extracted tool calls and returns a
ScoringResult on a 0-100 scale.
"""

from __future__ import annotations

import json
import re

from bench_gauge_core.domain.value_objects import ScoringResult, ToolCall
from bench_gauge_core.task_catalog import PromptCase

MAX_SCORE = 100.0

_CODE_BLOCK_RE = re.compile(r"```(?:javascript|python|js|py)?\s*([\s\S]*?)```")
_SQL_BLOCK_RE = re.compile(r"```(?:sql)?\s*([\s\S]*?)```", re.IGNORECASE)

_FUNCTION_DEF_RE = re.compile(r"function\s+\w+\s*\(|def\s+\w+\s*\(")
_RETURN_RE = re.compile(r"return")
_ERROR_HANDLING_RE = re.compile(r"try|catch|except|if\s+.*?error|if\s+.*?invalid")

# Task-specific logic checks: (prompt substring, ((check name, pattern, points), ...))
# Points per entry sum to at most 45.
CODE_TASK_HEURISTICS: tuple[tuple[str, tuple[tuple[str, re.Pattern, int], ...]], ...] = (
    ("palindrome", (
        ("reversal", re.compile(r"reverse|split.*reverse.*join|\[::-1\]"), 25),
        ("comparison", re.compile(r"===|==|equals|toLowerCase|lower\(\)"), 20),
    )),
    ("second largest", (
        ("sorting", re.compile(r"sort\(|sorted\("), 25),
        ("indexing", re.compile(r"\[\s*-2\s*\]|\[\s*1\s*\]|second|2nd"), 20),
    )),
)
GENERIC_LOGIC_SCORE = 30

# Numeric answers also accepted when phrased another way
_SEMANTIC_ALIASES = {
    "0.05": ("5 cent", "$0.05"),
}

_KEYWORD_PUNCTUATION_RE = re.compile(r"[.,?!;:]")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_EMPHASIS_RE = re.compile(r"[*_#]")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def _clamp(value: float) -> float:
    return max(0.0, min(MAX_SCORE, value))


def _normalize(text: str) -> str:
    return text.lower().strip()


def evaluate_exact_match(case: PromptCase, content: str, tool_calls: list[ToolCall] | None = None) -> ScoringResult:
    """
    Exact match evaluation

    100 for an exact (case-insensitive, trimmed) match, 90 for a known
    semantic alias, 80 when the answer is contained in the reply, else 0.
    """
    details = {"method": "exactMatch"}
    if not content or not case.expected_answer:
        return ScoringResult(score=0.0, details=details)

    normalized_content = _normalize(content)
    normalized_expected = _normalize(case.expected_answer)

    if normalized_content == normalized_expected:
        score, details["match"] = 100.0, "exact"
    elif normalized_expected in normalized_content:
        score, details["match"] = 80.0, "partial"
    elif any(alias in normalized_content for alias in _SEMANTIC_ALIASES.get(case.expected_answer, ())):
        score, details["match"] = 90.0, "semantic"
    else:
        score, details["match"] = 0.0, "none"

    return ScoringResult(score=_clamp(score), details=details)


def evaluate_logical_reasoning(case: PromptCase, content: str, tool_calls: list[ToolCall] | None = None) -> ScoringResult:
    """
    Logical reasoning evaluation

    30 points for the correct answer plus 5 per explanation word (longer than
    4 characters) found in the reply, the explanation part capped at 70.
    """
    details = {"method": "logicalReasoning"}
    if not content or not case.expected_answer:
        return ScoringResult(score=0.0, details=details)

    normalized_content = _normalize(content)
    has_correct_answer = _normalize(case.expected_answer) in normalized_content

    keywords = [word for word in (case.explanation or "").lower().split(" ") if len(word) > 4]
    explanation_score = min(sum(5 for kw in keywords if kw in normalized_content), 70)

    details["has_correct_answer"] = has_correct_answer
    details["explanation_score"] = explanation_score
    return ScoringResult(score=_clamp((30 if has_correct_answer else 0) + explanation_score), details=details)


def _task_logic_score(prompt: str, code: str) -> tuple[int, dict]:
    for needle, checks in CODE_TASK_HEURISTICS:
        if needle in prompt:
            hits = {name: points if pattern.search(code) else 0 for name, pattern, points in checks}
            return sum(hits.values()), hits
    return GENERIC_LOGIC_SCORE, {}


def evaluate_code(case: PromptCase, content: str, tool_calls: list[ToolCall] | None = None) -> ScoringResult:
    """
    Code evaluation

    25 for a function definition, 15 for a return statement, 15 for error
    handling, and up to 45 from prompt-specific heuristics (flat 30 when no
    heuristic matches the prompt).
    """
    details = {"method": "codeEvaluation", "criteria_scores": {}}
    if not content or not case.evaluation_criteria:
        return ScoringResult(score=0.0, details=details)

    match = _CODE_BLOCK_RE.search(content)
    code = match.group(1).strip() if match else content

    criteria = details["criteria_scores"]
    criteria["function_definition"] = 25 if _FUNCTION_DEF_RE.search(code) else 0
    criteria["return_statement"] = 15 if _RETURN_RE.search(code) else 0
    criteria["error_handling"] = 15 if _ERROR_HANDLING_RE.search(code) else 0

    logic_score, logic_checks = _task_logic_score(case.prompt, code)
    criteria["task_specific_logic"] = logic_score
    if logic_checks:
        details["logic_checks"] = logic_checks

    total = sum(criteria.values())
    details["overall_criteria_score"] = total
    return ScoringResult(score=_clamp(total), details=details)


def evaluate_sql(case: PromptCase, content: str, tool_calls: list[ToolCall] | None = None) -> ScoringResult:
    """
    SQL evaluation

    Equal share of 100 per expected element found, plus a 10 point bonus for
    a SELECT ... FROM structure (capped at 100).
    """
    details = {"method": "sqlEvaluation", "element_scores": {}}
    if not content or not case.expected_elements:
        return ScoringResult(score=0.0, details=details)

    match = _SQL_BLOCK_RE.search(content)
    sql = (match.group(1).strip() if match else content).lower()

    points = 100 / len(case.expected_elements)
    element_score = 0.0
    for element in case.expected_elements:
        hit = element.lower() in sql
        details["element_scores"][element] = points if hit else 0
        if hit:
            element_score += points

    if "select" in sql and "from" in sql:
        element_score = min(element_score + 10, 100)

    return ScoringResult(score=_clamp(element_score), details=details)


def evaluate_creativity(case: PromptCase, content: str, tool_calls: list[ToolCall] | None = None) -> ScoringResult:
    """
    Creativity evaluation

    Sum of four components:
    - length: len(content) / 50, up to 20
    - structure: 10 for multiple paragraphs, 5 for emphasis markup
    - relevance: share of unique prompt keywords (> 4 chars) present, up to 40
    - diversity: 5 per distinct sentence length, up to 25

    The relevance component and the total are capped explicitly so floating
    point accumulation cannot push the score past 100.
    """
    details = {"method": "creativityEvaluation", "criteria_scores": {}}
    if not content or not case.evaluation_criteria:
        return ScoringResult(score=0.0, details=details)

    criteria = details["criteria_scores"]
    criteria["length"] = min(len(content) / 50, 20)

    structure = 0
    if len(_PARAGRAPH_SPLIT_RE.split(content)) > 1:
        structure += 10
    if _EMPHASIS_RE.search(content):
        structure += 5
    criteria["structure"] = structure

    words = [w for w in case.prompt.lower().split(" ") if len(w) > 4]
    keywords = list(dict.fromkeys(_KEYWORD_PUNCTUATION_RE.sub("", w) for w in words))
    normalized_content = content.lower()
    relevance = 0.0
    for keyword in keywords:
        if keyword in normalized_content:
            relevance += 40 / len(keywords)
    criteria["relevance"] = min(relevance, 40)

    sentence_lengths = {len(s.strip().split(" ")) for s in _SENTENCE_SPLIT_RE.split(content)}
    criteria["creativity"] = min(len(sentence_lengths) * 5, 25)

    return ScoringResult(score=_clamp(sum(criteria.values())), details=details)


def _argument_matches(expected, actual) -> bool:
    if isinstance(expected, str):
        if not isinstance(actual, str) or not actual:
            return False
        expected_norm, actual_norm = expected.lower(), actual.lower()
        return expected_norm in actual_norm or actual_norm in expected_norm
    return actual == expected


def evaluate_tool_call(case: PromptCase, content: str, tool_calls: list[ToolCall] | None = None) -> ScoringResult:
    """
    Tool call evaluation

    0 when no call was made or the wrong tool was called, 50 for the right
    tool with unparseable arguments, else 50 plus an equal share of 50 per
    matching expected argument.
    """
    details = {"method": "toolCallEvaluation"}
    if not tool_calls or not case.expected_tool:
        details["reason"] = "No tool calls found"
        return ScoringResult(score=0.0, details=details)

    tool_call = tool_calls[0]
    if tool_call.name != case.expected_tool:
        details["reason"] = f"Wrong tool called: {tool_call.name} instead of {case.expected_tool}"
        return ScoringResult(score=0.0, details=details)

    try:
        args = json.loads(tool_call.arguments) if tool_call.arguments else {}
    except json.JSONDecodeError:
        args = None
    if not isinstance(args, dict):
        details.update(reason="Correct tool but invalid arguments format", correct_tool=True, correct_args=False)
        return ScoringResult(score=50.0, details=details)

    expected_args = case.expected_args or {}
    arg_score = 0.0
    for key, expected in expected_args.items():
        if key in args and _argument_matches(expected, args[key]):
            arg_score += 50 / len(expected_args)

    details["correct_tool"] = True
    details["arg_score"] = arg_score
    return ScoringResult(score=_clamp(50 + arg_score), details=details)
