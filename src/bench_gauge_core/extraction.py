"""
Response extraction

Pulls plain-text content and tool calls out of the reply shapes returned by
the supported backends. Structured fields are tried first in a fixed order;
only when none match is the text scanned for embedded tool-call markup.
"""

from __future__ import annotations

import json
import logging
import re

from bench_gauge_core.domain.value_objects import ToolCall

logger = logging.getLogger(__name__)

# Generic fields some servers use for the generated text
_FALLBACK_CONTENT_FIELDS = ("content", "output", "generated_text", "result")

# Tool calls written out as text (```json ...``` first, then <tool_call>...</tool_call>)
_TOOL_CALL_PATTERNS = (
    re.compile(r"```json\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE),
    re.compile(r"<tool_call>\s*(.*?)\s*</tool_call>", re.DOTALL),
)


def _first_choice(body: dict) -> dict | None:
    choices = body.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return None


def _as_text(value) -> str:
    return value if isinstance(value, str) else ""


def extract_content(body: dict | None) -> str:
    """
    Extract the generated text from a reply body

    Order: choices[0].message.content, choices[0].text, response,
    message.content, then content / output / generated_text / result.

    Args:
        body: Raw reply body

    Returns:
        The extracted text ("" when none is found)
    """
    if not isinstance(body, dict):
        return ""

    choice = _first_choice(body)
    if choice is not None:
        message = choice.get("message") or {}
        return _as_text(message.get("content")) or _as_text(choice.get("text"))

    if body.get("response"):
        return _as_text(body["response"])

    message = body.get("message")
    if isinstance(message, dict) and message.get("content"):
        return _as_text(message["content"])

    for key in _FALLBACK_CONTENT_FIELDS:
        if body.get(key):
            return _as_text(body[key])
    return ""


def _structured_tool_calls(body: dict) -> list[dict] | None:
    choice = _first_choice(body)
    if choice is not None:
        calls = (choice.get("message") or {}).get("tool_calls")
        if calls:
            return calls

    message = body.get("message")
    if isinstance(message, dict) and message.get("tool_calls"):
        return message["tool_calls"]
    return None


def parse_tool_call_text(content: str) -> ToolCall | None:
    """
    Parse a tool call written as text

    Recognizes a ```json fenced block or a <tool_call> span holding an
    object with name|function and arguments|params.

    Args:
        content: Reply text

    Returns:
        The ToolCall, or None when nothing parseable is found
    """
    if not content:
        return None

    for pattern in _TOOL_CALL_PATTERNS:
        match = pattern.search(content)
        if match is None:
            continue
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError as e:
            logger.debug("Failed to parse tool call from content: %s", e)
            return None
        if not isinstance(data, dict):
            return None

        name = data.get("name") or data.get("function") or "unknown_function"
        if isinstance(name, dict):
            # {"function": {"name": ..., "arguments": ...}}
            data = {**name, **data}
            name = name.get("name") or "unknown_function"
        arguments = data.get("arguments") or data.get("params") or {}
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        return ToolCall(name=str(name), arguments=arguments)

    return None


def extract_tool_calls(body: dict | None) -> list[ToolCall] | None:
    """
    Extract tool calls from a reply body

    Args:
        body: Raw reply body

    Returns:
        Normalized tool calls, or None when the reply made none
    """
    if not isinstance(body, dict):
        return None

    calls = _structured_tool_calls(body)
    if calls:
        return [ToolCall.from_dict(call) for call in calls if isinstance(call, dict)] or None

    tool_call = parse_tool_call_text(extract_content(body))
    return [tool_call] if tool_call else None


def extract_response(body: dict | None) -> tuple[str, list[ToolCall] | None]:
    """Extract (content, tool_calls) from a reply body"""
    return extract_content(body), extract_tool_calls(body)
