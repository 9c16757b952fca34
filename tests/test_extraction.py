"""
Tests for response extraction

One fixture per known reply shape, plus the text-markup fallbacks.
"""

import json

import pytest

from bench_gauge_core.domain.value_objects import ToolCall
from bench_gauge_core.extraction import (
    extract_content,
    extract_response,
    extract_tool_calls,
    parse_tool_call_text,
)

OPENAI_REPLY = {
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "Paris"}}],
}

OPENAI_TOOL_REPLY = {
    "choices": [{
        "message": {
            "role": "assistant",
            "content": None,
            "tool_calls": [{
                "id": "call_1",
                "type": "function",
                "function": {"name": "get_weather", "arguments": "{\"location\": \"New York City\"}"},
            }],
        },
    }],
}

LEGACY_COMPLETION_REPLY = {"choices": [{"index": 0, "text": "Jupiter"}]}

NATIVE_GENERATE_REPLY = {"model": "llama3", "response": "1945", "done": True}

NATIVE_CHAT_TOOL_REPLY = {
    "model": "llama3",
    "message": {
        "role": "assistant",
        "content": "",
        "tool_calls": [{"function": {"name": "search", "arguments": {"query": "SpaceX Starship"}}}],
    },
    "done": True,
}


class TestExtractContent:
    """Tests for extract_content"""

    def test_openai_message(self):
        assert extract_content(OPENAI_REPLY) == "Paris"

    def test_openai_legacy_text(self):
        assert extract_content(LEGACY_COMPLETION_REPLY) == "Jupiter"

    def test_null_content_with_tool_calls(self):
        assert extract_content(OPENAI_TOOL_REPLY) == ""

    def test_native_generate(self):
        assert extract_content(NATIVE_GENERATE_REPLY) == "1945"

    def test_native_chat_message(self):
        assert extract_content({"message": {"role": "assistant", "content": "Au"}}) == "Au"

    @pytest.mark.parametrize("field", ["content", "output", "generated_text", "result"])
    def test_generic_fields(self, field):
        assert extract_content({field: "text"}) == "text"

    def test_choices_take_priority(self):
        body = {"choices": [{"message": {"content": "a"}}], "response": "b"}
        assert extract_content(body) == "a"

    @pytest.mark.parametrize("body", [None, {}, {"unrelated": 1}, {"choices": []}])
    def test_nothing_found(self, body):
        assert extract_content(body) == ""


class TestExtractToolCalls:
    """Tests for extract_tool_calls"""

    def test_openai_tool_calls(self):
        calls = extract_tool_calls(OPENAI_TOOL_REPLY)
        assert calls == [ToolCall(name="get_weather", arguments="{\"location\": \"New York City\"}", id="call_1")]

    def test_native_object_arguments_are_encoded(self):
        calls = extract_tool_calls(NATIVE_CHAT_TOOL_REPLY)
        assert len(calls) == 1
        assert calls[0].name == "search"
        assert json.loads(calls[0].arguments) == {"query": "SpaceX Starship"}

    def test_plain_reply_has_no_tool_calls(self):
        assert extract_tool_calls(OPENAI_REPLY) is None
        assert extract_tool_calls(NATIVE_GENERATE_REPLY) is None

    def test_fenced_json_in_content(self):
        content = 'Calling:\n```json\n{"name": "calculator", "arguments": {"operation": "add", "operands": [235, 467]}}\n```'
        calls = extract_tool_calls({"choices": [{"message": {"content": content}}]})
        assert calls[0].name == "calculator"
        assert json.loads(calls[0].arguments) == {"operation": "add", "operands": [235, 467]}

    def test_tool_call_markup_in_content(self):
        content = '<tool_call>\n{"function": "search", "params": {"query": "Starship"}}\n</tool_call>'
        calls = extract_tool_calls({"response": content})
        assert calls == [ToolCall(name="search", arguments="{\"query\": \"Starship\"}")]

    def test_markup_in_native_chat_content(self):
        body = {"message": {"content": '<tool_call>{"name": "get_weather", "arguments": {"location": "NYC"}}</tool_call>'}}
        assert extract_tool_calls(body)[0].name == "get_weather"

    def test_malformed_markup_yields_none(self):
        assert extract_tool_calls({"response": "<tool_call>not json</tool_call>"}) is None

    def test_malformed_fenced_json_yields_none(self):
        assert extract_tool_calls({"response": "```json\n{\"name\": \n```"}) is None

    def test_empty_structured_list_falls_back_to_text(self):
        body = {"choices": [{"message": {"content": "no tools", "tool_calls": []}}]}
        assert extract_tool_calls(body) is None


class TestParseToolCallText:
    """Tests for parse_tool_call_text"""

    def test_missing_name_defaults(self):
        call = parse_tool_call_text('<tool_call>{"arguments": {"a": 1}}</tool_call>')
        assert call.name == "unknown_function"

    def test_nested_function_object(self):
        text = '```json\n{"function": {"name": "search", "arguments": {"query": "x"}}}\n```'
        call = parse_tool_call_text(text)
        assert call.name == "search"
        assert json.loads(call.arguments) == {"query": "x"}

    def test_non_object_json_yields_none(self):
        assert parse_tool_call_text("```json\n[1, 2]\n```") is None

    def test_empty(self):
        assert parse_tool_call_text("") is None


def test_extract_response_pairs_content_and_calls():
    content, calls = extract_response(NATIVE_CHAT_TOOL_REPLY)
    assert content == ""
    assert calls[0].name == "search"
