"""
Tests for the task catalog and its JSON loader
"""

import json

import pytest

from bench_gauge_core.domain.value_objects import EvaluationMethod
from bench_gauge_core.task_catalog import (
    DEFAULT_TASKS,
    DEFAULT_TOOLS,
    BenchmarkTask,
    PromptCase,
    load_task_catalog,
)


class TestDefaultCatalog:
    """Built-in tasks and tools"""

    def test_task_types(self):
        assert list(DEFAULT_TASKS) == ["factual", "reasoning", "coding", "creativity", "toolCalling"]

    def test_task_type_matches_key(self):
        for key, task in DEFAULT_TASKS.items():
            assert task.type == key
            assert task.prompts

    def test_only_tool_calling_requires_tools(self):
        assert [t.type for t in DEFAULT_TASKS.values() if t.requires_tools] == ["toolCalling"]

    def test_tool_calling_cases_reference_known_tools(self):
        tool_names = {tool.name for tool in DEFAULT_TOOLS}
        for case in DEFAULT_TASKS["toolCalling"].prompts:
            assert case.evaluation_method is EvaluationMethod.TOOL_CALL
            assert case.expected_tool in tool_names

    def test_tool_definition_wire_format(self):
        data = DEFAULT_TOOLS[0].to_dict()
        assert data["type"] == "function"
        assert data["function"]["name"] == "get_weather"
        assert data["function"]["parameters"]["required"] == ["location"]

    def test_prompt_case_is_immutable(self):
        case = DEFAULT_TASKS["factual"].prompts[0]
        with pytest.raises(AttributeError):
            case.prompt = "changed"


class TestLoadTaskCatalog:
    """Tests for load_task_catalog"""

    def _write(self, tmp_path, data):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def test_adds_new_task_type(self, tmp_path):
        path = self._write(tmp_path, {
            "tasks": {
                "geography": {
                    "name": "Geography",
                    "prompts": [
                        {"prompt": "Capital of Japan?", "evaluationMethod": "exactMatch", "expectedAnswer": "Tokyo"},
                    ],
                },
            },
        })

        tasks, tools = load_task_catalog(path)

        assert "geography" in tasks
        assert set(DEFAULT_TASKS) <= set(tasks)
        case = tasks["geography"].prompts[0]
        assert case == PromptCase("Capital of Japan?", EvaluationMethod.EXACT_MATCH, expected_answer="Tokyo")
        assert tools == DEFAULT_TOOLS

    def test_replaces_existing_task(self, tmp_path):
        path = self._write(tmp_path, {
            "tasks": {
                "factual": {
                    "name": "Short Factual",
                    "prompts": [{"prompt": "2+2?", "evaluation_method": "exactMatch", "expected_answer": "4"}],
                },
            },
        })

        tasks, _ = load_task_catalog(path)

        assert tasks["factual"].name == "Short Factual"
        assert len(tasks["factual"].prompts) == 1
        # built-in catalog untouched
        assert DEFAULT_TASKS["factual"].name == "Factual Knowledge"

    def test_tools_and_tool_tasks(self, tmp_path):
        path = self._write(tmp_path, {
            "tasks": {
                "email": {
                    "name": "Email",
                    "requires_tools": True,
                    "prompts": [{
                        "prompt": "Email Bob hello",
                        "evaluationMethod": "toolCallEvaluation",
                        "expectedTool": "send_email",
                        "expectedArgs": {"to": "Bob"},
                    }],
                },
            },
            "tools": [{
                "type": "function",
                "function": {"name": "send_email", "description": "Send an email", "parameters": {"type": "object"}},
            }],
        })

        tasks, tools = load_task_catalog(path)

        assert tasks["email"].requires_tools is True
        assert tasks["email"].prompts[0].expected_args == {"to": "Bob"}
        assert [t.name for t in tools] == ["get_weather", "calculator", "search", "send_email"]

    def test_invalid_evaluation_method(self, tmp_path):
        path = self._write(tmp_path, {
            "tasks": {"x": {"prompts": [{"prompt": "p", "evaluationMethod": "vibes"}]}},
        })
        with pytest.raises(ValueError, match="Invalid evaluation method: vibes"):
            load_task_catalog(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_task_catalog(tmp_path / "missing.json")

    def test_custom_base(self, tmp_path):
        path = self._write(tmp_path, {"tasks": {}})
        base = {"only": BenchmarkTask(type="only", name="Only", prompts=())}
        tasks, _ = load_task_catalog(path, base=base)
        assert list(tasks) == ["only"]
