"""
Domain Entities

Defines the result structures produced by a benchmark run, and their
dictionary form used for persistence.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from bench_gauge_core.domain.value_objects import BackendConfig, ToolCall


def _tool_calls_to_list(tool_calls: tuple[ToolCall, ...] | None) -> list[dict] | None:
    if tool_calls is None:
        return None
    return [tc.to_dict() for tc in tool_calls]


def _tool_calls_from_list(data: list[dict] | None) -> tuple[ToolCall, ...] | None:
    if data is None:
        return None
    return tuple(ToolCall.from_dict(tc) for tc in data)


@dataclass(frozen=True)
class PromptResult:
    """Outcome of a single prompt"""
    prompt: str
    response_time_ms: int
    content: str
    tool_calls: tuple[ToolCall, ...] | None
    score: float
    evaluation_details: dict
    error: str | None
    timestamp: str
    output_tokens: int = 0

    def to_dict(self) -> dict:
        return {
            "prompt": self.prompt,
            "response_time_ms": self.response_time_ms,
            "content": self.content,
            "tool_calls": _tool_calls_to_list(self.tool_calls),
            "score": self.score,
            "evaluation_details": self.evaluation_details,
            "error": self.error,
            "timestamp": self.timestamp,
            "output_tokens": self.output_tokens,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PromptResult":
        return cls(
            prompt=data["prompt"],
            response_time_ms=data["response_time_ms"],
            content=data.get("content", ""),
            tool_calls=_tool_calls_from_list(data.get("tool_calls")),
            score=data["score"],
            evaluation_details=data.get("evaluation_details", {}),
            error=data.get("error"),
            timestamp=data["timestamp"],
            output_tokens=data.get("output_tokens", 0),
        )


@dataclass
class TaskResult:
    """Aggregate over one task's prompts"""
    type: str
    name: str
    prompts: list[PromptResult]
    average_score: float = 0.0
    average_response_time: float = 0.0
    total_tokens: int = 0
    tokens_per_second: float = 0.0

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "name": self.name,
            "prompts": [p.to_dict() for p in self.prompts],
            "average_score": self.average_score,
            "average_response_time": self.average_response_time,
            "total_tokens": self.total_tokens,
            "tokens_per_second": self.tokens_per_second,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TaskResult":
        return cls(
            type=data["type"],
            name=data["name"],
            prompts=[PromptResult.from_dict(p) for p in data.get("prompts", [])],
            average_score=data.get("average_score", 0.0),
            average_response_time=data.get("average_response_time", 0.0),
            total_tokens=data.get("total_tokens", 0),
            tokens_per_second=data.get("tokens_per_second", 0.0),
        )


@dataclass
class ToolCallingCaseResult:
    """Per-case detail of the tool-calling sub-benchmark"""
    prompt: str
    expected_tool: str | None
    expected_args: dict | None
    actual_tool_calls: tuple[ToolCall, ...] | None
    score: float
    success: bool
    response_time_ms: int
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "prompt": self.prompt,
            "expected_tool": self.expected_tool,
            "expected_args": self.expected_args,
            "actual_tool_calls": _tool_calls_to_list(self.actual_tool_calls),
            "score": self.score,
            "success": self.success,
            "response_time_ms": self.response_time_ms,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ToolCallingCaseResult":
        return cls(
            prompt=data["prompt"],
            expected_tool=data.get("expected_tool"),
            expected_args=data.get("expected_args"),
            actual_tool_calls=_tool_calls_from_list(data.get("actual_tool_calls")),
            score=data["score"],
            success=data["success"],
            response_time_ms=data["response_time_ms"],
            error=data.get("error"),
        )


@dataclass
class ToolCallingSubBenchmark:
    """Focused metrics over the tool-calling cases"""
    success_rate: float = 0.0
    accuracy: float = 0.0
    average_response_time: float = 0.0
    average_score: float = 0.0
    test_cases: list[ToolCallingCaseResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success_rate": self.success_rate,
            "accuracy": self.accuracy,
            "average_response_time": self.average_response_time,
            "average_score": self.average_score,
            "test_cases": [tc.to_dict() for tc in self.test_cases],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ToolCallingSubBenchmark":
        return cls(
            success_rate=data.get("success_rate", 0.0),
            accuracy=data.get("accuracy", 0.0),
            average_response_time=data.get("average_response_time", 0.0),
            average_score=data.get("average_score", 0.0),
            test_cases=[ToolCallingCaseResult.from_dict(tc) for tc in data.get("test_cases", [])],
        )


@dataclass(frozen=True)
class BenchmarkRun:
    """A complete benchmark invocation, persisted as one history entry"""
    config: BackendConfig
    start_time: datetime
    end_time: datetime
    total_duration_ms: int
    tasks: list[TaskResult]
    overall_score: float
    summary: dict
    tool_calling: ToolCallingSubBenchmark | None = None
    id: str | None = None

    def with_id(self, run_id: str) -> "BenchmarkRun":
        return replace(self, id=run_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "config": self.config.to_dict(),
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "total_duration_ms": self.total_duration_ms,
            "tasks": [t.to_dict() for t in self.tasks],
            "overall_score": self.overall_score,
            "summary": self.summary,
            "tool_calling": self.tool_calling.to_dict() if self.tool_calling else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BenchmarkRun":
        tool_calling = data.get("tool_calling")
        return cls(
            config=BackendConfig.from_dict(data["config"]),
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]),
            total_duration_ms=data["total_duration_ms"],
            tasks=[TaskResult.from_dict(t) for t in data.get("tasks", [])],
            overall_score=data["overall_score"],
            summary=data.get("summary", {}),
            tool_calling=ToolCallingSubBenchmark.from_dict(tool_calling) if tool_calling else None,
            id=data.get("id"),
        )


@dataclass
class HealthCheckResult:
    """Health check result"""
    base_url: str
    model: str
    success: bool
    latency_ms: int | None
    error: str | None
