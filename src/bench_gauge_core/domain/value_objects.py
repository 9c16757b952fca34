"""
Domain Value Objects

Defines immutable data structures such as backend configuration,
tool calls, and scoring results.
"""

import json
from dataclasses import dataclass, field
from enum import Enum


class ServerType(str, Enum):
    """Wire protocol spoken by the benchmarked backend"""
    OPENAI_STYLE = "openai-style"
    NATIVE = "native"

    @classmethod
    def parse(cls, value: "str | ServerType") -> "ServerType":
        """
        Resolve a server type tag, accepting legacy aliases

        Raises:
            UnsupportedServerTypeError: If the tag is not recognized
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        resolved = _SERVER_TYPE_ALIASES.get(key.lower())
        if resolved is None:
            raise UnsupportedServerTypeError(f"Unsupported server type: {value}")
        return resolved


_SERVER_TYPE_ALIASES = {
    "openai-style": ServerType.OPENAI_STYLE,
    "openai": ServerType.OPENAI_STYLE,
    "lmstudio": ServerType.OPENAI_STYLE,
    "native": ServerType.NATIVE,
    "ollama": ServerType.NATIVE,
}


class UnsupportedServerTypeError(ValueError):
    """Raised when a BackendConfig names a protocol no adapter speaks"""
    pass


class EvaluationMethod(str, Enum):
    """Scoring rule applied to a prompt case"""
    EXACT_MATCH = "exactMatch"
    LOGICAL_ANALYSIS = "logicalAnalysis"
    CODE = "codeEvaluation"
    SQL = "sqlEvaluation"
    CREATIVITY = "creativityEvaluation"
    TOOL_CALL = "toolCallEvaluation"


@dataclass(frozen=True)
class ToolCall:
    """A function invocation extracted from a model reply"""
    name: str
    arguments: str = "{}"  # JSON-encoded
    id: str | None = None

    def to_dict(self) -> dict:
        data = {"type": "function", "function": {"name": self.name, "arguments": self.arguments}}
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ToolCall":
        """Build from an OpenAI-style tool call entry (arguments may be a string or object)"""
        function = data.get("function") or {}
        arguments = function.get("arguments")
        if arguments is None:
            arguments = "{}"
        elif not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        return cls(
            name=function.get("name") or "unknown_function",
            arguments=arguments,
            id=data.get("id"),
        )


@dataclass
class ScoringResult:
    """Scoring result (score + evaluation details)"""

    score: float
    details: dict = field(default_factory=dict)


@dataclass
class BackendConfig:
    """Parameters of a single benchmark invocation"""
    server_type: str = ServerType.OPENAI_STYLE.value
    base_url: str = "http://localhost:1234"
    model: str = "unknown"
    temperature: float = 0.7
    max_tokens: int = 256
    task_types: list[str] = field(default_factory=lambda: ["factual"])
    max_prompts: int = 3
    include_tool_calling: bool = True

    def __post_init__(self):
        if self.max_prompts < 1:
            raise ValueError("max_prompts must be at least 1")
        if self.max_tokens < 1:
            raise ValueError("max_tokens must be at least 1")
        if not self.base_url:
            raise ValueError("base_url must not be empty")

    def to_dict(self) -> dict:
        return {
            "server_type": str(getattr(self.server_type, "value", self.server_type)),
            "base_url": self.base_url,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "task_types": list(self.task_types),
            "max_prompts": self.max_prompts,
            "include_tool_calling": self.include_tool_calling,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BackendConfig":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
