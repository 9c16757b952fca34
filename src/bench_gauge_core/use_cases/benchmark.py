"""
Benchmark Execution

Drives prompts through a backend one at a time, scores the replies and
aggregates them into a persisted BenchmarkRun.
"""

from __future__ import annotations

import logging
import math
import time
from datetime import datetime
from functools import partial
from typing import Callable, Iterable

import httpx

from bench_gauge_core.domain.constants import (
    CHARS_PER_TOKEN,
    DEFAULT_TASK_WEIGHT,
    DEFAULT_TIMEOUT_SECONDS,
    TASK_WEIGHTS,
    TOOL_CALL_SUCCESS_THRESHOLD,
    TOOL_CALLING_TASK_TYPE,
)
from bench_gauge_core.domain.entities import (
    BenchmarkRun,
    PromptResult,
    TaskResult,
    ToolCallingCaseResult,
    ToolCallingSubBenchmark,
)
from bench_gauge_core.domain.value_objects import BackendConfig
from bench_gauge_core.extraction import extract_response
from bench_gauge_core.infrastructure.backends.base import BackendAdapter
from bench_gauge_core.infrastructure.backends.factory import create_adapter
from bench_gauge_core.scoring.scorer import evaluate
from bench_gauge_core.storage.history import RunHistoryStore
from bench_gauge_core.storage.key_value import InMemoryKeyValueStore
from bench_gauge_core.task_catalog import (
    DEFAULT_TASKS,
    DEFAULT_TOOLS,
    BenchmarkTask,
    PromptCase,
    ToolDefinition,
)

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[BackendConfig], BackendAdapter]


def estimate_token_count(text: str) -> int:
    """Rough token estimate (1 token ~ 4 characters)"""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calculate_overall_score(task_results: Iterable[TaskResult]) -> float:
    """
    Weight-normalized average of task scores

    overall = sum(avg_score_t * weight_t) / sum(weight_t), with unknown task
    types weighted DEFAULT_TASK_WEIGHT.

    Args:
        task_results: Task results to combine

    Returns:
        Overall score (0.0 when there are no tasks)
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for task in task_results:
        weight = TASK_WEIGHTS.get(task.type, DEFAULT_TASK_WEIGHT)
        weighted_sum += task.average_score * weight
        total_weight += weight
    return weighted_sum / total_weight if total_weight > 0 else 0.0


def build_summary(
    task_results: list[TaskResult],
    overall_score: float,
    total_duration_ms: int,
    tool_calling: ToolCallingSubBenchmark | None = None,
) -> dict:
    """Build the run-level summary"""
    total_tokens = sum(t.total_tokens for t in task_results)
    total_time_s = sum(p.response_time_ms for t in task_results for p in t.prompts) / 1000

    summary = {
        "total_prompts": sum(len(t.prompts) for t in task_results),
        "average_score": _round_half_up(overall_score, 1),
        "average_response_time_ms": int(_round_half_up(_mean([t.average_response_time for t in task_results]))),
        "total_duration_seconds": _round_half_up(total_duration_ms / 1000, 1),
        "total_tokens_generated": total_tokens,
        "average_tokens_per_second": _round_half_up(total_tokens / total_time_s, 1) if total_time_s > 0 else 0.0,
    }
    if tool_calling is not None:
        summary["tool_calling"] = {
            "accuracy": tool_calling.accuracy,
            "response_time": tool_calling.average_response_time,
            "success_rate": tool_calling.success_rate,
            "average_score": tool_calling.average_score,
        }
    return summary


class BenchmarkOrchestrator:
    """Runs benchmarks against a backend and keeps their history"""

    def __init__(
        self,
        history: RunHistoryStore | None = None,
        tasks: dict[str, BenchmarkTask] | None = None,
        tools: Iterable[ToolDefinition] = DEFAULT_TOOLS,
        adapter_factory: AdapterFactory | None = None,
        http_client: httpx.Client | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        api_key: str = "lm-studio",
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            history: Run history store (in-memory when not provided)
            tasks: Task catalog (defaults to DEFAULT_TASKS)
            tools: Tool definitions offered on tool-calling prompts
            adapter_factory: Builds the adapter for a config (defaults to create_adapter)
            http_client: httpx client handed to the default adapter factory
            timeout_seconds: Per-call timeout for the default adapter factory
            api_key: API key for OpenAI-style servers
            clock: Source of run start/end times
        """
        self.history = history or RunHistoryStore(InMemoryKeyValueStore())
        self.tasks = dict(DEFAULT_TASKS if tasks is None else tasks)
        self.tools = list(tools)
        self.adapter_factory = adapter_factory or partial(
            create_adapter,
            http_client=http_client,
            timeout_seconds=timeout_seconds,
            api_key=api_key,
        )
        self._clock = clock

    def select_tasks(self, config: BackendConfig) -> list[BenchmarkTask]:
        """Return the configured tasks present in the catalog, in request order"""
        selected = []
        for task_type in config.task_types:
            task = self.tasks.get(task_type)
            if task is None:
                logger.warning("Skipping unknown task type: %s", task_type)
                continue
            selected.append(task)
        return selected

    def run_prompt(
        self,
        adapter: BackendAdapter,
        case: PromptCase,
        tools: list[ToolDefinition] | None = None,
    ) -> PromptResult:
        """
        Send one prompt, then extract and score the reply

        Runtime failures are recorded on the result (score 0) instead of raised.
        """
        content = ""
        tool_calls = None
        score = 0.0
        details: dict = {}
        error = None
        response_time_ms = None

        start_time = time.time()
        try:
            body = adapter.send(case.prompt, tools)
            response_time_ms = int((time.time() - start_time) * 1000)
            content, tool_calls = extract_response(body)
            result = evaluate(case, content, tool_calls)
            score, details = result.score, result.details
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning("Error in prompt test (%s...): %s", case.prompt[:30], error)
        if response_time_ms is None:
            response_time_ms = int((time.time() - start_time) * 1000)

        return PromptResult(
            prompt=case.prompt,
            response_time_ms=response_time_ms,
            content=content,
            tool_calls=tuple(tool_calls) if tool_calls else None,
            score=score,
            evaluation_details=details,
            error=error,
            timestamp=datetime.now().isoformat(),
            output_tokens=estimate_token_count(content),
        )

    def run_task(self, adapter: BackendAdapter, task: BenchmarkTask, max_prompts: int) -> TaskResult:
        """Run the first max_prompts cases of a task and aggregate them"""
        logger.info("Running %s task...", task.name)
        tools = self.tools if task.requires_tools else None
        prompts = [self.run_prompt(adapter, case, tools) for case in task.prompts[:max_prompts]]

        total_tokens = sum(p.output_tokens for p in prompts)
        total_time_s = sum(p.response_time_ms for p in prompts) / 1000
        return TaskResult(
            type=task.type,
            name=task.name,
            prompts=prompts,
            average_score=_mean([p.score for p in prompts]),
            average_response_time=_mean([p.response_time_ms for p in prompts]),
            total_tokens=total_tokens,
            tokens_per_second=total_tokens / total_time_s if total_time_s > 0 else 0.0,
        )

    def run_tool_calling_benchmark(self, adapter: BackendAdapter) -> ToolCallingSubBenchmark | None:
        """
        Run every tool-calling case with the tool definitions attached

        Returns:
            ToolCallingSubBenchmark, or None when the catalog has no tool-calling task
        """
        task = self.tasks.get(TOOL_CALLING_TASK_TYPE)
        if task is None:
            return None

        cases = []
        for case in task.prompts:
            result = self.run_prompt(adapter, case, self.tools)
            cases.append(ToolCallingCaseResult(
                prompt=case.prompt,
                expected_tool=case.expected_tool,
                expected_args=case.expected_args,
                actual_tool_calls=result.tool_calls,
                score=result.score,
                success=result.score >= TOOL_CALL_SUCCESS_THRESHOLD,
                response_time_ms=result.response_time_ms,
                error=result.error,
            ))

        success_rate = _mean([1.0 if c.success else 0.0 for c in cases])
        return ToolCallingSubBenchmark(
            success_rate=success_rate,
            accuracy=success_rate,
            average_response_time=_mean([c.response_time_ms for c in cases]),
            average_score=_mean([c.score for c in cases]),
            test_cases=cases,
        )

    def run_benchmark(self, config: BackendConfig) -> BenchmarkRun:
        """
        Run a complete benchmark and persist it

        Args:
            config: BackendConfig for this run

        Returns:
            The persisted BenchmarkRun (with its id)

        Raises:
            UnsupportedServerTypeError: If config.server_type is not supported
        """
        # Misconfiguration aborts before any prompt is sent
        adapter = self.adapter_factory(config)
        logger.info("Starting benchmark for %s (%s)", config.model, config.server_type)

        try:
            start_time = self._clock()
            task_results = [
                self.run_task(adapter, task, config.max_prompts)
                for task in self.select_tasks(config)
            ]
            tool_calling = self.run_tool_calling_benchmark(adapter) if config.include_tool_calling else None
            end_time = self._clock()
        finally:
            adapter.close()

        total_duration_ms = int((end_time - start_time).total_seconds() * 1000)
        overall_score = calculate_overall_score(task_results)
        run = BenchmarkRun(
            config=config,
            start_time=start_time,
            end_time=end_time,
            total_duration_ms=total_duration_ms,
            tasks=task_results,
            overall_score=overall_score,
            summary=build_summary(task_results, overall_score, total_duration_ms, tool_calling),
            tool_calling=tool_calling,
        )
        return self.history.save(run)

    def get_benchmark_history(self) -> list[BenchmarkRun]:
        """Return persisted runs, most recent first"""
        return self.history.list()

    def clear_benchmark_history(self) -> bool:
        """Remove all persisted runs"""
        return self.history.clear()
