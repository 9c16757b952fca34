"""
bench-gauge-core CLI Runner

Minimal CLI for benchmarking a local inference backend.

Usage:
    python -m bench_gauge_core.runner run --base-url localhost:1234 --model qwen2.5-7b --task-types factual,reasoning
    python -m bench_gauge_core.runner run --server-type native --base-url localhost:11434 --model llama3.1

Inspect or reset the run history:
    python -m bench_gauge_core.runner history
    python -m bench_gauge_core.runner clear
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import httpx
import pandas as pd
from dotenv import load_dotenv

from bench_gauge_core.domain.entities import BenchmarkRun
from bench_gauge_core.domain.value_objects import UnsupportedServerTypeError
from bench_gauge_core.harness_config import HarnessConfig, load_config
from bench_gauge_core.storage.history import RunHistoryStore
from bench_gauge_core.storage.key_value import JsonFileKeyValueStore
from bench_gauge_core.task_catalog import DEFAULT_TASKS, DEFAULT_TOOLS, load_task_catalog
from bench_gauge_core.use_cases.benchmark import BenchmarkOrchestrator
from bench_gauge_core.use_cases.health_check import health_check_backend


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="bench-gauge-core: Benchmark response quality of local LLM backends",
    )
    parser.add_argument(
        "--history-path",
        default=None,
        help="Path to the run history file (default: BENCH_HISTORY_PATH from .env)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run a benchmark")
    run.add_argument("--server-type", default=None, help="openai-style or native")
    run.add_argument("--base-url", default=None, help="Backend address, e.g. localhost:1234")
    run.add_argument("--model", default=None, help="Model id")
    run.add_argument(
        "--task-types",
        default=None,
        help=f"Comma-separated task types (available: {','.join(DEFAULT_TASKS)})",
    )
    run.add_argument("--max-prompts", type=int, default=None, help="Maximum prompts per task")
    run.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    run.add_argument("--max-tokens", type=int, default=None, help="Maximum tokens per reply")
    run.add_argument(
        "--no-tool-calling",
        action="store_true",
        help="Skip the tool-calling sub-benchmark",
    )
    run.add_argument("--task-catalog", default=None, help="JSON file extending the task catalog")
    run.add_argument(
        "--skip-health-check",
        action="store_true",
        help="Do not probe the backend before running",
    )
    run.add_argument(
        "--output-dir",
        default="results",
        help="Directory for the per-prompt CSV export (default: results)",
    )

    subparsers.add_parser("history", help="List stored runs")
    subparsers.add_parser("clear", help="Remove all stored runs")
    return parser.parse_args(argv)


def _prompt_rows(run: BenchmarkRun) -> list[dict]:
    """Flatten a run into one row per prompt"""
    rows = []
    for task in run.tasks:
        for prompt in task.prompts:
            rows.append({
                "run_id": run.id,
                "model": run.config.model,
                "server_type": run.config.server_type,
                "task_type": task.type,
                "prompt": prompt.prompt,
                "score": prompt.score,
                "response_time_ms": prompt.response_time_ms,
                "output_tokens": prompt.output_tokens,
                "tool_calls": len(prompt.tool_calls) if prompt.tool_calls else 0,
                "error": prompt.error or "",
                "content": prompt.content,
                "timestamp": prompt.timestamp,
            })
    return rows


def _save_prompt_results(run: BenchmarkRun, path: Path) -> None:
    """Save per-prompt results to CSV."""
    df = pd.DataFrame(_prompt_rows(run))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def _print_run(run: BenchmarkRun) -> None:
    print(f"=== Results: {run.config.model} ({run.config.server_type}) ===\n")
    print(f"  {'Task':<25} {'Prompts':>8} {'Avg score':>10} {'Avg ms':>9} {'Tok/s':>7}")
    print(f"  {'-'*25} {'-'*8} {'-'*10} {'-'*9} {'-'*7}")
    for task in run.tasks:
        print(
            f"  {task.name:<25} "
            f"{len(task.prompts):>8} "
            f"{task.average_score:>10.1f} "
            f"{task.average_response_time:>9.0f} "
            f"{task.tokens_per_second:>7.1f}"
        )
        for prompt in task.prompts:
            if prompt.error:
                print(f"    ERROR: {prompt.prompt[:40]}... {prompt.error[:100]}")
    print()

    summary = run.summary
    print("=== Summary ===\n")
    print(f"  Overall score:      {summary.get('average_score', 0.0)}")
    print(f"  Prompts:            {summary.get('total_prompts', 0)}")
    print(f"  Avg response time:  {summary.get('average_response_time_ms', 0)}ms")
    print(f"  Tokens/s:           {summary.get('average_tokens_per_second', 0.0)}")
    print(f"  Duration:           {summary.get('total_duration_seconds', 0.0)}s")
    if "tool_calling" in summary:
        tc = summary["tool_calling"]
        print(
            f"  Tool calling:       success {tc['success_rate']:.0%} | "
            f"avg score {tc['average_score']:.1f} | avg {tc['response_time']:.0f}ms"
        )
    print()


def _make_http_client() -> httpx.Client:
    return httpx.Client()


def _history_store(config: HarnessConfig, history_path: str | None) -> RunHistoryStore:
    return RunHistoryStore(JsonFileKeyValueStore(history_path or config.history.path))


def _run(args: argparse.Namespace, config: HarnessConfig) -> int:
    task_types = [t.strip() for t in args.task_types.split(",")] if args.task_types else None
    try:
        backend_config = config.to_backend_config(
            server_type=args.server_type,
            base_url=args.base_url,
            model=args.model,
            task_types=task_types,
            max_prompts=args.max_prompts,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            include_tool_calling=False if args.no_tool_calling else None,
        )
    except ValueError as e:
        print(f"ERROR: Invalid backend configuration: {e}")
        return 2

    tasks, tools = DEFAULT_TASKS, DEFAULT_TOOLS
    catalog_path = args.task_catalog or config.history.task_catalog_path
    if catalog_path:
        tasks, tools = load_task_catalog(catalog_path)

    print(f"\n=== Benchmark: {backend_config.model} @ {backend_config.base_url} ===\n")
    print(f"  Server type: {backend_config.server_type}")
    print(f"  Tasks: {backend_config.task_types}")
    print(f"  Max prompts: {backend_config.max_prompts}")
    print(f"  Tool calling: {backend_config.include_tool_calling}")
    print()

    with _make_http_client() as http_client:
        orchestrator = BenchmarkOrchestrator(
            history=_history_store(config, args.history_path),
            tasks=tasks,
            tools=tools,
            http_client=http_client,
            timeout_seconds=config.request.timeout_seconds,
            api_key=config.request.api_key,
        )

        try:
            if not args.skip_health_check:
                print("=== Backend Health Check ===\n")
                print(f"  {backend_config.base_url}... ", end="", flush=True)
                result = health_check_backend(backend_config, orchestrator.adapter_factory)
                if not result.success:
                    print("FAILED")
                    print(f"    Error: {(result.error or 'Unknown error')[:100]}")
                    print("\nERROR: Backend is not available. Exiting.")
                    return 1
                print(f"OK ({result.latency_ms}ms)\n")

            run = orchestrator.run_benchmark(backend_config)
        except UnsupportedServerTypeError as e:
            print(f"ERROR: {e}")
            return 2

    _print_run(run)

    csv_path = Path(args.output_dir) / f"prompt_results_{run.id}.csv"
    _save_prompt_results(run, csv_path)
    print("=== Output ===\n")
    print(f"  Run ID:         {run.id}")
    print(f"  Prompt results: {csv_path}")
    print()
    return 0


def _history(args: argparse.Namespace, config: HarnessConfig) -> int:
    runs = _history_store(config, args.history_path).list()
    if not runs:
        print("No benchmark runs stored.")
        return 0

    df = pd.DataFrame([
        {
            "id": run.id,
            "model": run.config.model,
            "server_type": run.config.server_type,
            "tasks": ",".join(t.type for t in run.tasks),
            "score": run.summary.get("average_score", round(run.overall_score, 1)),
            "prompts": run.summary.get("total_prompts", 0),
            "duration_s": run.summary.get("total_duration_seconds", 0.0),
            "finished": run.end_time.isoformat(timespec="seconds"),
        }
        for run in runs
    ])
    print(df.to_string(index=False))
    return 0


def _clear(args: argparse.Namespace, config: HarnessConfig) -> int:
    _history_store(config, args.history_path).clear()
    print("Benchmark history cleared.")
    return 0


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="  %(message)s")

    config = load_config()
    commands = {"run": _run, "history": _history, "clear": _clear}
    return commands[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
