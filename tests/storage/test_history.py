"""
Tests for the run history and key-value stores
"""

import json
from datetime import datetime

import pytest

from bench_gauge_core.domain.entities import BenchmarkRun
from bench_gauge_core.domain.value_objects import BackendConfig
from bench_gauge_core.storage.history import RunHistoryStore
from bench_gauge_core.storage.key_value import InMemoryKeyValueStore, JsonFileKeyValueStore


def _run(model="m"):
    return BenchmarkRun(
        config=BackendConfig(model=model),
        start_time=datetime(2026, 1, 1, 12, 0, 0),
        end_time=datetime(2026, 1, 1, 12, 0, 1),
        total_duration_ms=1000,
        tasks=[],
        overall_score=0.0,
        summary={},
    )


class _FixedClock:
    """Returns the same millisecond timestamp on every call"""

    def __call__(self):
        return 1_700_000_000_000


class TestRunHistoryStore:
    def test_save_assigns_id(self):
        history = RunHistoryStore(InMemoryKeyValueStore(), clock_ms=_FixedClock())
        saved = history.save(_run())
        assert saved.id == "benchmark-1700000000000"

    def test_ids_unique_within_same_millisecond(self):
        history = RunHistoryStore(InMemoryKeyValueStore(), clock_ms=_FixedClock())
        ids = [history.save(_run()).id for _ in range(3)]
        assert len(set(ids)) == 3

    def test_most_recent_first(self):
        history = RunHistoryStore(InMemoryKeyValueStore())
        history.save(_run("first"))
        history.save(_run("second"))
        assert [r.config.model for r in history.list()] == ["second", "first"]

    def test_bounded_to_20(self):
        history = RunHistoryStore(InMemoryKeyValueStore())
        for i in range(21):
            history.save(_run(f"model-{i}"))

        runs = history.list()

        assert len(runs) == 20
        assert runs[0].config.model == "model-20"
        assert runs[-1].config.model == "model-1"
        assert "model-0" not in {r.config.model for r in runs}

    def test_clear_then_list_is_empty(self):
        history = RunHistoryStore(InMemoryKeyValueStore())
        history.save(_run())
        assert history.clear() is True
        assert history.list() == []
        # idempotent
        assert history.clear() is True
        assert history.list() == []

    def test_corrupt_data_yields_empty_list(self):
        store = InMemoryKeyValueStore()
        store.set("benchmark_history", "{not json")
        assert RunHistoryStore(store).list() == []

    def test_non_list_data_yields_empty_list(self):
        store = InMemoryKeyValueStore()
        store.set("benchmark_history", json.dumps({"runs": []}))
        assert RunHistoryStore(store).list() == []

    def test_unreadable_entry_skipped(self):
        store = InMemoryKeyValueStore()
        history = RunHistoryStore(store)
        history.save(_run("good"))
        entries = json.loads(store.get("benchmark_history"))
        store.set("benchmark_history", json.dumps([{"id": "broken"}, *entries]))

        assert [r.config.model for r in history.list()] == ["good"]

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            RunHistoryStore(InMemoryKeyValueStore(), limit=0)


class TestJsonFileKeyValueStore:
    def test_missing_file_reads_none(self, tmp_path):
        assert JsonFileKeyValueStore(tmp_path / "kv.json").get("k") is None

    def test_set_get_delete(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "nested" / "kv.json")
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == "2"
        assert list(tmp_path.joinpath("nested").iterdir()) == [tmp_path / "nested" / "kv.json"]

    def test_history_survives_new_instance(self, tmp_path):
        path = tmp_path / "history.json"
        RunHistoryStore(JsonFileKeyValueStore(path)).save(_run("persisted"))

        runs = RunHistoryStore(JsonFileKeyValueStore(path)).list()

        assert [r.config.model for r in runs] == ["persisted"]

    def test_truncated_file_degrades_to_empty(self, tmp_path):
        """壊れたファイルでも一覧は空になり、保存は成功する"""
        path = tmp_path / "history.json"
        path.write_text("{truncated", encoding="utf-8")
        history = RunHistoryStore(JsonFileKeyValueStore(path))

        assert history.list() == []

        saved = history.save(_run("after-corruption"))

        assert saved.id is not None
        assert [r.config.model for r in history.list()] == ["after-corruption"]

    def test_non_object_file_degrades_to_empty(self, tmp_path):
        path = tmp_path / "kv.json"
        path.write_text(json.dumps(["not", "an", "object"]), encoding="utf-8")
        store = JsonFileKeyValueStore(path)

        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"
