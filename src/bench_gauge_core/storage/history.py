"""
Run history

Keeps the most recent benchmark runs, newest first, in a key-value store.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable

from bench_gauge_core.domain.constants import HISTORY_KEY, HISTORY_LIMIT
from bench_gauge_core.domain.entities import BenchmarkRun
from bench_gauge_core.storage.key_value import KeyValueStore

logger = logging.getLogger(__name__)


class RunHistoryStore:
    """Bounded, most-recent-first history of completed runs"""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = HISTORY_KEY,
        limit: int = HISTORY_LIMIT,
        clock_ms: Callable[[], int] | None = None,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.store = store
        self.key = key
        self.limit = limit
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))
        self._last_id_ms = 0

    def _next_id(self) -> str:
        # Timestamp-based, bumped so ids stay unique within a process
        stamp = max(self._clock_ms(), self._last_id_ms + 1)
        self._last_id_ms = stamp
        return f"benchmark-{stamp}"

    def _load_raw(self) -> list[dict]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Failed to load benchmark history: %s", e)
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring benchmark history of unexpected type: %s", type(data).__name__)
            return []
        return data

    def save(self, run: BenchmarkRun) -> BenchmarkRun:
        """
        Persist a run at the head of the history

        Args:
            run: Completed run

        Returns:
            The run with its assigned id
        """
        saved = run.with_id(self._next_id())
        history = [saved.to_dict(), *self._load_raw()][: self.limit]
        self.store.set(self.key, json.dumps(history, ensure_ascii=False))
        logger.info("Saved benchmark results with ID: %s", saved.id)
        return saved

    def list(self) -> list[BenchmarkRun]:
        """Return stored runs, most recent first"""
        runs = []
        for entry in self._load_raw():
            try:
                runs.append(BenchmarkRun.from_dict(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable history entry: %s", e)
        return runs

    def clear(self) -> bool:
        """Remove every stored run"""
        self.store.delete(self.key)
        return True
