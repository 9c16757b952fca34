"""
Storage sub-package

Provides the run history and the key-value stores it persists to.
"""

from bench_gauge_core.storage.history import RunHistoryStore
from bench_gauge_core.storage.key_value import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "RunHistoryStore",
]
