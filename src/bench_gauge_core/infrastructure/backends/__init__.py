"""
Backend adapter package

Provides a unified request/response call over the supported wire protocols.
"""

from bench_gauge_core.infrastructure.backends.base import BackendAdapter, normalize_base_url
from bench_gauge_core.infrastructure.backends.factory import create_adapter

__all__ = ["BackendAdapter", "create_adapter", "normalize_base_url"]
