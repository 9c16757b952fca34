"""
Backend adapter base class

Defines the abstract base class implemented by every protocol adapter.
"""

from abc import ABC, abstractmethod

from bench_gauge_core.task_catalog import ToolDefinition


def normalize_base_url(base_url: str) -> str:
    """Prepend http:// when no scheme is given and strip trailing slashes"""
    url = base_url.strip()
    if not url.startswith(("http://", "https://")):
        url = f"http://{url}"
    return url.rstrip("/")


class BackendAdapter(ABC):
    """Abstract base class for backend adapters"""

    @abstractmethod
    def send(self, prompt: str, tools: list[ToolDefinition] | None = None) -> dict:
        """Send a single user prompt and return the raw reply body"""
        pass

    def close(self) -> None:
        """Release connections the adapter opened itself"""
        pass
