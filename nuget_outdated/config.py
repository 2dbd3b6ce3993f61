"""
Runtime settings for a check run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import __version__


DEFAULT_REGISTRY_URL = "https://api.nuget.org/v3-flatcontainer/{package_id}/index.json"


@dataclass(frozen=True)
class CheckerConfig:
    """Settings shared by the checker and the registry client.

    Args:
        registry_url: URL template with a ``{package_id}`` placeholder that
            receives the lower-cased package id
        timeout: HTTP timeout in seconds per request
        retries: Attempts per lookup on connection errors and timeouts
        backoff: Delay in seconds before the first retry, doubled after each
        max_workers: Thread pool size for project files (``None`` lets
            ``concurrent.futures`` pick)
        show_progress: Show a progress bar while project files are checked
    """

    registry_url: str = DEFAULT_REGISTRY_URL
    timeout: float = 30.0
    retries: int = 3
    backoff: float = 1.0
    max_workers: Optional[int] = None
    show_progress: bool = False
    user_agent: str = f"nuget-outdated/{__version__}"

    def package_index_url(self, package_id: str) -> str:
        return self.registry_url.format(package_id=package_id.lower())
