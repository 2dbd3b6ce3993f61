"""
Interfaces for the registry lookup and the warning side-channel.
"""

from __future__ import annotations

from typing import Protocol

from .models import LookupResult


class VersionLookup(Protocol):
    """Find the latest published version of a package."""

    def get_latest_version(self, package_id: str, include_prerelease: bool) -> LookupResult:
        ...


class WarningSink(Protocol):
    """Receive diagnostics that must not abort the run.

    A :class:`logging.Logger` satisfies this protocol.
    """

    def warning(self, msg: str, *args) -> None:
        ...
