"""
Core data models for the outdated-package check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from .versions import NuGetVersion


STATUS_IGNORED = "🔒"
STATUS_UP_TO_DATE = "✅"
STATUS_OUTDATED = "❌"


@dataclass(frozen=True)
class PackageReference:
    """One ``PackageReference`` declared in one project file."""

    package_id: str
    version: Optional[str]
    project: str
    path: Optional[Path] = None


@dataclass(frozen=True)
class IgnoreEntry:
    """A (project, package) pair exempted from failing the check."""

    project: str
    package: str

    def matches(self, project: str, package: str) -> bool:
        return (
            self.project.lower() == project.lower()
            and self.package.lower() == package.lower()
        )


class _CaseInsensitiveDict(dict):
    """Dict keyed by lower-cased strings."""

    def __setitem__(self, key: str, value) -> None:
        super().__setitem__(key.lower(), value)

    def __getitem__(self, key: str):
        return super().__getitem__(key.lower())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and super().__contains__(key.lower())

    def get(self, key: str, default=None):
        return super().get(key.lower(), default)


@dataclass
class CpmSettings:
    """Versions declared through central package management.

    ``global_versions`` maps package id to version; ``project_versions`` maps
    project name to its own package id to version table. Lookups on both are
    case-insensitive.
    """

    global_versions: Dict[str, str] = field(default_factory=_CaseInsensitiveDict)
    project_versions: Dict[str, Dict[str, str]] = field(default_factory=_CaseInsensitiveDict)

    def __post_init__(self) -> None:
        global_versions = _CaseInsensitiveDict()
        for package_id, version in self.global_versions.items():
            global_versions[package_id] = version
        self.global_versions = global_versions

        project_versions = _CaseInsensitiveDict()
        for project, versions in self.project_versions.items():
            table = _CaseInsensitiveDict()
            for package_id, version in versions.items():
                table[package_id] = version
            project_versions[project] = table
        self.project_versions = project_versions

    def set_global(self, package_id: str, version: str) -> None:
        self.global_versions[package_id] = version

    def set_project(self, project: str, package_id: str, version: str) -> None:
        if project not in self.project_versions:
            self.project_versions[project] = _CaseInsensitiveDict()
        self.project_versions[project][package_id] = version

    def project_version(self, project: str, package_id: str) -> Optional[str]:
        versions = self.project_versions.get(project)
        if versions is None:
            return None
        return versions.get(package_id)

    def global_version(self, package_id: str) -> Optional[str]:
        return self.global_versions.get(package_id)

    @property
    def is_empty(self) -> bool:
        return not self.global_versions and not self.project_versions


@dataclass(frozen=True)
class Found:
    """Registry lookup that produced a latest version."""

    version: NuGetVersion


@dataclass(frozen=True)
class NotFound:
    """Registry lookup that produced nothing usable."""

    reason: str = ""


LookupResult = Union[Found, NotFound]


@dataclass(frozen=True)
class PackageResult:
    """One row of the outdated-package report."""

    project: str
    package: str
    current_version: str
    latest_version: str
    is_up_to_date: bool
    is_ignored: bool

    @property
    def status(self) -> str:
        if self.is_ignored:
            return STATUS_IGNORED
        return STATUS_UP_TO_DATE if self.is_up_to_date else STATUS_OUTDATED

    @property
    def is_failure(self) -> bool:
        return not self.is_up_to_date and not self.is_ignored
