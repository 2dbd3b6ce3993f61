"""
NuGet version parsing and ordering.

NuGet versions are SemVer 2.0 with two relaxations: the numeric part may have
between one and four components (``1``, ``1.2``, ``1.2.3``, ``1.2.3.4``), and
missing components are treated as zero. Prerelease labels compare the SemVer
way, except that alphanumeric labels compare case-insensitively.

Parsing and ordering are delegated to ``semver``; this module only peels off
the fourth (revision) component that SemVer does not have.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import Optional, Tuple

import semver

from .exceptions import VersionParseError


_REVISION_RE = re.compile(r"[0-9]+")


def _split_revision(text: str) -> Tuple[str, int]:
    """Remove a fourth numeric component, returning a SemVer string and it."""
    end = len(text)
    for separator in ("-", "+"):
        index = text.find(separator)
        if index != -1:
            end = min(end, index)
    core, rest = text[:end], text[end:]

    parts = core.split(".")
    if len(parts) != 4:
        return text, 0
    if not _REVISION_RE.fullmatch(parts[3]):
        raise VersionParseError(f"Invalid revision in version {text!r}")
    return ".".join(parts[:3]) + rest, int(parts[3])


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class NuGetVersion:
    """A parsed NuGet package version."""

    base: semver.Version
    revision: int = 0
    original: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> "NuGetVersion":
        """Parse ``value`` or raise :class:`VersionParseError`."""
        if not isinstance(value, str):
            raise VersionParseError(f"Version must be a string, got {value!r}")
        text = value.strip()
        if not text:
            raise VersionParseError("Version string is empty")

        semver_text, revision = _split_revision(text)
        try:
            parsed = semver.Version.parse(semver_text, optional_minor_and_patch=True)
        except (ValueError, TypeError) as e:
            raise VersionParseError(f"Invalid version {value!r}: {e}") from e
        return cls(base=parsed, revision=revision, original=text)

    @property
    def major(self) -> int:
        return self.base.major

    @property
    def minor(self) -> int:
        return self.base.minor

    @property
    def patch(self) -> int:
        return self.base.patch

    @property
    def metadata(self) -> Optional[str]:
        return self.base.build

    @property
    def release(self) -> str:
        return self.base.prerelease or ""

    @property
    def release_labels(self) -> Tuple[str, ...]:
        return tuple(self.release.split(".")) if self.release else ()

    @property
    def is_prerelease(self) -> bool:
        return self.base.prerelease is not None

    def _comparable(self) -> semver.Version:
        # NuGet compares release labels case-insensitively; build is ignored.
        prerelease = self.base.prerelease
        return self.base.replace(
            prerelease=prerelease.lower() if prerelease else None,
            build=None,
        )

    def compare(self, other: "NuGetVersion") -> int:
        """Return -1, 0 or 1 as ``self`` is lower than, equal to or higher than ``other``."""
        mine, theirs = self._comparable(), other._comparable()
        result = mine.finalize_version().compare(theirs.finalize_version())
        if result:
            return result
        if self.revision != other.revision:
            return -1 if self.revision < other.revision else 1
        return mine.compare(theirs)

    def to_normalized_string(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.revision:
            text += f".{self.revision}"
        if self.is_prerelease:
            text += f"-{self.release}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "NuGetVersion") -> bool:
        if not isinstance(other, NuGetVersion):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        comparable = self._comparable()
        return hash((comparable.major, comparable.minor, comparable.patch,
                     self.revision, comparable.prerelease))

    def __str__(self) -> str:
        return self.original or self.to_normalized_string()


def try_parse_version(value: Optional[str]) -> Optional[NuGetVersion]:
    """Parse ``value``, returning ``None`` when it is not a NuGet version."""
    if value is None:
        return None
    try:
        return NuGetVersion.parse(value)
    except VersionParseError:
        return None
