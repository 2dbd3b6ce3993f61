"""
Version resolution for package references.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .models import CpmSettings, IgnoreEntry, PackageReference


def resolve_version(reference: PackageReference, settings: CpmSettings) -> Optional[str]:
    """Effective version of ``reference``, or ``None`` if nothing declares one.

    A version on the reference itself wins, then a version scoped to the
    reference's project, then the global central version.
    """
    if reference.version:
        return reference.version

    project_version = settings.project_version(reference.project, reference.package_id)
    if project_version:
        return project_version

    return settings.global_version(reference.package_id) or None


def is_ignored(project: str, package_id: str, ignore_list: Iterable[IgnoreEntry]) -> bool:
    return any(entry.matches(project, package_id) for entry in ignore_list)
