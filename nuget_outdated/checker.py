"""
Check every project under a directory for outdated NuGet packages.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from .config import CheckerConfig
from .cpm import load_cpm_settings
from .exceptions import ManifestError
from .interfaces import VersionLookup, WarningSink
from .manifests import find_project_files, parse_package_references
from .models import CpmSettings, Found, IgnoreEntry, PackageReference, PackageResult
from .registry import NuGetClient
from .resolution import is_ignored, resolve_version
from .versions import try_parse_version


logger = logging.getLogger(__name__)

IgnoreItem = Union[IgnoreEntry, Tuple[str, str]]


def as_ignore_entries(ignore_list: Optional[Iterable[IgnoreItem]]) -> List[IgnoreEntry]:
    """Accept ``IgnoreEntry`` objects or plain ``(project, package)`` pairs."""
    entries = []
    for item in ignore_list or ():
        if isinstance(item, IgnoreEntry):
            entries.append(item)
        else:
            project, package = item
            entries.append(IgnoreEntry(project=project, package=package))
    return entries


def has_failures(results: Iterable[PackageResult]) -> bool:
    """True when any package is outdated and not ignored."""
    return any(r.is_failure for r in results)


class Checker:
    """Compare declared package versions with the latest published ones."""

    def __init__(
        self,
        client: Optional[VersionLookup] = None,
        config: Optional[CheckerConfig] = None,
        sink: Optional[WarningSink] = None,
    ) -> None:
        self.config = config or CheckerConfig()
        self.client = client or NuGetClient(self.config)
        self.sink = sink or logger

    def check(
        self,
        directory: Path,
        ignore_list: Optional[Iterable[IgnoreItem]] = None,
        include_prerelease: bool = False,
    ) -> List[PackageResult]:
        """Check all project files under ``directory``.

        Args:
            directory: Root of the tree to scan; ``Directory.Packages.props``
                is read from here only
            ignore_list: (project, package) pairs that never fail the check
            include_prerelease: Consider prerelease versions as "latest"

        Returns:
            Results ordered by project, then package
        """
        directory = Path(directory)
        entries = as_ignore_entries(ignore_list)
        settings = load_cpm_settings(directory, self.sink)

        project_files = find_project_files(directory)
        if not project_files:
            logger.info("No .csproj files found.")
            return []

        logger.info("Found %d projects. Checking packages...", len(project_files))

        results: List[PackageResult] = []
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            future_to_path = {
                executor.submit(
                    self.process_project, path, settings, entries, include_prerelease
                ): path
                for path in project_files
            }
            progress = tqdm(
                as_completed(future_to_path),
                total=len(future_to_path),
                desc="Checking projects",
                unit="project",
                disable=not self.config.show_progress,
            )
            for future in progress:
                results.extend(future.result())

        results.sort(key=lambda r: (r.project, r.package))
        return results

    def process_project(
        self,
        path: Path,
        settings: CpmSettings,
        ignore_list: Sequence[IgnoreEntry],
        include_prerelease: bool,
    ) -> List[PackageResult]:
        """Check one project file. Never raises; failures go to the sink."""
        try:
            references = parse_package_references(path)
        except ManifestError as e:
            self.sink.warning("Error processing %s: %s", path, e.reason)
            return []

        results = []
        for reference in references:
            try:
                result = self.check_reference(reference, settings, ignore_list, include_prerelease)
            except Exception as e:
                self.sink.warning(
                    "Error checking %s in %s: %s", reference.package_id, path, e
                )
                continue
            if result is not None:
                results.append(result)
        return results

    def check_reference(
        self,
        reference: PackageReference,
        settings: CpmSettings,
        ignore_list: Sequence[IgnoreEntry],
        include_prerelease: bool,
    ) -> Optional[PackageResult]:
        """Build the report row for one reference, or ``None`` to drop it."""
        version_str = resolve_version(reference, settings)
        if not version_str:
            return None

        project, package_id = reference.project, reference.package_id
        ignored = is_ignored(project, package_id, ignore_list)

        current = try_parse_version(version_str)
        if current is None:
            # Floating versions, ranges and MSBuild properties land here.
            if not ignored:
                return None
            return PackageResult(
                project=project,
                package=package_id,
                current_version=version_str,
                latest_version="",
                is_up_to_date=True,
                is_ignored=True,
            )

        lookup = self.client.get_latest_version(package_id, include_prerelease)
        if not isinstance(lookup, Found):
            if not ignored:
                self.sink.warning("Could not find package '%s' on NuGet.org.", package_id)
                return None
            return PackageResult(
                project=project,
                package=package_id,
                current_version=str(current),
                latest_version="",
                is_up_to_date=True,
                is_ignored=True,
            )

        latest = lookup.version
        return PackageResult(
            project=project,
            package=package_id,
            current_version=str(current),
            latest_version=str(latest),
            is_up_to_date=current >= latest,
            is_ignored=ignored,
        )
