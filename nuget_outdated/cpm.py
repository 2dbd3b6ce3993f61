"""
Central package management: read versions from ``Directory.Packages.props``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from .exceptions import ManifestError
from .interfaces import WarningSink
from .manifests import iter_elements, load_xml
from .models import CpmSettings


logger = logging.getLogger(__name__)

PROPS_FILE_NAME = "Directory.Packages.props"

# Condition="'$(MSBuildProjectName)' == 'MyProject'"
PROJECT_CONDITION_RE = re.compile(r"'\$\(MSBuildProjectName\)'\s*==\s*'([^']+)'")


def parse_project_condition(condition: str) -> Optional[str]:
    """Return the project a ``Condition`` restricts an entry to, if recognised."""
    match = PROJECT_CONDITION_RE.search(condition)
    return match.group(1) if match else None


def load_cpm_settings(directory: Path, sink: Optional[WarningSink] = None) -> CpmSettings:
    """Load the central version table for ``directory``.

    Only the props file at the root of ``directory`` is read. A missing file
    gives an empty table; a malformed one is reported to ``sink`` and also
    gives an empty table.
    """
    sink = sink or logger
    settings = CpmSettings()
    props_file = Path(directory) / PROPS_FILE_NAME

    if not props_file.is_file():
        logger.debug("No %s in %s", PROPS_FILE_NAME, directory)
        return settings

    try:
        root = load_xml(props_file)
    except ManifestError as e:
        sink.warning("Error loading %s: %s", PROPS_FILE_NAME, e.reason)
        return CpmSettings()

    for element in iter_elements(root, "PackageVersion"):
        package_id = element.get("Include") or element.get("Update")
        version = element.get("Version")
        condition = element.get("Condition")

        if not package_id or not version:
            continue

        if not condition:
            settings.set_global(package_id, version)
            continue

        project = parse_project_condition(condition)
        if project is None:
            sink.warning("Skipping complex PackageVersion condition: %s", condition)
            continue
        settings.set_project(project, package_id, version)

    logger.debug(
        "Loaded %d global and %d project-scoped version tables from %s",
        len(settings.global_versions),
        len(settings.project_versions),
        props_file,
    )
    return settings
