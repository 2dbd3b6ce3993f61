"""
Locate project files and read the package references they declare.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, List, Optional

from .exceptions import ManifestError
from .models import PackageReference


logger = logging.getLogger(__name__)

PROJECT_FILE_PATTERN = "*.csproj"
PROJECT_FILE_SUFFIX = ".csproj"


def local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tag names."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def iter_elements(root: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield every element below ``root`` whose local name is ``name``."""
    for element in root.iter():
        if local_name(element.tag) == name:
            yield element


def load_xml(path: Path) -> ET.Element:
    """Parse an MSBuild file, raising :class:`ManifestError` on failure."""
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as e:
        raise ManifestError(path, f"malformed XML: {e}") from e
    except OSError as e:
        raise ManifestError(path, f"cannot read file: {e}") from e


def project_name_for(path: Path) -> str:
    """Project name as MSBuild sees it: the file name without extension."""
    return Path(path).stem


def find_project_files(root: Path) -> List[Path]:
    """Return every project file under ``root``, recursively, in path order."""
    root = Path(root)
    if not root.is_dir():
        logger.debug("Not a directory, no project files: %s", root)
        return []
    return sorted(p for p in root.rglob(PROJECT_FILE_PATTERN) if p.is_file())


def _direct_version(element: ET.Element) -> Optional[str]:
    for attribute in ("Version", "VersionOverride"):
        value = element.get(attribute)
        if value and value.strip():
            return value.strip()

    # <PackageReference Include="x"><Version>1.0.0</Version></PackageReference>
    for child in element:
        if local_name(child.tag) == "Version" and child.text and child.text.strip():
            return child.text.strip()
    return None


def parse_package_references(path: Path) -> List[PackageReference]:
    """Read the ``PackageReference`` items declared in one project file.

    Elements are matched by local name, so projects with and without the
    legacy MSBuild namespace are handled alike. References without an
    ``Include`` id are skipped.
    """
    path = Path(path)
    project = project_name_for(path)
    root = load_xml(path)

    references = []
    for element in iter_elements(root, "PackageReference"):
        package_id = (element.get("Include") or "").strip()
        if not package_id:
            continue
        references.append(PackageReference(
            package_id=package_id,
            version=_direct_version(element),
            project=project,
            path=path,
        ))

    logger.debug("Found %d package references in %s", len(references), path)
    return references
