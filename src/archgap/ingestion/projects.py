"""Discover and read C# project files (``*.csproj``)."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from archgap.config import Settings
from archgap.errors import ProjectDescriptorError
from archgap.ingestion.schemas import PackageReference, ProjectDescriptor
from archgap.ingestion.sources import walk_files

logger = logging.getLogger(__name__)

# Checked in order; the first non-empty value wins.
_FRAMEWORK_ELEMENTS = (
    "TargetFramework",
    "TargetFrameworks",
    "TargetFrameworkVersion",
)


def discover_project_descriptors(
    root: Path, settings: Settings | None = None
) -> list[ProjectDescriptor]:
    """Load every project file under *root*.

    A file that cannot be read yields a descriptor with ``load_error``
    set instead of raising, so one bad project never blocks the run.
    """
    cfg = settings or Settings()
    extensions = set(cfg.project_extensions)
    descriptors: list[ProjectDescriptor] = []
    for path in walk_files(Path(root), set(cfg.skip_directories)):
        if path.suffix.lower() not in extensions:
            continue
        try:
            descriptors.append(load_project_descriptor(path))
        except ProjectDescriptorError as exc:
            logger.warning("Skipping project file %s: %s", path, exc)
            descriptors.append(
                ProjectDescriptor(path=str(path), load_error=str(exc))
            )
    return descriptors


def load_project_descriptor(path: Path) -> ProjectDescriptor:
    """Parse one project file into a :class:`ProjectDescriptor`.

    Handles SDK-style and legacy (namespaced) MSBuild files.

    Raises:
        ProjectDescriptorError: Unreadable file or malformed XML.
    """
    try:
        tree = ET.parse(path)
    except OSError as exc:
        raise ProjectDescriptorError(
            f"cannot read {path}: {exc.strerror or exc}"
        ) from exc
    except ET.ParseError as exc:
        raise ProjectDescriptorError(f"malformed XML in {path}: {exc}") from exc

    root = tree.getroot()
    return ProjectDescriptor(
        path=str(path),
        target_framework=_target_framework(root),
        dependencies=_package_references(root),
    )


def _local_name(tag: str) -> str:
    """Strip an ``{namespace}`` prefix from an element tag."""
    return tag.rsplit("}", 1)[-1]


def _target_framework(root: ET.Element) -> str | None:
    values: dict[str, str] = {}
    for element in root.iter():
        name = _local_name(element.tag)
        if name in _FRAMEWORK_ELEMENTS and name not in values:
            text = (element.text or "").strip()
            if text:
                values[name] = text

    for name in _FRAMEWORK_ELEMENTS:
        if name in values:
            # Multi-targeting lists frameworks separated by ';'
            return values[name].split(";")[0].strip()
    return None


def _package_references(root: ET.Element) -> list[PackageReference]:
    refs: list[PackageReference] = []
    for element in root.iter():
        if _local_name(element.tag) != "PackageReference":
            continue
        name = element.get("Include") or element.get("Update") or ""
        if not name:
            continue
        version = element.get("Version") or ""
        if not version:
            for child in element:
                if _local_name(child.tag) == "Version":
                    version = (child.text or "").strip()
                    break
        refs.append(PackageReference(name=name, version=version))
    return refs
