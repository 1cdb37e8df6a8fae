"""
repostage.infrastructure.metadata - Artifact and Repository Metadata
======================================================================

Two kinds of metadata end up in a repository next to an artifact:

    1. Descriptor metadata: the artifact's POM, attached as a
       ``DescriptorMetadata`` record and copied verbatim.

    2. Local repository metadata: ``maven-metadata-local.xml`` files that
       list the installed versions. Only the installer maintains these;
       artifacts staged from the source repository already have theirs.

    com/acme/app/
        maven-metadata-local.xml         ← versions of com.acme:app
        1.0-SNAPSHOT/
            maven-metadata-local.xml     ← snapshot localCopy marker
            app-1.0-SNAPSHOT.jar
            app-1.0-SNAPSHOT.pom         ← descriptor metadata
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path

import structlog

from repostage.core.exceptions import DescriptorError
from repostage.core.models import Artifact, DescriptorMetadata
from repostage.infrastructure.files import copy_file, ensure_directory
from repostage.infrastructure.repository import ArtifactRepository


logger = structlog.get_logger()

LOCAL_METADATA_FILE = "maven-metadata-local.xml"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


# =============================================================================
# Descriptor Metadata
# =============================================================================
def store_descriptor(
    record: DescriptorMetadata,
    artifact: Artifact,
    repository: ArtifactRepository,
) -> Path:
    """Copy the record's POM to its place beside ``artifact`` in ``repository``."""
    destination = repository.descriptor_file_of(artifact)
    return copy_file(record.file, destination)


def store_metadata(artifact: Artifact, repository: ArtifactRepository) -> list[Path]:
    """Store every metadata record attached to ``artifact``.

    Returns:
        The written paths, in record order.
    """
    return [store_descriptor(record, artifact, repository) for record in artifact.metadata]


# =============================================================================
# Local Repository Metadata
# =============================================================================
def _child_text(parent: ET.Element, tag: str, text: str) -> ET.Element:
    child = parent.find(tag)
    if child is None:
        child = ET.SubElement(parent, tag)
    child.text = text
    return child


def _read_metadata(path: Path) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise DescriptorError(
            message=f"Malformed repository metadata: {path}",
            path=str(path),
            error_code="MALFORMED_METADATA",
            details={"reason": str(exc)},
        ) from exc


def _write_metadata(root: ET.Element, path: Path) -> None:
    ensure_directory(path.parent)
    tree = ET.ElementTree(root)
    ET.indent(tree)
    tree.write(path, encoding="UTF-8", xml_declaration=True)


def update_local_metadata(
    artifact: Artifact,
    repository: ArtifactRepository,
    timestamp: datetime,
) -> list[Path]:
    """Record ``artifact``'s version in the repository's local metadata.

    The artifact-level file gains the base version (once) and, for
    releases, a ``<release>`` entry. Snapshots also get a version-level
    file marking the copy as local.

    Args:
        artifact: The artifact just installed.
        repository: Repository it was installed into.
        timestamp: Value for ``<lastUpdated>``.

    Returns:
        The metadata files written.
    """
    last_updated = timestamp.strftime(TIMESTAMP_FORMAT)
    written: list[Path] = []

    # --- Artifact level: the list of versions ---
    path = repository.metadata_file_of(artifact, LOCAL_METADATA_FILE)
    root = _read_metadata(path) if path.is_file() else ET.Element("metadata")
    _child_text(root, "groupId", artifact.group_id)
    _child_text(root, "artifactId", artifact.artifact_id)

    versioning = root.find("versioning")
    if versioning is None:
        versioning = ET.SubElement(root, "versioning")
    if not artifact.is_snapshot:
        _child_text(versioning, "release", artifact.base_version)
    versions = versioning.find("versions")
    if versions is None:
        versions = ET.SubElement(versioning, "versions")
    known = [element.text for element in versions.findall("version")]
    if artifact.base_version not in known:
        ET.SubElement(versions, "version").text = artifact.base_version
    _child_text(versioning, "lastUpdated", last_updated)

    _write_metadata(root, path)
    written.append(path)

    # --- Version level: snapshots installed locally ---
    if artifact.is_snapshot:
        snapshot_path = repository.metadata_file_of(artifact, LOCAL_METADATA_FILE, version_level=True)
        snapshot_root = ET.Element("metadata")
        _child_text(snapshot_root, "groupId", artifact.group_id)
        _child_text(snapshot_root, "artifactId", artifact.artifact_id)
        _child_text(snapshot_root, "version", artifact.base_version)
        snapshot_versioning = ET.SubElement(snapshot_root, "versioning")
        snapshot = ET.SubElement(snapshot_versioning, "snapshot")
        ET.SubElement(snapshot, "localCopy").text = "true"
        ET.SubElement(snapshot_versioning, "lastUpdated").text = last_updated
        _write_metadata(snapshot_root, snapshot_path)
        written.append(snapshot_path)

    logger.debug(
        "local_metadata_updated",
        artifact_id=artifact.id,
        files=[str(p) for p in written],
    )
    return written
