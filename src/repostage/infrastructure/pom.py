"""
repostage.infrastructure.pom - POM Reader
===========================================

Reads the identity, packaging and parent reference out of a POM file. Only
direct children of ``<project>`` and ``<parent>`` are consulted, so
``<dependencies>`` or ``<build>`` sections never leak into the result.
Both namespaced (``http://maven.apache.org/POM/4.0.0``) and bare POMs are
accepted.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from repostage.core.exceptions import DescriptorError
from repostage.core.models import ParentReference, PomModel


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element) -> dict[str, str]:
    values: dict[str, str] = {}
    for child in element:
        if not isinstance(child.tag, str):
            continue
        values[_local_name(child.tag)] = (child.text or "").strip()
    return values


def _find_child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if isinstance(child.tag, str) and _local_name(child.tag) == name:
            return child
    return None


def parse_pom(content: Union[bytes, str], source: str = "<string>") -> PomModel:
    """Parse a POM document.

    Args:
        content: The XML document. Bytes are decoded by the parser using
            the encoding the document declares (UTF-8 when it declares none).
        source: Name used in error messages.

    Raises:
        DescriptorError: If the XML is malformed or lacks the coordinates
            needed to identify the project.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise DescriptorError(
            message=f"Failed to parse POM {source}: {exc}",
            path=source,
        ) from exc

    if _local_name(root.tag) != "project":
        raise DescriptorError(
            message=f"Not a POM (root element <{_local_name(root.tag)}>): {source}",
            path=source,
        )

    values = _children(root)

    parent: Optional[ParentReference] = None
    parent_element = _find_child(root, "parent")
    if parent_element is not None:
        parent_values = _children(parent_element)
        missing = [
            name
            for name in ("groupId", "artifactId", "version")
            if not parent_values.get(name)
        ]
        if missing:
            raise DescriptorError(
                message=f"Incomplete <parent> in POM {source}",
                path=source,
                details={"missing": missing},
            )
        parent = ParentReference(
            group_id=parent_values["groupId"],
            artifact_id=parent_values["artifactId"],
            version=parent_values["version"],
            relative_path=parent_values.get("relativePath") or "../pom.xml",
        )

    group_id = values.get("groupId") or (parent.group_id if parent else "")
    version = values.get("version") or (parent.version if parent else "")
    artifact_id = values.get("artifactId", "")

    if not (group_id and artifact_id and version):
        raise DescriptorError(
            message=f"POM {source} does not declare groupId, artifactId and version",
            path=source,
            details={"group_id": group_id, "artifact_id": artifact_id, "version": version},
        )

    return PomModel(
        group_id=group_id,
        artifact_id=artifact_id,
        version=version,
        packaging=values.get("packaging") or "jar",
        parent=parent,
    )


def load_pom(path: Path) -> PomModel:
    """Read and parse a POM file.

    Raises:
        DescriptorError: If the file cannot be read or parsed.
    """
    try:
        content = Path(path).read_bytes()
    except OSError as exc:
        raise DescriptorError(
            message=f"Failed to read POM {path}: {exc}",
            path=str(path),
        ) from exc
    return parse_pom(content, source=str(path))
