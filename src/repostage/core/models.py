"""
repostage.core.models - Core Data Models
==========================================

The Pydantic models that flow through every layer of repostage. They mirror
the pieces of the host build tool's project graph that staging needs.

Model Hierarchy:
    Artifact            → A uniquely identified build output (+ metadata)
    DescriptorMetadata  → A POM that must be stored next to an artifact
    Project             → A module of the build: main artifact, descriptor,
                          parent, attached artifacts, resolved dependencies
    ParentReference     → The <parent> element of a POM
    PomModel            → The parsed subset of a POM file
    InstallRecord       → One write into the staging repository
    StagingReport       → Everything one run wrote or skipped

Projects are supplied by the caller and treated as read-only. The only
mutation staging performs is ``Artifact.add_metadata`` on artifacts it
creates itself.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from repostage.core.enums import WriteMode


# =============================================================================
# Snapshot Versions
# =============================================================================
# Deployed snapshots carry a timestamped version such as
# "1.0-20070101.123456-1". Their base version is "1.0-SNAPSHOT", which is
# the directory name used by the repository layout.
# =============================================================================
SNAPSHOT_VERSION = "SNAPSHOT"
_TIMESTAMPED_VERSION = re.compile(r"^(.*)-(\d{8}\.\d{6})-(\d+)$")


def to_base_version(version: str) -> str:
    """Normalize a timestamped snapshot version to its base version.

    Args:
        version: Any version string.

    Returns:
        ``<prefix>-SNAPSHOT`` for timestamped snapshots, otherwise the
        version unchanged.

    Example:
        >>> to_base_version("1.0-20070101.123456-1")
        '1.0-SNAPSHOT'
        >>> to_base_version("1.0")
        '1.0'
    """
    match = _TIMESTAMPED_VERSION.match(version)
    if match:
        return f"{match.group(1)}-{SNAPSHOT_VERSION}"
    return version


def versionless_key(group_id: str, artifact_id: str) -> str:
    """The group+name pairing used to match artifacts irrespective of version."""
    return f"{group_id}:{artifact_id}"


# =============================================================================
# Metadata Records
# =============================================================================
class DescriptorMetadata(BaseModel):
    """A POM file to be stored alongside an artifact.

    Attached to dependency artifacts restaged from the source repository so
    their descriptor travels with them into the staging repository.

    Attributes:
        file: Path of the POM file in the source repository.
    """

    file: Path = Field(description="POM file to copy next to the artifact")


# =============================================================================
# Artifact Model
# =============================================================================
class Artifact(BaseModel):
    """A build output identified by group, name, version, classifier and type.

    Attributes:
        group_id: Maven groupId, e.g. "com.acme".
        artifact_id: Maven artifactId, e.g. "app".
        version: Version, possibly a timestamped snapshot.
        type: Artifact type ("jar", "pom", "test-jar", ...).
        classifier: Optional classifier ("sources", "tests", ...).
        extension: File extension; defaults to ``type`` when not set by
            the artifact factory's handler table.
        scope: Dependency scope for resolved dependencies.
        file: The artifact's file on disk, if it has one.
        metadata: Ordered metadata records to store with the artifact.

    Example:
        >>> jar = Artifact(group_id="com.acme", artifact_id="app", version="1.0")
        >>> jar.id
        'com.acme:app:jar:1.0'
    """

    group_id: str = Field(description="Maven groupId")
    artifact_id: str = Field(description="Maven artifactId")
    version: str = Field(description="Artifact version")
    type: str = Field(default="jar", description="Artifact type")
    classifier: Optional[str] = Field(default=None, description="Optional classifier")
    extension: Optional[str] = Field(
        default=None,
        description="File extension (None means same as type)",
    )
    scope: Optional[str] = Field(default=None, description="Dependency scope")
    file: Optional[Path] = Field(default=None, description="File on disk, if any")
    metadata: list[DescriptorMetadata] = Field(
        default_factory=list,
        description="Metadata records stored alongside the artifact",
    )

    @property
    def base_version(self) -> str:
        """The version with any snapshot timestamp replaced by SNAPSHOT."""
        return to_base_version(self.version)

    @property
    def is_snapshot(self) -> bool:
        return self.base_version.endswith(SNAPSHOT_VERSION)

    @property
    def file_extension(self) -> str:
        return self.extension or self.type

    @property
    def dependency_conflict_id(self) -> str:
        """``group:artifact:type[:classifier]``"""
        conflict_id = f"{self.group_id}:{self.artifact_id}:{self.type}"
        if self.classifier:
            conflict_id += f":{self.classifier}"
        return conflict_id

    @property
    def id(self) -> str:
        """Identity used for deduplication: conflict id plus base version."""
        return f"{self.dependency_conflict_id}:{self.base_version}"

    @property
    def versionless_key(self) -> str:
        return versionless_key(self.group_id, self.artifact_id)

    def add_metadata(self, record: DescriptorMetadata) -> None:
        """Attach a metadata record, kept in insertion order."""
        self.metadata.append(record)

    def __str__(self) -> str:
        return self.id


# =============================================================================
# Project Model
# =============================================================================
# A project is one module of the build. ``file`` is its pom.xml; a project
# without a file is an ancestor that lives outside the current build and
# has to be found in the source repository instead.
# =============================================================================
class Project(BaseModel):
    """A module of the build as resolved by the host build tool.

    Attributes:
        artifact: The main artifact. Its file is None for projects that
            produce no main artifact (e.g. "pom" packaging).
        packaging: Packaging kind ("jar", "pom", "war", ...).
        file: The project descriptor (pom.xml), or None when the project is
            not part of the current build.
        parent: The parent project; parents form an acyclic chain.
        attached_artifacts: Secondary outputs (sources, javadoc, tests).
        artifacts: The resolved dependency closure.
    """

    artifact: Artifact = Field(description="Main project artifact")
    packaging: str = Field(default="jar", description="Packaging kind")
    file: Optional[Path] = Field(default=None, description="Project descriptor")
    parent: Optional[Project] = Field(default=None, description="Parent project")
    attached_artifacts: list[Artifact] = Field(
        default_factory=list,
        description="Attached secondary artifacts",
    )
    artifacts: list[Artifact] = Field(
        default_factory=list,
        description="Resolved dependency artifacts",
    )

    @classmethod
    def of(
        cls,
        group_id: str,
        artifact_id: str,
        version: str,
        packaging: str = "jar",
        artifact_file: Optional[Path] = None,
        extension: Optional[str] = None,
        **kwargs,
    ) -> Project:
        """Create a project whose main artifact type matches its packaging.

        ``extension`` is the main artifact's file extension when the
        packaging's handler names one other than the packaging itself
        ("maven-plugin" builds a ".jar").
        """
        artifact = Artifact(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            type=packaging,
            extension=extension,
            file=artifact_file,
        )
        return cls(artifact=artifact, packaging=packaging, **kwargs)

    @property
    def group_id(self) -> str:
        return self.artifact.group_id

    @property
    def artifact_id(self) -> str:
        return self.artifact.artifact_id

    @property
    def version(self) -> str:
        return self.artifact.version

    @property
    def versionless_key(self) -> str:
        return versionless_key(self.group_id, self.artifact_id)

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    def __str__(self) -> str:
        location = f" @ {self.file}" if self.file else ""
        return f"Project {self.id}{location}"


# =============================================================================
# POM Models
# =============================================================================
class ParentReference(BaseModel):
    """The ``<parent>`` element of a POM."""

    group_id: str
    artifact_id: str
    version: str
    relative_path: str = "../pom.xml"

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class PomModel(BaseModel):
    """The subset of a POM that staging needs.

    groupId and version are inherited from the parent when the POM omits
    them, the same way the build tool computes the effective model.
    """

    group_id: str
    artifact_id: str
    version: str
    packaging: str = "jar"
    parent: Optional[ParentReference] = None

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


# =============================================================================
# Staging Results
# =============================================================================
class InstallRecord(BaseModel):
    """A single write into the staging repository."""

    artifact_id: str = Field(description="Id of the written artifact")
    source: Path = Field(description="File the artifact was read from")
    destination: Path = Field(description="Path written in the staging repository")
    mode: WriteMode = Field(description="Installer or raw copy")


class StagingReport(BaseModel):
    """What one orchestrator run did.

    Attributes:
        repository: Base directory of the staging repository (None when
            the run was skipped).
        skipped: True when the run was disabled by configuration.
        records: Every write, in order.
        duplicates: Artifact ids that were reached again and not re-written.

    Example:
        >>> report.count(WriteMode.STAGED)
        2
    """

    repository: Optional[Path] = None
    skipped: bool = False
    records: list[InstallRecord] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)

    @property
    def artifact_ids(self) -> list[str]:
        return [record.artifact_id for record in self.records]

    def ids_for(self, mode: WriteMode) -> list[str]:
        """Artifact ids written through the given write path, in order."""
        return [record.artifact_id for record in self.records if record.mode == mode]

    def count(self, mode: Optional[WriteMode] = None) -> int:
        if mode is None:
            return len(self.records)
        return len(self.ids_for(mode))
