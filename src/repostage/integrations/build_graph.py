"""
repostage.integrations.build_graph - Build Manifest Loader
============================================================

The project graph normally comes from the host build tool. Outside of it
(CI scripts, the CLI, tests) the same graph is described in a YAML build
manifest and loaded into ``Project`` models here.

Manifest Format:
    projects:
      - group_id: com.acme
        artifact_id: app
        version: "1.0"
        packaging: jar                       # default: jar
        file: app/pom.xml                    # descriptor, relative to manifest
        artifact_file: app/target/app-1.0.jar
        parent: com.acme:parent:1.0          # group:artifact:version
        attached:
          - type: java-source
            classifier: sources
            file: app/target/app-1.0-sources.jar
        dependencies:
          - group_id: org.slf4j
            artifact_id: slf4j-api
            version: "2.0.9"
            file: /home/ci/.m2/repository/org/slf4j/slf4j-api/2.0.9/slf4j-api-2.0.9.jar

Parent references naming a project of the manifest link to it. Any other
reference becomes a descriptor-less ancestor: the boundary of the build,
beyond which staging continues in the source repository.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from repostage.core.exceptions import ConfigurationError
from repostage.core.models import Artifact, Project, versionless_key
from repostage.infrastructure.factory import ArtifactFactory


logger = structlog.get_logger()


# =============================================================================
# Manifest Entries
# =============================================================================
class ArtifactEntry(BaseModel):
    """An attached artifact or a resolved dependency.

    Attached artifacts may omit their coordinates and inherit the
    project's.
    """

    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    type: str = "jar"
    classifier: Optional[str] = None
    scope: Optional[str] = None
    file: Optional[Path] = None


class ProjectEntry(BaseModel):
    group_id: str
    artifact_id: str
    version: str
    packaging: str = "jar"
    file: Optional[Path] = None
    artifact_file: Optional[Path] = None
    parent: Optional[str] = None
    attached: list[ArtifactEntry] = Field(default_factory=list)
    dependencies: list[ArtifactEntry] = Field(default_factory=list)

    @property
    def id(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class BuildManifest(BaseModel):
    projects: list[ProjectEntry] = Field(default_factory=list)


# =============================================================================
# Build Graph
# =============================================================================
class BuildGraph:
    """The projects of one build, with parents linked.

    Attributes:
        projects: Every manifest project, in manifest order. These are the
            reactor projects handed to the orchestrator.
    """

    def __init__(self, projects: list[Project]) -> None:
        self.projects = projects
        self._by_key = {project.versionless_key: project for project in projects}

    def find(self, key: str) -> Project:
        """Look up a project by ``group:artifact``.

        Raises:
            ConfigurationError: If no manifest project has that key.
        """
        try:
            return self._by_key[key]
        except KeyError:
            raise ConfigurationError(
                message=f"Project not found in build manifest: {key}",
                error_code="MANIFEST_UNKNOWN_PROJECT",
                details={"project": key, "available": sorted(self._by_key)},
            ) from None

    def __len__(self) -> int:
        return len(self.projects)


class _GraphBuilder:
    """Turns manifest entries into linked Project models."""

    def __init__(self, manifest: BuildManifest, base_dir: Path) -> None:
        self._entries = {entry.id: entry for entry in manifest.projects}
        self._order = [entry.id for entry in manifest.projects]
        self._base_dir = base_dir
        self._built: dict[str, Project] = {}
        self._visiting: set[str] = set()
        self._factory = ArtifactFactory()

    def _path(self, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return None
        value = value.expanduser()
        return value if value.is_absolute() else self._base_dir / value

    def _artifact(self, entry: ArtifactEntry, owner: Optional[ProjectEntry] = None) -> Artifact:
        group_id = entry.group_id or (owner.group_id if owner else None)
        artifact_id = entry.artifact_id or (owner.artifact_id if owner else None)
        version = entry.version or (owner.version if owner else None)
        if not (group_id and artifact_id and version):
            raise ConfigurationError(
                message="Manifest artifact is missing group_id, artifact_id or version",
                error_code="MANIFEST_INVALID",
                details={"entry": entry.model_dump(mode="json")},
            )
        artifact = self._factory.create_artifact_with_classifier(
            group_id, artifact_id, version, entry.type, entry.classifier, entry.scope
        )
        artifact.file = self._path(entry.file)
        return artifact

    def _parent(self, reference: str, child: str) -> Project:
        if reference in self._entries:
            return self.build(reference)

        parts = reference.split(":")
        if len(parts) != 3 or not all(parts):
            raise ConfigurationError(
                message=f"Invalid parent reference {reference!r} in {child}",
                error_code="MANIFEST_INVALID_PARENT",
                details={"project": child, "parent": reference},
            )
        if reference not in self._built:
            group_id, artifact_id, version = parts
            self._built[reference] = Project.of(group_id, artifact_id, version, packaging="pom")
        return self._built[reference]

    def build(self, project_id: str) -> Project:
        if project_id in self._built:
            return self._built[project_id]
        if project_id in self._visiting:
            raise ConfigurationError(
                message=f"Cycle in declared parents at {project_id}",
                error_code="MANIFEST_PARENT_CYCLE",
                details={"project": project_id},
            )

        entry = self._entries[project_id]
        self._visiting.add(project_id)
        parent = self._parent(entry.parent, project_id) if entry.parent else None
        self._visiting.discard(project_id)

        project = Project.of(
            entry.group_id,
            entry.artifact_id,
            entry.version,
            packaging=entry.packaging,
            artifact_file=self._path(entry.artifact_file),
            extension=self._factory.handler_for(entry.packaging).extension,
            file=self._path(entry.file),
            parent=parent,
            attached_artifacts=[self._artifact(a, owner=entry) for a in entry.attached],
            artifacts=[self._artifact(d) for d in entry.dependencies],
        )
        self._built[project_id] = project
        return project

    def build_all(self) -> list[Project]:
        return [self.build(project_id) for project_id in self._order]


# =============================================================================
# Loaders
# =============================================================================
def build_graph(data: dict, base_dir: Path) -> BuildGraph:
    """Build a graph from an already-parsed manifest mapping.

    Args:
        data: The manifest document.
        base_dir: Directory relative paths are resolved against.

    Raises:
        ConfigurationError: If the manifest is invalid.
    """
    try:
        manifest = BuildManifest.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(
            message=f"Invalid build manifest: {exc.error_count()} error(s)",
            error_code="MANIFEST_INVALID",
            details={"errors": exc.errors(include_url=False)},
        ) from exc

    keys = [versionless_key(entry.group_id, entry.artifact_id) for entry in manifest.projects]
    duplicates = sorted({key for key in keys if keys.count(key) > 1})
    if duplicates:
        raise ConfigurationError(
            message=f"Duplicate projects in build manifest: {', '.join(duplicates)}",
            error_code="MANIFEST_INVALID",
            details={"duplicates": duplicates},
        )

    projects = _GraphBuilder(manifest, base_dir).build_all()
    logger.debug("build_graph_loaded", projects=len(projects))
    return BuildGraph(projects)


def load_build_manifest(path: Path) -> BuildGraph:
    """Read a YAML build manifest.

    Relative paths in the manifest resolve against its directory.

    Raises:
        FileNotFoundError: If the manifest does not exist.
        ConfigurationError: If it is not a valid manifest.
    """
    manifest_path = Path(path)
    if not manifest_path.exists():
        raise FileNotFoundError(f"Build manifest not found: {manifest_path}")

    with open(manifest_path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                message=f"Build manifest is not valid YAML: {manifest_path}",
                error_code="MANIFEST_INVALID",
                details={"path": str(manifest_path), "reason": str(exc)},
            ) from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            message=f"Build manifest must contain a mapping: {manifest_path}",
            error_code="MANIFEST_INVALID",
            details={"path": str(manifest_path)},
        )

    return build_graph(data, manifest_path.parent)
