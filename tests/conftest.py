"""
Shared Test Fixtures for repostage
====================================

Fixtures are organized by layer:

    1. Workspace (a build directory plus a source repository on tmp_path)
    2. Infrastructure (recording installer)
    3. Orchestration (orchestrator wired to the workspace)
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import pytest
import yaml

from repostage.core.config import StagingConfig
from repostage.core.models import Artifact, Project
from repostage.infrastructure.factory import ArtifactFactory
from repostage.infrastructure.installer import ArtifactInstaller, DefaultArtifactInstaller
from repostage.infrastructure.repository import ArtifactRepository
from repostage.orchestration.staging import ArtifactStagingOrchestrator


FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


# =============================================================================
# POM Helpers
# =============================================================================
def pom_xml(
    group_id: str,
    artifact_id: str,
    version: str,
    packaging: str = "jar",
    parent: Optional[tuple[str, str, str]] = None,
) -> str:
    """Render a minimal namespaced POM."""
    parent_xml = ""
    if parent is not None:
        parent_xml = (
            "  <parent>\n"
            f"    <groupId>{parent[0]}</groupId>\n"
            f"    <artifactId>{parent[1]}</artifactId>\n"
            f"    <version>{parent[2]}</version>\n"
            "  </parent>\n"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<project xmlns="http://maven.apache.org/POM/4.0.0">\n'
        "  <modelVersion>4.0.0</modelVersion>\n"
        f"{parent_xml}"
        f"  <groupId>{group_id}</groupId>\n"
        f"  <artifactId>{artifact_id}</artifactId>\n"
        f"  <version>{version}</version>\n"
        f"  <packaging>{packaging}</packaging>\n"
        "</project>\n"
    )


class BuildWorkspace:
    """A multi-module build directory next to a source repository.

    Layout under ``root``:
        build/<artifact>/pom.xml, build/<artifact>/target/*.jar
        m2/       the source (local) repository
        it-repo/  the staging repository
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.build_dir = root / "build"
        self.local_repo_dir = root / "m2"
        self.staging_dir = root / "it-repo"
        self.local_repo_dir.mkdir(parents=True)
        self.source = ArtifactRepository(id="local", basedir=self.local_repo_dir)
        self.factory = ArtifactFactory()

    def config(self, **overrides) -> StagingConfig:
        values = {
            "local_repository": self.local_repo_dir,
            "staging_repository_path": self.staging_dir,
        }
        values.update(overrides)
        return StagingConfig(**values)

    # --- Build-local projects ---

    def module(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        packaging: str = "jar",
        parent: Optional[Project] = None,
        built: bool = True,
        attached: tuple[tuple[str, str], ...] = (),
        dependencies: Optional[list[Artifact]] = None,
    ) -> Project:
        """Create a project of the build with its pom.xml and outputs on disk."""
        module_dir = self.build_dir / artifact_id
        target = module_dir / "target"
        target.mkdir(parents=True, exist_ok=True)

        pom_file = module_dir / "pom.xml"
        parent_coords = (parent.group_id, parent.artifact_id, parent.version) if parent else None
        pom_file.write_text(pom_xml(group_id, artifact_id, version, packaging, parent_coords))

        artifact_file = None
        if packaging != "pom" and built:
            artifact_file = target / f"{artifact_id}-{version}.jar"
            artifact_file.write_bytes(b"main:" + artifact_id.encode())

        attached_artifacts = []
        for type_, classifier in attached:
            attached_file = target / f"{artifact_id}-{version}-{classifier}.jar"
            attached_file.write_bytes(f"{classifier}:{artifact_id}".encode())
            attached_artifacts.append(
                Artifact(
                    group_id=group_id,
                    artifact_id=artifact_id,
                    version=version,
                    type=type_,
                    classifier=classifier,
                    extension="jar",
                    file=attached_file,
                )
            )

        return Project.of(
            group_id,
            artifact_id,
            version,
            packaging=packaging,
            artifact_file=artifact_file,
            extension=self.factory.handler_for(packaging).extension,
            file=pom_file,
            parent=parent,
            attached_artifacts=attached_artifacts,
            artifacts=dependencies or [],
        )

    @staticmethod
    def external(group_id: str, artifact_id: str, version: str) -> Project:
        """An ancestor outside the build: no descriptor file."""
        return Project.of(group_id, artifact_id, version, packaging="pom")

    # --- Source repository content ---

    def publish_pom(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        parent: Optional[tuple[str, str, str]] = None,
        packaging: str = "pom",
        content: Optional[str] = None,
    ) -> Path:
        """Put a POM into the source repository at its layout path."""
        pom_artifact = self.factory.create_project_artifact(group_id, artifact_id, version)
        path = self.source.file_of(pom_artifact)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content or pom_xml(group_id, artifact_id, version, packaging, parent))
        return path

    def publish_artifact(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        type_: str = "jar",
        classifier: Optional[str] = None,
        with_pom: bool = True,
        parent: Optional[tuple[str, str, str]] = None,
    ) -> Artifact:
        """Put a resolved dependency into the source repository and return it."""
        artifact = self.factory.create_artifact_with_classifier(
            group_id, artifact_id, version, type_, classifier
        )
        path = self.source.file_of(artifact)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"dep:{artifact.id}".encode())
        if with_pom:
            self.publish_pom(group_id, artifact_id, artifact.base_version, parent=parent, packaging=type_)
        return artifact.model_copy(update={"file": path})

    # --- Build manifests ---

    def manifest(self, *projects: Project, name: str = "build.yaml") -> Path:
        """Describe ``projects`` in a YAML build manifest under ``root``."""
        entries = []
        for project in projects:
            entry = {
                "group_id": project.group_id,
                "artifact_id": project.artifact_id,
                "version": project.version,
                "packaging": project.packaging,
            }
            if project.file is not None:
                entry["file"] = str(project.file)
            if project.artifact.file is not None:
                entry["artifact_file"] = str(project.artifact.file)
            if project.parent is not None:
                entry["parent"] = project.parent.id
            entry["attached"] = [
                {"type": a.type, "classifier": a.classifier, "file": str(a.file)}
                for a in project.attached_artifacts
            ]
            entry["dependencies"] = [
                {
                    "group_id": a.group_id,
                    "artifact_id": a.artifact_id,
                    "version": a.version,
                    "type": a.type,
                    "classifier": a.classifier,
                    "file": str(a.file) if a.file else None,
                }
                for a in project.artifacts
            ]
            entries.append(entry)

        path = self.root / name
        path.write_text(yaml.safe_dump({"projects": entries}))
        return path

    def staged(self, relative: str) -> Path:
        return self.staging_dir / relative


class RecordingInstaller(ArtifactInstaller):
    """Delegates to the default installer and remembers every call."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._delegate = DefaultArtifactInstaller(clock=lambda: FIXED_TIME)

    def install(self, file: Path, artifact: Artifact, repository: ArtifactRepository) -> Path:
        self.calls.append(artifact.id)
        return self._delegate.install(file, artifact, repository)


# =============================================================================
# Workspace
# =============================================================================

@pytest.fixture
def workspace(tmp_path):
    """A fresh build directory and source repository."""
    return BuildWorkspace(tmp_path)


# =============================================================================
# Infrastructure
# =============================================================================

@pytest.fixture
def installer():
    """Recording installer backed by DefaultArtifactInstaller."""
    return RecordingInstaller()


# =============================================================================
# Orchestration
# =============================================================================

@pytest.fixture
def orchestrator(workspace, installer):
    """Orchestrator staging from the workspace's source repository into it-repo."""
    return ArtifactStagingOrchestrator(
        config=workspace.config(),
        source_repository=workspace.source,
        installer=installer,
    )
