"""
repostage.facade - RepoStage Top-Level Facade
===============================================

Wires configuration, repositories, factories and the installer into an
``ArtifactStagingOrchestrator``. This is the entry point for scripts and
the CLI.

    ┌──────────────────────────────────────────────┐
    │              RepoStage (Facade)               │
    │                                               │
    │  StagingConfig ──→ source ArtifactRepository  │
    │                                               │
    │  ArtifactStagingOrchestrator                  │
    │    ├── ArtifactInstaller                      │
    │    ├── ArtifactFactory                        │
    │    └── RepositoryFactory                      │
    └──────────────────────────────────────────────┘

Usage:
    >>> stage = RepoStage(StagingConfig(staging_repository_path=Path("target/it-repo")))
    >>> report = stage.run(project, reactor_projects)

    Or straight from a build manifest:
    >>> report = stage.run_manifest(Path("build.yaml"), "com.acme:app")
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

import structlog

from repostage.core.config import StagingConfig
from repostage.core.models import Project, StagingReport
from repostage.infrastructure.factory import ArtifactFactory, RepositoryFactory
from repostage.infrastructure.installer import ArtifactInstaller, DefaultArtifactInstaller
from repostage.infrastructure.repository import ArtifactRepository
from repostage.integrations.build_graph import load_build_manifest
from repostage.orchestration.staging import ArtifactStagingOrchestrator


logger = structlog.get_logger()


class RepoStage:
    """Top-level facade for staging a project into a test repository.

    Collaborators are constructor parameters; anything not given gets the
    default implementation.

    Args:
        config: Staging configuration. Defaults to StagingConfig(), which
            reads REPOSTAGE_* environment variables.
        installer: Installer for freshly built artifacts.
        artifact_factory: Creates artifact identities.
        repository_factory: Creates repositories.
    """

    def __init__(
        self,
        config: Optional[StagingConfig] = None,
        *,
        installer: Optional[ArtifactInstaller] = None,
        artifact_factory: Optional[ArtifactFactory] = None,
        repository_factory: Optional[RepositoryFactory] = None,
    ) -> None:
        self._config = config or StagingConfig()
        self._installer = installer or DefaultArtifactInstaller()
        self._artifact_factory = artifact_factory or ArtifactFactory()
        self._repository_factory = repository_factory or RepositoryFactory()

        self._source_repository = self._repository_factory.create_repository(
            id=self._config.repository_id,
            basedir=self._config.local_repository,
            layout=self._config.repository_layout,
            snapshots=self._config.snapshots,
            releases=self._config.releases,
        )
        self._orchestrator = ArtifactStagingOrchestrator(
            config=self._config,
            source_repository=self._source_repository,
            installer=self._installer,
            artifact_factory=self._artifact_factory,
            repository_factory=self._repository_factory,
        )
        self._logger = logger.bind(component="repostage")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def config(self) -> StagingConfig:
        return self._config

    @property
    def source_repository(self) -> ArtifactRepository:
        """The local repository dependencies are read from."""
        return self._source_repository

    @property
    def orchestrator(self) -> ArtifactStagingOrchestrator:
        return self._orchestrator

    # =========================================================================
    # Running
    # =========================================================================

    def run(self, project: Project, reactor_projects: Iterable[Project] = ()) -> StagingReport:
        """Stage ``project`` with the given sibling projects."""
        return self._orchestrator.execute(project, reactor_projects)

    def run_manifest(self, manifest: Path, project_key: str) -> StagingReport:
        """Load a build manifest and stage one of its projects.

        Args:
            manifest: Path of the YAML build manifest.
            project_key: ``group:artifact`` of the project to stage. Every
                other manifest project is treated as a sibling.
        """
        graph = load_build_manifest(manifest)
        project = graph.find(project_key)
        self._logger.debug(
            "manifest_loaded",
            manifest=str(manifest),
            project=project.id,
            reactor_size=len(graph),
        )
        return self.run(project, graph.projects)
