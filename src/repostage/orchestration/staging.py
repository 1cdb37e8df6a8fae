"""
repostage.orchestration.staging - Artifact Staging Orchestrator
=================================================================

Populates an isolated test repository with everything a project's
integration builds need to run offline: the project's own artifacts, its
parent POMs and its resolved dependency closure.

Architecture Context:

    ┌──────────────┐  execute(project, reactor)   ┌──────────────────────┐
    │  RepoStage   │ ───────────────────────────→ │  Staging             │
    │  (facade)    │ ←─────────────────────────── │  Orchestrator        │
    └──────────────┘        StagingReport         └──────────┬───────────┘
                                                             │
                     install (fresh build output)            │  stage (byte copy)
                  ┌──────────────────────────────────────────┼─────────────────┐
                  ▼                                          ▼                 │
        ┌──────────────────┐                       ┌───────────────────┐       │
        │ ArtifactInstaller│ ──→ staging repo ←──  │ source repository │ ←─ POMs read
        └──────────────────┘                       └───────────────────┘

Three Traversals (run in order, sharing one installed-set):

    1. Project artifacts:  the project's POM, its main artifact (if built)
                           and every attached artifact → installer.
    2. Parent chain:       ancestors that are part of the build → installer;
                           from the first ancestor outside the build the
                           chain continues in the source repository, read
                           from each staged POM's <parent> → copy.
    3. Dependencies:       dependencies produced by sibling projects of the
                           build → traversals 1 + 2 on that sibling;
                           everything else → copied from the source
                           repository together with its POM and the POM's
                           parent chain.

Why two write paths:
    Artifacts from the source repository have already been through the
    installer once. Re-installing them would re-apply its metadata
    transform, so they are copied instead.

Error Handling:
    Every failure aborts the run. Project-level operations wrap the cause in
    an InstallationError naming the project; the cause's error code is kept.
    Reaching an artifact a second time is a debug-level no-op.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

import structlog

from repostage.core.config import StagingConfig
from repostage.core.enums import WriteMode
from repostage.core.exceptions import (
    ArtifactFileError,
    InstallationError,
    ParentChainError,
    RepoStageError,
    StagingIOError,
)
from repostage.core.models import (
    Artifact,
    DescriptorMetadata,
    InstallRecord,
    Project,
    StagingReport,
)
from repostage.infrastructure.factory import ArtifactFactory, RepositoryFactory
from repostage.infrastructure.files import copy_file
from repostage.infrastructure.installer import ArtifactInstaller
from repostage.infrastructure.metadata import store_metadata
from repostage.infrastructure.pom import load_pom
from repostage.infrastructure.repository import ArtifactRepository


logger = structlog.get_logger()


def _same_file(first: Optional[Path], second: Optional[Path]) -> bool:
    if first is None or second is None:
        return False
    return Path(first).resolve() == Path(second).resolve()


class ArtifactStagingOrchestrator:
    """Installs a project's artifacts, parents and dependencies into a test repository.

    One orchestrator may run several times; every ``execute`` call starts
    with an empty installed-set and a fresh report.

    Args:
        config: Staging configuration (skip flag, staging path, depth bound).
        source_repository: The local repository dependencies and
            out-of-build parent POMs are read from.
        installer: Installs freshly built artifacts.
        artifact_factory: Creates POM and dependency artifact identities.
        repository_factory: Creates the staging repository.

    Example:
        >>> orchestrator = ArtifactStagingOrchestrator(
        ...     config=StagingConfig(staging_repository_path=Path("target/it-repo")),
        ...     source_repository=local_repo,
        ...     installer=DefaultArtifactInstaller(),
        ... )
        >>> report = orchestrator.execute(project, reactor_projects)
        >>> report.count()
        7
    """

    def __init__(
        self,
        config: StagingConfig,
        source_repository: ArtifactRepository,
        installer: ArtifactInstaller,
        artifact_factory: Optional[ArtifactFactory] = None,
        repository_factory: Optional[RepositoryFactory] = None,
    ) -> None:
        self._config = config
        self._source = source_repository
        self._installer = installer
        self._artifact_factory = artifact_factory or ArtifactFactory()
        self._repository_factory = repository_factory or RepositoryFactory()

        self._installed: set[str] = set()
        self._report = StagingReport()
        self._logger = logger.bind(component="staging_orchestrator")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def installed_artifacts(self) -> frozenset[str]:
        """Ids of the artifacts written during the current run."""
        return frozenset(self._installed)

    @property
    def report(self) -> StagingReport:
        return self._report

    # =========================================================================
    # Entry Point
    # =========================================================================

    def execute(
        self,
        project: Project,
        reactor_projects: Iterable[Project] = (),
    ) -> StagingReport:
        """Stage everything ``project`` needs into the test repository.

        Args:
            project: The project whose integration tests will run.
            reactor_projects: All projects of the current build.

        Returns:
            The report of this run. A skipped run touches nothing and
            returns a report with ``skipped=True``.

        Raises:
            RepoStageError: On the first failure; the run is aborted.
        """
        if self._config.skip_installation:
            self._logger.info("staging_skipped", project=project.id)
            return StagingReport(skipped=True)

        test_repository = self.create_test_repository()
        self._begin_run(test_repository)

        self._logger.info(
            "staging_started",
            project=project.id,
            repository=str(test_repository.basedir),
        )

        self.install_project_artifacts(project, test_repository)
        self.install_project_parents(project, test_repository)
        self.install_project_dependencies(project, list(reactor_projects), test_repository)

        self._logger.info(
            "staging_completed",
            project=project.id,
            installed=self._report.count(WriteMode.INSTALLED),
            staged=self._report.count(WriteMode.STAGED),
            duplicates=len(self._report.duplicates),
        )
        return self._report

    def _begin_run(self, repository: ArtifactRepository) -> None:
        self._installed = set()
        self._report = StagingReport(repository=repository.basedir)

    # =========================================================================
    # Test Repository
    # =========================================================================

    def create_test_repository(self) -> ArtifactRepository:
        """Create the repository integration tests will use.

        Without a configured staging path this is the source repository
        itself. Otherwise a repository with the source's id, layout and
        policies is created at that path, so apart from its location it is
        indistinguishable from the source.

        Raises:
            StagingIOError: If the staging directory cannot be created.
        """
        path = self._config.staging_repository_path
        if path is None:
            return self._source

        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingIOError(
                message=f"Failed to create local repository: {path}",
                error_code="REPOSITORY_CREATE_FAILED",
                details={"path": str(path), "reason": str(exc)},
            ) from exc

        return self._repository_factory.create_like(self._source, Path(path))

    # =========================================================================
    # Write Paths
    # =========================================================================

    def _check_file(self, file: Optional[Path], artifact: Artifact) -> Path:
        if file is None:
            raise ArtifactFileError(
                message=f"Artifact has no associated file: {artifact.id}",
                artifact_id=artifact.id,
            )
        if not Path(file).is_file():
            raise ArtifactFileError(
                message=f"Artifact is not fully assembled: {file}",
                artifact_id=artifact.id,
                file=str(file),
                error_code="ARTIFACT_NOT_ASSEMBLED",
            )
        return Path(file)

    def _claim(self, artifact: Artifact, file: Path) -> bool:
        """Add the artifact to the installed-set; False if it was already there."""
        if artifact.id in self._installed:
            self._logger.debug(
                "artifact_already_installed",
                artifact_id=artifact.id,
                file=str(file),
            )
            self._report.duplicates.append(artifact.id)
            return False
        self._installed.add(artifact.id)
        return True

    def install_artifact(
        self,
        file: Optional[Path],
        artifact: Artifact,
        repository: ArtifactRepository,
    ) -> None:
        """Install a build output through the installer, at most once per run.

        Only for artifacts produced by the current build. Artifacts taken
        from the source repository go through ``stage_artifact``.

        Args:
            file: The artifact's file. Usually ``artifact.file``, except for
                POM artifacts whose file is the project descriptor.
            artifact: The artifact to install.
            repository: Destination repository.

        Raises:
            ArtifactFileError: If ``file`` is None or not a regular file.
            StagingIOError: If the installer fails with an OS error.
            RepoStageError: If the installer fails otherwise (code
                ``INSTALLER_FAILED``). Every error names the artifact.
        """
        source = self._check_file(file, artifact)
        if not self._claim(artifact, source):
            return

        try:
            destination = self._installer.install(source, artifact, repository)
        except RepoStageError as exc:
            exc.details.setdefault("artifact_id", artifact.id)
            raise
        except OSError as exc:
            raise StagingIOError(
                message=f"Failed to install artifact: {artifact.id}",
                details={"artifact_id": artifact.id, "file": str(source), "reason": str(exc)},
            ) from exc
        except Exception as exc:
            raise RepoStageError(
                message=f"Failed to install artifact: {artifact.id}: {exc}",
                error_code="INSTALLER_FAILED",
                details={"artifact_id": artifact.id, "file": str(source), "reason": str(exc)},
            ) from exc

        self._report.records.append(
            InstallRecord(
                artifact_id=artifact.id,
                source=source,
                destination=destination or repository.file_of(artifact),
                mode=WriteMode.INSTALLED,
            )
        )
        self._logger.debug("artifact_installed", artifact_id=artifact.id, file=str(source))

    def stage_artifact(
        self,
        file: Optional[Path],
        artifact: Artifact,
        repository: ArtifactRepository,
    ) -> None:
        """Copy a repository-resident artifact and its metadata, at most once per run.

        Raises:
            ArtifactFileError: If ``file`` is None or not a regular file.
            StagingIOError: If copying fails.
        """
        source = self._check_file(file, artifact)
        if not self._claim(artifact, source):
            return

        destination = repository.file_of(artifact)
        self._logger.debug(
            "artifact_staged",
            artifact_id=artifact.id,
            source=str(source),
            destination=str(destination),
        )
        try:
            copy_file(source, destination)
            store_metadata(artifact, repository)
        except StagingIOError as exc:
            exc.details.setdefault("artifact_id", artifact.id)
            raise

        self._report.records.append(
            InstallRecord(
                artifact_id=artifact.id,
                source=source,
                destination=destination,
                mode=WriteMode.STAGED,
            )
        )

    # =========================================================================
    # Project Traversals
    # =========================================================================

    @contextmanager
    def _project_operation(self, project: Project, operation: str) -> Iterator[None]:
        try:
            yield
        except InstallationError:
            raise
        except RepoStageError as exc:
            raise InstallationError(
                message=f"Failed to install project {operation}: {project.id}: {exc.message}",
                project_id=project.id,
                operation=operation,
                error_code=exc.error_code,
                details={"cause": exc.to_dict()},
            ) from exc

    def install_project_pom(self, project: Project, repository: ArtifactRepository) -> None:
        """Install the project's descriptor as its POM artifact.

        For "pom" packaging the project's own artifact is the POM artifact;
        for every other packaging one is created from the coordinates.
        """
        with self._project_operation(project, "pom"):
            if project.packaging == "pom":
                pom_artifact = project.artifact
            else:
                pom_artifact = self._artifact_factory.create_project_artifact(
                    project.group_id, project.artifact_id, project.version
                )
            self.install_artifact(project.file, pom_artifact, repository)

    def install_project_artifacts(self, project: Project, repository: ArtifactRepository) -> None:
        """Install the project's POM, main artifact and attached artifacts.

        The POM is installed explicitly because it must exist in the
        repository even when the project builds no main artifact.
        """
        with self._project_operation(project, "artifacts"):
            self.install_project_pom(project, repository)

            main_artifact = project.artifact
            if main_artifact.file is not None:
                self.install_artifact(main_artifact.file, main_artifact, repository)

            for attached in project.attached_artifacts:
                self.install_artifact(attached.file, attached, repository)

    def install_project_parents(self, project: Project, repository: ArtifactRepository) -> None:
        """Install the project's parent POMs.

        Ancestors with a descriptor are part of the build and go through the
        installer. The first ancestor without one lies outside the build;
        from there the chain is staged from the source repository.

        Raises:
            InstallationError: If a POM cannot be installed or the chain is
                longer than ``max_parent_depth``.
        """
        with self._project_operation(project, "parents"):
            depth = 0
            parent = project.parent
            while parent is not None:
                depth += 1
                self._check_depth(depth, project.id)

                if parent.file is None:
                    self.stage_parent_chain(
                        parent.group_id, parent.artifact_id, parent.version, repository
                    )
                    break

                self.install_project_pom(parent, repository)
                parent = parent.parent

    def stage_parent_poms(self, pom_file: Path, repository: ArtifactRepository) -> None:
        """Stage the parent chain declared by ``pom_file`` (not the file itself)."""
        model = load_pom(pom_file)
        if model.parent is not None:
            self.stage_parent_chain(
                model.parent.group_id,
                model.parent.artifact_id,
                model.parent.version,
                repository,
            )

    def stage_parent_chain(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        repository: ArtifactRepository,
    ) -> None:
        """Stage a POM from the source repository and then all of its parents.

        Stops at a POM that declares no parent, at a POM that is missing
        from the source repository, or at one already installed this run.

        Raises:
            DescriptorError: If a staged POM cannot be parsed.
            ParentChainError: If the chain exceeds ``max_parent_depth``.
        """
        start = f"{group_id}:{artifact_id}:{version}"
        coordinates: Optional[tuple[str, str, str]] = (group_id, artifact_id, version)
        depth = 0

        while coordinates is not None:
            depth += 1
            self._check_depth(depth, start)

            pom_artifact = self._artifact_factory.create_project_artifact(*coordinates)
            if pom_artifact.id in self._installed:
                self._logger.debug("artifact_already_installed", artifact_id=pom_artifact.id)
                self._report.duplicates.append(pom_artifact.id)
                return

            pom_file = self._source.file_of(pom_artifact)
            if not pom_file.is_file():
                self._logger.debug(
                    "parent_pom_not_in_source_repository",
                    artifact_id=pom_artifact.id,
                    path=str(pom_file),
                )
                return

            self.stage_artifact(pom_file, pom_artifact, repository)

            parent = load_pom(pom_file).parent
            coordinates = (
                (parent.group_id, parent.artifact_id, parent.version) if parent else None
            )

    def install_project_dependencies(
        self,
        project: Project,
        reactor_projects: Iterable[Project],
        repository: ArtifactRepository,
    ) -> None:
        """Install the project's resolved dependencies.

        Dependencies built by a sibling project are installed through that
        sibling's artifacts and parents (each sibling once). All others are
        copied from the source repository.

        Args:
            project: Project whose ``artifacts`` are the resolved closure.
            reactor_projects: Projects of the current build.
            repository: Destination repository.
        """
        siblings = {sibling.versionless_key: sibling for sibling in reactor_projects}

        # Ordered set of versionless keys, including non-classpath types like POMs.
        remaining = dict.fromkeys(artifact.versionless_key for artifact in project.artifacts)

        with self._project_operation(project, "dependencies"):
            for key in list(remaining):
                sibling = siblings.pop(key, None)
                if sibling is None:
                    continue
                del remaining[key]
                self.install_project_artifacts(sibling, repository)
                self.install_project_parents(sibling, repository)

            for artifact in project.artifacts:
                if artifact.versionless_key in remaining:
                    self._stage_dependency(artifact, repository)

    def _stage_dependency(self, artifact: Artifact, repository: ArtifactRepository) -> None:
        # Timestamped snapshots are staged under their -SNAPSHOT base version.
        base_version = artifact.base_version
        dependency = self._artifact_factory.create_artifact_with_classifier(
            artifact.group_id,
            artifact.artifact_id,
            base_version,
            artifact.type,
            artifact.classifier,
        )

        pom_artifact = self._artifact_factory.create_artifact(
            artifact.group_id, artifact.artifact_id, base_version, None, "pom"
        )
        pom_file = self._source.file_of(pom_artifact)
        if pom_file.is_file():
            if not _same_file(pom_file, artifact.file):
                dependency.add_metadata(DescriptorMetadata(file=pom_file))
            self.stage_parent_poms(pom_file, repository)

        self.stage_artifact(artifact.file, dependency, repository)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_depth(self, depth: int, start: str) -> None:
        max_depth = self._config.max_parent_depth
        if depth > max_depth:
            raise ParentChainError(
                message=f"Parent chain of {start} exceeds {max_depth} ancestors",
                start=start,
                max_depth=max_depth,
            )
