"""
repostage.infrastructure.installer - Artifact Installer
=========================================================

The installer puts a freshly built artifact into a repository. Unlike a
plain copy it also applies the repository transform: it maintains the
local repository metadata that lists installed versions. Artifacts taken
from the source repository have been through this already, which is why
the orchestrator stages those by copy instead of installing them.

Implementations:
    - ArtifactInstaller (ABC): the interface the orchestrator depends on
    - DefaultArtifactInstaller: copy + descriptor metadata + local metadata
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

import structlog

from repostage.core.models import Artifact
from repostage.infrastructure.files import copy_file
from repostage.infrastructure.metadata import store_metadata, update_local_metadata
from repostage.infrastructure.repository import ArtifactRepository


logger = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Abstract Base Class
# =============================================================================
class ArtifactInstaller(ABC):
    """Installs a build artifact into a repository."""

    @abstractmethod
    def install(self, file: Path, artifact: Artifact, repository: ArtifactRepository) -> Path:
        """Install ``file`` as ``artifact`` into ``repository``.

        Args:
            file: The artifact's file. Already validated by the caller.
            artifact: Identity (and metadata) of the artifact.
            repository: Destination repository.

        Returns:
            The path the artifact was written to.
        """
        ...


# =============================================================================
# Default Implementation
# =============================================================================
class DefaultArtifactInstaller(ArtifactInstaller):
    """Copies the artifact, its metadata records and updates local metadata.

    Args:
        clock: Returns the timestamp used for ``<lastUpdated>``. Defaults
            to the current UTC time.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or _utc_now
        self._logger = logger.bind(component="artifact_installer")

    def install(self, file: Path, artifact: Artifact, repository: ArtifactRepository) -> Path:
        destination = copy_file(file, repository.file_of(artifact))
        store_metadata(artifact, repository)
        update_local_metadata(artifact, repository, self._clock())

        self._logger.debug(
            "artifact_installed",
            artifact_id=artifact.id,
            destination=str(destination),
        )
        return destination
