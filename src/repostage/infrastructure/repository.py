"""
repostage.infrastructure.repository - Artifact Repositories
=============================================================

An ``ArtifactRepository`` is a base directory plus a path layout. Each run
works with two of them:

    source repository   → the user's local repository, read only
    staging repository  → the isolated test repository, written to

Both are structurally identical; only ``basedir`` differs.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from repostage.core.config import RepositoryPolicyConfig
from repostage.core.models import Artifact
from repostage.infrastructure.layout import RepositoryLayout, get_layout


class ArtifactRepository(BaseModel):
    """A local repository directory with a path layout.

    Attributes:
        id: Repository id, copied from the source to the staging repository.
        basedir: Base directory all layout paths are relative to.
        layout: Layout name ("default" or "legacy").
        snapshots: Snapshot policy.
        releases: Release policy.

    Example:
        >>> repo = ArtifactRepository(id="local", basedir=Path("/tmp/repo"))
        >>> repo.path_of(Artifact(group_id="com.acme", artifact_id="app", version="1.0"))
        'com/acme/app/1.0/app-1.0.jar'
    """

    id: str = Field(default="local", description="Repository id")
    basedir: Path = Field(description="Repository base directory")
    layout: str = Field(default="default", description="Path layout name")
    snapshots: RepositoryPolicyConfig = Field(default_factory=RepositoryPolicyConfig)
    releases: RepositoryPolicyConfig = Field(default_factory=RepositoryPolicyConfig)

    @property
    def repository_layout(self) -> RepositoryLayout:
        return get_layout(self.layout)

    def path_of(self, artifact: Artifact) -> str:
        """Layout path of the artifact, relative to ``basedir``."""
        return self.repository_layout.path_of(artifact)

    def file_of(self, artifact: Artifact) -> Path:
        """Absolute location of the artifact's file in this repository."""
        return self.basedir / self.path_of(artifact)

    def descriptor_file_of(self, artifact: Artifact) -> Path:
        """Location of the POM stored alongside the artifact."""
        return self.basedir / self.repository_layout.path_of_descriptor(artifact)

    def metadata_file_of(self, artifact: Artifact, filename: str, version_level: bool = False) -> Path:
        return self.basedir / self.repository_layout.path_of_metadata(
            artifact, filename, version_level=version_level
        )

    def __str__(self) -> str:
        return f"{self.id} ({self.basedir})"
