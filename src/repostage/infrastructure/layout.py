"""
repostage.infrastructure.layout - Repository Path Layouts
===========================================================

A layout maps an artifact identity to a path relative to a repository's
base directory. Two layouts exist:

    default (Maven 2):
        com/acme/app/1.0-SNAPSHOT/app-1.0-20070101.123456-1-sources.jar
        └ group ┘└ a ┘└ baseVersion ┘└ artifact-version[-classifier].ext ┘

    legacy (Maven 1):
        com.acme/jars/app-1.0.jar
        └ group ┘└ type+s ┘└ artifact-version[-classifier].ext ┘

All returned paths use forward slashes; callers join them onto a Path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from repostage.core.exceptions import ConfigurationError
from repostage.core.models import Artifact


def _file_name(artifact: Artifact) -> str:
    name = f"{artifact.artifact_id}-{artifact.version}"
    if artifact.classifier:
        name += f"-{artifact.classifier}"
    return f"{name}.{artifact.file_extension}"


def descriptor_counterpart(artifact: Artifact) -> Artifact:
    """The POM artifact with the same coordinates as ``artifact``."""
    return artifact.model_copy(
        update={
            "type": "pom",
            "classifier": None,
            "extension": "pom",
            "file": None,
            "metadata": [],
        }
    )


# =============================================================================
# Abstract Base Class
# =============================================================================
class RepositoryLayout(ABC):
    """Maps artifacts and metadata files to repository-relative paths."""

    name: str = ""

    @abstractmethod
    def path_of(self, artifact: Artifact) -> str:
        """Relative path of the artifact's file."""
        ...

    @abstractmethod
    def path_of_metadata(self, artifact: Artifact, filename: str, version_level: bool = False) -> str:
        """Relative path of a repository metadata file for the artifact.

        Args:
            artifact: The artifact the metadata describes.
            filename: Metadata file name, e.g. "maven-metadata-local.xml".
            version_level: Place the file in the version directory rather
                than the artifact directory (used for snapshots).
        """
        ...

    def path_of_descriptor(self, artifact: Artifact) -> str:
        """Relative path of the POM stored alongside the artifact."""
        return self.path_of(descriptor_counterpart(artifact))


# =============================================================================
# Default (Maven 2) Layout
# =============================================================================
class DefaultRepositoryLayout(RepositoryLayout):
    name = "default"

    def _artifact_directory(self, artifact: Artifact) -> str:
        return f"{artifact.group_id.replace('.', '/')}/{artifact.artifact_id}"

    def path_of(self, artifact: Artifact) -> str:
        return f"{self._artifact_directory(artifact)}/{artifact.base_version}/{_file_name(artifact)}"

    def path_of_metadata(self, artifact: Artifact, filename: str, version_level: bool = False) -> str:
        directory = self._artifact_directory(artifact)
        if version_level:
            directory += f"/{artifact.base_version}"
        return f"{directory}/{filename}"


# =============================================================================
# Legacy (Maven 1) Layout
# =============================================================================
class LegacyRepositoryLayout(RepositoryLayout):
    name = "legacy"

    def path_of(self, artifact: Artifact) -> str:
        return f"{artifact.group_id}/{artifact.type}s/{_file_name(artifact)}"

    def path_of_metadata(self, artifact: Artifact, filename: str, version_level: bool = False) -> str:
        # Maven 1 repositories keep all metadata beside the POMs.
        return f"{artifact.group_id}/poms/{filename}"


# =============================================================================
# Layout Registry
# =============================================================================
_LAYOUTS: dict[str, RepositoryLayout] = {
    DefaultRepositoryLayout.name: DefaultRepositoryLayout(),
    LegacyRepositoryLayout.name: LegacyRepositoryLayout(),
}


def get_layout(name: str) -> RepositoryLayout:
    """Look up a layout by name.

    Raises:
        ConfigurationError: If no layout has that name.
    """
    try:
        return _LAYOUTS[name]
    except KeyError:
        raise ConfigurationError(
            message=f"Unknown repository layout: {name}",
            error_code="UNKNOWN_LAYOUT",
            details={"layout": name, "available": sorted(_LAYOUTS)},
        ) from None
