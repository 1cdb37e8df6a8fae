"""
repostage.infrastructure.factory - Artifact and Repository Factories
======================================================================

Constructs artifact identities and repositories. The artifact factory
consults a table of artifact handlers, the same idea the build tool uses:
a type decides the file extension and may imply a classifier.

    type          extension   implied classifier
    ──────────    ─────────   ──────────────────
    jar           jar         -
    pom           pom         -
    test-jar      jar         tests
    maven-plugin  jar         -
    java-source   jar         sources
    javadoc       jar         javadoc
    ejb-client    jar         client
    war / ear     war / ear   -

Unknown types use the type as the extension.
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple, Optional

from repostage.core.config import RepositoryPolicyConfig
from repostage.core.models import Artifact
from repostage.infrastructure.repository import ArtifactRepository


class ArtifactHandler(NamedTuple):
    extension: str
    classifier: Optional[str] = None


DEFAULT_HANDLERS: dict[str, ArtifactHandler] = {
    "jar": ArtifactHandler("jar"),
    "pom": ArtifactHandler("pom"),
    "test-jar": ArtifactHandler("jar", "tests"),
    "maven-plugin": ArtifactHandler("jar"),
    "ejb": ArtifactHandler("jar"),
    "ejb-client": ArtifactHandler("jar", "client"),
    "java-source": ArtifactHandler("jar", "sources"),
    "javadoc": ArtifactHandler("jar", "javadoc"),
    "war": ArtifactHandler("war"),
    "ear": ArtifactHandler("ear"),
    "rar": ArtifactHandler("rar"),
}


# =============================================================================
# Artifact Factory
# =============================================================================
class ArtifactFactory:
    """Creates artifact identities from coordinates.

    Args:
        handlers: Type → handler table. Defaults to DEFAULT_HANDLERS.

    Example:
        >>> factory = ArtifactFactory()
        >>> factory.create_project_artifact("com.acme", "parent", "1.0").id
        'com.acme:parent:pom:1.0'
    """

    def __init__(self, handlers: Optional[dict[str, ArtifactHandler]] = None) -> None:
        self._handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)

    def handler_for(self, type_: str) -> ArtifactHandler:
        return self._handlers.get(type_, ArtifactHandler(type_))

    def create_artifact_with_classifier(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        type_: str,
        classifier: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> Artifact:
        """Create an artifact, falling back to the handler's classifier."""
        handler = self.handler_for(type_)
        return Artifact(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            type=type_,
            classifier=classifier or handler.classifier,
            extension=handler.extension,
            scope=scope,
        )

    def create_artifact(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        scope: Optional[str],
        type_: str,
    ) -> Artifact:
        return self.create_artifact_with_classifier(group_id, artifact_id, version, type_, scope=scope)

    def create_project_artifact(self, group_id: str, artifact_id: str, version: str) -> Artifact:
        """Create the POM artifact for a project."""
        return self.create_artifact_with_classifier(group_id, artifact_id, version, "pom")


# =============================================================================
# Repository Factory
# =============================================================================
class RepositoryFactory:
    """Creates ArtifactRepository instances."""

    def create_repository(
        self,
        id: str,
        basedir: Path,
        layout: str = "default",
        snapshots: Optional[RepositoryPolicyConfig] = None,
        releases: Optional[RepositoryPolicyConfig] = None,
    ) -> ArtifactRepository:
        return ArtifactRepository(
            id=id,
            basedir=Path(basedir),
            layout=layout,
            snapshots=snapshots or RepositoryPolicyConfig(),
            releases=releases or RepositoryPolicyConfig(),
        )

    def create_like(self, template: ArtifactRepository, basedir: Path) -> ArtifactRepository:
        """Create a repository identical to ``template`` except for its location."""
        return self.create_repository(
            id=template.id,
            basedir=basedir,
            layout=template.layout,
            snapshots=template.snapshots.model_copy(),
            releases=template.releases.model_copy(),
        )
