"""
repostage - Integration Test Repository Staging
=================================================

Copies a project's freshly built artifacts, its parent POMs and its
resolved dependencies into an isolated local repository, so forked
integration builds can run offline against exactly what the build produced.

Architecture Layers (top to bottom):
    1. Facade / CLI     - RepoStage, `repostage stage`
    2. Orchestration    - ArtifactStagingOrchestrator
    3. Infrastructure   - Repositories, layouts, installer, POM reader
    4. Integrations     - Build manifest loader

Quick Start:
    >>> from repostage import RepoStage
    >>> report = RepoStage().run_manifest(Path("build.yaml"), "com.acme:app")
"""

__version__ = "0.1.0"

from repostage.facade import RepoStage

__all__ = ["RepoStage", "__version__"]
