"""
repostage.orchestration - Orchestration Layer
===============================================

Components:
    - ArtifactStagingOrchestrator: walks a project's artifacts, parent
      chain and dependency closure and writes them into the test repository.

Usage:
    from repostage.orchestration import ArtifactStagingOrchestrator
"""

from repostage.orchestration.staging import ArtifactStagingOrchestrator

__all__ = [
    "ArtifactStagingOrchestrator",
]
