"""
repostage.infrastructure - Repository & File Layer
====================================================

Everything that touches the file system on behalf of the orchestrator.

Architecture:
    ┌─────────────── ORCHESTRATION LAYER ─────────────────┐
    │  ArtifactStagingOrchestrator                          │
    └──────────────┬───────────────────────┬───────────────┘
                   │ install               │ stage / read POMs
                   ▼                       ▼
    ┌─────────────── INFRASTRUCTURE LAYER ────────────────┐
    │  ArtifactInstaller (ABC)     ArtifactRepository       │
    │    └── DefaultArtifactInstaller   └── RepositoryLayout│
    │  ArtifactFactory / RepositoryFactory                  │
    │  metadata (descriptor + maven-metadata-local.xml)     │
    │  pom (POM reader)          files (copy, mkdir)        │
    └──────────────────────────────────────────────────────┘
"""

from repostage.infrastructure.factory import ArtifactFactory, ArtifactHandler, RepositoryFactory
from repostage.infrastructure.installer import ArtifactInstaller, DefaultArtifactInstaller
from repostage.infrastructure.layout import (
    DefaultRepositoryLayout,
    LegacyRepositoryLayout,
    RepositoryLayout,
    get_layout,
)
from repostage.infrastructure.pom import load_pom, parse_pom
from repostage.infrastructure.repository import ArtifactRepository

__all__ = [
    "ArtifactFactory",
    "ArtifactHandler",
    "RepositoryFactory",
    "ArtifactInstaller",
    "DefaultArtifactInstaller",
    "ArtifactRepository",
    "RepositoryLayout",
    "DefaultRepositoryLayout",
    "LegacyRepositoryLayout",
    "get_layout",
    "load_pom",
    "parse_pom",
]
