"""
repostage.core - Foundation Layer
===================================

The building blocks every other package depends on:

    - config:      StagingConfig, RepositoryPolicyConfig, load_config
    - enums:       UpdatePolicy, ChecksumPolicy, WriteMode
    - models:      Artifact, Project, PomModel, StagingReport, ...
    - exceptions:  The RepoStageError hierarchy
    - log:         structlog setup

Dependency Rule:
    core/ depends on nothing else in the repostage package. Models are
    plain data: no file-system access happens here.
"""

from repostage.core.config import RepositoryPolicyConfig, StagingConfig, load_config
from repostage.core.enums import ChecksumPolicy, UpdatePolicy, WriteMode
from repostage.core.exceptions import (
    ArtifactFileError,
    ConfigurationError,
    DescriptorError,
    InstallationError,
    ParentChainError,
    RepoStageError,
    StagingIOError,
)
from repostage.core.models import (
    Artifact,
    DescriptorMetadata,
    InstallRecord,
    ParentReference,
    PomModel,
    Project,
    StagingReport,
)

__all__ = [
    # Config
    "StagingConfig",
    "RepositoryPolicyConfig",
    "load_config",
    # Enums
    "UpdatePolicy",
    "ChecksumPolicy",
    "WriteMode",
    # Models
    "Artifact",
    "DescriptorMetadata",
    "Project",
    "ParentReference",
    "PomModel",
    "InstallRecord",
    "StagingReport",
    # Exceptions
    "RepoStageError",
    "ConfigurationError",
    "ArtifactFileError",
    "StagingIOError",
    "DescriptorError",
    "ParentChainError",
    "InstallationError",
]
