"""
repostage.core.config - Configuration Management
==================================================

Configuration for a staging run. Values are loaded from the following
sources (highest priority first):

    1. Explicit constructor arguments
    2. Environment variables (prefixed with REPOSTAGE_)
    3. YAML configuration file (repostage.yaml)
    4. Default values defined in the models below

Configuration flows down through the system. The facade creates the source
repository from it, and the orchestrator reads the skip flag, the staging
override path and the parent depth bound:

    StagingConfig
        ├── local_repository / repository_id / repository_layout → source repo
        ├── snapshots / releases (RepositoryPolicyConfig)         → both repos
        ├── staging_repository_path / skip_installation           → orchestrator
        └── log_level                                             → CLI logging

Usage:
    # Load from environment variables:
    config = StagingConfig()

    # Load from YAML file:
    config = load_config("repostage.yaml")

    # Explicit overrides:
    config = StagingConfig(staging_repository_path="target/it-repo")

Environment Variables:
    REPOSTAGE_LOCAL_REPOSITORY=/home/ci/.m2/repository
    REPOSTAGE_STAGING_REPOSITORY_PATH=target/it-repo
    REPOSTAGE_SKIP_INSTALLATION=true
    REPOSTAGE_SNAPSHOTS__UPDATE_POLICY=never
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from repostage.core.enums import ChecksumPolicy, UpdatePolicy
from repostage.core.exceptions import ConfigurationError


DEFAULT_CONFIG_FILE = "repostage.yaml"


def _default_local_repository() -> Path:
    return Path.home() / ".m2" / "repository"


# =============================================================================
# Repository Policy Configuration
# =============================================================================
class RepositoryPolicyConfig(BaseModel):
    """Update and checksum policy for snapshot or release artifacts.

    The staging repository copies these from the source repository, so
    apart from its location it is indistinguishable from it.

    Attributes:
        enabled: Whether artifacts of this kind are served at all.
        update_policy: How often to check for newer versions.
        checksum_policy: What to do on checksum mismatch.
    """

    enabled: bool = Field(default=True, description="Serve artifacts of this kind")
    update_policy: UpdatePolicy = Field(
        default=UpdatePolicy.DAILY,
        description="How often to check for updates",
    )
    checksum_policy: ChecksumPolicy = Field(
        default=ChecksumPolicy.WARN,
        description="Behaviour on checksum mismatch",
    )


# =============================================================================
# Main Configuration
# =============================================================================
class StagingConfig(BaseSettings):
    """Top-level configuration for a staging run.

    Attributes:
        local_repository: Base directory of the user's local repository,
            the source for already-resolved dependencies and parent POMs.
        staging_repository_path: Base directory of the isolated test
            repository. When None the local repository itself is used.
        skip_installation: Disable the whole run.
        repository_id: Id of the local repository (copied to staging).
        repository_layout: "default" (Maven 2) or "legacy" (Maven 1).
        snapshots: Policy for snapshot artifacts.
        releases: Policy for release artifacts.
        max_parent_depth: Upper bound on parent-chain walks.
        log_level: structlog filtering level.

    Example:
        >>> config = StagingConfig(
        ...     staging_repository_path=Path("target/it-repo"),
        ...     log_level="DEBUG",
        ... )
    """

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------
    local_repository: Path = Field(
        default_factory=_default_local_repository,
        description="Base directory of the source (local) repository",
    )
    staging_repository_path: Optional[Path] = Field(
        default=None,
        description="Override base directory for the staging repository",
    )
    repository_id: str = Field(
        default="local",
        description="Id of the local repository",
    )
    repository_layout: Literal["default", "legacy"] = Field(
        default="default",
        description="Repository path layout",
    )
    snapshots: RepositoryPolicyConfig = Field(
        default_factory=RepositoryPolicyConfig,
        description="Snapshot artifact policy",
    )
    releases: RepositoryPolicyConfig = Field(
        default_factory=RepositoryPolicyConfig,
        description="Release artifact policy",
    )

    # -------------------------------------------------------------------------
    # Run Behaviour
    # -------------------------------------------------------------------------
    skip_installation: bool = Field(
        default=False,
        description="Skip artifact installation entirely",
    )
    max_parent_depth: int = Field(
        default=64,
        ge=1,
        le=1000,
        description="Maximum number of ancestors followed in a parent chain",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------
    #   REPOSTAGE_SKIP_INSTALLATION       → config.skip_installation
    #   REPOSTAGE_SNAPSHOTS__UPDATE_POLICY → config.snapshots.update_policy
    # -------------------------------------------------------------------------
    model_config = {
        "env_prefix": "REPOSTAGE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


# =============================================================================
# Configuration Loader
# =============================================================================
def load_config(path: Optional[str] = None, **overrides: Any) -> StagingConfig:
    """Load configuration from a YAML file and/or environment variables.

    Args:
        path: Path to a YAML configuration file. If None, looks for
            'repostage.yaml' in the current directory and falls back to
            defaults + environment variables when it is absent.
        **overrides: Values that take precedence over the file, e.g. CLI
            options. None values are ignored.

    Returns:
        A fully validated StagingConfig instance.

    Raises:
        FileNotFoundError: If an explicit path is provided but doesn't exist.
        ConfigurationError: If the YAML document is not a mapping.
    """
    if path is None:
        default_path = Path(DEFAULT_CONFIG_FILE)
        if default_path.exists():
            path = str(default_path)

    yaml_data: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(config_path) as f:
            raw_data = yaml.safe_load(f)
        if raw_data is None:
            raw_data = {}
        if not isinstance(raw_data, dict):
            raise ConfigurationError(
                message=f"Configuration file must contain a mapping: {path}",
                details={"path": str(config_path), "found": type(raw_data).__name__},
            )
        yaml_data = raw_data

    yaml_data.update({key: value for key, value in overrides.items() if value is not None})
    return StagingConfig(**yaml_data)
