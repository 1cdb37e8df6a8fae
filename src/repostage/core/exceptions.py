"""
repostage.core.exceptions - Custom Exception Hierarchy
========================================================

Structured exceptions raised while staging artifacts into a test repository.
Every exception carries a machine-readable error code and a ``details`` dict
so failures can be logged and reported with the offending artifact or
project attached.

Exception Hierarchy:
    RepoStageError (base)
        ├── ConfigurationError   - Invalid config, unknown layout, bad manifest
        ├── ArtifactFileError    - Build output missing or not a regular file
        ├── StagingIOError       - Directory creation or file copy failed
        ├── DescriptorError      - POM file could not be parsed
        ├── ParentChainError     - Parent chain exceeded the depth bound
        └── InstallationError    - Project-level failure (wraps the above)

None of these are retried. A run aborts on the first error and the staging
repository is left as it is.

Usage:
    >>> from repostage.core.exceptions import ArtifactFileError
    >>> raise ArtifactFileError(
    ...     message="Artifact is not fully assembled: target/classes",
    ...     artifact_id="com.acme:app:jar:1.0",
    ...     file="target/classes",
    ...     error_code="ARTIFACT_NOT_ASSEMBLED",
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
# All repostage exceptions inherit from this base class so the CLI and the
# facade can catch every framework error with a single except clause.
# =============================================================================
class RepoStageError(Exception):
    """Base exception for all repostage errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (UPPER_SNAKE_CASE).
        details: Additional debugging context (artifact id, paths, ...).
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary for structured logging.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
class ConfigurationError(RepoStageError):
    """Raised when configuration or a build manifest is invalid.

    Common Causes:
        - Unknown repository layout name
        - Config YAML that is not a mapping
        - Build manifest referencing unknown projects or declaring a
          parent cycle
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Artifact File Error
# =============================================================================
# A build output that was never produced (or is a directory, e.g. an
# exploded "target/classes") cannot be installed. This is a hard failure.
# =============================================================================
class ArtifactFileError(RepoStageError):
    """Raised when an artifact has no file or its file is not a regular file.

    Attributes:
        artifact_id: Id of the artifact whose file is unusable.
        file: The offending path, or None if the artifact had no file.
    """

    def __init__(
        self,
        message: str,
        artifact_id: str,
        file: Optional[str] = None,
        error_code: str = "ARTIFACT_FILE_MISSING",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["artifact_id"] = artifact_id
        enriched_details["file"] = file

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.artifact_id = artifact_id
        self.file = file


# =============================================================================
# Staging I/O Error
# =============================================================================
class StagingIOError(RepoStageError):
    """Raised when creating a directory or copying a file fails.

    Wraps the underlying ``OSError`` (available as ``__cause__``) and adds
    the artifact or repository the operation was working on.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "IO_FAILURE",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Descriptor Error
# =============================================================================
class DescriptorError(RepoStageError):
    """Raised when a POM file cannot be parsed.

    Attributes:
        path: The POM file that failed to parse.
    """

    def __init__(
        self,
        message: str,
        path: str,
        error_code: str = "MALFORMED_DESCRIPTOR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["path"] = path

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.path = path


# =============================================================================
# Parent Chain Error
# =============================================================================
class ParentChainError(RepoStageError):
    """Raised when a parent chain is longer than the configured bound.

    Build-declared parent chains are trees, so hitting the bound almost
    always means a cycle in hand-edited POMs or manifests.
    """

    def __init__(
        self,
        message: str,
        start: str,
        max_depth: int,
        error_code: str = "PARENT_CHAIN_TOO_DEEP",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["start"] = start
        enriched_details["max_depth"] = max_depth

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.start = start
        self.max_depth = max_depth


# =============================================================================
# Installation Error
# =============================================================================
# Project-level operations wrap lower-level failures so the caller learns
# which project was being processed. The error code of the cause is kept.
# =============================================================================
class InstallationError(RepoStageError):
    """Raised when a project's artifacts, parents or dependencies fail to install.

    Attributes:
        project_id: Id of the project being processed.
        operation: Which traversal failed ("artifacts", "parents",
            "dependencies", "pom").
    """

    def __init__(
        self,
        message: str,
        project_id: str,
        operation: str,
        error_code: str = "INSTALLATION_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["project_id"] = project_id
        enriched_details["operation"] = operation

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.project_id = project_id
        self.operation = operation
