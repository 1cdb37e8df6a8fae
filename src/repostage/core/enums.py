"""
repostage.core.enums - Type-Safe Enumerations
===============================================

All enums inherit from both ``str`` and ``Enum`` so they serialize to plain
strings in YAML/JSON and compare equal to their values:

    >>> UpdatePolicy.DAILY == "daily"
    True
"""

from enum import Enum


# =============================================================================
# Repository Policies
# =============================================================================
# Copied verbatim from the source repository to the staging repository so
# the forked integration builds see identical policies.
# =============================================================================
class UpdatePolicy(str, Enum):
    """How often a repository is checked for newer versions."""

    ALWAYS = "always"
    DAILY = "daily"
    INTERVAL = "interval"
    NEVER = "never"


class ChecksumPolicy(str, Enum):
    """What to do when a downloaded file's checksum does not match."""

    FAIL = "fail"
    WARN = "warn"
    IGNORE = "ignore"


# =============================================================================
# Write Paths
# =============================================================================
# The two ways an artifact reaches the staging repository:
#
#   INSTALLED → freshly built output, handed to the installer (which
#               maintains local repository metadata)
#   STAGED    → already repository-resident, copied byte for byte
# =============================================================================
class WriteMode(str, Enum):
    """How an artifact was written into the staging repository."""

    INSTALLED = "installed"
    STAGED = "staged"
