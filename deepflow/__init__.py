"""
deepflow - spec-driven development commands, skills and agents for Claude Code.

This package installs the bundled assets into a Claude Code configuration
directory and provides the statusline and background update checker that run
inside the host tool.
"""

__version__ = "0.4.0"

# Import exceptions
from .exceptions import (
    AssetNotFoundError,
    DeepflowError,
    FileOperationError,
)

# Import update cache protocol
from .versioning import (
    TriggerThrottle,
    VersionCache,
    VersionRecord,
    is_newer_version,
    parse_version,
)

__all__ = [
    # Version
    "__version__",
    # Exceptions
    "DeepflowError",
    "FileOperationError",
    "AssetNotFoundError",
    # Update cache
    "VersionCache",
    "VersionRecord",
    "TriggerThrottle",
    "is_newer_version",
    "parse_version",
]
