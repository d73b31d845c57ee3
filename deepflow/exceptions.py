"""
deepflow exceptions.

This module contains all custom exception classes used throughout deepflow.
"""


class DeepflowError(Exception):
    """Base exception for deepflow errors."""
    pass


class FileOperationError(DeepflowError):
    """Raised when copying, creating or removing installed files fails."""
    pass


class AssetNotFoundError(DeepflowError):
    """Raised when the bundled asset directory is missing from the package."""
    pass
