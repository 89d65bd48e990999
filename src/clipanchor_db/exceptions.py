"""
Custom exceptions for clipanchor_db module.
"""

QUOTA_MESSAGE = "Storage quota exceeded. Please clear some snippets or export your data."


class StorageError(Exception):
    """Raised when the snippet store cannot be read or written."""
    pass


class StorageQuotaError(StorageError):
    """Raised when the store has run out of space."""

    def __init__(self, message: str = QUOTA_MESSAGE):
        super().__init__(message)
