"""
Exception hierarchy for ClipAnchor.

Defines all exception types with error codes, transient flags, and correlation IDs.
Not-found conditions (unresolved anchors, empty fingerprints, failed continuity
checks) are ordinary return values and never appear here.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

import uuid
from typing import Any, Dict, Optional


class ClipAnchorError(Exception):
    """
    Base exception for all ClipAnchor errors.

    All ClipAnchor exceptions inherit from this class. Provides standard
    error attributes: message, error_code, details, correlation_id.

    Attributes:
        message: Human-readable error message
        error_code: Programmatic error code (e.g., "ERR_001")
        details: Additional context (dict)
        correlation_id: UUID for tracing across layers
        original_exception: Wrapped exception (if any)
        is_transient: Whether error is transient (retryable)

    Example:
        raise ClipAnchorError(
            message="Operation failed",
            error_code="ERR_UNKNOWN",
            details={"param": "value"},
        )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        """
        Initialize ClipAnchorError.

        Args:
            message: Error message
            error_code: Error code for programmatic handling
            details: Additional context dict
            correlation_id: UUID for request tracing
            original_exception: Original wrapped exception
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.original_exception = original_exception
        self.is_transient = False  # Default: not retryable

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with all error information
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "correlation_id": self.correlation_id,
            "original_error": str(self.original_exception) if self.original_exception else None,
        }


class ValidationError(ClipAnchorError):
    """
    Raised when an argument or configuration value is invalid.

    Error Codes:
        VAL_001: Missing required value
        VAL_002: Invalid value type
        VAL_003: Value out of range

    Not transient (caller errors should not be retried).
    """

    def __init__(self, message: str, error_code: str = "VAL_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class IdentityError(ClipAnchorError):
    """
    Raised when a snippet lacking identity fields reaches the merge engine.

    Error Codes:
        IDENT_001: Snippet has no usable text
        IDENT_002: Object is not a snippet

    This is a contract violation by the caller, never a data-quality issue:
    malformed import rows are filtered before they get here.
    """

    def __init__(self, message: str, error_code: str = "IDENT_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class ImportFormatError(ClipAnchorError):
    """
    Raised when an import document cannot be read at all.

    Error Codes:
        IMP_001: Document is not valid JSON
        IMP_002: Document has no item array

    Individual malformed rows do not raise; they are dropped and counted.
    """

    def __init__(self, message: str, error_code: str = "IMP_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False
