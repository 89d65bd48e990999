"""
ClipAnchor Core Layer.

Middle layer in dependency hierarchy. Contains:
- Fingerprinting and anchor building
- Tiered source resolution
- Identity, dedup and merge engine
- Continuity (branch) detection
- Exception hierarchy, configuration, logging service

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from .anchors import build_anchor, capture_snippet, find_passage_offsets
from .config import ClipAnchorSettings, get_config_summary, settings
from .continuity import ContinuityDetector, ContinuityVerdict, is_continuation
from .exceptions import (
    ClipAnchorError,
    IdentityError,
    ImportFormatError,
    ValidationError,
)
from .fingerprint import fingerprint, normalize_text
from .identity import (
    IdentityKey,
    ImportMode,
    MergeResult,
    apply_import,
    compute_identity_key,
    deduplicate_with_labels,
    merge,
    replace,
)
from .logging_service import LoggingConfig, LoggingService
from .resolver import SourceResolver, locate_source, resolve

__all__ = [
    # Exceptions
    "ClipAnchorError",
    "ValidationError",
    "IdentityError",
    "ImportFormatError",
    # Configuration
    "ClipAnchorSettings",
    "settings",
    "get_config_summary",
    # Logging
    "LoggingService",
    "LoggingConfig",
    # Fingerprint / anchors
    "fingerprint",
    "normalize_text",
    "build_anchor",
    "capture_snippet",
    "find_passage_offsets",
    # Resolver
    "SourceResolver",
    "resolve",
    "locate_source",
    # Identity & merge
    "IdentityKey",
    "ImportMode",
    "MergeResult",
    "compute_identity_key",
    "deduplicate_with_labels",
    "merge",
    "replace",
    "apply_import",
    # Continuity
    "ContinuityDetector",
    "ContinuityVerdict",
    "is_continuation",
]
