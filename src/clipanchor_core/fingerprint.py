"""
Content fingerprinting.

A fingerprint is a short, deterministic hash of whitespace-normalized text.
Texts that normalize identically always share a fingerprint, so re-wrapping or
trailing-space changes in a re-rendered document never change it. Every
identity and matching operation in ClipAnchor relies on that.

Fingerprints are not collision resistant; consumers treat a match as a
candidate, not as proof.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

import hashlib
import re
from typing import Optional

_WHITESPACE_RUN = re.compile(r"\s+")

# 8-byte digest -> 16 hex chars
FINGERPRINT_DIGEST_SIZE = 8


def normalize_text(text: Optional[str]) -> str:
    """
    Trim text and collapse every whitespace run to a single space.

    Args:
        text: Raw text (None is treated as empty)

    Returns:
        Normalized text, "" for empty or whitespace-only input

    Example:
        >>> normalize_text("  Hello   world\\n")
        'Hello world'
    """
    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def fingerprint(text: Optional[str]) -> str:
    """
    Compute the fingerprint of text.

    Args:
        text: Raw text; None, "" and whitespace-only input are allowed

    Returns:
        16-character hex string, or "" when there is nothing to hash

    Example:
        >>> fingerprint("Hello   world\\n") == fingerprint("Hello world")
        True
    """
    normalized = normalize_text(text)
    if not normalized:
        return ""
    digest = hashlib.blake2b(normalized.encode("utf-8"), digest_size=FINGERPRINT_DIGEST_SIZE)
    return digest.hexdigest()
