"""
clipanchor_db - Data models and persistence for ClipAnchor.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from clipanchor_db.models import (
    SCHEMA_VERSION,
    Anchor,
    ContentBlock,
    PassageOffsets,
    Snippet,
    generate_snippet_id,
)
from clipanchor_db.exceptions import StorageError, StorageQuotaError
from clipanchor_db.snippet_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    SnippetRepository,
)

__all__ = [
    "SCHEMA_VERSION",
    "Anchor",
    "ContentBlock",
    "PassageOffsets",
    "Snippet",
    "generate_snippet_id",
    "StorageError",
    "StorageQuotaError",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SnippetRepository",
]
