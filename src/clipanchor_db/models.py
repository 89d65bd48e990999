"""
Data models for clipanchor_db module.

Defines Pydantic models for Anchor and Snippet (the persisted shapes) and the
ContentBlock dataclass handed over by the document collaborator.

Wire format uses camelCase keys. Validation also accepts the key names written
by earlier capture builds (conversationId, messageId, textHash, selectionPrefix,
selectionOffsets, timestamp) so old exports keep importing.
"""

import secrets
import string
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SCHEMA_VERSION = 1

_ID_ALPHABET = string.digits + string.ascii_lowercase

# Optional snippet keys that are left out of serialized output when unset
_OMIT_WHEN_EMPTY = ("duplicateIndex", "projectId", "sourceUrl", "transferredFrom")


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def generate_snippet_id() -> str:
    """Return a fresh opaque snippet id: snippet_<ms>_<7 base36 chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
    return f"snippet_{now_ms()}_{suffix}"


class PassageOffsets(BaseModel):
    """Best-effort passage position inside the block's normalized text."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)


class Anchor(BaseModel):
    """
    Multi-signal descriptor recorded at capture time.

    Signals in decreasing reliability: block_id, block_fingerprint,
    passage_prefix. block_id is present only when the enclosing block exposed a
    stable identifier; block_fingerprint is present whenever block text existed.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    collection_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("collectionId", "conversationId", "collection_id"),
        serialization_alias="collectionId",
    )
    block_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("blockId", "messageId", "block_id"),
        serialization_alias="blockId",
    )
    block_fingerprint: str = Field(
        default="",
        validation_alias=AliasChoices("blockFingerprint", "textHash", "block_fingerprint"),
        serialization_alias="blockFingerprint",
    )
    passage_prefix: str = Field(
        default="",
        validation_alias=AliasChoices("passagePrefix", "selectionPrefix", "passage_prefix"),
        serialization_alias="passagePrefix",
    )
    passage_offsets: PassageOffsets = Field(
        default_factory=PassageOffsets,
        validation_alias=AliasChoices("passageOffsets", "selectionOffsets", "passage_offsets"),
        serialization_alias="passageOffsets",
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Snippet(BaseModel):
    """
    Captured passage plus its anchor and metadata.

    A snippet with anchor=None is valid but cannot be resolved. Snippets are
    immutable; the merge engine produces labelled copies via model_copy().
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    text: str
    collection_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("collectionId", "conversationId", "collection_id"),
        serialization_alias="collectionId",
    )
    anchor: Optional[Anchor] = None
    created_at: int = Field(
        default_factory=now_ms,
        validation_alias=AliasChoices("createdAt", "timestamp", "created_at"),
        serialization_alias="createdAt",
    )
    truncated: bool = False
    duplicate_index: Optional[int] = Field(
        default=None,
        ge=2,
        validation_alias=AliasChoices("duplicateIndex", "duplicate_index"),
        serialization_alias="duplicateIndex",
    )
    project_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("projectId", "project_id"),
        serialization_alias="projectId",
    )
    source_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("sourceUrl", "source_url"),
        serialization_alias="sourceUrl",
    )
    transferred_from: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "transferredFrom", "transferredFromConversationId", "transferred_from"
        ),
        serialization_alias="transferredFrom",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, dropping unset optional labels."""
        data = self.model_dump(by_alias=True)
        for key in _OMIT_WHEN_EMPTY:
            if data.get(key) is None:
                data.pop(key, None)
        return data


@dataclass(frozen=True)
class ContentBlock:
    """
    A unit of source content as currently rendered.

    handle is whatever the document collaborator needs to scroll to or
    highlight the block; the core never inspects it.
    """

    text: str
    block_id: Optional[str] = None
    handle: Any = field(default=None, compare=False)
