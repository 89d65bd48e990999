"""
Snippet persistence on top of a get/set key-value store.

The snippet collection lives under a single key as
{"schemaVersion": <int>, "items": [...]}. A missing key, a payload of another
shape or another schema version loads as an empty collection; rows that fail
validation are skipped. The store is handed whole arrays and returns whole
arrays; merge/replace decisions happen in the core, not here.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

import errno
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from clipanchor_db.exceptions import StorageError, StorageQuotaError
from clipanchor_db.models import SCHEMA_VERSION, Snippet

logger = structlog.get_logger(__name__)

STORAGE_KEY = "snippets"

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


class KeyValueStore(Protocol):
    """Minimal get/set store the repository persists into."""

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store, used by tests and embedding callers."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """
    Store whose whole content is one JSON object in a file.

    Writes go to a temporary file in the same directory and are moved into
    place with os.replace, so readers never see a half-written document.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            if e.errno in _QUOTA_ERRNOS:
                raise StorageQuotaError() from e
            raise StorageError(f"Failed to write store {self.path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)


class SnippetRepository:
    """
    Loads and saves the snippet collection.

    Example:
        ```python
        repo = SnippetRepository(JsonFileKeyValueStore("data/snippets.json"))
        items = repo.load_snippets()
        items = merge(items, incoming).items
        repo.save_snippets(items)
        ```
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY) -> None:
        if store is None:
            raise ValueError("store is required")
        self.store = store
        self.key = key
        self.logger = logger.bind(component="snippet_repository", key=key)

    def load_snippets(self) -> List[Snippet]:
        """
        Load the stored collection.

        Unreadable stores, unexpected payloads and other schema versions all
        load as []. Never raises.
        """
        try:
            data = self.store.get(self.key)
        except StorageError as e:
            self.logger.error("snippets_load_failed", error=str(e))
            return []

        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            return []

        version = data.get("schemaVersion")
        if version != SCHEMA_VERSION:
            self.logger.warning(
                "snippets_schema_mismatch", found=version, expected=SCHEMA_VERSION
            )
            return []

        items: List[Snippet] = []
        rejected = 0
        for row in data["items"]:
            try:
                items.append(Snippet.model_validate(row))
            except PydanticValidationError:
                rejected += 1

        if rejected:
            self.logger.warning("snippets_rows_rejected", rejected=rejected, loaded=len(items))
        self.logger.debug("snippets_loaded", count=len(items))
        return items

    def save_snippets(self, snippets: Iterable[Snippet]) -> None:
        """
        Persist the whole collection.

        Raises:
            StorageQuotaError: If the store ran out of space
            StorageError: If the write failed for another reason
        """
        items = [snippet.to_dict() for snippet in snippets]
        payload = {"schemaVersion": SCHEMA_VERSION, "items": items}
        try:
            self.store.set(self.key, payload)
        except StorageError as e:
            self.logger.error("snippets_save_failed", error=str(e), count=len(items))
            raise
        self.logger.debug("snippets_saved", count=len(items))
