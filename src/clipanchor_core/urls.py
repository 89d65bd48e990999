"""
Collection and project identifiers carried in document URLs.

Supported shapes:
    /c/{collection_id}                 (last occurrence wins, e.g. /g/{p}/c/{id})
    ?conversationId={collection_id}    (fallback)
    /g/{project_id}

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

import re
from typing import Optional
from urllib.parse import unquote

_COLLECTION_PATH = re.compile(r"/c/([^/?#]+)")
_COLLECTION_QUERY = re.compile(r"[?&]conversationId=([^&#]+)")
_PROJECT_PATH = re.compile(r"/g/([^/?#]+)")


def get_collection_id_from_url(url: Optional[str]) -> Optional[str]:
    """Return the collection id of a URL, or None."""
    if not url:
        return None

    matches = _COLLECTION_PATH.findall(str(url))
    if matches:
        return unquote(matches[-1])

    match = _COLLECTION_QUERY.search(str(url))
    if match:
        return unquote(match.group(1))

    return None


def get_project_id_from_url(url: Optional[str]) -> Optional[str]:
    """Return the project id of a URL, or None."""
    if not url:
        return None

    match = _PROJECT_PATH.search(str(url))
    return unquote(match.group(1)) if match else None


def is_project_page(url: Optional[str]) -> bool:
    return get_project_id_from_url(url) is not None
