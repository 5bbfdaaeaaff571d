"""
Changelog retrieval.

Reads the changelog JSON from a URL (httpx) or a local path and turns it
into a validated document.
"""

from .loader import (
    FetchResult,
    decode_json,
    fetch_source,
    fetch_source_async,
    is_url,
    load_changelog,
    load_changelog_async,
)

__all__ = [
    "FetchResult",
    "decode_json",
    "fetch_source",
    "fetch_source_async",
    "is_url",
    "load_changelog",
    "load_changelog_async",
]
