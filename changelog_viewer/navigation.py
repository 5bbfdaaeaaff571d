"""
Shareable navigation state.

A link addresses one of three pages through its query string:

    ?src=<source>                           changelog page
    ?src=<source>&version=<v>               entry page
    ?src=<source>&version=<v>&id=<change>   change page

Filters travel alongside as q, tag (repeated), filter_version, from and to,
so that a copied link reopens the same filtered view.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time, timedelta
from typing import Any
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from .core.dates import coerce_bound
from .core.filters import ALL_VERSIONS
from .core.types import DateRange
from .core.view_state import FilterState

PAGE_CHANGELOG = "changelog"
PAGE_ENTRY = "entry"
PAGE_CHANGE = "change"


@dataclass(frozen=True)
class NavigationState:
    """Everything a shareable link encodes.

    Attributes:
        src: Changelog source URL or path
        version: Version of the entry page, if any
        change_id: Change id of the change page (requires version)
        filters: Filter snapshot of the current page
    """
    src: str
    version: str | None = None
    change_id: str | None = None
    filters: FilterState = field(default_factory=FilterState)

    @property
    def page(self) -> str:
        if self.version and self.change_id:
            return PAGE_CHANGE
        if self.version:
            return PAGE_ENTRY
        return PAGE_CHANGELOG


def build_query(state: NavigationState) -> str:
    """Encode a navigation state as a query string (without the leading "?")."""
    params: list[tuple[str, str]] = [("src", state.src)]
    if state.version:
        params.append(("version", state.version))
        if state.change_id:
            params.append(("id", state.change_id))

    filters = state.filters
    if filters.search_query:
        params.append(("q", filters.search_query))
    for tag in filters.selected_tags:
        params.append(("tag", tag))
    if filters.selected_version and filters.selected_version != ALL_VERSIONS:
        params.append(("filter_version", filters.selected_version))
    if filters.date_range is not None:
        start = _format_bound(filters.date_range.start)
        end = _format_bound(filters.date_range.end)
        if start:
            params.append(("from", start))
        if end:
            params.append(("to", end))
    return urlencode(params)


def parse_query(query: str) -> NavigationState:
    """Decode a query string into a navigation state.

    Unparsable from/to values are dropped so they place no restriction.
    """
    params = parse_qs(query.lstrip("?"), keep_blank_values=False)

    def first(name: str) -> str | None:
        values = params.get(name)
        return values[0] if values else None

    start = coerce_bound(first("from"))
    end = coerce_bound(first("to"))
    date_range = DateRange(start=start, end=end) if start or end else None
    filters = FilterState(
        search_query=first("q") or "",
        selected_tags=tuple(dict.fromkeys(params.get("tag", []))),
        selected_version=first("filter_version") or "",
        date_range=date_range,
    )
    version = first("version")
    return NavigationState(
        src=first("src") or "",
        version=version,
        change_id=first("id") if version else None,
        filters=filters,
    )


def share_link(base_url: str, state: NavigationState) -> str:
    """Build an absolute (or relative, when base_url is empty) share link."""
    query = build_query(state)
    if not base_url:
        return f"?{query}"
    scheme, netloc, path, _, fragment = urlsplit(base_url)
    return urlunsplit((scheme, netloc, path, query, fragment))


def parse_link(link: str) -> NavigationState:
    return parse_query(urlsplit(link).query)


def entry_link(base_url: str, src: str, version: str) -> str:
    return share_link(base_url, NavigationState(src=src, version=version))


def change_link(base_url: str, src: str, version: str, change_id: str) -> str:
    return share_link(base_url, NavigationState(src=src, version=version, change_id=change_id))


def _format_bound(value: Any) -> str:
    parsed = coerce_bound(value)
    if parsed is None:
        return ""
    if parsed.time() == time.min and parsed.utcoffset() == timedelta(0):
        return date(parsed.year, parsed.month, parsed.day).isoformat()
    return parsed.isoformat()
