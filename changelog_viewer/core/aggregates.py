"""
Dataset-wide aggregates.

These are computed from the unfiltered document so the tag palette, version
selector and date picker stay stable while filters change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from .dates import coerce_bound, try_parse_iso8601
from .types import ChangelogDocument, ChangelogEntry, DateRange


def collect_tags(document: ChangelogDocument) -> list[str]:
    """Return the sorted union of tags across every change in the document."""
    tags: set[str] = set()
    for entry in document.entries:
        for change in entry.changes:
            tags.update(change.tags)
    return sorted(tags)


def collect_versions(document: ChangelogDocument) -> list[str]:
    """Return entry versions in document order; duplicates are kept."""
    return [entry.version for entry in document.entries]


def entry_tags(entry: ChangelogEntry) -> list[str]:
    """Return the distinct tags of one entry in first-seen order."""
    seen: dict[str, None] = {}
    for change in entry.changes:
        for tag in change.tags:
            seen.setdefault(tag, None)
    return list(seen)


def date_bounds(document: ChangelogDocument) -> DateRange | None:
    """Return the oldest and newest entry dates, or None for an empty document.

    Both folds keep the accumulator on ties, so the first-encountered value
    wins when two dates compare equal. Unparsable dates are skipped.
    """
    parsed = [
        value
        for value in (try_parse_iso8601(entry.date) for entry in document.entries)
        if value is not None
    ]
    if not parsed:
        return None

    oldest = parsed[0]
    newest = parsed[0]
    for current in parsed[1:]:
        if current < oldest:
            oldest = current
        if current > newest:
            newest = current
    return DateRange(start=oldest, end=newest)


def is_within_bounds(value: Any, bounds: DateRange | None) -> bool:
    """Tell whether a date can be picked in the date filter.

    Dates outside the dataset bounds are disabled. Absent bounds, or a value
    that is not a date, never restrict.
    """
    candidate = coerce_bound(value)
    if bounds is None or candidate is None:
        return True
    start: datetime | None = coerce_bound(bounds.start)
    end: datetime | None = coerce_bound(bounds.end)
    if start is not None and candidate < start:
        return False
    if end is not None and candidate > end:
        return False
    return True
