"""
Change and entry predicates.

A change matches when it satisfies both the search clause and the tag
clause. An entry survives when its version and date pass and at least one
of its changes matches. All functions here are pure and never raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Sequence

from .dates import coerce_bound, try_parse_iso8601
from .types import ChangelogChange, ChangelogDocument, ChangelogEntry, DateRange, FilteredEntry

if TYPE_CHECKING:
    from .view_state import FilterState

# Version selector value meaning "every version".
ALL_VERSIONS = "all"


def match_change(
    change: ChangelogChange,
    search_query: str,
    selected_tags: Sequence[str],
) -> bool:
    """Check a change against the search text and the selected tags.

    Title, description and impact are matched case-insensitively. Commits and
    tags are matched as case-sensitive substrings, so "abc" does not find
    commit "ABC123". Every selected tag must be present on the change.
    """
    return _matches_search(change, search_query) and _matches_tags(change, selected_tags)


def _matches_search(change: ChangelogChange, search_query: str) -> bool:
    if not search_query:
        return True
    needle = search_query.lower()
    if (
        needle in change.title.lower()
        or needle in change.description.lower()
        or needle in change.impact.lower()
    ):
        return True
    if any(search_query in commit for commit in change.commits):
        return True
    return any(search_query in tag for tag in change.tags)


def _matches_tags(change: ChangelogChange, selected_tags: Sequence[str]) -> bool:
    if not selected_tags:
        return True
    return all(tag in change.tags for tag in selected_tags)


def version_matches(entry: ChangelogEntry, selected_version: str | None) -> bool:
    if not selected_version or selected_version == ALL_VERSIONS:
        return True
    return entry.version == selected_version


def date_matches(entry: ChangelogEntry, date_range: DateRange | None) -> bool:
    """Check an entry date against inclusive bounds.

    Missing or unparsable bounds do not restrict. An entry whose own date
    cannot be parsed is not excluded by the date clause.
    """
    if date_range is None:
        return True
    start = coerce_bound(date_range.start)
    end = coerce_bound(date_range.end)
    if start is None and end is None:
        return True
    entry_date = try_parse_iso8601(entry.date)
    if entry_date is None:
        return True
    if start is not None and entry_date < start:
        return False
    if end is not None and entry_date > end:
        return False
    return True


def filter_changes(
    entry: ChangelogEntry,
    search_query: str,
    selected_tags: Sequence[str],
) -> list[ChangelogChange]:
    return [change for change in entry.changes if match_change(change, search_query, selected_tags)]


def entry_matches(
    entry: ChangelogEntry,
    selected_version: str | None,
    date_range: DateRange | None,
    search_query: str = "",
    selected_tags: Sequence[str] = (),
) -> bool:
    """Check whether an entry survives the full filter set.

    An entry with no matching changes is rejected even when its version and
    date pass.
    """
    if not version_matches(entry, selected_version):
        return False
    if not date_matches(entry, date_range):
        return False
    return any(match_change(change, search_query, selected_tags) for change in entry.changes)


def filter_entries(
    source: ChangelogDocument | Iterable[ChangelogEntry],
    filters: "FilterState",
) -> list[FilteredEntry]:
    """Apply the filter state to every entry, preserving document order.

    Args:
        source: A document or a plain iterable of entries
        filters: Current filter values

    Returns:
        Surviving entries, each paired with its non-empty matching changes
    """
    entries = source.entries if isinstance(source, ChangelogDocument) else source
    result: list[FilteredEntry] = []
    for entry in entries:
        if not version_matches(entry, filters.selected_version):
            continue
        if not date_matches(entry, filters.date_range):
            continue
        changes = filter_changes(entry, filters.search_query, filters.selected_tags)
        if changes:
            result.append(FilteredEntry(entry=entry, changes=changes))
    return result
