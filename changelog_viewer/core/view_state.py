"""
Filter state and the derived changelog view.

FilterState is an immutable snapshot of the four filter inputs. Every change
to the filters produces a new snapshot, and derive_view recomputes the whole
view (filtered entries, aggregates and the expansion map) from one snapshot
so that no part of the view lags behind another.

Expansion rules:
- While any filter is active and something matches, every matching entry is
  forced open. Entries the user already opened stay open.
- With no active filter, or no match, the map resets to empty. Manual
  toggles survive until the next resync.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping

from .aggregates import collect_tags, collect_versions, date_bounds
from .filters import ALL_VERSIONS, filter_entries
from .types import ChangelogDocument, DateRange, FilteredEntry

ExpansionMap = dict[str, bool]


@dataclass(frozen=True)
class FilterState:
    """Current filter inputs.

    Attributes:
        search_query: Free text; empty means no search restriction
        selected_tags: Tags that must all be present on a change
        selected_version: Exact version, or "" / "all" for every version
        date_range: Inclusive date bounds, or None
    """
    search_query: str = ""
    selected_tags: tuple[str, ...] = ()
    selected_version: str = ""
    date_range: DateRange | None = None

    def with_search(self, search_query: str) -> "FilterState":
        return replace(self, search_query=search_query)

    def add_tag(self, tag: str) -> "FilterState":
        if tag in self.selected_tags:
            return self
        return replace(self, selected_tags=self.selected_tags + (tag,))

    def remove_tag(self, tag: str) -> "FilterState":
        return replace(self, selected_tags=tuple(t for t in self.selected_tags if t != tag))

    def with_version(self, version: str) -> "FilterState":
        return replace(self, selected_version=version)

    def with_date_range(self, date_range: DateRange | None) -> "FilterState":
        if date_range is not None and date_range.is_empty():
            date_range = None
        return replace(self, date_range=date_range)


def clear_filters() -> FilterState:
    """Reset search, tags, version and date range in one update."""
    return FilterState()


def has_filters(state: FilterState) -> bool:
    return (
        len(state.search_query) > 0
        or len(state.selected_tags) > 0
        or (state.selected_version != "" and state.selected_version != ALL_VERSIONS)
        or state.date_range is not None
    )


def sync_expansion(
    previous: Mapping[str, bool],
    filters_active: bool,
    filtered_versions: Iterable[str],
) -> ExpansionMap:
    """Compute the next expansion map.

    Args:
        previous: Expansion map before this pass
        filters_active: Whether any filter is in effect
        filtered_versions: Versions of the entries that survived filtering

    Returns:
        A new map; previous is never modified
    """
    versions = list(filtered_versions)
    if not filters_active or not versions:
        return {}
    expanded = dict(previous)
    for version in versions:
        if not previous.get(version, False):
            expanded[version] = True
    return expanded


def toggle_expanded(expanded: Mapping[str, bool], version: str) -> ExpansionMap:
    """Invert the flag of one version, leaving the rest of the map untouched."""
    updated = dict(expanded)
    updated[version] = not expanded.get(version, False)
    return updated


@dataclass
class ChangelogView:
    """Everything the presentation layer needs for the changelog page."""
    document: ChangelogDocument
    filters: FilterState
    entries: list[FilteredEntry]
    tags: list[str]
    versions: list[str]
    bounds: DateRange | None
    filters_active: bool
    expanded: ExpansionMap = field(default_factory=dict)

    def is_expanded(self, version: str) -> bool:
        return self.expanded.get(version, False)

    @property
    def is_empty(self) -> bool:
        return not self.entries


def derive_view(
    document: ChangelogDocument,
    filters: FilterState,
    expanded: Mapping[str, bool] | None = None,
    resync: bool = True,
) -> ChangelogView:
    """Recompute the changelog view for one filter snapshot.

    Args:
        document: Full, unfiltered document
        filters: Filter snapshot used by every derived value in this pass
        expanded: Expansion map from the previous pass
        resync: Apply the expansion rules; pass False when only a manual
            toggle happened since the last pass, so the toggle is kept as is

    Returns:
        ChangelogView with the filtered entries, aggregates and new expansion map
    """
    entries = filter_entries(document, filters)
    active = has_filters(filters)
    if resync:
        next_expanded = sync_expansion(expanded or {}, active, (item.version for item in entries))
    else:
        next_expanded = dict(expanded or {})
    return ChangelogView(
        document=document,
        filters=filters,
        entries=entries,
        tags=collect_tags(document),
        versions=collect_versions(document),
        bounds=date_bounds(document),
        filters_active=active,
        expanded=next_expanded,
    )
