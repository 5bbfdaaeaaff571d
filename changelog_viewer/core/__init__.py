"""
Core domain models and filtering logic.

This package contains the changelog data types and the pure functions that
validate, filter and aggregate a document. Nothing here performs I/O.
"""

from .aggregates import collect_tags, collect_versions, date_bounds, entry_tags, is_within_bounds
from .filters import (
    ALL_VERSIONS,
    date_matches,
    entry_matches,
    filter_changes,
    filter_entries,
    match_change,
    version_matches,
)
from .lookup import EntryView, entry_view, find_change, find_entry
from .schema import ValidationResult, is_changelog, parse_document, validate_document
from .types import ChangelogChange, ChangelogDocument, ChangelogEntry, DateRange, FilteredEntry
from .view_state import (
    ChangelogView,
    FilterState,
    clear_filters,
    derive_view,
    has_filters,
    sync_expansion,
    toggle_expanded,
)

__all__ = [
    "ALL_VERSIONS",
    "ChangelogChange",
    "ChangelogDocument",
    "ChangelogEntry",
    "ChangelogView",
    "DateRange",
    "EntryView",
    "FilterState",
    "FilteredEntry",
    "ValidationResult",
    "clear_filters",
    "collect_tags",
    "collect_versions",
    "date_bounds",
    "date_matches",
    "derive_view",
    "entry_matches",
    "entry_tags",
    "entry_view",
    "filter_changes",
    "filter_entries",
    "find_change",
    "find_entry",
    "has_filters",
    "is_changelog",
    "is_within_bounds",
    "match_change",
    "parse_document",
    "sync_expansion",
    "toggle_expanded",
    "validate_document",
    "version_matches",
]
