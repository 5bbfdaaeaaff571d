"""Tests for dataset-wide aggregates."""

from datetime import date, datetime, timezone

from changelog_viewer.core.aggregates import (
    collect_tags,
    collect_versions,
    date_bounds,
    entry_tags,
    is_within_bounds,
)
from changelog_viewer.core.types import ChangelogChange, ChangelogDocument, ChangelogEntry, DateRange
from changelog_viewer.core.view_state import FilterState, derive_view


def _entry(version: str, date: str, tag_lists: list[list[str]]) -> ChangelogEntry:
    return ChangelogEntry(
        version=version,
        date=date,
        changes=[
            ChangelogChange(id=f"{version}-{i}", title=f"change {i}", tags=tags)
            for i, tags in enumerate(tag_lists)
        ],
    )


def _document() -> ChangelogDocument:
    return ChangelogDocument(
        entries=[
            _entry("2.0.0", "2024-03-01", [["feat", "breaking"], ["docs"]]),
            _entry("1.1.0", "2024-02-01", [["fix"], ["feat"]]),
            _entry("1.0.0", "2024-01-01", [["fix"]]),
        ]
    )


def test_tag_vocabulary_is_sorted_union():
    assert collect_tags(_document()) == ["breaking", "docs", "feat", "fix"]


def test_tag_vocabulary_ignores_filters():
    document = _document()

    unfiltered = derive_view(document, FilterState())
    filtered = derive_view(document, FilterState(search_query="zzz", selected_tags=("fix",)))

    assert filtered.tags == unfiltered.tags == collect_tags(document)


def test_versions_keep_order_and_duplicates():
    document = _document()
    document.entries.append(_entry("1.0.0", "2023-12-01", []))

    assert collect_versions(document) == ["2.0.0", "1.1.0", "1.0.0", "1.0.0"]


def test_entry_tags_first_seen_order():
    entry = _entry("1", "2024-01-01", [["zeta", "alpha"], ["alpha", "beta"]])

    assert entry_tags(entry) == ["zeta", "alpha", "beta"]


def test_date_bounds():
    bounds = date_bounds(_document())

    assert bounds.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert bounds.end == datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_date_bounds_empty_document():
    assert date_bounds(ChangelogDocument()) is None


def test_date_bounds_keep_first_value_on_ties():
    document = ChangelogDocument(
        entries=[
            _entry("a", "2024-01-01T00:00:00+00:00", []),
            _entry("b", "2024-01-01T01:00:00+01:00", []),
        ]
    )

    bounds = date_bounds(document)

    # Both instants are equal; the first-encountered representation wins.
    assert bounds.start.utcoffset().total_seconds() == 0
    assert bounds.end.utcoffset().total_seconds() == 0


def test_is_within_bounds():
    bounds = DateRange(
        start=datetime(2024, 1, 1, tzinfo=timezone.utc),
        end=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )

    assert is_within_bounds(date(2024, 2, 1), bounds)
    assert is_within_bounds(date(2024, 3, 1), bounds)
    assert not is_within_bounds(date(2023, 12, 31), bounds)
    assert not is_within_bounds(date(2024, 3, 2), bounds)
    assert is_within_bounds(date(1999, 1, 1), None)
