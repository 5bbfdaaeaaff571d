"""Lookup of a single version or change for the deep-linked pages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rapidfuzz import process

from ..errors import NotFoundError
from .aggregates import entry_tags
from .filters import filter_changes
from .types import ChangelogChange, ChangelogDocument, ChangelogEntry

SUGGESTION_LIMIT = 3
SUGGESTION_CUTOFF = 60


@dataclass
class EntryView:
    """The per-version page: the entry, its tag palette and matching changes."""
    entry: ChangelogEntry
    tags: list[str]
    changes: list[ChangelogChange]


def find_entry(document: ChangelogDocument, version: str) -> ChangelogEntry:
    """Return the first entry with this version.

    Raises:
        NotFoundError: If no entry has the version
    """
    for entry in document.entries:
        if entry.version == version:
            return entry
    raise NotFoundError(
        version,
        suggestions=_suggest(version, [entry.version for entry in document.entries]),
    )


def find_change(
    document: ChangelogDocument,
    version: str,
    change_id: str,
) -> tuple[ChangelogEntry, ChangelogChange]:
    """Return the entry and the change with this id inside it.

    Raises:
        NotFoundError: If the version or the change id is missing
    """
    try:
        entry = find_entry(document, version)
    except NotFoundError as exc:
        raise NotFoundError(version, change_id, suggestions=exc.suggestions) from None

    for change in entry.changes:
        if change.id == change_id:
            return entry, change
    raise NotFoundError(
        version,
        change_id,
        suggestions=_suggest(change_id, [change.id for change in entry.changes]),
    )


def entry_view(
    document: ChangelogDocument,
    version: str,
    search_query: str = "",
    selected_tags: Sequence[str] = (),
) -> EntryView:
    """Build the per-version page; the change list may end up empty."""
    entry = find_entry(document, version)
    return EntryView(
        entry=entry,
        tags=entry_tags(entry),
        changes=filter_changes(entry, search_query, selected_tags),
    )


def _suggest(query: str, choices: list[str]) -> list[str]:
    if not query or not choices:
        return []
    matches = process.extract(
        query,
        list(dict.fromkeys(choices)),
        limit=SUGGESTION_LIMIT,
        score_cutoff=SUGGESTION_CUTOFF,
    )
    return [match[0] for match in matches]
