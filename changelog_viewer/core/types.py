"""
Core data types for the changelog viewer.

This module defines the document model loaded from a chlog JSON file and
the small value types the filters work with:
- ChangelogChange: One atomic change within a release
- ChangelogEntry: One version with its date, ref markers and changes
- ChangelogDocument: Document metadata plus ordered entries
- DateRange: Optional inclusive date bounds
- FilteredEntry: An entry paired with the changes that survived filtering
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class ChangelogChange:
    """A single described modification within a release.

    Attributes:
        id: Identifier unique within its entry, used for deep links
        title: One-line summary
        description: Longer explanation
        impact: Who or what is affected
        commits: Revision identifiers, typically hex hashes (may be empty)
        tags: Labels in source order
    """
    id: str
    title: str
    description: str = ""
    impact: str = ""
    commits: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class ChangelogEntry:
    """One version of the changelog.

    Attributes:
        version: Version label, expected (not enforced) to be unique
        date: ISO 8601 calendar date or date-time string
        from_ref: Opaque revision marker the release starts from
        to_ref: Opaque revision marker the release ends at
        changes: Changes in source order (may be empty)
    """
    version: str
    date: str
    from_ref: str = ""
    to_ref: str = ""
    changes: list[ChangelogChange] = field(default_factory=list)


@dataclass
class ChangelogDocument:
    """Root of a changelog file.

    A bare JSON array of entries loads as a document with empty metadata.
    """
    title: str = ""
    description: str = ""
    repository: str = ""
    entries: list[ChangelogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class DateRange:
    """Inclusive date bounds; a missing bound means no restriction."""
    start: datetime | date | str | None = None
    end: datetime | date | str | None = None

    def is_empty(self) -> bool:
        return self.start is None and self.end is None


@dataclass
class FilteredEntry:
    """An entry that survived filtering with its non-empty matching changes."""
    entry: ChangelogEntry
    changes: list[ChangelogChange]

    @property
    def version(self) -> str:
        return self.entry.version
