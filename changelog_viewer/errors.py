"""
Error taxonomy for loading and browsing a changelog.

Three failures are surfaced to the user, each recoverable at the UI boundary:
- FetchError: the source could not be retrieved
- SchemaError: the document is not a valid changelog
- NotFoundError: a requested version or change id does not exist
"""

from __future__ import annotations

from typing import Sequence


class ChangelogError(Exception):
    """Base class for all user-facing changelog failures."""

    user_message = "There was an error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class FetchError(ChangelogError):
    """Network or filesystem failure while retrieving the source."""

    user_message = "There was an error fetching the changelog."

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to fetch {source}: {reason}")
        self.source = source
        self.reason = reason


class SchemaError(ChangelogError):
    """The decoded document does not have the changelog shape.

    Attributes:
        path: Location of the offending value, e.g. "entries[0].changes[1].tags"
        reason: What was wrong with it
    """

    user_message = "Changelog is not in the correct format."

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path or '<root>'}: {reason}")
        self.path = path
        self.reason = reason


class NotFoundError(ChangelogError):
    """A version or change id has no matching record in a valid document."""

    def __init__(
        self,
        version: str,
        change_id: str | None = None,
        suggestions: Sequence[str] = (),
    ):
        self.version = version
        self.change_id = change_id
        self.suggestions = list(suggestions)
        if change_id is None:
            message = f"Could not find version: {version}"
        else:
            message = f'Could not find change "{change_id}" for version "{version}"'
        super().__init__(message)

    @property
    def user_message(self) -> str:  # type: ignore[override]
        if not self.suggestions:
            return self.detail
        return f"{self.detail} (did you mean: {', '.join(self.suggestions)}?)"
