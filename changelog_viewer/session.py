"""
Viewer session: the loaded document plus the user's filter and expansion state.

Only the most recent load counts. Each load takes a ticket; a result that
arrives with an older ticket than the current one is dropped, which is how a
change of source supersedes an in-flight fetch. While a load is outstanding
the session refuses to present a view, so data from a previous source is
never shown as current.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from .config import AppConfig
from .core.types import ChangelogDocument, DateRange
from .core.view_state import (
    ChangelogView,
    ExpansionMap,
    FilterState,
    clear_filters,
    derive_view,
    toggle_expanded,
)
from .errors import ChangelogError
from .fetch.loader import load_changelog, load_changelog_async

logger = logging.getLogger(__name__)


class SessionLoadingError(RuntimeError):
    """Raised when a view is requested while a load is outstanding."""


@dataclass(frozen=True)
class LoadTicket:
    source: str
    generation: int


class ChangelogSession:
    """Holds the current source, document, filters and expansion map.

    Attributes:
        cfg: Application configuration
        source: Source of the most recent load request
        document: Last successfully loaded document for that source
        error: Error of the last load, if it failed
        loading: True while a load for the current source is outstanding
        filters: Current filter snapshot
        expanded: Expansion map from the last derivation
    """

    def __init__(self, cfg: AppConfig | None = None):
        self.cfg = cfg or AppConfig()
        self.source: str | None = None
        self.document: ChangelogDocument | None = None
        self.error: ChangelogError | None = None
        self.loading = False
        self.filters = FilterState()
        self.expanded: ExpansionMap = {}
        self._generation = 0
        self._synced: tuple[int, FilterState] | None = None

    def begin(self, source: str) -> LoadTicket:
        """Start a load for a source, superseding any outstanding one."""
        self._generation += 1
        self.source = source
        self.loading = True
        self.document = None
        self.error = None
        return LoadTicket(source=source, generation=self._generation)

    def complete(
        self,
        ticket: LoadTicket,
        document: ChangelogDocument | None = None,
        error: ChangelogError | None = None,
    ) -> bool:
        """Record the outcome of a load.

        Returns:
            False if the ticket was superseded and the result was ignored
        """
        if ticket.generation != self._generation:
            logger.debug("Ignoring stale result for %s", ticket.source)
            return False
        self.loading = False
        self.document = document
        self.error = error
        self.expanded = {}
        self._synced = None
        return True

    def load(self, source: str) -> bool:
        ticket = self.begin(source)
        try:
            document = load_changelog(source, self.cfg.fetch, check_dates=self.cfg.filter.check_dates)
        except ChangelogError as exc:
            logger.warning("Could not load %s: %s", source, exc.detail)
            return self.complete(ticket, error=exc)
        return self.complete(ticket, document=document)

    async def load_async(self, source: str) -> bool:
        ticket = self.begin(source)
        try:
            document = await load_changelog_async(
                source, self.cfg.fetch, check_dates=self.cfg.filter.check_dates
            )
        except ChangelogError as exc:
            logger.warning("Could not load %s: %s", source, exc.detail)
            return self.complete(ticket, error=exc)
        return self.complete(ticket, document=document)

    def view(self) -> ChangelogView:
        """Derive the current view and store its expansion map.

        Raises:
            SessionLoadingError: While a load is outstanding
            ChangelogError: If the last load failed
        """
        if self.loading:
            raise SessionLoadingError("changelog is still loading")
        if self.error is not None:
            raise self.error
        document = self.document or ChangelogDocument()
        snapshot = (self._generation, self.filters)
        current = derive_view(
            document, self.filters, self.expanded, resync=snapshot != self._synced
        )
        self.expanded = current.expanded
        self._synced = snapshot
        return current

    def set_filters(self, filters: FilterState) -> ChangelogView:
        self.filters = filters
        return self.view()

    def search(self, query: str) -> ChangelogView:
        return self.set_filters(self.filters.with_search(query))

    def select_tag(self, tag: str) -> ChangelogView:
        return self.set_filters(self.filters.add_tag(tag))

    def deselect_tag(self, tag: str) -> ChangelogView:
        return self.set_filters(self.filters.remove_tag(tag))

    def select_version(self, version: str) -> ChangelogView:
        return self.set_filters(self.filters.with_version(version))

    def select_dates(self, date_range: DateRange | None) -> ChangelogView:
        return self.set_filters(self.filters.with_date_range(date_range))

    def clear_filters(self) -> ChangelogView:
        return self.set_filters(clear_filters())

    def toggle(self, version: str) -> ExpansionMap:
        """Flip one entry open or closed without re-deriving the view."""
        self.expanded = toggle_expanded(self.expanded, version)
        return self.expanded
