"""
Changelog Viewer - search and filter chlog changelog files.

This package loads a changelog JSON document (a wrapped object or a bare
array of entries), validates it, and filters it by free-text search, tags,
version and date range. The filtered view can be printed to the terminal or
written as HTML, Markdown or JSON, and shared as a link that encodes the
filters.

Main entry point is the CLI via the `changelog-viewer` command.

Example:
    $ changelog-viewer show changelog.json --tag fix --from 2024-01-01
"""

__all__ = [
    "__version__",
    "ChangelogDocument",
    "FilterState",
    "derive_view",
    "load_changelog",
    "match_change",
    "parse_document",
]
__version__ = "0.1.0"

from .core.filters import match_change
from .core.schema import parse_document
from .core.types import ChangelogDocument
from .core.view_state import FilterState, derive_view
from .fetch.loader import load_changelog
