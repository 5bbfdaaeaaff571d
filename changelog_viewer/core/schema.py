"""Structural validation of decoded changelog JSON.

A changelog file comes in two shapes:

    # wrapped (canonical)
    {
        "title": "My Project",
        "description": "Release notes",
        "repository": "https://github.com/owner/repo",
        "entries": [ ...ChangelogEntry... ]
    }

    # bare entries array (legacy)
    [ ...ChangelogEntry... ]

Each entry is:

    {
        "version": "1.2.0",
        "date": "2024-02-01",
        "from_ref": "v1.1.0",
        "to_ref": "v1.2.0",
        "changes": [
            {
                "id": "a1",
                "title": "Add search",
                "description": "...",
                "impact": "...",
                "commits": ["3f2c1ab"],
                "tags": ["feat"]
            }
        ]
    }

Unknown fields are ignored. Version and id uniqueness are not checked.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any

from ..errors import SchemaError
from .dates import try_parse_iso8601
from .types import ChangelogChange, ChangelogDocument, ChangelogEntry

logger = logging.getLogger(__name__)

ENTRY_STRING_FIELDS = ("version", "date", "from_ref", "to_ref")
CHANGE_STRING_FIELDS = ("id", "title", "description", "impact")
CHANGE_LIST_FIELDS = ("commits", "tags")
DOCUMENT_STRING_FIELDS = ("title", "description", "repository")


@dataclass
class ValidationResult:
    """Outcome of validating a decoded document.

    Exactly one of document or error is set.
    """
    document: ChangelogDocument | None = None
    error: SchemaError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_document(raw: Any, *, check_dates: bool = True) -> ValidationResult:
    """Validate an untyped JSON value and build a ChangelogDocument.

    Never raises; failures are returned in ValidationResult.error.

    Args:
        raw: Decoded JSON value (dict for the wrapped form, list for bare entries)
        check_dates: Also reject entries whose date is not ISO 8601

    Returns:
        ValidationResult holding either the document or the first SchemaError
    """
    try:
        document = _build_document(raw, check_dates)
    except SchemaError as exc:
        logger.debug("Changelog failed validation: %s", exc.detail)
        return ValidationResult(error=exc)
    return ValidationResult(document=document)


def parse_document(raw: Any, *, check_dates: bool = True) -> ChangelogDocument:
    """Validate and return the document, raising SchemaError on failure."""
    result = validate_document(raw, check_dates=check_dates)
    if result.document is None:
        raise result.error or SchemaError("", "no document")
    return result.document


def is_changelog(raw: Any) -> bool:
    return validate_document(raw, check_dates=False).ok


def _build_document(raw: Any, check_dates: bool) -> ChangelogDocument:
    if raw is None:
        raise SchemaError("", "document is empty")

    if isinstance(raw, list):
        return ChangelogDocument(entries=_build_entries(raw, "entries", check_dates))

    if not isinstance(raw, dict):
        raise SchemaError("", f"expected an object or array, got {_type_name(raw)}")

    meta: dict[str, str] = {}
    for name in DOCUMENT_STRING_FIELDS:
        value = raw.get(name, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise SchemaError(name, f"expected a string, got {_type_name(value)}")
        meta[name] = value

    if "entries" not in raw:
        raise SchemaError("entries", "missing required field")
    entries = raw["entries"]
    if not isinstance(entries, list):
        raise SchemaError("entries", f"expected an array, got {_type_name(entries)}")

    return ChangelogDocument(entries=_build_entries(entries, "entries", check_dates), **meta)


def _build_entries(items: list[Any], path: str, check_dates: bool) -> list[ChangelogEntry]:
    return [
        _build_entry(item, f"{path}[{index}]", check_dates)
        for index, item in enumerate(items)
    ]


def _build_entry(item: Any, path: str, check_dates: bool) -> ChangelogEntry:
    if not isinstance(item, dict):
        raise SchemaError(path, f"expected an object, got {_type_name(item)}")

    fields = {name: _require_string(item, name, path) for name in ENTRY_STRING_FIELDS}
    if check_dates and try_parse_iso8601(fields["date"]) is None:
        raise SchemaError(f"{path}.date", f"not an ISO 8601 date: {fields['date']!r}")

    changes = _require(item, "changes", path)
    if not isinstance(changes, list):
        raise SchemaError(f"{path}.changes", f"expected an array, got {_type_name(changes)}")

    return ChangelogEntry(
        changes=[
            _build_change(change, f"{path}.changes[{index}]")
            for index, change in enumerate(changes)
        ],
        **fields,
    )


def _build_change(item: Any, path: str) -> ChangelogChange:
    if not isinstance(item, dict):
        raise SchemaError(path, f"expected an object, got {_type_name(item)}")

    fields: dict[str, Any] = {
        name: _require_string(item, name, path) for name in CHANGE_STRING_FIELDS
    }
    for name in CHANGE_LIST_FIELDS:
        value = _require(item, name, path)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise SchemaError(f"{path}.{name}", "expected an array of strings")
        fields[name] = list(value)
    return ChangelogChange(**fields)


def _require(item: dict[str, Any], name: str, path: str) -> Any:
    if name not in item:
        raise SchemaError(f"{path}.{name}", "missing required field")
    return item[name]


def _require_string(item: dict[str, Any], name: str, path: str) -> str:
    value = _require(item, name, path)
    if not isinstance(value, str):
        raise SchemaError(f"{path}.{name}", f"expected a string, got {_type_name(value)}")
    return value


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
