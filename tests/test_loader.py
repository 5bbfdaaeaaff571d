"""Tests for changelog retrieval from URLs and files."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from changelog_viewer.config import FetchConfig
from changelog_viewer.errors import FetchError, SchemaError
from changelog_viewer.fetch import loader
from changelog_viewer.fetch.loader import (
    fetch_source,
    is_url,
    load_changelog,
    load_changelog_async,
)

URL = "https://example.com/changelog.json"

DOCUMENT = {
    "title": "Demo",
    "description": "Demo changelog",
    "repository": "https://github.com/owner/demo",
    "entries": [
        {
            "version": "1.0.0",
            "date": "2024-01-01",
            "from_ref": "v0",
            "to_ref": "v1",
            "changes": [
                {
                    "id": "a",
                    "title": "First",
                    "description": "",
                    "impact": "",
                    "commits": ["abcdef0123"],
                    "tags": ["feat"],
                }
            ],
        }
    ],
}


def _transport(status: int = 200, body: str | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, text=json.dumps(DOCUMENT) if body is None else body)

    return httpx.MockTransport(handler)


def test_is_url():
    assert is_url(URL)
    assert is_url("http://localhost:8000/c.json")
    assert not is_url("changelog.json")
    assert not is_url("/tmp/changelog.json")


def test_load_changelog_from_url():
    document = load_changelog(URL, FetchConfig(), transport=_transport())

    assert document.title == "Demo"
    assert document.entries[0].changes[0].tags == ["feat"]


def test_load_changelog_from_file(tmp_path: Path):
    path = tmp_path / "changelog.json"
    path.write_text(json.dumps(DOCUMENT["entries"]), encoding="utf-8")

    document = load_changelog(str(path), FetchConfig())

    assert document.title == ""
    assert [e.version for e in document.entries] == ["1.0.0"]


def test_http_error_status_is_fetch_error():
    with pytest.raises(FetchError) as excinfo:
        load_changelog(URL, FetchConfig(), transport=_transport(status=404))

    assert "HTTP 404" in excinfo.value.reason
    assert excinfo.value.user_message == "There was an error fetching the changelog."


def test_missing_file_is_fetch_error(tmp_path: Path):
    with pytest.raises(FetchError):
        load_changelog(str(tmp_path / "missing.json"), FetchConfig())


def test_invalid_json_is_schema_error():
    with pytest.raises(SchemaError):
        load_changelog(URL, FetchConfig(), transport=_transport(body="<html>not json</html>"))


def test_wrong_shape_is_schema_error():
    with pytest.raises(SchemaError):
        load_changelog(URL, FetchConfig(), transport=_transport(body='{"articles": []}'))


def test_transport_error_is_not_retried_by_default(monkeypatch):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("boom", request=request)

    monkeypatch.setattr(loader.time, "sleep", lambda seconds: None)

    result = fetch_source(URL, FetchConfig(), transport=httpx.MockTransport(handler))

    assert calls == 1
    assert result.text is None
    assert "ConnectError" in result.error


def test_configured_retries(monkeypatch):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        if calls < 3:
            raise httpx.ReadTimeout("slow", request=request)
        return httpx.Response(200, text=json.dumps(DOCUMENT))

    monkeypatch.setattr(loader.time, "sleep", lambda seconds: None)

    result = fetch_source(URL, FetchConfig(retries=2), transport=httpx.MockTransport(handler))

    assert calls == 3
    assert result.error is None
    assert result.status_code == 200


def test_load_changelog_async():
    document = asyncio.run(load_changelog_async(URL, FetchConfig(), transport=_transport()))

    assert document.entries[0].version == "1.0.0"


def test_file_that_is_not_utf8_is_fetch_error(tmp_path: Path):
    path = tmp_path / "changelog.json"
    path.write_bytes(b'[{"version": "\xff\xfe"}]')

    with pytest.raises(FetchError) as excinfo:
        load_changelog(str(path), FetchConfig())

    assert "UnicodeDecodeError" in excinfo.value.reason
