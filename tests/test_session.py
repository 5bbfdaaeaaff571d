"""Tests for the viewer session state machine."""

from __future__ import annotations

import asyncio

import pytest

from changelog_viewer import session as session_module
from changelog_viewer.core.types import ChangelogChange, ChangelogDocument, ChangelogEntry
from changelog_viewer.errors import FetchError, SchemaError
from changelog_viewer.session import ChangelogSession, SessionLoadingError


def _document(prefix: str = "v") -> ChangelogDocument:
    return ChangelogDocument(
        entries=[
            ChangelogEntry(
                version=f"{prefix}1",
                date="2024-01-01",
                changes=[ChangelogChange(id="a", title="Fix crash", tags=["fix"])],
            ),
            ChangelogEntry(
                version=f"{prefix}2",
                date="2024-02-01",
                changes=[ChangelogChange(id="b", title="Add feature", tags=["feat"])],
            ),
        ]
    )


def test_view_refused_while_loading():
    session = ChangelogSession()
    session.begin("a.json")

    with pytest.raises(SessionLoadingError):
        session.view()


def test_stale_result_is_ignored():
    session = ChangelogSession()
    first = session.begin("old.json")
    second = session.begin("new.json")

    assert session.complete(first, document=_document("old")) is False
    assert session.loading

    assert session.complete(second, document=_document("new")) is True
    assert [item.version for item in session.view().entries] == ["new1", "new2"]


def test_failed_load_surfaces_error():
    session = ChangelogSession()
    ticket = session.begin("bad.json")
    session.complete(ticket, error=SchemaError("entries", "missing required field"))

    with pytest.raises(SchemaError):
        session.view()


def test_load_uses_loader(monkeypatch):
    monkeypatch.setattr(session_module, "load_changelog", lambda source, cfg, check_dates: _document())
    session = ChangelogSession()

    assert session.load("a.json")
    assert not session.loading
    assert len(session.view().entries) == 2


def test_load_records_fetch_error(monkeypatch):
    def fail(source, cfg, check_dates):
        raise FetchError(source, "ConnectError")

    monkeypatch.setattr(session_module, "load_changelog", fail)
    session = ChangelogSession()

    session.load("https://example.com/c.json")

    assert isinstance(session.error, FetchError)
    assert not session.loading


def test_superseded_async_load_is_dropped(monkeypatch):
    async def fake_load(source, cfg, check_dates):
        if source == "slow.json":
            await asyncio.sleep(0.05)
            return _document("slow")
        return _document("fast")

    monkeypatch.setattr(session_module, "load_changelog_async", fake_load)
    session = ChangelogSession()

    async def scenario():
        slow = asyncio.create_task(session.load_async("slow.json"))
        await asyncio.sleep(0)
        fast = await session.load_async("fast.json")
        return await slow, fast

    slow_applied, fast_applied = asyncio.run(scenario())

    assert fast_applied is True
    assert slow_applied is False
    assert session.source == "fast.json"
    assert [item.version for item in session.view().entries] == ["fast1", "fast2"]


def test_filters_drive_expansion():
    session = ChangelogSession()
    session.complete(session.begin("a.json"), document=_document())

    view = session.select_tag("fix")
    assert view.expanded == {"v1": True}

    view = session.search("add")
    assert view.entries == []
    assert view.expanded == {}

    view = session.clear_filters()
    assert len(view.entries) == 2
    assert view.expanded == {}


def test_manual_collapse_sticks_until_filters_change():
    session = ChangelogSession()
    session.complete(session.begin("a.json"), document=_document())
    session.search("a")

    session.toggle("v1")
    assert session.view().expanded["v1"] is False

    view = session.select_version("all")
    assert view.expanded["v1"] is True


def test_manual_toggle_without_filters_is_discarded_on_reset():
    session = ChangelogSession()
    session.complete(session.begin("a.json"), document=_document())
    session.view()

    session.toggle("v2")
    assert session.view().expanded == {"v2": True}

    session.search("fix")
    view = session.clear_filters()
    assert view.expanded == {}
