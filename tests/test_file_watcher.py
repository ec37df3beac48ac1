"""Tests for the watchdog-backed change subscription."""

import asyncio
from pathlib import Path
from unittest.mock import Mock

import pytest
from watchdog.events import (
    DirCreatedEvent,
    DirModifiedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from spec_sources.file_watcher import _IgnoringHandler, watchdog_subscribe
from spec_sources.globs import IgnoreFilter
from spec_sources.watchers import FileChange, WatcherConfig


@pytest.fixture
def received():
    return []


@pytest.fixture
def handler(received):
    """Handler whose loop runs callbacks inline."""
    loop = Mock()
    loop.call_soon_threadsafe.side_effect = lambda cb, *args: cb(*args)
    ignore = IgnoreFilter("/proj", ["**/node_modules/**", "**/ignore.spec.ts"])
    return _IgnoringHandler(Path("/proj"), ignore, received.append, loop)


class TestIgnoringHandler:
    """Event filtering and translation."""

    def test_created_file_forwarded(self, handler, received):
        handler.dispatch(FileCreatedEvent("/proj/cypress/e2e/new.cy.js"))
        assert received == [FileChange(kind="created", path="cypress/e2e/new.cy.js")]

    def test_modified_and_deleted_forwarded(self, handler, received):
        handler.dispatch(FileModifiedEvent("/proj/a.cy.js"))
        handler.dispatch(FileDeletedEvent("/proj/b.cy.js"))
        assert [c.kind for c in received] == ["modified", "deleted"]

    def test_created_directory_forwarded(self, handler, received):
        handler.dispatch(DirCreatedEvent("/proj/cypress/new"))
        assert received == [FileChange(kind="created", path="cypress/new", is_directory=True)]

    def test_ignored_paths_dropped(self, handler, received):
        handler.dispatch(FileCreatedEvent("/proj/node_modules/pkg/index.js"))
        handler.dispatch(FileCreatedEvent("/proj/packages/node_modules/x/App.spec.js"))
        handler.dispatch(FileModifiedEvent("/proj/cypress/ignore.spec.ts"))
        assert received == []

    def test_directory_modified_dropped(self, handler, received):
        handler.dispatch(DirModifiedEvent("/proj/cypress"))
        assert received == []

    def test_non_change_events_dropped(self, handler, received):
        handler.dispatch(FileClosedEvent("/proj/a.cy.js"))
        assert received == []

    def test_move_out_of_ignored_dir_forwarded(self, handler, received):
        handler.dispatch(FileMovedEvent("/proj/node_modules/a.cy.js", "/proj/cypress/a.cy.js"))
        assert received == [FileChange(kind="moved", path="cypress/a.cy.js")]

    def test_move_forwards_source_path(self, handler, received):
        handler.dispatch(FileMovedEvent("/proj/cypress/a.cy.js", "/proj/cypress/b.cy.js"))
        assert received == [FileChange(kind="moved", path="cypress/a.cy.js")]

    def test_closed_loop_drops_event(self, received):
        loop = Mock()
        loop.call_soon_threadsafe.side_effect = RuntimeError("Event loop is closed")
        handler = _IgnoringHandler(Path("/proj"), IgnoreFilter("/proj", []), received.append, loop)

        handler.dispatch(FileCreatedEvent("/proj/a.cy.js"))

        assert received == []


@pytest.mark.asyncio
async def test_watchdog_subscription_start_and_close(tmp_path):
    config = WatcherConfig(dir=tmp_path, ignored=["**/node_modules/**"])
    subscription = watchdog_subscribe(config, lambda change: None, asyncio.get_running_loop())

    assert subscription.observer.is_alive()
    subscription.close()
    assert not subscription.observer.is_alive()

    # Second close is harmless
    subscription.close()


@pytest.mark.asyncio
async def test_initial_files_reported_when_not_ignored(tmp_path):
    (tmp_path / "a.cy.js").write_text("")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "b.cy.js").write_text("")
    received = []

    config = WatcherConfig(dir=tmp_path, ignored=["**/node_modules/**"], ignore_initial=False)
    subscription = watchdog_subscribe(config, received.append, asyncio.get_running_loop())
    try:
        await asyncio.sleep(0.05)
    finally:
        subscription.close()

    assert FileChange(kind="created", path="a.cy.js") in received
    assert all("node_modules" not in change.path for change in received)
