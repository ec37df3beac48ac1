"""Filesystem change subscription implemented with watchdog."""

import asyncio
import logging
import os
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from spec_sources.globs import IgnoreFilter
from spec_sources.paths import strip_prefix, to_posix
from spec_sources.watchers import ChangeCallback, FileChange, WatcherConfig

logger = logging.getLogger(__name__)

# watchdog event types that represent an actual change to the tree
_CHANGE_EVENTS = frozenset({"created", "modified", "deleted", "moved"})


class _IgnoringHandler(FileSystemEventHandler):
    """Forwards non-ignored watchdog events to the event loop."""

    def __init__(
        self,
        root: Path,
        ignore: IgnoreFilter,
        on_change: ChangeCallback,
        loop: asyncio.AbstractEventLoop,
    ):
        """Initialize handler.

        Args:
            root: Watched directory
            ignore: Ignore filter rooted at ``root``
            on_change: Callback run on the loop's thread
            loop: Event loop for scheduling
        """
        self.root = to_posix(str(root)).rstrip("/")
        self.ignore = ignore
        self.on_change = on_change
        self.loop = loop

    def _accepts(self, raw_path: str | bytes, is_directory: bool) -> str | None:
        """Return the path relative to the root, or None if ignored."""
        absolute = to_posix(os.fsdecode(raw_path))
        if self.ignore.is_ignored(absolute, is_dir=is_directory):
            return None
        return strip_prefix(absolute, self.root)

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Handle every watchdog event."""
        if event.event_type not in _CHANGE_EVENTS:
            return
        # Directory mtime updates accompany every file change inside them
        if event.is_directory and event.event_type == "modified":
            return

        path = self._accepts(event.src_path, event.is_directory)
        if path is None and event.event_type == "moved":
            path = self._accepts(event.dest_path, event.is_directory)
        if path is None:
            return

        change = FileChange(kind=event.event_type, path=path, is_directory=event.is_directory)
        logger.debug(f"File change detected: {change.kind} {change.path}")
        try:
            self.loop.call_soon_threadsafe(self.on_change, change)
        except RuntimeError as e:
            # Loop already closed; nobody is listening any more
            logger.debug(f"Dropped file change {change.path}: {e}")


class WatchdogSubscription:
    """Recursive watchdog observer over one directory."""

    def __init__(self, config: WatcherConfig, on_change: ChangeCallback, loop: asyncio.AbstractEventLoop):
        """Initialize subscription.

        Args:
            config: Watcher configuration
            on_change: Callback run on the loop's thread
            loop: Event loop for scheduling
        """
        self.config = config
        self.on_change = on_change
        self.loop = loop
        self.ignore = IgnoreFilter(str(config.dir), config.ignored)
        self.observer = Observer()
        self.handler = _IgnoringHandler(config.dir, self.ignore, on_change, loop)

    def start(self) -> None:
        """Start delivering events."""
        if not self.config.ignore_initial:
            self._emit_initial()
        self.observer.schedule(self.handler, str(self.config.dir), recursive=True)
        self.observer.start()
        logger.info(f"Watching {self.config.dir} (ignoring {len(self.config.ignored)} pattern(s))")

    def _emit_initial(self) -> None:
        """Report existing files as created."""
        root = to_posix(str(self.config.dir)).rstrip("/")
        for dirpath, dirnames, filenames in os.walk(self.config.dir):
            current = to_posix(dirpath).rstrip("/")
            dirnames[:] = [d for d in dirnames if not self.ignore.is_ignored(f"{current}/{d}", is_dir=True)]
            for filename in filenames:
                absolute = f"{current}/{filename}"
                if not self.ignore.is_ignored(absolute):
                    self.loop.call_soon_threadsafe(
                        self.on_change, FileChange(kind="created", path=strip_prefix(absolute, root))
                    )

    def close(self) -> None:
        """Stop the observer."""
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join(timeout=2.0)
            logger.info(f"Stopped watching {self.config.dir}")


def watchdog_subscribe(
    config: WatcherConfig,
    on_change: ChangeCallback,
    loop: asyncio.AbstractEventLoop,
) -> WatchdogSubscription:
    """Open a watchdog subscription; the default ``SubscribeFn``.

    Args:
        config: Watcher configuration
        on_change: Callback run on the loop's thread
        loop: Event loop for scheduling

    Returns:
        Started subscription
    """
    subscription = WatchdogSubscription(config, on_change, loop)
    subscription.start()
    return subscription
