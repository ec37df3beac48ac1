"""Abstract watcher protocol for filesystem change subscriptions."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Protocol

ChangeKind = Literal["created", "modified", "deleted", "moved"]


@dataclass
class WatcherConfig:
    """Configuration for a filesystem change subscription."""

    dir: Path
    """Directory to watch recursively."""

    ignored: list[str] = field(default_factory=list)
    """Gitignore-style globs, relative to ``dir``, whose changes are dropped."""

    ignore_initial: bool = True
    """Suppress events for files that already exist when watching starts."""


@dataclass
class FileChange:
    """One filesystem change, after ignore filtering."""

    kind: ChangeKind
    """What happened."""

    path: str
    """Forward-slash path relative to the watched directory."""

    is_directory: bool = False
    """Whether the change concerns a directory."""


ChangeCallback = Callable[[FileChange], None]


class ChangeSubscription(Protocol):
    """Handle to an active subscription."""

    def close(self) -> None:
        """Stop delivering events and release resources."""
        ...


class SubscribeFn(Protocol):
    """Open a subscription that calls ``on_change`` on ``loop``'s thread."""

    def __call__(
        self,
        config: WatcherConfig,
        on_change: ChangeCallback,
        loop: asyncio.AbstractEventLoop,
    ) -> ChangeSubscription: ...
