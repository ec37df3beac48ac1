"""User-facing notifications from the spec data source.

The data source reports lifecycle events (watching started, spec set changed,
nothing matched, resolution failed) through a ``SpecNotifier`` so an embedding
host can route them to its own UI. The CLI routes them to logging.
"""

import logging
from typing import Protocol


class SpecNotifier(Protocol):
    """Receiver for spec data source events."""

    def info(self, message: str) -> None:
        """Watcher started or the spec set changed."""
        ...

    def warning(self, message: str) -> None:
        """Resolution succeeded but looks wrong, e.g. no spec matched."""
        ...

    def error(self, message: str) -> None:
        """Resolution failed; the previous spec list is kept."""
        ...


class NoOpNotifier:
    """Drops every message. Default when the data source is embedded."""

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass


class LoggingNotifier:
    """Forwards messages to a logger, tagged with the project they concern.

    Args:
        project: Label prepended to every message (usually the project root)
        logger: Target logger (defaults to the ``specwatch`` logger)
    """

    def __init__(self, project: str = "", logger: logging.Logger | None = None):
        self.project = project
        self._logger = logger or logging.getLogger("specwatch")

    def _format(self, message: str) -> str:
        return f"[{self.project}] {message}" if self.project else message

    def info(self, message: str) -> None:
        self._logger.info(self._format(message))

    def warning(self, message: str) -> None:
        self._logger.warning(self._format(message))

    def error(self, message: str) -> None:
        self._logger.error(self._format(message))
