"""Project spec data source: one-shot discovery and the live spec watcher. Primary embed point."""

import asyncio
import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from spec_sources.debounce import Debouncer
from spec_sources.file_watcher import watchdog_subscribe
from spec_sources.globs import NODE_MODULES_GLOB, GlobSet, find_files_by_glob
from spec_sources.matcher import matched_specs
from spec_sources.models import FindSpecs, SpecRecord
from spec_sources.notifier import NoOpNotifier, SpecNotifier
from spec_sources.paths import to_posix
from spec_sources.state_manager import diff_specs
from spec_sources.watchers import ChangeSubscription, FileChange, SubscribeFn, WatcherConfig

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 250

SpecsSink = Callable[[list[SpecRecord]], Awaitable[None] | None]


class NoCurrentProjectError(RuntimeError):
    """Raised when watching is requested before a project is selected."""


@dataclass
class ProjectContext:
    """Application state shared with the data source."""

    current_project: str | Path | None = None
    """Directory of the active project, or None."""


class WatcherState(Enum):
    """Lifecycle of the spec watcher."""

    IDLE = "idle"
    WATCHING = "watching"
    DEBOUNCING = "debouncing"


@dataclass
class WatchSession:
    """Process-local state of one running watcher."""

    options: FindSpecs
    """Options passed to start; every recomputation reuses them."""

    subscription: ChangeSubscription
    """Active filesystem subscription."""

    debouncer: Debouncer
    """Coalesces change bursts into one recomputation."""

    @property
    def pending(self) -> bool:
        """Whether a recomputation is scheduled or running."""
        return self.debouncer.pending or self.debouncer.running


class ProjectDataSource:
    """Finds spec files and keeps the spec list in sync with the filesystem.

    Stable methods: find_specs(), start_spec_watcher(), stop_spec_watcher(),
    set_specs(), specs, state. The sink ``on_specs_changed`` receives the
    newly resolved list whenever a recomputation changes the set of spec
    names; it may be a plain function or a coroutine function.
    """

    def __init__(
        self,
        ctx: ProjectContext,
        on_specs_changed: SpecsSink | None = None,
        notifier: SpecNotifier | None = None,
        subscribe: SubscribeFn | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ):
        """Initialize data source.

        Args:
            ctx: Shared project context (owns ``current_project``)
            on_specs_changed: Sink notified with the new spec list on change
            notifier: Optional notification handler (defaults to NoOpNotifier - silent)
            subscribe: Filesystem subscription factory (defaults to watchdog)
            debounce_ms: Quiet period before re-resolving after a change
        """
        self.ctx = ctx
        self.on_specs_changed = on_specs_changed
        self.notifier = notifier or NoOpNotifier()
        self.debounce_ms = debounce_ms
        self._subscribe: SubscribeFn = subscribe or watchdog_subscribe
        self._specs: list[SpecRecord] = []
        self._session: WatchSession | None = None
        self._refresh_lock = asyncio.Lock()

    # ========================================================================
    # Spec state
    # ========================================================================

    @property
    def specs(self) -> list[SpecRecord]:
        """Last-known spec list."""
        return list(self._specs)

    def set_specs(self, specs: list[SpecRecord]) -> None:
        """Replace the last-known spec list. Repeated calls with equal content are no-ops."""
        self._specs = list(specs)

    @property
    def state(self) -> WatcherState:
        """Current watcher state."""
        if self._session is None:
            return WatcherState.IDLE
        if self._session.pending:
            return WatcherState.DEBOUNCING
        return WatcherState.WATCHING

    @property
    def session(self) -> WatchSession | None:
        """Active watch session, if any."""
        return self._session

    # ========================================================================
    # One-shot discovery
    # ========================================================================

    def find_specs_sync(self, options: FindSpecs) -> list[SpecRecord]:
        """Resolve specs on the calling thread.

        Args:
            options: Resolution options

        Returns:
            Specs sorted by path

        Raises:
            OSError: If the filesystem cannot be traversed
        """
        root = to_posix(str(options.project_root))
        ignore = [NODE_MODULES_GLOB, *options.exclude_spec_pattern]
        paths = find_files_by_glob(root, options.spec_pattern, ignore)

        # An override such as --spec may be broader than the configured pattern
        if options.config_spec_pattern and options.config_spec_pattern != options.spec_pattern:
            configured = GlobSet(root, options.config_spec_pattern)
            paths = [p for p in paths if configured.matches(p)]

        return matched_specs(
            project_root=root,
            testing_type=options.testing_type,
            spec_absolute_paths=paths,
            spec_pattern=options.spec_pattern,
            component_patterns=options.config_spec_pattern,
        )

    async def find_specs(self, options: FindSpecs) -> list[SpecRecord]:
        """Resolve specs without blocking the event loop.

        Args:
            options: Resolution options

        Returns:
            Specs sorted by path

        Raises:
            OSError: If the filesystem cannot be traversed
        """
        return await asyncio.to_thread(self.find_specs_sync, options)

    # ========================================================================
    # Watching
    # ========================================================================

    def start_spec_watcher(self, options: FindSpecs) -> None:
        """Watch the project and re-resolve specs after each burst of changes.

        Must be called from a running event loop. Replaces any running watcher.

        Args:
            options: Resolution options, reused for every recomputation

        Raises:
            NoCurrentProjectError: If the context has no current project
        """
        if not self.ctx.current_project:
            raise NoCurrentProjectError("Cannot start spec watcher: no current project")

        loop = asyncio.get_running_loop()
        self.stop_spec_watcher()

        debouncer = Debouncer(functools.partial(self.refresh_specs, options), self.debounce_ms, loop)
        config = WatcherConfig(
            dir=Path(options.project_root),
            ignored=[NODE_MODULES_GLOB, *options.exclude_spec_pattern, *options.additional_ignore_pattern],
            ignore_initial=True,
        )

        def on_change(change: FileChange) -> None:
            logger.debug(f"Spec watcher saw {change.kind}: {change.path}")
            debouncer.trigger()

        subscription = self._subscribe(config, on_change, loop)
        self._session = WatchSession(options=options, subscription=subscription, debouncer=debouncer)
        self.notifier.info(f"Watching specs in {options.project_root}")

    def stop_spec_watcher(self) -> None:
        """Stop watching. Pending recomputations are discarded; close errors are swallowed."""
        session = self._session
        if session is None:
            return
        self._session = None
        session.debouncer.cancel()
        try:
            session.subscription.close()
        except Exception as e:
            logger.debug(f"Error closing spec watcher: {e}")

    def change_project(self, project_root: str | Path | None) -> None:
        """Switch the current project, tearing down the watcher and spec list."""
        self.stop_spec_watcher()
        self.set_specs([])
        self.ctx.current_project = project_root

    async def refresh_specs(self, options: FindSpecs) -> None:
        """Re-resolve specs and notify the sink if the set of names changed.

        Runs are serialized so an older result never lands after a newer one.
        A failed resolution keeps the previous spec list. A change that leaves
        no specs at all is also reported as a notifier warning.

        Args:
            options: Resolution options
        """
        async with self._refresh_lock:
            try:
                specs = await self.find_specs(options)
            except Exception as e:
                logger.error(f"Failed to resolve specs in {options.project_root}: {e}")
                self.notifier.error(f"Failed to resolve specs: {e}")
                return

            diff = diff_specs(self._specs, specs)
            self.set_specs(specs)

            if not diff.changed:
                logger.debug("Spec set unchanged")
                return

            logger.info(f"Specs changed ({diff.summary()})")
            self.notifier.info(f"Specs changed: {diff.summary()}")
            if not specs:
                self.notifier.warning(f"No specs match {', '.join(options.spec_pattern)}")
            await self._notify(specs)

    async def _notify(self, specs: list[SpecRecord]) -> None:
        if self.on_specs_changed is None:
            return
        try:
            result = self.on_specs_changed(specs)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.exception(f"Error in specs changed callback: {e}")

    async def wait_until_settled(self) -> None:
        """Wait for any recomputation already started by the watcher."""
        if self._session is not None:
            await self._session.debouncer.wait()
