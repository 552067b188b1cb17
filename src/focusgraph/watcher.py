# watcher.py
# Polls `git status` and tells subscribers when files change in projects that
# are not focused. Only newly dirty paths count: a file that stays modified
# across polls is reported once, on the poll where it first shows up.

from __future__ import annotations

import asyncio
import logging
import re
import subprocess
from typing import Iterable, List, Optional, Pattern, Set

from .bus import NotificationBus
from .config import ConfigStore
from .graph import GraphBuilder
from .model import ChangeNotification, ProjectRegistry, StatusEntry, StatusQuery
from .reach import split_projects

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0

# first path segment names the owning project
DEFAULT_PROJECT_PATTERN = re.compile(r"^([^/\\]+)[/\\]")


class ChangeWatcher:
    """
    Owns the dirty-path snapshot from the last successful status query.

    `tick()` runs one poll; `run()` repeats it every `interval` seconds and
    skips a poll entirely while the previous one is still in progress.
    """

    def __init__(
        self,
        registry: ProjectRegistry,
        config_store: ConfigStore,
        graph_builder: GraphBuilder,
        bus: NotificationBus,
        status_query: StatusQuery,
        interval: float = DEFAULT_POLL_INTERVAL,
        project_pattern: Optional[Pattern[str]] = None,
    ):
        self.registry = registry
        self.config_store = config_store
        self.graph_builder = graph_builder
        self.bus = bus
        self.status_query = status_query
        self.interval = interval
        self.project_pattern = project_pattern or DEFAULT_PROJECT_PATTERN

        self._snapshot: Set[str] = set()
        self._in_progress = False
        self._running = False
        self._current: Optional[asyncio.Task] = None

    @property
    def snapshot(self) -> frozenset:
        return frozenset(self._snapshot)

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def project_for_path(self, path: str) -> Optional[str]:
        m = self.project_pattern.match(path)
        if not m:
            return None
        project = self.registry.normalize(m.group(1))
        return project if project in self.registry else None

    def projects_for_paths(self, paths: Iterable[str]) -> List[str]:
        """Owning projects in registry order; unmatched paths are dropped."""
        owners = {p for p in (self.project_for_path(path) for path in paths) if p}
        return [p for p in self.registry if p in owners]

    def observe(self, entries: Iterable[StatusEntry]) -> Optional[ChangeNotification]:
        """
        Diff one status query result against the snapshot and publish if
        non-focused projects gained new edits. The snapshot is replaced
        whether or not anything is published.
        """
        current = {path for code, path in entries if code.strip()}
        new_changes = current - self._snapshot

        notification: Optional[ChangeNotification] = None
        try:
            if new_changes:
                notification = self._notify_for(new_changes)
        finally:
            self._snapshot = current
        return notification

    def _notify_for(self, paths: Set[str]) -> Optional[ChangeNotification]:
        changed = self.projects_for_paths(paths)
        if not changed:
            logger.debug("%d new dirty path(s) outside any project", len(paths))
            return None

        config = self.config_store.load()
        focused = config.focused_set
        non_focused = [p for p in changed if p not in focused]
        if not non_focused:
            logger.debug("Changes only in focused projects: %s", changed)
            return None

        graph = self.graph_builder.build()
        included, excluded = split_projects(graph, config.focused_projects, config.downstream_hops)
        notification = ChangeNotification(
            changed_projects=tuple(non_focused),
            included=tuple(included),
            excluded=tuple(excluded),
        )
        logger.info("Files changed in non-focused projects: %s", non_focused)
        self.bus.publish(notification)
        return notification

    async def tick(self) -> Optional[ChangeNotification]:
        """
        One poll. A status query failure is logged and leaves the snapshot
        untouched.
        """
        if self._in_progress:
            logger.debug("Previous poll still running, skipping tick")
            return None
        self._in_progress = True
        try:
            try:
                entries = await asyncio.to_thread(self.status_query)
            except (subprocess.CalledProcessError, OSError) as e:
                logger.warning("Status query failed, skipping tick: %s", e)
                return None
            return self.observe(entries)
        finally:
            self._in_progress = False

    async def _guarded_tick(self) -> None:
        try:
            await self.tick()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Watcher tick failed")

    async def run(self) -> None:
        """Poll until `stop()` is called."""
        self._running = True
        logger.info("Watching for changes every %ss", self.interval)
        try:
            while self._running:
                if self._in_progress:
                    logger.debug("Previous poll still running, skipping tick")
                else:
                    self._current = asyncio.create_task(self._guarded_tick())
                await asyncio.sleep(self.interval)
        finally:
            self._running = False
            await self._cancel_current()

    async def stop(self) -> None:
        self._running = False
        await self._cancel_current()

    async def _cancel_current(self) -> None:
        task, self._current = self._current, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
