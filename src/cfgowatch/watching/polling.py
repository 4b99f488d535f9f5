"""Polling implementation of the watch backend.

Polling is preferred over native file watchers for cross-platform
reliability and needs no extra dependencies. Each subscription keeps an
mtime/size snapshot of its matching files; every poll diffs the snapshot
against the filesystem and reports created, modified and deleted files.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from cfgowatch.logging import get_logger
from cfgowatch.watching.events import CREATED, DELETED, MODIFIED, FileChangeEvent
from cfgowatch.watching.protocol import ChangeCallback, WatchHandle
from cfgowatch.watching.scan import iter_files

log = get_logger("watching")

# (mtime, size) per file
Snapshot = dict[Path, tuple[float, int]]


class PollingWatchBackend:
    """Watches subscribed directories by polling.

    Example:
        backend = PollingWatchBackend(poll_interval=0.5)
        handle = backend.subscribe(Path("/proj/config"), "*.json", on_event)
        backend.start()
        ...
        backend.release(handle)
        backend.stop()
    """

    def __init__(self, poll_interval: float = 1.0) -> None:
        """Initialize the backend.

        Args:
            poll_interval: Seconds between polling cycles (default 1.0)
        """
        self._poll_interval = max(0.1, poll_interval)
        self._handles: dict[int, WatchHandle] = {}
        self._snapshots: dict[int, Snapshot] = {}
        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def poll_interval(self) -> float:
        """Get the polling interval in seconds."""
        return self._poll_interval

    @poll_interval.setter
    def poll_interval(self, value: float) -> None:
        self._poll_interval = max(0.1, value)  # Minimum 100ms

    @property
    def subscription_count(self) -> int:
        """Number of live subscriptions."""
        return len(self._handles)

    def subscribe(
        self,
        directory: Path,
        pattern: str,
        callback: ChangeCallback,
        *,
        recursive: bool = False,
        ignore: tuple[str, ...] = (),
    ) -> WatchHandle:
        """Subscribe to changes of files matching ``pattern`` under ``directory``.

        Files that already exist are recorded but not reported.
        """
        handle = WatchHandle(
            directory=Path(directory),
            pattern=pattern,
            callback=callback,
            recursive=recursive,
            ignore=tuple(ignore),
        )
        self._snapshots[handle.id] = self._snapshot(handle)
        self._handles[handle.id] = handle
        log.debug("Subscribed to %s/%s (handle %d)", handle.directory, pattern, handle.id)
        return handle

    def release(self, handle: WatchHandle) -> None:
        """Release a subscription. No callbacks fire for it after this returns."""
        handle.active = False
        if self._handles.pop(handle.id, None) is not None:
            self._snapshots.pop(handle.id, None)
            log.debug("Released handle %d (%s)", handle.id, handle.directory)

    def release_all(self) -> None:
        """Release every subscription."""
        for handle in list(self._handles.values()):
            self.release(handle)

    def _snapshot(self, handle: WatchHandle) -> Snapshot:
        snapshot: Snapshot = {}

        def onerror(error: OSError) -> None:
            # A vanished directory is just an empty one
            if not isinstance(error, FileNotFoundError):
                log.warning("Error listing %s: %s", error.filename, error)

        for path in iter_files(
            handle.directory,
            handle.pattern,
            recursive=handle.recursive,
            ignore=handle.ignore,
            onerror=onerror,
        ):
            try:
                stat = path.stat()
            except FileNotFoundError:
                continue
            except OSError as e:
                log.warning("Error checking %s: %s", path, e)
                continue
            snapshot[path] = (stat.st_mtime, stat.st_size)
        return snapshot

    def _scan(self, handles: list[WatchHandle]) -> dict[int, Snapshot]:
        return {handle.id: self._snapshot(handle) for handle in handles}

    def _diff(self, handle: WatchHandle, current: Snapshot | None = None) -> list[FileChangeEvent]:
        previous = self._snapshots.get(handle.id)
        if previous is None:
            return []
        if current is None:
            current = self._snapshot(handle)
        self._snapshots[handle.id] = current

        events: list[FileChangeEvent] = []
        for path, state in current.items():
            old = previous.get(path)
            if old is None:
                events.append(FileChangeEvent(path=path, change_type=CREATED))
            elif old != state:
                events.append(FileChangeEvent(path=path, change_type=MODIFIED))
        for path in sorted(previous.keys() - current.keys()):
            events.append(FileChangeEvent(path=path, change_type=DELETED))
        return events

    def check_changes(self, scanned: dict[int, Snapshot] | None = None) -> int:
        """Poll every subscription once and deliver events.

        A callback may release other handles (a deleted manifest releases
        its module's config watch); released handles are skipped for the
        rest of the pass.

        Args:
            scanned: Snapshots already taken off the event loop, keyed by
                handle id. Handles missing from it are left for the next
                pass. When omitted every handle is scanned here.

        Returns:
            Number of events delivered.
        """
        delivered = 0
        for handle in list(self._handles.values()):
            if not handle.active:
                continue
            if scanned is None:
                events = self._diff(handle)
            elif handle.id in scanned:
                events = self._diff(handle, scanned[handle.id])
            else:
                continue
            for event in events:
                if not handle.active:
                    break
                delivered += 1
                try:
                    handle.callback(event)
                except Exception as e:
                    log.error("Error in file change callback for %s: %s", event.path, e)
        return delivered

    async def _poll_loop(self) -> None:
        log.info("Watcher started (interval: %.1fs)", self._poll_interval)
        try:
            while self._running:
                await asyncio.sleep(self._poll_interval)
                if not self._running:
                    break
                # Walk directories in a worker thread; callbacks run on the loop
                handles = list(self._handles.values())
                scanned = await asyncio.get_running_loop().run_in_executor(
                    None, self._scan, handles
                )
                if not self._running:
                    break
                self.check_changes(scanned)
        except asyncio.CancelledError:
            log.debug("Watcher cancelled")
        finally:
            self._running = False

    def start(self) -> None:
        """Start polling. Must be called from within an async context."""
        if self._running:
            log.warning("Watcher already running")
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())

    def stop(self) -> None:
        """Stop polling. Subscriptions stay registered until released."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
        self._task = None
        log.debug("Watcher stopped")

    def is_running(self) -> bool:
        """Check if the polling loop is active."""
        return self._running
