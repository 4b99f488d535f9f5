"""Orchestrator wiring discovery, registry, dispatcher and backend together."""

from __future__ import annotations

import asyncio
from pathlib import Path

from cfgowatch.config import Config, load_config
from cfgowatch.discovery import ModuleDiscovery
from cfgowatch.dispatcher import ChangeDispatcher
from cfgowatch.logging import get_logger
from cfgowatch.process.protocol import ProcessRunner
from cfgowatch.process.subprocess_runner import SubprocessRunner
from cfgowatch.registry import ModuleRegistry
from cfgowatch.status import ConsoleStatusSink, StatusSink
from cfgowatch.watching.polling import PollingWatchBackend
from cfgowatch.watching.protocol import WatchBackend

log = get_logger("app")


class Orchestrator:
    """Runs change-triggered generation for every module in a workspace.

    Collaborators not passed in are built from the config: a polling
    backend, a subprocess runner and a console status sink.

    Example:
        async with Orchestrator("/path/to/workspace") as app:
            await stop_event.wait()
    """

    def __init__(
        self,
        workspace_root: Path | str,
        config: Config | None = None,
        *,
        backend: WatchBackend | None = None,
        runner: ProcessRunner | None = None,
        sink: StatusSink | None = None,
    ) -> None:
        self.workspace_root = Path(workspace_root)
        self.config = config or load_config(workspace_root=self.workspace_root)
        self.backend = backend or PollingWatchBackend(
            poll_interval=self.config.watch.poll_interval
        )
        self.dispatcher = ChangeDispatcher(
            runner or SubprocessRunner(),
            sink or ConsoleStatusSink(),
            self.config.generator,
            self.config.layout,
        )
        self.registry = ModuleRegistry(self.backend, self.dispatcher.on_change, self.config.layout)
        self.discovery = ModuleDiscovery(
            self.workspace_root,
            self.registry,
            self.backend,
            manifest=self.config.layout.manifest,
            ignore_patterns=self.config.watch.ignore_patterns,
        )
        self._started = False

    async def start(self) -> set[Path]:
        """Start watching. Returns the module roots now registered."""
        if self._started:
            return set(self.registry.roots())
        self._started = True
        self.backend.start()
        return self.discovery.start()

    async def stop(self) -> None:
        """Release every subscription.

        In-flight generator runs are left to finish on their own.
        """
        if not self._started:
            return
        self._started = False
        self.discovery.stop()
        self.registry.shutdown()
        self.backend.stop()
        if self.dispatcher.in_flight:
            log.debug("%d generator run(s) still in flight", self.dispatcher.in_flight)

    async def run_until(self, stop_event: asyncio.Event) -> None:
        """Watch until ``stop_event`` is set, then shut down."""
        await self.start()
        try:
            await stop_event.wait()
        finally:
            await self.stop()

    async def __aenter__(self) -> Orchestrator:
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.stop()
