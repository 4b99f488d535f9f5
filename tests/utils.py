"""Test doubles shared across the test suite."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

from cfgowatch.errors import ProcessLaunchError
from cfgowatch.process.result import ProcessResult
from cfgowatch.watching.events import CREATED, FileChangeEvent
from cfgowatch.watching.protocol import ChangeCallback, WatchHandle


class FakeWatchBackend:
    """Watch backend that delivers events synchronously on demand."""

    def __init__(self) -> None:
        self.handles: list[WatchHandle] = []
        self.subscribe_calls = 0
        self.started = False

    def subscribe(
        self,
        directory: Path,
        pattern: str,
        callback: ChangeCallback,
        *,
        recursive: bool = False,
        ignore: tuple[str, ...] = (),
    ) -> WatchHandle:
        self.subscribe_calls += 1
        handle = WatchHandle(
            directory=Path(directory),
            pattern=pattern,
            callback=callback,
            recursive=recursive,
            ignore=tuple(ignore),
        )
        self.handles.append(handle)
        return handle

    def release(self, handle: WatchHandle) -> None:
        handle.active = False
        if handle in self.handles:
            self.handles.remove(handle)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.started = False

    def handles_for(self, directory: Path) -> list[WatchHandle]:
        return [h for h in self.handles if h.directory == Path(directory)]

    def fire(self, path: Path, change_type: str = CREATED) -> int:
        """Deliver an event to every matching live handle."""
        event = FileChangeEvent(path=Path(path), change_type=change_type)
        delivered = 0
        for handle in list(self.handles):
            if handle.active and handle.matches(event.path):
                handle.callback(event)
                delivered += 1
        return delivered


@dataclass
class FakeRunner:
    """Process runner returning canned results and recording calls."""

    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    launch_error: str | None = None
    delays: dict[str, float] = field(default_factory=dict)  # input basename -> seconds
    failures: dict[str, str] = field(default_factory=dict)  # input basename -> stderr
    calls: list[tuple[str, list[str]]] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        args = list(args or [])
        self.calls.append((command, args))
        if self.launch_error is not None:
            raise ProcessLaunchError(command, self.launch_error)

        input_name = Path(args[-2]).name if len(args) >= 2 else ""
        await asyncio.sleep(self.delays.get(input_name, 0))
        self.completed.append(input_name)

        exit_code, stderr = self.exit_code, self.stderr
        if input_name in self.failures:
            exit_code, stderr = 1, self.failures[input_name]
        return ProcessResult(
            command=" ".join([command, *args]),
            exit_code=exit_code,
            stdout=self.stdout,
            stderr=stderr,
            status="ok" if exit_code == 0 else "error",
            duration_ms=1.0,
        )


class RecordingSink:
    """Status sink collecting messages."""

    def __init__(self) -> None:
        self.infos: list[str] = []
        self.errors: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    @property
    def messages(self) -> list[str]:
        return self.infos + self.errors


def make_module(root: Path, *, config: bool = True, manifest: bool = True) -> Path:
    """Create a module directory tree and return its root."""
    root.mkdir(parents=True, exist_ok=True)
    if manifest:
        (root / "go.mod").write_text("module example.com/m\n", encoding="utf-8")
    if config:
        (root / "config").mkdir(exist_ok=True)
    return root
