"""Error types for cfgowatch.

Every error here is terminal to the single change event (or discovery
step) that raised it. None of them are allowed to escape the dispatcher
or discovery and take the process down.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cfgowatch.process.result import ProcessResult


class CfgoWatchError(Exception):
    """Base class for cfgowatch errors."""


class DiscoveryError(CfgoWatchError):
    """A directory could not be listed while looking for manifests."""

    def __init__(self, path: Path | str | None, reason: str) -> None:
        self.path = Path(path) if path is not None else None
        self.reason = reason
        super().__init__(f"Cannot list {self.path}: {reason}")


class OutputDirectoryError(CfgoWatchError):
    """The generated-output directory could not be created."""

    def __init__(self, directory: Path, reason: str) -> None:
        self.directory = directory
        self.reason = reason
        super().__init__(f"Cannot create {directory}: {reason}")


class ProcessLaunchError(CfgoWatchError):
    """An external command could not be started at all."""

    def __init__(self, command: str, reason: str) -> None:
        self.command = command
        self.reason = reason
        super().__init__(reason)


class GeneratorExecutionError(CfgoWatchError):
    """The generator ran but did not exit cleanly."""

    def __init__(self, command: str, result: ProcessResult) -> None:
        self.command = command
        self.result = result
        super().__init__(self.error_text)

    @property
    def error_text(self) -> str:
        """Captured stderr, or a description of the failure if stderr is empty."""
        stderr = self.result.stderr.strip()
        if stderr:
            return stderr
        return f"Command failed with exit code {self.result.exit_code}: {self.result.command}"
