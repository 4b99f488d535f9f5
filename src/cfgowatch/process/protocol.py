"""Process runner protocol for external command execution."""

from __future__ import annotations

from typing import Protocol

from cfgowatch.process.result import ProcessResult


class ProcessRunner(Protocol):
    """Protocol for running an external command to completion.

    Implementations:
    - SubprocessRunner: local asyncio subprocess execution
    """

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run a command once and capture its output.

        Args:
            command: The executable to run (e.g., "cfgo").
            args: Optional list of arguments.
            cwd: Working directory. If None, inherits the current one.
            env: Additional environment variables to set.
            timeout: Timeout in seconds. None means no timeout.

        Returns:
            ProcessResult with exit code, stdout, stderr, and status.

        Raises:
            ProcessLaunchError: The command could not be started.
        """
        ...
