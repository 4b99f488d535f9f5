"""Subprocess-based runner for the external generator."""

from __future__ import annotations

import asyncio
import os
import shlex
import time

from cfgowatch.errors import ProcessLaunchError
from cfgowatch.process.result import ProcessResult


class SubprocessRunner:
    """Run commands using asyncio subprocesses.

    Each call spawns a fresh process with no shell in between, so nothing
    carries over from one invocation to the next. There is no retry.
    """

    def __init__(self, default_cwd: str | None = None) -> None:
        """Initialize the runner.

        Args:
            default_cwd: Working directory for commands; None inherits ours.
        """
        self._default_cwd = default_cwd

    async def run(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run a command and capture stdout and stderr separately.

        Raises:
            ProcessLaunchError: The command was not found, not executable,
                or the OS refused to start it.
        """
        start_time = time.perf_counter()

        cmd_list = [command]
        if args:
            cmd_list.extend(args)
        full_command = shlex.join(cmd_list)

        process_env = None
        if env:
            process_env = os.environ.copy()
            process_env.update(env)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd_list,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd or self._default_cwd,
                env=process_env,
            )
        except FileNotFoundError as e:
            raise ProcessLaunchError(command, f"Command not found: {command}") from e
        except PermissionError as e:
            raise ProcessLaunchError(command, f"Permission denied: {command}") from e
        except OSError as e:
            raise ProcessLaunchError(command, f"OS error: {e}") from e

        try:
            if timeout is not None:
                stdout_data, stderr_data = await asyncio.wait_for(
                    process.communicate(),
                    timeout=timeout,
                )
            else:
                stdout_data, stderr_data = await process.communicate()
        except asyncio.TimeoutError:
            try:
                process.kill()
                await process.wait()
            except ProcessLookupError:
                pass  # Process already gone

            return ProcessResult(
                command=full_command,
                exit_code=None,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
                status="timeout",
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        exit_code = process.returncode
        return ProcessResult(
            command=full_command,
            exit_code=exit_code,
            stdout=stdout_data.decode("utf-8", errors="replace"),
            stderr=stderr_data.decode("utf-8", errors="replace"),
            status="ok" if exit_code == 0 else "error",
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
