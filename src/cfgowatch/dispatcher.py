"""Change dispatch: run the generator for a changed config file.

Each change notification becomes an independent asyncio task. Tasks share
nothing but the collaborators handed to the dispatcher, so any number of
them can be in flight for the same or different modules. There is no
debouncing: every notification runs the generator once.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from cfgowatch.config.schema import GeneratorConfig, LayoutConfig
from cfgowatch.errors import GeneratorExecutionError, OutputDirectoryError, ProcessLaunchError
from cfgowatch.logging import get_logger
from cfgowatch.paths import GenerationPaths, ensure_output_dir, resolve_paths
from cfgowatch.process.protocol import ProcessRunner
from cfgowatch.process.result import ProcessResult
from cfgowatch.status import StatusSink

log = get_logger("dispatcher")


@dataclass
class GenerationOutcome:
    """What happened for one change event."""

    root: Path
    paths: GenerationPaths
    success: bool
    message: str
    result: ProcessResult | None = None


class ChangeDispatcher:
    """Turns change notifications into generator runs and status messages."""

    def __init__(
        self,
        runner: ProcessRunner,
        sink: StatusSink,
        generator: GeneratorConfig | None = None,
        layout: LayoutConfig | None = None,
    ) -> None:
        self._runner = runner
        self._sink = sink
        self._generator = generator or GeneratorConfig()
        self._layout = layout or LayoutConfig()
        self._tasks: set[asyncio.Task[GenerationOutcome]] = set()

    @property
    def in_flight(self) -> int:
        """Number of change events still being handled."""
        return len(self._tasks)

    def on_change(self, root: Path, changed_file: Path) -> asyncio.Task[GenerationOutcome]:
        """Schedule handling of a change on the running loop.

        Production callers fire and forget; the returned task lets tests
        await a specific event.
        """
        task = asyncio.get_running_loop().create_task(
            self.handle_change(Path(root), Path(changed_file))
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait until every scheduled event has been handled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def handle_change(self, root: Path, changed_file: Path) -> GenerationOutcome:
        """Run the generator for one changed file and report the result.

        Always reports exactly one status message and never raises for
        generation failures.
        """
        paths = resolve_paths(root, changed_file, self._layout, self._generator.extension)
        name = self._generator.name

        try:
            ensure_output_dir(paths)
            result = await self._generate(paths)
        except OutputDirectoryError as e:
            return self._fail(root, paths, f"{name} failed: {e}")
        except ProcessLaunchError as e:
            return self._fail(root, paths, f"{name} failed: {e.reason}")
        except GeneratorExecutionError as e:
            return self._fail(root, paths, f"{name} failed: {e.error_text}", e.result)
        except Exception as e:
            log.exception("Unexpected error generating from %s", paths.input_file)
            return self._fail(root, paths, f"{name} failed: {e}")

        message = f"Generated {paths.output_file.name}"
        self._sink.info(message)
        return GenerationOutcome(root=root, paths=paths, success=True, message=message, result=result)

    async def _generate(self, paths: GenerationPaths) -> ProcessResult:
        command = self._generator.command
        args = [*self._generator.args, str(paths.input_file), str(paths.output_file)]

        log.info("Running %s for %s", self._generator.name, paths.input_file.name)
        result = await self._runner.run(command, args, timeout=self._generator.timeout)

        if result.stdout.strip():
            log.info("%s: %s", self._generator.name, result.stdout.rstrip())
        if not result.success:
            raise GeneratorExecutionError(command, result)
        return result

    def _fail(
        self,
        root: Path,
        paths: GenerationPaths,
        message: str,
        result: ProcessResult | None = None,
    ) -> GenerationOutcome:
        log.error(message)
        self._sink.error(message)
        return GenerationOutcome(root=root, paths=paths, success=False, message=message, result=result)
