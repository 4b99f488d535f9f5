"""End-to-end scenarios through the Orchestrator."""

from __future__ import annotations

import asyncio
import sys
import textwrap
from pathlib import Path

import pytest

from cfgowatch.app import Orchestrator
from cfgowatch.config import Config
from cfgowatch.watching.events import DELETED, MODIFIED
from cfgowatch.watching.polling import PollingWatchBackend
from tests.utils import FakeRunner, make_module


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    ws.mkdir()
    return ws


def _app(workspace: Path, backend, runner, sink, config: Config | None = None) -> Orchestrator:
    return Orchestrator(workspace, config or Config(), backend=backend, runner=runner, sink=sink)


class TestScenarios:
    """Manifest and config changes flowing through to the generator."""

    @pytest.mark.asyncio
    async def test_new_module_then_config_file(self, workspace, backend, runner, sink) -> None:
        app = _app(workspace, backend, runner, sink)
        await app.start()

        proj = make_module(workspace / "proj")
        backend.fire(proj / "go.mod")
        (proj / "config" / "settings.json").write_text("{}", encoding="utf-8")
        backend.fire(proj / "config" / "settings.json")
        await app.dispatcher.drain()

        assert runner.calls == [
            (
                "cfgo",
                [
                    str(proj / "config" / "settings.json"),
                    str(proj / "config" / "generated" / "settings.go"),
                ],
            )
        ]
        assert sink.infos == ["Generated settings.go"]
        await app.stop()

    @pytest.mark.asyncio
    async def test_generator_failure_reports_stderr(self, workspace, backend, sink) -> None:
        runner = FakeRunner(exit_code=1, stderr="invalid JSON")
        proj = make_module(workspace / "proj")

        async with _app(workspace, backend, runner, sink) as app:
            backend.fire(proj / "config" / "settings.json", MODIFIED)
            await app.dispatcher.drain()

        assert sink.infos == []
        assert len(sink.errors) == 1
        assert "invalid JSON" in sink.errors[0]
        assert sink.errors[0] == "cfgo failed: invalid JSON"

    @pytest.mark.asyncio
    async def test_deleted_manifest_stops_generation(self, workspace, backend, runner, sink) -> None:
        proj = make_module(workspace / "proj")
        async with _app(workspace, backend, runner, sink) as app:
            (proj / "go.mod").unlink()
            backend.fire(proj / "go.mod", DELETED)

            backend.fire(proj / "config" / "other.json")
            await app.dispatcher.drain()

        assert runner.calls == []
        assert sink.messages == []

    @pytest.mark.asyncio
    async def test_two_modules_independent(self, workspace, backend, sink) -> None:
        a = make_module(workspace / "a")
        b = make_module(workspace / "b")
        runner = FakeRunner(failures={"broken.json": "unexpected token"})

        async with _app(workspace, backend, runner, sink) as app:
            backend.fire(a / "config" / "ok.json")
            backend.fire(b / "config" / "broken.json")
            await app.dispatcher.drain()

        assert sink.infos == ["Generated ok.go"]
        assert sink.errors == ["cfgo failed: unexpected token"]
        outputs = sorted(args[-1] for _, args in runner.calls)
        assert outputs == sorted(
            [
                str(a / "config" / "generated" / "ok.go"),
                str(b / "config" / "generated" / "broken.go"),
            ]
        )

    @pytest.mark.asyncio
    async def test_stop_releases_all_subscriptions(self, workspace, backend, runner, sink) -> None:
        make_module(workspace / "a")
        make_module(workspace / "b")
        app = _app(workspace, backend, runner, sink)

        registered = await app.start()
        assert len(registered) == 2
        assert backend.started
        assert len(backend.handles) == 3  # two config dirs + manifests

        await app.stop()
        await app.stop()
        assert backend.handles == []
        assert not backend.started
        assert len(app.registry) == 0

    @pytest.mark.asyncio
    async def test_run_until_event(self, workspace, backend, runner, sink) -> None:
        make_module(workspace / "a")
        app = _app(workspace, backend, runner, sink)
        stop_event = asyncio.Event()

        task = asyncio.create_task(app.run_until(stop_event))
        await asyncio.sleep(0)
        assert len(app.registry) == 1

        stop_event.set()
        await task
        assert len(app.registry) == 0


class TestWithRealProcesses:
    """Polling backend and a real generator process."""

    @pytest.mark.asyncio
    async def test_polling_end_to_end(self, workspace, tmp_path, sink) -> None:
        script = tmp_path / "fake_cfgo.py"
        script.write_text(
            textwrap.dedent(
                """
                import sys
                src, dst = sys.argv[1], sys.argv[2]
                data = open(src, encoding="utf-8").read()
                if "bad" in data:
                    sys.stderr.write("invalid JSON")
                    sys.exit(1)
                with open(dst, "w", encoding="utf-8") as f:
                    f.write("package config\\n")
                print("generated", dst)
                """
            ),
            encoding="utf-8",
        )
        config = Config()
        config.generator.command = sys.executable
        config.generator.args = [str(script)]

        proj = make_module(workspace / "proj")
        backend = PollingWatchBackend()
        app = Orchestrator(workspace, config, backend=backend, sink=sink)
        await app.start()
        try:
            (proj / "config" / "app.settings.json").write_text("{}", encoding="utf-8")
            (proj / "config" / "broken.json").write_text("bad", encoding="utf-8")
            backend.check_changes()
            await app.dispatcher.drain()
        finally:
            await app.stop()

        generated = proj / "config" / "generated" / "app.settings.go"
        assert generated.read_text(encoding="utf-8") == "package config\n"
        assert sink.infos == ["Generated app.settings.go"]
        assert sink.errors == [f"{Path(sys.executable).name} failed: invalid JSON"]
