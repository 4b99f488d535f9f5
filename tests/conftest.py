"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from cfgowatch.config import reset_config
from tests.utils import FakeRunner, FakeWatchBackend, RecordingSink

pytest_plugins = ("pytest_asyncio",)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep user/system config and env vars out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    monkeypatch.delenv("CFGOWATCH_LOG", raising=False)
    monkeypatch.delenv("CFGOWATCH_GENERATOR", raising=False)
    monkeypatch.setattr(
        "cfgowatch.config.paths.get_system_config_path", lambda: None
    )
    reset_config()
    yield
    reset_config()


@pytest.fixture
def backend() -> FakeWatchBackend:
    return FakeWatchBackend()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
