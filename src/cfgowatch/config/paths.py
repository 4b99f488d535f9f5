"""Where cfgowatch looks for ``config.yaml`` files.

Three layers are searched, lowest priority first: a system-wide file, a
per-user file and a file inside the workspace being watched. None of them
has to exist.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "cfgowatch"
WORKSPACE_DIR = ".cfgowatch"


def _under(base: str | Path | None) -> Path | None:
    if not base:
        return None
    return Path(base) / APP_NAME / CONFIG_FILENAME


def get_system_config_path() -> Path | None:
    """%PROGRAMDATA% on Windows, /etc everywhere else."""
    if sys.platform == "win32":
        return _under(os.environ.get("PROGRAMDATA"))
    return _under("/etc")


def get_user_config_path() -> Path | None:
    """%APPDATA% on Windows; elsewhere the XDG config home.

    Without ``XDG_CONFIG_HOME`` and without a ``~/.config`` directory the
    file lives in ``~/.cfgowatch/``.
    """
    if sys.platform == "win32":
        return _under(os.environ.get("APPDATA"))

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return _under(xdg)
    config_home = Path.home() / ".config"
    if config_home.exists():
        return _under(config_home)
    return Path.home() / WORKSPACE_DIR / CONFIG_FILENAME


def get_workspace_config_path(workspace_root: str | Path) -> Path:
    return Path(workspace_root) / WORKSPACE_DIR / CONFIG_FILENAME


def get_config_paths(workspace_root: str | Path | None = None) -> list[Path]:
    """Config files in merge order: system, user, then workspace."""
    candidates = [get_system_config_path(), get_user_config_path()]
    if workspace_root:
        candidates.append(get_workspace_config_path(workspace_root))
    return [path for path in candidates if path is not None]
