"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides
- Config caching
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from cfgowatch.config.merge import merge_configs
from cfgowatch.config.paths import get_config_paths
from cfgowatch.config.schema import (
    Config,
    GeneratorConfig,
    LayoutConfig,
    LoggingConfig,
    WatchConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("cfgowatch.config")

_cached_config: Config | None = None

_KNOWN_KEYS = {"generator", "layout", "watch", "logging"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables.

    Environment variables take highest priority.
    """
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("CFGOWATCH_LOG")
    if log_path:
        overrides.setdefault("logging", {})["file"] = log_path

    generator = os.environ.get("CFGOWATCH_GENERATOR")
    if generator:
        overrides.setdefault("generator", {})["command"] = generator

    return overrides


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        _log.warning("Expected a list, got %r", value)
        return []
    return value


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        _log.warning("Expected a number, got %r", value)
        return None


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    defaults = Config()

    gen_data = _section(data, "generator")
    generator = GeneratorConfig(
        command=str(gen_data.get("command") or defaults.generator.command),
        args=[str(a) for a in _list(gen_data.get("args"))],
        extension=str(gen_data.get("extension") or defaults.generator.extension),
        timeout=_optional_float(gen_data.get("timeout")),
    )

    layout_data = _section(data, "layout")
    layout = LayoutConfig(
        manifest=str(layout_data.get("manifest") or defaults.layout.manifest),
        config_dir=str(layout_data.get("config_dir") or defaults.layout.config_dir),
        generated_dir=str(layout_data.get("generated_dir") or defaults.layout.generated_dir),
        input_suffix=str(layout_data.get("input_suffix") or defaults.layout.input_suffix),
    )

    watch_data = _section(data, "watch")
    ignore = watch_data.get("ignore_patterns")
    watch = WatchConfig(
        poll_interval=_optional_float(watch_data.get("poll_interval"))
        or defaults.watch.poll_interval,
        ignore_patterns=(
            [p for p in ignore if isinstance(p, str)]
            if isinstance(ignore, list)
            else defaults.watch.ignore_patterns
        ),
    )

    log_data = _section(data, "logging")
    verbose = log_data.get("verbose")
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=verbose if isinstance(verbose, int) else None,
        file=log_data.get("file"),
    )

    extra = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}

    return Config(
        generator=generator,
        layout=layout,
        watch=watch,
        logging=logging_config,
        extra=extra,
    )


def load_config(workspace_root: str | Path | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Workspace config ($workspace_root/.cfgowatch/config.yaml)
    3. User config (~/.config/cfgowatch/config.yaml or %APPDATA%)
    4. System config (/etc/cfgowatch/ or %PROGRAMDATA%)

    Args:
        workspace_root: Workspace directory for workspace-level config.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.
    """
    global _cached_config

    if _cached_config is not None and not reload and workspace_root is None:
        return _cached_config

    configs: list[dict[str, Any]] = []

    for path in get_config_paths(workspace_root):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    env_config = env_overrides()
    if env_config:
        configs.append(env_config)

    config = dict_to_config(merge_configs(*configs))

    # Cache only global config (no workspace_root)
    if workspace_root is None:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it if needed."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config."""
    global _cached_config
    _cached_config = None
