"""Configuration management for cfgowatch.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/cfgowatch/ or %PROGRAMDATA%)
- User-level config (~/.config/cfgowatch/ or %APPDATA%)
- Workspace-level config ($workspace_root/.cfgowatch/)
- Environment variable overrides (highest priority)

Example usage:
    from cfgowatch.config import load_config

    config = load_config(workspace_root="/path/to/workspace")
    print(config.generator.command)
"""

from cfgowatch.config.loader import (
    get_config,
    load_config,
    reset_config,
)
from cfgowatch.config.schema import (
    Config,
    GeneratorConfig,
    LayoutConfig,
    LoggingConfig,
    WatchConfig,
)

__all__ = [
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "GeneratorConfig",
    "LayoutConfig",
    "LoggingConfig",
    "WatchConfig",
]
