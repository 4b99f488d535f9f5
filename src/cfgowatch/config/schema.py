"""Configuration schema dataclasses for cfgowatch.

Defines the structure of configuration at all levels (system, user, workspace).
All fields have defaults to support partial configs that merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class GeneratorConfig:
    """External generator invocation.

    The generator is run as ``<command> [*args] <input> <output>``.

    Example config.yaml:
        generator:
          command: cfgo
          extension: .go
          timeout: 60
    """

    command: str = "cfgo"
    args: list[str] = field(default_factory=list)  # Prepended before input/output
    extension: str = ".go"  # Suffix of the generated file
    timeout: float | None = None  # Seconds; None waits forever

    @property
    def name(self) -> str:
        """Short generator name used in status messages."""
        return Path(self.command).name or self.command


@dataclass
class LayoutConfig:
    """Where modules keep their manifest, inputs, and generated outputs."""

    manifest: str = "go.mod"
    config_dir: str = "config"
    generated_dir: str = "generated"
    input_suffix: str = ".json"

    @property
    def input_pattern(self) -> str:
        """Glob matched against direct children of the config directory."""
        return f"*{self.input_suffix}"


@dataclass
class WatchConfig:
    """File watching configuration.

    Example config.yaml:
        watch:
          poll_interval: 0.5
          ignore_patterns:
            - "**/node_modules/**"
            - "**/.git/**"
            - "**/vendor/**"
    """

    poll_interval: float = 1.0  # Seconds between polling cycles
    ignore_patterns: list[str] = field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.git/**",
        ]
    )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, takes precedence over level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown top-level keys
