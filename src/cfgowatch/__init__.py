"""cfgowatch: regenerate code from module config files as they change."""

__version__ = "0.1.0"

# Public API
from cfgowatch.app import Orchestrator
from cfgowatch.config import Config, get_config, load_config
from cfgowatch.discovery import ModuleDiscovery
from cfgowatch.dispatcher import ChangeDispatcher, GenerationOutcome
from cfgowatch.errors import (
    CfgoWatchError,
    DiscoveryError,
    GeneratorExecutionError,
    OutputDirectoryError,
    ProcessLaunchError,
)
from cfgowatch.paths import GenerationPaths, ensure_output_dir, output_name, resolve_paths
from cfgowatch.process import ProcessResult, ProcessRunner, SubprocessRunner
from cfgowatch.registry import Module, ModuleRegistry
from cfgowatch.status import ConsoleStatusSink, StatusSink
from cfgowatch.watching import FileChangeEvent, PollingWatchBackend, WatchBackend, WatchHandle

__all__ = [
    # Main entry point
    "Orchestrator",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Core
    "ChangeDispatcher",
    "GenerationOutcome",
    "Module",
    "ModuleDiscovery",
    "ModuleRegistry",
    # Paths
    "GenerationPaths",
    "ensure_output_dir",
    "output_name",
    "resolve_paths",
    # Process
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    # Status
    "ConsoleStatusSink",
    "StatusSink",
    # Watching
    "FileChangeEvent",
    "PollingWatchBackend",
    "WatchBackend",
    "WatchHandle",
    # Errors
    "CfgoWatchError",
    "DiscoveryError",
    "GeneratorExecutionError",
    "OutputDirectoryError",
    "ProcessLaunchError",
]
