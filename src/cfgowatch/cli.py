"""Command-line interface for cfgowatch."""

from __future__ import annotations

import argparse
import asyncio
import signal
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from cfgowatch import __version__
from cfgowatch.app import Orchestrator
from cfgowatch.config import Config, load_config
from cfgowatch.logging import get_logger, setup_logging

log = get_logger("cli")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cfgowatch",
        description="Regenerate code from module config files whenever they change",
    )
    parser.add_argument(
        "workspace",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Workspace directory to scan for modules (default: .)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--generator",
        help="Generator command (default: cfgo)",
    )
    parser.add_argument(
        "--extension",
        help="Suffix of generated files (default: .go)",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        help="Seconds between filesystem polls (default: 1.0)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to this file instead of stderr",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List watchable modules and exit",
    )
    return parser


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Override config values with command-line flags."""
    if args.generator:
        config.generator.command = args.generator
    if args.extension:
        config.generator.extension = args.extension
    if args.poll_interval is not None:
        config.watch.poll_interval = args.poll_interval
    if args.quiet:
        config.logging.verbose = 0
    elif args.verbose:
        config.logging.verbose = 2 + args.verbose
    if args.log_file:
        config.logging.file = args.log_file
    return config


def list_modules(app: Orchestrator, console: Console) -> None:
    """Print every module root that has a config directory."""
    layout = app.config.layout
    for root in sorted(app.discovery.discover_all()):
        if (root / layout.config_dir).is_dir():
            console.print(str(root), highlight=False, soft_wrap=True)


async def _run(app: Orchestrator) -> None:
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handlers; Ctrl+C still
            # raises KeyboardInterrupt out of asyncio.run
            pass
    await app.run_until(stop_event)


def main(argv: Sequence[str] | None = None) -> int:
    """Run cfgowatch. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console()

    workspace = args.workspace.expanduser().resolve()
    if not workspace.is_dir():
        console.print(f"[red]Error: not a directory: {workspace}[/red]", soft_wrap=True)
        return 2

    config = apply_args(load_config(workspace_root=workspace), args)
    setup_logging(config.logging)

    app = Orchestrator(workspace, config)

    if args.list:
        list_modules(app, console)
        return 0

    log.info(
        "Starting cfgowatch in %s (generator=%s, extension=%s)",
        workspace,
        config.generator.command,
        config.generator.extension,
    )
    try:
        asyncio.run(_run(app))
    except KeyboardInterrupt:
        pass
    log.info("Exiting...")
    return 0
