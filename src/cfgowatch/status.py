"""Status sinks for user-facing generation results."""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.markup import escape


class StatusSink(Protocol):
    """Receives one human-readable message per handled change event."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleStatusSink:
    """Prints status messages to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")
