"""Watch backend protocol and subscription handle."""

from __future__ import annotations

import fnmatch
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from cfgowatch.watching.events import FileChangeEvent
from cfgowatch.watching.scan import is_ignored

ChangeCallback = Callable[[FileChangeEvent], None]

_handle_ids = itertools.count(1)


@dataclass(eq=False)
class WatchHandle:
    """A live subscription to file changes under one directory.

    Handles compare by identity. ``active`` drops to False the moment the
    backend releases the handle, and callbacks are never invoked after that.
    """

    directory: Path
    pattern: str
    callback: ChangeCallback
    recursive: bool = False
    ignore: tuple[str, ...] = ()
    active: bool = True
    id: int = field(default_factory=lambda: next(_handle_ids))

    def matches(self, path: Path) -> bool:
        """Check whether a file path falls inside this subscription."""
        path = Path(path)
        if self.recursive:
            if path.parent != self.directory and self.directory not in path.parents:
                return False
        elif path.parent != self.directory:
            return False
        if not fnmatch.fnmatch(path.name, self.pattern):
            return False
        return not is_ignored(path.parent, self.directory, self.ignore)


class WatchBackend(Protocol):
    """Filesystem change notification capability.

    Implementations:
    - PollingWatchBackend: mtime polling on the event loop
    """

    def subscribe(
        self,
        directory: Path,
        pattern: str,
        callback: ChangeCallback,
        *,
        recursive: bool = False,
        ignore: tuple[str, ...] = (),
    ) -> WatchHandle:
        """Start delivering create/modify/delete events for matching files."""
        ...

    def release(self, handle: WatchHandle) -> None:
        """Stop delivering events for ``handle``. Takes effect immediately."""
        ...

    def start(self) -> None:
        """Begin producing events (may require a running event loop)."""
        ...

    def stop(self) -> None:
        """Stop producing events."""
        ...
