"""Directory scanning with glob-style ignore patterns."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path


def is_ignored(directory: Path, root: Path, patterns: Iterable[str]) -> bool:
    """Check a directory against ignore globs such as ``**/node_modules/**``.

    The directory is matched by its path relative to ``root``, written as
    ``/a/b/``, so patterns never match on components above the scan root.
    """
    try:
        relative = directory.relative_to(root).as_posix()
    except ValueError:
        return False
    if relative == ".":
        return False
    candidate = f"/{relative}/"
    return any(fnmatch.fnmatch(candidate, pattern) for pattern in patterns)


def iter_files(
    directory: Path,
    pattern: str,
    *,
    recursive: bool = False,
    ignore: Iterable[str] = (),
    onerror: Callable[[OSError], None] | None = None,
) -> Iterator[Path]:
    """Yield files under ``directory`` whose name matches ``pattern``.

    Without ``recursive`` only direct children are considered. Ignored
    directories are pruned and never descended into. Listing failures go
    to ``onerror`` and the walk carries on.
    """
    ignore = tuple(ignore)
    for dirpath, dirnames, filenames in os.walk(directory, onerror=onerror):
        current = Path(dirpath)
        if recursive:
            dirnames[:] = sorted(
                d for d in dirnames if not is_ignored(current / d, directory, ignore)
            )
        else:
            dirnames[:] = []
        for name in sorted(filenames):
            if fnmatch.fnmatch(name, pattern):
                yield current / name
