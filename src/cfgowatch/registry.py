"""Module registry: one config-directory watch per module root."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from cfgowatch.config.schema import LayoutConfig
from cfgowatch.logging import get_logger
from cfgowatch.watching.events import DELETED, FileChangeEvent
from cfgowatch.watching.protocol import WatchBackend, WatchHandle

log = get_logger("registry")

ChangeHandler = Callable[[Path, Path], object]


def normalize_root(root: Path | str) -> Path:
    """Absolute, normalized form of a module root (symlinks are kept)."""
    return Path(os.path.abspath(root))


@dataclass(eq=False)
class Module:
    """A watched module and its config-directory subscription."""

    root: Path
    handle: WatchHandle | None = None


class ModuleRegistry:
    """Owns every Module entry and its watch subscription.

    At most one subscription exists per root. ``register`` and
    ``unregister`` never await, so the check and the insert/remove happen
    in one step on the event loop.
    """

    def __init__(
        self,
        backend: WatchBackend,
        on_change: ChangeHandler,
        layout: LayoutConfig | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            backend: Filesystem change capability used for subscriptions.
            on_change: Called with (module root, changed file) for each
                created or modified config file.
            layout: Module directory layout.
        """
        self._backend = backend
        self._on_change = on_change
        self._layout = layout or LayoutConfig()
        self._modules: dict[Path, Module] = {}

    def __contains__(self, root: object) -> bool:
        if not isinstance(root, (str, Path)):
            return False
        return normalize_root(root) in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def get(self, root: Path | str) -> Module | None:
        return self._modules.get(normalize_root(root))

    def roots(self) -> list[Path]:
        """Registered module roots, sorted."""
        return sorted(self._modules)

    def register(self, root: Path | str) -> bool:
        """Start watching a module's config directory.

        Returns:
            True if a new subscription was created; False if the module is
            already registered or has no config directory.
        """
        root = normalize_root(root)
        if root in self._modules:
            log.debug("Module already registered: %s", root)
            return False

        config_dir = root / self._layout.config_dir
        if not config_dir.is_dir():
            log.debug("No %s directory in %s, not watching", self._layout.config_dir, root)
            return False

        module = Module(root=root)
        try:
            module.handle = self._backend.subscribe(
                config_dir,
                self._layout.input_pattern,
                partial(self._dispatch, module),
            )
        except OSError as e:
            log.warning("Cannot watch %s: %s", config_dir, e)
            return False

        self._modules[root] = module
        log.info("Watching module: %s", root)
        return True

    def unregister(self, root: Path | str) -> bool:
        """Stop watching a module. The subscription is released before returning.

        Returns:
            True if the module was registered.
        """
        module = self._modules.pop(normalize_root(root), None)
        if module is None:
            return False
        if module.handle is not None:
            self._backend.release(module.handle)
        log.info("Stopped watching module: %s", module.root)
        return True

    def shutdown(self) -> None:
        """Unregister every module. Safe to call repeatedly."""
        for root in list(self._modules):
            self.unregister(root)

    def _dispatch(self, module: Module, event: FileChangeEvent) -> None:
        if event.change_type == DELETED:
            return
        # Only the current registration of a root may dispatch
        if self._modules.get(module.root) is not module:
            log.debug("Dropping event for unwatched module %s: %s", module.root, event.path)
            return
        self._on_change(module.root, event.path)
