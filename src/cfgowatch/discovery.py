"""Module discovery: find manifests and keep the registry in sync."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from cfgowatch.config.schema import WatchConfig
from cfgowatch.errors import DiscoveryError
from cfgowatch.logging import get_logger
from cfgowatch.registry import ModuleRegistry, normalize_root
from cfgowatch.watching.events import CREATED, DELETED, FileChangeEvent
from cfgowatch.watching.protocol import WatchBackend, WatchHandle
from cfgowatch.watching.scan import iter_files

log = get_logger("discovery")

DEFAULT_IGNORE = tuple(WatchConfig().ignore_patterns)


class ModuleDiscovery:
    """Scans a workspace for manifest files and follows their lifecycle.

    A manifest appearing registers its directory as a module; a manifest
    disappearing unregisters it. Listing failures are recorded in
    ``errors`` and never abort discovery.
    """

    def __init__(
        self,
        workspace_root: Path | str,
        registry: ModuleRegistry,
        backend: WatchBackend,
        *,
        manifest: str = "go.mod",
        ignore_patterns: Iterable[str] = DEFAULT_IGNORE,
    ) -> None:
        self.workspace_root = normalize_root(workspace_root)
        self._registry = registry
        self._backend = backend
        self._manifest = manifest
        self._ignore = tuple(ignore_patterns)
        self._handle: WatchHandle | None = None
        self.errors: list[DiscoveryError] = []

    def discover_all(self) -> set[Path]:
        """Return the directory of every manifest under the workspace."""
        roots: set[Path] = set()
        for manifest in iter_files(
            self.workspace_root,
            self._manifest,
            recursive=True,
            ignore=self._ignore,
            onerror=self._on_walk_error,
        ):
            roots.add(manifest.parent)
        log.debug("Discovered %d module(s) under %s", len(roots), self.workspace_root)
        return roots

    def _on_walk_error(self, error: OSError) -> None:
        err = DiscoveryError(error.filename, error.strerror or str(error))
        self.errors.append(err)
        log.warning("%s", err)

    def start(self) -> set[Path]:
        """Follow manifest changes and register every existing module.

        The manifest subscription is made before the scan so that nothing
        created in between is missed; duplicates are absorbed by the
        registry.

        Returns:
            Roots that were newly registered.
        """
        if self._handle is None:
            self._handle = self._backend.subscribe(
                self.workspace_root,
                self._manifest,
                self._on_manifest_event,
                recursive=True,
                ignore=self._ignore,
            )

        registered = {root for root in sorted(self.discover_all()) if self._registry.register(root)}
        log.info("Watching %d module(s) under %s", len(registered), self.workspace_root)
        return registered

    def stop(self) -> None:
        """Stop following manifest changes."""
        if self._handle is not None:
            self._backend.release(self._handle)
            self._handle = None

    def on_manifest_created(self, root: Path) -> bool:
        return self._registry.register(root)

    def on_manifest_deleted(self, root: Path) -> bool:
        return self._registry.unregister(root)

    def _on_manifest_event(self, event: FileChangeEvent) -> None:
        root = event.path.parent
        if event.change_type == CREATED:
            self.on_manifest_created(root)
        elif event.change_type == DELETED:
            self.on_manifest_deleted(root)
