"""Change notification types."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

CREATED = "created"
MODIFIED = "modified"
DELETED = "deleted"


@dataclass(frozen=True)
class FileChangeEvent:
    """Represents a detected file change."""

    path: Path
    change_type: str  # "created", "modified", "deleted"
    timestamp: float = field(default_factory=time.time)
