"""File watching for cfgowatch.

The registry and discovery only see the WatchBackend protocol; the
polling backend is the production implementation.
"""

from cfgowatch.watching.events import CREATED, DELETED, MODIFIED, FileChangeEvent
from cfgowatch.watching.polling import PollingWatchBackend
from cfgowatch.watching.protocol import ChangeCallback, WatchBackend, WatchHandle

__all__ = [
    "CREATED",
    "DELETED",
    "MODIFIED",
    "ChangeCallback",
    "FileChangeEvent",
    "PollingWatchBackend",
    "WatchBackend",
    "WatchHandle",
]
