"""Event watcher service module."""

from tronwallet.services.event_watcher.watcher import (
    EventCallback,
    EventWatcher,
    WatcherConfig,
    WatcherState,
    WatcherStats,
)

__all__ = [
    "EventCallback",
    "EventWatcher",
    "WatcherConfig",
    "WatcherState",
    "WatcherStats",
]
