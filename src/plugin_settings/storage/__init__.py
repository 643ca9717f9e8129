"""
Persistence backends for setting snapshots.

A snapshot is a flat mapping of setting name to serialized string value.
"""

from .base import SnapshotStore
from .memory import MemorySnapshotStore
from .qsettings import QSettingsSnapshotStore

__all__ = [
    "SnapshotStore",
    "MemorySnapshotStore",
    "QSettingsSnapshotStore",
]
