"""
In-memory snapshot store.
"""

from typing import Dict, List, Mapping, Optional, Tuple

from .base import SnapshotStore


class MemorySnapshotStore(SnapshotStore):
    """Keeps the snapshot in a dict. Useful for tests and ephemeral sessions."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})
        # Every write_value call, in order
        self.writes: List[Tuple[str, str]] = []

    def read(self) -> Dict[str, str]:
        return dict(self._values)

    def write_value(self, name: str, text: str) -> None:
        self._values[name] = text
        self.writes.append((name, text))

    def remove(self, name: str) -> None:
        self._values.pop(name, None)

    def clear(self) -> None:
        self._values.clear()
