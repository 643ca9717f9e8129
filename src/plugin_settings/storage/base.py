"""
Abstract key/value store for persisted setting snapshots.
"""

from abc import ABC, abstractmethod
from typing import Dict, Mapping


class SnapshotStore(ABC):
    """Persists a flat mapping of setting name to serialized value.

    Stores know nothing about setting types; values are always strings.
    """

    @abstractmethod
    def read(self) -> Dict[str, str]:
        """Return every persisted value."""

    @abstractmethod
    def write_value(self, name: str, text: str) -> None:
        """Persist a single serialized value."""

    @abstractmethod
    def remove(self, name: str) -> None:
        """Forget a persisted value. Unknown names are ignored."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every persisted value."""

    def write(self, snapshot: Mapping[str, str]) -> None:
        """Replace the stored snapshot with the given one."""
        self.clear()
        for name, text in snapshot.items():
            self.write_value(name, text)
