"""
QSettings-backed snapshot store.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Union

from PySide6.QtCore import QSettings

from .base import SnapshotStore


class QSettingsSnapshotStore(SnapshotStore):
    """Stores serialized settings under a QSettings group.

    Usage:
        store = QSettingsSnapshotStore.for_profile("acme", "editor")
        registry = PersistentSettingsRegistry(resolver, store, catalog=catalog)
    """

    def __init__(self, settings: QSettings, group: str = "settings"):
        """Initialize with a QSettings instance.

        Args:
            settings: QSettings instance to use for storage
            group: Group that holds the setting values
        """
        self.settings = settings
        self.group = group
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @classmethod
    def for_profile(
        cls, organization: str, application: str, profile: str = "default"
    ) -> "QSettingsSnapshotStore":
        """Create a store in the platform's native settings location.

        Values live under organization/application/profile/settings/...
        """
        settings = QSettings(organization, application)
        settings.beginGroup(profile)
        return cls(settings)

    @classmethod
    def for_file(cls, path: Union[str, Path]) -> "QSettingsSnapshotStore":
        """Create a store backed by an INI file."""
        return cls(QSettings(str(path), QSettings.Format.IniFormat))

    def read(self) -> Dict[str, str]:
        self.settings.beginGroup(self.group)
        try:
            snapshot: Dict[str, str] = {}
            for key in self.settings.allKeys():
                value = self.settings.value(key, "")
                if isinstance(value, list):
                    # Unquoted INI values containing commas come back split
                    value = ", ".join(str(part) for part in value)
                snapshot[key] = str(value) if value is not None else ""
            return snapshot
        finally:
            self.settings.endGroup()

    def write_value(self, name: str, text: str) -> None:
        self.settings.beginGroup(self.group)
        try:
            self.settings.setValue(name, text)
        finally:
            self.settings.endGroup()
        self.settings.sync()

    def write(self, snapshot: Mapping[str, str]) -> None:
        self.settings.beginGroup(self.group)
        try:
            # Clear existing values
            self.settings.remove("")
            for name, text in snapshot.items():
                self.settings.setValue(name, text)
        finally:
            self.settings.endGroup()
        self.settings.sync()
        self.logger.debug(f"Saved settings snapshot with {len(snapshot)} entries")

    def remove(self, name: str) -> None:
        self.settings.beginGroup(self.group)
        try:
            self.settings.remove(name)
        finally:
            self.settings.endGroup()
        self.settings.sync()

    def clear(self) -> None:
        self.settings.beginGroup(self.group)
        try:
            self.settings.remove("")
        finally:
            self.settings.endGroup()
        self.settings.sync()

    def file_name(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()
