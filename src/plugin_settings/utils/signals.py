"""
Qt signal bridge for setting change notifications.
"""

import logging
from typing import Any, Iterable, List, Optional, TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

if TYPE_CHECKING:
    from ..registry import SettingsRegistry

logger = logging.getLogger(__name__)


class SettingsSignals(QObject):
    """Re-emits registry change notifications as Qt signals.

    Usage:
        signals = SettingsSignals()
        signals.attach(registry)
        signals.setting_changed.connect(on_setting_changed)
    """

    setting_changed = Signal(str, object)

    def __init__(self, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._registry: Optional["SettingsRegistry"] = None
        self._names: List[str] = []

    def attach(
        self, registry: "SettingsRegistry", names: Optional[Iterable[str]] = None
    ) -> None:
        """Subscribe to settings of a registry.

        Args:
            registry: Registry to listen to
            names: Settings to forward; defaults to every registered setting
        """
        self.detach()
        self._registry = registry
        self._names = list(names) if names is not None else list(registry.list_names())
        for name in self._names:
            registry.subscribe(name, self._on_setting_changed)
        logger.debug(f"Forwarding {len(self._names)} setting(s) to Qt signals")

    def detach(self) -> None:
        """Remove every subscription made by attach()."""
        if self._registry is None:
            return
        for name in self._names:
            self._registry.unsubscribe(name, self._on_setting_changed)
        self._registry = None
        self._names = []

    def _on_setting_changed(self, name: str, value: Any) -> None:
        self.setting_changed.emit(name, value)  # type: ignore
