"""
Per-setting record held by the registry.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .protocols import SettingType

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, Any], None]


@dataclass
class SettingEntry:
    """A registered setting and its subscribers.

    Entries are owned by SettingsRegistry; external code should treat them
    as read-only and go through the registry for every mutation.

    Attributes:
        name: Unique setting name
        type_name: Declared type name
        setting_type: Resolved type descriptor used for validation
        default_value: Value restored by reset
        current_value: Current value, always valid under setting_type
        description: Optional description from the declaration
        extension: Contributing extension, if known
        subscribers: Change callbacks in subscription order
    """

    name: str
    type_name: str
    setting_type: SettingType
    default_value: Any
    current_value: Any = None
    description: str = ""
    extension: Optional[str] = None
    subscribers: List[ChangeCallback] = field(default_factory=list)

    def __post_init__(self):
        if self.current_value is None:
            self.current_value = self.default_value

    def is_valid(self, value: Any) -> bool:
        """Check a candidate value against this setting's type."""
        return bool(self.setting_type.is_valid(value))

    def add_subscriber(self, callback: ChangeCallback) -> None:
        """Append a callback unless it is already subscribed."""
        if callback not in self.subscribers:
            self.subscribers.append(callback)

    def remove_subscriber(self, callback: ChangeCallback) -> bool:
        """Remove a callback.

        Returns:
            True if the callback was subscribed, False otherwise.
        """
        try:
            self.subscribers.remove(callback)
            return True
        except ValueError:
            return False

    def notify(self) -> int:
        """Deliver the current value to every subscriber.

        A failing subscriber is logged and skipped so the rest still run.

        Returns:
            Number of subscribers that raised.
        """
        failures = 0
        # Copy so callbacks may (un)subscribe while we iterate
        for callback in list(self.subscribers):
            try:
                callback(self.name, self.current_value)
            except Exception:
                failures += 1
                logger.exception(f"Subscriber {callback!r} failed for setting '{self.name}'")
        return failures

    def __repr__(self) -> str:
        return (
            f"SettingEntry(name={self.name!r}, type={self.type_name!r}, "
            f"value={self.current_value!r})"
        )
