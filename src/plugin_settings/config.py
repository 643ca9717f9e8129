"""
Logging configuration for plugin_settings, stored as registry settings.

The options are ordinary settings contributed by a built-in "logging"
extension, so they are validated, persisted and observed like any other.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .catalog.models import ExtensionManifest
from .registry.types import SettingDeclaration, SettingsError

if TYPE_CHECKING:
    from .registry import SettingsRegistry

logger = logging.getLogger(__name__)

LOGGING_EXTENSION = "logging"
DEFAULT_LOG_FILE_PATH = "logs/plugin_settings.csv"
VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings:
    """Logging options read from and written to a SettingsRegistry.

    Usage:
        catalog.add_manifest(LoggingSettings.manifest())
        registry = PersistentSettingsRegistry(resolver, store, catalog=catalog)
        await registry.initialize()
        setup_logging(LoggingSettings(registry))

    Without a registry, or before the options are registered, every
    property returns its default.
    """

    CONSOLE_ENABLED = "logging.consoleEnabled"
    CONSOLE_LEVEL = "logging.consoleLevel"
    CONSOLE_USE_COLORS = "logging.consoleUseColors"
    FILE_ENABLED = "logging.fileEnabled"
    FILE_PATH = "logging.filePath"

    DEFAULTS: Dict[str, Any] = {
        CONSOLE_ENABLED: True,
        CONSOLE_LEVEL: "INFO",
        CONSOLE_USE_COLORS: True,
        FILE_ENABLED: False,
        FILE_PATH: DEFAULT_LOG_FILE_PATH,
    }

    def __init__(self, registry: Optional["SettingsRegistry"] = None):
        self.registry = registry

    @classmethod
    def declarations(
        cls, boolean_type: str = "boolean", text_type: str = "text"
    ) -> List[SettingDeclaration]:
        """Declarations for every logging option.

        Args:
            boolean_type: Resolver type name for on/off options
            text_type: Resolver type name for string options
        """
        descriptions = {
            cls.CONSOLE_ENABLED: (boolean_type, "Log to the console"),
            cls.CONSOLE_LEVEL: (text_type, "Minimum level shown on the console"),
            cls.CONSOLE_USE_COLORS: (boolean_type, "Colour console level names"),
            cls.FILE_ENABLED: (boolean_type, "Write a rotating CSV log file"),
            cls.FILE_PATH: (text_type, "Path of the CSV log file"),
        }
        return [
            SettingDeclaration(
                name=name,
                type_name=type_name,
                default_value=cls.DEFAULTS[name],
                description=description,
                extension=LOGGING_EXTENSION,
            )
            for name, (type_name, description) in descriptions.items()
        ]

    @classmethod
    def manifest(cls, boolean_type: str = "boolean", text_type: str = "text") -> ExtensionManifest:
        """Extension manifest contributing the logging options to a catalog."""
        return ExtensionManifest(
            name=LOGGING_EXTENSION,
            settings=cls.declarations(boolean_type, text_type),
        )

    def _get(self, name: str) -> Any:
        if self.registry is None:
            return self.DEFAULTS[name]
        return self.registry.get(name, self.DEFAULTS[name])

    def _set(self, name: str, value: Any) -> None:
        if self.registry is None:
            raise SettingsError("LoggingSettings has no registry to write to", name)
        self.registry.set(name, value)

    # === CONSOLE LOGGING SETTINGS ===

    @property
    def console_logging(self) -> bool:
        """Check if console logging is enabled."""
        return bool(self._get(self.CONSOLE_ENABLED))

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self._set(self.CONSOLE_ENABLED, value)

    @property
    def console_log_level(self) -> str:
        """Get console logging level, INFO if the stored one is unknown."""
        level = str(self._get(self.CONSOLE_LEVEL)).upper()
        return level if level in VALID_LEVELS else "INFO"

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        if value.upper() in VALID_LEVELS:
            self._set(self.CONSOLE_LEVEL, value.upper())
        else:
            logger.warning(
                f"Invalid console log level: {value}, keeping current: {self.console_log_level}"
            )

    @property
    def console_use_colors(self) -> bool:
        """Check if console should use colors."""
        return bool(self._get(self.CONSOLE_USE_COLORS))

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self._set(self.CONSOLE_USE_COLORS, value)

    # === FILE LOGGING SETTINGS ===

    @property
    def file_logging(self) -> bool:
        """Check if file logging is enabled."""
        return bool(self._get(self.FILE_ENABLED))

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self._set(self.FILE_ENABLED, value)

    @property
    def log_file_path(self) -> str:
        return str(self._get(self.FILE_PATH))

    @log_file_path.setter
    def log_file_path(self, value: str) -> None:
        self._set(self.FILE_PATH, str(value))

    @property
    def log_file_absolute_path(self) -> Path:
        """Get absolute path to log file."""
        return Path(self.log_file_path).resolve()
