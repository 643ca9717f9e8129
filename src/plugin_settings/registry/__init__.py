"""
Settings registry package.

Provides a typed, extension-driven settings store with validation, change
notification and an asynchronous snapshot load/save protocol.

Usage:
    from plugin_settings.registry import SettingsRegistry

    registry = SettingsRegistry(resolver, catalog=catalog)
    report = await registry.initialize()
    registry.set("tabsize", 2)
"""

from .core import SettingNames, SettingsRegistry
from .entry import ChangeCallback, SettingEntry
from .persistent import PersistentSettingsRegistry
from .protocols import ExtensionCatalog, SettingType, TypeResolver
from .types import (
    DuplicateSettingError,
    InitializationReport,
    InvalidDeclarationError,
    InvalidDefaultError,
    LoadReport,
    SettingDeclaration,
    SettingsError,
    UnknownSettingError,
    UnknownTypeError,
    ValidationError,
    ValidationResult,
)
from .validation import RegistryValidator

__all__ = [
    "SettingsRegistry",
    "PersistentSettingsRegistry",
    "SettingNames",
    "SettingEntry",
    "ChangeCallback",
    "SettingType",
    "TypeResolver",
    "ExtensionCatalog",
    "SettingDeclaration",
    "LoadReport",
    "InitializationReport",
    "ValidationResult",
    "RegistryValidator",
    "SettingsError",
    "DuplicateSettingError",
    "UnknownSettingError",
    "UnknownTypeError",
    "InvalidDefaultError",
    "InvalidDeclarationError",
    "ValidationError",
]
