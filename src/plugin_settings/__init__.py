"""
plugin_settings: typed settings registry for extension-driven applications

Extensions declare settings (name, type, default); the registry validates
values against their types, notifies subscribers of changes and loads and
saves flat string snapshots through pluggable stores.
"""

__version__ = "0.1.0"
__author__ = "plugin_settings Contributors"

# Core registry
from .registry import (
    SettingsRegistry,
    PersistentSettingsRegistry,
    SettingEntry,
    SettingDeclaration,
    SettingType,
    TypeResolver,
    ExtensionCatalog,
    LoadReport,
    InitializationReport,
    ValidationResult,
    RegistryValidator,
    SettingsError,
    DuplicateSettingError,
    UnknownSettingError,
    UnknownTypeError,
    InvalidDefaultError,
    InvalidDeclarationError,
    ValidationError,
)

# Adapters
from .catalog import ManifestCatalog, ExtensionManifest
from .storage import SnapshotStore, MemorySnapshotStore, QSettingsSnapshotStore
from .config import LoggingSettings
from .utils import setup_logging, SettingsSignals

__all__ = [
    # Registry
    'SettingsRegistry',
    'PersistentSettingsRegistry',
    'SettingEntry',
    'SettingDeclaration',
    'SettingType',
    'TypeResolver',
    'ExtensionCatalog',
    'LoadReport',
    'InitializationReport',
    'ValidationResult',
    'RegistryValidator',

    # Errors
    'SettingsError',
    'DuplicateSettingError',
    'UnknownSettingError',
    'UnknownTypeError',
    'InvalidDefaultError',
    'InvalidDeclarationError',
    'ValidationError',

    # Catalog and storage
    'ManifestCatalog',
    'ExtensionManifest',
    'SnapshotStore',
    'MemorySnapshotStore',
    'QSettingsSnapshotStore',

    # Logging and Qt
    'LoggingSettings',
    'setup_logging',
    'SettingsSignals',
]
