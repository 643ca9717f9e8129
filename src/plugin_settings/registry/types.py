"""
Type definitions and exceptions for the settings registry.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class SettingsError(Exception):
    """Base class for all settings registry errors."""

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name


class DuplicateSettingError(SettingsError):
    """Raised when a setting name is registered twice."""


class UnknownSettingError(SettingsError, KeyError):
    """Raised when writing or resetting a setting that was never registered."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""


class UnknownTypeError(SettingsError):
    """Raised when a declared type name cannot be resolved."""


class InvalidDefaultError(SettingsError):
    """Raised when a default value fails its own type's validator."""


class ValidationError(SettingsError, ValueError):
    """Raised when a value fails the setting's type validator."""


class InvalidDeclarationError(SettingsError):
    """Raised when a setting declaration is malformed (e.g. has no name)."""


@dataclass(frozen=True)
class SettingDeclaration:
    """A setting as declared by an extension.

    Attributes:
        name: Unique setting name (e.g. "tabsize")
        type_name: Name of the type the resolver knows (e.g. "number")
        default_value: Typed default value
        description: Optional human-readable description
        extension: Name of the contributing extension, if known
    """

    name: str
    type_name: str
    default_value: Any
    description: str = ""
    extension: Optional[str] = None


@dataclass
class LoadReport:
    """Outcome of loading a snapshot over the registry.

    Loading never fails as a whole; keys that were skipped or could not be
    applied are collected here instead.
    """

    loaded: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True if every known key was applied."""
        return not self.failed


@dataclass
class InitializationReport:
    """Outcome of the two-phase registry initialization."""

    registered: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    load: LoadReport = field(default_factory=LoadReport)


@dataclass
class ValidationResult:
    """Result of registry validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
