"""
Interfaces for the collaborators the settings registry depends on.

The registry never implements a type system or an extension catalog itself;
host applications provide objects satisfying these protocols.
"""

from typing import Any, Awaitable, Optional, Protocol, Sequence, runtime_checkable

from .types import SettingDeclaration


@runtime_checkable
class SettingType(Protocol):
    """Descriptor able to validate, parse and serialize values of one type."""

    def is_valid(self, value: Any) -> bool:
        """Return True if value is acceptable for this type."""
        ...

    async def parse(self, text: str) -> Any:
        """Convert the serialized form back to a typed value.

        Raises on malformed input.
        """
        ...

    async def serialize(self, value: Any) -> str:
        """Convert a typed value to its string form."""
        ...


@runtime_checkable
class TypeResolver(Protocol):
    """Resolves type names to type descriptors."""

    def resolve_type(self, type_name: str) -> Awaitable[Optional[SettingType]]:
        """Look up a type by name.

        Returns None (or raises) when the name is unknown.
        """
        ...


@runtime_checkable
class ExtensionCatalog(Protocol):
    """Source of setting and type declarations contributed by extensions."""

    def list_setting_declarations(self) -> Sequence[SettingDeclaration]:
        """Return all setting declarations in declaration order."""
        ...

    def list_type_declarations(self) -> Sequence[str]:
        """Return the names of all types provided by extensions."""
        ...
