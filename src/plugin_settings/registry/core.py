"""
Core settings registry.

Holds every registered setting, validates values against their declared
types, fans out change notifications and implements the snapshot load/save
protocol used by persistence backends.
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple, overload

from .entry import ChangeCallback, SettingEntry
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
)


class SettingNames(Sequence[str]):
    """Immutable view of the registered setting names at one point in time.

    Iterating is restartable and unaffected by later registrations.
    """

    def __init__(self, names: Sequence[str]):
        self._names: Tuple[str, ...] = tuple(names)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> "SettingNames": ...

    def __getitem__(self, index: int | slice) -> "str | SettingNames":
        if isinstance(index, slice):
            return SettingNames(self._names[index])
        return self._names[index]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        yield from self._names

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SettingNames):
            return self._names == other._names
        if isinstance(other, (list, tuple)):
            return list(self._names) == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"SettingNames({list(self._names)!r})"


class SettingsRegistry:
    """
    Registry of typed, extension-declared settings.

    Usage:
        registry = SettingsRegistry(resolver, catalog=catalog)
        await registry.initialize()

        registry.get("tabsize")        # -> 4
        registry.set("tabsize", 2)     # validates and notifies
        registry.reset("tabsize")      # back to the default

        snapshot = await registry.save_to_object()
        report = await registry.load_from(snapshot)

    Subclasses persist values by overriding _change_value() and
    _load_initial_values().
    """

    def __init__(
        self,
        resolver: TypeResolver,
        catalog: Optional[ExtensionCatalog] = None,
        on_change: Optional[ChangeCallback] = None,
        resolve_timeout: Optional[float] = None,
    ):
        """Create an empty registry. No work is scheduled until initialize().

        Args:
            resolver: Resolves declared type names to type descriptors
            catalog: Source of extension setting declarations (optional)
            on_change: Called with (name, value) after every successful change
            resolve_timeout: Seconds to wait for a type to resolve; None waits forever
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._resolver = resolver
        self._catalog = catalog
        self._on_change = on_change
        self._resolve_timeout = resolve_timeout

        self._entries: Dict[str, SettingEntry] = {}
        # Names whose type is still resolving
        self._pending: Set[str] = set()
        self._initialized = False

    @property
    def catalog(self) -> Optional[ExtensionCatalog]:
        """Extension catalog this registry was built from."""
        return self._catalog

    @property
    def is_initialized(self) -> bool:
        """True once initialize() has been called."""
        return self._initialized

    # === REGISTRATION ===

    async def register(
        self,
        name: str,
        type_name: str,
        default_value: Any,
        *,
        description: str = "",
        extension: Optional[str] = None,
    ) -> SettingEntry:
        """Register a new setting.

        The setting becomes visible to get()/set() only once its type has
        resolved and the default has been validated.

        Args:
            name: Unique setting name
            type_name: Type name understood by the resolver
            default_value: Default value, must be valid for the type
            description: Optional description
            extension: Name of the contributing extension

        Returns:
            The new SettingEntry

        Raises:
            InvalidDeclarationError: If name is empty
            DuplicateSettingError: If name is registered or being registered
            UnknownTypeError: If type_name cannot be resolved
            InvalidDefaultError: If default_value fails the type's validator
        """
        if not name:
            raise InvalidDeclarationError("Settings need a 'name' member", name)

        if name in self._entries or name in self._pending:
            raise DuplicateSettingError(f"Setting '{name}' is already registered", name)

        self._pending.add(name)
        try:
            setting_type = await self._resolve_type(name, type_name)

            if not setting_type.is_valid(default_value):
                raise InvalidDefaultError(
                    f"Default value {default_value!r} is not a valid {type_name} "
                    f"(setting '{name}')",
                    name,
                )

            entry = SettingEntry(
                name=name,
                type_name=type_name,
                setting_type=setting_type,
                default_value=default_value,
                current_value=default_value,
                description=description,
                extension=extension,
            )
            # Persistence hook always runs first
            entry.add_subscriber(self._change_value)
            self._entries[name] = entry
        finally:
            self._pending.discard(name)

        source = f" from '{extension}'" if extension else ""
        self.logger.debug(f"Registered setting '{name}' ({type_name}){source}")
        return entry

    async def register_declaration(self, declaration: SettingDeclaration) -> SettingEntry:
        """Register a setting from an extension declaration."""
        return await self.register(
            declaration.name,
            declaration.type_name,
            declaration.default_value,
            description=declaration.description,
            extension=declaration.extension,
        )

    async def _resolve_type(self, name: str, type_name: str) -> SettingType:
        """Resolve a type name, mapping every failure to UnknownTypeError."""
        try:
            lookup = self._resolver.resolve_type(type_name)
            if self._resolve_timeout is not None:
                setting_type = await asyncio.wait_for(lookup, self._resolve_timeout)
            else:
                setting_type = await lookup
        except asyncio.TimeoutError:
            raise UnknownTypeError(
                f"Timed out after {self._resolve_timeout}s resolving type "
                f"'{type_name}' for setting '{name}'",
                name,
            ) from None
        except UnknownTypeError as e:
            if e.name is None:
                e.name = name
            raise
        except Exception as e:
            raise UnknownTypeError(
                f"Could not resolve type '{type_name}' for setting '{name}': {e}", name
            ) from e

        if setting_type is None:
            known = self._known_type_names()
            hint = f"should be one of [{'|'.join(known)}]. " if known else ""
            raise UnknownTypeError(
                f"Setting '{name}' type {hint}Got {type_name}", name
            )
        return setting_type

    def _known_type_names(self) -> List[str]:
        if self._catalog is None:
            return []
        return list(self._catalog.list_type_declarations())

    # === READ / WRITE ===

    def get(self, name: str, default: Any = None) -> Any:
        """Get the current value of a setting, or default if not registered."""
        entry = self._entries.get(name)
        return entry.current_value if entry is not None else default

    def get_entry(self, name: str) -> Optional[SettingEntry]:
        """Get the entry for a setting. Callers must not mutate it."""
        return self._entries.get(name)

    def has_setting(self, name: str) -> bool:
        """Check if a setting is registered (and its type resolved)."""
        return name in self._entries

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def set(self, name: str, value: Any) -> None:
        """Validate and store a value, then notify subscribers.

        Raises:
            UnknownSettingError: If name is not registered
            ValidationError: If value fails the setting's type validator
        """
        entry = self._require(name)
        if not entry.is_valid(value):
            raise ValidationError(
                f"Value {value!r} is not a valid {entry.type_name} for setting '{name}'",
                name,
            )

        entry.current_value = value
        failures = entry.notify()
        if failures:
            self.logger.warning(
                f"{failures} subscriber(s) failed while handling change of '{name}'"
            )

    def reset(self, name: str) -> None:
        """Reset the value of a setting to its default."""
        entry = self._require(name)
        self.set(name, entry.default_value)

    def reset_all(self) -> None:
        """Reset every registered setting to its default."""
        for name in self.list_names():
            self.reset(name)

    def subscribe(self, name: str, callback: ChangeCallback) -> None:
        """Call callback(name, value) whenever the setting changes."""
        self._require(name).add_subscriber(callback)

    def unsubscribe(self, name: str, callback: ChangeCallback) -> bool:
        """Stop notifying callback. Returns True if it was subscribed."""
        return self._require(name).remove_subscriber(callback)

    def _require(self, name: str) -> SettingEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownSettingError(f"Unknown setting '{name}'", name)
        return entry

    # === LISTING ===

    def list_names(self) -> SettingNames:
        """List registered setting names.

        Names declared in the catalog come first in declaration order,
        followed by directly registered names in registration order.
        """
        ordered: List[str] = []
        seen: Set[str] = set()

        if self._catalog is not None:
            for declaration in self._catalog.list_setting_declarations():
                name = declaration.name
                if name in self._entries and name not in seen:
                    ordered.append(name)
                    seen.add(name)

        for name in self._entries:
            if name not in seen:
                ordered.append(name)
                seen.add(name)

        return SettingNames(ordered)

    def list_entries(self) -> List[Tuple[str, Any]]:
        """List (name, value) pairs in list_names() order."""
        return [(name, self._entries[name].current_value) for name in self.list_names()]

    # === LOAD / SAVE ===

    async def load_from(self, snapshot: Mapping[str, str]) -> LoadReport:
        """Apply a serialized snapshot over the current values.

        Each known key is parsed by its setting's type and applied through
        set(). Unknown keys are ignored and per-key failures are isolated;
        both are listed in the returned report.
        """
        report = LoadReport()
        tasks: Dict[str, "asyncio.Task[None]"] = {}

        for key, text in snapshot.items():
            entry = self._entries.get(key)
            if entry is None:
                report.ignored.append(key)
                self.logger.debug(f"Ignoring persisted value for unknown setting '{key}'")
                continue
            tasks[key] = asyncio.ensure_future(self._load_value(entry, text))

        if tasks:
            results = await asyncio.gather(*tasks.values(), return_exceptions=True)
            for key, result in zip(tasks, results):
                if isinstance(result, BaseException):
                    message = str(result) or type(result).__name__
                    report.failed[key] = message
                    self.logger.warning(f"Failed to load setting '{key}': {message}")
                else:
                    report.loaded.append(key)

        if report.ignored:
            self.logger.info(
                f"Ignored {len(report.ignored)} persisted value(s) without a setting: "
                f"{', '.join(report.ignored)}"
            )
        return report

    async def _load_value(self, entry: SettingEntry, text: str) -> None:
        value = await entry.setting_type.parse(text)
        self.set(entry.name, value)

    async def save_to_object(self) -> Dict[str, str]:
        """Serialize every setting into a flat name -> string snapshot.

        Values are captured before any serialization starts, so the snapshot
        reflects a single point in time. Settings whose value cannot be
        serialized are logged and left out.
        """
        captured = [
            (name, self._entries[name].setting_type, self._entries[name].current_value)
            for name in self.list_names()
        ]

        results = await asyncio.gather(
            *(setting_type.serialize(value) for _, setting_type, value in captured),
            return_exceptions=True,
        )

        reply: Dict[str, str] = {}
        for (name, _, value), result in zip(captured, results):
            if isinstance(result, BaseException):
                self.logger.warning(f"Failed to serialize setting '{name}' ({value!r}): {result}")
                continue
            reply[name] = str(result)
        return reply

    # === INITIAL VALUES ===

    async def initialize(self) -> InitializationReport:
        """Register catalog declarations and load initial values.

        Called once by the owner when the system is ready. Defaults are
        applied first, then any persisted values on top of them.

        Raises:
            SettingsError: If the registry was already initialized
        """
        if self._initialized:
            raise SettingsError("Settings registry is already initialized")
        self._initialized = True

        report = InitializationReport()
        await self._register_catalog_declarations(report)
        report.load = await self._load_initial_values()

        self.logger.info(
            f"Settings initialized: {len(self._entries)} registered, "
            f"{len(report.failed)} failed, {len(report.load.loaded)} loaded"
        )
        return report

    async def _register_catalog_declarations(self, report: InitializationReport) -> None:
        """Register every catalog declaration, isolating failures."""
        if self._catalog is None:
            return

        declarations = [
            declaration
            for declaration in self._catalog.list_setting_declarations()
            if declaration.name not in self._entries
        ]

        results = await asyncio.gather(
            *(self.register_declaration(declaration) for declaration in declarations),
            return_exceptions=True,
        )

        for declaration, result in zip(declarations, results):
            if isinstance(result, SettingsError):
                report.failed[declaration.name] = str(result)
                self.logger.error(
                    f"Could not register setting '{declaration.name}' "
                    f"from '{declaration.extension or 'unknown extension'}': {result}"
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                report.registered.append(declaration.name)

    async def _load_initial_values(self) -> LoadReport:
        """Load the values the registry starts with.

        Subclasses should override this, calling _load_default_values()
        before applying persisted user values.
        """
        self._load_default_values()
        return LoadReport()

    def _load_default_values(self) -> None:
        """Apply every default through set() so subscribers see them."""
        for name in self.list_names():
            self.reset(name)

    def _change_value(self, name: str, value: Any) -> None:
        """Called whenever a value changes.

        Subclasses override this to persist the new value.
        """
        if self._on_change is not None:
            self._on_change(name, value)
