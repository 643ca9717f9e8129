"""
Settings registry that persists every change to a snapshot store.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Set

from .core import SettingsRegistry
from .entry import ChangeCallback, SettingEntry
from .protocols import ExtensionCatalog, TypeResolver
from .types import LoadReport

if TYPE_CHECKING:
    from ..storage import SnapshotStore


class PersistentSettingsRegistry(SettingsRegistry):
    """
    SettingsRegistry backed by a SnapshotStore.

    On initialize() the stored snapshot is applied over the defaults. Every
    later change is serialized and written to the store in the background;
    call flush() to wait for outstanding writes.
    """

    def __init__(
        self,
        resolver: TypeResolver,
        store: "SnapshotStore",
        catalog: Optional[ExtensionCatalog] = None,
        on_change: Optional[ChangeCallback] = None,
        resolve_timeout: Optional[float] = None,
    ):
        super().__init__(
            resolver, catalog=catalog, on_change=on_change, resolve_timeout=resolve_timeout
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._store = store

        self._pending_writes: Set["asyncio.Task[None]"] = set()
        # Names changed while no event loop was running
        self._dirty: Set[str] = set()
        # Latest change per name; older writes still serializing are dropped
        self._generations: Dict[str, int] = {}
        self._suppress_writes = False
        # True while initialize() applies the stored snapshot
        self._loading_initial = False

    @property
    def store(self) -> "SnapshotStore":
        """Store the registry persists to."""
        return self._store

    async def _load_initial_values(self) -> LoadReport:
        # Read before defaults are applied so nothing can overwrite the stored values
        snapshot = self._store.read()
        self.logger.debug(f"Read {len(snapshot)} persisted value(s)")

        self._loading_initial = True
        try:
            self._apply_unpersisted(self._load_default_values)
            return await self.load_from(snapshot)
        finally:
            self._loading_initial = False

    async def _load_value(self, entry: SettingEntry, text: str) -> None:
        value = await entry.setting_type.parse(text)
        if self._loading_initial:
            # The store already holds this value
            self._apply_unpersisted(self.set, entry.name, value)
        else:
            self.set(entry.name, value)

    def _apply_unpersisted(self, apply: Callable[..., None], *args: Any) -> None:
        """Run a synchronous change without writing it to the store.

        Only changes made inside apply() are skipped; set() calls from other
        coroutines between two suspension points are persisted as usual.
        """
        self._suppress_writes = True
        try:
            apply(*args)
        finally:
            self._suppress_writes = False

    def _change_value(self, name: str, value: Any) -> None:
        super()._change_value(name, value)
        if self._suppress_writes:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._dirty.add(name)
            return

        generation = self._generations.get(name, 0) + 1
        self._generations[name] = generation
        task = loop.create_task(self._persist(name, value, generation))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _persist(self, name: str, value: Any, generation: int) -> None:
        entry = self.get_entry(name)
        if entry is None:
            return
        try:
            text = await entry.setting_type.serialize(value)
            if self._generations.get(name) != generation:
                return
            self._store.write_value(name, str(text))
        except Exception as e:
            self._dirty.add(name)
            self.logger.warning(f"Failed to persist setting '{name}': {e}")

    async def flush(self) -> None:
        """Wait for background writes and write any deferred changes."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

        if not self._dirty:
            return

        names = list(self._dirty)
        self._dirty.clear()
        for name in names:
            entry = self.get_entry(name)
            if entry is None:
                continue
            try:
                text = await entry.setting_type.serialize(entry.current_value)
                self._store.write_value(name, str(text))
            except Exception as e:
                self._dirty.add(name)
                self.logger.warning(f"Failed to persist setting '{name}': {e}")

    async def save(self) -> Dict[str, str]:
        """Write a full snapshot of every setting to the store.

        Persisted values without a registered setting are kept.

        Returns:
            The snapshot that was written
        """
        await self.flush()
        snapshot = await self.save_to_object()
        merged = self._store.read()
        merged.update(snapshot)
        self._store.write(merged)
        self.logger.info(f"Saved {len(snapshot)} setting(s)")
        return snapshot
