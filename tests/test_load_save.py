"""Tests for the snapshot load/save protocol and two-phase initialization."""

import asyncio
from typing import Any, Dict

import pytest

from conftest import BrokenSerializeType, FakeResolver, NumberType, Recorder
from plugin_settings.catalog import ExtensionManifest, ManifestCatalog
from plugin_settings.registry import (
    LoadReport,
    SettingDeclaration,
    SettingsError,
    SettingsRegistry,
)


async def build(resolver: FakeResolver, settings: Dict[str, Any], **kwargs) -> SettingsRegistry:
    types = {int: "number", str: "text", bool: "boolean"}
    registry = SettingsRegistry(resolver, **kwargs)
    for name, default in settings.items():
        await registry.register(name, types[type(default)], default)
    return registry


class TestLoadFrom:
    """Test applying persisted snapshots."""

    def test_unknown_keys_are_ignored(self, resolver: FakeResolver) -> None:
        """Keys without a setting don't block the load."""

        async def scenario():
            registry = await build(resolver, {"tabsize": 4})
            report = await registry.load_from({"unknownKey": "x", "tabsize": "2"})
            return registry, report

        registry, report = asyncio.run(scenario())
        assert registry.get("tabsize") == 2
        assert report.loaded == ["tabsize"]
        assert report.ignored == ["unknownKey"]
        assert report.failed == {}
        assert report.ok

    def test_loaded_values_notify(self, resolver: FakeResolver, recorder: Recorder) -> None:
        """Loaded values go through set() and fire notifications."""

        async def scenario():
            registry = await build(resolver, {"tabsize": 4, "theme": "dark"}, on_change=recorder)
            await registry.load_from({"tabsize": "8", "theme": "light"})
            return registry

        registry = asyncio.run(scenario())
        assert sorted(recorder.calls) == [("tabsize", 8), ("theme", "light")]
        assert registry.list_entries() == [("tabsize", 8), ("theme", "light")]

    def test_parse_failure_is_isolated(self, resolver: FakeResolver) -> None:
        """A bad value for one key leaves the others loading normally."""

        async def scenario():
            registry = await build(resolver, {"tabsize": 4, "autosave": False})
            report = await registry.load_from({"tabsize": "not a number", "autosave": "true"})
            return registry, report

        registry, report = asyncio.run(scenario())
        assert registry.get("tabsize") == 4
        assert registry.get("autosave") is True
        assert report.loaded == ["autosave"]
        assert list(report.failed) == ["tabsize"]
        assert not report.ok

    def test_validation_failure_is_isolated(self) -> None:
        """Parsed values that fail validation are reported, not applied."""

        class PositiveNumber(NumberType):
            def is_valid(self, value: Any) -> bool:
                return super().is_valid(value) and value > 0

        resolver = FakeResolver({"positive": PositiveNumber()})

        async def scenario():
            registry = SettingsRegistry(resolver)
            await registry.register("tabsize", "positive", 4)
            report = await registry.load_from({"tabsize": "-1"})
            return registry, report

        registry, report = asyncio.run(scenario())
        assert registry.get("tabsize") == 4
        assert "tabsize" in report.failed
        assert "-1" in report.failed["tabsize"]

    def test_empty_snapshot(self, resolver: FakeResolver) -> None:
        async def scenario():
            registry = await build(resolver, {"tabsize": 4})
            return await registry.load_from({})

        assert asyncio.run(scenario()) == LoadReport()


class TestSaveToObject:
    """Test producing persisted snapshots."""

    def test_values_are_serialized(self, resolver: FakeResolver) -> None:
        async def scenario():
            registry = await build(resolver, {"tabsize": 4, "theme": "dark"})
            return await registry.save_to_object()

        assert asyncio.run(scenario()) == {"tabsize": "4", "theme": "dark"}

    def test_round_trip(self, resolver: FakeResolver) -> None:
        """Parsing a saved snapshot reproduces every value."""

        async def scenario():
            registry = await build(resolver, {"tabsize": 4, "theme": "dark", "autosave": False})
            registry.set("tabsize", 2.5)
            registry.set("autosave", True)
            snapshot = await registry.save_to_object()

            other = await build(FakeResolver(), {"tabsize": 4, "theme": "dark", "autosave": False})
            await other.load_from(snapshot)
            return registry, other

        registry, other = asyncio.run(scenario())
        assert other.list_entries() == registry.list_entries()

    def test_point_in_time_view(self, resolver: FakeResolver) -> None:
        """Changes made while serialization is suspended don't leak in."""

        async def scenario():
            registry = await build(resolver, {"tabsize": 4, "theme": "dark"})
            save = asyncio.ensure_future(registry.save_to_object())
            await asyncio.sleep(0)
            registry.set("tabsize", 16)
            return await save

        assert asyncio.run(scenario()) == {"tabsize": "4", "theme": "dark"}

    def test_serialize_failure_is_isolated(self, resolver: FakeResolver) -> None:
        """A setting that can't be serialized is left out of the snapshot."""
        resolver.types["broken"] = BrokenSerializeType()

        async def scenario():
            registry = await build(resolver, {"tabsize": 4})
            await registry.register("bad", "broken", "x")
            return await registry.save_to_object()

        assert asyncio.run(scenario()) == {"tabsize": "4"}

    def test_snapshot_follows_list_order(self, resolver: FakeResolver, catalog) -> None:
        async def scenario():
            registry = SettingsRegistry(resolver, catalog=catalog)
            await registry.initialize()
            return await registry.save_to_object()

        snapshot = asyncio.run(scenario())
        assert list(snapshot) == ["tabsize", "theme", "autosave"]
        assert snapshot == {"tabsize": "4", "theme": "dark", "autosave": "false"}


class TestInitialize:
    """Test the explicit two-phase initialization."""

    def test_construction_schedules_nothing(self, resolver: FakeResolver, catalog) -> None:
        """Nothing is registered until initialize() is awaited."""
        registry = SettingsRegistry(resolver, catalog=catalog)
        assert len(registry) == 0
        assert resolver.calls == []
        assert not registry.is_initialized

    def test_initialize_registers_catalog(self, resolver: FakeResolver, catalog) -> None:
        recorder = Recorder()
        registry = SettingsRegistry(resolver, catalog=catalog, on_change=recorder)

        report = asyncio.run(registry.initialize())

        assert registry.is_initialized
        assert sorted(report.registered) == ["autosave", "tabsize", "theme"]
        assert report.failed == {}
        assert registry.list_entries() == [
            ("tabsize", 4),
            ("theme", "dark"),
            ("autosave", False),
        ]
        # Defaults are applied through set(), in list order
        assert recorder.calls == [("tabsize", 4), ("theme", "dark"), ("autosave", False)]

    def test_failed_declarations_are_isolated(self, resolver: FakeResolver) -> None:
        """A broken declaration doesn't stop the others from registering."""
        catalog = ManifestCatalog()
        catalog.add_manifest(
            ExtensionManifest(
                name="mixed",
                settings=[
                    SettingDeclaration("tabsize", "number", 4, extension="mixed"),
                    SettingDeclaration("colour", "rgb", "#fff", extension="mixed"),
                    SettingDeclaration("margin", "number", "wide", extension="mixed"),
                    SettingDeclaration("tabsize", "number", 8, extension="mixed"),
                ],
            )
        )
        registry = SettingsRegistry(resolver, catalog=catalog)

        report = asyncio.run(registry.initialize())

        assert report.registered == ["tabsize"]
        assert set(report.failed) == {"colour", "margin", "tabsize"}
        assert registry.get("tabsize") == 4
        assert list(registry.list_names()) == ["tabsize"]

    def test_direct_registrations_are_kept(self, resolver: FakeResolver, catalog) -> None:
        """Settings registered before initialize() are not re-registered."""

        async def scenario():
            registry = SettingsRegistry(resolver, catalog=catalog)
            await registry.register("tabsize", "number", 2)
            report = await registry.initialize()
            return registry, report

        registry, report = asyncio.run(scenario())
        assert "tabsize" not in report.registered
        assert "tabsize" not in report.failed
        assert registry.get("tabsize") == 2

    def test_initialize_twice_fails(self, resolver: FakeResolver, catalog) -> None:
        registry = SettingsRegistry(resolver, catalog=catalog)
        asyncio.run(registry.initialize())
        with pytest.raises(SettingsError):
            asyncio.run(registry.initialize())

    def test_initialize_without_catalog(self, resolver: FakeResolver) -> None:
        registry = SettingsRegistry(resolver)
        report = asyncio.run(registry.initialize())
        assert report.registered == []
        assert report.load == LoadReport()
