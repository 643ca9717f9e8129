"""Shared fixtures: a small type system and resolver for registry tests."""

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from plugin_settings.catalog import ExtensionManifest, ManifestCatalog
from plugin_settings.registry import SettingDeclaration


class NumberType:
    """Integers and floats (but not booleans)."""

    def is_valid(self, value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    async def parse(self, text: str) -> Any:
        await asyncio.sleep(0)
        number = float(text)
        return int(number) if number.is_integer() else number

    async def serialize(self, value: Any) -> str:
        await asyncio.sleep(0)
        return str(value)


class GatedNumberType(NumberType):
    """NumberType whose parse() waits until release is set.

    Create inside a running event loop.
    """

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def parse(self, text: str) -> Any:
        self.started.set()
        await self.release.wait()
        return await super().parse(text)


class TextType:
    def is_valid(self, value: Any) -> bool:
        return isinstance(value, str)

    async def parse(self, text: str) -> Any:
        return text

    async def serialize(self, value: Any) -> str:
        return value


class BooleanType:
    def is_valid(self, value: Any) -> bool:
        return isinstance(value, bool)

    async def parse(self, text: str) -> Any:
        lowered = text.strip().lower()
        if lowered not in ("true", "false"):
            raise ValueError(f"Not a boolean: {text!r}")
        return lowered == "true"

    async def serialize(self, value: Any) -> str:
        return "true" if value else "false"


class BrokenSerializeType(TextType):
    async def serialize(self, value: Any) -> str:
        raise RuntimeError("serializer exploded")


class FakeResolver:
    """Resolves type names from a dict, suspending once per lookup."""

    def __init__(self, types: Optional[Dict[str, Any]] = None):
        self.types: Dict[str, Any] = types if types is not None else {
            "number": NumberType(),
            "text": TextType(),
            "boolean": BooleanType(),
        }
        self.calls: List[str] = []

    async def resolve_type(self, type_name: str) -> Any:
        self.calls.append(type_name)
        await asyncio.sleep(0)
        return self.types.get(type_name)


class SlowResolver(FakeResolver):
    def __init__(self, delay: float):
        super().__init__()
        self.delay = delay

    async def resolve_type(self, type_name: str) -> Any:
        await asyncio.sleep(self.delay)
        return await super().resolve_type(type_name)


class Recorder:
    """Change callback that records every (name, value) it receives."""

    def __init__(self):
        self.calls: List[tuple] = []

    def __call__(self, name: str, value: Any) -> None:
        self.calls.append((name, value))


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def catalog() -> ManifestCatalog:
    """Catalog with two extensions declaring three settings."""
    catalog = ManifestCatalog()
    catalog.add_manifest(
        ExtensionManifest(
            name="editor",
            types=["number", "text"],
            settings=[
                SettingDeclaration("tabsize", "number", 4, extension="editor"),
                SettingDeclaration("theme", "text", "dark", extension="editor"),
            ],
        )
    )
    catalog.add_manifest(
        ExtensionManifest(
            name="vcs",
            types=["boolean"],
            settings=[
                SettingDeclaration("autosave", "boolean", False, extension="vcs"),
            ],
        )
    )
    return catalog
