"""Loading extension manifests from JSON files."""

import logging
from pathlib import Path
from typing import Any, Optional

import orjson

from ..registry.types import SettingDeclaration
from .models import ExtensionManifest, ManifestSchema


class ManifestLoader:
    """Loads extension manifests from JSON files.

    Handles parsing, validation, and conversion to ExtensionManifest instances.
    """

    def __init__(self):
        """Initialize the loader."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load(self, path: Path) -> ExtensionManifest:
        """Load a manifest from JSON file.

        Args:
            path: Path to JSON file

        Returns:
            Loaded ExtensionManifest

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If JSON is invalid or doesn't match schema
        """
        if not path.exists():
            raise FileNotFoundError(f"Manifest file not found: {path}")

        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON from {path}: {e}") from e

        manifest = self.from_dict(data, source=path)
        self.logger.debug(
            f"Loaded manifest '{manifest.name}' with {len(manifest.settings)} setting(s) from {path}"
        )
        return manifest

    def from_dict(self, data: Any, source: Optional[Path] = None) -> ExtensionManifest:
        """Build a manifest from already parsed data.

        Raises:
            ValueError: If data doesn't match the manifest schema
        """
        errors = ManifestSchema.validate(data)
        if errors:
            error_msg = "\n  - ".join(errors)
            where = f" in {source}" if source else ""
            raise ValueError(f"Invalid extension manifest{where}:\n  - {error_msg}")

        name = data["name"]
        settings = [
            SettingDeclaration(
                name=setting["name"],
                type_name=setting["type"],
                default_value=setting["defaultValue"],
                description=setting.get("description", ""),
                extension=name,
            )
            for setting in data.get("settings", [])
        ]

        return ExtensionManifest(
            name=name,
            settings=settings,
            types=list(data.get("types", [])),
            file_path=source,
        )
