"""Extension manifests and their schema.

An extension manifest is a JSON document declaring the settings (and the
type names) one extension contributes:

    {
        "name": "editor",
        "types": ["number"],
        "settings": [
            {"name": "tabsize", "type": "number", "defaultValue": 4}
        ]
    }
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from ..registry.types import SettingDeclaration


@dataclass
class ExtensionManifest:
    """Declarations contributed by a single extension.

    Attributes:
        name: Unique extension name
        settings: Setting declarations in manifest order
        types: Names of the types the extension provides
        file_path: Manifest file, or None for in-memory manifests
    """

    name: str
    settings: List[SettingDeclaration] = field(default_factory=list)
    types: List[str] = field(default_factory=list)
    file_path: Optional[Path] = None

    def __repr__(self) -> str:
        return (
            f"ExtensionManifest(name={self.name!r}, settings={len(self.settings)}, "
            f"types={len(self.types)})"
        )


class ManifestSchema:
    """Validation of extension manifest JSON structure."""

    REQUIRED_SETTING_FIELDS = {"name", "type", "defaultValue"}

    @staticmethod
    def validate(data: Any) -> list[str]:
        """Validate a parsed manifest.

        Args:
            data: Parsed JSON data

        Returns:
            List of error messages (empty if valid)
        """
        if not isinstance(data, dict):
            return ["Manifest must be a JSON object"]

        errors: list[str] = []

        if not isinstance(data.get("name"), str) or not data.get("name"):
            errors.append("'name' must be a non-empty string")

        types = data.get("types", [])
        if not isinstance(types, list) or not all(isinstance(t, str) for t in types):
            errors.append("'types' must be an array of strings")

        settings = data.get("settings", [])
        if not isinstance(settings, list):
            errors.append("'settings' must be an array")
            return errors

        for index, setting in enumerate(settings):
            errors.extend(ManifestSchema.validate_setting(setting, index))

        return errors

    @staticmethod
    def validate_setting(setting: Any, index: int) -> list[str]:
        """Validate one entry of the 'settings' array."""
        if not isinstance(setting, dict):
            return [f"settings[{index}] must be an object"]

        errors: list[str] = []
        missing = ManifestSchema.REQUIRED_SETTING_FIELDS - setting.keys()
        if missing:
            errors.append(f"settings[{index}] missing required fields: {sorted(missing)}")

        if "name" in setting and (not isinstance(setting["name"], str) or not setting["name"]):
            errors.append(f"settings[{index}].name must be a non-empty string")
        if "type" in setting and not isinstance(setting["type"], str):
            errors.append(f"settings[{index}].type must be a string")
        if "description" in setting and not isinstance(setting["description"], str):
            errors.append(f"settings[{index}].description must be a string")

        return errors
