"""Catalog of extension-contributed setting declarations.

Collects extension manifests (from files or in memory) and exposes their
declarations to SettingsRegistry in a stable order.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..registry.types import SettingDeclaration
from .loader import ManifestLoader
from .models import ExtensionManifest


class ManifestCatalog:
    """Extension catalog built from manifests.

    Declaration order is manifest registration order, then the order of
    settings within each manifest. A manifest added under an existing
    extension name replaces the earlier one in place.
    """

    def __init__(self):
        """Initialize an empty catalog."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._manifests: Dict[str, ExtensionManifest] = {}
        self._loader = ManifestLoader()

    def add_manifest(self, manifest: ExtensionManifest) -> None:
        """Add or replace an extension manifest."""
        if manifest.name in self._manifests:
            self.logger.debug(f"Replacing manifest for extension '{manifest.name}'")
        self._manifests[manifest.name] = manifest

    def load_manifest(self, path: Path) -> ExtensionManifest:
        """Load a manifest file and add it to the catalog.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the manifest is invalid
        """
        manifest = self._loader.load(Path(path))
        self.add_manifest(manifest)
        return manifest

    def scan_directory(self, directory: Path) -> int:
        """Load every *.json manifest in a directory (sorted by file name).

        Invalid manifests are logged and skipped.

        Args:
            directory: Directory to scan

        Returns:
            Number of successfully loaded manifests
        """
        directory = Path(directory)
        if not directory.is_dir():
            self.logger.warning(f"Manifest directory not found: {directory}")
            return 0

        count = 0
        for json_file in sorted(directory.glob("*.json")):
            try:
                self.load_manifest(json_file)
                count += 1
            except (OSError, ValueError) as e:
                self.logger.error(f"Failed to load manifest from {json_file}: {e}")

        self.logger.info(f"Loaded {count} extension manifest(s) from {directory}")
        return count

    def get_manifest(self, extension: str) -> Optional[ExtensionManifest]:
        """Get a manifest by extension name."""
        return self._manifests.get(extension)

    def list_extensions(self) -> List[str]:
        """Get extension names in registration order."""
        return list(self._manifests.keys())

    def list_setting_declarations(self) -> List[SettingDeclaration]:
        """Get every setting declaration in declaration order."""
        return [
            declaration
            for manifest in self._manifests.values()
            for declaration in manifest.settings
        ]

    def list_type_declarations(self) -> List[str]:
        """Get every provided type name, without duplicates."""
        seen: Dict[str, None] = {}
        for manifest in self._manifests.values():
            for type_name in manifest.types:
                seen.setdefault(type_name, None)
        return list(seen)

    def get_declaration(self, name: str) -> Optional[SettingDeclaration]:
        """Get the first declaration of a setting by name."""
        for declaration in self.list_setting_declarations():
            if declaration.name == name:
                return declaration
        return None

    def get_extension_for(self, name: str) -> Optional[str]:
        """Get the name of the extension that declares a setting."""
        declaration = self.get_declaration(name)
        return declaration.extension if declaration else None
