"""Extension catalog built from JSON manifests."""

from .models import ExtensionManifest, ManifestSchema
from .loader import ManifestLoader
from .service import ManifestCatalog

__all__ = [
    "ExtensionManifest",
    "ManifestSchema",
    "ManifestLoader",
    "ManifestCatalog",
]
