"""
Settings registry validation.
"""

import logging
from collections import Counter
from typing import List, TYPE_CHECKING

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import SettingsRegistry

logger = logging.getLogger(__name__)


class RegistryValidator:
    """Checks a live registry against its values and its catalog."""

    def __init__(self, registry: "SettingsRegistry"):
        self.registry = registry

    def validate(self) -> ValidationResult:
        """Validate current registry state."""
        errors: List[str] = []
        warnings: List[str] = []

        # Stored values must still pass their type's validator
        for name in self.registry.list_names():
            entry = self.registry.get_entry(name)
            if entry is None:
                continue
            try:
                valid = entry.is_valid(entry.current_value)
            except Exception as e:
                errors.append(f"Validator for setting '{name}' raised: {e}")
                continue
            if not valid:
                errors.append(
                    f"Setting '{name}' holds an invalid {entry.type_name}: "
                    f"{entry.current_value!r}"
                )

        catalog = self.registry.catalog
        if catalog is not None:
            declarations = list(catalog.list_setting_declarations())

            counts = Counter(declaration.name for declaration in declarations)
            for name, count in counts.items():
                if count > 1:
                    warnings.append(f"Setting '{name}' is declared {count} times")

            for declaration in declarations:
                if declaration.name not in self.registry:
                    source = declaration.extension or "unknown extension"
                    warnings.append(
                        f"Declared setting not registered: {declaration.name} (from {source})"
                    )

        if errors:
            logger.debug(f"Registry validation found {len(errors)} error(s)")

        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
