"""Logging setup and Qt integration helpers."""

from .logging_config import setup_logging
from .signals import SettingsSignals

__all__ = [
    "setup_logging",
    "SettingsSignals",
]
