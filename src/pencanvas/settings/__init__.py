"""Configuration: packaged defaults, the Settings model and its store."""

from .schema import Settings
from .store import SettingsStore

__all__ = ["Settings", "SettingsStore"]
