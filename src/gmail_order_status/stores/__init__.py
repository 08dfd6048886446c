"""Persistence for the settings document and entry values."""

from .entry_store import EntryStore
from .settings_store import SettingsStore, migrate_settings

__all__ = ["EntryStore", "SettingsStore", "migrate_settings"]
