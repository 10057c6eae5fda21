# Path: core/storage/__init__.py
# Purpose: Package initializer for persisted state.
# Layer: core/storage.
# Details: Exposes storage backends and the record stores built on top of them.

from .backends import JsonFileStorage, KeyValueStorage, MemoryStorage
from .stores import (
    CATALOG_KEY,
    SELECTION_KEY,
    SETTINGS_KEY,
    CatalogStore,
    PackSelectionStore,
    SettingsStore,
    load_catalog,
)

__all__ = [
    "CATALOG_KEY",
    "SELECTION_KEY",
    "SETTINGS_KEY",
    "CatalogStore",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PackSelectionStore",
    "SettingsStore",
    "load_catalog",
]
