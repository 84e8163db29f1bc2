"""
Storage Layer - persistence for the integration engine

- Key-value slots for persisted integration settings (file or memory)
- SettingsStore: best-effort load/save of integration overrides
- LocalArtifactStorage: rendered export files on disk
"""

from .keyvalue import KeyValueStore, FileKeyValueStore, MemoryKeyValueStore
from .settings_store import SettingsStore, DEFAULT_SETTINGS_KEY
from .local import LocalArtifactStorage

__all__ = [
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "SettingsStore",
    "DEFAULT_SETTINGS_KEY",
    "LocalArtifactStorage",
]
