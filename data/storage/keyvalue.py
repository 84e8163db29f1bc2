"""
Key-Value Backends - durable slots for engine settings

Provides the storage slot SettingsStore reads and writes:
- KeyValueStore: protocol (get/set of string values by key)
- FileKeyValueStore: one UTF-8 file per key inside a directory
- MemoryKeyValueStore: process-local dict (tests, ephemeral engines)

Backends raise SettingsPersistenceError on I/O failure or an unusable key;
containing the failure is the caller's job.

@.architecture
Incoming: data/storage/settings_store.py, app.py --- {str key, str value}
Processing: get(), set(), delete(), _path_for() --- {3 jobs: slot_io, atomic_write, key_validation}
Outgoing: Local filesystem (Path.write_text/read_text/replace) --- {str values, SettingsPersistenceError}
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Protocol

from core.integrations.framework.errors import SettingsPersistenceError

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Protocol for a string key-value slot"""

    def get(self, key: str) -> Optional[str]:
        """Stored value, or None when the key has never been written"""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value"""
        ...


class MemoryKeyValueStore:
    """In-memory backend; contents vanish with the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileKeyValueStore:
    """
    File-backed slots: ``<base_dir>/<key>.json``.

    Writes go to a temp file first and are moved into place, so a failed
    write never leaves a truncated slot behind.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir).resolve()

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise SettingsPersistenceError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SettingsPersistenceError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise SettingsPersistenceError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {len(value)} chars to {path}")

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise SettingsPersistenceError(f"Failed to delete {path}: {e}") from e
