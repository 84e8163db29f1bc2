"""
Settings Store - best-effort persistence of integration overrides

The persisted record is a JSON object shaped like a partial integration
catalog (key -> partial descriptor), stored under one fixed key.

Neither direction is ever fatal:
- load() returns an empty override when the slot is missing, unreadable or
  not a JSON object, and records the diagnostic
- save() logs and swallows write failures; the in-memory catalog stays valid
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional

from core.integrations.framework.errors import SettingsPersistenceError
from monitoring.logging import operation_context

from .keyvalue import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_KEY = "epqs_integration_settings"


class SettingsStore:
    """Reads and writes the integration override blob"""

    def __init__(self, backend: KeyValueStore, key: str = DEFAULT_SETTINGS_KEY):
        self.backend = backend
        self.key = key
        self.last_error: Optional[str] = None

    def _record_failure(self, message: str) -> None:
        self.last_error = message
        logger.warning(message)

    def load(self) -> Dict[str, Any]:
        """
        Read the persisted override.

        Returns:
            Mapping of integration key -> partial descriptor record (empty on any failure)
        """
        with operation_context("load_settings"):
            try:
                raw = self.backend.get(self.key)
            except SettingsPersistenceError as e:
                self._record_failure(f"Failed to load integration settings: {e}")
                return {}

            if raw is None:
                logger.debug(f"No persisted integration settings under {self.key!r}")
                return {}

            try:
                data = json.loads(raw)
            except (json.JSONDecodeError, RecursionError) as e:
                self._record_failure(f"Discarding unparsable integration settings: {e}")
                return {}

            if not isinstance(data, dict):
                self._record_failure(
                    f"Discarding integration settings: expected a JSON object, got {type(data).__name__}"
                )
                return {}

            self.last_error = None
            logger.info(f"Loaded integration settings for {len(data)} integrations")
            return data

    def save(self, snapshot: Mapping[str, Any]) -> bool:
        """
        Persist the full catalog snapshot under the settings key.

        Returns:
            True if written, False if the failure was swallowed
        """
        with operation_context("save_settings"):
            try:
                blob = json.dumps(dict(snapshot), ensure_ascii=False)
                self.backend.set(self.key, blob)
            except (SettingsPersistenceError, TypeError, ValueError, RecursionError) as e:
                self.last_error = f"Failed to save integration settings: {e}"
                logger.error(self.last_error)
                return False

            self.last_error = None
            logger.info(f"Saved integration settings for {len(snapshot)} integrations")
            return True
