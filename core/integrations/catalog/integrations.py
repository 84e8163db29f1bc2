"""
Integration Catalog - key -> IntegrationDescriptor, in registration order

Overrides from persisted settings replace whole records per key (no field
merge); keys not present in the built-ins are inserted as new entries.
"""

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..framework.base import IntegrationDescriptor

logger = logging.getLogger(__name__)


class IntegrationCatalog:
    """Ordered catalog of external tools"""

    def __init__(self, builtins: Optional[Mapping[str, IntegrationDescriptor]] = None):
        self._integrations: Dict[str, IntegrationDescriptor] = dict(builtins or {})

    def get(self, key: str) -> Optional[IntegrationDescriptor]:
        return self._integrations.get(key)

    def list(self) -> List[Tuple[str, IntegrationDescriptor]]:
        return [(key, descriptor) for key, descriptor in self._integrations.items()]

    def keys(self) -> List[str]:
        return [key for key in self._integrations]

    def __contains__(self, key: object) -> bool:
        return key in self._integrations

    def __len__(self) -> int:
        return len(self._integrations)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def apply_overrides(self, partial: Mapping[str, Any]) -> List[str]:
        """
        Shallow top-level merge of persisted overrides.

        Each record in ``partial`` replaces the descriptor at its key in full.
        Any mapping is accepted as a record; other values are skipped with a warning.

        Returns:
            Keys that were applied, in application order
        """
        applied = []
        for key, record in partial.items():
            if isinstance(record, IntegrationDescriptor):
                descriptor = record
            elif isinstance(record, Mapping):
                descriptor = IntegrationDescriptor.from_record(dict(record))
            else:
                logger.warning(
                    f"Ignoring override for integration {key!r}: "
                    f"expected a mapping, got {type(record).__name__}"
                )
                continue

            if key not in self._integrations:
                logger.info(f"Override adds integration {key!r} not present in built-ins")
            self._integrations[str(key)] = descriptor
            applied.append(str(key))

        if applied:
            logger.info(f"Applied integration overrides: {', '.join(applied)}")
        return applied

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Full catalog state in persisted-blob shape"""
        return {key: descriptor.to_record() for key, descriptor in self._integrations.items()}
