"""
Tutorial Catalog - built-in tutorials keyed by their action name
"""

from typing import Dict, Iterable, List, Optional

from ..framework.base import Tutorial


class TutorialCatalog:
    """Read-only tutorial lookup; a repeated action keeps the last tutorial"""

    def __init__(self, tutorials: Iterable[Tutorial]):
        self._tutorials: Dict[str, Tutorial] = {}
        for tutorial in tutorials:
            self._tutorials[tutorial.action] = tutorial

    def get(self, action: str) -> Optional[Tutorial]:
        return self._tutorials.get(action)

    def list(self) -> List[Tutorial]:
        return [tutorial for tutorial in self._tutorials.values()]

    def __len__(self) -> int:
        return len(self._tutorials)
