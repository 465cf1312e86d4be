from __future__ import annotations

import copy
from typing import Dict, List, Mapping, Optional

from .repository import CollectionBackend


class MemoryBackend(CollectionBackend):
    """Keeps encoded collections in a dict. Used by tests and the `memory` setting."""

    def __init__(self, initial: Optional[Mapping[str, List[dict]]] = None):
        self._data: Dict[str, List[dict]] = copy.deepcopy(dict(initial or {}))
        self.save_calls = 0

    def load(self) -> Dict[str, List[dict]]:
        return copy.deepcopy(self._data)

    def save(self, changes: Mapping[str, List[dict]]) -> None:
        self.save_calls += 1
        for name, rows in changes.items():
            self._data[name] = copy.deepcopy(list(rows))
