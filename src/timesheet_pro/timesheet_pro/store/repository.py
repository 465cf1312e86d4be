from __future__ import annotations

from typing import Dict, List, Mapping, Protocol


class CollectionBackend(Protocol):
    """Persistence boundary for the entity store.

    Rows are the plain JSON-like encoding from `store.codec`, one array per
    collection. `save` must apply every collection it is given or none of
    them; retries, if any, belong to implementations of this interface.
    """

    def load(self) -> Dict[str, List[dict]]:
        raise NotImplementedError

    def save(self, changes: Mapping[str, List[dict]]) -> None:
        raise NotImplementedError
