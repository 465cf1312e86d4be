from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..core.enums import Collection
from ..core.exceptions import NotFoundError, ValidationError
from .codec import decode_collection, encode_collection
from .repository import CollectionBackend

logger = logging.getLogger(__name__)

# Primary key attribute per entity collection; id-list collections have none.
ID_FIELDS: Dict[Collection, Optional[str]] = {
    Collection.USERS: "user_id",
    Collection.PROJECTS: "project_id",
    Collection.TIMESHEETS: "timesheet_id",
    Collection.LEAVE_REQUESTS: "request_id",
    Collection.TASKS: "task_id",
    Collection.NOTIFICATIONS: "notification_id",
    Collection.BEST_EMPLOYEE_IDS: None,
    Collection.BEST_EMPLOYEE_OF_YEAR_IDS: None,
}


def _ids(collection: Collection, items: Iterable[Any]) -> list:
    field = ID_FIELDS[collection]
    if field is None:
        return [int(i) for i in items]
    return [getattr(i, field) for i in items]


class UnitOfWork:
    """Staged collection replacements, applied together by the owning store.

    Reads see the staged value first, so later steps of the same use case
    observe earlier ones (e.g. hours recomputed from just-approved timesheets).
    """

    def __init__(self, store: "EntityStore"):
        self._store = store
        self._staged: Dict[Collection, Tuple[Any, ...]] = {}
        self._reserved: Dict[Collection, int] = {}
        self._after_commit: List[Callable[[], None]] = []

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run `callback` once the staged changes are saved; dropped on rollback."""
        self._after_commit.append(callback)

    @property
    def pending_callbacks(self) -> Tuple[Callable[[], None], ...]:
        return tuple(self._after_commit)

    @property
    def staged(self) -> Dict[Collection, Tuple[Any, ...]]:
        return dict(self._staged)

    def get(self, collection: Collection) -> Tuple[Any, ...]:
        if collection in self._staged:
            return self._staged[collection]
        return self._store.get(collection)

    def replace(self, collection: Collection, items: Iterable[Any]) -> None:
        new_items = tuple(items)
        ids = _ids(collection, new_items)
        if len(ids) != len(set(ids)):
            raise ValidationError(f"Duplicate ids in {collection.value}")
        self._staged[collection] = new_items

    def find(self, collection: Collection, item_id: int) -> Optional[Any]:
        field = ID_FIELDS[collection]
        for item in self.get(collection):
            if getattr(item, field) == item_id:
                return item
        return None

    def require(self, collection: Collection, item_id: int, label: str) -> Any:
        item = self.find(collection, item_id)
        if item is None:
            raise NotFoundError(f"{label} {item_id} not found")
        return item

    def next_id(self, collection: Collection) -> int:
        current = max(_ids(collection, self.get(collection)), default=0)
        allocated = max(current, self._reserved.get(collection, 0)) + 1
        self._reserved[collection] = allocated
        return allocated


class EntityStore:
    """Canonical in-memory collections with a single-writer, copy-on-write discipline.

    Collections are immutable tuples; a write swaps whole collections under
    the store lock, so readers never see a half-applied change.
    """

    def __init__(self, backend: CollectionBackend):
        self._backend = backend
        self._lock = threading.RLock()
        raw = backend.load()
        self._data: Dict[Collection, Tuple[Any, ...]] = {
            c: decode_collection(c, raw.get(c.value)) for c in Collection
        }

    def get(self, collection: Collection) -> Tuple[Any, ...]:
        return self._data[collection]

    def replace(self, collection: Collection, items: Iterable[Any]) -> None:
        with self.unit_of_work() as uow:
            uow.replace(collection, items)

    @contextmanager
    def unit_of_work(self) -> Iterator[UnitOfWork]:
        """Serialize a read-compute-write sequence.

        Staged replacements are committed when the block exits normally and
        discarded when it raises. After-commit callbacks run outside the lock.
        """
        with self._lock:
            uow = UnitOfWork(self)
            yield uow
            self._commit(uow.staged)
        for callback in uow.pending_callbacks:
            callback()

    def _commit(self, staged: Dict[Collection, Tuple[Any, ...]]) -> None:
        if not staged:
            return
        self._backend.save({c.value: encode_collection(c, items) for c, items in staged.items()})
        self._data.update(staged)
        logger.debug("Committed collections: %s", ", ".join(sorted(c.value for c in staged)))
