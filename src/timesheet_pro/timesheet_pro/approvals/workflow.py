from __future__ import annotations

import logging
from typing import Any, List, Union

from ..core.enums import Collection, Status
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.dispatcher import NotificationDispatcher
from ..store.entity_store import EntityStore, UnitOfWork
from ..users.model import User
from .state_machine import ApprovalStateMachine, Reviewable, Transition
from .visibility import VisibilityResolver

logger = logging.getLogger(__name__)


def parse_decision(decision: Union[Status, str]) -> Status:
    """Accept a Status or its value/name ("Approved", "APPROVED")."""
    if isinstance(decision, Status):
        return decision
    raw = str(decision or "").strip()
    for status in Status:
        if raw in (status.value, status.name) or raw.lower() == status.value.lower():
            return status
    raise ValidationError(f"Invalid decision: {decision!r}")


class ApprovalWorkflow:
    """Submit / edit / review flow shared by timesheets and leave requests.

    Every operation runs in one unit of work: the record, any derived
    collections and the resulting notifications are committed together, or
    nothing is written.
    """

    collection: Collection
    label: str

    def __init__(
        self,
        store: EntityStore,
        resolver: VisibilityResolver,
        state_machine: ApprovalStateMachine,
        dispatcher: NotificationDispatcher,
    ):
        self._store = store
        self._resolver = resolver
        self._state_machine = state_machine
        self._dispatcher = dispatcher

    # Hooks
    def _build(self, uow: UnitOfWork, owner: User, draft: Any, record_id: int) -> Reviewable:
        raise NotImplementedError

    def _after_change(self, uow: UnitOfWork) -> None:
        """Recompute derived data after the collection changed."""

    @staticmethod
    def _record_id(record: Reviewable) -> int:
        raise NotImplementedError

    # Helpers
    def _put(self, uow: UnitOfWork, record: Reviewable) -> None:
        rid = self._record_id(record)
        items = uow.get(self.collection)
        if any(self._record_id(r) == rid for r in items):
            uow.replace(self.collection, tuple(record if self._record_id(r) == rid else r for r in items))
        else:
            uow.replace(self.collection, items + (record,))

    def _apply(self, uow: UnitOfWork, transition: Transition, active_user_id: int) -> Reviewable:
        self._put(uow, transition.record)
        self._after_change(uow)
        for event in transition.events:
            self._dispatcher.dispatch(uow, event, active_user_id=active_user_id)
        return transition.record

    # Use cases
    def _submit(self, *, owner_id: int, draft: Any) -> Reviewable:
        with self._store.unit_of_work() as uow:
            owner = uow.require(Collection.USERS, int(owner_id), "User")
            record = self._build(uow, owner, draft, uow.next_id(self.collection))
            saved = self._apply(uow, self._state_machine.submit(record, owner), owner.user_id)
        logger.info("%s %s submitted by user %s", self.label, self._record_id(saved), owner.user_id)
        return saved

    def _edit(self, *, owner_id: int, record_id: int, draft: Any) -> Reviewable:
        with self._store.unit_of_work() as uow:
            owner = uow.require(Collection.USERS, int(owner_id), "User")
            existing = uow.require(self.collection, int(record_id), self.label)
            self._state_machine.check_editable(existing, owner)
            replacement = self._build(uow, owner, draft, self._record_id(existing))
            saved = self._apply(uow, self._state_machine.edit(existing, replacement, owner), owner.user_id)
        logger.info("%s %s edited by user %s", self.label, record_id, owner.user_id)
        return saved

    def _review(self, *, approver_id: int, record_id: int, decision: Union[Status, str]) -> Reviewable:
        new_status = parse_decision(decision)
        with self._store.unit_of_work() as uow:
            approver = uow.require(Collection.USERS, int(approver_id), "User")
            record = uow.require(self.collection, int(record_id), self.label)
            users = uow.get(Collection.USERS)
            transition = self._state_machine.transition(record, new_status, approver, users)
            saved = self._apply(uow, transition, approver.user_id)
        logger.info("%s %s %s by user %s", self.label, record_id, new_status.value.lower(), approver.user_id)
        return saved

    def _list_own(self, *, user_id: int) -> List[Reviewable]:
        return [r for r in self._store.get(self.collection) if r.user_id == int(user_id)]

    def _list_reviewable(self, *, actor_id: int) -> List[Reviewable]:
        users = self._store.get(Collection.USERS)
        actor = next((u for u in users if u.user_id == int(actor_id)), None)
        if actor is None:
            raise NotFoundError(f"User {actor_id} not found")
        owners = self._resolver.visible_owner_ids(actor, users)
        return [r for r in self._store.get(self.collection) if r.user_id in owners]
