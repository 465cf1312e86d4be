from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Tuple, Union

from ..core.enums import Status
from ..core.exceptions import AuthorizationError, InvalidStateError, ValidationError
from ..leaves.model import LeaveRequest
from ..timesheets.model import Timesheet
from ..users.model import User
from .events import DomainEvent, RecordKind, RecordReviewed, RecordSubmitted
from .visibility import VisibilityResolver

Reviewable = Union[Timesheet, LeaveRequest]

TERMINAL_STATUSES = frozenset({Status.APPROVED, Status.REJECTED})


@dataclass(frozen=True)
class Transition:
    record: Reviewable
    events: Tuple[DomainEvent, ...] = ()


def record_kind(record: Reviewable) -> RecordKind:
    return RecordKind.TIMESHEET if isinstance(record, Timesheet) else RecordKind.LEAVE_REQUEST


def _record_id(record: Reviewable) -> int:
    return record.timesheet_id if isinstance(record, Timesheet) else record.request_id


class ApprovalStateMachine:
    """PENDING -> APPROVED | REJECTED for timesheets and leave requests.

    Pure: takes records and users, returns the new record plus the events to
    dispatch. Nothing here reads or writes the entity store.
    """

    def __init__(self, resolver: VisibilityResolver):
        self._resolver = resolver

    def submit(self, record: Reviewable, owner: User) -> Transition:
        submitted = replace(record, status=Status.PENDING, approver_id=None)
        events: Tuple[DomainEvent, ...] = ()
        if owner.manager_id is not None:
            events = (
                RecordSubmitted(
                    kind=record_kind(record),
                    record_id=_record_id(record),
                    owner_id=owner.user_id,
                    owner_name=owner.name,
                    manager_id=owner.manager_id,
                ),
            )
        return Transition(record=submitted, events=events)

    def check_editable(self, existing: Reviewable, owner: User) -> None:
        """Only the owner may edit, and only while the record is pending."""
        if existing.user_id != owner.user_id:
            raise AuthorizationError(f"Only the owner can edit this {record_kind(existing).value.lower()}")
        if existing.status != Status.PENDING:
            raise InvalidStateError(f"{record_kind(existing).value} is already {existing.status.value.lower()}")

    def edit(self, existing: Reviewable, replacement: Reviewable, owner: User) -> Transition:
        """Owner replaces a pending record wholesale; identity and review fields are kept."""
        self.check_editable(existing, owner)
        edited = replace(
            replacement,
            user_id=existing.user_id,
            status=existing.status,
            approver_id=existing.approver_id,
        )
        if isinstance(existing, Timesheet):
            edited = replace(edited, timesheet_id=existing.timesheet_id)
        else:
            edited = replace(edited, request_id=existing.request_id)
        return Transition(record=edited)

    def transition(
        self,
        record: Reviewable,
        new_status: Status,
        approver: User,
        users: Sequence[User],
    ) -> Transition:
        kind = record_kind(record)
        if new_status not in TERMINAL_STATUSES:
            raise ValidationError(f"Invalid decision: {getattr(new_status, 'value', new_status)}")
        if not self._resolver.can_review(approver, record, users):
            raise AuthorizationError(f"You are not allowed to review this {kind.value.lower()}")
        if record.status != Status.PENDING:
            raise InvalidStateError(f"{kind.value} is already {record.status.value.lower()}")

        reviewed = replace(record, status=new_status, approver_id=approver.user_id)
        event = RecordReviewed(
            kind=kind,
            record_id=_record_id(record),
            owner_id=record.user_id,
            status=new_status,
            approver_id=approver.user_id,
            approver_name=approver.name,
            reference_date=record.reference_date,
        )
        return Transition(record=reviewed, events=(event,))
