from __future__ import annotations

from typing import Any, List, Mapping, Union

from ..approvals.workflow import ApprovalWorkflow
from ..common.datetime_utils import coerce_date
from ..common.validators import require_non_empty
from ..core.enums import Collection, HalfDaySession, LeaveType, Status
from ..core.exceptions import ValidationError
from ..store.entity_store import UnitOfWork
from ..users.model import User
from .model import LeaveDraft, LeaveEntry, LeaveRequest


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def parse_leave_entry(item: Any) -> LeaveEntry:
    leave_date = coerce_date(_field(item, "date"), "Leave date")
    try:
        leave_type = LeaveType(_field(item, "leave_type"))
    except ValueError:
        raise ValidationError("Leave type must be 'Full Day' or 'Half Day'")

    raw_session = _field(item, "half_day_session")
    if leave_type == LeaveType.HALF_DAY:
        try:
            session = HalfDaySession(raw_session)
        except ValueError:
            raise ValidationError("Half-day leave needs a session ('First Half' or 'Second Half')")
        return LeaveEntry(date=leave_date, leave_type=leave_type, half_day_session=session)

    if raw_session:
        raise ValidationError("Full-day leave cannot have a half-day session")
    return LeaveEntry(date=leave_date, leave_type=leave_type)


class LeaveService(ApprovalWorkflow):
    """Use cases: submit, edit and review leave requests."""

    collection = Collection.LEAVE_REQUESTS
    label = "Leave request"

    @staticmethod
    def _record_id(record: LeaveRequest) -> int:
        return record.request_id

    def _build(self, uow: UnitOfWork, owner: User, draft: LeaveDraft, record_id: int) -> LeaveRequest:
        if not draft.leave_entries:
            raise ValidationError("Please add at least one leave day")
        entries = tuple(parse_leave_entry(item) for item in draft.leave_entries)
        return LeaveRequest(
            request_id=record_id,
            user_id=owner.user_id,
            leave_entries=entries,
            reason=require_non_empty(draft.reason, "Reason"),
        )

    def submit_leave_request(self, *, owner_id: int, draft: LeaveDraft) -> LeaveRequest:
        return self._submit(owner_id=owner_id, draft=draft)

    def edit_leave_request(self, *, owner_id: int, request_id: int, draft: LeaveDraft) -> LeaveRequest:
        return self._edit(owner_id=owner_id, record_id=request_id, draft=draft)

    def review_leave_request(self, *, approver_id: int, request_id: int, decision: Union[Status, str]) -> LeaveRequest:
        return self._review(approver_id=approver_id, record_id=request_id, decision=decision)

    def list_own(self, *, user_id: int) -> List[LeaveRequest]:
        return sorted(self._list_own(user_id=user_id), key=_sort_key, reverse=True)

    def list_reviewable(self, *, actor_id: int) -> List[LeaveRequest]:
        return sorted(self._list_reviewable(actor_id=actor_id), key=_sort_key, reverse=True)

    def visible_leave_requests(self, *, actor_id: int) -> List[LeaveRequest]:
        return self.list_reviewable(actor_id=actor_id)


def _sort_key(request: LeaveRequest):
    return request.reference_date.toordinal() if request.reference_date else 0
