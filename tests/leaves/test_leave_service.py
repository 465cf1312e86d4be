from __future__ import annotations

import pytest

from src.timesheet_pro.timesheet_pro.core.enums import Collection, HalfDaySession, LeaveType, Status
from src.timesheet_pro.timesheet_pro.core.exceptions import AuthorizationError, InvalidStateError, ValidationError
from src.timesheet_pro.timesheet_pro.leaves.model import LeaveDraft
from src.timesheet_pro.timesheet_pro.leaves.service import parse_leave_entry


def _full_days(*days: str) -> LeaveDraft:
    return LeaveDraft(
        leave_entries=tuple({"date": d, "leave_type": "Full Day"} for d in days),
        reason="Family trip",
    )


def test_empty_leave_request_is_rejected_and_store_unchanged(container, backend, world):
    saves = backend.save_calls
    with pytest.raises(ValidationError):
        container.leave_service.submit_leave_request(owner_id=world.alice, draft=LeaveDraft(leave_entries=(), reason="x"))
    assert backend.save_calls == saves
    assert container.store.get(Collection.LEAVE_REQUESTS) == ()


def test_submit_notifies_team_leader(container, world):
    lr = container.leave_service.submit_leave_request(owner_id=world.alice, draft=_full_days("2024-04-01", "2024-04-02"))

    assert lr.status == Status.PENDING
    assert lr.total_days == 2
    (n,) = container.notification_service.list_for_user(user_id=world.leader)
    assert n.title == "New Leave Request"


def test_team_leader_approves_direct_report(container, world):
    service = container.leave_service
    lr = service.submit_leave_request(owner_id=world.alice, draft=_full_days("2024-04-01"))

    approved = service.review_leave_request(approver_id=world.leader, request_id=lr.request_id, decision="Approved")

    assert approved.status == Status.APPROVED
    (n,) = container.notification_service.list_for_user(user_id=world.alice)
    assert n.title == "Leave Request Approved"
    assert n.message == "Your leave request for 2024-04-01 has been approved by Leo."


def test_edit_after_rejection_is_invalid(container, world):
    service = container.leave_service
    lr = service.submit_leave_request(owner_id=world.bob, draft=_full_days("2024-04-01"))
    service.review_leave_request(approver_id=world.manager, request_id=lr.request_id, decision="Rejected")

    with pytest.raises(InvalidStateError):
        service.edit_leave_request(owner_id=world.bob, request_id=lr.request_id, draft=_full_days("2024-04-03"))


def test_leader_cannot_review_outside_team(container, world):
    service = container.leave_service
    lr = service.submit_leave_request(owner_id=world.bob, draft=_full_days("2024-04-01"))
    with pytest.raises(AuthorizationError):
        service.review_leave_request(approver_id=world.leader, request_id=lr.request_id, decision="Approved")


def test_half_day_needs_a_session():
    entry = parse_leave_entry({"date": "2024-04-01", "leave_type": "Half Day", "half_day_session": "Second Half"})
    assert entry.half_day_session == HalfDaySession.SECOND_HALF
    assert entry.days == 0.5

    with pytest.raises(ValidationError):
        parse_leave_entry({"date": "2024-04-01", "leave_type": "Half Day"})


def test_full_day_rejects_a_session():
    with pytest.raises(ValidationError):
        parse_leave_entry({"date": "2024-04-01", "leave_type": LeaveType.FULL_DAY, "half_day_session": "First Half"})


def test_unknown_leave_type():
    with pytest.raises(ValidationError):
        parse_leave_entry({"date": "2024-04-01", "leave_type": "Sabbatical"})
