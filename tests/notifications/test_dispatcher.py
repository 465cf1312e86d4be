from __future__ import annotations

from datetime import date

import pytest

from src.timesheet_pro.timesheet_pro.approvals.events import (
    AnnouncementBroadcast,
    RecordKind,
    RecordReviewed,
    RecordSubmitted,
    TaskAssigned,
)
from src.timesheet_pro.timesheet_pro.core.enums import Collection, Status, View
from src.timesheet_pro.timesheet_pro.notifications.dispatcher import NotificationDispatcher
from src.timesheet_pro.timesheet_pro.store.entity_store import EntityStore
from src.timesheet_pro.timesheet_pro.store.memory_backend import MemoryBackend


def _dispatch(event, fixed_now, alerts=None, active_user_id=None):
    store = EntityStore(MemoryBackend())
    dispatcher = NotificationDispatcher(clock=lambda: fixed_now, live_alert=(alerts.append if alerts is not None else None))
    with store.unit_of_work() as uow:
        created = dispatcher.dispatch(uow, event, active_user_id=active_user_id)
    return store, created


def test_reviewed_timesheet_message(fixed_now):
    event = RecordReviewed(RecordKind.TIMESHEET, 1, 4, Status.APPROVED, 3, "Charlie Brown", date(2023, 10, 26))
    store, created = _dispatch(event, fixed_now)

    (n,) = created
    assert n.user_id == 4
    assert n.title == "Timesheet Approved"
    assert n.message == "Your timesheet for 2023-10-26 has been approved by Charlie Brown."
    assert n.link_to == View.TIMESHEETS
    assert (n.read, n.dismissed, n.created_at) == (False, False, fixed_now)
    assert store.get(Collection.NOTIFICATIONS) == (n,)


def test_rejected_leave_request_title(fixed_now):
    event = RecordReviewed(RecordKind.LEAVE_REQUEST, 2, 4, Status.REJECTED, 3, "Maria", date(2024, 4, 1))
    _, (n,) = _dispatch(event, fixed_now)
    assert n.title == "Leave Request Rejected"
    assert n.link_to == View.LEAVE


def test_submission_goes_to_manager(fixed_now):
    _, (n,) = _dispatch(RecordSubmitted(RecordKind.TIMESHEET, 1, 4, "Alice", 3), fixed_now)
    assert (n.user_id, n.title, n.link_to) == (3, "New Timesheet Submission", View.TEAM_TIMESHEETS)


def test_task_assignment_notifies_each_assignee(fixed_now):
    _, created = _dispatch(TaskAssigned(task_id=5, task_title="Ship it", assignee_ids=(1, 2)), fixed_now)
    assert [n.user_id for n in created] == [1, 2]
    assert all(n.title == "New Task Assigned" for n in created)


def test_announcement_gets_distinct_ids(fixed_now):
    event = AnnouncementBroadcast(sender_id=1, recipient_ids=(2, 3, 4), title="Hi", message="All hands")
    _, created = _dispatch(event, fixed_now)

    assert len({n.notification_id for n in created}) == 3
    assert all(n.is_announcement for n in created)


def test_live_alert_only_for_active_user(fixed_now):
    alerts = []
    event = AnnouncementBroadcast(sender_id=1, recipient_ids=(2, 3), title="Hi", message="Hello")
    _dispatch(event, fixed_now, alerts=alerts, active_user_id=3)
    assert [n.user_id for n in alerts] == [3]


def test_notify_appends_exactly_one(fixed_now):
    store = EntityStore(MemoryBackend())
    dispatcher = NotificationDispatcher(clock=lambda: fixed_now)
    with store.unit_of_work() as uow:
        dispatcher.notify(uow, 4, "Reminder", "Submit your timesheet", View.TIMESHEETS)
        dispatcher.notify(uow, 4, "Reminder", "Submit your timesheet")

    first, second = store.get(Collection.NOTIFICATIONS)
    assert (first.notification_id, second.notification_id) == (1, 2)
    assert second.link_to is None


class _BrokenBackend(MemoryBackend):
    def save(self, changes):
        raise OSError("disk full")


def test_live_alert_waits_for_commit(fixed_now):
    alerts = []
    store = EntityStore(_BrokenBackend())
    dispatcher = NotificationDispatcher(clock=lambda: fixed_now, live_alert=alerts.append)
    event = AnnouncementBroadcast(sender_id=1, recipient_ids=(2, 3), title="Hi", message="Hello")

    with pytest.raises(OSError):
        with store.unit_of_work() as uow:
            dispatcher.dispatch(uow, event, active_user_id=3)
            assert alerts == []

    assert alerts == []
    assert store.get(Collection.NOTIFICATIONS) == ()
