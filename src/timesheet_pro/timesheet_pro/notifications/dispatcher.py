from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..approvals.events import (
    AnnouncementBroadcast,
    RecordKind,
    RecordReviewed,
    RecordSubmitted,
    TaskAssigned,
)
from ..common.datetime_utils import Clock, now_local
from ..core.enums import Collection, View
from ..store.entity_store import UnitOfWork
from .model import Notification

logger = logging.getLogger(__name__)

LiveAlertSink = Callable[[Notification], None]

_SUBMITTED = {
    RecordKind.TIMESHEET: ("New Timesheet Submission", "{name} has submitted a timesheet for review.", View.TEAM_TIMESHEETS),
    RecordKind.LEAVE_REQUEST: ("New Leave Request", "{name} has submitted a leave request for approval.", View.TEAM_LEAVE),
}

_REVIEWED = {
    RecordKind.TIMESHEET: ("Your timesheet for {date} has been {status} by {approver}.", View.TIMESHEETS),
    RecordKind.LEAVE_REQUEST: ("Your leave request for {date} has been {status} by {approver}.", View.LEAVE),
}


def _log_live_alert(notification: Notification) -> None:
    logger.info("Live alert for user %s: %s", notification.user_id, notification.title)


class NotificationDispatcher:
    """Turns domain events into per-recipient Notification records.

    Has no authentication context: callers decide who may trigger what.
    """

    def __init__(self, clock: Clock = now_local, live_alert: Optional[LiveAlertSink] = None):
        self._clock = clock
        self._live_alert = live_alert or _log_live_alert

    def notify(
        self,
        uow: UnitOfWork,
        recipient_id: int,
        title: str,
        message: str,
        link_to: Optional[View] = None,
        *,
        active_user_id: Optional[int] = None,
    ) -> Notification:
        return self._append(uow, [(recipient_id, title, message, link_to, False)], active_user_id)[0]

    def dispatch(self, uow: UnitOfWork, event, *, active_user_id: Optional[int] = None) -> List[Notification]:
        specs = self._specs(event)
        if not specs:
            return []
        return self._append(uow, specs, active_user_id)

    @staticmethod
    def _specs(event) -> list:
        """(recipient, title, message, link_to, is_announcement) per notification."""
        if isinstance(event, RecordSubmitted):
            title, template, link = _SUBMITTED[event.kind]
            return [(event.manager_id, title, template.format(name=event.owner_name), link, False)]

        if isinstance(event, RecordReviewed):
            template, link = _REVIEWED[event.kind]
            message = template.format(
                date=event.reference_date.isoformat() if event.reference_date else "",
                status=event.status.value.lower(),
                approver=event.approver_name,
            )
            return [(event.owner_id, f"{event.kind.value} {event.status.value}", message, link, False)]

        if isinstance(event, TaskAssigned):
            message = f'You have been assigned a new task: "{event.task_title}"'
            return [(uid, "New Task Assigned", message, View.TASKS, False) for uid in event.assignee_ids]

        if isinstance(event, AnnouncementBroadcast):
            return [(uid, event.title, event.message, View.DASHBOARD, True) for uid in event.recipient_ids]

        raise TypeError(f"Unsupported event: {type(event).__name__}")

    def _append(self, uow: UnitOfWork, specs: list, active_user_id: Optional[int]) -> List[Notification]:
        created_at = self._clock()
        created: List[Notification] = []
        for recipient_id, title, message, link_to, is_announcement in specs:
            created.append(
                Notification(
                    notification_id=uow.next_id(Collection.NOTIFICATIONS),
                    user_id=int(recipient_id),
                    title=title,
                    message=message,
                    created_at=created_at,
                    link_to=link_to,
                    is_announcement=is_announcement,
                )
            )
        uow.replace(Collection.NOTIFICATIONS, uow.get(Collection.NOTIFICATIONS) + tuple(created))

        if active_user_id is not None:
            for n in created:
                if n.user_id == active_user_id:
                    uow.after_commit(lambda n=n: self._live_alert(n))
        return created
