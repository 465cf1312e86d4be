from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional

from ..approvals.events import AnnouncementBroadcast
from ..approvals.visibility import VisibilityResolver
from ..common.validators import require_non_empty
from ..core.enums import Collection
from ..core.exceptions import AuthorizationError, NotFoundError
from ..store.entity_store import EntityStore, UnitOfWork
from .dispatcher import NotificationDispatcher
from .model import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Use case: a user's inbox, plus company announcements."""

    def __init__(self, store: EntityStore, resolver: VisibilityResolver, dispatcher: NotificationDispatcher):
        self._store = store
        self._resolver = resolver
        self._dispatcher = dispatcher

    def list_for_user(self, *, user_id: int, include_dismissed: bool = False) -> List[Notification]:
        """Newest first."""
        items = [
            n
            for n in self._store.get(Collection.NOTIFICATIONS)
            if n.user_id == int(user_id) and (include_dismissed or not n.dismissed)
        ]
        return sorted(items, key=lambda n: (n.created_at, n.notification_id), reverse=True)

    def unread_count(self, *, user_id: int) -> int:
        return sum(1 for n in self.list_for_user(user_id=user_id) if not n.read)

    @staticmethod
    def _owned(uow: UnitOfWork, user_id: int, notification_id: int) -> Notification:
        notification = uow.require(Collection.NOTIFICATIONS, int(notification_id), "Notification")
        if notification.user_id != int(user_id):
            raise AuthorizationError("You can only manage your own notifications")
        return notification

    def _update(
        self,
        user_id: int,
        change: Callable[[Notification], Notification],
        notification_id: Optional[int] = None,
    ) -> int:
        """Apply `change` to one notification, or to all of the user's when no id is given."""
        with self._store.unit_of_work() as uow:
            if notification_id is not None:
                self._owned(uow, user_id, notification_id)
            items = uow.get(Collection.NOTIFICATIONS)
            updated = []
            changed = 0
            for n in items:
                selected = n.user_id == int(user_id) and (notification_id is None or n.notification_id == int(notification_id))
                new = change(n) if selected else n
                if new != n:
                    changed += 1
                updated.append(new)
            if changed:
                uow.replace(Collection.NOTIFICATIONS, updated)
        return changed

    def mark_read(self, *, user_id: int, notification_id: int) -> int:
        return self._update(user_id, lambda n: replace(n, read=True), notification_id)

    def mark_all_read(self, *, user_id: int) -> int:
        return self._update(user_id, lambda n: replace(n, read=True))

    def dismiss(self, *, user_id: int, notification_id: int) -> int:
        """Hide from the inbox; a dismissed notification also counts as read."""
        return self._update(user_id, lambda n: replace(n, read=True, dismissed=True), notification_id)

    def dismiss_all(self, *, user_id: int) -> int:
        return self._update(user_id, lambda n: replace(n, read=True, dismissed=True))

    def permanently_delete(self, *, user_id: int, notification_id: int) -> None:
        with self._store.unit_of_work() as uow:
            target = self._owned(uow, user_id, notification_id)
            uow.replace(
                Collection.NOTIFICATIONS,
                (n for n in uow.get(Collection.NOTIFICATIONS) if n.notification_id != target.notification_id),
            )

    def send_announcement(self, *, sender_id: int, title: str, message: str) -> List[Notification]:
        """Broadcast to every other member of the sender's company."""
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        with self._store.unit_of_work() as uow:
            sender = uow.require(Collection.USERS, int(sender_id), "User")
            if not self._resolver.capabilities(sender).can_broadcast:
                raise AuthorizationError("You do not have permission to send announcements")
            recipients = tuple(
                u.user_id
                for u in uow.get(Collection.USERS)
                if u.company == sender.company and u.user_id != sender.user_id
            )
            if not recipients:
                raise NotFoundError("No other users in your company to notify")
            created = self._dispatcher.dispatch(
                uow,
                AnnouncementBroadcast(sender_id=sender.user_id, recipient_ids=recipients, title=title, message=message),
                active_user_id=sender.user_id,
            )
        logger.info("Announcement from user %s sent to %d recipient(s)", sender.user_id, len(created))
        return created
