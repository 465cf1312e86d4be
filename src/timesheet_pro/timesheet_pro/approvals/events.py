"""Domain events emitted by the approval flow and other use cases.

They carry just enough to build notification text; turning them into
Notification records is the dispatcher's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple, Union

from ..core.enums import Status


class RecordKind(str, Enum):
    TIMESHEET = "Timesheet"
    LEAVE_REQUEST = "Leave Request"


@dataclass(frozen=True)
class RecordSubmitted:
    kind: RecordKind
    record_id: int
    owner_id: int
    owner_name: str
    manager_id: int


@dataclass(frozen=True)
class RecordReviewed:
    kind: RecordKind
    record_id: int
    owner_id: int
    status: Status
    approver_id: int
    approver_name: str
    reference_date: Optional[date]


@dataclass(frozen=True)
class TaskAssigned:
    task_id: int
    task_title: str
    assignee_ids: Tuple[int, ...]


@dataclass(frozen=True)
class AnnouncementBroadcast:
    sender_id: int
    recipient_ids: Tuple[int, ...]
    title: str
    message: str


DomainEvent = Union[RecordSubmitted, RecordReviewed, TaskAssigned, AnnouncementBroadcast]
