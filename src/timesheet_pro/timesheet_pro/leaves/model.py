from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.constants import FULL_DAY_WEIGHT, HALF_DAY_WEIGHT
from ..core.enums import HalfDaySession, LeaveType, Status


@dataclass(frozen=True)
class LeaveEntry:
    date: date
    leave_type: LeaveType
    half_day_session: Optional[HalfDaySession] = None

    @property
    def days(self) -> float:
        return FULL_DAY_WEIGHT if self.leave_type == LeaveType.FULL_DAY else HALF_DAY_WEIGHT


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    leave_entries: Tuple[LeaveEntry, ...]
    reason: str
    status: Status = Status.PENDING
    approver_id: Optional[int] = None

    @property
    def reference_date(self) -> Optional[date]:
        return self.leave_entries[0].date if self.leave_entries else None

    @property
    def total_days(self) -> float:
        return sum(e.days for e in self.leave_entries)


@dataclass(frozen=True)
class LeaveDraft:
    """`leave_entries` holds mappings `{"date", "leave_type", "half_day_session"}`."""

    leave_entries: tuple
    reason: str
