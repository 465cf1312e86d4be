from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.enums import Status


@dataclass(frozen=True)
class WorkEntry:
    description: str
    hours: float


@dataclass(frozen=True)
class ProjectWork:
    project_id: int
    work_entries: Tuple[WorkEntry, ...]

    @property
    def total_hours(self) -> float:
        return sum(e.hours for e in self.work_entries)


@dataclass(frozen=True)
class Timesheet:
    """One day's work for one user, split per project."""

    timesheet_id: int
    user_id: int
    date: date
    in_time: str
    out_time: str
    project_work: Tuple[ProjectWork, ...]
    status: Status = Status.PENDING
    approver_id: Optional[int] = None

    @property
    def total_hours(self) -> float:
        return sum(pw.total_hours for pw in self.project_work)

    @property
    def reference_date(self) -> date:
        return self.date


@dataclass(frozen=True)
class TimesheetDraft:
    """Candidate timesheet from the client, validated before it is stored.

    `project_work` is a sequence of mappings
    `{"project_id": int, "work_entries": [{"description": str, "hours": float}]}`.
    """

    date: object
    project_work: tuple
    in_time: str = "09:00"
    out_time: str = "17:00"
