from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List

from ..core.enums import Status
from ..timesheets.model import Timesheet
from .model import Project


def approved_hours_by_project(timesheets: Iterable[Timesheet]) -> Dict[int, float]:
    """Sum work-entry hours of APPROVED timesheets, keyed by project id."""
    totals: Dict[int, float] = defaultdict(float)
    for ts in timesheets:
        if ts.status != Status.APPROVED:
            continue
        for pw in ts.project_work:
            totals[pw.project_id] += pw.total_hours
    return dict(totals)


def recompute_project_hours(timesheets: Iterable[Timesheet], projects: Iterable[Project]) -> List[Project]:
    """Return only the projects whose actual hours changed, with the new value.

    Idempotent: feeding the result back in with the same timesheets yields [].
    """
    totals = approved_hours_by_project(timesheets)
    updated: List[Project] = []
    for p in projects:
        hours = totals.get(p.project_id, 0.0)
        if hours != p.actual_hours:
            updated.append(replace(p, actual_hours=hours))
    return updated


def apply_project_hours(timesheets: Iterable[Timesheet], projects: Iterable[Project]) -> List[Project]:
    """Full project list with recomputed hours; unchanged projects are kept as-is."""
    projects = list(projects)
    changed = {p.project_id: p for p in recompute_project_hours(timesheets, projects)}
    return [changed.get(p.project_id, p) for p in projects]
