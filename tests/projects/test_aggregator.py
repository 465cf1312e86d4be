from __future__ import annotations

from datetime import date

from src.timesheet_pro.timesheet_pro.core.enums import Status
from src.timesheet_pro.timesheet_pro.projects.aggregator import (
    apply_project_hours,
    approved_hours_by_project,
    recompute_project_hours,
)
from src.timesheet_pro.timesheet_pro.projects.model import Project
from src.timesheet_pro.timesheet_pro.timesheets.model import ProjectWork, Timesheet, WorkEntry


def _ts(timesheet_id: int, status: Status, *work) -> Timesheet:
    return Timesheet(
        timesheet_id=timesheet_id,
        user_id=1,
        date=date(2024, 3, 1),
        in_time="09:00",
        out_time="17:00",
        project_work=tuple(ProjectWork(pid, tuple(WorkEntry("w", h) for h in hours)) for pid, hours in work),
        status=status,
    )


def _project(project_id: int, actual: float = 0.0) -> Project:
    return Project(project_id=project_id, name=f"P{project_id}", manager_id=1, company="Acme", actual_hours=actual)


def test_only_approved_hours_count():
    timesheets = [
        _ts(1, Status.APPROVED, (1, [8])),
        _ts(2, Status.PENDING, (1, [4])),
        _ts(3, Status.REJECTED, (1, [2])),
    ]
    assert approved_hours_by_project(timesheets) == {1: 8.0}


def test_every_matching_project_block_is_summed():
    timesheets = [_ts(1, Status.APPROVED, (1, [5, 3]), (2, [1]), (1, [0.5]))]
    assert approved_hours_by_project(timesheets) == {1: 8.5, 2: 1.0}


def test_recompute_returns_only_changed_projects():
    timesheets = [_ts(1, Status.APPROVED, (1, [8]))]
    projects = [_project(1), _project(2)]

    changed = recompute_project_hours(timesheets, projects)

    assert [(p.project_id, p.actual_hours) for p in changed] == [(1, 8.0)]


def test_recompute_is_idempotent():
    timesheets = [_ts(1, Status.APPROVED, (1, [8]))]
    projects = apply_project_hours(timesheets, [_project(1), _project(2)])
    assert recompute_project_hours(timesheets, projects) == []


def test_stale_hours_are_reset_when_nothing_is_approved():
    changed = recompute_project_hours([], [_project(1, actual=40)])
    assert changed[0].actual_hours == 0.0


def test_apply_keeps_unchanged_projects_as_is():
    unchanged = _project(2)
    result = apply_project_hours([_ts(1, Status.APPROVED, (1, [3]))], [_project(1), unchanged])
    assert result[1] is unchanged
    assert result[0].actual_hours == 3.0
