from __future__ import annotations

from typing import Any, List, Mapping, Union

from ..approvals.workflow import ApprovalWorkflow
from ..common.datetime_utils import coerce_date
from ..common.validators import require_clock_time, require_non_empty, require_positive_hours
from ..core.enums import Collection, Status
from ..core.exceptions import NotFoundError, ValidationError
from ..projects.aggregator import apply_project_hours
from ..store.entity_store import UnitOfWork
from ..users.model import User
from .model import ProjectWork, Timesheet, TimesheetDraft, WorkEntry


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


class TimesheetService(ApprovalWorkflow):
    """Use cases: submit, edit and review daily timesheets."""

    collection = Collection.TIMESHEETS
    label = "Timesheet"

    @staticmethod
    def _record_id(record: Timesheet) -> int:
        return record.timesheet_id

    def _after_change(self, uow: UnitOfWork) -> None:
        projects = uow.get(Collection.PROJECTS)
        updated = apply_project_hours(uow.get(Collection.TIMESHEETS), projects)
        if any(new is not old for new, old in zip(updated, projects)):
            uow.replace(Collection.PROJECTS, updated)

    def _parse_project_work(self, uow: UnitOfWork, owner: User, items: Any) -> tuple:
        if not items:
            raise ValidationError("Please enter hours for at least one task")

        company_projects = {p.project_id for p in uow.get(Collection.PROJECTS) if p.company == owner.company}
        parsed: List[ProjectWork] = []
        for item in items:
            try:
                project_id = int(_field(item, "project_id"))
            except (TypeError, ValueError):
                raise ValidationError("Project is required for every work item")
            if project_id not in company_projects:
                raise NotFoundError(f"Project {project_id} not found")

            entries = _field(item, "work_entries") or ()
            if not entries:
                raise ValidationError(f"Project {project_id} has no work entries")
            parsed.append(
                ProjectWork(
                    project_id=project_id,
                    work_entries=tuple(
                        WorkEntry(
                            description=require_non_empty(_field(e, "description", ""), "Task description"),
                            hours=require_positive_hours(_field(e, "hours")),
                        )
                        for e in entries
                    ),
                )
            )
        return tuple(parsed)

    def _build(self, uow: UnitOfWork, owner: User, draft: TimesheetDraft, record_id: int) -> Timesheet:
        return Timesheet(
            timesheet_id=record_id,
            user_id=owner.user_id,
            date=coerce_date(draft.date, "Date"),
            in_time=require_clock_time(draft.in_time, "In time"),
            out_time=require_clock_time(draft.out_time, "Out time"),
            project_work=self._parse_project_work(uow, owner, draft.project_work),
        )

    def submit_timesheet(self, *, owner_id: int, draft: TimesheetDraft) -> Timesheet:
        return self._submit(owner_id=owner_id, draft=draft)

    def edit_timesheet(self, *, owner_id: int, timesheet_id: int, draft: TimesheetDraft) -> Timesheet:
        return self._edit(owner_id=owner_id, record_id=timesheet_id, draft=draft)

    def review_timesheet(self, *, approver_id: int, timesheet_id: int, decision: Union[Status, str]) -> Timesheet:
        return self._review(approver_id=approver_id, record_id=timesheet_id, decision=decision)

    def list_own(self, *, user_id: int) -> List[Timesheet]:
        return sorted(self._list_own(user_id=user_id), key=lambda t: t.date, reverse=True)

    def list_reviewable(self, *, actor_id: int) -> List[Timesheet]:
        return sorted(self._list_reviewable(actor_id=actor_id), key=lambda t: t.date, reverse=True)

    def visible_timesheets(self, *, actor_id: int) -> List[Timesheet]:
        return self.list_reviewable(actor_id=actor_id)
