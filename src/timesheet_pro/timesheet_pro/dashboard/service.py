from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from ..approvals.visibility import VisibilityResolver
from ..core.constants import PROJECT_OVERVIEW_LIMIT, RECENT_ACTIVITY_LIMIT
from ..core.enums import Collection, Status, VisibilityScope
from ..core.exceptions import NotFoundError
from ..projects.model import Project
from ..store.entity_store import EntityStore
from ..users.model import User


@dataclass(frozen=True)
class ActivityItem:
    kind: str
    record_id: int
    user_id: int
    date: Optional[date]
    status: Status


@dataclass(frozen=True)
class ProjectProgress:
    project_id: int
    name: str
    progress: int


@dataclass(frozen=True)
class DashboardSummary:
    my_pending_timesheets: int
    my_approved_leave_days: float
    my_projects: int
    team_members: int
    pending_approvals: int
    recent_activity: Tuple[ActivityItem, ...] = ()
    team_pending_activity: Tuple[ActivityItem, ...] = ()
    project_overview: Tuple[ProjectProgress, ...] = ()
    best_employee_ids: Tuple[int, ...] = ()


def project_progress(project: Project) -> int:
    """Percent of estimate consumed, capped at 100; 0 when there is no estimate."""
    if project.estimated_hours <= 0:
        return 0
    return min(round(project.actual_hours / project.estimated_hours * 100), 100)


def _newest_first(items: List[ActivityItem]) -> Tuple[ActivityItem, ...]:
    ordered = sorted(items, key=lambda a: a.date or date.min, reverse=True)
    return tuple(ordered[:RECENT_ACTIVITY_LIMIT])


class DashboardService:
    """Read-only use case: the landing page numbers for one user."""

    def __init__(self, store: EntityStore, resolver: VisibilityResolver):
        self._store = store
        self._resolver = resolver

    def _activity(self, owners, pending_only: bool) -> List[ActivityItem]:
        items = [
            ActivityItem("Timesheet", t.timesheet_id, t.user_id, t.date, t.status)
            for t in self._store.get(Collection.TIMESHEETS)
            if t.user_id in owners and (not pending_only or t.status == Status.PENDING)
        ]
        items += [
            ActivityItem("Leave", r.request_id, r.user_id, r.reference_date, r.status)
            for r in self._store.get(Collection.LEAVE_REQUESTS)
            if r.user_id in owners and (not pending_only or r.status == Status.PENDING)
        ]
        return items

    def _team_size(self, actor: User, users) -> int:
        scope = self._resolver.capabilities(actor).scope
        if scope == VisibilityScope.COMPANY:
            return sum(1 for u in users if u.company == actor.company)
        if scope == VisibilityScope.DIRECT_REPORTS:
            return len(self._resolver.team_members(actor, users))
        return 0

    def summary(self, *, actor_id: int) -> DashboardSummary:
        users = self._store.get(Collection.USERS)
        actor = next((u for u in users if u.user_id == int(actor_id)), None)
        if actor is None:
            raise NotFoundError(f"User {actor_id} not found")

        timesheets = self._store.get(Collection.TIMESHEETS)
        leave_requests = self._store.get(Collection.LEAVE_REQUESTS)
        projects = [p for p in self._store.get(Collection.PROJECTS) if p.company == actor.company]
        counts = self._resolver.pending_counts(actor, timesheets, leave_requests, users)

        team_pending: Tuple[ActivityItem, ...] = ()
        if self._resolver.capabilities(actor).scope != VisibilityScope.SELF:
            owners = self._resolver.visible_owner_ids(actor, users)
            team_pending = _newest_first(self._activity(owners, pending_only=True))

        company_ids = {u.user_id for u in users if u.company == actor.company}
        return DashboardSummary(
            my_pending_timesheets=sum(
                1 for t in timesheets if t.user_id == actor.user_id and t.status == Status.PENDING
            ),
            my_approved_leave_days=sum(
                r.total_days for r in leave_requests if r.user_id == actor.user_id and r.status == Status.APPROVED
            ),
            my_projects=sum(1 for p in projects if p.involves(actor.user_id)),
            team_members=self._team_size(actor, users),
            pending_approvals=counts["timesheets"] + counts["leave_requests"],
            recent_activity=_newest_first(self._activity({actor.user_id}, pending_only=False)),
            team_pending_activity=team_pending,
            project_overview=tuple(
                ProjectProgress(p.project_id, p.name, project_progress(p)) for p in projects[:PROJECT_OVERVIEW_LIMIT]
            ),
            best_employee_ids=tuple(i for i in self._store.get(Collection.BEST_EMPLOYEE_IDS) if i in company_ids),
        )
