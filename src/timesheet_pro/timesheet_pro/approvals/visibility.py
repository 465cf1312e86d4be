from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Union

from ..core.enums import Role, Status, VisibilityScope
from ..leaves.model import LeaveRequest
from ..timesheets.model import Timesheet
from ..users.model import User

Reviewable = Union[Timesheet, LeaveRequest]


@dataclass(frozen=True)
class RoleCapabilities:
    can_approve: bool
    scope: VisibilityScope
    can_broadcast: bool = False
    can_manage_users: bool = False
    can_delete_users: bool = False
    can_edit_projects: bool = False
    can_manage_tasks: bool = False
    can_set_best_employee: bool = False


# ADMIN sees the whole company but does not approve.
CAPABILITIES: Mapping[Role, RoleCapabilities] = {
    Role.ADMIN: RoleCapabilities(
        can_approve=False,
        scope=VisibilityScope.COMPANY,
        can_broadcast=True,
        can_manage_users=True,
        can_delete_users=True,
        can_edit_projects=True,
    ),
    Role.MANAGER: RoleCapabilities(
        can_approve=True,
        scope=VisibilityScope.COMPANY,
        can_broadcast=True,
        can_manage_users=True,
        can_edit_projects=True,
        can_manage_tasks=True,
        can_set_best_employee=True,
    ),
    Role.TEAM_LEADER: RoleCapabilities(
        can_approve=True,
        scope=VisibilityScope.DIRECT_REPORTS,
        can_broadcast=True,
        can_edit_projects=True,
        can_manage_tasks=True,
        can_set_best_employee=True,
    ),
    Role.EMPLOYEE: RoleCapabilities(can_approve=False, scope=VisibilityScope.SELF),
}


def capabilities_for(role: Role) -> RoleCapabilities:
    return CAPABILITIES[role]


class VisibilityResolver:
    """Decides whose timesheets and leave requests an actor may see and review."""

    def __init__(self, capabilities: Mapping[Role, RoleCapabilities] = CAPABILITIES):
        self._capabilities = capabilities

    def capabilities(self, actor: User) -> RoleCapabilities:
        return self._capabilities[actor.role]

    def can_approve(self, actor: User) -> bool:
        return self.capabilities(actor).can_approve

    def team_members(self, actor: User, users: Iterable[User]) -> List[User]:
        """Direct reports only (one hop), within the actor's company."""
        return [u for u in users if u.manager_id == actor.user_id and u.company == actor.company]

    def visible_owner_ids(self, actor: User, users: Iterable[User]) -> set[int]:
        scope = self.capabilities(actor).scope
        if scope == VisibilityScope.COMPANY:
            return {u.user_id for u in users if u.company == actor.company}
        if scope == VisibilityScope.DIRECT_REPORTS:
            return {u.user_id for u in self.team_members(actor, users)}
        return {actor.user_id}

    def _visible(self, actor: User, records: Iterable[Reviewable], users: Iterable[User]) -> List[Reviewable]:
        owners = self.visible_owner_ids(actor, users)
        return [r for r in records if r.user_id in owners]

    def visible_timesheets(self, actor: User, timesheets: Iterable[Timesheet], users: Iterable[User]) -> List[Timesheet]:
        return self._visible(actor, timesheets, users)

    def visible_leave_requests(
        self, actor: User, leave_requests: Iterable[LeaveRequest], users: Iterable[User]
    ) -> List[LeaveRequest]:
        return self._visible(actor, leave_requests, users)

    def is_visible(self, actor: User, record: Reviewable, users: Iterable[User]) -> bool:
        return record.user_id in self.visible_owner_ids(actor, users)

    def can_review(self, actor: User, record: Reviewable, users: Iterable[User]) -> bool:
        return self.can_approve(actor) and self.is_visible(actor, record, users)

    def pending_counts(
        self,
        actor: User,
        timesheets: Sequence[Timesheet],
        leave_requests: Sequence[LeaveRequest],
        users: Sequence[User],
    ) -> Dict[str, int]:
        """Pending items awaiting the actor's team; always zero for employees."""
        if self.capabilities(actor).scope == VisibilityScope.SELF:
            return {"timesheets": 0, "leave_requests": 0}
        owners = self.visible_owner_ids(actor, users)
        return {
            "timesheets": sum(1 for t in timesheets if t.status == Status.PENDING and t.user_id in owners),
            "leave_requests": sum(1 for r in leave_requests if r.status == Status.PENDING and r.user_id in owners),
        }
