from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from ..approvals.visibility import VisibilityResolver
from ..common.validators import optional_text, require_non_empty, require_non_negative
from ..core.enums import Collection, ProjectStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..store.entity_store import EntityStore, UnitOfWork
from ..users.model import User
from .aggregator import apply_project_hours, recompute_project_hours
from .model import Project, ProjectDraft

logger = logging.getLogger(__name__)


class ProjectService:
    """Use case: manage company projects.

    `actual_hours` is never taken from input; it is recomputed from approved
    timesheets whenever a project is saved.
    """

    def __init__(self, store: EntityStore, resolver: VisibilityResolver):
        self._store = store
        self._resolver = resolver

    def _require_editor(self, uow: UnitOfWork, actor_id: int) -> User:
        actor = uow.require(Collection.USERS, int(actor_id), "User")
        if not self._resolver.capabilities(actor).can_edit_projects:
            raise AuthorizationError("You do not have permission to manage projects")
        return actor

    @staticmethod
    def _company_user(uow: UnitOfWork, company: str, user_id: int, label: str) -> User:
        user = uow.find(Collection.USERS, int(user_id))
        if user is None or user.company != company:
            raise NotFoundError(f"{label} {user_id} not found")
        return user

    def _validated(self, uow: UnitOfWork, actor: User, draft: ProjectDraft, default_manager_id: int) -> dict:
        name = require_non_empty(draft.name, "Project name")
        manager_id = int(draft.manager_id) if draft.manager_id is not None else default_manager_id
        manager = self._company_user(uow, actor.company, manager_id, "Manager")
        if manager.role not in (Role.MANAGER, Role.ADMIN):
            raise ValidationError("Project manager must be a Manager or Admin")

        team_leader_id: Optional[int] = None
        if draft.team_leader_id is not None:
            leader = self._company_user(uow, actor.company, int(draft.team_leader_id), "Team leader")
            if leader.role != Role.TEAM_LEADER:
                raise ValidationError("Team leader must have the Team Leader role")
            team_leader_id = leader.user_id

        team_ids = tuple(dict.fromkeys(int(i) for i in draft.team_ids))
        for uid in team_ids:
            self._company_user(uow, actor.company, uid, "Team member")

        try:
            status = ProjectStatus(draft.status)
        except ValueError:
            raise ValidationError(f"Invalid project status: {draft.status!r}")

        return dict(
            name=name,
            description=optional_text(draft.description, "Description"),
            manager_id=manager.user_id,
            team_leader_id=team_leader_id,
            team_ids=team_ids,
            customer_name=optional_text(draft.customer_name, "Customer name"),
            job_name=optional_text(draft.job_name, "Job name"),
            estimated_hours=require_non_negative(draft.estimated_hours, "Estimated hours"),
            status=status,
        )

    def _save(self, uow: UnitOfWork, projects: List[Project]) -> None:
        uow.replace(Collection.PROJECTS, apply_project_hours(uow.get(Collection.TIMESHEETS), projects))

    def create_project(self, *, actor_id: int, draft: ProjectDraft) -> Project:
        with self._store.unit_of_work() as uow:
            actor = self._require_editor(uow, actor_id)
            project = Project(
                project_id=uow.next_id(Collection.PROJECTS),
                company=actor.company,
                **self._validated(uow, actor, draft, actor.user_id),
            )
            self._save(uow, list(uow.get(Collection.PROJECTS)) + [project])
            saved = uow.find(Collection.PROJECTS, project.project_id)
        logger.info("Project %s created by user %s", saved.project_id, actor.user_id)
        return saved

    def update_project(self, *, actor_id: int, project_id: int, draft: ProjectDraft) -> Project:
        with self._store.unit_of_work() as uow:
            actor = self._require_editor(uow, actor_id)
            existing = uow.find(Collection.PROJECTS, int(project_id))
            if existing is None or existing.company != actor.company:
                raise NotFoundError(f"Project {project_id} not found")
            updated = replace(existing, **self._validated(uow, actor, draft, existing.manager_id))
            self._save(uow, [updated if p.project_id == existing.project_id else p for p in uow.get(Collection.PROJECTS)])
            saved = uow.find(Collection.PROJECTS, existing.project_id)
        logger.info("Project %s updated by user %s", project_id, actor.user_id)
        return saved

    def list_company_projects(self, *, company: str) -> List[Project]:
        return [p for p in self._store.get(Collection.PROJECTS) if p.company == company]

    def list_my_projects(self, *, user: User) -> List[Project]:
        return [p for p in self.list_company_projects(company=user.company) if p.involves(user.user_id)]

    def recompute_all(self) -> List[Project]:
        """Re-derive every project's hours; returns the projects that changed."""
        with self._store.unit_of_work() as uow:
            changed = recompute_project_hours(uow.get(Collection.TIMESHEETS), uow.get(Collection.PROJECTS))
            if changed:
                self._save(uow, list(uow.get(Collection.PROJECTS)))
        if changed:
            logger.info("Recomputed hours for %d project(s)", len(changed))
        return changed
