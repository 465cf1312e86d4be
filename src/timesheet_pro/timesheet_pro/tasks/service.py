from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from ..approvals.events import TaskAssigned
from ..approvals.visibility import VisibilityResolver
from ..common.datetime_utils import Clock, coerce_optional_date, now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DUE_SOON_DAYS
from ..core.enums import Collection, TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.dispatcher import NotificationDispatcher
from ..store.entity_store import EntityStore
from .model import Task, TaskDraft

logger = logging.getLogger(__name__)


def deadline_status(task: Task, today: date) -> str:
    """'overdue', 'due-soon' (today or tomorrow) or 'none' (no deadline / done)."""
    if task.deadline is None or task.status == TaskStatus.DONE:
        return "none"
    days_left = (task.deadline - today).days
    if days_left < 0:
        return "overdue"
    if days_left <= DUE_SOON_DAYS:
        return "due-soon"
    return "none"


class TaskService:
    """Use case: project task board. Managers and team leaders manage tasks."""

    def __init__(
        self,
        store: EntityStore,
        resolver: VisibilityResolver,
        dispatcher: NotificationDispatcher,
        clock: Clock = now_local,
    ):
        self._store = store
        self._resolver = resolver
        self._dispatcher = dispatcher
        self._clock = clock

    def save_task(self, *, actor_id: int, draft: TaskDraft, task_id: Optional[int] = None) -> Task:
        """Create (task_id=None) or update a task; newly added assignees are notified."""
        with self._store.unit_of_work() as uow:
            actor = uow.require(Collection.USERS, int(actor_id), "User")
            if not self._resolver.capabilities(actor).can_manage_tasks:
                raise AuthorizationError("Only managers and team leaders can manage tasks")

            project = uow.find(Collection.PROJECTS, int(draft.project_id))
            if project is None or project.company != actor.company:
                raise NotFoundError(f"Project {draft.project_id} not found")

            assigned_to = tuple(dict.fromkeys(int(i) for i in draft.assigned_to))
            for uid in assigned_to:
                user = uow.find(Collection.USERS, uid)
                if user is None or user.company != actor.company:
                    raise NotFoundError(f"User {uid} not found")

            try:
                status = TaskStatus(draft.status)
            except ValueError:
                raise ValidationError(f"Invalid task status: {draft.status!r}")

            completion_date = coerce_optional_date(draft.completion_date, "Completion date")
            if status == TaskStatus.DONE and completion_date is None:
                completion_date = self._clock().date()

            previous: tuple = ()
            tasks = uow.get(Collection.TASKS)
            if task_id is None:
                task_id = uow.next_id(Collection.TASKS)
            else:
                existing = uow.require(Collection.TASKS, int(task_id), "Task")
                owning_project = uow.find(Collection.PROJECTS, existing.project_id)
                if owning_project is None or owning_project.company != actor.company:
                    raise NotFoundError(f"Task {task_id} not found")
                previous = existing.assigned_to

            task = Task(
                task_id=int(task_id),
                project_id=project.project_id,
                title=require_non_empty(draft.title, "Title"),
                description=optional_text(draft.description, "Description"),
                assigned_to=assigned_to,
                status=status,
                deadline=coerce_optional_date(draft.deadline, "Deadline"),
                completion_date=completion_date,
            )
            if any(t.task_id == task.task_id for t in tasks):
                uow.replace(Collection.TASKS, tuple(task if t.task_id == task.task_id else t for t in tasks))
            else:
                uow.replace(Collection.TASKS, tasks + (task,))

            newly_assigned = tuple(uid for uid in assigned_to if uid not in previous)
            if newly_assigned:
                self._dispatcher.dispatch(
                    uow,
                    TaskAssigned(task_id=task.task_id, task_title=task.title, assignee_ids=newly_assigned),
                    active_user_id=actor.user_id,
                )
        logger.info("Task %s saved by user %s", task.task_id, actor.user_id)
        return task

    def move_task(self, *, actor_id: int, task_id: int, status: TaskStatus) -> Task:
        existing = next((t for t in self._store.get(Collection.TASKS) if t.task_id == int(task_id)), None)
        if existing is None:
            raise NotFoundError(f"Task {task_id} not found")
        draft = TaskDraft(
            project_id=existing.project_id,
            title=existing.title,
            description=existing.description,
            assigned_to=existing.assigned_to,
            status=status,
            deadline=existing.deadline,
            completion_date=existing.completion_date,
        )
        return self.save_task(actor_id=actor_id, draft=draft, task_id=existing.task_id)

    def list_project_tasks(self, *, project_id: int) -> List[Task]:
        return [t for t in self._store.get(Collection.TASKS) if t.project_id == int(project_id)]

    def assigned_open_tasks(self, *, user_id: int) -> List[Task]:
        """Tasks that pre-populate the user's timesheet form."""
        return [
            t
            for t in self._store.get(Collection.TASKS)
            if int(user_id) in t.assigned_to and t.status != TaskStatus.DONE
        ]

    def deadline_status(self, task: Task) -> str:
        return deadline_status(task, self._clock().date())

