from __future__ import annotations

from datetime import date

import pytest

from src.timesheet_pro.timesheet_pro.core.enums import TaskStatus
from src.timesheet_pro.timesheet_pro.core.exceptions import AuthorizationError, NotFoundError
from src.timesheet_pro.timesheet_pro.tasks.model import Task, TaskDraft
from src.timesheet_pro.timesheet_pro.tasks.service import deadline_status


def test_new_assignees_are_notified_once(container, world):
    service = container.task_service
    task = service.save_task(
        actor_id=world.leader,
        draft=TaskDraft(project_id=world.phoenix, title="Write tests", assigned_to=(world.alice,)),
    )
    service.save_task(
        actor_id=world.leader,
        draft=TaskDraft(project_id=world.phoenix, title="Write tests", assigned_to=(world.alice, world.bob)),
        task_id=task.task_id,
    )

    alice = container.notification_service.list_for_user(user_id=world.alice)
    bob = container.notification_service.list_for_user(user_id=world.bob)
    assert [n.title for n in alice] == ["New Task Assigned"]
    assert [n.title for n in bob] == ["New Task Assigned"]


def test_admin_cannot_manage_tasks(container, world):
    with pytest.raises(AuthorizationError):
        container.task_service.save_task(actor_id=world.admin, draft=TaskDraft(project_id=world.phoenix, title="x"))


def test_other_company_project(container, world):
    with pytest.raises(NotFoundError):
        container.task_service.save_task(actor_id=world.manager, draft=TaskDraft(project_id=world.globex_project, title="x"))


def test_done_stamps_completion_date(container, world, fixed_now):
    service = container.task_service
    task = service.save_task(actor_id=world.manager, draft=TaskDraft(project_id=world.titan, title="Deploy"))

    done = service.move_task(actor_id=world.manager, task_id=task.task_id, status=TaskStatus.DONE)

    assert done.status == TaskStatus.DONE
    assert done.completion_date == fixed_now.date()


def test_assigned_open_tasks(container, world):
    service = container.task_service
    service.save_task(actor_id=world.manager, draft=TaskDraft(project_id=world.titan, title="Open", assigned_to=(world.bob,)))
    service.save_task(
        actor_id=world.manager,
        draft=TaskDraft(project_id=world.titan, title="Closed", assigned_to=(world.bob,), status=TaskStatus.DONE),
    )

    assert [t.title for t in service.assigned_open_tasks(user_id=world.bob)] == ["Open"]
    assert len(service.list_project_tasks(project_id=world.titan)) == 2


@pytest.mark.parametrize(
    "deadline, status, expected",
    [
        (None, TaskStatus.TODO, "none"),
        (date(2024, 3, 14), TaskStatus.IN_PROGRESS, "overdue"),
        (date(2024, 3, 15), TaskStatus.TODO, "due-soon"),
        (date(2024, 3, 16), TaskStatus.TODO, "due-soon"),
        (date(2024, 3, 17), TaskStatus.TODO, "none"),
        (date(2024, 3, 1), TaskStatus.DONE, "none"),
    ],
)
def test_deadline_status(deadline, status, expected):
    task = Task(task_id=1, project_id=1, title="t", status=status, deadline=deadline)
    assert deadline_status(task, date(2024, 3, 15)) == expected
