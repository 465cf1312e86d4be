from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.web import current_user_id, encode, json_body, login_required
from ..container import Container
from ..core.enums import Collection, TaskStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Task, TaskDraft


def task_draft_from_json(data: Dict[str, Any]) -> TaskDraft:
    try:
        project_id = int(data.get("projectId"))
        assigned_to = tuple(int(i) for i in data.get("assignedTo") or ())
    except (TypeError, ValueError):
        raise ValidationError("Task needs a project and numeric assignee ids")
    return TaskDraft(
        project_id=project_id,
        title=data.get("title", ""),
        description=data.get("description", ""),
        assigned_to=assigned_to,
        status=data.get("status") or TaskStatus.TODO.value,
        deadline=data.get("deadline"),
        completion_date=data.get("completionDate"),
    )


def register(app: Flask, container: Container) -> None:
    service = container.task_service

    def _task_json(task: Task) -> Dict[str, Any]:
        data = encode(Collection.TASKS, task)
        data["deadlineStatus"] = service.deadline_status(task)
        return data

    @app.route("/api/projects/<int:project_id>/tasks", methods=["GET"], endpoint="project_tasks")
    @login_required
    def project_tasks(project_id: int):
        me = container.user_service.get(current_user_id())
        if not any(p.project_id == project_id for p in container.project_service.list_company_projects(company=me.company)):
            raise NotFoundError(f"Project {project_id} not found")
        return jsonify([_task_json(t) for t in service.list_project_tasks(project_id=project_id)])

    @app.route("/api/tasks/assigned", methods=["GET"], endpoint="assigned_tasks")
    @login_required
    def assigned_tasks():
        return jsonify([_task_json(t) for t in service.assigned_open_tasks(user_id=current_user_id())])

    @app.route("/api/tasks", methods=["POST"], endpoint="create_task")
    @login_required
    def create_task():
        task = service.save_task(actor_id=current_user_id(), draft=task_draft_from_json(json_body()))
        return jsonify(_task_json(task)), 201

    @app.route("/api/tasks/<int:task_id>", methods=["PUT"], endpoint="update_task")
    @login_required
    def update_task(task_id: int):
        task = service.save_task(actor_id=current_user_id(), draft=task_draft_from_json(json_body()), task_id=task_id)
        return jsonify(_task_json(task))

    @app.route("/api/tasks/<int:task_id>/status", methods=["POST"], endpoint="move_task")
    @login_required
    def move_task(task_id: int):
        task = service.move_task(actor_id=current_user_id(), task_id=task_id, status=json_body().get("status", ""))
        return jsonify(_task_json(task))
