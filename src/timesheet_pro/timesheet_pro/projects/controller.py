from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify, request

from ..common.web import current_user_id, encode, encode_all, json_body, login_required
from ..container import Container
from ..core.enums import Collection, ProjectStatus
from ..core.exceptions import ValidationError
from .model import ProjectDraft


def project_draft_from_json(data: Dict[str, Any]) -> ProjectDraft:
    try:
        status = ProjectStatus(data.get("status") or ProjectStatus.NOT_STARTED.value)
        team_ids = tuple(int(i) for i in data.get("teamIds") or ())
        manager_id = int(data["managerId"]) if data.get("managerId") not in (None, "") else None
        team_leader_id = int(data["teamLeaderId"]) if data.get("teamLeaderId") not in (None, "") else None
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid project data: {e}")
    # actualHours is derived from approved timesheets and ignored here
    return ProjectDraft(
        name=data.get("name", ""),
        description=data.get("description", ""),
        manager_id=manager_id,
        team_leader_id=team_leader_id,
        team_ids=team_ids,
        customer_name=data.get("customerName", ""),
        job_name=data.get("jobName", ""),
        estimated_hours=data.get("estimatedHours") or 0,
        status=status,
    )


def register(app: Flask, container: Container) -> None:
    service = container.project_service

    @app.route("/api/projects", methods=["GET"], endpoint="list_projects")
    @login_required
    def list_projects():
        me = container.user_service.get(current_user_id())
        if request.args.get("mine"):
            projects = service.list_my_projects(user=me)
        else:
            projects = service.list_company_projects(company=me.company)
        return jsonify(encode_all(Collection.PROJECTS, projects))

    @app.route("/api/projects", methods=["POST"], endpoint="create_project")
    @login_required
    def create_project():
        project = service.create_project(actor_id=current_user_id(), draft=project_draft_from_json(json_body()))
        return jsonify(encode(Collection.PROJECTS, project)), 201

    @app.route("/api/projects/<int:project_id>", methods=["PUT"], endpoint="update_project")
    @login_required
    def update_project(project_id: int):
        project = service.update_project(
            actor_id=current_user_id(),
            project_id=project_id,
            draft=project_draft_from_json(json_body()),
        )
        return jsonify(encode(Collection.PROJECTS, project))
