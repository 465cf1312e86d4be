from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.web import current_user_id, encode, encode_all, json_body, json_objects, login_required
from ..container import Container
from ..core.constants import DEFAULT_IN_TIME, DEFAULT_OUT_TIME
from ..core.enums import Collection
from .model import TimesheetDraft


def timesheet_draft_from_json(data: Dict[str, Any]) -> TimesheetDraft:
    project_work = tuple(
        {
            "project_id": item.get("projectId"),
            "work_entries": [
                {"description": e.get("description", ""), "hours": e.get("hours")}
                for e in json_objects(item.get("workEntries"), "Work entries")
            ],
        }
        for item in json_objects(data.get("projectWork"), "Project work")
    )
    return TimesheetDraft(
        date=data.get("date"),
        project_work=project_work,
        in_time=data.get("inTime") or DEFAULT_IN_TIME,
        out_time=data.get("outTime") or DEFAULT_OUT_TIME,
    )


def register(app: Flask, container: Container) -> None:
    service = container.timesheet_service

    @app.route("/api/timesheets", methods=["GET"], endpoint="my_timesheets")
    @login_required
    def my_timesheets():
        return jsonify(encode_all(Collection.TIMESHEETS, service.list_own(user_id=current_user_id())))

    @app.route("/api/timesheets", methods=["POST"], endpoint="submit_timesheet")
    @login_required
    def submit_timesheet():
        ts = service.submit_timesheet(owner_id=current_user_id(), draft=timesheet_draft_from_json(json_body()))
        return jsonify(encode(Collection.TIMESHEETS, ts)), 201

    @app.route("/api/timesheets/<int:timesheet_id>", methods=["PUT"], endpoint="edit_timesheet")
    @login_required
    def edit_timesheet(timesheet_id: int):
        ts = service.edit_timesheet(
            owner_id=current_user_id(),
            timesheet_id=timesheet_id,
            draft=timesheet_draft_from_json(json_body()),
        )
        return jsonify(encode(Collection.TIMESHEETS, ts))

    @app.route("/api/timesheets/team", methods=["GET"], endpoint="team_timesheets")
    @login_required
    def team_timesheets():
        return jsonify(encode_all(Collection.TIMESHEETS, service.list_reviewable(actor_id=current_user_id())))

    @app.route("/api/timesheets/<int:timesheet_id>/review", methods=["POST"], endpoint="review_timesheet")
    @login_required
    def review_timesheet(timesheet_id: int):
        ts = service.review_timesheet(
            approver_id=current_user_id(),
            timesheet_id=timesheet_id,
            decision=json_body().get("decision", ""),
        )
        return jsonify(encode(Collection.TIMESHEETS, ts))
