from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.web import current_user_id, encode, encode_all, json_body, json_objects, login_required
from ..container import Container
from ..core.enums import Collection
from .model import LeaveDraft


def leave_draft_from_json(data: Dict[str, Any]) -> LeaveDraft:
    entries = tuple(
        {
            "date": e.get("date"),
            "leave_type": e.get("leaveType"),
            "half_day_session": e.get("halfDaySession"),
        }
        for e in json_objects(data.get("leaveEntries"), "Leave entries")
    )
    return LeaveDraft(leave_entries=entries, reason=data.get("reason", ""))


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leave-requests", methods=["GET"], endpoint="my_leave_requests")
    @login_required
    def my_leave_requests():
        return jsonify(encode_all(Collection.LEAVE_REQUESTS, service.list_own(user_id=current_user_id())))

    @app.route("/api/leave-requests", methods=["POST"], endpoint="submit_leave_request")
    @login_required
    def submit_leave_request():
        lr = service.submit_leave_request(owner_id=current_user_id(), draft=leave_draft_from_json(json_body()))
        return jsonify(encode(Collection.LEAVE_REQUESTS, lr)), 201

    @app.route("/api/leave-requests/<int:request_id>", methods=["PUT"], endpoint="edit_leave_request")
    @login_required
    def edit_leave_request(request_id: int):
        lr = service.edit_leave_request(
            owner_id=current_user_id(),
            request_id=request_id,
            draft=leave_draft_from_json(json_body()),
        )
        return jsonify(encode(Collection.LEAVE_REQUESTS, lr))

    @app.route("/api/leave-requests/team", methods=["GET"], endpoint="team_leave_requests")
    @login_required
    def team_leave_requests():
        return jsonify(encode_all(Collection.LEAVE_REQUESTS, service.list_reviewable(actor_id=current_user_id())))

    @app.route("/api/leave-requests/<int:request_id>/review", methods=["POST"], endpoint="review_leave_request")
    @login_required
    def review_leave_request(request_id: int):
        lr = service.review_leave_request(
            approver_id=current_user_id(),
            request_id=request_id,
            decision=json_body().get("decision", ""),
        )
        return jsonify(encode(Collection.LEAVE_REQUESTS, lr))
