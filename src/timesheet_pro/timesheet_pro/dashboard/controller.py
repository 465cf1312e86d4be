from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.web import current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        summary = asdict(container.dashboard_service.summary(actor_id=current_user_id()))
        for item in summary["recent_activity"] + summary["team_pending_activity"]:
            item["date"] = item["date"].isoformat() if item["date"] else None
            item["status"] = item["status"].value
        return jsonify(summary)
