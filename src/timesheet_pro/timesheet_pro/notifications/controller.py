from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, encode_all, json_body, login_required
from ..container import Container
from ..core.enums import Collection


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="list_notifications")
    @login_required
    def list_notifications():
        include_dismissed = bool(request.args.get("all"))
        items = service.list_for_user(user_id=current_user_id(), include_dismissed=include_dismissed)
        return jsonify(
            {
                "unread": service.unread_count(user_id=current_user_id()),
                "items": encode_all(Collection.NOTIFICATIONS, items),
            }
        )

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="mark_notification_read")
    @login_required
    def mark_notification_read(notification_id: int):
        return jsonify({"changed": service.mark_read(user_id=current_user_id(), notification_id=notification_id)})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="mark_all_notifications_read")
    @login_required
    def mark_all_notifications_read():
        return jsonify({"changed": service.mark_all_read(user_id=current_user_id())})

    @app.route("/api/notifications/<int:notification_id>/dismiss", methods=["POST"], endpoint="dismiss_notification")
    @login_required
    def dismiss_notification(notification_id: int):
        return jsonify({"changed": service.dismiss(user_id=current_user_id(), notification_id=notification_id)})

    @app.route("/api/notifications/dismiss-all", methods=["POST"], endpoint="dismiss_all_notifications")
    @login_required
    def dismiss_all_notifications():
        return jsonify({"changed": service.dismiss_all(user_id=current_user_id())})

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="delete_notification")
    @login_required
    def delete_notification(notification_id: int):
        service.permanently_delete(user_id=current_user_id(), notification_id=notification_id)
        return jsonify({"ok": True})

    @app.route("/api/announcements", methods=["POST"], endpoint="send_announcement")
    @login_required
    def send_announcement():
        data = json_body()
        created = service.send_announcement(
            sender_id=current_user_id(),
            title=data.get("title", ""),
            message=data.get("message", ""),
        )
        return jsonify({"sent": len(created)}), 201
