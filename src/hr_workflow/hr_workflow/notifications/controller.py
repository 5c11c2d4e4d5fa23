from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    notifications = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def notifications_list():
        unread_only = request.args.get("unread") in {"1", "true", "yes"}
        items = notifications.list_for_user(current_user_id(), unread_only=unread_only)
        return jsonify({"items": [n.to_dict() for n in items]})

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="notifications_unread_count")
    @login_required
    def notifications_unread_count():
        return jsonify({"count": notifications.unread_count(current_user_id())})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notification_read")
    @login_required
    def notification_read(notification_id: int):
        notifications.mark_read(notification_id, current_user_id())
        return jsonify({"success": True})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    def notifications_read_all():
        updated = notifications.mark_all_read(current_user_id())
        return jsonify({"success": True, "updated": updated})

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="notification_delete")
    @login_required
    def notification_delete(notification_id: int):
        notifications.delete(notification_id, current_user_id())
        return jsonify({"success": True})
