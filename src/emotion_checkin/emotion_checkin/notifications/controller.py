from __future__ import annotations

from flask import Flask

from ..common.http import client_ip, current_user_id, int_arg, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    def api_notifications():
        return ok(service.list_notifications(current_user_id()))

    @app.route("/api/notifications/unread", methods=["GET"], endpoint="api_notifications_unread")
    def api_notifications_unread():
        return ok(service.list_unread(current_user_id()))

    @app.route("/api/notifications/count-unread", methods=["GET"], endpoint="api_notifications_count_unread")
    def api_notifications_count_unread():
        return ok({"count": service.count_unread(current_user_id())})

    @app.route("/api/notifications/send", methods=["POST"], endpoint="api_notifications_send")
    def api_notifications_send():
        body = json_body()
        related = body.get("related_checkin_id")
        notification_id = service.send_notification(
            current_user_id(),
            receiver_id=int_arg(body.get("receiver_id"), "receiver_id"),
            message=body.get("message") or "",
            related_checkin_id=int_arg(related, "related_checkin_id") if related not in (None, "") else None,
            ip_address=client_ip(),
        )
        return ok({"id": notification_id}, "Notification sent", 201)

    @app.route("/api/notifications/<int:notification_id>/read", methods=["PUT"], endpoint="api_notifications_read")
    def api_notifications_read(notification_id: int):
        service.mark_as_read(current_user_id(), notification_id)
        return ok(None, "Notification marked as read")

    @app.route("/api/notifications/read-all", methods=["PUT"], endpoint="api_notifications_read_all")
    def api_notifications_read_all():
        updated = service.mark_all_as_read(current_user_id())
        return ok({"updated": updated}, "All notifications marked as read")
