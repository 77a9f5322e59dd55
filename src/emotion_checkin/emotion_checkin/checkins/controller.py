from __future__ import annotations

from flask import Flask, request

from ..common.http import client_ip, current_user_id, int_arg, json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT


def register(app: Flask, container: Container) -> None:
    service = container.checkin_service

    @app.route("/api/checkin", methods=["POST"], endpoint="api_checkin")
    def api_checkin():
        body = json_body()
        data = service.check_in(
            current_user_id(),
            emotion_type_id=int_arg(body.get("emotion_type_id"), "emotion_type_id"),
            emotion_level=int_arg(body.get("emotion_level"), "emotion_level"),
            comment=body.get("comment"),
            ip_address=client_ip(),
        )
        return ok(data, "Check-in successful", 201)

    @app.route("/api/checkin/today", methods=["GET"], endpoint="api_checkin_today")
    def api_checkin_today():
        data = service.get_today_checkin(current_user_id())
        return ok(data, "OK" if data else "No check-in today")

    @app.route("/api/checkin/can-checkin", methods=["GET"], endpoint="api_checkin_can_checkin")
    def api_checkin_can_checkin():
        return ok({"can_checkin": service.can_check_in_today(current_user_id())})

    @app.route("/api/checkin/history", methods=["GET"], endpoint="api_checkin_history")
    def api_checkin_history():
        limit = int_arg(request.args.get("limit"), "limit", default=DEFAULT_HISTORY_LIMIT)
        return ok(service.get_history(current_user_id(), limit))

    @app.route("/api/checkin/emotions", methods=["GET"], endpoint="api_checkin_emotions")
    def api_checkin_emotions():
        return ok([e.to_dict() for e in service.list_emotion_catalog()])

    @app.route("/api/checkin/<int:checkin_id>", methods=["DELETE"], endpoint="api_checkin_delete")
    def api_checkin_delete(checkin_id: int):
        service.delete_checkin(current_user_id(), checkin_id)
        return ok(None, "Check-in deleted")
