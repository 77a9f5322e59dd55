from __future__ import annotations

from typing import Optional

from flask import Flask, request

from ..common.http import client_ip, current_user_id, int_arg, ok
from ..container import Container
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import AuditAction, Role
from ..core.exceptions import ValidationError


def _enum_arg(enum_cls, name: str) -> Optional[object]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return enum_cls(raw.upper())
    except ValueError:
        raise ValidationError(f"Invalid {name}: {raw}")


def register(app: Flask, container: Container) -> None:
    service = container.audit_service

    def _request_opts() -> dict:
        return {
            "page": int_arg(request.args.get("page"), "page", default=0),
            "size": int_arg(request.args.get("size"), "size", default=DEFAULT_PAGE_SIZE),
            "ip_address": client_ip(),
        }

    @app.route("/api/audit-logs", methods=["GET"], endpoint="api_audit_logs")
    def api_audit_logs():
        return ok(service.list_logs(current_user_id(), **_request_opts()).to_dict())

    @app.route("/api/audit-logs/search", methods=["GET"], endpoint="api_audit_logs_search")
    def api_audit_logs_search():
        page = service.search_logs(
            current_user_id(),
            role=_enum_arg(Role, "role"),
            action=_enum_arg(AuditAction, "action"),
            keyword=request.args.get("keyword"),
            **_request_opts(),
        )
        return ok(page.to_dict())

    @app.route("/api/audit-logs/critical", methods=["GET"], endpoint="api_audit_logs_critical")
    def api_audit_logs_critical():
        return ok(service.critical_actions(current_user_id(), **_request_opts()).to_dict())

    @app.route("/api/audit-logs/user/<int:user_id>", methods=["GET"], endpoint="api_audit_logs_user")
    def api_audit_logs_user(user_id: int):
        return ok(service.user_logs(current_user_id(), user_id, **_request_opts()).to_dict())
