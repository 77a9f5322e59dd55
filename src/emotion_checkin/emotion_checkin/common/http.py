"""JSON envelope, requester identity and error mapping shared by controllers."""

from __future__ import annotations

import ipaddress
import logging
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.constants import MAX_IP_LENGTH, UNKNOWN_IP
from ..core.exceptions import AuthenticationError, DomainError, ValidationError

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


def ok(data: Any = None, message: str = "OK", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def fail(message: str, status: int = 400, data: Any = None):
    return jsonify({"success": False, "message": message, "data": data}), status


def current_user_id() -> int:
    """Requester id from the X-User-Id header, else from the login session."""
    raw = request.headers.get(USER_ID_HEADER)
    if raw is None:
        raw = session.get("user_id")
    if raw is None or str(raw).strip() == "":
        raise AuthenticationError("Unauthorized: missing user id")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise AuthenticationError("Unauthorized: invalid user id")


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return request.form.to_dict()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def int_arg(value: Any, field_name: str, *, default: Optional[int] = None) -> int:
    if value is None or value == "":
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def client_ip() -> str:
    """First X-Forwarded-For hop, else the socket peer; anything that is not
    an IP address (audit_logs.ip_address is VARCHAR(45)) becomes UNKNOWN_IP."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    candidate = forwarded.split(",")[0].strip() if forwarded else (request.remote_addr or "")
    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return UNKNOWN_IP
    return candidate if len(candidate) <= MAX_IP_LENGTH else UNKNOWN_IP


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        logger.warning("%s: %s", type(e).__name__, e)
        return fail(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unexpected error while handling %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return fail(f"An unexpected error occurred: {e}", 500)
        return fail("An unexpected error occurred", 500)
