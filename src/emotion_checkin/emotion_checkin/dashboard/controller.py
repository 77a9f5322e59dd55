from __future__ import annotations

from flask import Flask, request

from ..common.http import client_ip, current_user_id, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.dashboard_service

    @app.route("/api/dashboard/employee", methods=["GET"], endpoint="api_dashboard_employee")
    def api_dashboard_employee():
        return ok(service.employee_dashboard(current_user_id(), ip_address=client_ip()))

    @app.route("/api/dashboard/hr", methods=["GET"], endpoint="api_dashboard_hr")
    def api_dashboard_hr():
        data = service.hr_dashboard(current_user_id(), request.args.get("department"), ip_address=client_ip())
        return ok(data)

    @app.route("/api/dashboard/admin", methods=["GET"], endpoint="api_dashboard_admin")
    def api_dashboard_admin():
        return ok(service.admin_dashboard(current_user_id(), ip_address=client_ip()))
