from __future__ import annotations

from flask import Flask, request, session

from ..common.http import client_ip, current_user_id, int_arg, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    users = container.user_service

    # ---------------- Auth ----------------

    @app.route("/api/auth/register", methods=["POST"], endpoint="api_auth_register")
    def api_auth_register():
        body = json_body()
        user_id = auth.register(
            name=body.get("name") or "",
            email=body.get("email") or "",
            password=body.get("password") or "",
            confirm_password=body.get("confirm_password") or "",
            position=body.get("position"),
            ip_address=client_ip(),
        )
        return ok({"id": user_id}, "Registration successful", 201)

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_auth_login")
    def api_auth_login():
        body = json_body()
        su = auth.login(body.get("email") or "", body.get("password") or "", ip_address=client_ip())
        session.clear()
        session["user_id"] = su.user_id
        session["role"] = su.role.value
        session["name"] = su.name
        return ok(su.to_dict(), "Login successful")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_auth_logout")
    def api_auth_logout():
        auth.logout(current_user_id(), ip_address=client_ip())
        session.clear()
        return ok(None, "Logout successful")

    # ---------------- Users ----------------

    @app.route("/api/users", methods=["GET"], endpoint="api_users_list")
    def api_users_list():
        data = users.list_users(current_user_id(), ip_address=client_ip())
        return ok([u.to_dict() for u in data])

    @app.route("/api/users/search", methods=["GET"], endpoint="api_users_search")
    def api_users_search():
        data = users.search_users(current_user_id(), request.args.get("keyword", ""))
        return ok([u.to_dict() for u in data])

    @app.route("/api/users/without-department", methods=["GET"], endpoint="api_users_without_department")
    def api_users_without_department():
        data = users.list_employees_without_department(current_user_id())
        return ok([u.to_dict() for u in data])

    @app.route("/api/users/department/<department>", methods=["GET"], endpoint="api_users_by_department")
    def api_users_by_department(department: str):
        data = users.list_employees_by_department(current_user_id(), department)
        return ok([u.to_dict() for u in data])

    @app.route("/api/users/assign-department", methods=["PUT"], endpoint="api_users_assign_department")
    def api_users_assign_department():
        body = json_body()
        user = users.assign_department(
            current_user_id(),
            employee_id=int_arg(body.get("employee_id"), "employee_id"),
            department=body.get("department") or "",
            ip_address=client_ip(),
        )
        return ok(user.to_dict(), "Department assigned")

    @app.route("/api/users/me/password", methods=["PUT"], endpoint="api_users_change_password")
    def api_users_change_password():
        body = json_body()
        auth.change_password(
            current_user_id(),
            current_password=body.get("current_password") or "",
            new_password=body.get("new_password") or "",
            confirm_password=body.get("confirm_password") or "",
            ip_address=client_ip(),
        )
        return ok(None, "Password changed")

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="api_users_get")
    def api_users_get(user_id: int):
        return ok(users.get_user(current_user_id(), user_id).to_dict())

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    def api_users_create():
        body = json_body()
        user = users.create_user(
            current_user_id(),
            name=body.get("name") or "",
            email=body.get("email") or "",
            password=body.get("password") or "",
            role=body.get("role") or "EMPLOYEE",
            department=body.get("department"),
            position=body.get("position"),
            ip_address=client_ip(),
        )
        return ok(user.to_dict(), "User created", 201)

    @app.route("/api/users/<int:user_id>", methods=["PUT"], endpoint="api_users_update")
    def api_users_update(user_id: int):
        body = json_body()
        user = users.update_user(
            current_user_id(),
            user_id,
            name=body.get("name"),
            email=body.get("email"),
            position=body.get("position"),
            ip_address=client_ip(),
        )
        return ok(user.to_dict(), "User updated")

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_users_deactivate")
    def api_users_deactivate(user_id: int):
        users.deactivate_user(current_user_id(), user_id, ip_address=client_ip())
        return ok(None, "User deactivated")

    @app.route("/api/users/<int:user_id>/activate", methods=["PUT"], endpoint="api_users_activate")
    def api_users_activate(user_id: int):
        users.activate_user(current_user_id(), user_id, ip_address=client_ip())
        return ok(None, "User activated")
