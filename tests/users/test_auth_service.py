from __future__ import annotations

import json

import pytest
from werkzeug.security import check_password_hash

from src.emotion_checkin.emotion_checkin.core.enums import AuditAction, Role
from src.emotion_checkin.emotion_checkin.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def test_login_success_records_audit(world):
    su = world.container.auth_service.login("ALICE@example.com ", "secret1", ip_address="1.2.3.4")

    assert su.user_id == world.alice.user_id
    assert su.role == Role.EMPLOYEE
    assert su.to_dict()["department"] == "IT"
    assert world.audit.rows[-1].action == AuditAction.LOGIN
    assert world.audit.rows[-1].ip_address == "1.2.3.4"


def test_login_wrong_password_is_rejected_and_audited(world):
    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        world.container.auth_service.login("alice@example.com", "nope")

    assert world.audit.rows[-1].action == AuditAction.LOGIN_FAILED


def test_login_unknown_email_is_rejected_without_audit(world):
    with pytest.raises(AuthenticationError):
        world.container.auth_service.login("ghost@example.com", "secret1")

    assert world.audit.rows == []


def test_deactivated_user_cannot_log_in_with_correct_password(world):
    world.users.set_active(world.bob.user_id, is_active=False)

    with pytest.raises(AuthenticationError, match="deactivated"):
        world.container.auth_service.login("bob@example.com", "secret1")

    entry = world.audit.rows[-1]
    assert entry.action == AuditAction.LOGIN_FAILED
    assert json.loads(entry.details) == {"reason": "deactivated"}


def test_register_creates_employee_without_department(world):
    uid = world.container.auth_service.register(
        name="Dora", email="Dora@Example.com", password="abcdef", confirm_password="abcdef", position="QA"
    )

    user = world.users.get_by_id(uid)
    assert user.role == Role.EMPLOYEE
    assert user.email == "dora@example.com"
    assert user.department is None
    assert check_password_hash(user.password_hash, "abcdef")
    assert world.audit.rows[-1].action == AuditAction.REGISTER


def test_register_rejects_mismatched_passwords(world):
    with pytest.raises(ValidationError, match="do not match"):
        world.container.auth_service.register(name="Dora", email="dora@example.com", password="abcdef", confirm_password="abcdeg")


def test_register_rejects_short_password(world):
    with pytest.raises(ValidationError):
        world.container.auth_service.register(name="Dora", email="dora@example.com", password="abc", confirm_password="abc")


def test_register_rejects_duplicate_email(world):
    with pytest.raises(ConflictError):
        world.container.auth_service.register(
            name="Alice 2", email="alice@example.com", password="abcdef", confirm_password="abcdef"
        )


def test_logout_is_audited(world):
    world.container.auth_service.logout(world.alice.user_id)

    assert world.audit.rows[-1].action == AuditAction.LOGOUT
    with pytest.raises(NotFoundError):
        world.container.auth_service.logout(999)


def test_change_password(world):
    svc = world.container.auth_service
    svc.change_password(world.alice.user_id, current_password="secret1", new_password="newpass", confirm_password="newpass")

    assert svc.login("alice@example.com", "newpass").user_id == world.alice.user_id
    assert AuditAction.PASSWORD_CHANGE in world.audit.actions()


def test_change_password_requires_current_password(world):
    with pytest.raises(AuthenticationError):
        world.container.auth_service.change_password(
            world.alice.user_id, current_password="wrong", new_password="newpass", confirm_password="newpass"
        )
