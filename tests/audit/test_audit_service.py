from __future__ import annotations

from datetime import timedelta

import pytest

from src.emotion_checkin.emotion_checkin.core.enums import AuditAction, Role
from src.emotion_checkin.emotion_checkin.core.exceptions import AuthorizationError, NotFoundError, ValidationError


@pytest.fixture
def audited(world, fixed_now):
    svc = world.container.audit_service
    svc.record(world.alice.user_id, AuditAction.LOGIN, now=fixed_now - timedelta(hours=3))
    svc.record(world.hr.user_id, AuditAction.ASSIGN_DEPARTMENT, target_user_id=world.bob.user_id,
               details={"department": "Sales"}, now=fixed_now - timedelta(hours=2))
    svc.record(world.admin.user_id, AuditAction.ADD_USER, target_user_id=world.alice.user_id,
               details={"email": "alice@example.com", "role": "EMPLOYEE"}, now=fixed_now - timedelta(hours=1))
    return world


def test_record_defaults_ip_to_unknown(world, fixed_now):
    world.container.audit_service.record(world.alice.user_id, AuditAction.LOGIN, now=fixed_now)

    assert world.audit.rows[-1].ip_address == "unknown"
    assert world.audit.rows[-1].details is None


def test_list_logs_is_newest_first_and_paged(audited, fixed_now):
    page = audited.container.audit_service.list_logs(audited.admin.user_id, page=0, size=2, now=fixed_now).to_dict()

    assert page["total"] == 3
    assert page["total_pages"] == 2
    assert [i["action"] for i in page["items"]] == ["ADD_USER", "ASSIGN_DEPARTMENT"]
    assert page["items"][0]["action_description"] == "Added user (Alice)"
    assert page["items"][0]["is_critical"] is True
    assert page["items"][0]["time_ago"] == "1 hour ago"


def test_every_read_is_itself_audited(audited, fixed_now):
    audited.container.audit_service.list_logs(audited.admin.user_id, now=fixed_now)

    assert audited.audit.rows[-1].action == AuditAction.VIEW_AUDIT_LOG


def test_search_by_role_action_and_keyword(audited, fixed_now):
    svc = audited.container.audit_service

    by_role = svc.search_logs(audited.admin.user_id, role=Role.HR, now=fixed_now)
    assert [i["action"] for i in by_role.items] == ["ASSIGN_DEPARTMENT"]

    by_action = svc.search_logs(audited.admin.user_id, action=AuditAction.LOGIN, now=fixed_now)
    assert [i["user_name"] for i in by_action.items] == ["Alice"]

    by_target = svc.search_logs(audited.admin.user_id, keyword="bob", now=fixed_now)
    assert [i["target_user_name"] for i in by_target.items] == ["Bob"]


def test_critical_actions_only(audited, fixed_now):
    page = audited.container.audit_service.critical_actions(audited.admin.user_id, now=fixed_now)

    assert {i["action"] for i in page.items} == {"ADD_USER", "ASSIGN_DEPARTMENT"}


def test_user_logs_include_actor_and_target_entries(audited, fixed_now):
    page = audited.container.audit_service.user_logs(audited.admin.user_id, audited.alice.user_id, now=fixed_now)

    assert [i["action"] for i in page.items] == ["ADD_USER", "LOGIN"]
    with pytest.raises(NotFoundError):
        audited.container.audit_service.user_logs(audited.admin.user_id, 999, now=fixed_now)


def test_audit_is_superadmin_only(audited):
    with pytest.raises(AuthorizationError):
        audited.container.audit_service.list_logs(audited.hr.user_id)


def test_invalid_paging_is_rejected(audited):
    with pytest.raises(ValidationError):
        audited.container.audit_service.list_logs(audited.admin.user_id, page=-1)
    with pytest.raises(ValidationError):
        audited.container.audit_service.list_logs(audited.admin.user_id, size=0)
