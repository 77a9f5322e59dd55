from __future__ import annotations

from datetime import timedelta

import pytest

from src.emotion_checkin.emotion_checkin.core.enums import AuditAction
from src.emotion_checkin.emotion_checkin.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)


def test_bad_mood_alert_is_high_priority(world, fixed_now):
    world.container.checkin_service.check_in(world.alice.user_id, emotion_type_id=1, emotion_level=1, now=fixed_now)

    items = world.container.notification_service.list_notifications(world.hr.user_id, now=fixed_now + timedelta(minutes=5))

    assert len(items) == 1
    item = items[0]
    assert item["type"] == "ALERT"
    assert item["priority"] == "HIGH"
    assert item["sender_name"] == "Alice"
    assert item["sender_role"] == "EMPLOYEE"
    assert item["time_ago"] == "5 minutes ago"
    assert "Alice" in item["message"]


def test_hr_message_is_normal_priority(world, fixed_now):
    svc = world.container.notification_service
    svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="Coffee chat?", now=fixed_now)

    item = svc.list_notifications(world.bob.user_id, now=fixed_now + timedelta(hours=2))[0]

    assert item["type"] == "MESSAGE"
    assert item["priority"] == "NORMAL"
    assert item["time_ago"] == "2 hours ago"
    assert world.audit.rows[-1].action == AuditAction.SEND_NOTIFICATION
    assert world.audit.rows[-1].target_user_id == world.bob.user_id


def test_admin_message_is_system_type(world, fixed_now):
    svc = world.container.notification_service
    svc.send_notification(world.admin.user_id, receiver_id=world.bob.user_id, message="Welcome", now=fixed_now)

    assert svc.list_notifications(world.bob.user_id, now=fixed_now)[0]["type"] == "SYSTEM"


def test_send_with_related_checkin_links_it(world, fixed_now):
    cid = world.seed_checkin(world.alice, fixed_now, emotion_type_id=1)
    svc = world.container.notification_service

    svc.send_notification(
        world.hr.user_id, receiver_id=world.alice.user_id, message="Saw your check-in", related_checkin_id=cid, now=fixed_now
    )

    item = svc.list_notifications(world.alice.user_id, now=fixed_now)[0]
    assert item["related_checkin_id"] == cid
    assert item["type"] == "ALERT"


def test_send_with_someone_elses_checkin_is_rejected(world, fixed_now):
    cid = world.seed_checkin(world.alice, fixed_now, emotion_type_id=3)

    with pytest.raises(ValidationError):
        world.container.notification_service.send_notification(
            world.hr.user_id, receiver_id=world.bob.user_id, message="Hi", related_checkin_id=cid, now=fixed_now
        )
    with pytest.raises(NotFoundError):
        world.container.notification_service.send_notification(
            world.hr.user_id, receiver_id=world.bob.user_id, message="Hi", related_checkin_id=999, now=fixed_now
        )


def test_employees_cannot_send(world, fixed_now):
    with pytest.raises(AuthorizationError):
        world.container.notification_service.send_notification(
            world.alice.user_id, receiver_id=world.bob.user_id, message="Hi", now=fixed_now
        )


def test_send_requires_message_and_receiver(world, fixed_now):
    svc = world.container.notification_service
    with pytest.raises(ValidationError):
        svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="  ", now=fixed_now)
    with pytest.raises(NotFoundError):
        svc.send_notification(world.hr.user_id, receiver_id=999, message="Hi", now=fixed_now)


def test_unread_listing_and_marking(world, fixed_now):
    svc = world.container.notification_service
    first = svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="one", now=fixed_now)
    svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="two", now=fixed_now)

    assert svc.count_unread(world.bob.user_id) == 2
    svc.mark_as_read(world.bob.user_id, first)
    assert [n["message"] for n in svc.list_unread(world.bob.user_id, now=fixed_now)] == ["two"]

    assert svc.mark_all_as_read(world.bob.user_id) == 1
    assert svc.count_unread(world.bob.user_id) == 0
    assert len(svc.list_notifications(world.bob.user_id, now=fixed_now)) == 2


def test_only_receiver_can_mark_as_read(world, fixed_now):
    svc = world.container.notification_service
    nid = svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="one", now=fixed_now)

    with pytest.raises(AuthorizationError):
        svc.mark_as_read(world.alice.user_id, nid)
    with pytest.raises(NotFoundError):
        svc.mark_as_read(world.bob.user_id, 999)


def test_cleanup_deletes_only_old_read_notifications(world, fixed_now):
    svc = world.container.notification_service
    old_read = svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="old", now=fixed_now - timedelta(days=40))
    svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="old unread", now=fixed_now - timedelta(days=40))
    recent = svc.send_notification(world.hr.user_id, receiver_id=world.bob.user_id, message="recent", now=fixed_now - timedelta(days=2))
    svc.mark_as_read(world.bob.user_id, old_read)
    svc.mark_as_read(world.bob.user_id, recent)

    deleted = svc.cleanup_old_notifications(30, now=fixed_now)

    assert deleted == 1
    assert sorted(n.message for n in world.notifications.rows.values()) == ["old unread", "recent"]


def test_cleanup_rejects_non_positive_retention(world):
    with pytest.raises(ValidationError):
        world.container.notification_service.cleanup_old_notifications(0)
