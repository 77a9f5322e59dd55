from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from src.emotion_checkin.emotion_checkin.audit.model import AuditLog
from src.emotion_checkin.emotion_checkin.checkins.model import EmotionCheckin
from src.emotion_checkin.emotion_checkin.container import wire_services
from src.emotion_checkin.emotion_checkin.core.constants import HIGH_RISK_MAGNITUDE, HIGH_RISK_SCORE
from src.emotion_checkin.emotion_checkin.core.enums import Role
from src.emotion_checkin.emotion_checkin.core.exceptions import ConflictError
from src.emotion_checkin.emotion_checkin.emotions.model import EmotionType
from src.emotion_checkin.emotion_checkin.notifications.model import Notification
from src.emotion_checkin.emotion_checkin.sentiment.analyzer import SentimentAnalysisError
from src.emotion_checkin.emotion_checkin.sentiment.model import EmotionAIResult, SentimentScore
from src.emotion_checkin.emotion_checkin.users.model import User


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, *, name, email, role=Role.EMPLOYEE, department=None, position=None, password="secret1", is_active=True):
        uid = self.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            department=department,
            position=position,
        )
        if not is_active:
            self.set_active(uid, is_active=False)
        return self.users[uid]

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def exists_by_email(self, email):
        return self.get_by_email(email) is not None

    def create_user(self, *, name, email, password_hash, role, department, position):
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(
            user_id=uid,
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            department=department,
            position=position,
            created_at=datetime(2026, 1, 1, 9, 0, 0),
        )
        return uid

    def _update(self, user_id, **changes):
        if int(user_id) not in self.users:
            return False
        self.users[int(user_id)] = replace(self.users[int(user_id)], **changes)
        return True

    def update_profile(self, user_id, *, name, email, position):
        return self._update(user_id, name=name, email=email, position=position)

    def update_password(self, user_id, *, password_hash):
        return self._update(user_id, password_hash=password_hash)

    def set_active(self, user_id, *, is_active):
        return self._update(user_id, is_active=is_active)

    def set_department(self, user_id, *, department):
        return self._update(user_id, department=department)

    def list_all(self):
        return sorted(self.users.values(), key=lambda u: u.name)

    def search_by_name(self, keyword):
        return [u for u in self.list_all() if keyword.lower() in u.name.lower()]

    def list_employees_by_department(self, department):
        return [u for u in self.list_all() if u.is_employee and u.department == department]

    def list_active_employees(self):
        return [u for u in self.list_all() if u.is_employee and u.is_active]

    def list_active_hr(self):
        return [u for u in self.list_all() if u.is_hr and u.is_active]

    def list_employees_without_department(self):
        return [u for u in self.list_all() if u.is_employee and not u.department]

    def list_departments(self):
        return sorted({u.department for u in self.users.values() if u.is_employee and u.department})

    def count_active_employees(self):
        return len(self.list_active_employees())


class FakeEmotionRepo:
    def __init__(self):
        self.items = {
            1: EmotionType(1, "Stressed", 1, color_code="#E74C3C"),
            2: EmotionType(2, "Sad", 1, color_code="#5D6D7E"),
            3: EmotionType(3, "Neutral", 2, color_code="#95A5A6"),
            4: EmotionType(4, "Tired", 2, color_code="#A569BD"),
            5: EmotionType(5, "Happy", 3, color_code="#2ECC71"),
            6: EmotionType(6, "Excited", 3, color_code="#F1C40F"),
        }

    def get_by_id(self, emotion_id):
        return self.items.get(int(emotion_id))

    def list_all(self):
        return sorted(self.items.values(), key=lambda e: (e.level, e.name))


class FakeAIResultsRepo:
    def __init__(self):
        self._next_id = 1
        self.results: dict[int, EmotionAIResult] = {}

    def save(self, *, checkin_id, sentiment_score, magnitude, sentiment_label, language, analyzed_at):
        rid = self._next_id
        self._next_id += 1
        self.results[int(checkin_id)] = EmotionAIResult(
            result_id=rid,
            checkin_id=int(checkin_id),
            sentiment_score=sentiment_score,
            magnitude=magnitude,
            sentiment_label=sentiment_label,
            language=language,
            analyzed_at=analyzed_at,
        )
        return rid

    def get_by_checkin(self, checkin_id):
        return self.results.get(int(checkin_id))

    def count_high_risk(self, *, start, end):
        return sum(
            1
            for r in self.results.values()
            if start <= r.analyzed_at <= end and r.sentiment_score < HIGH_RISK_SCORE and r.magnitude > HIGH_RISK_MAGNITUDE
        )


class FakeCheckinsRepo:
    """Stores raw rows and joins catalog/AI result on read, like the SQL view."""

    def __init__(self, users: FakeUsersRepo, emotions: FakeEmotionRepo, ai_results: FakeAIResultsRepo):
        self._users = users
        self._emotions = emotions
        self._ai = ai_results
        self._next_id = 1
        self.rows: dict[int, EmotionCheckin] = {}

    def _joined(self, c: EmotionCheckin) -> EmotionCheckin:
        emotion = self._emotions.get_by_id(c.emotion_type_id)
        ai = self._ai.get_by_checkin(c.checkin_id)
        return replace(
            c,
            emotion_name=emotion.name if emotion else None,
            color_code=emotion.color_code if emotion else None,
            sentiment_score=ai.sentiment_score if ai else None,
            sentiment_magnitude=ai.magnitude if ai else None,
            sentiment_label=ai.sentiment_label if ai else None,
        )

    def _live(self):
        return [self._joined(c) for c in self.rows.values() if not c.is_deleted]

    @staticmethod
    def _newest_first(items):
        return sorted(items, key=lambda c: (c.checkin_date, c.checkin_time), reverse=True)

    def exists_for_employee_on(self, employee_id, checkin_date):
        return any(c.employee_id == employee_id and c.checkin_date == checkin_date for c in self.rows.values())

    def get_by_id(self, checkin_id):
        c = self.rows.get(int(checkin_id))
        return self._joined(c) if c and not c.is_deleted else None

    def get_for_employee_and_date(self, employee_id, checkin_date):
        return next((c for c in self._live() if c.employee_id == employee_id and c.checkin_date == checkin_date), None)

    def create_checkin(self, *, employee_id, emotion_level, emotion_type_id, comment, checkin_time, checkin_date):
        # unique key (employee_id, checkin_date)
        if any(c.employee_id == employee_id and c.checkin_date == checkin_date for c in self.rows.values()):
            raise ConflictError("You have already checked-in today")
        cid = self._next_id
        self._next_id += 1
        self.rows[cid] = EmotionCheckin(
            checkin_id=cid,
            employee_id=employee_id,
            emotion_level=emotion_level,
            emotion_type_id=emotion_type_id,
            checkin_time=checkin_time,
            checkin_date=checkin_date,
            comment=comment,
        )
        return cid

    def list_for_employee(self, employee_id, *, start_date, end_date):
        return self._newest_first(
            c for c in self._live() if c.employee_id == employee_id and start_date <= c.checkin_date <= end_date
        )

    def list_recent_for_employee(self, employee_id, limit):
        return self._newest_first(c for c in self._live() if c.employee_id == employee_id)[:limit]

    def get_latest_for_employee(self, employee_id):
        items = self.list_recent_for_employee(employee_id, 1)
        return items[0] if items else None

    def list_for_department(self, department, *, start_date, end_date):
        return self._newest_first(
            c
            for c in self._live()
            if self._users.get_by_id(c.employee_id).department == department and start_date <= c.checkin_date <= end_date
        )

    def count_for_date(self, checkin_date):
        return sum(1 for c in self._live() if c.checkin_date == checkin_date)

    def soft_delete(self, checkin_id):
        c = self.rows.get(int(checkin_id))
        if not c:
            return False
        self.rows[int(checkin_id)] = replace(c, is_deleted=True)
        return True


class FakeNotificationsRepo:
    def __init__(self, users: FakeUsersRepo, checkins: FakeCheckinsRepo):
        self._users = users
        self._checkins = checkins
        self._next_id = 1
        self.rows: dict[int, Notification] = {}

    def _joined(self, n: Notification) -> Notification:
        sender = self._users.get_by_id(n.sender_id)
        related = self._checkins.rows.get(n.related_checkin_id) if n.related_checkin_id else None
        return replace(
            n,
            sender_name=sender.name if sender else None,
            sender_role=sender.role if sender else None,
            related_checkin_level=related.emotion_level if related else None,
        )

    def create(self, *, sender_id, receiver_id, message, created_at, related_checkin_id=None):
        nid = self._next_id
        self._next_id += 1
        self.rows[nid] = Notification(
            notification_id=nid,
            sender_id=sender_id,
            receiver_id=receiver_id,
            message=message,
            created_at=created_at,
            related_checkin_id=related_checkin_id,
        )
        return nid

    def get_by_id(self, notification_id):
        n = self.rows.get(int(notification_id))
        return self._joined(n) if n else None

    def list_for_receiver(self, receiver_id, *, unread_only=False):
        items = [
            self._joined(n)
            for n in self.rows.values()
            if n.receiver_id == receiver_id and (not unread_only or not n.is_read)
        ]
        return sorted(items, key=lambda n: (n.created_at, n.notification_id), reverse=True)

    def count_unread(self, receiver_id):
        return sum(1 for n in self.rows.values() if n.receiver_id == receiver_id and not n.is_read)

    def mark_as_read(self, notification_id):
        n = self.rows.get(int(notification_id))
        if not n:
            return False
        self.rows[int(notification_id)] = replace(n, is_read=True)
        return True

    def mark_all_as_read(self, receiver_id):
        ids = [nid for nid, n in self.rows.items() if n.receiver_id == receiver_id and not n.is_read]
        for nid in ids:
            self.mark_as_read(nid)
        return len(ids)

    def delete_read_before(self, cutoff):
        ids = [nid for nid, n in self.rows.items() if n.is_read and n.created_at < cutoff]
        for nid in ids:
            del self.rows[nid]
        return len(ids)


class FakeAuditRepo:
    def __init__(self, users: FakeUsersRepo):
        self._users = users
        self._next_id = 1
        self.rows: list[AuditLog] = []

    def create(self, *, user_id, action, target_user_id, details, ip_address, created_at):
        aid = self._next_id
        self._next_id += 1
        self.rows.append(
            AuditLog(
                audit_id=aid,
                user_id=user_id,
                action=action,
                created_at=created_at,
                target_user_id=target_user_id,
                details=details,
                ip_address=ip_address,
            )
        )
        return aid

    def _joined(self, a: AuditLog) -> AuditLog:
        actor = self._users.get_by_id(a.user_id)
        target = self._users.get_by_id(a.target_user_id) if a.target_user_id else None
        return replace(
            a,
            user_name=actor.name if actor else None,
            user_role=actor.role if actor else None,
            target_user_name=target.name if target else None,
            target_user_role=target.role if target else None,
        )

    def search(self, query, *, offset, limit):
        items = [self._joined(a) for a in self.rows]
        if query.role is not None:
            items = [a for a in items if a.user_role == query.role]
        if query.action is not None:
            items = [a for a in items if a.action == query.action]
        if query.actions:
            items = [a for a in items if a.action in query.actions]
        if query.user_id is not None:
            items = [a for a in items if query.user_id in (a.user_id, a.target_user_id)]
        if query.keyword:
            kw = query.keyword.lower()
            items = [
                a
                for a in items
                if kw in (a.user_name or "").lower()
                or kw in (a.target_user_name or "").lower()
                or kw in (a.details or "").lower()
            ]
        items.sort(key=lambda a: (a.created_at, a.audit_id), reverse=True)
        return items[offset : offset + limit], len(items)

    def actions(self):
        return [a.action for a in self.rows]


class FakeAnalyzer:
    def __init__(self, result: SentimentScore | None = None, *, fail: bool = False):
        self.result = result or SentimentScore(score=0.8, magnitude=0.9, language="en")
        self.fail = fail
        self.calls: list[str] = []

    def analyze(self, text):
        self.calls.append(text)
        if self.fail:
            raise SentimentAnalysisError("provider unavailable")
        return self.result


class World:
    """In-memory repositories plus a fully wired container."""

    def __init__(self, analyzer: FakeAnalyzer | None = None):
        self.users = FakeUsersRepo()
        self.emotions = FakeEmotionRepo()
        self.ai_results = FakeAIResultsRepo()
        self.checkins = FakeCheckinsRepo(self.users, self.emotions, self.ai_results)
        self.notifications = FakeNotificationsRepo(self.users, self.checkins)
        self.audit = FakeAuditRepo(self.users)
        self.analyzer = analyzer or FakeAnalyzer()
        self.container = wire_services(
            users_repo=self.users,
            emotions_repo=self.emotions,
            checkins_repo=self.checkins,
            ai_results_repo=self.ai_results,
            notifications_repo=self.notifications,
            audit_repo=self.audit,
            analyzer=self.analyzer,
        )

        self.admin = self.users.add(name="Admin", email="admin@example.com", role=Role.SUPERADMIN)
        self.hr = self.users.add(name="Hana HR", email="hr@example.com", role=Role.HR)
        self.alice = self.users.add(name="Alice", email="alice@example.com", department="IT", position="Developer")
        self.bob = self.users.add(name="Bob", email="bob@example.com", department="Sales")

    def seed_checkin(self, employee, when: datetime, *, emotion_type_id: int, comment=None):
        level = self.emotions.get_by_id(emotion_type_id).level
        return self.checkins.create_checkin(
            employee_id=employee.user_id,
            emotion_level=level,
            emotion_type_id=emotion_type_id,
            comment=comment,
            checkin_time=when,
            checkin_date=when.date(),
        )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 10, 9, 30, 0)


@pytest.fixture
def world() -> World:
    return World()


@pytest.fixture
def failing_world() -> World:
    return World(FakeAnalyzer(fail=True))
