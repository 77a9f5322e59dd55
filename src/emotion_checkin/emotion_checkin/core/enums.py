from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    EMPLOYEE = "EMPLOYEE"
    HR = "HR"
    SUPERADMIN = "SUPERADMIN"


class EmotionLevel(int, Enum):
    NEGATIVE = 1
    NEUTRAL = 2
    POSITIVE = 3


class SentimentLabel(str, Enum):
    POSITIVE = "POSITIVE"
    NEUTRAL = "NEUTRAL"
    NEGATIVE = "NEGATIVE"


class AuditAction(str, Enum):
    """Actions recorded in the audit log."""

    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    REGISTER = "REGISTER"
    LOGIN_FAILED = "LOGIN_FAILED"

    CHECK_IN = "CHECK_IN"
    VIEW_DASHBOARD = "VIEW_DASHBOARD"

    VIEW_EMPLOYEE_INSIGHT = "VIEW_EMPLOYEE_INSIGHT"
    ASSIGN_DEPARTMENT = "ASSIGN_DEPARTMENT"
    SEND_NOTIFICATION = "SEND_NOTIFICATION"

    ADD_USER = "ADD_USER"
    EDIT_USER = "EDIT_USER"
    DEACTIVATE_USER = "DEACTIVATE_USER"
    ACTIVATE_USER = "ACTIVATE_USER"
    VIEW_AUDIT_LOG = "VIEW_AUDIT_LOG"

    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    PROFILE_UPDATE = "PROFILE_UPDATE"

    @property
    def description(self) -> str:
        return _AUDIT_DESCRIPTIONS[self]

    @property
    def is_critical(self) -> bool:
        return self in CRITICAL_ACTIONS

    @property
    def is_auth(self) -> bool:
        return self in AUTH_ACTIONS


_AUDIT_DESCRIPTIONS = {
    AuditAction.LOGIN: "Logged in",
    AuditAction.LOGOUT: "Logged out",
    AuditAction.REGISTER: "Registered",
    AuditAction.LOGIN_FAILED: "Login failed",
    AuditAction.CHECK_IN: "Emotion check-in",
    AuditAction.VIEW_DASHBOARD: "Viewed dashboard",
    AuditAction.VIEW_EMPLOYEE_INSIGHT: "Viewed employee insight",
    AuditAction.ASSIGN_DEPARTMENT: "Assigned department",
    AuditAction.SEND_NOTIFICATION: "Sent notification",
    AuditAction.ADD_USER: "Added user",
    AuditAction.EDIT_USER: "Edited user",
    AuditAction.DEACTIVATE_USER: "Deactivated user",
    AuditAction.ACTIVATE_USER: "Activated user",
    AuditAction.VIEW_AUDIT_LOG: "Viewed audit log",
    AuditAction.PASSWORD_CHANGE: "Changed password",
    AuditAction.PROFILE_UPDATE: "Updated profile",
}

CRITICAL_ACTIONS = frozenset(
    {
        AuditAction.ADD_USER,
        AuditAction.DEACTIVATE_USER,
        AuditAction.ASSIGN_DEPARTMENT,
        AuditAction.PASSWORD_CHANGE,
    }
)

AUTH_ACTIONS = frozenset(
    {
        AuditAction.LOGIN,
        AuditAction.LOGOUT,
        AuditAction.REGISTER,
        AuditAction.LOGIN_FAILED,
    }
)


class DashboardView(str, Enum):
    """Which dashboard is being rendered; drives comment visibility."""

    EMPLOYEE = "EMPLOYEE"
    HR = "HR"
    ADMIN = "ADMIN"
