from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..audit.service import AuditLogService
from ..common.validators import (
    optional_text,
    require_email,
    require_min_length,
    require_non_empty,
    require_text_or_none,
)
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AuditAction, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from ..notifications.service import NotificationService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _parse_role(value) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid role: {value}")


def _password_matches(password_hash: str, password: str) -> bool:
    if not isinstance(password, str):
        return False
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hash values
        return False


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role
    department: Optional[str]
    position: Optional[str]

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "position": self.position,
        }


class AuthService:
    """Use case: login, self-registration, logout and password change."""

    def __init__(self, users: UserRepository, audit: AuditLogService):
        self._users = users
        self._audit = audit

    def login(self, email: str, password: str, *, ip_address: Optional[str] = None) -> SessionUser:
        email = (require_text_or_none(email, "Email") or "").strip().lower()
        password = require_text_or_none(password, "Password")
        logger.info("Login attempt: %s", email)

        user = self._users.get_by_email(email) if email else None
        if not user:
            logger.warning("Failed login attempt for unknown email %s", email)
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            logger.warning("Login rejected for deactivated user %s", email)
            self._audit.record(user.user_id, AuditAction.LOGIN_FAILED, details={"reason": "deactivated"}, ip_address=ip_address)
            raise AuthenticationError("Account has been deactivated. Please contact admin.")

        if not _password_matches(user.password_hash, password or ""):
            logger.warning("Invalid password for %s", email)
            self._audit.record(user.user_id, AuditAction.LOGIN_FAILED, details={"reason": "bad_password"}, ip_address=ip_address)
            raise AuthenticationError("Invalid email or password")

        self._audit.record(user.user_id, AuditAction.LOGIN, ip_address=ip_address)
        logger.info("Login successful: %s (%s)", user.name, user.role.value)
        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            department=user.department,
            position=user.position,
        )

    def register(
        self,
        *,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
        position: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if self._users.exists_by_email(email):
            raise ConflictError("Email already registered")

        # Self-registered accounts are employees; HR assigns the department later.
        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
            department=None,
            position=optional_text(position, "Position"),
        )
        self._audit.record(user_id, AuditAction.REGISTER, ip_address=ip_address)
        logger.info("Registration successful: %s (%s)", name, email)
        return user_id

    def logout(self, user_id: int, *, ip_address: Optional[str] = None) -> None:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        self._audit.record(user.user_id, AuditAction.LOGOUT, ip_address=ip_address)

    def change_password(
        self,
        user_id: int,
        *,
        current_password: str,
        new_password: str,
        confirm_password: str,
        ip_address: Optional[str] = None,
    ) -> None:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        current_password = require_text_or_none(current_password, "Current password")
        if not _password_matches(user.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        self._audit.record(user.user_id, AuditAction.PASSWORD_CHANGE, target_user_id=user.user_id, ip_address=ip_address)
        logger.info("Password changed for user %s", user.user_id)


class UserService:
    """Use case: manage users (SUPERADMIN) and departments (HR/SUPERADMIN)."""

    def __init__(self, users: UserRepository, audit: AuditLogService, notifications: NotificationService):
        self._users = users
        self._audit = audit
        self._notifications = notifications

    def _require_user(self, user_id: int, label: str = "User") -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"{label} not found")
        return user

    def _require_admin(self, admin_id: int) -> User:
        admin = self._require_user(admin_id, "Admin")
        if not admin.is_superadmin:
            raise AuthorizationError("Access denied: SuperAdmin role required")
        return admin

    def _require_manager(self, requester_id: int) -> User:
        requester = self._require_user(requester_id, "Requester")
        if not requester.can_manage_employees:
            raise AuthorizationError("Access denied: HR/Admin role required")
        return requester

    def list_users(self, admin_id: int, *, ip_address: Optional[str] = None) -> Sequence[User]:
        admin = self._require_admin(admin_id)
        users = self._users.list_all()
        self._audit.record(admin.user_id, AuditAction.VIEW_AUDIT_LOG, details={"action": "view_users"}, ip_address=ip_address)
        return users

    def search_users(self, admin_id: int, keyword: str) -> Sequence[User]:
        self._require_admin(admin_id)
        keyword = (keyword or "").strip()
        if not keyword:
            return self._users.list_all()
        return self._users.search_by_name(keyword)

    def get_user(self, requester_id: int, user_id: int) -> User:
        requester = self._require_user(requester_id, "Requester")
        if requester.user_id != user_id and not requester.can_manage_employees:
            raise AuthorizationError("Access denied: can only view your own profile")
        return self._require_user(user_id)

    def create_user(
        self,
        admin_id: int,
        *,
        name: str,
        email: str,
        password: str,
        role,
        department: Optional[str] = None,
        position: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> User:
        admin = self._require_admin(admin_id)
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = _parse_role(role)
        if self._users.exists_by_email(email):
            raise ConflictError("Email already registered")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            department=optional_text(department, "Department") if role == Role.EMPLOYEE else None,
            position=optional_text(position, "Position"),
        )
        self._audit.record(
            admin.user_id,
            AuditAction.ADD_USER,
            target_user_id=user_id,
            details={"email": email, "role": role.value},
            ip_address=ip_address,
        )
        logger.info("User %s (%s) created by admin %s", email, role.value, admin.user_id)
        return self._require_user(user_id)

    def update_user(
        self,
        requester_id: int,
        target_user_id: int,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        position: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> User:
        requester = self._require_user(requester_id, "Requester")
        target = self._require_user(target_user_id, "Target user")
        if not requester.is_superadmin and requester.user_id != target.user_id:
            raise AuthorizationError("Access denied: can only update your own profile")

        new_name = optional_text(name, "Name") or target.name
        new_email = target.email
        if optional_text(email, "Email"):
            new_email = require_email(email)
            if new_email != target.email and self._users.exists_by_email(new_email):
                raise ConflictError("Email already in use")
        new_position = optional_text(position, "Position") or target.position

        self._users.update_profile(target.user_id, name=new_name, email=new_email, position=new_position)
        action = AuditAction.PROFILE_UPDATE if requester.user_id == target.user_id else AuditAction.EDIT_USER
        self._audit.record(requester.user_id, action, target_user_id=target.user_id, ip_address=ip_address)
        return self._require_user(target.user_id)

    def deactivate_user(self, admin_id: int, target_user_id: int, *, ip_address: Optional[str] = None) -> None:
        admin = self._require_admin(admin_id)
        target = self._require_user(target_user_id, "Target user")
        if admin.user_id == target.user_id:
            raise ValidationError("Cannot deactivate yourself")
        self._users.set_active(target.user_id, is_active=False)
        self._audit.record(admin.user_id, AuditAction.DEACTIVATE_USER, target_user_id=target.user_id, ip_address=ip_address)
        logger.info("User %s deactivated by admin %s", target.user_id, admin.user_id)

    def activate_user(self, admin_id: int, target_user_id: int, *, ip_address: Optional[str] = None) -> None:
        admin = self._require_admin(admin_id)
        target = self._require_user(target_user_id, "Target user")
        self._users.set_active(target.user_id, is_active=True)
        self._audit.record(admin.user_id, AuditAction.ACTIVATE_USER, target_user_id=target.user_id, ip_address=ip_address)
        logger.info("User %s activated by admin %s", target.user_id, admin.user_id)

    def list_employees_by_department(self, requester_id: int, department: str) -> Sequence[User]:
        self._require_manager(requester_id)
        department = require_non_empty(department, "Department")
        return self._users.list_employees_by_department(department)

    def list_employees_without_department(self, requester_id: int) -> Sequence[User]:
        self._require_manager(requester_id)
        return self._users.list_employees_without_department()

    def assign_department(
        self, requester_id: int, *, employee_id: int, department: str, ip_address: Optional[str] = None
    ) -> User:
        requester = self._require_manager(requester_id)
        employee = self._require_user(employee_id, "Employee")
        if not employee.is_employee:
            raise ValidationError("Can only assign department to employees")
        department = require_non_empty(department, "Department")

        self._users.set_department(employee.user_id, department=department)
        self._audit.record(
            requester.user_id,
            AuditAction.ASSIGN_DEPARTMENT,
            target_user_id=employee.user_id,
            details={"department": department},
            ip_address=ip_address,
        )
        self._notifications.notify_department_assigned(requester, employee, department)
        logger.info(
            "Employee %s moved from %s to %s by user %s",
            employee.user_id,
            employee.department,
            department,
            requester.user_id,
        )
        return self._require_user(employee.user_id)
