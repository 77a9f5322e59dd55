from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this Protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def exists_by_email(self, email: str) -> bool:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        department: Optional[str],
        position: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, *, name: str, email: str, position: Optional[str]) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_department(self, user_id: int, *, department: Optional[str]) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def search_by_name(self, keyword: str) -> Sequence[User]:
        raise NotImplementedError

    def list_employees_by_department(self, department: str) -> Sequence[User]:
        """All EMPLOYEE users of a department, active or not."""
        raise NotImplementedError

    def list_active_employees(self) -> Sequence[User]:
        raise NotImplementedError

    def list_active_hr(self) -> Sequence[User]:
        raise NotImplementedError

    def list_employees_without_department(self) -> Sequence[User]:
        raise NotImplementedError

    def list_departments(self) -> Sequence[str]:
        raise NotImplementedError

    def count_active_employees(self) -> int:
        raise NotImplementedError
