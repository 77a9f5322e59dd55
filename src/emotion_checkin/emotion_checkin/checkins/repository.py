from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import EmotionCheckin


class CheckinRepository(Protocol):
    """Check-in persistence. Read methods skip soft-deleted rows."""

    def exists_for_employee_on(self, employee_id: int, checkin_date: date) -> bool:
        """True if the day is already used, including soft-deleted check-ins."""
        raise NotImplementedError

    def get_by_id(self, checkin_id: int) -> Optional[EmotionCheckin]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, checkin_date: date) -> Optional[EmotionCheckin]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        emotion_level: int,
        emotion_type_id: int,
        comment: Optional[str],
        checkin_time: datetime,
        checkin_date: date,
    ) -> int:
        """Raise ConflictError when (employee, date) already exists."""
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[EmotionCheckin]:
        """Inclusive range, newest first."""
        raise NotImplementedError

    def list_recent_for_employee(self, employee_id: int, limit: int) -> Sequence[EmotionCheckin]:
        raise NotImplementedError

    def get_latest_for_employee(self, employee_id: int) -> Optional[EmotionCheckin]:
        raise NotImplementedError

    def list_for_department(self, department: str, *, start_date: date, end_date: date) -> Sequence[EmotionCheckin]:
        raise NotImplementedError

    def count_for_date(self, checkin_date: date) -> int:
        raise NotImplementedError

    def soft_delete(self, checkin_id: int) -> bool:
        raise NotImplementedError
