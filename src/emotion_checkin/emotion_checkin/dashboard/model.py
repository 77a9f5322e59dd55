"""Dashboard read models and the aggregation helpers behind them.

Everything here is computed in Python from check-in lists that the
repositories already filtered by date range.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from ..checkins.model import EmotionCheckin
from ..common.datetime_utils import iso_or_none
from ..core.constants import MAX_STREAK_DAYS
from ..core.enums import EmotionLevel


def _pct(part: int, whole: int) -> float:
    return round(part * 100.0 / whole, 2) if whole else 0.0


def _mean(values: Sequence[float]) -> float:
    return round(sum(values) / len(values), 3) if values else 0.0


def count_levels(checkins: Iterable[EmotionCheckin]) -> dict[int, int]:
    counts = Counter(c.emotion_level for c in checkins)
    return {level.value: counts.get(level.value, 0) for level in EmotionLevel}


def average_sentiment(checkins: Iterable[EmotionCheckin]) -> float:
    """Mean AI score over analysed check-ins; 0.0 when none were analysed."""
    return _mean([c.sentiment_score for c in checkins if c.sentiment_score is not None])


def checkin_streak(checkin_dates: Iterable[date], today: date, *, cap: int = MAX_STREAK_DAYS) -> int:
    days = set(checkin_dates)
    streak = 0
    current = today
    while current in days and streak < cap:
        streak += 1
        current -= timedelta(days=1)
    return streak


def consecutive_bad_days(checkins: Iterable[EmotionCheckin], today: date) -> int:
    bad_days = {c.checkin_date for c in checkins if c.is_bad_mood}
    count = 0
    current = today
    while current in bad_days:
        count += 1
        current -= timedelta(days=1)
    return count


@dataclass(frozen=True)
class EmotionStats:
    total_checkins: int
    positive_count: int
    neutral_count: int
    negative_count: int
    average_sentiment_score: float
    mood_distribution: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_checkins(cls, checkins: Sequence[EmotionCheckin]) -> "EmotionStats":
        levels = count_levels(checkins)
        distribution = Counter(c.emotion_name or "Unknown" for c in checkins)
        return cls(
            total_checkins=len(checkins),
            positive_count=levels[EmotionLevel.POSITIVE.value],
            neutral_count=levels[EmotionLevel.NEUTRAL.value],
            negative_count=levels[EmotionLevel.NEGATIVE.value],
            average_sentiment_score=average_sentiment(checkins),
            mood_distribution=dict(distribution),
        )

    def to_dict(self) -> dict:
        return {
            "total_checkins": self.total_checkins,
            "positive_count": self.positive_count,
            "neutral_count": self.neutral_count,
            "negative_count": self.negative_count,
            "positive_percentage": _pct(self.positive_count, self.total_checkins),
            "neutral_percentage": _pct(self.neutral_count, self.total_checkins),
            "negative_percentage": _pct(self.negative_count, self.total_checkins),
            "average_sentiment_score": self.average_sentiment_score,
            "mood_distribution": self.mood_distribution,
        }


@dataclass(frozen=True)
class DepartmentStats:
    department: str
    total_employees: int
    active_employees: int
    today_checkins: int
    weekly_checkins: int
    monthly_checkins: int
    positive_count: int
    neutral_count: int
    negative_count: int
    average_mood_score: float

    @property
    def inactive_employees(self) -> int:
        return self.total_employees - self.active_employees

    @property
    def checkin_rate(self) -> float:
        return _pct(self.today_checkins, self.total_employees)

    def to_dict(self) -> dict:
        return {
            "department": self.department,
            "total_employees": self.total_employees,
            "active_employees": self.active_employees,
            "inactive_employees": self.inactive_employees,
            "checkin_rate": self.checkin_rate,
            "today_checkins": self.today_checkins,
            "weekly_checkins": self.weekly_checkins,
            "monthly_checkins": self.monthly_checkins,
            "positive_count": self.positive_count,
            "neutral_count": self.neutral_count,
            "negative_count": self.negative_count,
            "average_mood_score": self.average_mood_score,
        }


@dataclass(frozen=True)
class EmployeeInsight:
    employee_id: int
    name: str
    email: str
    department: Optional[str]
    position: Optional[str]
    is_active: bool
    last_checkin: Optional[date]
    last_mood: Optional[str]
    last_mood_level: Optional[int]
    last_mood_emoji: Optional[str]
    checkin_streak: int
    checkin_rate: float
    weekly_positive: int
    weekly_neutral: int
    weekly_negative: int
    monthly_positive: int
    monthly_neutral: int
    monthly_negative: int
    average_sentiment: float
    consecutive_bad_days: int
    is_high_risk: bool
    recent_comment: Optional[str] = None
    has_comment: bool = False

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
            "position": self.position,
            "is_active": self.is_active,
            "last_checkin": iso_or_none(self.last_checkin),
            "last_mood": self.last_mood,
            "last_mood_level": self.last_mood_level,
            "last_mood_emoji": self.last_mood_emoji,
            "checkin_streak": self.checkin_streak,
            "checkin_rate": self.checkin_rate,
            "weekly_positive": self.weekly_positive,
            "weekly_neutral": self.weekly_neutral,
            "weekly_negative": self.weekly_negative,
            "monthly_positive": self.monthly_positive,
            "monthly_neutral": self.monthly_neutral,
            "monthly_negative": self.monthly_negative,
            "average_sentiment": self.average_sentiment,
            "consecutive_bad_days": self.consecutive_bad_days,
            "is_high_risk": self.is_high_risk,
            "recent_comment": self.recent_comment,
            "has_comment": self.has_comment,
        }
