from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the service timezone, as a naive datetime.

    Note: Wrapped so tests can patch/mock easier. MySQL DATETIME columns are
    naive, so the tzinfo is dropped after conversion.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def time_ago(moment: Optional[datetime], *, now: datetime) -> Optional[str]:
    if moment is None:
        return None

    minutes = int((now - moment).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return _ago(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _ago(hours, "hour")

    return _ago(hours // 24, "day")


def _ago(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def iso_or_none(value) -> Optional[str]:
    return value.isoformat() if value is not None else None
