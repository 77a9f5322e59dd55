from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_text_or_none(value: Any, field_name: str) -> Optional[str]:
    """JSON bodies can carry numbers or lists where text is expected."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def require_non_empty(value: Optional[str], field_name: str) -> str:
    value = require_text_or_none(value, field_name)
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    value = require_text_or_none(value, field_name)
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email is not valid")
    return email


def optional_text(value: Optional[str], field_name: str = "Value") -> Optional[str]:
    """Strip text input, mapping blank strings to None."""
    value = require_text_or_none(value, field_name)
    if value is None:
        return None
    value = value.strip()
    return value or None
