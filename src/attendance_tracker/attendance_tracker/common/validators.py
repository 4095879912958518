from __future__ import annotations

from datetime import date

from ..core.exceptions import ValidationError


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("Start date must not be after end date")


def require_user_id(value) -> int:
    try:
        user_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("user_id is invalid")
    if user_id <= 0:
        raise ValidationError("user_id is invalid")
    return user_id
