"""Epoch-millisecond helpers.

Timestamps are integer milliseconds since the Unix epoch everywhere inside the
package. Calendar types only appear at query boundaries (date ranges, daily
summaries) and are converted back to milliseconds immediately.
"""

from __future__ import annotations

import calendar
import time
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Optional

from ..core.exceptions import ValidationError


def now_millis() -> int:
    """Current server time in epoch ms.

    Note: Wrapped so tests can patch it.
    """
    return time.time_ns() // 1_000_000


def to_epoch_millis(value: Any, field_name: str = "timestamp") -> int:
    """Normalize an ingress timestamp (int, integral float or numeric string) to int ms."""

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer number of milliseconds")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field_name} must be an integer number of milliseconds")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            f = float(text)
        except ValueError:
            raise ValidationError(f"{field_name} must be an integer number of milliseconds") from None
        if not f.is_integer():
            raise ValidationError(f"{field_name} must be an integer number of milliseconds")
        return int(f)
    raise ValidationError(f"{field_name} must be an integer number of milliseconds")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None


def datetime_to_millis(value: datetime) -> int:
    # Naive datetimes are interpreted as server local time.
    return int(round(value.timestamp() * 1000))


def millis_to_datetime(value: int, tz: Optional[tzinfo] = None) -> datetime:
    seconds, millis = divmod(int(value), 1000)
    return datetime.fromtimestamp(seconds, tz=tz) + timedelta(milliseconds=millis)


def millis_to_date(value: int, tz: Optional[tzinfo] = None) -> date:
    return millis_to_datetime(value, tz).date()


def day_bounds_millis(day: date, tz: Optional[tzinfo] = None) -> tuple[int, int]:
    """Inclusive [start, end] ms of a calendar day."""

    start = datetime(day.year, day.month, day.day, tzinfo=tz)
    end = start + timedelta(days=1)
    return datetime_to_millis(start), datetime_to_millis(end) - 1


def range_bounds_millis(start_day: date, end_day: date, tz: Optional[tzinfo] = None) -> tuple[int, int]:
    if end_day < start_day:
        raise ValidationError("end_date must not be before start_date")
    return day_bounds_millis(start_day, tz)[0], day_bounds_millis(end_day, tz)[1]


def month_bounds_millis(year: int, month: int, tz: Optional[tzinfo] = None) -> tuple[int, int]:
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    last_day = calendar.monthrange(year, month)[1]
    return range_bounds_millis(date(year, month, 1), date(year, month, last_day), tz)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]
