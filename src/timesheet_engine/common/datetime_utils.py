from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DAYS_PER_WEEK, HOURS_DECIMALS
from ..core.exceptions import InvalidRangeError, ValidationError

_HOURS_QUANT = Decimal(1).scaleb(-HOURS_DECIMALS)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as e:
        raise InvalidRangeError(f"Invalid date {value!r}, expected YYYY-MM-DD") from e


def parse_iso_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m")
    except (AttributeError, ValueError) as e:
        raise InvalidRangeError(f"Invalid month {value!r}, expected YYYY-MM") from e
    return parsed.year, parsed.month


def load_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown timezone {name!r}") from e


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current time in the reference timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz or timezone.utc)


def day_bounds(work_date: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Inclusive start/end instants of a calendar day in ``tz``."""
    return datetime.combine(work_date, time.min, tzinfo=tz), datetime.combine(work_date, time.max, tzinfo=tz)


def week_start_of(day: date) -> date:
    """Sunday that starts the week containing ``day``."""
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_end_of(week_start: date) -> date:
    return week_start + timedelta(days=DAYS_PER_WEEK - 1)


def require_week_start(week_start: date) -> date:
    if not isinstance(week_start, date) or isinstance(week_start, datetime):
        raise InvalidRangeError(f"week_start must be a date, got {week_start!r}")
    if week_start_of(week_start) != week_start:
        raise InvalidRangeError(f"week_start {week_start.isoformat()} is not a Sunday")
    return week_start


def resolve_week_start(day: date) -> date:
    """Any date -> the Sunday that starts its week."""
    if not isinstance(day, date) or isinstance(day, datetime):
        raise InvalidRangeError(f"week_start must be a date, got {day!r}")
    return week_start_of(day)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12 or not 1 <= int(year) <= 9999:
        raise InvalidRangeError(f"Invalid month {year}-{month}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def round_hours(value: float) -> float:
    """Round hours half-up to two decimals (2.675 -> 2.68, unlike round())."""
    return float(Decimal(repr(float(value))).quantize(_HOURS_QUANT, rounding=ROUND_HALF_UP))
