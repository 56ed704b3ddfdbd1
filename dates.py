# dates.py
"""
Calendar helpers for FitPlan.

Everything here works on plain calendar dates (datetime.date), never on
timestamps, so day numbering cannot drift with local timezone or DST.
"""

import calendar
from datetime import date, datetime, timezone

from errors import InvalidInput


def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            # full ISO timestamps; "Z" is only understood natively from 3.11
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise InvalidInput(f"Malformed date: {value!r} (expected YYYY-MM-DD)")
    raise InvalidInput(f"Malformed date: {value!r}")


def today_utc():
    return datetime.now(timezone.utc).date()


def day_number(anchor, target):
    """Day 1 is the anchor itself; earlier dates give 0 or negative values."""
    return (target - anchor).days + 1


def day_of_week(d):
    # date.weekday() is Monday=0; plans use Sunday=0
    return (d.weekday() + 1) % 7


def validate_month(year, month):
    if not isinstance(year, int) or isinstance(year, bool):
        raise InvalidInput(f"Year must be an integer, got {year!r}")
    if not isinstance(month, int) or isinstance(month, bool):
        raise InvalidInput(f"Month must be an integer, got {month!r}")
    if not date.min.year <= year <= date.max.year:
        raise InvalidInput(f"Year out of range: {year}")
    if not 1 <= month <= 12:
        raise InvalidInput(f"Month must be between 1 and 12, got {month}")


def enumerate_month(year, month):
    """Every date of the month, first to last."""
    validate_month(year, month)
    last = calendar.monthrange(year, month)[1]
    return [date(year, month, d) for d in range(1, last + 1)]


def day_one_from_measurements(measurements):
    """Date of the earliest measurement, or None for an empty history."""
    dates = []
    for m in measurements or []:
        raw = m["date"] if isinstance(m, dict) else m.date
        dates.append(parse_date(raw))
    return min(dates) if dates else None
