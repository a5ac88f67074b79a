from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterator, List

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_billing_month(value) -> date:
    """Accept a date, a datetime, 'YYYY-MM' or 'YYYY-MM-DD' and return the first day of that month."""
    if isinstance(value, datetime):
        return month_start(value.date())
    if isinstance(value, date):
        return month_start(value)
    if isinstance(value, str):
        raw = value.strip()
        for fmt in ("%Y-%m-%d", "%Y-%m"):
            try:
                return month_start(datetime.strptime(raw, fmt).date())
            except ValueError:
                continue
    raise ValidationError(f"Invalid billing month {value!r}, expected YYYY-MM")


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    last_day = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=last_day)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every date in the inclusive range [start, end]."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def months_touched(start: date, end: date) -> List[date]:
    """First-of-month keys for each calendar month overlapping [start, end], in order."""
    months: List[date] = []
    current = month_start(start)
    while current <= end:
        months.append(current)
        # Jump past the end of the current month.
        current = month_start(month_end(current) + timedelta(days=1))
    return months


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch it.
    """
    return date.today()
