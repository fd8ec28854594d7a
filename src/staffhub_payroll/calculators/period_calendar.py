"""Working-day calendar for monthly pay periods."""

from __future__ import annotations

import calendar
from datetime import date

from staffhub_payroll.errors import PeriodValidationError, ZeroWorkingDaysError

# date.weekday(): Monday=0 .. Sunday=6
_WEEKEND = {5, 6}


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise PeriodValidationError(month, None, f"month must be 1-12, got {month}")


def period_bounds(month: int, year: int) -> tuple[date, date]:
    """Return the first and last calendar day of the period."""
    _check_month(month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def working_days(month: int, year: int) -> int:
    """Count Monday-Friday days in the month."""
    _check_month(month)
    last_day = calendar.monthrange(year, month)[1]
    return sum(
        1
        for day in range(1, last_day + 1)
        if date(year, month, day).weekday() not in _WEEKEND
    )


def require_working_days(month: int, year: int) -> int:
    """Working days for the period, raising if there are none."""
    days = working_days(month, year)
    if days == 0:
        raise ZeroWorkingDaysError(month, year)
    return days


def date_in_period(value: date | None, start: date, end: date) -> bool:
    """Check if a date falls within [start, end]."""
    return value is not None and start <= value <= end
