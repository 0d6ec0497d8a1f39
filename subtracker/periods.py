"""Calendar increments for the three billing periods.

Month and year steps clamp to the last valid day of the target month
(Jan 31 + 1 month is Feb 28/29, Feb 29 + 1 year is Feb 28) instead of
rolling into the following month.
"""
import calendar
import logging
from datetime import date, timedelta
from typing import Callable

logger = logging.getLogger(__name__)

WEEKLY = "Weekly"
MONTHLY = "Monthly"
YEARLY = "Yearly"
PERIODS = (WEEKLY, MONTHLY, YEARLY)


def canonical_period(value) -> str:
    """Match a period case-insensitively; anything unrecognized is Monthly."""
    text = str(value or "").strip().lower()
    for period in PERIODS:
        if period.lower() == text:
            return period
    logger.warning("Unrecognized period %r, falling back to %s", value, MONTHLY)
    return MONTHLY


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, last_day_of_month(year, month)))


def add_months(source: date, months: int) -> date:
    month_index = source.month - 1 + months
    target_year = source.year + month_index // 12
    target_month = month_index % 12 + 1
    return clamp_day(target_year, target_month, source.day)


def add_week(d: date) -> date:
    return d + timedelta(days=7)


def add_month(d: date) -> date:
    return add_months(d, 1)


def add_year(d: date) -> date:
    return add_months(d, 12)


_STEPS: dict[str, Callable[[date], date]] = {
    WEEKLY: add_week,
    MONTHLY: add_month,
    YEARLY: add_year,
}


def step_for(period: str) -> Callable[[date], date]:
    """Increment function for a period; unknown periods step monthly."""
    return _STEPS.get(period) or _STEPS[canonical_period(period)]


def advance(d: date, period: str) -> date:
    return step_for(period)(d)


def add_weeks(d: date, n: int) -> date:
    """n consecutive weekly steps from ``d``."""
    return d + timedelta(days=7 * n)
