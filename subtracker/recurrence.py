"""Billing-date projection.

Every function takes the reference instant explicitly; ``None`` means
today's wall-clock date. Occurrences are reached by stepping from the
start date with the ``periods`` increments, so a clamped month-end date
carries forward (Jan 31, Feb 29, Mar 29).
"""
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional, Union

from subtracker.domain import PAUSED, Subscription
from subtracker.functional import parse_date
from subtracker.periods import (
    MONTHLY,
    PERIODS,
    WEEKLY,
    YEARLY,
    add_month,
    add_weeks,
    canonical_period,
    clamp_day,
    step_for,
)

logger = logging.getLogger(__name__)

Instant = Union[date, datetime, None]


def as_day(now: Instant = None) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def resolve_start(sub: Subscription, today: date) -> date:
    """Start date of ``sub``; missing or unparseable dates count as ``today``."""
    start = parse_date(sub.start_date)
    if start.is_none():
        logger.warning(
            "Subscription %s has invalid start date %r, projecting from %s",
            sub.id, sub.start_date, today.isoformat(),
        )
    return start.get_or_else(today)


def _period_of(sub: Subscription) -> str:
    return sub.period if sub.period in PERIODS else canonical_period(sub.period)


def first_occurrence_after(anchor: date, period: str, reference: date, inclusive: bool = False) -> date:
    """First billing date after ``reference`` (or on it, when ``inclusive``).

    Steps forward one period at a time from ``anchor``. Weekly steps have
    no clamping, so whole weeks are skipped in one jump.
    """
    if anchor > reference or (inclusive and anchor == reference):
        return anchor

    step = step_for(period)
    candidate = anchor
    if period == WEEKLY:
        candidate = add_weeks(anchor, (reference - anchor).days // 7)
    while candidate < reference or (candidate == reference and not inclusive):
        candidate = step(candidate)
    return candidate


def next_occurrence(sub: Subscription, now: Instant = None) -> date:
    """Next billing date strictly after ``now``.

    A subscription that has not started yet bills first on its start
    date. A billing date equal to ``now`` is already current, so the
    following one is returned.
    """
    today = as_day(now)
    start = resolve_start(sub, today)
    return first_occurrence_after(start, _period_of(sub), today)


def due_occurrence(sub: Subscription, now: Instant = None) -> date:
    """Billing date on or after ``now``: equals ``now`` on a billing day."""
    today = as_day(now)
    start = resolve_start(sub, today)
    return first_occurrence_after(start, _period_of(sub), today, inclusive=True)


def has_occurrence_between(sub: Subscription, since: Instant, until: Instant) -> bool:
    """Whether ``sub`` bills on some day in ``(since, until]``."""
    after = as_day(since)
    upto = as_day(until)
    if upto <= after:
        return False
    start = resolve_start(sub, upto)
    return first_occurrence_after(start, _period_of(sub), after) <= upto


def occurrences_in_month(sub: Subscription, month: Instant = None, now: Instant = None) -> tuple[date, ...]:
    """Billing dates of ``sub`` inside the calendar month containing ``month``.

    Monthly subscriptions show on their anchor day every month from the
    start month on, yearly ones on the anchor month only. Weekly
    subscriptions only show their literal start date; weekly repetition
    is not projected onto the calendar.
    """
    if sub.status == PAUSED:
        return ()

    ref = as_day(month)
    start = resolve_start(sub, as_day(now))
    if (ref.year, ref.month) < (start.year, start.month):
        return ()

    period = _period_of(sub)
    if period == MONTHLY:
        return (clamp_day(ref.year, ref.month, start.day),)
    if period == YEARLY and ref.month == start.month:
        return (clamp_day(ref.year, ref.month, start.day),)
    if period == WEEKLY and (ref.year, ref.month) == (start.year, start.month):
        return (start,)
    return ()


def month_calendar(
    subs: Iterable[Subscription], month: Instant = None, now: Instant = None
) -> dict[date, list[Subscription]]:
    """Map each billing day of the month to the subscriptions due that day.

    Days are in ascending order; subscriptions within a day keep input order.
    """
    by_day: dict[date, list[Subscription]] = defaultdict(list)
    for sub in subs:
        for day in occurrences_in_month(sub, month, now):
            by_day[day].append(sub)
    return {day: by_day[day] for day in sorted(by_day)}


def month_start(month: Instant = None) -> date:
    return as_day(month).replace(day=1)


def months_ahead(month: Instant, count: int) -> list[date]:
    """First days of ``count`` consecutive months starting at ``month``."""
    first = month_start(month)
    months = []
    for _ in range(max(0, count)):
        months.append(first)
        first = add_month(first)
    return months
