"""Active/paused state machine.

Transitions return new records; persisting them is the store's job.
A scheduled pause (``pause_at_renewal``) turns into ``paused`` once the
subscription's billing date arrives, and the flag is cleared in the
same step so it fires once per due date.
"""
import logging
from dataclasses import replace
from typing import Iterable

from subtracker.domain import ACTIVE, PAUSED, Subscription
from subtracker.functional import parse_date
from subtracker.recurrence import Instant, as_day, due_occurrence, has_occurrence_between

logger = logging.getLogger(__name__)


def pause(sub: Subscription) -> Subscription:
    return replace(sub, status=PAUSED, pause_at_renewal=False)


def resume(sub: Subscription) -> Subscription:
    """Reactivate; a pending scheduled pause is cancelled."""
    return replace(sub, status=ACTIVE, pause_at_renewal=False)


def schedule_pause(sub: Subscription) -> Subscription:
    if sub.status != ACTIVE:
        return sub
    return replace(sub, pause_at_renewal=True)


def cancel_scheduled_pause(sub: Subscription) -> Subscription:
    return replace(sub, pause_at_renewal=False)


def is_pause_due(sub: Subscription, now: Instant = None, since: Instant = None) -> bool:
    """Whether the scheduled pause of ``sub`` should be applied at ``now``.

    Without ``since`` the pause is due on a billing day itself. With
    ``since`` (the previous trigger run) any billing day in
    ``(since, now]`` counts, so a missed run still applies it.
    A record without a readable start date has no billing day and never
    becomes due.
    """
    if not sub.pause_at_renewal or sub.status != ACTIVE:
        return False
    if parse_date(sub.start_date).is_none():
        logger.warning("Subscription %s has no valid start date, scheduled pause kept pending", sub.id)
        return False
    today = as_day(now)
    if since is not None:
        return has_occurrence_between(sub, since, today)
    return due_occurrence(sub, today) <= today


def apply_scheduled_pause(sub: Subscription, now: Instant = None, since: Instant = None) -> Subscription:
    if not is_pause_due(sub, now, since):
        return sub
    logger.info("Scheduled pause of subscription %s (%s) applied", sub.id, sub.name)
    return pause(sub)


def apply_due_pauses(
    subs: Iterable[Subscription], now: Instant = None, since: Instant = None
) -> tuple[Subscription, ...]:
    return tuple(apply_scheduled_pause(sub, now, since) for sub in subs)
