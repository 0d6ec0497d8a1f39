import asyncio
from datetime import date
from typing import Dict, List

from subtracker.aggregator import day_total
from subtracker.domain import Subscription
from subtracker.recurrence import Instant, month_calendar, month_start


async def calendars_for_months(
    subs: List[Subscription], months: List[date], now: Instant = None
) -> Dict[date, Dict[date, List[Subscription]]]:
    """Build the calendar of several months concurrently.

    months: any day inside each wanted month. Returns mapping
    first-of-month -> {billing day -> subscriptions}.
    """
    async def one_month(month: date) -> tuple[date, Dict[date, List[Subscription]]]:
        calendar_map = month_calendar(subs, month, now)
        await asyncio.sleep(0)  # cooperate
        return month_start(month), calendar_map

    results = await asyncio.gather(*(one_month(m) for m in months))
    return {k: v for k, v in results}


async def projected_charges(
    subs: List[Subscription], months: List[date], now: Instant = None
) -> Dict[date, float]:
    """Sum of prices billed in each month according to the calendar projection."""
    calendars = await calendars_for_months(subs, months, now)
    return {
        month: day_total(sub for day_subs in calendar_map.values() for sub in day_subs)
        for month, calendar_map in calendars.items()
    }
