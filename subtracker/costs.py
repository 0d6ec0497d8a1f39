"""Price normalization between billing periods.

The weekly -> monthly factor is the fixed 4.33 weeks-per-month average,
not a calendar computation; totals depend on it being exactly 4.33.
"""
import math
from typing import NamedTuple

from subtracker.periods import MONTHLY, WEEKLY, YEARLY, canonical_period

WEEKS_PER_MONTH = 4.33
WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12


class Normalized(NamedTuple):
    weekly: float
    monthly: float
    yearly: float

    def rounded(self) -> "Normalized":
        return Normalized(*(round_money(v) for v in self))


def normalize(price: float, period: str) -> Normalized:
    """Weekly/monthly/yearly equivalents of ``price`` billed every ``period``.

    Values are unrounded; round with ``round_money`` (or ``.rounded()``)
    only where the number leaves the engine.
    """
    if period not in (WEEKLY, MONTHLY, YEARLY):
        period = canonical_period(period)

    if period == YEARLY:
        return Normalized(
            weekly=price / WEEKS_PER_YEAR,
            monthly=price / MONTHS_PER_YEAR,
            yearly=price,
        )
    if period == WEEKLY:
        return Normalized(
            weekly=price,
            monthly=price * WEEKS_PER_MONTH,
            yearly=price * WEEKS_PER_YEAR,
        )
    return Normalized(
        weekly=price * MONTHS_PER_YEAR / WEEKS_PER_YEAR,
        monthly=price,
        yearly=price * MONTHS_PER_YEAR,
    )


def round_money(value: float) -> float:
    # half away from zero on value * 100, then back to currency units
    scaled = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(scaled, value) / 100
