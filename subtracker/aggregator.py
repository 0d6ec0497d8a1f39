"""Spend totals, budget comparison and upcoming payments.

All numbers are summed unrounded and rounded once on the way out.
"""
from collections import defaultdict
from typing import Iterable, Optional

from subtracker import config
from subtracker.costs import MONTHS_PER_YEAR, normalize, round_money
from subtracker.domain import ACTIVE, PAUSED, BudgetUsage, Settings, Subscription, Totals, UpcomingPayment
from subtracker.recurrence import Instant, as_day, next_occurrence


def category_of(sub: Subscription) -> str:
    return sub.category or config.DEFAULT_CATEGORY


def compute_totals(subs: Iterable[Subscription], now: Instant = None) -> Totals:
    """Weekly, monthly and yearly spend of non-paused subscriptions.

    ``by_category`` holds monthly equivalents keyed by category. ``now``
    is accepted for symmetry with the other snapshot queries; totals do
    not depend on the date.
    """
    weekly = monthly = yearly = 0.0
    by_category: dict[str, float] = defaultdict(float)

    for sub in subs:
        if sub.status == PAUSED:
            continue
        amounts = normalize(sub.price, sub.period)
        weekly += amounts.weekly
        monthly += amounts.monthly
        yearly += amounts.yearly
        by_category[category_of(sub)] += amounts.monthly

    return Totals(
        weekly=round_money(weekly),
        monthly=round_money(monthly),
        yearly=round_money(yearly),
        by_category={cat: round_money(v) for cat, v in by_category.items()},
    )


def upcoming(
    subs: Iterable[Subscription],
    now: Instant = None,
    limit: Optional[int] = config.UPCOMING_LIMIT,
) -> list[UpcomingPayment]:
    """Active subscriptions ordered by next billing date.

    Equal dates keep input (store) order. ``limit=None`` returns all.
    """
    today = as_day(now)
    payments = []
    for sub in subs:
        if sub.status != ACTIVE:
            continue
        due = next_occurrence(sub, today)
        payments.append(UpcomingPayment(sub, due, (due - today).days))

    payments.sort(key=lambda p: p.next_payment_date)
    if limit is None:
        return payments
    return payments[: max(0, limit)]


def budget_usage(totals: Totals, settings: Settings) -> BudgetUsage:
    budget = settings.budget
    spent = totals.monthly
    if budget <= 0:
        return BudgetUsage(budget=budget, spent=spent, remaining=0.0, percent=0.0, over_budget=False)

    return BudgetUsage(
        budget=budget,
        spent=spent,
        remaining=round_money(budget - spent),
        percent=round_money(spent / budget * 100),
        over_budget=spent > budget,
    )


def spend_breakdown(totals: Totals) -> list[dict]:
    # yearly is shown per month so the three bars share a scale
    return [
        {"period": "Weekly", "value": totals.weekly},
        {"period": "Monthly", "value": totals.monthly},
        {"period": "Yearly", "value": round_money(totals.yearly / MONTHS_PER_YEAR)},
    ]


def category_breakdown(totals: Totals) -> list[dict]:
    return [
        {"category": category, "monthly": amount}
        for category, amount in sorted(totals.by_category.items(), key=lambda pair: pair[1], reverse=True)
    ]


def day_total(subs: Iterable[Subscription]) -> float:
    """Sum of raw prices billed on one calendar day."""
    return round_money(sum(sub.price for sub in subs))
