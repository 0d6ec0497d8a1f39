from typing import Any, Callable, Dict, Iterable, Sequence

from subtracker import config
from subtracker.aggregator import budget_usage, category_breakdown, compute_totals, upcoming
from subtracker.domain import Settings, Subscription
from subtracker.recurrence import Instant, as_day


class DashboardService:
    """Facade that runs injected calculators over one snapshot.

    calculators: sequence of functions taking (subscriptions, settings, now, acc) -> dict
    (partial results). ``acc`` holds everything earlier calculators returned,
    so later steps can build on the totals instead of recomputing them.
    """

    def __init__(self, calculators: Sequence[Callable[..., Dict[str, Any]]]):
        self.calculators = calculators

    def overview(self, subscriptions: Iterable[Subscription], settings: Settings, now: Instant = None) -> Dict[str, Any]:
        subs = tuple(subscriptions)
        today = as_day(now)
        report = {"date": today.isoformat(), "steps": [], "result": {}}

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(subs, settings, today, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


def totals_calculator(subs, settings, now, acc):
    return {"totals": compute_totals(subs, now)}


def budget_calculator(subs, settings, now, acc):
    totals = acc.get("totals") or compute_totals(subs, now)
    return {"budget": budget_usage(totals, settings)}


def upcoming_calculator(subs, settings, now, acc):
    return {"upcoming": upcoming(subs, now, config.UPCOMING_LIMIT)}


def categories_calculator(subs, settings, now, acc):
    totals = acc.get("totals") or compute_totals(subs, now)
    return {"categories": category_breakdown(totals)}


DEFAULT_CALCULATORS = (
    totals_calculator,
    budget_calculator,
    upcoming_calculator,
    categories_calculator,
)


def default_dashboard() -> DashboardService:
    return DashboardService(calculators=DEFAULT_CALCULATORS)
