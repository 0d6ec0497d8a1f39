from subtracker.domain import Subscription
from subtracker.periods import canonical_period


def by_status(status: str):
    def _filter(s: Subscription) -> bool:
        return s.status == status

    return _filter


def by_category(category: str):
    def _filter(s: Subscription) -> bool:
        return s.category == category

    return _filter


def by_period(period: str):
    wanted = canonical_period(period)

    def _filter(s: Subscription) -> bool:
        return s.period == wanted

    return _filter


def by_name(term: str):
    """Case-insensitive substring match on the name; an empty term matches all."""
    needle = term.strip().lower()

    def _filter(s: Subscription) -> bool:
        return needle in s.name.lower()

    return _filter
