from typing import Callable, Iterable, Iterator

from subtracker.domain import Subscription, Totals


def iter_subscriptions(
    subs: Iterable[Subscription], pred: Callable[[Subscription], bool]
) -> Iterator[Subscription]:
    for s in subs:
        if pred(s):
            yield s


def top_categories(totals: Totals, k: int) -> Iterator[tuple[str, float]]:
    ordered = sorted(totals.by_category.items(), key=lambda item: item[1], reverse=True)

    for name, monthly in ordered[: max(0, k)]:
        yield name, monthly
