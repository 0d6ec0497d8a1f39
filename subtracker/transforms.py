import json
import logging
from dataclasses import replace
from typing import Iterable, Tuple

import pandas as pd

from subtracker.costs import normalize, round_money
from subtracker.domain import Settings, Subscription
from subtracker.functional import validate_subscription
from subtracker.recurrence import Instant, as_day, next_occurrence

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "id", "name", "price", "period", "category", "startDate",
    "status", "pauseAtRenewal", "nextPaymentDate", "monthlyCost",
]


def load_snapshot(path: str) -> Tuple[Tuple[Subscription, ...], Settings]:
    """Read the store's JSON export: {"subscriptions": [...], "settings": {...}}.

    Subscriptions keep the order of the file (store order).
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    subscriptions = tuple(Subscription.from_dict(s) for s in data.get("subscriptions", []))
    settings = Settings.from_dict(data.get("settings", {}))
    logger.info("Loaded %d subscriptions from %s", len(subscriptions), path)
    return subscriptions, settings


def validation_errors(subs: Iterable[Subscription]) -> list[dict]:
    return [
        result.get_error()
        for result in map(validate_subscription, subs)
        if result.is_left()
    ]


def add_subscription(
    subs: Tuple[Subscription, ...], s: Subscription
) -> Tuple[Subscription, ...]:
    return subs + (s,)


def replace_subscription(
    subs: Tuple[Subscription, ...], updated: Subscription
) -> Tuple[Subscription, ...]:
    return tuple(updated if s.id == updated.id else s for s in subs)


def remove_subscription(
    subs: Tuple[Subscription, ...], sub_id: str
) -> Tuple[Subscription, ...]:
    return tuple(filter(lambda s: s.id != sub_id, subs))


def update_settings(settings: Settings, **changes) -> Settings:
    return replace(settings, **changes)


def subscriptions_frame(subs: Iterable[Subscription], now: Instant = None) -> pd.DataFrame:
    """Table of records with their next payment date and monthly cost."""
    today = as_day(now)
    rows = [
        {
            **s.to_dict(),
            "nextPaymentDate": next_occurrence(s, today),
            "monthlyCost": round_money(normalize(s.price, s.period).monthly),
        }
        for s in subs
    ]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame(rows)
    df["nextPaymentDate"] = pd.to_datetime(df["nextPaymentDate"])
    return df[FRAME_COLUMNS]
