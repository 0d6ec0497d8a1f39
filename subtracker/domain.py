import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple, Optional

from subtracker import config
from subtracker.periods import canonical_period

logger = logging.getLogger(__name__)

ACTIVE = "active"
PAUSED = "paused"
STATUSES = (ACTIVE, PAUSED)


def _coerce_price(raw, sub_id: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Subscription %s has non-numeric price %r, using 0", sub_id, raw)
        return 0.0
    if not math.isfinite(value):
        logger.warning("Subscription %s has non-finite price %r, using 0", sub_id, raw)
        return 0.0
    return value


def _coerce_flag(raw) -> bool:
    # sqlite stores the flag as 0/1, forms post it as text
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return bool(raw)


def _coerce_status(raw, sub_id: str) -> str:
    status = str(raw or ACTIVE).strip().lower()
    if status not in STATUSES:
        logger.warning("Subscription %s has unknown status %r, using %s", sub_id, raw, ACTIVE)
        return ACTIVE
    return status


@dataclass(frozen=True)
class Subscription:
    id: str
    name: str
    price: float                      # single implicit currency, >= 0
    period: str                       # "Weekly" | "Monthly" | "Yearly"
    start_date: Optional[str] = None  # "YYYY-MM-DD", anchors recurrence
    status: str = ACTIVE              # "active" | "paused"
    pause_at_renewal: bool = False
    category: str = config.DEFAULT_CATEGORY
    description: str = ""
    url: str = ""
    icon: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Subscription":
        """Build a record from the store's row shape (camelCase or snake_case keys)."""
        sub_id = str(data.get("id", ""))
        start = data.get("startDate", data.get("start_date"))
        pause_flag = data.get("pauseAtRenewal", data.get("pause_at_renewal", False))
        return cls(
            id=sub_id,
            name=str(data.get("name", "")),
            price=_coerce_price(data.get("price", 0), sub_id),
            period=canonical_period(data.get("period")),
            start_date=str(start) if start else None,
            status=_coerce_status(data.get("status"), sub_id),
            pause_at_renewal=_coerce_flag(pause_flag),
            category=str(data.get("category") or config.DEFAULT_CATEGORY),
            description=str(data.get("description") or ""),
            url=str(data.get("url") or ""),
            icon=str(data.get("icon") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "period": self.period,
            "startDate": self.start_date,
            "status": self.status,
            "pauseAtRenewal": self.pause_at_renewal,
            "category": self.category,
            "description": self.description,
            "url": self.url,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class Settings:
    budget: float = 0.0  # 0 means "no budget set"
    currency: str = config.DEFAULT_CURRENCY

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        # the settings table stores every value as text
        try:
            budget = float(data.get("budget") or 0)
        except (TypeError, ValueError):
            logger.warning("Unparseable budget %r, treating as unset", data.get("budget"))
            budget = 0.0
        if not math.isfinite(budget):
            logger.warning("Non-finite budget %r, treating as unset", data.get("budget"))
            budget = 0.0
        return cls(budget=budget, currency=str(data.get("currency") or config.DEFAULT_CURRENCY))


# Engine output, recomputed on every call
@dataclass(frozen=True)
class Totals:
    weekly: float
    monthly: float
    yearly: float
    by_category: dict = field(default_factory=dict)  # category -> monthly equivalent

    def to_dict(self) -> dict:
        return {
            "weekly": self.weekly,
            "monthly": self.monthly,
            "yearly": self.yearly,
            "byCategory": dict(self.by_category),
        }


class UpcomingPayment(NamedTuple):
    subscription: Subscription
    next_payment_date: date
    days_until: int


class BudgetUsage(NamedTuple):
    budget: float
    spent: float
    remaining: float
    percent: float
    over_budget: bool
