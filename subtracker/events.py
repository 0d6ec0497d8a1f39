from typing import Callable, Dict, Iterable, List, NamedTuple, Optional
from datetime import datetime

from subtracker.domain import Subscription
from subtracker.lifecycle import is_pause_due
from subtracker.recurrence import Instant, as_day

__all__ = ['event_bus', 'PAUSE_DUE', 'BUDGET_ALERT', 'Event', 'EventBus', 'run_renewal_tick']


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Event, dict], dict]]] = {}

    def subscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        self._subscribers.setdefault(name, [])
        if handler not in self._subscribers[name]:
            self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )
        return [handler(event, payload) for handler in self._subscribers[name]]

    def unsubscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


PAUSE_DUE = "PAUSE_DUE"
BUDGET_ALERT = "BUDGET_ALERT"

event_bus = EventBus()


def apply_pause_handler(event: Event, payload: dict) -> dict:
    """Transition the store has to persist for a due scheduled pause."""
    return {
        "id": payload.get("id"),
        "status": "paused",
        "pauseAtRenewal": False,
    }


def check_budget_handler(event: Event, payload: dict) -> dict:
    monthly = payload.get("monthly", 0)
    budget = payload.get("budget", 0)
    currency = payload.get("currency", "")

    if budget > 0 and monthly > budget:
        return {
            "alert": f"Monthly spend {monthly:.2f} {currency} is over the budget of {budget:.2f} {currency}",
            "spent": monthly,
            "budget": budget,
        }
    return {}


def run_renewal_tick(
    subs: Iterable[Subscription],
    now: Instant = None,
    bus: Optional[EventBus] = None,
    since: Instant = None,
) -> List[dict]:
    """Publish PAUSE_DUE for every subscription whose scheduled pause is due.

    Returns the handlers' results in subscription order.
    """
    bus = bus or event_bus
    today = as_day(now)
    results = []
    for sub in subs:
        if is_pause_due(sub, today, since):
            payload = {"id": sub.id, "name": sub.name, "date": today.isoformat()}
            results.extend(bus.publish(PAUSE_DUE, payload))
    return results


def register_default_handlers(bus: Optional[EventBus] = None) -> None:
    bus = bus or event_bus
    bus.subscribe(PAUSE_DUE, apply_pause_handler)
    bus.subscribe(BUDGET_ALERT, check_budget_handler)


register_default_handlers()
