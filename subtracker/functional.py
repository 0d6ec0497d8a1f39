from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Callable, Generic, TypeVar

from subtracker.domain import STATUSES, Subscription

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):
    """Optional value: Some(value) or Nothing()."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Some(f(self._value))

    def bind(self, f):
        return f(self._value)

    def get_or_else(self, default):
        return self._value

    def is_some(self) -> bool:
        return True

    def is_none(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default

    def is_some(self) -> bool:
        return False

    def is_none(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Right(value) on success, Left(error) on failure."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    @abstractmethod
    def is_left(self) -> bool:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Right(f(self._value))

    def bind(self, f):
        return f(self._value)

    def get_or_else(self, default):
        return self._value

    def get_error(self):
        raise ValueError("Cannot get error from Right")

    def is_right(self) -> bool:
        return True

    def is_left(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f):
        return self

    def bind(self, f):
        return self

    def get_or_else(self, default):
        return default

    def get_error(self):
        return self._error

    def is_right(self) -> bool:
        return False

    def is_left(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def parse_date(value: Any) -> Maybe[date]:
    """Parse a stored start date.

    Accepts date objects, "YYYY-MM-DD" and full ISO timestamps (only the
    calendar day is kept). Anything else is Nothing().
    """
    if isinstance(value, datetime):
        return Some(value.date())
    if isinstance(value, date):
        return Some(value)
    if not isinstance(value, str) or not value.strip():
        return Nothing()
    try:
        return Some(date.fromisoformat(value.strip()[:10]))
    except ValueError:
        return Nothing()


def validate_subscription(sub: Subscription) -> Either[dict, Subscription]:
    if not sub.name.strip():
        return Left({
            "error": "name_required",
            "message": f"Subscription {sub.id} has no name",
            "subscription_id": sub.id,
        })

    if sub.price < 0:
        return Left({
            "error": "negative_price",
            "message": f"Subscription {sub.name} has a negative price",
            "subscription_id": sub.id,
            "price": sub.price,
        })

    if parse_date(sub.start_date).is_none():
        return Left({
            "error": "invalid_start_date",
            "message": f"Subscription {sub.name} has no valid start date",
            "subscription_id": sub.id,
            "start_date": sub.start_date,
        })

    if sub.status not in STATUSES:
        return Left({
            "error": "invalid_status",
            "message": f"Subscription {sub.name} has unknown status {sub.status}",
            "subscription_id": sub.id,
            "status": sub.status,
        })

    return Right(sub)

