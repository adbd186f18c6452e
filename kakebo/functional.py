from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Optional, TypeVar

from kakebo.domain import Category, Record, RecordClass

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):
    """A value that may be absent. Used where a missing value is normal data."""

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f):
        return Some(f(self._value))

    def bind(self, f):
        return f(self._value)

    def get_or_else(self, default):
        return self._value

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

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


def maybe(value: Optional[T]) -> Maybe[T]:
    return Nothing() if value is None else Some(value)


class Either(Generic[E, T], ABC):
    """Right carries a valid value, Left carries an error dict."""

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

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


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
        raise ValueError("Right has no error")

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

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


_CATEGORY_BY_CODE = {index: cat for index, cat in enumerate(Category)}


def safe_category(code: Any) -> Maybe[Category]:
    """Resolve a category from an enum member, its name/value, or its legacy index."""
    if isinstance(code, Category):
        return Some(code)
    if code is None or isinstance(code, bool):
        return Nothing()
    if isinstance(code, int):
        return maybe(_CATEGORY_BY_CODE.get(code))
    text = str(code).strip()
    if text.isdigit():
        return maybe(_CATEGORY_BY_CODE.get(int(text)))
    for cat in Category:
        if text.lower() in (cat.value, cat.name.lower()):
            return Some(cat)
    return Nothing()


def _check_value(r: Record) -> Either[dict, Record]:
    if not isinstance(r.value, (int, float)) or isinstance(r.value, bool) or r.value < 0:
        return Left({
            "error": "invalid_value",
            "message": f"Record value must be a non-negative number, got {r.value!r}",
            "value": r.value,
        })
    return Right(r)


def _check_date(r: Record) -> Either[dict, Record]:
    # imported here, weeks imports this module for Maybe
    from kakebo.weeks import parse_date

    if parse_date(r.date).is_none():
        return Left({
            "error": "invalid_date",
            "message": f"Record date {r.date!r} is not a valid calendar day",
            "date": r.date,
        })
    if r.due_date is not None and parse_date(r.due_date).is_none():
        return Left({
            "error": "invalid_date",
            "message": f"Due date {r.due_date!r} is not a valid calendar day",
            "date": r.due_date,
        })
    return Right(r)


def _check_category(r: Record) -> Either[dict, Record]:
    if r.record_class is RecordClass.VARIABLE_EXPENSE:
        if not isinstance(r.category, Category):
            return Left({
                "error": "category_required",
                "message": f"Variable expense {r.name!r} needs one of {[c.value for c in Category]}",
                "category": r.category,
            })
    elif r.category is not None:
        return Left({
            "error": "category_not_allowed",
            "message": f"{r.record_class.value} records cannot carry a category",
            "record_class": r.record_class.value,
        })
    if r.due_date is not None and r.record_class is not RecordClass.FIXED_EXPENSE:
        return Left({
            "error": "due_date_not_allowed",
            "message": "Only fixed expenses carry a due date",
            "record_class": r.record_class.value,
        })
    return Right(r)


def validate_record(r: Record) -> Either[dict, Record]:
    if not isinstance(r.record_class, RecordClass):
        return Left({
            "error": "invalid_record_class",
            "message": f"Unknown record class {r.record_class!r}",
        })
    return Right(r).bind(_check_value).bind(_check_date).bind(_check_category)


def validate_goal_value(value: Any) -> Either[dict, float]:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return Left({"error": "invalid_goal", "message": f"Goal value {value!r} is not a number"})
    if amount != amount or amount < 0:
        return Left({"error": "invalid_goal", "message": f"Goal value must be >= 0, got {value!r}"})
    return Right(amount)
