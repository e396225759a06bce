from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Generic, Optional, TypeVar

from finboard.domain import Kind, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> Maybe[U]:
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


def maybe(value: Optional[T]) -> Maybe[T]:
    """Lift a store result into Maybe: None (absent) becomes Nothing."""
    return Nothing() if value is None else Some(value)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], Either[E, U]]) -> Either[E, U]:
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], Either[E, U]]) -> Either[E, U]:
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _check_date(t: Transaction) -> Either[dict, Transaction]:
    try:
        date.fromisoformat(t.date)
    except (TypeError, ValueError):
        return Left({
            "error": "invalid_date",
            "message": f"Transaction {t.id} has an unreadable date {t.date!r}",
            "date": t.date,
        })
    return Right(t)


def _check_sign(t: Transaction) -> Either[dict, Transaction]:
    if t.kind is Kind.INCOME and t.amount <= 0:
        return Left({
            "error": "kind_sign_mismatch",
            "message": f"Income {t.id} must have a positive amount",
            "kind": t.kind.value,
            "amount": t.amount,
        })
    if t.kind is Kind.EXPENSE and t.amount >= 0:
        return Left({
            "error": "kind_sign_mismatch",
            "message": f"Expense {t.id} must have a negative amount",
            "kind": t.kind.value,
            "amount": t.amount,
        })
    return Right(t)


def validate_transaction(t: Transaction, owner_id: str) -> Either[dict, Transaction]:
    if t.owner_id != owner_id:
        return Left({
            "error": "owner_mismatch",
            "message": f"Transaction {t.id} does not belong to owner {owner_id}",
            "owner_id": t.owner_id,
        })
    return _check_date(t).bind(_check_sign)


def compose(*funcs):
    """Return a function that's the composition of the given functions.

    compose(f, g, h)(x) == f(g(h(x)))
    """
    def _composed(x):
        res = x
        for f in reversed(funcs):
            res = f(res)
        return res
    return _composed


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
