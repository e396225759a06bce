from dataclasses import dataclass
from datetime import date as _date
from decimal import Decimal
from enum import Enum, IntEnum


class Kind(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


class PeriodSelection(IntEnum):
    YEAR = 0
    MONTH = 1
    WEEK = 2


DEFAULT_PERIOD = PeriodSelection.MONTH


@dataclass(frozen=True)
class Transaction:
    id: str
    owner_id: str
    date: str          # ISO calendar date, e.g. "2024-02-10"
    amount: Decimal    # + for income, - for expense
    category: str
    kind: Kind

    @property
    def day(self) -> _date:
        return _date.fromisoformat(self.date)

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)


# Stored shape: payload is a Fernet token over the JSON body of the record
@dataclass(frozen=True)
class RawTransaction:
    id: str
    owner_id: str
    payload: str
