import json
from decimal import Decimal
from typing import Iterable, Tuple

from finboard.domain import Kind, Transaction


def load_seed(path: str, owner_id: str) -> Tuple[Transaction, ...]:
    """Read plaintext demo transactions; every record is attributed to owner_id."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return tuple(
        Transaction(
            id=t["id"],
            owner_id=owner_id,
            date=t["date"],
            amount=Decimal(str(t["amount"])),
            category=t["category"],
            kind=Kind(t["kind"]),
        )
        for t in data["transactions"]
    )


def of_kind(trans: Iterable[Transaction], kind: Kind) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.kind is kind, trans))


def income_transactions(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return of_kind(trans, Kind.INCOME)


def expense_transactions(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return of_kind(trans, Kind.EXPENSE)


def magnitudes(trans: Iterable[Transaction]) -> Tuple[Decimal, ...]:
    return tuple(map(lambda t: t.magnitude, trans))
