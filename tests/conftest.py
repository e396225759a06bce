from decimal import Decimal

import pytest

from finboard.config import settings
from finboard.domain import Kind, Transaction


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    monkeypatch.setattr(settings, "KDF_ITERATIONS", 1_000)


def make_tx(id, date, amount, category, kind=None, owner_id="u1"):
    amount = Decimal(str(amount))
    if kind is None:
        kind = Kind.INCOME if amount > 0 else Kind.EXPENSE
    return Transaction(id=id, owner_id=owner_id, date=date, amount=amount, category=category, kind=kind)
