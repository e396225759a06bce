import json
from decimal import Decimal

import pytest

from finboard.crypto import decrypt_transactions
from finboard.domain import Kind
from finboard.store import InMemoryStore, SeedStore
from finboard.transforms import expense_transactions, income_transactions, load_seed, magnitudes


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "seed.json"
    path.write_text(json.dumps({"transactions": [
        {"id": "t1", "date": "2024-01-05", "amount": "-20.10", "category": "food", "kind": "expense"},
        {"id": "t2", "date": "2024-02-10", "amount": 500, "category": "salary", "kind": "income"},
    ]}), encoding="utf-8")
    return str(path)


def test_load_seed(seed_file):
    trans = load_seed(seed_file, "u1")
    assert [t.owner_id for t in trans] == ["u1", "u1"]
    assert trans[0].amount == Decimal("-20.10")
    assert trans[1].kind is Kind.INCOME


def test_kind_transforms(seed_file):
    trans = load_seed(seed_file, "u1")
    assert [t.id for t in expense_transactions(trans)] == ["t1"]
    assert [t.id for t in income_transactions(trans)] == ["t2"]
    assert magnitudes(trans) == (Decimal("20.10"), Decimal("500"))


@pytest.mark.asyncio
async def test_seed_store_serves_encrypted_rows(seed_file):
    store = SeedStore(seed_file, "u1", "usd")

    assert await store.fetch_owner_id() == "u1"
    assert await store.fetch_currency_preference() == "usd"
    raws = await store.fetch_raw_transactions()
    assert all("salary" not in r.payload for r in raws)
    assert decrypt_transactions(raws, "u1") == load_seed(seed_file, "u1")


@pytest.mark.asyncio
async def test_in_memory_store_absent_values():
    store = InMemoryStore(None, None, None)
    assert await store.fetch_owner_id() is None
    assert await store.fetch_raw_transactions() is None
    assert await store.fetch_currency_preference() is None
