import logging
from typing import Optional, Protocol, Sequence, Tuple

from finboard.crypto import encrypt_transaction
from finboard.domain import RawTransaction
from finboard.transforms import load_seed

logger = logging.getLogger(__name__)


class TransactionStore(Protocol):
    """What the dashboard needs from the backing store. None means absent."""

    async def fetch_owner_id(self) -> Optional[str]:
        ...

    async def fetch_raw_transactions(self) -> Optional[Sequence[RawTransaction]]:
        ...

    async def fetch_currency_preference(self) -> Optional[str]:
        ...


class InMemoryStore:

    def __init__(
        self,
        owner_id: Optional[str],
        raws: Optional[Sequence[RawTransaction]],
        currency: Optional[str] = "eur",
    ):
        self.owner_id = owner_id
        self.raws: Optional[Tuple[RawTransaction, ...]] = None if raws is None else tuple(raws)
        self.currency = currency

    async def fetch_owner_id(self) -> Optional[str]:
        return self.owner_id

    async def fetch_raw_transactions(self) -> Optional[Sequence[RawTransaction]]:
        return self.raws

    async def fetch_currency_preference(self) -> Optional[str]:
        return self.currency


class SeedStore(InMemoryStore):
    """Demo store: a plaintext seed file, encrypted for its owner on load."""

    def __init__(self, path: str, owner_id: str, currency: str = "eur"):
        plain = load_seed(path, owner_id)
        logger.info("Loaded %d seed transactions from %s", len(plain), path)
        super().__init__(
            owner_id,
            tuple(encrypt_transaction(t, owner_id) for t in plain),
            currency,
        )
