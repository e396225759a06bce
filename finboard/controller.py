"""Dashboard state and the orchestration that feeds it.

The state is an immutable value; the module-level transition functions are
pure and can be exercised without a store or a UI. ``DashboardController``
owns the single current state, runs the fetch-then-decrypt load, and applies
transitions in response to two events: the transaction list being replaced
and the period selection changing.
"""
import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from finboard import events
from finboard.config import settings
from finboard.crypto import decrypt_transactions
from finboard.currency import resolve
from finboard.domain import PeriodSelection, Transaction
from finboard.errors import DashboardError, DecryptionFailure, FetchFailure
from finboard.events import EventBus, event_bus
from finboard.functional import maybe
from finboard.periods import Instant, filter_period, parse_period
from finboard.store import TransactionStore

logger = logging.getLogger(__name__)


class DashboardStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FILTERED = "filtered"
    EMPTY = "empty"


@dataclass(frozen=True)
class DashboardState:
    status: DashboardStatus = DashboardStatus.IDLE
    transactions: Tuple[Transaction, ...] = ()
    filtered_transactions: Tuple[Transaction, ...] = ()
    selected: PeriodSelection = PeriodSelection.MONTH
    currency: str = "€"
    failure: Optional[DashboardError] = None

    @property
    def failed(self) -> bool:
        return self.failure is not None


@dataclass(frozen=True)
class DashboardContext:
    """What presentation widgets read. Only set_selected mutates anything."""
    transactions: Tuple[Transaction, ...]
    filtered_transactions: Tuple[Transaction, ...]
    selected: PeriodSelection
    set_selected: Callable[[PeriodSelection], None]
    currency: str


def start_loading(state: DashboardState) -> DashboardState:
    return replace(state, status=DashboardStatus.LOADING, failure=None)


def _settle(state: DashboardState, status: DashboardStatus) -> DashboardState:
    if not state.transactions:
        return replace(state, status=DashboardStatus.EMPTY)
    return replace(state, status=status)


def replace_transactions(
    state: DashboardState, transactions: Tuple[Transaction, ...], now: Instant
) -> DashboardState:
    transactions = tuple(transactions)
    status = DashboardStatus.READY if state.status is DashboardStatus.LOADING else DashboardStatus.FILTERED
    return _settle(replace(
        state,
        transactions=transactions,
        filtered_transactions=filter_period(transactions, now, state.selected),
        failure=None,
    ), status)


def select_period(
    state: DashboardState, selection: PeriodSelection, now: Instant
) -> DashboardState:
    selection = PeriodSelection(selection)
    if state.status in (DashboardStatus.IDLE, DashboardStatus.LOADING):
        return replace(
            state,
            selected=selection,
            filtered_transactions=filter_period(state.transactions, now, selection),
        )
    return _settle(replace(
        state,
        selected=selection,
        filtered_transactions=filter_period(state.transactions, now, selection),
    ), DashboardStatus.FILTERED)


def degrade(state: DashboardState, failure: DashboardError) -> DashboardState:
    return replace(
        state,
        status=DashboardStatus.EMPTY,
        transactions=(),
        filtered_transactions=(),
        failure=failure,
    )


class DashboardController:

    def __init__(
        self,
        store: TransactionStore,
        clock: Callable[[], Instant] = datetime.now,
        bus: EventBus = event_bus,
    ):
        self.store = store
        self.clock = clock
        self.bus = bus
        self.state = DashboardState(
            selected=parse_period(settings.DEFAULT_PERIOD),
            currency=resolve(settings.DEFAULT_CURRENCY),
        )
        self.notifications: List[str] = []
        self._generation = 0

    @property
    def context(self) -> DashboardContext:
        return DashboardContext(
            transactions=self.state.transactions,
            filtered_transactions=self.state.filtered_transactions,
            selected=self.state.selected,
            set_selected=self.set_selected,
            currency=self.state.currency,
        )

    def _stale(self, generation: int) -> bool:
        return generation != self._generation

    async def _fetch(self, what: str, pending: Awaitable[Any]) -> Any:
        try:
            value = await pending
        except Exception as e:
            raise FetchFailure(f"Fetching {what} failed: {e}") from e
        return maybe(value)

    async def start(self) -> DashboardState:
        """Fetch, decrypt and publish a fresh transaction list.

        A later start() or a teardown() makes this run stale: whatever it
        produces afterwards is dropped instead of applied.
        """
        self._generation += 1
        generation = self._generation
        self.state = start_loading(self.state)

        try:
            owner_id = (await self._fetch("owner id", self.store.fetch_owner_id())).get_or_else(None)
            if self._stale(generation):
                return self._discard(generation)
            if owner_id is None:
                raise FetchFailure("Store returned no owner id")

            raws, pref = await asyncio.gather(
                self._fetch("transactions", self.store.fetch_raw_transactions()),
                self._fetch("currency preference", self.store.fetch_currency_preference()),
            )
            if self._stale(generation):
                return self._discard(generation)
            if raws.is_none():
                raise FetchFailure("Store returned no transactions")

            transactions = raws.map(lambda rows: decrypt_transactions(rows, owner_id)).get_or_else(())
            currency = resolve(pref.get_or_else(None))
        except DashboardError as e:
            if self._stale(generation):
                return self._discard(generation)
            return self._fail(e)

        self.state = replace_transactions(replace(self.state, currency=currency), transactions, self.clock())
        if transactions:
            logger.info("Loaded %d transactions for owner %s", len(transactions), owner_id)
        else:
            logger.info("Owner %s has no transactions yet", owner_id)
        self.bus.publish(events.TRANSACTIONS_REPLACED, {
            "count": len(self.state.transactions),
            "filtered": len(self.state.filtered_transactions),
        })
        return self.state

    def _discard(self, generation: int) -> DashboardState:
        logger.debug("Dropping result of stale load #%d (current #%d)", generation, self._generation)
        return self.state

    def _fail(self, failure: DashboardError) -> DashboardState:
        if isinstance(failure, FetchFailure):
            logger.warning("Dashboard degraded to empty, fetch failed: %s", failure)
            name = events.FETCH_FAILED
        elif isinstance(failure, DecryptionFailure):
            logger.error("Dashboard degraded to empty, decryption failed: %s", failure)
            name = events.DECRYPTION_FAILED
        else:
            logger.error("Dashboard degraded to empty, bad configuration: %s", failure)
            name = events.CONFIGURATION_FAILED

        try:
            results = self.bus.publish(name, {"reason": str(failure)})
        except Exception:
            logger.exception("Handler for %s failed", name)
            results = []
        self.notifications.extend(r["notification"] for r in results if r and "notification" in r)
        self.state = degrade(self.state, failure)
        return self.state

    def teardown(self) -> None:
        """The hosting view is gone; any load still in flight must not land."""
        self._generation += 1

    def set_selected(self, selection: PeriodSelection) -> None:
        previous = self.state.selected
        self.state = select_period(self.state, selection, self.clock())
        self.bus.publish(events.SELECTION_CHANGED, {
            "from": previous.name,
            "to": self.state.selected.name,
            "filtered": len(self.state.filtered_transactions),
        })
