"""Aggregations behind the dashboard widgets.

Every function here is pure over a transaction list that has already been
scoped by the period filter. Sums stay in Decimal; rounding to the currency's
minor unit belongs to display formatting, not to these functions.
"""
import calendar
from bisect import bisect_right
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from functools import reduce
from itertools import accumulate, islice
from typing import Dict, Iterable, Iterator, Optional, Tuple

from finboard.domain import Kind, PeriodSelection, Transaction
from finboard.periods import Instant, as_date
from finboard.transforms import expense_transactions, income_transactions, magnitudes, of_kind

ZERO = Decimal(0)


def balance(trans: Iterable[Transaction]) -> Decimal:
    return reduce(lambda acc, t: acc + t.amount, trans, ZERO)


def total_expenses(trans: Iterable[Transaction]) -> Decimal:
    return sum(magnitudes(expense_transactions(trans)), ZERO)


def total_incomes(trans: Iterable[Transaction]) -> Decimal:
    return sum(magnitudes(income_transactions(trans)), ZERO)


def breakdown_by_category(
    trans: Iterable[Transaction], kind: Kind
) -> Tuple[Tuple[str, Decimal], ...]:
    """Per-category magnitudes, largest first; equal totals ordered by category name."""
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    for t in of_kind(trans, kind):
        totals[t.category] += t.magnitude

    return tuple(sorted(totals.items(), key=lambda item: (-item[1], item[0])))


@dataclass(frozen=True)
class Bucket:
    label: str
    first: date
    last: date


@dataclass(frozen=True)
class Bucketing:
    granularity: str  # "month" or "day"
    buckets: Tuple[Bucket, ...]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(b.label for b in self.buckets)

    def index_of(self, day: date) -> Optional[int]:
        firsts = [b.first for b in self.buckets]
        i = bisect_right(firsts, day) - 1
        if i < 0 or day > self.buckets[i].last:
            return None
        return i


def _days(first: date, count: int) -> Tuple[Bucket, ...]:
    days = (first + timedelta(days=i) for i in range(count))
    return tuple(Bucket(d.isoformat(), d, d) for d in days)


def bucketing_for(selection: PeriodSelection, now: Instant) -> Bucketing:
    """Buckets one level finer than the selected period, covering all of it."""
    today = as_date(now)
    selection = PeriodSelection(selection)

    if selection is PeriodSelection.YEAR:
        months = []
        for m in range(1, 13):
            last_day = calendar.monthrange(today.year, m)[1]
            months.append(Bucket(
                f"{today.year:04d}-{m:02d}",
                date(today.year, m, 1),
                date(today.year, m, last_day),
            ))
        return Bucketing("month", tuple(months))

    if selection is PeriodSelection.MONTH:
        length = calendar.monthrange(today.year, today.month)[1]
        return Bucketing("day", _days(today.replace(day=1), length))

    monday = today - timedelta(days=today.isoweekday() - 1)
    return Bucketing("day", _days(monday, 7))


def evolution_series(
    trans: Iterable[Transaction], kind: Kind, bucketing: Bucketing
) -> Tuple[Tuple[str, Decimal], ...]:
    """Chronological, gap-free (label, total) pairs; buckets without activity carry zero.

    Transactions outside every bucket are not counted.
    """
    sums = [ZERO] * len(bucketing.buckets)
    for t in of_kind(trans, kind):
        i = bucketing.index_of(t.day)
        if i is not None:
            sums[i] += t.magnitude

    return tuple(zip(bucketing.labels, sums))


def cumulative_series(
    trans: Iterable[Transaction], kind: Kind, bucketing: Bucketing
) -> Tuple[Tuple[str, Decimal], ...]:
    series = evolution_series(trans, kind, bucketing)
    running = accumulate(total for _, total in series)
    return tuple(zip(bucketing.labels, running))


def summary_series(
    trans: Iterable[Transaction], bucketing: Bucketing
) -> Tuple[Tuple[str, Decimal, Decimal], ...]:
    """(label, incomes, expenses) per bucket, for the income-versus-expense chart."""
    trans = tuple(trans)
    incomes = evolution_series(trans, Kind.INCOME, bucketing)
    expenses = evolution_series(trans, Kind.EXPENSE, bucketing)
    return tuple(
        (label, inc, exp) for (label, inc), (_, exp) in zip(incomes, expenses)
    )


def last_transactions(trans: Iterable[Transaction], n: int) -> Iterator[Transaction]:
    # sorted() is stable with reverse=True, so same-day entries keep source order
    newest_first = sorted(trans, key=lambda t: t.day, reverse=True)
    for t in islice(newest_first, max(0, n)):
        yield t
