from datetime import date, datetime
from typing import Callable, Iterable, Tuple, Union

from finboard.domain import PeriodSelection, Transaction
from finboard.errors import ConfigurationFailure
from finboard.functional import compose

Instant = Union[datetime, date]


def as_date(instant: Instant) -> date:
    if isinstance(instant, datetime):
        return instant.date()
    return instant


def iso_week(day: date) -> Tuple[int, int]:
    """ISO-8601 (year, week): week 1 is the week holding the year's first Thursday.

    The ISO year is returned together with the week so that late-December days
    in week 1 of the next year never compare equal to early-January days in
    week 1 of the current one.
    """
    iso = day.isocalendar()
    return iso[0], iso[1]


def parse_period(name: str) -> PeriodSelection:
    try:
        return PeriodSelection[name.strip().upper()]
    except KeyError:
        raise ConfigurationFailure(f"Unknown period {name!r}") from None


def same_year(now: date) -> Callable[[date], bool]:
    def _match(d: date) -> bool:
        return d.year == now.year

    return _match


def same_month(now: date) -> Callable[[date], bool]:
    def _match(d: date) -> bool:
        return d.year == now.year and d.month == now.month

    return _match


def same_week(now: date) -> Callable[[date], bool]:
    week = iso_week(now)

    def _match(d: date) -> bool:
        return d.year == now.year and iso_week(d) == week

    return _match


_MATCHERS = {
    PeriodSelection.YEAR: same_year,
    PeriodSelection.MONTH: same_month,
    PeriodSelection.WEEK: same_week,
}


def in_period(now: Instant, selection: PeriodSelection) -> Callable[[Transaction], bool]:
    """Predicate telling whether a transaction falls in the selected period around now."""
    matcher = _MATCHERS[PeriodSelection(selection)](as_date(now))
    return compose(matcher, lambda t: t.day)


def filter_period(
    transactions: Iterable[Transaction], now: Instant, selection: PeriodSelection
) -> Tuple[Transaction, ...]:
    return tuple(filter(in_period(now, selection), transactions))
