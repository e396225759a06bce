from datetime import date, datetime

import pytest

from finboard.domain import PeriodSelection
from finboard.errors import ConfigurationFailure
from finboard.periods import filter_period, in_period, iso_week, parse_period

from conftest import make_tx


def make_sample():
    return (
        make_tx("t1", "2023-12-31", "-5", "food"),
        make_tx("t2", "2024-01-01", "-10", "food"),
        make_tx("t3", "2024-02-10", "500", "salary"),
        make_tx("t4", "2024-02-12", "-30", "transport"),
        make_tx("t5", "2024-02-15", "-7", "food"),
        make_tx("t6", "2024-02-18", "-3", "food"),
        make_tx("t7", "2024-12-30", "-1", "food"),
        make_tx("t8", "2025-01-01", "-2", "food"),
    )


def ids(trans):
    return [t.id for t in trans]


def test_year_keeps_calendar_year():
    result = filter_period(make_sample(), datetime(2024, 2, 15, 9, 30), PeriodSelection.YEAR)
    assert ids(result) == ["t2", "t3", "t4", "t5", "t6", "t7"]


def test_month_keeps_year_and_month():
    result = filter_period(make_sample(), date(2024, 2, 15), PeriodSelection.MONTH)
    assert ids(result) == ["t3", "t4", "t5", "t6"]


def test_week_keeps_iso_week():
    # 2024-02-15 is a Thursday in ISO week 7 (Mon 12th .. Sun 18th)
    result = filter_period(make_sample(), date(2024, 2, 15), PeriodSelection.WEEK)
    assert ids(result) == ["t4", "t5", "t6"]


def test_iso_week_year_boundary():
    assert iso_week(date(2024, 12, 30)) == (2025, 1)
    assert iso_week(date(2024, 1, 1)) == (2024, 1)
    assert iso_week(date(2021, 1, 3)) == (2020, 53)


def test_week_one_of_next_year_does_not_alias_this_years_week_one():
    # now sits in ISO week 1 of 2025 while still in calendar year 2024
    result = filter_period(make_sample(), date(2024, 12, 30), PeriodSelection.WEEK)
    assert ids(result) == ["t7"]


def test_week_straddling_new_year_keeps_only_current_calendar_year():
    # 2021-01-01 is a Friday in ISO week 53 of 2020
    trans = (
        make_tx("a", "2020-12-30", "-1", "food"),
        make_tx("b", "2021-01-01", "-2", "food"),
        make_tx("c", "2021-01-03", "-3", "food"),
        make_tx("d", "2021-01-04", "-4", "food"),
    )
    result = filter_period(trans, date(2021, 1, 1), PeriodSelection.WEEK)
    assert ids(result) == ["b", "c"]


@pytest.mark.parametrize("selection", list(PeriodSelection))
def test_filter_is_subsequence_and_idempotent(selection):
    now = date(2024, 2, 15)
    trans = make_sample()
    once = filter_period(trans, now, selection)
    twice = filter_period(once, now, selection)

    assert twice == once
    positions = [trans.index(t) for t in once]
    assert positions == sorted(positions)


def test_week_results_share_year_and_week():
    now = date(2024, 12, 30)
    for t in filter_period(make_sample(), now, PeriodSelection.WEEK):
        assert t.day.year == now.year
        assert iso_week(t.day) == iso_week(now)


def test_in_period_predicate():
    pred = in_period(date(2024, 2, 1), PeriodSelection.MONTH)
    assert pred(make_tx("a", "2024-02-29", "-1", "food"))
    assert not pred(make_tx("b", "2023-02-01", "-1", "food"))


def test_empty_input():
    assert filter_period((), date(2024, 2, 15), PeriodSelection.YEAR) == ()


def test_parse_period():
    assert parse_period("month") is PeriodSelection.MONTH
    assert parse_period(" Week ") is PeriodSelection.WEEK
    with pytest.raises(ConfigurationFailure):
        parse_period("decade")
