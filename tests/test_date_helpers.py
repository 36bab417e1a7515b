from datetime import date, datetime

import pytest

from models.time_period import TimePeriod
from utils.date_helpers import (
    add_months, format_display_date, from_storage, parse_display_date, resolve_period, to_storage,
)

NOW = datetime(2024, 3, 15, 14, 30, 45, 123456)


def test_open_periods_end_now():
    assert resolve_period(TimePeriod.CURRENT_MONTH, NOW) == (datetime(2024, 3, 1), NOW)
    assert resolve_period(TimePeriod.LAST_3_MONTHS, NOW) == (datetime(2023, 12, 1), NOW)
    assert resolve_period(TimePeriod.LAST_6_MONTHS, NOW) == (datetime(2023, 9, 1), NOW)
    assert resolve_period(TimePeriod.CURRENT_YEAR, NOW) == (datetime(2024, 1, 1), NOW)


def test_last_month_is_closed_at_the_last_microsecond():
    start, end = resolve_period(TimePeriod.LAST_MONTH, NOW)
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 2, 29, 23, 59, 59, 999999)


def test_last_month_across_year_boundary():
    start, end = resolve_period(TimePeriod.LAST_MONTH, datetime(2024, 1, 10))
    assert (start, end) == (datetime(2023, 12, 1), datetime(2023, 12, 31, 23, 59, 59, 999999))


def test_last_year_is_closed():
    start, end = resolve_period(TimePeriod.LAST_YEAR, NOW)
    assert start == datetime(2023, 1, 1)
    assert end == datetime(2023, 12, 31, 23, 59, 59, 999999)


def test_closed_end_includes_last_instant_and_excludes_next_period():
    _, end = resolve_period(TimePeriod.LAST_MONTH, NOW)
    last_moment = datetime(2024, 2, 29, 23, 59, 59, 999999)
    assert last_moment <= end
    assert datetime(2024, 3, 1) > end


def test_period_uses_current_clock_when_no_reference():
    start, end = resolve_period(TimePeriod.CURRENT_MONTH)
    assert start.day == 1
    assert start <= end <= datetime.now()


def test_display_names_round_trip():
    for period in TimePeriod:
        assert TimePeriod.from_display_name(period.display_name) is period
    with pytest.raises(ValueError):
        TimePeriod.from_display_name("Fortnight")


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2023, 11, 15), 3) == date(2024, 2, 15)


def test_storage_encoding_sorts_like_time():
    early = datetime(2024, 3, 9, 9, 0)
    late = datetime(2024, 3, 10, 8, 0, 0, 5)
    assert to_storage(early) < to_storage(late)
    assert len(to_storage(early)) == len(to_storage(late))
    assert from_storage(to_storage(late)) == late


def test_display_formats():
    d = date(2024, 7, 4)
    assert format_display_date(d, "DD/MM/YYYY") == "04/07/2024"
    assert format_display_date("2024-07-04", "MM/DD/YYYY") == "07/04/2024"
    assert parse_display_date("04.07.2024", "DD.MM.YYYY") == d
    assert parse_display_date("2024-07-04", "DD/MM/YYYY") == d
    assert parse_display_date("not a date", "YYYY-MM-DD") is None
