# tests/core/test_utils.py
from datetime import datetime

from sge.core.utils import add_months, format_number, month_window, quarter_start, round_half_up, to_naive_utc, to_number


def test_round_half_up_rounds_halves_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
    assert round_half_up(-2.5) == -2
    assert round_half_up(3.25, 1) == 3.3


def test_month_window_is_half_open_and_crosses_years():
    now = datetime(2026, 1, 15, 10, 30)
    assert month_window(now) == (datetime(2026, 1, 1), datetime(2026, 2, 1))
    assert month_window(now, -1) == (datetime(2025, 12, 1), datetime(2026, 1, 1))
    assert add_months(2026, 12, 1) == (2027, 1)


def test_quarter_start():
    assert quarter_start(datetime(2026, 5, 20)) == datetime(2026, 4, 1)
    assert quarter_start(datetime(2026, 12, 31)) == datetime(2026, 10, 1)


def test_to_number_and_format_number():
    assert to_number("12.5") == 12.5
    assert to_number("abc") is None
    assert to_number(None) is None
    assert to_number(float("nan")) is None
    assert format_number(5000.0) == "5000"
    assert format_number(12.5) == "12.5"
    assert format_number("active") == "active"


def test_to_naive_utc_converts_aware_datetimes():
    from datetime import timedelta, timezone

    aware = datetime(2026, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert to_naive_utc(aware) == datetime(2026, 3, 1, 15, 0)
    assert to_naive_utc(None) is None
