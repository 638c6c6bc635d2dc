from __future__ import annotations

from datetime import date

from tradeflow.metrics.calendar import month_grid, parse_month, shift_month
from tradeflow.metrics.series import CalendarDay


def test_month_grid_starts_on_monday_and_matches_exact_dates() -> None:
    days = [
        CalendarDay(date="2024-02-05", pnl=120.0, trade_count=3),
        CalendarDay(date="2024-02-29", pnl=-80.0, trade_count=1),
        CalendarDay(date="2024-03-01", pnl=10.0, trade_count=1),
    ]
    grid = month_grid(days, date(2024, 2, 1))

    assert grid["month_key"] == "2024-02"
    assert grid["prev_month"] == "2024-01"
    assert grid["next_month"] == "2024-03"
    assert grid["max_abs_pnl"] == 120.0

    weeks = grid["weeks"]
    assert weeks[0][0]["date"] == "2024-01-29"
    assert weeks[0][0]["in_month"] is False
    assert all(len(week) == 7 for week in weeks)
    assert weeks[-1][-1]["date"] == "2024-03-03"

    cells = {cell["date"]: cell for week in weeks for cell in week}
    assert cells["2024-02-05"]["pnl"] == 120.0
    assert cells["2024-02-05"]["trade_count"] == 3
    assert cells["2024-02-06"]["pnl"] is None
    assert cells["2024-02-06"]["trade_count"] == 0
    assert cells["2024-03-01"]["in_month"] is False


def test_parse_month() -> None:
    assert parse_month("2024-07") == date(2024, 7, 1)
    assert parse_month("July") is None
    assert parse_month(None) is None


def test_shift_month_wraps_years() -> None:
    assert shift_month(date(2024, 12, 1), 1) == date(2025, 1, 1)
    assert shift_month(date(2024, 1, 1), -1) == date(2023, 12, 1)
