from __future__ import annotations

from datetime import timezone

from tradeflow.metrics.series import (
    CalendarDay,
    ChartPoint,
    calendar_series,
    chart_series,
    cumulative_chart_series,
    daily_buckets,
)
from conftest import make_trade, utc


def test_same_day_trades_merge_into_one_bucket() -> None:
    trades = [make_trade(5.0, utc(2024, 1, 5, 10)), make_trade(-3.0, utc(2024, 1, 5, 15))]
    buckets = daily_buckets(trades, timezone.utc)

    assert list(buckets) == ["2024-01-05"]
    assert chart_series(buckets) == [ChartPoint(date="2024-01-05", label="Jan 5", pnl=2.0)]
    assert calendar_series(buckets) == [CalendarDay(date="2024-01-05", pnl=2.0, trade_count=2)]


def test_chart_series_sorted_ascending_and_not_cumulative() -> None:
    trades = [
        make_trade(30.0, utc(2024, 2, 10)),
        make_trade(-10.0, utc(2024, 1, 31)),
        make_trade(5.0, utc(2023, 12, 1)),
    ]
    points = chart_series(daily_buckets(trades, timezone.utc))
    assert [point.date for point in points] == ["2023-12-01", "2024-01-31", "2024-02-10"]
    assert [point.label for point in points] == ["Dec 1", "Jan 31", "Feb 10"]
    assert [point.pnl for point in points] == [5.0, -10.0, 30.0]


def test_calendar_counts_per_day() -> None:
    trades = [
        make_trade(1.0, utc(2024, 3, 4)),
        make_trade(2.0, utc(2024, 3, 4, 14)),
        make_trade(4.0, utc(2024, 3, 5)),
    ]
    days = {day.date: day for day in calendar_series(daily_buckets(trades, timezone.utc))}
    assert days["2024-03-04"].trade_count == 2
    assert days["2024-03-04"].pnl == 3.0
    assert days["2024-03-05"].trade_count == 1


def test_cumulative_view_is_built_from_daily_points() -> None:
    points = [
        ChartPoint(date="2024-01-01", label="Jan 1", pnl=10.0),
        ChartPoint(date="2024-01-02", label="Jan 2", pnl=-4.0),
        ChartPoint(date="2024-01-03", label="Jan 3", pnl=6.0),
    ]
    cumulative = cumulative_chart_series(points)
    assert [point.cumulative_pnl for point in cumulative] == [10.0, 6.0, 12.0]
    assert [point.pnl for point in cumulative] == [10.0, -4.0, 6.0]


def test_no_trades_no_buckets() -> None:
    buckets = daily_buckets([], timezone.utc)
    assert chart_series(buckets) == []
    assert calendar_series(buckets) == []
