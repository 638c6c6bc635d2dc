from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Iterable

from tradeflow.metrics.periods import local_date
from tradeflow.models import Trade


@dataclass(frozen=True)
class DailyBucket:
    date: str
    pnl: float
    trade_count: int


@dataclass(frozen=True)
class ChartPoint:
    date: str
    label: str
    pnl: float


@dataclass(frozen=True)
class CumulativeChartPoint:
    date: str
    label: str
    pnl: float
    cumulative_pnl: float


@dataclass(frozen=True)
class CalendarDay:
    date: str
    pnl: float
    trade_count: int


def date_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def chart_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def daily_buckets(trades: Iterable[Trade], tz: tzinfo | None = None) -> dict[str, DailyBucket]:
    """Sum P&L and count trades per local exit date, keyed ``YYYY-MM-DD``."""
    pnl_by_day: dict[str, float] = {}
    count_by_day: dict[str, int] = {}
    for trade in trades:
        key = date_key(local_date(trade.exit_time, tz))
        pnl_by_day[key] = pnl_by_day.get(key, 0.0) + trade.pnl
        count_by_day[key] = count_by_day.get(key, 0) + 1
    return {
        key: DailyBucket(date=key, pnl=pnl, trade_count=count_by_day[key])
        for key, pnl in pnl_by_day.items()
    }


def chart_series(buckets: dict[str, DailyBucket]) -> list[ChartPoint]:
    points: list[ChartPoint] = []
    for key in sorted(buckets):
        day = date.fromisoformat(key)
        points.append(ChartPoint(date=key, label=chart_label(day), pnl=buckets[key].pnl))
    return points


def calendar_series(buckets: dict[str, DailyBucket]) -> list[CalendarDay]:
    return [
        CalendarDay(date=bucket.date, pnl=bucket.pnl, trade_count=bucket.trade_count)
        for bucket in buckets.values()
    ]


def cumulative_chart_series(points: Iterable[ChartPoint]) -> list[CumulativeChartPoint]:
    cumulative = 0.0
    output: list[CumulativeChartPoint] = []
    for point in points:
        cumulative += point.pnl
        output.append(
            CumulativeChartPoint(
                date=point.date,
                label=point.label,
                pnl=point.pnl,
                cumulative_pnl=cumulative,
            )
        )
    return output
