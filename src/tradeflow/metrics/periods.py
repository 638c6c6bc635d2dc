from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Iterable

from tradeflow.models import Trade


@dataclass(frozen=True)
class PeriodStats:
    pnl: float
    trades: int


@dataclass(frozen=True)
class PeriodBreakdown:
    daily: PeriodStats
    monthly: PeriodStats
    yearly: PeriodStats


def to_local(value: datetime, tz: tzinfo | None = None) -> datetime:
    """Express ``value`` in ``tz``; ``None`` means the system's local timezone.

    Naive datetimes are wall-clock time in ``tz`` (system local time when ``tz``
    is ``None``).
    """
    if value.tzinfo is None and tz is not None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(tz)


def local_date(value: datetime, tz: tzinfo | None = None) -> date:
    return to_local(value, tz).date()


def compute_period_stats(
    trades: Iterable[Trade],
    now: datetime,
    tz: tzinfo | None = None,
) -> PeriodBreakdown:
    today = local_date(now, tz)
    trade_list = list(trades)
    exit_dates = [(trade, local_date(trade.exit_time, tz)) for trade in trade_list]

    daily = [trade for trade, day in exit_dates if day == today]
    monthly = [
        trade for trade, day in exit_dates if day.year == today.year and day.month == today.month
    ]
    yearly = [trade for trade, day in exit_dates if day.year == today.year]

    return PeriodBreakdown(
        daily=_stats(daily),
        monthly=_stats(monthly),
        yearly=_stats(yearly),
    )


def _stats(trades: list[Trade]) -> PeriodStats:
    return PeriodStats(pnl=sum((trade.pnl for trade in trades), 0.0), trades=len(trades))
