from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Iterable

from tradeflow.metrics.periods import to_local
from tradeflow.models import Trade

WINDOW_THIS_WEEK = "this-week"
WINDOW_LAST_WEEK = "last-week"
WINDOW_THIS_MONTH = "this-month"
WINDOW_THIS_YEAR = "this-year"
WINDOW_ALL = "all"

RECENT_WINDOWS = (
    WINDOW_THIS_WEEK,
    WINDOW_LAST_WEEK,
    WINDOW_THIS_MONTH,
    WINDOW_THIS_YEAR,
    WINDOW_ALL,
)


def filter_trades_by_window(
    trades: Iterable[Trade],
    window: str,
    now: datetime,
    tz: tzinfo | None = None,
) -> list[Trade]:
    trade_list = list(trades)
    if window not in RECENT_WINDOWS:
        raise ValueError(f"Unknown trade window {window!r}.")
    if window == WINDOW_ALL:
        return trade_list

    local_now = to_local(now, tz)
    this_monday = (local_now - timedelta(days=local_now.weekday())).replace(
        hour=0, minute=0, second=0, microsecond=0
    )
    output = []
    for trade in trade_list:
        exit_local = to_local(trade.exit_time, tz)
        if window == WINDOW_THIS_WEEK:
            keep = exit_local >= this_monday
        elif window == WINDOW_LAST_WEEK:
            keep = this_monday - timedelta(days=7) <= exit_local < this_monday
        elif window == WINDOW_THIS_MONTH:
            keep = exit_local.year == local_now.year and exit_local.month == local_now.month
        else:
            keep = exit_local.year == local_now.year
        if keep:
            output.append(trade)
    return output
