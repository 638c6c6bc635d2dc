from __future__ import annotations

from typing import Sequence

from tradeflow.models import Trade


def running_pnl_extrema(trades_exit_desc: Sequence[Trade]) -> tuple[float, float]:
    """High- and low-water marks of cumulative P&L, both anchored at 0.

    Expects trades ordered by exit time descending, as the store returns them.
    """
    running = 0.0
    max_pnl = 0.0
    min_pnl = 0.0
    for trade in reversed(trades_exit_desc):
        running += trade.pnl
        if running > max_pnl:
            max_pnl = running
        if running < min_pnl:
            min_pnl = running
    return max_pnl, min_pnl
