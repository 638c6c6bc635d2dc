from __future__ import annotations

from typing import Iterable

from tradeflow.models import Trade


def trade_risk(trade: Trade) -> float:
    # Falsy stop-loss resolves to the entry price, i.e. zero risk.
    stop = trade.stop_loss or trade.entry_price
    return abs(trade.entry_price - stop)


def trade_reward(trade: Trade) -> float:
    if trade.is_long:
        return trade.exit_price - trade.entry_price
    return trade.entry_price - trade.exit_price


def trade_risk_reward(trade: Trade) -> float | None:
    """Price-distance reward over risk, ignoring contract multipliers."""
    risk = trade_risk(trade)
    if risk == 0:
        return None
    return trade_reward(trade) / risk


def average_risk_reward(trades: Iterable[Trade]) -> float:
    ratios = []
    for trade in trades:
        if trade.is_break_even:
            continue
        ratio = trade_risk_reward(trade)
        if ratio is None:
            continue
        ratios.append(ratio)
    if not ratios:
        return 0.0
    return sum(ratios) / len(ratios)
