from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from tradeflow.metrics.risk import average_risk_reward
from tradeflow.models import Trade

Outcome = str

OUTCOME_WIN: Outcome = "win"
OUTCOME_LOSS: Outcome = "loss"
OUTCOME_BREAKEVEN: Outcome = "breakeven"


@dataclass(frozen=True)
class SummaryMetrics:
    total_trades: int
    total_pnl: float
    wins: int
    losses: int
    breakevens: int
    win_rate: float
    avg_win: float
    avg_loss: float
    avg_rr: float


@dataclass(frozen=True)
class KpiSnapshot:
    total_trades: int
    total_pnl: float
    wins: int
    losses: int
    breakevens: int
    win_rate: float
    avg_win: float
    avg_loss: float
    avg_rr: float
    daily_pnl: float
    daily_trades_count: int
    monthly_pnl: float
    monthly_trades_count: int
    yearly_pnl: float
    yearly_trades_count: int
    max_pnl: float
    min_pnl: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def classify_outcome(trade: Trade) -> Outcome:
    # The flag wins over the sign of pnl; zero counts as a loss.
    if trade.is_break_even:
        return OUTCOME_BREAKEVEN
    return OUTCOME_WIN if trade.pnl > 0 else OUTCOME_LOSS


def compute_summary(trades: Iterable[Trade]) -> SummaryMetrics:
    trade_list = list(trades)
    wins = [trade for trade in trade_list if classify_outcome(trade) == OUTCOME_WIN]
    losses = [trade for trade in trade_list if classify_outcome(trade) == OUTCOME_LOSS]
    breakeven_count = len(trade_list) - len(wins) - len(losses)

    win_rate = 0.0
    if wins or losses:
        win_rate = len(wins) / (len(wins) + len(losses))

    avg_win = 0.0
    if wins:
        avg_win = sum(trade.pnl for trade in wins) / len(wins)

    avg_loss = 0.0
    if losses:
        avg_loss = sum(abs(trade.pnl) for trade in losses) / len(losses)

    return SummaryMetrics(
        total_trades=len(trade_list),
        total_pnl=sum((trade.pnl for trade in trade_list), 0.0),
        wins=len(wins),
        losses=len(losses),
        breakevens=breakeven_count,
        win_rate=win_rate,
        avg_win=avg_win,
        avg_loss=avg_loss,
        avg_rr=average_risk_reward(trade_list),
    )


def empty_snapshot() -> KpiSnapshot:
    return KpiSnapshot(
        total_trades=0,
        total_pnl=0.0,
        wins=0,
        losses=0,
        breakevens=0,
        win_rate=0.0,
        avg_win=0.0,
        avg_loss=0.0,
        avg_rr=0.0,
        daily_pnl=0.0,
        daily_trades_count=0,
        monthly_pnl=0.0,
        monthly_trades_count=0,
        yearly_pnl=0.0,
        yearly_trades_count=0,
        max_pnl=0.0,
        min_pnl=0.0,
    )
