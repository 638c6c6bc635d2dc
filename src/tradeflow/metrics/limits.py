from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from tradeflow.metrics.summary import KpiSnapshot
from tradeflow.models import Account

DRAWDOWN_WARNING_BUFFER = 1000.0
DAILY_LOSS_WARNING_BUFFER = 500.0


@dataclass(frozen=True)
class AccountLimitStatus:
    balance: float
    min_balance: float
    max_balance: float
    drawdown_limit: float | None
    drawdown_reached: bool
    drawdown_warning: bool
    daily_loss_limit: float | None
    daily_loss_reached: bool
    daily_loss_warning: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def drawdown_limit_amount(account: Account, max_pnl: float) -> float | None:
    """Max drawdown in currency; trailing limits scale with the high-water balance."""
    if not account.max_drawdown:
        return None
    if account.is_trailing_drawdown:
        return (account.initial_balance + max_pnl) * (account.max_drawdown / 100.0)
    return account.max_drawdown


def account_limit_status(
    account: Account,
    kpis: KpiSnapshot,
    *,
    drawdown_warning_buffer: float = DRAWDOWN_WARNING_BUFFER,
    daily_loss_warning_buffer: float = DAILY_LOSS_WARNING_BUFFER,
) -> AccountLimitStatus:
    drawdown_limit = drawdown_limit_amount(account, kpis.max_pnl)
    drawdown_reached = False
    drawdown_warning = False
    if drawdown_limit is not None:
        drawdown_reached = kpis.total_pnl <= -drawdown_limit
        drawdown_warning = not drawdown_reached and kpis.total_pnl <= -(
            drawdown_limit - drawdown_warning_buffer
        )

    daily_loss_limit = account.max_daily_loss or None
    daily_loss_reached = False
    daily_loss_warning = False
    if daily_loss_limit is not None:
        daily_loss_reached = kpis.daily_pnl <= -daily_loss_limit
        daily_loss_warning = not daily_loss_reached and kpis.daily_pnl <= -(
            daily_loss_limit - daily_loss_warning_buffer
        )

    return AccountLimitStatus(
        balance=account.initial_balance + kpis.total_pnl,
        min_balance=account.initial_balance + kpis.min_pnl,
        max_balance=account.initial_balance + kpis.max_pnl,
        drawdown_limit=drawdown_limit,
        drawdown_reached=drawdown_reached,
        drawdown_warning=drawdown_warning,
        daily_loss_limit=daily_loss_limit,
        daily_loss_reached=daily_loss_reached,
        daily_loss_warning=daily_loss_warning,
    )
