from __future__ import annotations

from tradeflow.models import DIRECTION_LONG, TradeInput

# Checked in order; micro contracts must come before the full-size symbols
# they contain as substrings.
CONTRACT_MULTIPLIERS: tuple[tuple[str, float], ...] = (
    ("MNQ", 2.0),
    ("MES", 5.0),
    ("NQ", 20.0),
    ("ES", 50.0),
    ("CL", 1000.0),
    ("GC", 100.0),
)
DEFAULT_MULTIPLIER = 1.0

BREAKEVEN_ELIGIBLE_BAND = 25.0


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def contract_multiplier(symbol: str) -> float:
    """Point value of one contract, by first substring match in CONTRACT_MULTIPLIERS.

    Unknown instruments fall back to DEFAULT_MULTIPLIER.
    """
    upper = normalize_symbol(symbol)
    for needle, multiplier in CONTRACT_MULTIPLIERS:
        if needle in upper:
            return multiplier
    return DEFAULT_MULTIPLIER


def derive_net_pnl(
    symbol: str,
    direction: str,
    entry_price: float,
    exit_price: float,
    quantity: float,
    commission: float,
    fees: float,
) -> float:
    """Net realized P&L of one closed trade, in account currency.

    The result is not rounded. Stop-loss plays no part here.
    """
    if direction == DIRECTION_LONG:
        diff = exit_price - entry_price
    else:
        diff = entry_price - exit_price
    gross = diff * quantity * contract_multiplier(symbol)
    return gross - commission - fees


def estimate_trade_pnl(trade: TradeInput) -> float:
    return derive_net_pnl(
        trade.symbol,
        trade.direction,
        trade.entry_price,
        trade.exit_price,
        trade.quantity,
        trade.commission,
        trade.fees,
    )


def is_breakeven_eligible(estimated_pnl: float | None, band: float = BREAKEVEN_ELIGIBLE_BAND) -> bool:
    if estimated_pnl is None:
        return False
    return -band <= estimated_pnl <= band
