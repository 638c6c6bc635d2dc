from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

Direction = str

DIRECTION_LONG: Direction = "LONG"
DIRECTION_SHORT: Direction = "SHORT"
DIRECTIONS = (DIRECTION_LONG, DIRECTION_SHORT)

ACCOUNT_TYPES = ("Live", "Prop", "Demo")


@dataclass
class Account:
    account_id: str
    name: str
    account_type: str
    initial_balance: float
    max_daily_loss: float | None = None
    max_drawdown: float | None = None
    is_trailing_drawdown: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class TradeInput:
    symbol: str
    direction: Direction
    entry_price: float
    exit_price: float
    quantity: int
    entry_time: datetime
    exit_time: datetime
    commission: float = 0.0
    fees: float = 0.0
    stop_loss: float | None = None
    is_break_even: bool = False


@dataclass
class Trade:
    trade_id: str
    account_id: str
    symbol: str
    direction: Direction
    entry_price: float
    exit_price: float
    quantity: int
    entry_time: datetime
    exit_time: datetime
    pnl: float
    commission: float = 0.0
    fees: float = 0.0
    stop_loss: float | None = None
    is_break_even: bool = False

    @property
    def is_long(self) -> bool:
        return self.direction == DIRECTION_LONG
