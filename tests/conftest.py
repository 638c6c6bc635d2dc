from __future__ import annotations

import time
from datetime import datetime, timezone
from itertools import count

import pytest

from tradeflow.models import Trade

_ids = count(1)


def utc(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def make_trade(
    pnl: float,
    exit_time: datetime | None = None,
    *,
    symbol: str = "ES",
    direction: str = "LONG",
    entry_price: float = 100.0,
    exit_price: float = 110.0,
    stop_loss: float | None = 95.0,
    quantity: int = 1,
    is_break_even: bool = False,
    account_id: str = "acct",
) -> Trade:
    exit_time = exit_time or utc(2024, 1, 5)
    return Trade(
        trade_id=f"t{next(_ids)}",
        account_id=account_id,
        symbol=symbol,
        direction=direction,
        entry_price=entry_price,
        exit_price=exit_price,
        stop_loss=stop_loss,
        quantity=quantity,
        entry_time=exit_time,
        exit_time=exit_time,
        pnl=pnl,
        is_break_even=is_break_even,
    )


def exit_desc(trades: list[Trade]) -> list[Trade]:
    return sorted(trades, key=lambda trade: trade.exit_time, reverse=True)


@pytest.fixture
def trade_factory():
    return make_trade


@pytest.fixture
def new_york_system_tz(monkeypatch):
    """Run the test with the process timezone set to America/New_York."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
