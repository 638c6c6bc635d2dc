from __future__ import annotations

from tradeflow.metrics.equity import running_pnl_extrema
from conftest import exit_desc, make_trade, utc


def test_all_losing_history_keeps_max_at_zero() -> None:
    trades = exit_desc([make_trade(-10.0, utc(2024, 1, 1)), make_trade(-20.0, utc(2024, 1, 2))])
    assert running_pnl_extrema(trades) == (0.0, -30.0)


def test_all_winning_history_keeps_min_at_zero() -> None:
    trades = exit_desc([make_trade(15.0, utc(2024, 1, 1)), make_trade(5.0, utc(2024, 1, 2))])
    assert running_pnl_extrema(trades) == (20.0, 0.0)


def test_extrema_follow_chronological_order() -> None:
    trades = exit_desc(
        [
            make_trade(50.0, utc(2024, 1, 1)),
            make_trade(-80.0, utc(2024, 1, 2)),
            make_trade(10.0, utc(2024, 1, 3)),
        ]
    )
    assert running_pnl_extrema(trades) == (50.0, -30.0)


def test_empty_history() -> None:
    assert running_pnl_extrema([]) == (0.0, 0.0)
