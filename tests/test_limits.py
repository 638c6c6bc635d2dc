from __future__ import annotations

from dataclasses import replace

import pytest

from tradeflow.metrics.limits import account_limit_status, drawdown_limit_amount
from tradeflow.metrics.summary import empty_snapshot
from tradeflow.models import Account


def _account(**overrides) -> Account:
    base = Account(
        account_id="a1",
        name="Eval 50K",
        account_type="Prop",
        initial_balance=50_000.0,
    )
    return replace(base, **overrides)


def test_trailing_drawdown_scales_with_high_water_mark() -> None:
    account = _account(max_drawdown=4.0, is_trailing_drawdown=True)
    assert drawdown_limit_amount(account, 1_000.0) == pytest.approx(2_040.0)


def test_fixed_drawdown_is_the_stored_amount() -> None:
    account = _account(max_drawdown=2_500.0)
    assert drawdown_limit_amount(account, 9_999.0) == 2_500.0
    assert drawdown_limit_amount(_account(), 0.0) is None


def test_drawdown_reached_and_warning() -> None:
    account = _account(max_drawdown=2_000.0)
    reached = account_limit_status(account, replace(empty_snapshot(), total_pnl=-2_000.0))
    assert reached.drawdown_reached is True
    assert reached.drawdown_warning is False

    warning = account_limit_status(account, replace(empty_snapshot(), total_pnl=-1_500.0))
    assert warning.drawdown_reached is False
    assert warning.drawdown_warning is True

    calm = account_limit_status(account, replace(empty_snapshot(), total_pnl=-500.0))
    assert calm.drawdown_warning is False


def test_daily_loss_limit() -> None:
    account = _account(max_daily_loss=1_000.0)
    warning = account_limit_status(account, replace(empty_snapshot(), daily_pnl=-600.0))
    assert warning.daily_loss_warning is True
    assert warning.daily_loss_reached is False

    reached = account_limit_status(account, replace(empty_snapshot(), daily_pnl=-1_000.0))
    assert reached.daily_loss_reached is True

    wider = account_limit_status(
        account,
        replace(empty_snapshot(), daily_pnl=-300.0),
        daily_loss_warning_buffer=800.0,
    )
    assert wider.daily_loss_warning is True


def test_balances_from_extrema() -> None:
    kpis = replace(empty_snapshot(), total_pnl=250.0, max_pnl=900.0, min_pnl=-300.0)
    status = account_limit_status(_account(), kpis)
    assert status.balance == 50_250.0
    assert status.max_balance == 50_900.0
    assert status.min_balance == 49_700.0
    assert status.drawdown_limit is None
    assert status.daily_loss_limit is None
