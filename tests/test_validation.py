from __future__ import annotations

from dataclasses import replace

import pytest

from tradeflow.models import TradeInput
from tradeflow.validation import (
    AccountValidationError,
    TradeValidationError,
    validate_account,
    validate_trade_input,
)
from conftest import utc

BASE = TradeInput(
    symbol="MNQ",
    direction="LONG",
    entry_price=18000.0,
    exit_price=18010.0,
    quantity=2,
    entry_time=utc(2024, 1, 5, 14),
    exit_time=utc(2024, 1, 5, 15),
    stop_loss=17990.0,
)


def test_valid_long_passes() -> None:
    validate_trade_input(BASE)


def test_long_stop_must_be_below_entry() -> None:
    with pytest.raises(TradeValidationError, match="lower than Entry Price"):
        validate_trade_input(replace(BASE, stop_loss=18000.0))


def test_short_stop_must_be_above_entry() -> None:
    short = replace(BASE, direction="SHORT", stop_loss=18005.0)
    validate_trade_input(short)
    with pytest.raises(TradeValidationError, match="higher than Entry Price"):
        validate_trade_input(replace(short, stop_loss=17995.0))


def test_short_without_stop_is_rejected() -> None:
    with pytest.raises(TradeValidationError):
        validate_trade_input(replace(BASE, direction="SHORT", stop_loss=None))


def test_long_without_stop_is_accepted() -> None:
    validate_trade_input(replace(BASE, stop_loss=None))


@pytest.mark.parametrize(
    "changes",
    [
        {"quantity": 0},
        {"quantity": -1},
        {"commission": -1.0},
        {"fees": -0.5},
        {"direction": "FLAT"},
        {"symbol": "  "},
    ],
)
def test_rejected_fields(changes) -> None:
    with pytest.raises(TradeValidationError):
        validate_trade_input(replace(BASE, **changes))


def test_account_rules() -> None:
    validate_account("Eval", "Prop", 50_000.0, 1_000.0, 4.0, True)
    with pytest.raises(AccountValidationError):
        validate_account("Eval", "Paper", 50_000.0, None, None, False)
    with pytest.raises(AccountValidationError):
        validate_account("Eval", "Prop", 50_000.0, None, 150.0, True)
    with pytest.raises(AccountValidationError):
        validate_account("", "Live", 1_000.0, None, None, False)
    validate_account("Funded", "Live", 50_000.0, None, 2_500.0, False)
