from __future__ import annotations

from tradeflow.models import ACCOUNT_TYPES, DIRECTION_LONG, DIRECTIONS, TradeInput


class TradeValidationError(ValueError):
    pass


class AccountValidationError(ValueError):
    pass


def validate_trade_input(trade: TradeInput) -> None:
    if not trade.symbol or not trade.symbol.strip():
        raise TradeValidationError("Symbol is required.")
    if trade.direction not in DIRECTIONS:
        raise TradeValidationError(f"Unknown direction {trade.direction!r}.")
    if isinstance(trade.quantity, bool) or not isinstance(trade.quantity, int) or trade.quantity <= 0:
        raise TradeValidationError("Quantity must be a positive whole number of contracts.")
    if trade.commission < 0:
        raise TradeValidationError("Commission must not be negative.")
    if trade.fees < 0:
        raise TradeValidationError("Fees must not be negative.")
    if trade.entry_time is None or trade.exit_time is None:
        raise TradeValidationError("Entry and exit times are required.")

    # An unset stop-loss is compared as 0.
    stop_loss = trade.stop_loss or 0.0
    if trade.direction == DIRECTION_LONG and stop_loss >= trade.entry_price:
        raise TradeValidationError("Stop Loss must be lower than Entry Price for Long trades.")
    if trade.direction != DIRECTION_LONG and stop_loss <= trade.entry_price:
        raise TradeValidationError("Stop Loss must be higher than Entry Price for Short trades.")


def validate_account_limits(
    max_daily_loss: float | None,
    max_drawdown: float | None,
    is_trailing_drawdown: bool,
) -> None:
    if max_daily_loss is not None and max_daily_loss < 0:
        raise AccountValidationError("Max daily loss must not be negative.")
    if max_drawdown is None:
        return
    if max_drawdown < 0:
        raise AccountValidationError("Max drawdown must not be negative.")
    if is_trailing_drawdown and max_drawdown > 100:
        raise AccountValidationError("Trailing drawdown is a percentage between 0 and 100.")


def validate_account(
    name: str,
    account_type: str,
    initial_balance: float,
    max_daily_loss: float | None,
    max_drawdown: float | None,
    is_trailing_drawdown: bool,
) -> None:
    if not name or not name.strip():
        raise AccountValidationError("Account name is required.")
    if account_type not in ACCOUNT_TYPES:
        raise AccountValidationError(
            f"Account type must be one of {', '.join(ACCOUNT_TYPES)}."
        )
    if initial_balance < 0:
        raise AccountValidationError("Initial balance must not be negative.")
    validate_account_limits(max_daily_loss, max_drawdown, is_trailing_drawdown)
