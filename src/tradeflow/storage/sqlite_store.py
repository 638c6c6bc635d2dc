from __future__ import annotations

import logging
import sqlite3
import uuid
from datetime import datetime, timezone, tzinfo
from pathlib import Path

from tradeflow.metrics.periods import to_local
from tradeflow.models import Account, Trade, TradeInput
from tradeflow.pnl import BREAKEVEN_ELIGIBLE_BAND, estimate_trade_pnl, is_breakeven_eligible, normalize_symbol
from tradeflow.storage.sqlite_reader import RecordNotFoundError, load_account, load_trade
from tradeflow.validation import validate_account, validate_trade_input

logger = logging.getLogger(__name__)


def connect(db_path: Path) -> sqlite3.Connection:
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    # Request-scoped connections may be opened and used on different worker threads.
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS accounts (
            account_id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            account_type TEXT NOT NULL,
            initial_balance REAL NOT NULL,
            max_daily_loss REAL,
            max_drawdown REAL,
            is_trailing_drawdown INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS trades (
            trade_id TEXT PRIMARY KEY,
            account_id TEXT NOT NULL REFERENCES accounts(account_id) ON DELETE CASCADE,
            symbol TEXT NOT NULL,
            direction TEXT NOT NULL,
            entry_price REAL NOT NULL,
            exit_price REAL NOT NULL,
            stop_loss REAL,
            quantity INTEGER NOT NULL,
            entry_time TEXT NOT NULL,
            exit_time TEXT NOT NULL,
            commission REAL NOT NULL DEFAULT 0,
            fees REAL NOT NULL DEFAULT 0,
            is_be INTEGER NOT NULL DEFAULT 0,
            pnl REAL NOT NULL
        )
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS trades_account_exit ON trades (account_id, exit_time)"
    )
    conn.commit()


def create_account(
    conn: sqlite3.Connection,
    *,
    name: str,
    account_type: str,
    initial_balance: float,
    max_daily_loss: float | None = None,
    max_drawdown: float | None = None,
    is_trailing_drawdown: bool = False,
) -> Account:
    validate_account(
        name, account_type, initial_balance, max_daily_loss, max_drawdown, is_trailing_drawdown
    )
    account_id = uuid.uuid4().hex
    conn.execute(
        """
        INSERT INTO accounts (
            account_id, name, account_type, initial_balance, max_daily_loss, max_drawdown,
            is_trailing_drawdown, created_at
        )
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            account_id,
            name.strip(),
            account_type,
            initial_balance,
            max_daily_loss,
            max_drawdown,
            1 if is_trailing_drawdown else 0,
            _timestamp(datetime.now(timezone.utc)),
        ),
    )
    conn.commit()
    logger.info("Created account %s (%s)", account_id, account_type)
    return load_account(conn, account_id)


def update_account(
    conn: sqlite3.Connection,
    account_id: str,
    *,
    name: str,
    max_daily_loss: float | None = None,
    max_drawdown: float | None = None,
    is_trailing_drawdown: bool = False,
) -> Account:
    """Rename an account and replace its risk limits; type and balance stay fixed."""
    existing = load_account(conn, account_id)
    validate_account(
        name,
        existing.account_type,
        existing.initial_balance,
        max_daily_loss,
        max_drawdown,
        is_trailing_drawdown,
    )
    conn.execute(
        """
        UPDATE accounts
        SET name = ?, max_daily_loss = ?, max_drawdown = ?, is_trailing_drawdown = ?
        WHERE account_id = ?
        """,
        (
            name.strip(),
            max_daily_loss,
            max_drawdown,
            1 if is_trailing_drawdown else 0,
            account_id,
        ),
    )
    conn.commit()
    return load_account(conn, account_id)


def delete_account(conn: sqlite3.Connection, account_id: str) -> None:
    cursor = conn.execute("DELETE FROM accounts WHERE account_id = ?", (account_id,))
    conn.commit()
    if cursor.rowcount == 0:
        raise RecordNotFoundError(f"Account {account_id!r} not found.")
    logger.info("Deleted account %s and its trades", account_id)


def create_trade(
    conn: sqlite3.Connection,
    account_id: str,
    trade: TradeInput,
    *,
    breakeven_band: float = BREAKEVEN_ELIGIBLE_BAND,
    tz: tzinfo | None = None,
) -> Trade:
    load_account(conn, account_id)
    row = _trade_row(trade, breakeven_band, tz)
    row["trade_id"] = uuid.uuid4().hex
    row["account_id"] = account_id
    conn.execute(
        """
        INSERT INTO trades (
            trade_id, account_id, symbol, direction, entry_price, exit_price, stop_loss, quantity,
            entry_time, exit_time, commission, fees, is_be, pnl
        )
        VALUES (
            :trade_id, :account_id, :symbol, :direction, :entry_price, :exit_price, :stop_loss, :quantity,
            :entry_time, :exit_time, :commission, :fees, :is_be, :pnl
        )
        """,
        row,
    )
    conn.commit()
    logger.info("Logged trade %s %s %s pnl=%.2f", row["trade_id"], row["symbol"], row["direction"], row["pnl"])
    return load_trade(conn, row["trade_id"])


def update_trade(
    conn: sqlite3.Connection,
    trade_id: str,
    trade: TradeInput,
    *,
    breakeven_band: float = BREAKEVEN_ELIGIBLE_BAND,
    tz: tzinfo | None = None,
) -> Trade:
    """Replace every user field of a trade and re-derive its P&L."""
    load_trade(conn, trade_id)
    row = _trade_row(trade, breakeven_band, tz)
    row["trade_id"] = trade_id
    conn.execute(
        """
        UPDATE trades SET
            symbol = :symbol,
            direction = :direction,
            entry_price = :entry_price,
            exit_price = :exit_price,
            stop_loss = :stop_loss,
            quantity = :quantity,
            entry_time = :entry_time,
            exit_time = :exit_time,
            commission = :commission,
            fees = :fees,
            is_be = :is_be,
            pnl = :pnl
        WHERE trade_id = :trade_id
        """,
        row,
    )
    conn.commit()
    return load_trade(conn, trade_id)


def delete_trade(conn: sqlite3.Connection, trade_id: str) -> None:
    cursor = conn.execute("DELETE FROM trades WHERE trade_id = ?", (trade_id,))
    conn.commit()
    if cursor.rowcount == 0:
        raise RecordNotFoundError(f"Trade {trade_id!r} not found.")


def _trade_row(trade: TradeInput, breakeven_band: float, tz: tzinfo | None) -> dict[str, object]:
    validate_trade_input(trade)
    pnl = estimate_trade_pnl(trade)
    return {
        "symbol": normalize_symbol(trade.symbol),
        "direction": trade.direction,
        "entry_price": trade.entry_price,
        "exit_price": trade.exit_price,
        "stop_loss": trade.stop_loss,
        "quantity": trade.quantity,
        "entry_time": _timestamp(trade.entry_time, tz),
        "exit_time": _timestamp(trade.exit_time, tz),
        "commission": trade.commission,
        "fees": trade.fees,
        "is_be": 1 if trade.is_break_even and is_breakeven_eligible(pnl, breakeven_band) else 0,
        "pnl": pnl,
    }


def _timestamp(value: datetime, tz: tzinfo | None = None) -> str:
    # Stored in UTC with a fixed width so text order matches time order.
    return to_local(value, tz).astimezone(timezone.utc).isoformat(timespec="microseconds")

