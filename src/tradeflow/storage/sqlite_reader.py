from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any

from tradeflow.models import Account, Trade


class RecordNotFoundError(LookupError):
    pass


def load_accounts(conn: sqlite3.Connection) -> list[Account]:
    rows = conn.execute("SELECT * FROM accounts ORDER BY created_at DESC, rowid DESC").fetchall()
    return [_account_from_row(row) for row in rows]


def load_account(conn: sqlite3.Connection, account_id: str) -> Account:
    row = conn.execute("SELECT * FROM accounts WHERE account_id = ?", (account_id,)).fetchone()
    if row is None:
        raise RecordNotFoundError(f"Account {account_id!r} not found.")
    return _account_from_row(row)


def load_trades(conn: sqlite3.Connection, *, account_id: str | None = None) -> list[Trade]:
    """Trades for one account (or all accounts), newest exit first."""
    clauses: list[str] = []
    params: list[Any] = []
    if account_id is not None:
        clauses.append("account_id = ?")
        params.append(account_id)
    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    query = f"SELECT * FROM trades{where} ORDER BY exit_time DESC, trade_id DESC"
    rows = conn.execute(query, params).fetchall()
    return [_trade_from_row(row) for row in rows]


def load_trade(conn: sqlite3.Connection, trade_id: str) -> Trade:
    row = conn.execute("SELECT * FROM trades WHERE trade_id = ?", (trade_id,)).fetchone()
    if row is None:
        raise RecordNotFoundError(f"Trade {trade_id!r} not found.")
    return _trade_from_row(row)


def _account_from_row(row: sqlite3.Row) -> Account:
    return Account(
        account_id=row["account_id"],
        name=row["name"],
        account_type=row["account_type"],
        initial_balance=row["initial_balance"],
        max_daily_loss=row["max_daily_loss"],
        max_drawdown=row["max_drawdown"],
        is_trailing_drawdown=bool(row["is_trailing_drawdown"]),
        created_at=_parse_iso(row["created_at"]),
    )


def _trade_from_row(row: sqlite3.Row) -> Trade:
    return Trade(
        trade_id=row["trade_id"],
        account_id=row["account_id"],
        symbol=row["symbol"],
        direction=row["direction"],
        entry_price=row["entry_price"],
        exit_price=row["exit_price"],
        stop_loss=row["stop_loss"],
        quantity=row["quantity"],
        entry_time=_parse_iso(row["entry_time"]),
        exit_time=_parse_iso(row["exit_time"]),
        commission=row["commission"],
        fees=row["fees"],
        is_break_even=bool(row["is_be"]),
        pnl=row["pnl"],
    )


def _parse_iso(value: str | None) -> datetime:
    if value is None:
        raise ValueError("Missing timestamp")
    return datetime.fromisoformat(value)
