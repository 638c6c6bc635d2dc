from __future__ import annotations

import argparse
import json
import logging
import sqlite3
import sys
from datetime import datetime, timezone
from pathlib import Path

from tradeflow.config.app_config import load_app_config
from tradeflow.metrics.dashboard import aggregate
from tradeflow.metrics.summary import KpiSnapshot
from tradeflow.storage import sqlite_reader, sqlite_store
from tradeflow.storage.sqlite_reader import RecordNotFoundError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print dashboard KPIs for a trading account.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (defaults to config).")
    parser.add_argument("--config", type=Path, default=None, help="Path to app.toml.")
    parser.add_argument(
        "--account",
        type=str,
        default=None,
        help="Account id or name. Defaults to every account.",
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        default=None,
        help="ISO timestamp anchoring the daily/monthly/yearly figures (default: current time).",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON output.")
    parser.add_argument("--out", type=Path, default=None, help="Write output to a file instead of stdout.")
    args = parser.parse_args(argv)

    app_config = load_app_config(args.config)
    logging.basicConfig(level=app_config.app.log_level, format="%(levelname)s %(name)s: %(message)s")

    db_path = args.db or app_config.app.db_path
    if not db_path.exists():
        print(f"Database not found: {db_path}", file=sys.stderr)
        return 1

    conn = sqlite_store.connect(db_path)
    try:
        sqlite_store.init_db(conn)
        account_id = None
        if args.account:
            try:
                account_id = _resolve_account_id(conn, args.account)
            except RecordNotFoundError as exc:
                print(str(exc), file=sys.stderr)
                return 1
        trades = sqlite_reader.load_trades(conn, account_id=account_id)
    finally:
        conn.close()

    now = args.now or datetime.now(timezone.utc)
    result = aggregate(trades, now, tz=app_config.dashboard.tzinfo())

    if args.json:
        text = json.dumps(result.to_dict(), indent=2, sort_keys=True)
    else:
        text = _format_kpis(result.kpis)

    if args.out is None:
        print(text)
    else:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(text + "\n", encoding="utf-8")
    return 0


def _resolve_account_id(conn: sqlite3.Connection, value: str) -> str:
    for account in sqlite_reader.load_accounts(conn):
        if value in (account.account_id, account.name):
            return account.account_id
    raise RecordNotFoundError(f"Unknown account '{value}'.")


def _parse_now(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid timestamp: {value}") from exc


def _format_kpis(kpis: KpiSnapshot) -> str:
    lines = [f"{key} {_format_value(value)}" for key, value in kpis.to_dict().items()]
    return "\n".join(lines)


def _format_value(value: float | int | None) -> str:
    if value is None:
        return "na"
    if isinstance(value, int):
        return str(value)
    return f"{value:.6g}"


if __name__ == "__main__":
    raise SystemExit(main())
