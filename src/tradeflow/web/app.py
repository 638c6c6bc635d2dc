from __future__ import annotations

import logging
import sqlite3
from dataclasses import asdict
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Iterator

from fastapi import Depends, FastAPI, HTTPException, Response

from tradeflow.config.app_config import AppConfig, load_app_config
from tradeflow.metrics.calendar import month_grid, parse_month
from tradeflow.metrics.dashboard import aggregate, empty_aggregate, select_kpi_view
from tradeflow.metrics.limits import account_limit_status
from tradeflow.metrics.periods import local_date
from tradeflow.metrics.risk import trade_risk_reward
from tradeflow.metrics.series import cumulative_chart_series
from tradeflow.metrics.windows import RECENT_WINDOWS, filter_trades_by_window
from tradeflow.models import Account, Trade
from tradeflow.pnl import contract_multiplier, derive_net_pnl, is_breakeven_eligible, normalize_symbol
from tradeflow.storage import sqlite_reader, sqlite_store
from tradeflow.storage.sqlite_reader import RecordNotFoundError
from tradeflow.validation import AccountValidationError, TradeValidationError
from tradeflow.web.schemas import AccountCreate, AccountUpdate, PnlPreview, TradeCreate, TradeUpdate

logger = logging.getLogger(__name__)

app = FastAPI(title="TradeFlow Journal")


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_app_config()


def get_connection(config: AppConfig = Depends(get_config)) -> Iterator[sqlite3.Connection]:
    conn = sqlite_store.connect(config.app.db_path)
    try:
        sqlite_store.init_db(conn)
        yield conn
    finally:
        conn.close()


@app.get("/api/dashboard")
def dashboard_api(
    account_id: str | None = None,
    now: datetime | None = None,
    cumulative: bool = False,
    config: AppConfig = Depends(get_config),
    conn: sqlite3.Connection = Depends(get_connection),
) -> dict[str, Any]:
    settings = config.dashboard
    tz = settings.tzinfo()
    now = now or datetime.now(timezone.utc)
    try:
        account = _resolve_account(conn, account_id, settings.default_account)
        trades = sqlite_reader.load_trades(
            conn, account_id=account.account_id if account is not None else None
        )
    except (sqlite3.Error, RecordNotFoundError, ValueError):
        # ValueError: a stored row that no longer decodes.
        logger.exception("Failed to fetch dashboard data for account %s", account_id)
        return _empty_dashboard_payload("Failed to fetch data", settings.kpi_view)

    result = aggregate(trades, now, tz=tz)
    payload = result.to_dict()
    if cumulative:
        payload["chart_series"] = [asdict(point) for point in cumulative_chart_series(result.chart_series)]
    pnl, count = select_kpi_view(result.kpis, settings.kpi_view)
    limits = None
    if account is not None:
        limits = account_limit_status(
            account,
            result.kpis,
            drawdown_warning_buffer=settings.drawdown_warning_buffer,
            daily_loss_warning_buffer=settings.daily_loss_warning_buffer,
        ).to_dict()
    payload.update(
        {
            "success": True,
            "account": _account_payload(account) if account is not None else None,
            "trades": [_trade_payload(trade) for trade in trades[: settings.recent_trades_limit]],
            "limits": limits,
            "headline": {"view": settings.kpi_view, "pnl": pnl, "trades": count},
        }
    )
    return payload


@app.get("/api/calendar")
def calendar_api(
    account_id: str | None = None,
    month: str | None = None,
    now: datetime | None = None,
    config: AppConfig = Depends(get_config),
    conn: sqlite3.Connection = Depends(get_connection),
) -> dict[str, Any]:
    tz = config.dashboard.tzinfo()
    now = now or datetime.now(timezone.utc)
    try:
        account = _resolve_account(conn, account_id, config.dashboard.default_account)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    trades = sqlite_reader.load_trades(
        conn, account_id=account.account_id if account is not None else None
    )
    result = aggregate(trades, now, tz=tz)
    month_start = parse_month(month) or local_date(now, tz).replace(day=1)
    return month_grid(result.calendar_series, month_start)


@app.get("/api/accounts")
def accounts_api(conn: sqlite3.Connection = Depends(get_connection)) -> list[dict[str, Any]]:
    return [_account_payload(account) for account in sqlite_reader.load_accounts(conn)]


@app.post("/api/accounts", status_code=201)
def create_account_api(
    body: AccountCreate,
    conn: sqlite3.Connection = Depends(get_connection),
) -> dict[str, Any]:
    try:
        account = sqlite_store.create_account(conn, **body.model_dump())
    except AccountValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _account_payload(account)


@app.put("/api/accounts/{account_id}")
def update_account_api(
    account_id: str,
    body: AccountUpdate,
    conn: sqlite3.Connection = Depends(get_connection),
) -> dict[str, Any]:
    try:
        account = sqlite_store.update_account(conn, account_id, **body.model_dump())
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except AccountValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _account_payload(account)


@app.delete("/api/accounts/{account_id}", status_code=204)
def delete_account_api(
    account_id: str,
    conn: sqlite3.Connection = Depends(get_connection),
) -> Response:
    try:
        sqlite_store.delete_account(conn, account_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)


@app.get("/api/trades")
def trades_api(
    account_id: str | None = None,
    window: str | None = None,
    now: datetime | None = None,
    config: AppConfig = Depends(get_config),
    conn: sqlite3.Connection = Depends(get_connection),
) -> list[dict[str, Any]]:
    window = window or config.dashboard.recent_window
    if window not in RECENT_WINDOWS:
        raise HTTPException(status_code=422, detail=f"Unknown trade window {window!r}.")
    try:
        account = _resolve_account(conn, account_id, config.dashboard.default_account)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if account is None:
        return []
    trades = sqlite_reader.load_trades(conn, account_id=account.account_id)
    filtered = filter_trades_by_window(
        trades, window, now or datetime.now(timezone.utc), config.dashboard.tzinfo()
    )
    return [_trade_payload(trade) for trade in filtered]


@app.post("/api/trades", status_code=201)
def create_trade_api(
    body: TradeCreate,
    config: AppConfig = Depends(get_config),
    conn: sqlite3.Connection = Depends(get_connection),
) -> dict[str, Any]:
    try:
        trade = sqlite_store.create_trade(
            conn,
            body.account_id,
            body.to_input(),
            breakeven_band=config.dashboard.breakeven_band,
            tz=config.dashboard.tzinfo(),
        )
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TradeValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _trade_payload(trade)


@app.put("/api/trades/{trade_id}")
def update_trade_api(
    trade_id: str,
    body: TradeUpdate,
    config: AppConfig = Depends(get_config),
    conn: sqlite3.Connection = Depends(get_connection),
) -> dict[str, Any]:
    try:
        trade = sqlite_store.update_trade(
            conn,
            trade_id,
            body.to_input(),
            breakeven_band=config.dashboard.breakeven_band,
            tz=config.dashboard.tzinfo(),
        )
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except TradeValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _trade_payload(trade)


@app.delete("/api/trades/{trade_id}", status_code=204)
def delete_trade_api(
    trade_id: str,
    conn: sqlite3.Connection = Depends(get_connection),
) -> Response:
    try:
        sqlite_store.delete_trade(conn, trade_id)
    except RecordNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)


@app.post("/api/pnl/preview")
def pnl_preview_api(body: PnlPreview, config: AppConfig = Depends(get_config)) -> dict[str, Any]:
    pnl = derive_net_pnl(
        body.symbol,
        body.direction,
        body.entry_price,
        body.exit_price,
        body.quantity,
        body.commission,
        body.fees,
    )
    return {
        "symbol": normalize_symbol(body.symbol),
        "multiplier": contract_multiplier(body.symbol),
        "pnl": pnl,
        "breakeven_eligible": is_breakeven_eligible(pnl, config.dashboard.breakeven_band),
    }


def _resolve_account(
    conn: sqlite3.Connection,
    account_id: str | None,
    default_account: str | None,
) -> Account | None:
    # Explicit id, then configured default, then the newest account.
    if account_id:
        return sqlite_reader.load_account(conn, account_id)
    accounts = sqlite_reader.load_accounts(conn)
    if default_account:
        for account in accounts:
            if default_account in (account.account_id, account.name):
                return account
    return accounts[0] if accounts else None


def _empty_dashboard_payload(error: str, kpi_view: str) -> dict[str, Any]:
    payload = empty_aggregate().to_dict()
    payload.update(
        {
            "success": False,
            "error": error,
            "account": None,
            "trades": [],
            "limits": None,
            "headline": {"view": kpi_view, "pnl": 0.0, "trades": 0},
        }
    )
    return payload


def _account_payload(account: Account) -> dict[str, Any]:
    return {
        "account_id": account.account_id,
        "name": account.name,
        "account_type": account.account_type,
        "initial_balance": account.initial_balance,
        "max_daily_loss": account.max_daily_loss,
        "max_drawdown": account.max_drawdown,
        "is_trailing_drawdown": account.is_trailing_drawdown,
        "created_at": account.created_at.isoformat() if account.created_at else None,
    }


def _trade_payload(trade: Trade) -> dict[str, Any]:
    return {
        "trade_id": trade.trade_id,
        "account_id": trade.account_id,
        "symbol": trade.symbol,
        "direction": trade.direction,
        "entry_price": trade.entry_price,
        "exit_price": trade.exit_price,
        "stop_loss": trade.stop_loss,
        "quantity": trade.quantity,
        "entry_time": trade.entry_time.isoformat(),
        "exit_time": trade.exit_time.isoformat(),
        "commission": trade.commission,
        "fees": trade.fees,
        "is_break_even": trade.is_break_even,
        "pnl": trade.pnl,
        "rr": trade_risk_reward(trade) or 0.0,
    }


def main() -> None:
    import uvicorn

    app_config = load_app_config()
    logging.basicConfig(
        level=app_config.app.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "tradeflow.web.app:app",
        host=app_config.app.host,
        port=app_config.app.port,
        reload=app_config.app.reload,
    )


if __name__ == "__main__":
    main()
