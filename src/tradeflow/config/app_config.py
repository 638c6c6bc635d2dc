from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11
    import tomli as tomllib

from tradeflow.metrics.dashboard import KPI_VIEWS
from tradeflow.metrics.limits import DAILY_LOSS_WARNING_BUFFER, DRAWDOWN_WARNING_BUFFER
from tradeflow.metrics.windows import RECENT_WINDOWS, WINDOW_THIS_WEEK
from tradeflow.pnl import BREAKEVEN_ELIGIBLE_BAND


@dataclass(frozen=True)
class AppSettings:
    db_path: Path
    host: str
    port: int
    reload: bool
    log_level: str


@dataclass(frozen=True)
class DashboardSettings:
    timezone: str
    default_account: str | None
    recent_trades_limit: int
    kpi_view: str
    recent_window: str
    drawdown_warning_buffer: float
    daily_loss_warning_buffer: float
    breakeven_band: float

    def tzinfo(self) -> tzinfo | None:
        """Configured zone, or ``None`` for the system timezone."""
        if not self.timezone:
            return None
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            return None


@dataclass(frozen=True)
class AppConfig:
    app: AppSettings
    dashboard: DashboardSettings


def load_app_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    env = os.environ if env is None else env
    config_path = path or Path(env.get("TRADEFLOW_CONFIG", "config/app.toml"))
    raw: Mapping[str, Any] = {}
    if config_path.exists():
        raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    app_raw = _section(raw, "app")
    dashboard_raw = _section(raw, "dashboard")

    db_path = env.get("TRADEFLOW_DB_PATH") or app_raw.get("db_path", "data/tradeflow.sqlite")
    app = AppSettings(
        db_path=Path(db_path),
        host=str(app_raw.get("host", "127.0.0.1")),
        port=int(app_raw.get("port", 8000)),
        reload=bool(app_raw.get("reload", True)),
        log_level=str(app_raw.get("log_level", "INFO")).upper(),
    )

    kpi_view = str(dashboard_raw.get("kpi_view", "daily")).strip().lower()
    if kpi_view not in KPI_VIEWS:
        kpi_view = "daily"
    recent_window = str(dashboard_raw.get("recent_window", WINDOW_THIS_WEEK)).strip().lower()
    if recent_window not in RECENT_WINDOWS:
        recent_window = WINDOW_THIS_WEEK

    dashboard = DashboardSettings(
        timezone=str(dashboard_raw.get("timezone", "")).strip(),
        default_account=_str_or_none(dashboard_raw.get("default_account")),
        recent_trades_limit=_positive_int(dashboard_raw.get("recent_trades_limit"), 50),
        kpi_view=kpi_view,
        recent_window=recent_window,
        drawdown_warning_buffer=_float_or(
            dashboard_raw.get("drawdown_warning_buffer"), DRAWDOWN_WARNING_BUFFER
        ),
        daily_loss_warning_buffer=_float_or(
            dashboard_raw.get("daily_loss_warning_buffer"), DAILY_LOSS_WARNING_BUFFER
        ),
        breakeven_band=_float_or(dashboard_raw.get("breakeven_band"), BREAKEVEN_ELIGIBLE_BAND),
    )

    return AppConfig(app=app, dashboard=dashboard)


def _section(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


def _str_or_none(value: Any) -> str | None:
    if value in (None, ""):
        return None
    return str(value)


def _positive_int(value: Any, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _float_or(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
