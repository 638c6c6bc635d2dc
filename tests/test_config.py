from __future__ import annotations

from pathlib import Path

from tradeflow.config.app_config import load_app_config


def test_defaults_when_file_missing(tmp_path) -> None:
    config = load_app_config(tmp_path / "missing.toml", env={})
    assert config.app.db_path == Path("data/tradeflow.sqlite")
    assert config.app.port == 8000
    assert config.app.log_level == "INFO"
    assert config.dashboard.recent_trades_limit == 50
    assert config.dashboard.kpi_view == "daily"
    assert config.dashboard.recent_window == "this-week"
    assert config.dashboard.drawdown_warning_buffer == 1000.0
    assert config.dashboard.daily_loss_warning_buffer == 500.0
    assert config.dashboard.breakeven_band == 25.0
    assert config.dashboard.default_account is None
    assert config.dashboard.tzinfo() is None


def test_values_from_toml(tmp_path) -> None:
    path = tmp_path / "app.toml"
    path.write_text(
        """
[app]
db_path = "journal.sqlite"
port = 9001
log_level = "debug"

[dashboard]
default_account = "Eval 50K"
recent_trades_limit = 20
kpi_view = "monthly"
recent_window = "all"
breakeven_band = 40
""",
        encoding="utf-8",
    )
    config = load_app_config(path, env={})
    assert config.app.db_path == Path("journal.sqlite")
    assert config.app.port == 9001
    assert config.app.log_level == "DEBUG"
    assert config.dashboard.default_account == "Eval 50K"
    assert config.dashboard.recent_trades_limit == 20
    assert config.dashboard.kpi_view == "monthly"
    assert config.dashboard.recent_window == "all"
    assert config.dashboard.breakeven_band == 40.0


def test_invalid_choices_fall_back(tmp_path) -> None:
    path = tmp_path / "app.toml"
    path.write_text(
        '[dashboard]\nkpi_view = "weekly"\nrecent_window = "decade"\nrecent_trades_limit = -3\n',
        encoding="utf-8",
    )
    config = load_app_config(path, env={})
    assert config.dashboard.kpi_view == "daily"
    assert config.dashboard.recent_window == "this-week"
    assert config.dashboard.recent_trades_limit == 50


def test_env_overrides(tmp_path) -> None:
    path = tmp_path / "custom.toml"
    path.write_text('[app]\nport = 7000\n', encoding="utf-8")
    config = load_app_config(
        env={"TRADEFLOW_CONFIG": str(path), "TRADEFLOW_DB_PATH": str(tmp_path / "x.sqlite")}
    )
    assert config.app.port == 7000
    assert config.app.db_path == tmp_path / "x.sqlite"
