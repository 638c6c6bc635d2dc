from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, tzinfo
from typing import Any, Sequence

from tradeflow.metrics.equity import running_pnl_extrema
from tradeflow.metrics.periods import compute_period_stats
from tradeflow.metrics.series import (
    CalendarDay,
    ChartPoint,
    calendar_series,
    chart_series,
    daily_buckets,
)
from tradeflow.metrics.summary import KpiSnapshot, compute_summary, empty_snapshot
from tradeflow.models import Trade


@dataclass(frozen=True)
class DashboardAggregate:
    kpis: KpiSnapshot
    chart_series: list[ChartPoint]
    calendar_series: list[CalendarDay]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kpis": self.kpis.to_dict(),
            "chart_series": [asdict(point) for point in self.chart_series],
            "calendar_series": [asdict(day) for day in self.calendar_series],
        }


def aggregate(
    trades: Sequence[Trade],
    now: datetime,
    *,
    tz: tzinfo | None = None,
) -> DashboardAggregate:
    """Recompute every dashboard figure from ``trades``.

    ``trades`` must be ordered by exit time descending. ``now`` anchors the
    daily/monthly/yearly periods and ``tz`` decides calendar boundaries
    (``None`` uses the system timezone).
    """
    trade_list = list(trades)
    summary = compute_summary(trade_list)
    periods = compute_period_stats(trade_list, now, tz)
    max_pnl, min_pnl = running_pnl_extrema(trade_list)
    buckets = daily_buckets(trade_list, tz)

    kpis = KpiSnapshot(
        total_trades=summary.total_trades,
        total_pnl=summary.total_pnl,
        wins=summary.wins,
        losses=summary.losses,
        breakevens=summary.breakevens,
        win_rate=summary.win_rate,
        avg_win=summary.avg_win,
        avg_loss=summary.avg_loss,
        avg_rr=summary.avg_rr,
        daily_pnl=periods.daily.pnl,
        daily_trades_count=periods.daily.trades,
        monthly_pnl=periods.monthly.pnl,
        monthly_trades_count=periods.monthly.trades,
        yearly_pnl=periods.yearly.pnl,
        yearly_trades_count=periods.yearly.trades,
        max_pnl=max_pnl,
        min_pnl=min_pnl,
    )
    return DashboardAggregate(
        kpis=kpis,
        chart_series=chart_series(buckets),
        calendar_series=calendar_series(buckets),
    )


def empty_aggregate() -> DashboardAggregate:
    return DashboardAggregate(kpis=empty_snapshot(), chart_series=[], calendar_series=[])


KPI_VIEWS = ("net", "daily", "monthly", "yearly")


def select_kpi_view(kpis: KpiSnapshot, view: str) -> tuple[float, int]:
    """P&L and trade count for the headline card; unknown views fall back to all time."""
    if view == "daily":
        return kpis.daily_pnl, kpis.daily_trades_count
    if view == "monthly":
        return kpis.monthly_pnl, kpis.monthly_trades_count
    if view == "yearly":
        return kpis.yearly_pnl, kpis.yearly_trades_count
    return kpis.total_pnl, kpis.total_trades
