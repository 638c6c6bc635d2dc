from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Iterable

from tradeflow.metrics.series import CalendarDay, date_key


def month_grid(calendar_days: Iterable[CalendarDay], month_start: date) -> dict[str, Any]:
    """Lay calendar entries on a Monday-first grid for the month of ``month_start``."""
    month_start = date(month_start.year, month_start.month, 1)
    month_end = shift_month(month_start, 1) - timedelta(days=1)
    by_date = {day.date: day for day in calendar_days}

    max_abs = 0.0
    for day in by_date.values():
        max_abs = max(max_abs, abs(day.pnl))

    grid_start = month_start - timedelta(days=month_start.weekday())
    grid_end = month_end + timedelta(days=(6 - month_end.weekday()))

    weeks = []
    cursor = grid_start
    while cursor <= grid_end:
        week = []
        for _ in range(7):
            key = date_key(cursor)
            entry = by_date.get(key)
            week.append(
                {
                    "date": key,
                    "day": cursor.day,
                    "in_month": cursor.month == month_start.month,
                    "pnl": entry.pnl if entry is not None else None,
                    "trade_count": entry.trade_count if entry is not None else 0,
                }
            )
            cursor += timedelta(days=1)
        weeks.append(week)

    return {
        "month_label": month_start.strftime("%B %Y"),
        "month_key": month_start.strftime("%Y-%m"),
        "prev_month": shift_month(month_start, -1).strftime("%Y-%m"),
        "next_month": shift_month(month_start, 1).strftime("%Y-%m"),
        "weeks": weeks,
        "max_abs_pnl": max_abs,
    }


def parse_month(value: str | None) -> date | None:
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        return None
    return date(parsed.year, parsed.month, 1)


def shift_month(value: date, delta: int) -> date:
    year = value.year + (value.month - 1 + delta) // 12
    month = (value.month - 1 + delta) % 12 + 1
    return date(year, month, 1)
