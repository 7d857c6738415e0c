"""Date window helpers."""

from typing import Any, Iterable, List, Optional, Tuple
from datetime import datetime, timedelta

import pandas as pd

from .base_models import BusinessEvent, to_naive_datetime

DateWindow = Tuple[datetime, datetime]

# Relative ranges offered by the dashboard period picker
PERIOD_MONTHS = {
    "1m": 1,
    "3m": 3,
    "6m": 6,
    "1y": 12,
}
DEFAULT_PERIOD = "6m"


def validate_window(window: Tuple[Any, Any]) -> DateWindow:
    """Normalize ``(start, end)`` to naive datetimes; raise ValueError if start > end."""
    try:
        start, end = window
    except (TypeError, ValueError) as e:
        raise ValueError(f"window must be a (start, end) pair, got {window!r}") from e

    start = to_naive_datetime(start)
    end = to_naive_datetime(end)

    if start > end:
        raise ValueError(
            f"Invalid date window: start {start.isoformat()} is after end {end.isoformat()}"
        )
    return start, end


def add_days(date: datetime, days: int) -> datetime:
    return date + timedelta(days=days)


def in_window(date: datetime, window: DateWindow) -> bool:
    """Inclusive on both bounds."""
    start, end = window
    return start <= date <= end


def get_date_range(period: str, end: Optional[datetime] = None) -> DateWindow:
    """
    Window covering the last ``period`` ("1m", "3m", "6m" or "1y").

    Unknown periods fall back to six months. Month arithmetic is calendar
    based, so 31 March minus one month is 28/29 February.

    Args:
        period: Relative period key
        end: Window end (defaults to now)

    Returns:
        (start, end) tuple
    """
    end = to_naive_datetime(end) if end is not None else datetime.now()
    months = PERIOD_MONTHS.get(period, PERIOD_MONTHS[DEFAULT_PERIOD])
    start = (pd.Timestamp(end) - pd.DateOffset(months=months)).to_pydatetime()
    return start, end


def filter_events_in_period(
    events: Iterable[BusinessEvent],
    window: DateWindow
) -> List[BusinessEvent]:
    """Events whose [start_date, effective_end_date] overlaps the window."""
    # Two intervals overlap when one of them starts inside the other
    return [
        event for event in events
        if in_window(event.start_date, window)
        or in_window(window[0], (event.start_date, event.effective_end_date))
    ]
