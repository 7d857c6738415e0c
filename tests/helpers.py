"""Factories for analytics test data."""

from datetime import datetime
from typing import List, Optional

from eventmetrics.analytics import (
    BusinessEvent,
    MetricAnalysis,
    MetricSeriesPoint,
)


def make_series(
    metric_id: str,
    values: List[float],
    start: datetime = datetime(2024, 1, 1)
) -> List[MetricSeriesPoint]:
    """Points on the same day of successive months, starting at ``start``."""
    points = []
    for i, value in enumerate(values):
        month = start.month - 1 + i
        date = start.replace(year=start.year + month // 12, month=month % 12 + 1)
        points.append(MetricSeriesPoint(metric_id=metric_id, date=date, value=value))
    return points


def make_analysis(
    metric_id: str,
    percentage_change: float = 0.0,
    trend: str = "stable",
    volatility: float = 0.0,
    end_value: float = 100.0,
    metric_name: Optional[str] = None
) -> MetricAnalysis:
    return MetricAnalysis(
        metric_id=metric_id,
        metric_name=metric_name,
        start_value=100.0,
        end_value=end_value,
        absolute_change=end_value - 100.0,
        percentage_change=percentage_change,
        trend=trend,
        volatility=volatility,
        anomalies=[],
        is_anomalous=abs(percentage_change) > 20,
        data_points=4
    )


def make_event(
    event_id: str,
    impact: str = "high",
    start_date: datetime = datetime(2024, 3, 1),
    end_date: Optional[datetime] = None,
    name: Optional[str] = None
) -> BusinessEvent:
    return BusinessEvent(
        id=event_id,
        name=name,
        category="marketing",
        impact=impact,
        start_date=start_date,
        end_date=end_date
    )
