"""Before/after impact ratio of a business event on metrics."""

from typing import Dict, List, Optional, Sequence

from .base_models import BusinessEvent, EventImpactEstimate, MetricSeriesPoint
from .date_utils import add_days
from .metric_analyzer import filter_frame_by_window, series_to_frame
from . import math_utils

DEFAULT_WINDOW_DAYS = 30


class EventImpactEstimator:
    """
    Estimates how a metric moved around a business event.

    Compares the average over ``window_days`` before the event starts with the
    average over ``window_days`` after it ends. The resulting impact ratio is
    ``percentage_change(before, after) / 100``: a direction/magnitude
    surrogate, not a correlation coefficient. It is unbounded and says nothing
    about causation.
    """

    def __init__(self, window_days: int = DEFAULT_WINDOW_DAYS):
        """
        Initialize impact estimator.

        Args:
            window_days: Length of the before and after windows in days
        """
        if window_days < 0:
            raise ValueError(f"window_days must be >= 0, got {window_days}")
        self.window_days = window_days

    def estimate(
        self,
        series: Sequence[MetricSeriesPoint],
        event: BusinessEvent,
        metric_id: str
    ) -> Optional[EventImpactEstimate]:
        """
        Impact estimate for one metric.

        Returns None when either window holds no points: missing data is not
        the same as zero impact.
        """
        estimates = self.estimate_all(series, event, metric_ids=[metric_id])
        return estimates[0] if estimates else None

    def estimate_all(
        self,
        series: Sequence[MetricSeriesPoint],
        event: BusinessEvent,
        metric_ids: Optional[Sequence[str]] = None
    ) -> List[EventImpactEstimate]:
        """
        Impact estimates for several metrics.

        Args:
            series: Metric points covering the event's surroundings
            event: The business event
            metric_ids: Metrics to estimate; None takes every metric in
                ``series`` in order of first appearance

        Returns:
            Estimates for metrics with data on both sides of the event
        """
        before_window = (add_days(event.start_date, -self.window_days), event.start_date)
        after_start = event.effective_end_date
        after_window = (after_start, add_days(after_start, self.window_days))

        frame = series_to_frame(series)
        if metric_ids is None:
            metric_ids = list(dict.fromkeys(p.metric_id for p in series))

        estimates = []
        for metric_id in metric_ids:
            metric_frame = frame[frame["metric_id"] == metric_id]
            before = filter_frame_by_window(metric_frame, before_window)["value"].tolist()
            after = filter_frame_by_window(metric_frame, after_window)["value"].tolist()

            if not before or not after:
                continue

            before_avg = math_utils.average(before)
            after_avg = math_utils.average(after)
            change = math_utils.percentage_change(before_avg, after_avg)

            estimates.append(EventImpactEstimate(
                metric_id=metric_id,
                event_id=event.id,
                before_avg=before_avg,
                after_avg=after_avg,
                before_count=len(before),
                after_count=len(after),
                impact_ratio=math_utils.round_to_decimals(change / 100, 4)
            ))

        return estimates

    def estimate_impact_ratios(
        self,
        series: Sequence[MetricSeriesPoint],
        event: BusinessEvent,
        metric_ids: Optional[Sequence[str]] = None
    ) -> Dict[str, float]:
        """Metric id -> impact ratio; metrics lacking data on either side are absent."""
        return {
            estimate.metric_id: estimate.impact_ratio
            for estimate in self.estimate_all(series, event, metric_ids)
        }
