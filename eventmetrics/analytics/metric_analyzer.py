"""Per-metric series analysis: change, trend, volatility and anomalies."""

from typing import Dict, List, Optional, Sequence

import pandas as pd

from .base_models import MetricAnalysis, MetricSeriesPoint
from .date_utils import DateWindow
from . import math_utils

# Net change beyond this percent marks a metric as anomalous on its own
ANOMALOUS_CHANGE_PERCENT = 20.0
MIN_POINTS = 2

FRAME_COLUMNS = ["metric_id", "date", "value"]


def series_to_frame(points: Sequence[MetricSeriesPoint]) -> pd.DataFrame:
    """
    Long-format frame (metric_id, date, value) stably sorted by date.

    Points sharing a date keep their input order.
    """
    frame = pd.DataFrame({
        "metric_id": pd.Series([p.metric_id for p in points], dtype=object),
        "date": pd.to_datetime(pd.Series([p.date for p in points], dtype=object)),
        "value": pd.Series([p.value for p in points], dtype=float),
    }, columns=FRAME_COLUMNS)
    return frame.sort_values("date", kind="mergesort").reset_index(drop=True)


def filter_frame_by_window(frame: pd.DataFrame, window: Optional[DateWindow]) -> pd.DataFrame:
    """Rows whose date lies in ``window`` (inclusive). ``None`` keeps everything."""
    if window is None:
        return frame
    start, end = window
    mask = (frame["date"] >= pd.Timestamp(start)) & (frame["date"] <= pd.Timestamp(end))
    return frame[mask]


class MetricAnalyzer:
    """
    Summarizes each metric's series inside a date window.

    Produces start/end values, absolute and percentage change, a first-vs-last
    trend, volatility (coefficient of variation, %) and z-score anomalies.
    """

    def __init__(
        self,
        anomaly_threshold: float = 2.0,
        trend_threshold_percent: float = math_utils.TREND_THRESHOLD_PERCENT
    ):
        """
        Initialize analyzer.

        Args:
            anomaly_threshold: Standard deviations from the mean that flag an anomaly
            trend_threshold_percent: Net change (%) needed to call a trend
        """
        self.anomaly_threshold = anomaly_threshold
        self.trend_threshold_percent = trend_threshold_percent

    def analyze(
        self,
        series: Sequence[MetricSeriesPoint],
        window: Optional[DateWindow] = None,
        metric_names: Optional[Dict[str, str]] = None
    ) -> List[MetricAnalysis]:
        """
        Analyze every metric present in ``series``.

        Args:
            series: Points for one or more metrics, any order
            window: Inclusive (start, end) filter; None analyzes all points
            metric_names: Optional metric id -> display name

        Returns:
            One MetricAnalysis per metric with at least two points in the
            window, ordered by each metric's earliest point
        """
        frame = filter_frame_by_window(series_to_frame(series), window)
        metric_names = metric_names or {}

        analyses = []
        for metric_id, group in frame.groupby("metric_id", sort=False):
            analysis = self.analyze_values(
                metric_id=metric_id,
                values=group["value"].tolist(),
                metric_name=metric_names.get(metric_id)
            )
            if analysis is not None:
                analyses.append(analysis)

        return analyses

    def analyze_values(
        self,
        metric_id: str,
        values: List[float],
        metric_name: Optional[str] = None
    ) -> Optional[MetricAnalysis]:
        """
        Analyze one metric's date-ordered values.

        Returns None when fewer than two values are available: a single point
        has no trend.
        """
        if len(values) < MIN_POINTS:
            return None

        start_value = values[0]
        end_value = values[-1]
        percentage_change = math_utils.percentage_change(start_value, end_value)
        anomalies = math_utils.detect_anomalies(values, self.anomaly_threshold)

        return MetricAnalysis(
            metric_id=metric_id,
            metric_name=metric_name,
            start_value=start_value,
            end_value=end_value,
            absolute_change=end_value - start_value,
            percentage_change=math_utils.round_to_decimals(percentage_change, 2),
            trend=math_utils.classify_trend(values, self.trend_threshold_percent),
            volatility=math_utils.round_to_decimals(self._volatility(values), 2),
            anomalies=anomalies,
            is_anomalous=abs(percentage_change) > ANOMALOUS_CHANGE_PERCENT or len(anomalies) > 0,
            data_points=len(values)
        )

    def _volatility(self, values: List[float]) -> float:
        """Coefficient of variation as a percent; 0 when the mean is 0."""
        mean = math_utils.average(values)
        if mean == 0:
            return 0.0
        return math_utils.standard_deviation(values) / abs(mean) * 100
