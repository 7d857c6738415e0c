"""Period-over-period comparison of metric averages."""

from typing import Dict, List, Optional, Sequence, Tuple, Any

from .base_models import MetricSeriesPoint, PeriodComparison, Significance
from .date_utils import validate_window
from .metric_analyzer import filter_frame_by_window, series_to_frame
from . import math_utils

HIGH_SIGNIFICANCE_PERCENT = 20.0
MEDIUM_SIGNIFICANCE_PERCENT = 10.0


def classify_significance(change_percent: float) -> Significance:
    """high above 20%, medium above 10%, otherwise low (absolute change)."""
    magnitude = abs(change_percent)
    if magnitude > HIGH_SIGNIFICANCE_PERCENT:
        return Significance.HIGH
    elif magnitude > MEDIUM_SIGNIFICANCE_PERCENT:
        return Significance.MEDIUM
    return Significance.LOW


class PeriodComparator:
    """
    Compares a metric's average over two arbitrary windows.

    Windows are inclusive and may overlap. With ``exclude_zero_values`` the
    legacy dashboard behaviour is reproduced: zero readings are dropped before
    averaging, which biases averages away from true zeros.
    """

    def __init__(self, exclude_zero_values: bool = False):
        self.exclude_zero_values = exclude_zero_values

    def compare(
        self,
        series: Sequence[MetricSeriesPoint],
        period1: Tuple[Any, Any],
        period2: Tuple[Any, Any],
        metric_id: Optional[str] = None
    ) -> PeriodComparison:
        """
        Compare averages of ``series`` over ``period1`` and ``period2``.

        Args:
            series: Metric points (restricted to ``metric_id`` when given)
            period1: Baseline (start, end)
            period2: Comparison (start, end)
            metric_id: Metric to compare; None uses every point in ``series``

        Returns:
            PeriodComparison with 2-decimal averages and deltas
        """
        period1 = validate_window(period1)
        period2 = validate_window(period2)

        if metric_id is not None:
            series = [p for p in series if p.metric_id == metric_id]

        frame = series_to_frame(series)
        values1 = self._values(filter_frame_by_window(frame, period1)["value"].tolist())
        values2 = self._values(filter_frame_by_window(frame, period2)["value"].tolist())

        avg1 = math_utils.average(values1)
        avg2 = math_utils.average(values2)
        change_percent = math_utils.percentage_change(avg1, avg2)

        return PeriodComparison(
            metric_id=metric_id,
            period1_avg=math_utils.round_to_decimals(avg1, 2),
            period2_avg=math_utils.round_to_decimals(avg2, 2),
            change=math_utils.round_to_decimals(avg2 - avg1, 2),
            change_percent=math_utils.round_to_decimals(change_percent, 2),
            significance=classify_significance(change_percent),
            period1_count=len(values1),
            period2_count=len(values2)
        )

    def compare_metrics(
        self,
        series: Sequence[MetricSeriesPoint],
        period1: Tuple[Any, Any],
        period2: Tuple[Any, Any],
        metric_ids: Sequence[str]
    ) -> Dict[str, PeriodComparison]:
        """Per-metric comparisons, keyed in ``metric_ids`` order."""
        return {
            metric_id: self.compare(series, period1, period2, metric_id=metric_id)
            for metric_id in metric_ids
        }

    def _values(self, values: List[float]) -> List[float]:
        if self.exclude_zero_values:
            return [v for v in values if v != 0]
        return values
