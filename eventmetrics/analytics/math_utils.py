"""Statistical primitives shared by the analytics components.

Every function is total: empty or degenerate input yields a defined neutral
value (0, an empty list, ``Trend.STABLE``) instead of raising.
"""

from typing import Iterable, List, Sequence
from decimal import Decimal, ROUND_HALF_UP, localcontext
import math
import warnings

import numpy as np
from scipy import stats

from .base_models import Trend

# Net change (percent of |first value|) that counts as a real move
TREND_THRESHOLD_PERCENT = 5.0


def _as_array(values: Iterable[float]) -> np.ndarray:
    return np.asarray(list(values), dtype=float)


def percentage_change(old_value: float, new_value: float) -> float:
    """
    Percent change from ``old_value`` to ``new_value``.

    A zero base is handled by convention rather than mathematics:
    0 -> 0 gives 0, 0 -> anything else gives 100.
    """
    if old_value == 0:
        return 0.0 if new_value == 0 else 100.0
    return (new_value - old_value) / old_value * 100


def average(values: Iterable[float]) -> float:
    """Arithmetic mean; 0 for empty input."""
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def median(values: Iterable[float]) -> float:
    """Median (mean of the two middle values for even length); 0 for empty input."""
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def standard_deviation(values: Iterable[float]) -> float:
    """Population standard deviation (divides by N); 0 for empty input."""
    arr = _as_array(values)
    if arr.size == 0:
        return 0.0
    return float(np.std(arr, ddof=0))


def pearson_correlation(x: Iterable[float], y: Iterable[float]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Returns 0 when lengths differ, either series is empty or constant, or the
    coefficient is otherwise undefined.
    """
    x_arr = _as_array(x)
    y_arr = _as_array(y)

    if x_arr.size != y_arr.size or x_arr.size < 2:
        return 0.0
    if np.std(x_arr) == 0 or np.std(y_arr) == 0:
        return 0.0

    with warnings.catch_warnings():
        # Near-constant float input triggers ConstantInputWarning; treated as degenerate below
        warnings.simplefilter("ignore")
        r, _ = stats.pearsonr(x_arr, y_arr)

    r = float(r)
    if not math.isfinite(r):
        return 0.0
    return max(-1.0, min(1.0, r))


def detect_anomalies(values: Sequence[float], threshold_std_devs: float = 2.0) -> List[float]:
    """
    Values lying more than ``threshold_std_devs`` standard deviations from the mean.

    Mean and standard deviation are computed once over the whole input. Input
    order is preserved and repeated values are reported each time they occur.
    """
    values = list(values)
    if not values:
        return []

    mean = average(values)
    limit = threshold_std_devs * standard_deviation(values)

    return [value for value in values if abs(value - mean) > limit]


def classify_trend(
    values: Sequence[float],
    threshold_percent: float = TREND_THRESHOLD_PERCENT
) -> Trend:
    """
    Classify a series by comparing its last value with its first.

    Intermediate values are ignored. The net change is measured relative to
    ``|first|`` so that negative series keep the right direction; a zero first
    value is classified by the sign of the last one.
    """
    values = list(values)
    if len(values) < 2:
        return Trend.STABLE

    first, last = float(values[0]), float(values[-1])

    if first == 0:
        if last > 0:
            return Trend.INCREASING
        if last < 0:
            return Trend.DECREASING
        return Trend.STABLE

    relative_change = (last - first) / abs(first) * 100

    if relative_change > threshold_percent:
        return Trend.INCREASING
    elif relative_change < -threshold_percent:
        return Trend.DECREASING
    else:
        return Trend.STABLE


def round_to_decimals(value: float, decimals: int) -> float:
    """Half-up rounding (ties away from zero) at ``decimals`` places."""
    if not math.isfinite(value):
        return value
    exact = Decimal(repr(float(value)))
    with localcontext() as ctx:
        # quantize needs every integer digit plus the requested fraction digits
        ctx.prec = max(exact.adjusted(), 0) + max(decimals, 0) + 2
        quantum = Decimal(1).scaleb(-decimals)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))
