"""Analytics service used by the API layer.

Takes records already fetched (and tenant-filtered) by the repository layer,
validates them and runs the analytics components. Holds no state between
calls.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from eventmetrics.core.config import Settings, get_settings

from .base_models import (
    BatchAnalysisResult,
    Insight,
    MetricAnalysis,
    PeriodComparison,
    WhatIfScenario,
)
from .date_utils import filter_events_in_period, validate_window
from .impact_estimation import EventImpactEstimator
from .insight_generator import InsightGenerator
from .metric_analyzer import MetricAnalyzer
from .period_comparison import PeriodComparator
from .scenario_projection import WhatIfProjector
from .validation import (
    SeriesValidationError,
    group_records_by_metric,
    validate_event,
    validate_events,
    validate_point,
    validate_series,
)


class AnalyticsService:
    """Entry point for metric analysis, insights, comparisons and scenarios."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

        self.analyzer = MetricAnalyzer(
            anomaly_threshold=self.settings.anomaly_std_threshold,
            trend_threshold_percent=self.settings.trend_threshold_percent
        )
        self.insight_generator = InsightGenerator(max_insights=self.settings.max_insights)
        self.comparator = PeriodComparator(exclude_zero_values=self.settings.exclude_zero_values)
        self.impact_estimator = EventImpactEstimator(window_days=self.settings.impact_window_days)
        self.projector = WhatIfProjector()

    def _log(self, message: str):
        if self.settings.verbose:
            print(message)

    def analyze_metrics(
        self,
        records: Iterable[Any],
        start_date: Any,
        end_date: Any,
        metric_ids: Optional[Sequence[str]] = None,
        metric_names: Optional[Dict[str, str]] = None
    ) -> BatchAnalysisResult:
        """
        Analyze each metric in ``records`` over [start_date, end_date].

        A malformed record only fails its own metric: the error is reported in
        ``failed_metrics`` and the remaining metrics are still analyzed.

        Args:
            records: Metric value records (points, mappings or ORM rows)
            start_date: Window start (inclusive)
            end_date: Window end (inclusive)
            metric_ids: Restrict analysis to these metrics
            metric_names: Optional metric id -> display name

        Returns:
            BatchAnalysisResult with analyses in order of each metric's first record
        """
        window = validate_window((start_date, end_date))
        wanted = set(metric_ids) if metric_ids is not None else None

        analyses: List[MetricAnalysis] = []
        failed: Dict[str, str] = {}
        skipped: List[str] = []

        for metric_id, group in group_records_by_metric(records).items():
            if wanted is not None and metric_id not in wanted:
                continue
            try:
                points = [validate_point(record, position) for position, record in group]
            except SeriesValidationError as e:
                failed[metric_id] = str(e)
                self._log(f"[WARN] Failed to analyze metric '{metric_id}': {e}")
                continue

            result = self.analyzer.analyze(points, window, metric_names)
            if result:
                analyses.extend(result)
            else:
                skipped.append(metric_id)

        self._log(
            f"[ANALYTICS] Analyzed {len(analyses)} metrics"
            f" ({len(skipped)} skipped, {len(failed)} failed)"
        )

        return BatchAnalysisResult(
            analyses=analyses,
            failed_metrics=failed,
            skipped_metrics=skipped
        )

    def generate_insights(
        self,
        records: Iterable[Any],
        events: Iterable[Any],
        start_date: Any,
        end_date: Any,
        metric_ids: Optional[Sequence[str]] = None,
        metric_names: Optional[Dict[str, str]] = None
    ) -> List[Insight]:
        """
        Insights for the window from metric analyses and overlapping events.

        Metrics that fail validation are left out (and logged); malformed
        events raise SeriesValidationError.
        """
        batch = self.analyze_metrics(records, start_date, end_date, metric_ids, metric_names)
        window = validate_window((start_date, end_date))
        period_events = filter_events_in_period(validate_events(events), window)

        insights = self.insight_generator.generate_insights(batch.analyses, period_events)
        self._log(
            f"[INSIGHTS] Generated {len(insights)} insights"
            f" from {len(batch.analyses)} metrics and {len(period_events)} events"
        )
        return insights

    def compare_metric_periods(
        self,
        records: Iterable[Any],
        metric_id: str,
        period1: Tuple[Any, Any],
        period2: Tuple[Any, Any]
    ) -> PeriodComparison:
        """Compare one metric's averages over two periods."""
        series = validate_series(records)
        return self.comparator.compare(series, period1, period2, metric_id=metric_id)

    def compare_periods(
        self,
        records: Iterable[Any],
        metric_ids: Sequence[str],
        period1: Tuple[Any, Any],
        period2: Tuple[Any, Any]
    ) -> Dict[str, PeriodComparison]:
        """Compare several metrics over the same two periods."""
        series = validate_series(records)
        comparisons = self.comparator.compare_metrics(series, period1, period2, metric_ids)
        self._log(f"[COMPARE] Compared {len(comparisons)} metrics across two periods")
        return comparisons

    def calculate_event_impacts(
        self,
        records: Iterable[Any],
        event: Any,
        metric_ids: Optional[Sequence[str]] = None
    ) -> Dict[str, float]:
        """
        Impact ratio of ``event`` on each metric.

        Metrics without data on both sides of the event are absent from the
        result.
        """
        series = validate_series(records)
        event = validate_event(event)
        ratios = self.impact_estimator.estimate_impact_ratios(series, event, metric_ids)

        requested = len(metric_ids) if metric_ids is not None else len({p.metric_id for p in series})
        if len(ratios) < requested:
            self._log(
                f"[IMPACT] Insufficient data around event '{event.label}'"
                f" for {requested - len(ratios)} of {requested} metrics"
            )
        return ratios

    def generate_what_if_scenario(
        self,
        records: Iterable[Any],
        scenario_name: str,
        assumptions: Optional[Mapping[str, float]],
        start_date: Any,
        end_date: Any,
        metric_ids: Optional[Sequence[str]] = None
    ) -> WhatIfScenario:
        """Project metrics analyzed over the base window under ``assumptions``."""
        batch = self.analyze_metrics(records, start_date, end_date, metric_ids)
        return self.projector.project(scenario_name, assumptions, batch.analyses)
