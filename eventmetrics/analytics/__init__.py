"""
Analytics Layer

Turns time-stamped metric values and business events into trend
classifications, volatility scores, anomaly flags, period comparisons,
event impact ratios, what-if projections and ranked insights.

Modules:
- math_utils: statistical primitives (mean, median, std, Pearson, z-score anomalies, trend)
- metric_analyzer: per-metric change, trend, volatility and anomaly analysis
- insight_generator: rule-based insight generation and ranking
- period_comparison: period-over-period averages and significance
- impact_estimation: before/after impact ratio around business events
- scenario_projection: what-if projections
- service: validating facade used by the API layer
"""

from .base_models import (
    Trend,
    InsightType,
    InsightPriority,
    EventImpact,
    EventCategory,
    EventStatus,
    Significance,
    MetricSeriesPoint,
    BusinessEvent,
    MetricAnalysis,
    Insight,
    PeriodComparison,
    EventImpactEstimate,
    WhatIfScenario,
    BatchAnalysisResult
)

from .validation import SeriesValidationError, validate_series, validate_events
from .metric_analyzer import MetricAnalyzer
from .insight_generator import InsightGenerator
from .period_comparison import PeriodComparator
from .impact_estimation import EventImpactEstimator
from .scenario_projection import WhatIfProjector
from .service import AnalyticsService

__all__ = [
    # Base models
    'Trend',
    'InsightType',
    'InsightPriority',
    'EventImpact',
    'EventCategory',
    'EventStatus',
    'Significance',
    'MetricSeriesPoint',
    'BusinessEvent',
    'MetricAnalysis',
    'Insight',
    'PeriodComparison',
    'EventImpactEstimate',
    'WhatIfScenario',
    'BatchAnalysisResult',

    # Validation
    'SeriesValidationError',
    'validate_series',
    'validate_events',

    # Analyzers
    'MetricAnalyzer',
    'InsightGenerator',
    'PeriodComparator',
    'EventImpactEstimator',
    'WhatIfProjector',
    'AnalyticsService'
]
