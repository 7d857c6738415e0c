"""Base models for event/metric analytics."""

from typing import Dict, Any, Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from enum import Enum
import math

import numpy as np
import pandas as pd
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)


class Trend(str, Enum):
    """Qualitative direction of a metric series."""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class InsightType(str, Enum):
    """Kind of generated insight."""
    CRITICAL = "critical"
    POSITIVE = "positive"
    WARNING = "warning"
    INFO = "info"


class InsightPriority(str, Enum):
    """Display priority derived from insight type and confidence."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EventImpact(str, Enum):
    """Expected impact of a business event."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EventCategory(str, Enum):
    """Known event categories. The event field itself stays an open string."""
    MARKETING = "marketing"
    OPERATIONS = "operations"
    FINANCE = "finance"
    HR = "hr"
    PRODUCT = "product"
    GROWTH = "growth"
    OTHER = "other"


class EventStatus(str, Enum):
    """Lifecycle status of a business event."""
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Significance(str, Enum):
    """Tiered size of a period-over-period change."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def to_naive_datetime(value: Any) -> datetime:
    """Parse datetime-like input into a naive (UTC) datetime."""
    if value is None or isinstance(value, bool):
        raise ValueError("date is required")
    if isinstance(value, (int, float, np.number)):
        raise ValueError(f"expected a date, got number {value!r}")
    try:
        timestamp = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"could not parse date {value!r}: {e}") from e
    if pd.isna(timestamp):
        raise ValueError(f"could not parse date {value!r}")
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp.to_pydatetime()


class _AnalyticsModel(BaseModel):
    """Shared config: snake_case attributes, camelCase aliases for JSON."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        frozen=True
    )


class MetricSeriesPoint(_AnalyticsModel):
    """One observation of a metric."""

    metric_id: str = Field(
        validation_alias=AliasChoices("metric_id", "metricId"),
        serialization_alias="metricId",
        min_length=1
    )
    date: datetime
    value: float

    @field_validator("metric_id", mode="before")
    @classmethod
    def _coerce_metric_id(cls, v: Any) -> Any:
        # ORM ids are often UUIDs or ints
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, (int, UUID)):
            return str(v)
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v: Any) -> datetime:
        return to_naive_datetime(v)

    @field_validator("value", mode="before")
    @classmethod
    def _check_numeric(cls, v: Any) -> float:
        if isinstance(v, (bool, np.bool_)) or not isinstance(v, (int, float, Decimal, np.number)):
            raise ValueError(f"value must be a number, got {type(v).__name__} {v!r}")
        try:
            v = float(v)
        except OverflowError as e:
            raise ValueError(f"value out of range: {v!r}") from e
        if not math.isfinite(v):
            raise ValueError(f"value must be finite, got {v!r}")
        return v


class BusinessEvent(_AnalyticsModel):
    """A discrete business action with an observation window."""

    id: str
    name: Optional[str] = None
    category: str = EventCategory.OTHER.value
    impact: EventImpact
    start_date: datetime = Field(
        validation_alias=AliasChoices("start_date", "startDate"),
        serialization_alias="startDate"
    )
    end_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("end_date", "endDate"),
        serialization_alias="endDate"
    )
    status: Optional[EventStatus] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, UUID)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            v = v.value
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("start_date", mode="before")
    @classmethod
    def _parse_start(cls, v: Any) -> datetime:
        return to_naive_datetime(v)

    @field_validator("end_date", mode="before")
    @classmethod
    def _parse_end(cls, v: Any) -> Optional[datetime]:
        if v is None:
            return None
        return to_naive_datetime(v)

    @model_validator(mode="after")
    def _check_window(self) -> "BusinessEvent":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(
                f"end_date {self.end_date.isoformat()} is before start_date {self.start_date.isoformat()}"
            )
        return self

    @property
    def effective_end_date(self) -> datetime:
        """End of the observation window; single-day events end where they start."""
        return self.end_date or self.start_date

    @property
    def label(self) -> str:
        return self.name or self.id


class MetricAnalysis(_AnalyticsModel):
    """Per-metric summary of a windowed series."""

    metric_id: str = Field(serialization_alias="metricId")
    metric_name: Optional[str] = Field(default=None, serialization_alias="metricName")
    start_value: float = Field(serialization_alias="startValue")
    end_value: float = Field(serialization_alias="endValue")
    absolute_change: float = Field(serialization_alias="absoluteChange")
    percentage_change: float = Field(serialization_alias="percentageChange")
    trend: Trend
    volatility: float = Field(ge=0, description="Coefficient of variation, percent")
    anomalies: List[float] = Field(default_factory=list)
    is_anomalous: bool = Field(serialization_alias="isAnomalous")
    data_points: int = Field(serialization_alias="dataPoints")

    @property
    def label(self) -> str:
        return self.metric_name or self.metric_id


class Insight(_AnalyticsModel):
    """Ranked, human-readable finding with recommended actions."""

    type: InsightType
    title: str
    description: str
    recommendations: List[str] = Field(default_factory=list)
    confidence: float = Field(ge=0, le=1)
    metric_ids: List[str] = Field(default_factory=list, serialization_alias="metricIds")
    event_ids: Optional[List[str]] = Field(default=None, serialization_alias="eventIds")

    @computed_field
    @property
    def priority(self) -> InsightPriority:
        """Display priority derived from type and confidence."""
        if self.type == InsightType.CRITICAL or self.confidence >= 0.8:
            return InsightPriority.HIGH
        if self.confidence >= 0.6:
            return InsightPriority.MEDIUM
        return InsightPriority.LOW


class PeriodComparison(_AnalyticsModel):
    """Average of a metric over two windows and the delta between them."""

    metric_id: Optional[str] = Field(default=None, serialization_alias="metricId")
    period1_avg: float = Field(serialization_alias="period1Avg")
    period2_avg: float = Field(serialization_alias="period2Avg")
    change: float
    change_percent: float = Field(serialization_alias="changePercent")
    significance: Significance
    period1_count: int = Field(default=0, serialization_alias="period1Count")
    period2_count: int = Field(default=0, serialization_alias="period2Count")


class EventImpactEstimate(_AnalyticsModel):
    """Before/after averages around an event and their percent-change ratio.

    ``impact_ratio`` is ``percentage_change(before_avg, after_avg) / 100``. It is
    a magnitude/direction surrogate, not a correlation coefficient, and is not
    bounded to [-1, 1].
    """

    metric_id: str = Field(serialization_alias="metricId")
    event_id: str = Field(serialization_alias="eventId")
    before_avg: float = Field(serialization_alias="beforeAvg")
    after_avg: float = Field(serialization_alias="afterAvg")
    before_count: int = Field(serialization_alias="beforeCount")
    after_count: int = Field(serialization_alias="afterCount")
    impact_ratio: float = Field(serialization_alias="impactRatio")


class WhatIfScenario(_AnalyticsModel):
    """Projected next values under explicit assumptions or trend continuation."""

    scenario_name: str = Field(serialization_alias="scenarioName")
    assumptions: Dict[str, float] = Field(default_factory=dict)
    projected_values: Dict[str, float] = Field(
        default_factory=dict,
        serialization_alias="projectedValues"
    )
    confidence: float = Field(ge=0, le=1)


class BatchAnalysisResult(_AnalyticsModel):
    """Analyses for a batch of metrics, with per-metric failures kept apart."""

    analyses: List[MetricAnalysis] = Field(default_factory=list)
    failed_metrics: Dict[str, str] = Field(
        default_factory=dict,
        serialization_alias="failedMetrics",
        description="metric id -> validation error"
    )
    skipped_metrics: List[str] = Field(
        default_factory=list,
        serialization_alias="skippedMetrics",
        description="Metrics with fewer than two points in the window"
    )

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_metrics)
