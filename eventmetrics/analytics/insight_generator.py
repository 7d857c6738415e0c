"""
Rule-based insight generation over metric analyses and business events.

Every rule runs against the same inputs and contributes at most one combined
insight. Output is ranked by descending confidence; equal confidences keep
rule order (critical, positive, warning, info).
"""

from typing import List, Optional, Sequence

from .base_models import (
    BusinessEvent,
    EventImpact,
    Insight,
    InsightType,
    MetricAnalysis,
    Trend,
)

# -----------------------------------------------------------------------------
# RULE DEFINITIONS
# -----------------------------------------------------------------------------

RULE_DEFINITIONS = {
    "critical_change": {
        "id": "critical_change",
        "condition": "|percentage change| > 30%",
        "threshold": 30.0,
        "type": InsightType.CRITICAL,
        "confidence": 0.9,
        "recommendations": [
            "Investigate root causes immediately",
            "Review recent events and changes",
            "Consider corrective actions",
        ],
    },
    "strong_growth": {
        "id": "strong_growth",
        "condition": "trend increasing and percentage change > 10%",
        "threshold": 10.0,
        "type": InsightType.POSITIVE,
        "confidence": 0.8,
        "recommendations": [
            "Analyze success factors",
            "Scale successful initiatives",
            "Document best practices",
        ],
    },
    "high_volatility": {
        "id": "high_volatility",
        "condition": "volatility (coefficient of variation) > 15%",
        "threshold": 15.0,
        "type": InsightType.WARNING,
        "confidence": 0.7,
        "recommendations": [
            "Stabilize underlying processes",
            "Identify volatility sources",
            "Implement monitoring controls",
        ],
    },
    "event_correlation": {
        "id": "event_correlation",
        "condition": "any high-impact event and some metric with |percentage change| > 15%",
        "threshold": 15.0,
        "type": InsightType.INFO,
        "confidence": 0.6,
        "recommendations": [
            "Analyze event-metric correlations",
            "Document successful interventions",
            "Plan similar events for positive outcomes",
        ],
    },
}


def _labels(items) -> str:
    return ", ".join(item.label for item in items)


class InsightGenerator:
    """Turns analyses and events into ranked insights."""

    def __init__(self, max_insights: Optional[int] = None):
        """
        Args:
            max_insights: Keep only the top N insights after ranking (None = all)
        """
        if max_insights is not None and max_insights < 0:
            raise ValueError(f"max_insights must be >= 0, got {max_insights}")
        self.max_insights = max_insights

    def generate_insights(
        self,
        analyses: Sequence[MetricAnalysis],
        events: Sequence[BusinessEvent] = ()
    ) -> List[Insight]:
        """
        Run all rules and rank the result.

        Args:
            analyses: Metric analyses for the period
            events: Business events in the period

        Returns:
            Insights sorted by descending confidence
        """
        insights: List[Insight] = []

        for rule in (
            self._critical_changes,
            self._strong_growth,
            self._high_volatility,
        ):
            insight = rule(analyses)
            if insight is not None:
                insights.append(insight)

        insight = self._event_correlation(analyses, events)
        if insight is not None:
            insights.append(insight)

        # sorted() is stable: equal confidences stay in rule order
        ranked = sorted(insights, key=lambda i: i.confidence, reverse=True)

        if self.max_insights is not None:
            ranked = ranked[:self.max_insights]
        return ranked

    def _critical_changes(self, analyses: Sequence[MetricAnalysis]) -> Optional[Insight]:
        rule = RULE_DEFINITIONS["critical_change"]
        matched = [a for a in analyses if abs(a.percentage_change) > rule["threshold"]]
        if not matched:
            return None

        return Insight(
            type=rule["type"],
            title=f"Critical Changes Detected in {len(matched)} Metrics",
            description=f"Significant changes (>{rule['threshold']:g}%) detected in: {_labels(matched)}",
            recommendations=list(rule["recommendations"]),
            confidence=rule["confidence"],
            metric_ids=[a.metric_id for a in matched]
        )

    def _strong_growth(self, analyses: Sequence[MetricAnalysis]) -> Optional[Insight]:
        rule = RULE_DEFINITIONS["strong_growth"]
        matched = [
            a for a in analyses
            if a.trend == Trend.INCREASING and a.percentage_change > rule["threshold"]
        ]
        if not matched:
            return None

        return Insight(
            type=rule["type"],
            title=f"Strong Growth in {len(matched)} Metrics",
            description=f"Positive trends detected in: {_labels(matched)}",
            recommendations=list(rule["recommendations"]),
            confidence=rule["confidence"],
            metric_ids=[a.metric_id for a in matched]
        )

    def _high_volatility(self, analyses: Sequence[MetricAnalysis]) -> Optional[Insight]:
        rule = RULE_DEFINITIONS["high_volatility"]
        matched = [a for a in analyses if a.volatility > rule["threshold"]]
        if not matched:
            return None

        return Insight(
            type=rule["type"],
            title=f"High Volatility in {len(matched)} Metrics",
            description=f"Unstable patterns detected in: {_labels(matched)}",
            recommendations=list(rule["recommendations"]),
            confidence=rule["confidence"],
            metric_ids=[a.metric_id for a in matched]
        )

    def _event_correlation(
        self,
        analyses: Sequence[MetricAnalysis],
        events: Sequence[BusinessEvent]
    ) -> Optional[Insight]:
        rule = RULE_DEFINITIONS["event_correlation"]
        high_impact = [e for e in events if e.impact == EventImpact.HIGH]
        if not high_impact:
            return None

        affected = [a for a in analyses if abs(a.percentage_change) > rule["threshold"]]
        if not affected:
            return None

        return Insight(
            type=rule["type"],
            title=f"{len(high_impact)} High-Impact Events May Have Influenced Metrics",
            description=f"Events: {_labels(high_impact)}. Affected metrics: {_labels(affected)}",
            recommendations=list(rule["recommendations"]),
            confidence=rule["confidence"],
            metric_ids=[a.metric_id for a in affected],
            event_ids=[e.id for e in high_impact]
        )
