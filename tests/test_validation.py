"""
Unit tests for record validation.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import numpy as np
import pytest

from eventmetrics.analytics import (
    BusinessEvent,
    MetricSeriesPoint,
    SeriesValidationError,
    validate_events,
    validate_series,
)
from eventmetrics.analytics.validation import group_records_by_metric


class TestValidateSeries:
    """Test Suite for metric value records."""

    def test_accepts_mixed_record_shapes(self):
        records = [
            {"metricId": "revenue", "date": "2024-01-01", "value": 100},
            {"metric_id": "revenue", "date": date(2024, 2, 1), "value": Decimal("110.5")},
            SimpleNamespace(metric_id="revenue", date=datetime(2024, 3, 1), value=np.float64(120)),
            MetricSeriesPoint(metric_id="revenue", date=datetime(2024, 4, 1), value=130),
        ]
        points = validate_series(records)

        assert [p.value for p in points] == [100, 110.5, 120, 130]
        assert points[0].date == datetime(2024, 1, 1)
        assert points[1].date == datetime(2024, 2, 1)

    def test_integer_metric_ids_become_strings(self):
        point = validate_series([{"metricId": 7, "date": "2024-01-01", "value": 1}])[0]
        assert point.metric_id == "7"

    def test_aware_dates_normalized_to_naive_utc(self):
        aware = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
        point = validate_series([{"metric_id": "m", "date": aware, "value": 1}])[0]
        assert point.date == datetime(2024, 1, 1, 12)
        assert point.date.tzinfo is None

    @pytest.mark.parametrize("bad_value", ["abc", "12.5", None, True, float("nan"), float("inf")])
    def test_non_numeric_value_rejected_with_position(self, bad_value):
        records = [
            {"metric_id": "m", "date": "2024-01-01", "value": 1},
            {"metric_id": "m", "date": "2024-02-01", "value": bad_value},
        ]
        with pytest.raises(SeriesValidationError) as exc_info:
            validate_series(records)

        assert exc_info.value.position == 1
        assert exc_info.value.metric_id == "m"
        assert "position 1" in str(exc_info.value)
        assert "value" in str(exc_info.value)

    @pytest.mark.parametrize("bad_date", ["not a date", None, 12345])
    def test_unparsable_date_rejected(self, bad_date):
        with pytest.raises(SeriesValidationError) as exc_info:
            validate_series([{"metric_id": "m", "date": bad_date, "value": 1}])
        assert exc_info.value.position == 0
        assert "date" in str(exc_info.value)

    def test_missing_metric_id_rejected(self):
        with pytest.raises(SeriesValidationError) as exc_info:
            validate_series([{"date": "2024-01-01", "value": 1}])
        assert exc_info.value.metric_id is None

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_series([{"metric_id": "m", "date": "2024-01-01", "value": "x"}])

    def test_points_are_immutable(self):
        point = MetricSeriesPoint(metric_id="m", date=datetime(2024, 1, 1), value=1)
        with pytest.raises(Exception):
            point.value = 2


class TestGroupRecords:
    """Test Suite for grouping raw records by metric."""

    def test_groups_keep_positions(self):
        records = [
            {"metric_id": "a", "date": "2024-01-01", "value": 1},
            {"metricId": "b", "date": "2024-01-01", "value": 2},
            {"metric_id": "a", "date": "2024-01-02", "value": "bad"},
            {"date": "2024-01-02", "value": 3},
        ]
        groups = group_records_by_metric(records)

        assert list(groups) == ["a", "b", "unknown"]
        assert [position for position, _ in groups["a"]] == [0, 2]
        assert [position for position, _ in groups["unknown"]] == [3]


class TestValidateEvents:
    """Test Suite for business events."""

    def test_accepts_camel_case_and_normalizes_category(self):
        event = validate_events([{
            "id": 12,
            "name": "Spring Campaign",
            "category": " Marketing ",
            "impact": "high",
            "startDate": "2024-03-01",
            "endDate": "2024-03-10",
            "status": "completed",
        }])[0]

        assert event.id == "12"
        assert event.category == "marketing"
        assert event.impact == "high"
        assert event.effective_end_date == datetime(2024, 3, 10)
        assert event.label == "Spring Campaign"

    def test_effective_end_defaults_to_start(self):
        event = BusinessEvent(id="e", impact="low", start_date=datetime(2024, 3, 1))
        assert event.effective_end_date == datetime(2024, 3, 1)
        assert event.label == "e"

    def test_unknown_impact_rejected(self):
        with pytest.raises(SeriesValidationError) as exc_info:
            validate_events([
                {"id": "ok", "impact": "low", "start_date": "2024-01-01"},
                {"id": "bad", "impact": "huge", "start_date": "2024-01-01"},
            ])
        assert exc_info.value.position == 1
        assert "impact" in str(exc_info.value)

    def test_end_before_start_rejected(self):
        with pytest.raises(SeriesValidationError):
            validate_events([{
                "id": "e", "impact": "low", "start_date": "2024-03-10", "end_date": "2024-03-01",
            }])
