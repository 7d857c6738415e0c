"""Input validation for metric series and business events."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from .base_models import BusinessEvent, MetricSeriesPoint

UNKNOWN_METRIC_ID = "unknown"


class SeriesValidationError(ValueError):
    """A supplied record violates the metric value or event contract."""

    def __init__(self, message: str, position: int, metric_id: Optional[str] = None):
        super().__init__(message)
        self.position = position
        self.metric_id = metric_id


def _describe(error: ValidationError) -> str:
    """Compact one-line summary of a pydantic error."""
    parts = []
    for detail in error.errors():
        field = ".".join(str(loc) for loc in detail.get("loc", ())) or "record"
        parts.append(f"{field}: {detail.get('msg')}")
    return "; ".join(parts)


def record_metric_id(record: Any) -> Optional[str]:
    """Metric id of a raw record or point, if it has one."""
    if isinstance(record, MetricSeriesPoint):
        return record.metric_id
    if isinstance(record, Mapping):
        metric_id = record.get("metric_id", record.get("metricId"))
    else:
        metric_id = getattr(record, "metric_id", getattr(record, "metricId", None))
    return None if metric_id is None else str(metric_id)


def validate_point(record: Any, position: int) -> MetricSeriesPoint:
    """Validate one record, naming its position on failure."""
    if isinstance(record, MetricSeriesPoint):
        return record

    metric_id = record_metric_id(record)
    try:
        if isinstance(record, Mapping):
            return MetricSeriesPoint.model_validate(dict(record))
        return MetricSeriesPoint.model_validate(record, from_attributes=True)
    except ValidationError as e:
        label = f" (metric '{metric_id}')" if metric_id else ""
        raise SeriesValidationError(
            f"Invalid metric value at position {position}{label}: {_describe(e)}",
            position=position,
            metric_id=metric_id
        ) from e


def validate_series(records: Iterable[Any]) -> List[MetricSeriesPoint]:
    """
    Validate a collection of metric value records.

    Args:
        records: MetricSeriesPoint instances, mappings with
            metric_id/metricId, date and value keys, or objects exposing
            those attributes (e.g. ORM rows)

    Returns:
        List of MetricSeriesPoint in input order

    Raises:
        SeriesValidationError: on the first malformed record
    """
    return [validate_point(record, position) for position, record in enumerate(records)]


def group_records_by_metric(records: Iterable[Any]) -> Dict[str, List[Tuple[int, Any]]]:
    """
    Group raw records by metric id without validating them.

    Each entry keeps the record's position in the original collection.
    Records without a metric id are grouped under ``"unknown"``.
    """
    groups: Dict[str, List[Tuple[int, Any]]] = {}
    for position, record in enumerate(records):
        metric_id = record_metric_id(record) or UNKNOWN_METRIC_ID
        groups.setdefault(metric_id, []).append((position, record))
    return groups


def validate_event(record: Any, position: int = 0) -> BusinessEvent:
    if isinstance(record, BusinessEvent):
        return record

    try:
        if isinstance(record, Mapping):
            return BusinessEvent.model_validate(dict(record))
        return BusinessEvent.model_validate(record, from_attributes=True)
    except ValidationError as e:
        raise SeriesValidationError(
            f"Invalid event at position {position}: {_describe(e)}",
            position=position
        ) from e


def validate_events(records: Iterable[Any]) -> List[BusinessEvent]:
    """Validate business events, failing fast on the first malformed one."""
    return [validate_event(record, position) for position, record in enumerate(records)]
