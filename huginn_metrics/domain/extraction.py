"""Pull one numeric value per raw record for a given metric."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from huginn_metrics.domain.entities import ExtractedPoint, SleepStages
from huginn_metrics.domain.metrics import (
    ML_PER_GLASS,
    ExtractionRule,
    Metric,
    MetricDescriptor,
    get_descriptor,
)
from huginn_metrics.utils import converters
from huginn_metrics.utils.math import round_half_up

logger = logging.getLogger(__name__)

DATE_FIELDS = ("date", "recorded_at", "measured_at")

Formula = Callable[[MetricDescriptor, Mapping[str, Any], Optional[float]], Optional[float]]


def first_present(record: Mapping[str, Any], fields: Iterable[str]) -> Optional[float]:
    """Return the first field in ``fields`` holding a usable number.

    A present ``0`` is a real reading and wins over later fields.
    """
    for name in fields:
        value = converters.to_float(record.get(name))
        if value is not None:
            return value
    return None


def record_day(record: Mapping[str, Any]):
    for name in DATE_FIELDS:
        day = converters.to_date(record.get(name))
        if day is not None:
            return day
    return None


def _from_fields(
    descriptor: MetricDescriptor, record: Mapping[str, Any], height_cm: Optional[float]
) -> Optional[float]:
    return first_present(record, descriptor.fields)


def _bmi(
    descriptor: MetricDescriptor, record: Mapping[str, Any], height_cm: Optional[float]
) -> Optional[float]:
    weight = first_present(record, descriptor.fields)
    height = converters.to_float(height_cm)
    if weight is None or height is None or weight <= 0 or height <= 0:
        return None
    height_m = height / 100.0
    return weight / (height_m * height_m)


def _sleep_hours(
    descriptor: MetricDescriptor, record: Mapping[str, Any], height_cm: Optional[float]
) -> Optional[float]:
    total = converters.to_float(record.get("duration_minutes"))
    if total is None:
        return None
    awake = converters.to_float(record.get("awake_minutes")) or 0.0
    return converters.minutes_to_hours(total - awake)


def _glasses(
    descriptor: MetricDescriptor, record: Mapping[str, Any], height_cm: Optional[float]
) -> Optional[float]:
    millilitres = first_present(record, descriptor.fields)
    if millilitres is None:
        return None
    return millilitres / ML_PER_GLASS


_RULES: Dict[ExtractionRule, Formula] = {
    ExtractionRule.FIELDS: _from_fields,
    ExtractionRule.BMI: _bmi,
    ExtractionRule.SLEEP: _sleep_hours,
    ExtractionRule.HYDRATION: _glasses,
}


def extract_value(
    metric: Metric | str,
    record: Mapping[str, Any],
    height_cm: Optional[float] = None,
) -> Optional[float]:
    """Return the rounded value of ``metric`` in ``record`` or ``None``."""

    descriptor = get_descriptor(metric)
    value = _RULES[descriptor.rule](descriptor, record, height_cm)
    if value is None:
        return None
    if descriptor.positive_only and value <= 0:
        return None
    return round_half_up(value, descriptor.decimal_places)


def extract_points(
    metric: Metric | str,
    records: Iterable[Mapping[str, Any]],
    height_cm: Optional[float] = None,
) -> List[ExtractedPoint]:
    """Extract one point per dated record, sorted by day."""

    descriptor = get_descriptor(metric)
    points: List[ExtractedPoint] = []
    skipped = 0
    for record in records:
        day = record_day(record)
        if day is None:
            skipped += 1
            continue
        stages = SleepStages.from_record(record) if descriptor.metric is Metric.SLEEP else None
        points.append(
            ExtractedPoint(
                day=day,
                value=extract_value(descriptor.metric, record, height_cm),
                stages=stages,
            )
        )

    if skipped:
        logger.debug(
            f"Skipped {skipped} undated record(s) while extracting '{descriptor.metric.value}'."
        )
    points.sort(key=lambda point: point.day)
    return points
