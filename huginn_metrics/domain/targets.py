"""Attach a user target to a finished series and phrase how the latest value compares."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from huginn_metrics.domain.entities import Series
from huginn_metrics.domain.metrics import ML_PER_GLASS, Metric, get_descriptor
from huginn_metrics.utils import converters
from huginn_metrics.utils.formatters import format_compact, format_decimal
from huginn_metrics.utils.math import round_half_up

logger = logging.getLogger(__name__)

TARGET_METRICS = frozenset(
    {
        Metric.WEIGHT,
        Metric.CALORIES,
        Metric.PROTEIN,
        Metric.CARBS,
        Metric.FAT,
        Metric.FIBER,
        Metric.STEPS,
        Metric.HYDRATION,
        Metric.SLEEP,
    }
)

KG_TO_LBS = 2.20462
KG_PER_STONE = 6.35029
SLEEP_TOLERANCE_HOURS = 0.1


def target_endpoint_key(metric: Metric) -> str:
    """Key under which the target service stores the goal for ``metric``."""
    return get_descriptor(metric).target_key or metric.value


def _convert_weight(kilograms: float, display_unit: Optional[str]) -> float:
    unit = (display_unit or "kg").strip().lower()
    if unit in ("lbs", "lb"):
        return kilograms * KG_TO_LBS
    if unit in ("stone", "st"):
        return kilograms / KG_PER_STONE
    return kilograms


def normalize_target(
    metric: Metric, raw: Any, display_unit: Optional[str] = None
) -> Optional[float]:
    """Convert a stored target into the series' own unit.

    ``raw`` may be the scalar or the ``{"target_value": ...}`` payload. Targets
    are stored in kg (weight) and mL (hydration). The result is rounded like
    the series values. Returns ``None`` for missing, non-numeric or
    non-positive targets.
    """
    if isinstance(raw, Mapping):
        raw = raw.get("target_value")
    value = converters.to_float(raw)
    if value is None or value <= 0:
        return None

    if metric is Metric.HYDRATION:
        value = value / ML_PER_GLASS
    elif metric is Metric.WEIGHT:
        value = _convert_weight(value, display_unit)
    rounded = round_half_up(value, get_descriptor(metric).decimal_places)
    return rounded if rounded > 0 else None


def _format_value(metric: Metric, value: float) -> str:
    places = get_descriptor(metric).decimal_places
    text = format_decimal(value, places)
    if metric is Metric.HYDRATION:
        return f"{text} glasses"
    return text


def compare_to_target(
    metric: Metric,
    current: Optional[float],
    target: Optional[float],
    unit: Optional[str] = None,
) -> Optional[str]:
    """Phrase ``current`` against ``target``; ``None`` when either is missing or zero."""
    if not current or not target:
        return None

    current_text = _format_value(metric, current)
    target_text = _format_value(metric, target)
    difference = current - target

    if metric is Metric.WEIGHT:
        suffix = unit or "kg"
        prefix = f"Current: {current_text}{suffix}. Target: {target_text}{suffix}."
        if difference > 0:
            return f"{prefix} You're {abs(difference):.1f}{suffix} above your target."
        return f"{prefix} Great job! You're within target range."

    if metric is Metric.SLEEP:
        if abs(difference) < SLEEP_TOLERANCE_HOURS:
            return f"You're hitting your sleep target of {target_text} hours!"
        prefix = f"Current: {current_text} hours. Target: {target_text} hours."
        if difference >= 0:
            return f"{prefix} You're {difference:.1f} hours above your sleep target."
        return f"{prefix} You need {abs(difference):.1f} more hours of sleep to reach your target."

    percent = format_compact(abs(difference / target) * 100.0, 1)
    prefix = f"Current: {current_text}. Target: {target_text}."
    if difference < 0:
        return f"{prefix} You're {percent}% below target."
    return f"{prefix} Excellent! You're meeting your target!"


def apply_target(series: Series, raw_target: Any) -> Series:
    """Return ``series`` annotated with its target, or unchanged when not applicable."""
    if series.metric not in TARGET_METRICS:
        return series

    target = normalize_target(series.metric, raw_target, series.display_unit)
    if target is None:
        logger.debug(
            f"Ignoring missing or invalid target for '{series.metric.value}': {raw_target!r}"
        )
        return series

    comparison = compare_to_target(
        series.metric, series.last_value, target, series.display_unit or series.unit
    )
    return replace(series, target_value=target, target_comparison_text=comparison)
