"""BMI zone classification for chart colour coding."""
from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Optional

from huginn_metrics.domain.entities import BMIZoneInfo, Series
from huginn_metrics.domain.metrics import Metric
from huginn_metrics.utils import converters

BMI_SCALE_MIN = 15.0
BMI_SCALE_MAX = 35.0

UNDERWEIGHT_BELOW = 18.5
OVERWEIGHT_FROM = 25.0
OBESE_FROM = 30.0


class BMIZone(str, Enum):
    UNDER = "under"
    NORMAL = "normal"
    OVER = "over"
    OBESE = "obese"


def classify_bmi(value: Optional[float]) -> Optional[BMIZone]:
    """Return the zone for ``value``; lower boundaries are inclusive.

    Zero, negative or non-numeric values are "not plotted" and get no zone.
    """
    numeric = converters.to_float(value)
    if numeric is None or numeric <= 0:
        return None
    if numeric < UNDERWEIGHT_BELOW:
        return BMIZone.UNDER
    if numeric < OVERWEIGHT_FROM:
        return BMIZone.NORMAL
    if numeric < OBESE_FROM:
        return BMIZone.OVER
    return BMIZone.OBESE


def apply_bmi_zones(series: Series) -> Series:
    """Attach per-point zones to a BMI series.

    Values are left untouched except that zero buckets (empty year months)
    become ``None`` so they are not drawn as a false reading.
    """
    if series.metric is not Metric.BMI or series.is_matrix:
        return series

    points = tuple(
        value if classify_bmi(value) is not None else None
        for value in series.points
    )
    zones = tuple(
        zone.value if zone is not None else None
        for zone in (classify_bmi(value) for value in points)
    )
    info = BMIZoneInfo(
        scale_min=BMI_SCALE_MIN,
        scale_max=BMI_SCALE_MAX,
        zones=zones,
        boundaries=(UNDERWEIGHT_BELOW, OVERWEIGHT_FROM, OBESE_FROM),
    )
    return replace(series, points=points, zone_info=info)
