"""Metric identifiers and the static per-metric descriptor table.

Every chartable metric is a :class:`Metric` member, and every member must have
a :class:`MetricDescriptor` in :data:`METRIC_DESCRIPTORS`. The table drives
extraction (which fields to read, or which formula to apply), rounding,
chart type, unit and target lookup so no call site branches on metric names.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

#: Millilitres per glass when presenting hydration.
ML_PER_GLASS = 250.0


class Metric(str, Enum):
    WEIGHT = "weight"
    BMI = "bmi"
    BODY_FAT = "body-fat"
    MUSCLE_MASS = "muscle-mass"
    WATER_PERCENTAGE = "water-percentage"
    SLEEP = "sleep"
    MOOD = "mood"
    STRESS = "stress"
    HYDRATION = "hydration"
    STEPS = "steps"
    ACTIVE = "active"
    CALORIES_BURNED = "calories-burned"
    HEART_RATE = "heart-rate"
    BLOOD_PRESSURE = "blood-pressure"
    CALORIES = "calories"
    PROTEIN = "protein"
    CARBS = "carbs"
    FAT = "fat"
    FIBER = "fiber"


class Period(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ChartType(str, Enum):
    LINE = "line"
    BAR = "bar"
    STACKED = "stacked"
    BODY_COMPOSITION_BAR = "body-composition-bar"
    BODY_COMPOSITION_LINE = "body-composition-line"


class ExtractionRule(str, Enum):
    """How a value is pulled out of a raw record."""

    FIELDS = "fields"
    BMI = "bmi"
    SLEEP = "sleep"
    HYDRATION = "hydration"


@dataclass(frozen=True)
class MetricDescriptor:
    metric: Metric
    label: str
    rule: ExtractionRule
    fields: Tuple[str, ...]
    decimal_places: int
    chart_type: ChartType
    unit: str
    target_key: Optional[str] = None
    positive_only: bool = False
    deduplicate: bool = False


def _nutrition(metric: Metric, label: str, unit: str) -> MetricDescriptor:
    name = metric.value
    return MetricDescriptor(
        metric=metric,
        label=label,
        rule=ExtractionRule.FIELDS,
        fields=(f"total_{name}", f"total{name}", name),
        decimal_places=1,
        chart_type=ChartType.BAR if metric is Metric.CALORIES else ChartType.LINE,
        unit=unit,
        target_key=name,
    )


_DESCRIPTORS = (
    MetricDescriptor(
        Metric.WEIGHT, "Weight", ExtractionRule.FIELDS, ("weight", "weight_kg"),
        decimal_places=1, chart_type=ChartType.LINE, unit="kg",
        target_key="ideal_weight", positive_only=True,
    ),
    MetricDescriptor(
        Metric.BMI, "BMI", ExtractionRule.BMI, ("weight", "weight_kg"),
        decimal_places=1, chart_type=ChartType.LINE, unit="", positive_only=True,
    ),
    MetricDescriptor(
        Metric.BODY_FAT, "Body Fat", ExtractionRule.FIELDS,
        ("fat_percentage", "body_fat_percentage"),
        decimal_places=1, chart_type=ChartType.BODY_COMPOSITION_LINE, unit="%",
        positive_only=True, deduplicate=True,
    ),
    MetricDescriptor(
        Metric.MUSCLE_MASS, "Muscle Mass", ExtractionRule.FIELDS,
        ("muscle_percentage", "muscle_mass_percentage"),
        decimal_places=1, chart_type=ChartType.BODY_COMPOSITION_LINE, unit="%",
        positive_only=True, deduplicate=True,
    ),
    MetricDescriptor(
        Metric.WATER_PERCENTAGE, "Body Water", ExtractionRule.FIELDS,
        ("water_percentage", "body_water_percentage"),
        decimal_places=1, chart_type=ChartType.BODY_COMPOSITION_LINE, unit="%",
        positive_only=True, deduplicate=True,
    ),
    MetricDescriptor(
        Metric.SLEEP, "Sleep", ExtractionRule.SLEEP, ("duration_minutes", "awake_minutes"),
        decimal_places=1, chart_type=ChartType.STACKED, unit="hrs", target_key="sleep",
    ),
    MetricDescriptor(
        Metric.MOOD, "Mood", ExtractionRule.FIELDS, ("mood_value",),
        decimal_places=1, chart_type=ChartType.LINE, unit="/5",
    ),
    MetricDescriptor(
        Metric.STRESS, "Stress", ExtractionRule.FIELDS, ("stress_level", "stress_value"),
        decimal_places=1, chart_type=ChartType.LINE, unit="/10",
    ),
    MetricDescriptor(
        Metric.HYDRATION, "Water", ExtractionRule.HYDRATION,
        ("water_amount", "water_amount_ml", "amount"),
        decimal_places=1, chart_type=ChartType.LINE, unit="glasses", target_key="water",
    ),
    MetricDescriptor(
        Metric.STEPS, "Steps", ExtractionRule.FIELDS, ("steps", "step_count"),
        decimal_places=0, chart_type=ChartType.BAR, unit="steps", target_key="steps",
    ),
    MetricDescriptor(
        Metric.ACTIVE, "Active Minutes", ExtractionRule.FIELDS,
        ("duration_minutes", "active_minutes"),
        decimal_places=0, chart_type=ChartType.BAR, unit="min",
    ),
    MetricDescriptor(
        Metric.CALORIES_BURNED, "Calories Burned", ExtractionRule.FIELDS,
        ("calories_burned", "calories"),
        decimal_places=0, chart_type=ChartType.BAR, unit="cal",
    ),
    MetricDescriptor(
        Metric.HEART_RATE, "Heart Rate", ExtractionRule.FIELDS,
        ("resting_heart_rate", "heart_rate", "avg_heart_rate"),
        decimal_places=1, chart_type=ChartType.LINE, unit="bpm", positive_only=True,
    ),
    MetricDescriptor(
        Metric.BLOOD_PRESSURE, "Blood Pressure", ExtractionRule.FIELDS, ("systolic",),
        decimal_places=1, chart_type=ChartType.LINE, unit="mmHg", positive_only=True,
    ),
    _nutrition(Metric.CALORIES, "Calories", "cal"),
    _nutrition(Metric.PROTEIN, "Protein", "g"),
    _nutrition(Metric.CARBS, "Carbs", "g"),
    _nutrition(Metric.FAT, "Fat", "g"),
    _nutrition(Metric.FIBER, "Fiber", "g"),
)

METRIC_DESCRIPTORS: Mapping[Metric, MetricDescriptor] = MappingProxyType(
    {descriptor.metric: descriptor for descriptor in _DESCRIPTORS}
)

BODY_COMPOSITION_CHART_TYPES = frozenset(
    {ChartType.BODY_COMPOSITION_BAR, ChartType.BODY_COMPOSITION_LINE}
)

# Metrics charted together by the body-composition builder.
BODY_COMPOSITION_METRICS = frozenset(
    descriptor.metric
    for descriptor in _DESCRIPTORS
    if descriptor.chart_type in BODY_COMPOSITION_CHART_TYPES
)

_missing = [metric.value for metric in Metric if metric not in METRIC_DESCRIPTORS]
if _missing:
    raise RuntimeError(f"Metric descriptors missing for: {', '.join(_missing)}")


def get_descriptor(metric: Metric | str) -> MetricDescriptor:
    """Return the descriptor for ``metric`` (enum member or its string value)."""

    return METRIC_DESCRIPTORS[Metric(metric)]
