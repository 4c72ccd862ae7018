"""Body fat, muscle and water charted together as one multi-row series."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from huginn_metrics.domain.bucketing import (
    YEAR_POINTS,
    format_label,
    month_range,
    month_start,
    select_window,
    trailing_months,
)
from huginn_metrics.domain.deduplication import deduplicate_latest_per_day, record_timestamp
from huginn_metrics.domain.entities import Series
from huginn_metrics.domain.extraction import extract_value
from huginn_metrics.domain.metrics import ChartType, Metric, Period, get_descriptor
from huginn_metrics.utils import math as math_utils

COMPONENTS = (Metric.BODY_FAT, Metric.MUSCLE_MASS, Metric.WATER_PERCENTAGE)
LEGEND = ("Body Fat", "Muscle Mass", "Water")

Reading = Tuple[date, Tuple[Optional[float], ...]]


def _readings(records: Iterable[Mapping[str, Any]], *, deduplicate: bool) -> List[Reading]:
    """One reading per record, dated by the same timestamp the deduplicator uses."""
    if deduplicate:
        records = deduplicate_latest_per_day(records)
    readings: List[Reading] = []
    for record in records:
        moment = record_timestamp(record)
        if moment is None:
            continue
        day = moment.date()
        values = tuple(extract_value(component, record) for component in COMPONENTS)
        if all(value is None for value in values):
            continue
        readings.append((day, values))
    readings.sort(key=lambda reading: reading[0])
    return readings


def _monthly(readings: List[Reading], today: date) -> List[Reading]:
    recent = readings[-YEAR_POINTS:]
    months = month_range(recent[0][0], recent[-1][0]) if recent else trailing_months(today)
    grouped: Dict[date, List[Tuple[Optional[float], ...]]] = {month: [] for month in months}
    for day, values in recent:
        grouped[month_start(day)].append(values)

    monthly: List[Reading] = []
    for month in months:
        members = grouped[month]
        averaged = []
        for index, component in enumerate(COMPONENTS):
            mean = math_utils.average(values[index] for values in members)
            places = get_descriptor(component).decimal_places
            averaged.append(0.0 if mean is None else math_utils.round_half_up(mean, places))
        monthly.append((month, tuple(averaged)))
    return monthly


def build_body_composition_series(
    records: Iterable[Mapping[str, Any]],
    period: Period,
    *,
    metric: Metric = Metric.BODY_FAT,
    today: Optional[date] = None,
) -> Series:
    """Chart the three components on a shared axis.

    Readings are collapsed to the latest per day when the descriptor of
    ``metric`` asks for it. Week view draws bars; longer periods use the
    descriptor's chart type.

    A component missing from an otherwise valid reading is left as ``None``
    rather than drawn as zero.
    """
    period = Period(period)
    descriptor = get_descriptor(metric)
    readings = _readings(records, deduplicate=descriptor.deduplicate)
    if period is Period.YEAR:
        window = _monthly(readings, today or date.today())
    else:
        window = select_window(readings, period, sample=False)

    rows = tuple(
        tuple(values[index] for _, values in window) for index in range(len(COMPONENTS))
    )
    chart_type = ChartType.BODY_COMPOSITION_BAR if period is Period.WEEK else descriptor.chart_type
    return Series(
        metric=metric,
        period=period,
        labels=tuple(format_label(day, period) for day, _ in window),
        points=rows if window else (),
        chart_type=chart_type,
        unit="%",
        legend=LEGEND,
    )
