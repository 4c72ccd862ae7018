"""Split sleep buckets into deep/light/REM/awake rows when the data allows it."""
from __future__ import annotations

from typing import List, Optional, Sequence

from huginn_metrics.domain.bucketing import build_labels
from huginn_metrics.domain.entities import BucketedPoint, Series, SleepStages
from huginn_metrics.domain.metrics import ChartType, Metric, Period, get_descriptor
from huginn_metrics.utils.math import round_half_up

STAGE_LEGEND = ("Deep", "Light", "REM", "Awake")
MIN_STAGED_MINUTES = 60.0


def qualifies_for_stages(stages: Optional[SleepStages]) -> bool:
    """Whether a bucket has enough stage detail to be drawn stacked."""
    if stages is None:
        return False
    return (
        stages.deep_minutes > 0
        and stages.light_minutes > 0
        and stages.total_minutes > MIN_STAGED_MINUTES
    )


def _hours(minutes: float) -> float:
    return round_half_up(minutes / 60.0, 1)


def decompose_sleep(buckets: Sequence[BucketedPoint], period: Period) -> Series:
    """Build the sleep series for ``buckets``.

    Falls back to a single bar row of total hours when no bucket qualifies;
    otherwise drops the non-qualifying buckets and emits four stacked rows.
    """
    descriptor = get_descriptor(Metric.SLEEP)
    staged: List[BucketedPoint] = [b for b in buckets if qualifies_for_stages(b.stages)]

    if not staged:
        return Series(
            metric=Metric.SLEEP,
            period=period,
            labels=tuple(build_labels(buckets, period)),
            points=tuple(
                None if b.value is None else round_half_up(b.value, 1) for b in buckets
            ),
            chart_type=ChartType.BAR,
            unit=descriptor.unit,
        )

    rows = (
        tuple(_hours(b.stages.deep_minutes) for b in staged),  # type: ignore[union-attr]
        tuple(_hours(b.stages.light_minutes) for b in staged),  # type: ignore[union-attr]
        tuple(_hours(b.stages.rem_minutes) for b in staged),  # type: ignore[union-attr]
        tuple(_hours(b.stages.awake_minutes) for b in staged),  # type: ignore[union-attr]
    )
    return Series(
        metric=Metric.SLEEP,
        period=period,
        labels=tuple(build_labels(staged, period)),
        points=rows,
        chart_type=ChartType.STACKED,
        unit=descriptor.unit,
        legend=STAGE_LEGEND,
    )
