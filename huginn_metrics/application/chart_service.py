"""Build one rendering-ready chart series per request."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from huginn_metrics.application.display_slot import SeriesDisplaySlot
from huginn_metrics.application.exceptions import ApplicationError
from huginn_metrics.domain.bmi import apply_bmi_zones
from huginn_metrics.domain.body_composition import build_body_composition_series
from huginn_metrics.domain.bucketing import bucket_points, build_labels
from huginn_metrics.domain.data_access import HealthDataSource
from huginn_metrics.domain.deduplication import deduplicate_latest_per_day
from huginn_metrics.domain.entities import HistoryPayload, Series
from huginn_metrics.domain.extraction import extract_points
from huginn_metrics.domain.metrics import (
    BODY_COMPOSITION_METRICS,
    Metric,
    Period,
    get_descriptor,
)
from huginn_metrics.domain.sleep_stages import decompose_sleep
from huginn_metrics.domain.targets import TARGET_METRICS, apply_target
from huginn_metrics.infrastructure import log_utils
from huginn_metrics.utils.formatters import ensure_sentence

TAG = "CHART"


def process_history(
    metric: Metric,
    period: Period,
    history: HistoryPayload,
    *,
    height_cm: Optional[float] = None,
    today: Optional[date] = None,
) -> Series:
    """Pure part of the pipeline: raw records in, finished (un-targeted) series out."""

    metric, period = Metric(metric), Period(period)
    descriptor = get_descriptor(metric)

    if metric in BODY_COMPOSITION_METRICS:
        return build_body_composition_series(history.records, period, metric=metric, today=today)

    records = history.records
    if descriptor.deduplicate:
        records = deduplicate_latest_per_day(records)
    points = extract_points(metric, records, height_cm)
    buckets = bucket_points(
        points, period, decimal_places=descriptor.decimal_places, today=today
    )

    if metric is Metric.SLEEP:
        return decompose_sleep(buckets, period)

    display_unit = history.display_unit if metric is Metric.WEIGHT else None
    series = Series(
        metric=metric,
        period=period,
        labels=tuple(build_labels(buckets, period)),
        points=tuple(bucket.value for bucket in buckets),
        chart_type=descriptor.chart_type,
        unit=display_unit or descriptor.unit,
        display_unit=display_unit,
    )
    if metric is Metric.BMI:
        series = apply_bmi_zones(series)
    return series


def describe_chart(metric: Metric, period: Period, series: Optional[Series]) -> str:
    """Viewer message shown alongside the chart."""

    metric, period = Metric(metric), Period(period)
    if series is None:
        return "Unable to load chart data. Please try again."
    message = f"Viewing {get_descriptor(metric).label} trends for the last {period.value}."
    if series.target_comparison_text:
        message = f"{message} {ensure_sentence(series.target_comparison_text)}"
    return message


class ChartService:
    """Runs the fetch, process and target steps for one metric at a time.

    Fetches happen sequentially in a fixed order: history, then the profile
    (BMI only), then the target (allowlisted metrics only).
    """

    def __init__(self, source: HealthDataSource, *, today: Optional[date] = None):
        self._source = source
        self._today = today

    def build_chart(self, metric: Metric | str, period: Period | str = Period.WEEK) -> Optional[Series]:
        """Return the finished series, or ``None`` when a required fetch fails."""
        metric, period = Metric(metric), Period(period)

        try:
            history = self._source.fetch_history(metric, period)
            height_cm = self._height_for(metric)
        except ApplicationError as exc:
            log_utils.error(
                f"Chart for '{metric.value}' ({period.value}) unavailable: {exc}", tag=TAG
            )
            return None

        series = process_history(
            metric, period, history, height_cm=height_cm, today=self._today
        )
        log_utils.debug(
            f"Built '{metric.value}' {period.value} chart with {len(series.labels)} bucket(s).",
            tag=TAG,
        )
        return self._with_target(series)

    def load_into(
        self, slot: SeriesDisplaySlot, metric: Metric | str, period: Period | str = Period.WEEK
    ) -> bool:
        """Build a chart and publish it unless a newer request was started meanwhile."""
        ticket = slot.begin()
        series = self.build_chart(metric, period)
        return slot.publish(ticket, series)

    def _height_for(self, metric: Metric) -> Optional[float]:
        if metric is not Metric.BMI:
            return None
        profile = self._source.fetch_profile()
        if profile is None or profile.height_cm is None:
            log_utils.warn("No profile height available; BMI points will not be plotted.", tag=TAG)
            return None
        return profile.height_cm

    def _with_target(self, series: Series) -> Series:
        if series.metric not in TARGET_METRICS or series.is_empty:
            return series
        try:
            raw_target: Any = self._source.fetch_target(series.metric)
        except ApplicationError as exc:
            log_utils.warn(f"Target for '{series.metric.value}' skipped: {exc}", tag=TAG)
            return series
        return apply_target(series, raw_target)
