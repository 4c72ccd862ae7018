"""Group extracted points into week, month or year chart buckets."""
from __future__ import annotations

from collections import OrderedDict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from huginn_metrics.domain.entities import BucketedPoint, ExtractedPoint, SleepStages
from huginn_metrics.domain.metrics import Period
from huginn_metrics.utils import math as math_utils

WEEK_POINTS = 7
MONTH_POINTS = 30
YEAR_POINTS = 365
YEAR_FALLBACK_MONTHS = 12

# Month-view label thinning; tunable.
MONTH_STRIDE_THREE_ABOVE = 20
MONTH_STRIDE_TWO_ABOVE = 12

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

T = TypeVar("T")


def month_start(day: date) -> date:
    return day.replace(day=1)


def add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_range(first: date, last: date) -> List[date]:
    """Every month start from ``first``'s month through ``last``'s month inclusive."""

    months: List[date] = []
    current = month_start(first)
    end = month_start(last)
    while current <= end:
        months.append(current)
        current = add_months(current, 1)
    return months


def trailing_months(today: date, count: int = YEAR_FALLBACK_MONTHS) -> List[date]:
    end = month_start(today)
    return [add_months(end, -offset) for offset in range(count - 1, -1, -1)]


def select_window(items: Sequence[T], period: Period, *, sample: bool = True) -> List[T]:
    """Trailing week/month window, thinned for month view when ``sample`` is set."""

    if period is Period.WEEK:
        return list(items[-WEEK_POINTS:])

    recent = list(items[-MONTH_POINTS:])
    if not sample:
        return recent
    if len(recent) > MONTH_STRIDE_THREE_ABOVE:
        return recent[::3]
    if len(recent) > MONTH_STRIDE_TWO_ABOVE:
        return recent[::2]
    return recent


def _average_stages(stages: Sequence[SleepStages]) -> Optional[SleepStages]:
    if not stages:
        return None
    count = len(stages)

    def _mean(attr: str) -> float:
        return math_utils.round_half_up(sum(getattr(s, attr) for s in stages) / count, 0)

    return SleepStages(
        deep_minutes=_mean("deep_minutes"),
        light_minutes=_mean("light_minutes"),
        rem_minutes=_mean("rem_minutes"),
        awake_minutes=_mean("awake_minutes"),
    )


def _bucket_year(
    points: Sequence[ExtractedPoint], *, decimal_places: int, today: date
) -> List[BucketedPoint]:
    recent = list(points[-YEAR_POINTS:])
    if recent:
        months = month_range(recent[0].day, recent[-1].day)
    else:
        months = trailing_months(today)

    groups: Dict[date, List[ExtractedPoint]] = OrderedDict((month, []) for month in months)
    for point in recent:
        bucket = groups.get(month_start(point.day))
        if bucket is not None:
            bucket.append(point)

    buckets: List[BucketedPoint] = []
    for month, members in groups.items():
        mean = math_utils.average(point.value for point in members)
        if mean is None:
            buckets.append(BucketedPoint(day=month, value=0.0))
            continue
        stages = _average_stages([p.stages for p in members if p.stages is not None])
        buckets.append(
            BucketedPoint(
                day=month,
                value=math_utils.round_half_up(mean, decimal_places),
                stages=stages,
            )
        )
    return buckets


def bucket_points(
    points: Iterable[ExtractedPoint],
    period: Period,
    *,
    decimal_places: int = 1,
    today: Optional[date] = None,
) -> List[BucketedPoint]:
    """Bucket ``points`` for ``period``.

    Week and month windows are cut from the dated points, so a day whose
    value is ``None`` keeps its slot and stays ``None`` (not plotted). Year
    means skip ``None`` values; only an empty year month is reported as ``0``.
    """

    period = Period(period)
    ordered = sorted(points, key=lambda point: point.day)

    if period is Period.YEAR:
        valued = [point for point in ordered if point.value is not None]
        return _bucket_year(valued, decimal_places=decimal_places, today=today or date.today())

    return [
        BucketedPoint(day=point.day, value=point.value, stages=point.stages)
        for point in select_window(ordered, period)
    ]


def format_label(day: date, period: Period) -> str:
    period = Period(period)
    if period is Period.YEAR:
        return MONTH_ABBREVIATIONS[day.month - 1]
    if period is Period.MONTH:
        return str(day.day)
    return f"{day.month}/{day.day}"


def build_labels(buckets: Iterable[BucketedPoint], period: Period) -> List[str]:
    return [format_label(bucket.day, period) for bucket in buckets]
