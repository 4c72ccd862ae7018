"""Domain entities flowing through the chart pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from huginn_metrics.domain.metrics import ChartType, Metric, Period
from huginn_metrics.utils import converters

Row = Tuple[Optional[float], ...]


@dataclass(frozen=True)
class SleepStages:
    """Minutes spent in each sleep stage for one bucket."""

    deep_minutes: float = 0.0
    light_minutes: float = 0.0
    rem_minutes: float = 0.0
    awake_minutes: float = 0.0

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Optional["SleepStages"]:
        keys = ("deep_minutes", "light_minutes", "rem_minutes", "awake_minutes")
        if not any(key in record for key in keys):
            return None
        values = [converters.to_float(record.get(key)) or 0.0 for key in keys]
        return cls(*values)

    @property
    def total_minutes(self) -> float:
        return self.deep_minutes + self.light_minutes + self.rem_minutes + self.awake_minutes


@dataclass(frozen=True)
class ExtractedPoint:
    day: date
    value: Optional[float]
    stages: Optional[SleepStages] = None


@dataclass(frozen=True)
class BucketedPoint:
    """One chart slot; ``value`` is ``None`` when the day has no usable reading."""

    day: date
    value: Optional[float]
    stages: Optional[SleepStages] = None


@dataclass(frozen=True)
class BMIZoneInfo:
    """Zone annotation attached to BMI series for colour coding."""

    scale_min: float
    scale_max: float
    zones: Tuple[Optional[str], ...]
    boundaries: Tuple[float, ...]


@dataclass(frozen=True)
class Series:
    """A finished, rendering-ready chart series.

    ``points`` is a flat tuple for single-series charts and a tuple of rows
    (one per component, each aligned with ``labels``) for multi-series charts.
    """

    metric: Metric
    period: Period
    labels: Tuple[str, ...]
    points: Union[Row, Tuple[Row, ...]]
    chart_type: ChartType
    unit: str = ""
    legend: Tuple[str, ...] = ()
    display_unit: Optional[str] = None
    zone_info: Optional[BMIZoneInfo] = None
    target_value: Optional[float] = None
    target_comparison_text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.is_matrix:
            for row in self.points:
                if len(row) != len(self.labels):
                    raise ValueError("Every series row must align with the labels.")
        elif len(self.points) != len(self.labels):
            raise ValueError("Series points must align with the labels.")

    @property
    def is_matrix(self) -> bool:
        return bool(self.points) and isinstance(self.points[0], tuple)

    @property
    def is_empty(self) -> bool:
        return not self.labels

    @property
    def rows(self) -> Tuple[Row, ...]:
        if self.is_matrix:
            return self.points  # type: ignore[return-value]
        return (self.points,)  # type: ignore[return-value]

    @property
    def last_value(self) -> Optional[float]:
        """Most recent value used for target comparison.

        Single-row charts report the latest plotted point, skipping trailing
        days without a reading. Stacked sleep charts report asleep time (deep,
        light and REM) for the last bucket; awake time is excluded.
        """
        if self.is_empty:
            return None
        if self.chart_type is ChartType.STACKED:
            deep, light, rem = (row[-1] or 0.0 for row in self.rows[:3])
            return deep + light + rem
        if self.is_matrix:
            return None
        plotted = [value for value in self.points if value is not None]
        return plotted[-1] if plotted else None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "metric": self.metric.value,
            "period": self.period.value,
            "labels": list(self.labels),
            "points": [list(row) for row in self.points] if self.is_matrix else list(self.points),
            "chart_type": self.chart_type.value,
            "unit": self.unit,
        }
        if self.legend:
            payload["legend"] = list(self.legend)
        if self.display_unit:
            payload["display_unit"] = self.display_unit
        if self.zone_info is not None:
            payload["zone_info"] = {
                "scale_min": self.zone_info.scale_min,
                "scale_max": self.zone_info.scale_max,
                "zones": list(self.zone_info.zones),
                "boundaries": list(self.zone_info.boundaries),
            }
        if self.target_value is not None:
            payload["target_value"] = self.target_value
        if self.target_comparison_text:
            payload["target_comparison_text"] = self.target_comparison_text
        return payload


@dataclass(frozen=True)
class Profile:
    height_cm: Optional[float] = None
    date_of_birth: Optional[date] = None
    sex: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Profile":
        return cls(
            height_cm=converters.to_float(payload.get("height")),
            date_of_birth=converters.to_date(payload.get("date_of_birth")),
            sex=(str(payload["sex"]) if payload.get("sex") else None),
        )


@dataclass(frozen=True)
class HistoryPayload:
    """Raw records for one metric plus the unit the API converted them to."""

    records: Sequence[Mapping[str, Any]] = field(default_factory=list)
    display_unit: Optional[str] = None


def unwrap_records(payload: Any) -> List[Mapping[str, Any]]:
    """Return the record list from a bare array or a ``{success, data}`` envelope."""

    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, Mapping) and isinstance(payload.get("data"), list):
        if payload.get("success") is False:
            return []
        items = payload["data"]
    else:
        return []
    return [item for item in items if isinstance(item, Mapping)]


def unwrap_object(payload: Any) -> Optional[Mapping[str, Any]]:
    """Return the single object from a ``{success, data}`` envelope or a bare object."""

    if not isinstance(payload, Mapping):
        return None
    if "data" in payload or "success" in payload:
        if not payload.get("success", True):
            return None
        data = payload.get("data")
        return data if isinstance(data, Mapping) else None
    return payload
