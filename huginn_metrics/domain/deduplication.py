"""Collapse repeated same-day records (e.g. several scale readings) to the latest."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from huginn_metrics.utils import converters

TIMESTAMP_FIELDS = ("measured_at", "recorded_at", "date")


def record_timestamp(record: Mapping[str, Any]) -> Optional[datetime]:
    for name in TIMESTAMP_FIELDS:
        moment = converters.to_datetime(record.get(name))
        if moment is not None:
            return moment
    return None


def deduplicate_latest_per_day(
    records: Iterable[Mapping[str, Any]],
) -> List[Mapping[str, Any]]:
    """Keep only the record with the latest timestamp for each calendar day.

    Records without a usable timestamp are dropped. When two records share the
    same timestamp the later one in input order wins. The result is sorted by
    day ascending.
    """

    latest: Dict[date, Tuple[datetime, Mapping[str, Any]]] = {}
    for record in records:
        moment = record_timestamp(record)
        if moment is None:
            continue
        day = moment.date()
        current = latest.get(day)
        if current is None or moment >= current[0]:
            latest[day] = (moment, record)

    return [latest[day][1] for day in sorted(latest)]
