"""Type conversion helpers used across the metrics pipeline."""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional


def to_float(value: Any) -> Optional[float]:
    """Safely convert ``value`` to ``float`` where possible.

    Booleans, NaN and infinities are rejected so they never leak into a chart.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (int, Decimal)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            result = float(stripped)
        except ValueError:
            return None
        return result if math.isfinite(result) else None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def to_datetime(value: Any) -> Optional[datetime]:
    """Best-effort conversion of timestamps to naive ``datetime``.

    Timezone-aware values keep their wall-clock time; the offset is dropped so
    that records are grouped by the calendar day the user saw.
    """

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if stripped.endswith("Z"):
            stripped = stripped[:-1]
        try:
            return datetime.fromisoformat(stripped).replace(tzinfo=None)
        except ValueError:
            pass
        try:
            parsed = date.fromisoformat(stripped[:10])
        except ValueError:
            return None
        return datetime(parsed.year, parsed.month, parsed.day)
    return None


def to_date(value: Any) -> Optional[date]:
    """Best-effort conversion of common date representations to ``date``."""

    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    moment = to_datetime(value)
    return moment.date() if moment is not None else None


def minutes_to_hours(value: Any) -> Optional[float]:
    """Convert a minutes value into hours when possible."""

    numeric = to_float(value)
    if numeric is None:
        return None
    return numeric / 60.0
