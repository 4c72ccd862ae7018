"""Numeric helpers shared across the metrics pipeline."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional


def average(values: Iterable[Optional[float]]) -> Optional[float]:
    """Compute the mean of ``values`` while skipping ``None`` entries."""

    filtered = [value for value in values if value is not None]
    if not filtered:
        return None
    return sum(filtered) / len(filtered)


def round_half_up(value: float, places: int = 0) -> float:
    """Round ``value`` to ``places`` decimals with halves rounded away from zero.

    Python's ``round`` uses banker's rounding, which would turn 0.25 into 0.2;
    chart values are expected to round 0.25 to 0.3.
    """

    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def round_to_int(value: float) -> int:
    """Half-up rounding to the nearest integer."""

    return int(round_half_up(value, 0))
