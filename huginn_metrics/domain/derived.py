"""Point-in-time BMI, BMR and daily-calorie projections from the user profile.

These helpers are independent of the chart pipeline. Missing or non-positive
inputs never raise; they produce ``0`` which callers present as "not
available".
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

from huginn_metrics.domain.bmi import BMIZone, classify_bmi
from huginn_metrics.utils import converters
from huginn_metrics.utils.math import round_half_up, round_to_int

DAYS_PER_YEAR = 365.25

BMI_UNAVAILABLE_MESSAGE = "BMI not available. Please set your height and log a weight."
BMR_UNAVAILABLE_MESSAGE = (
    "BMR not calculated yet. Please ensure your weight, height, age, and sex are set in settings."
)

MALE_SEX_VALUES = frozenset({"m", "male"})


@dataclass(frozen=True)
class ActivityLevel:
    name: str
    description: str
    multiplier: float


@dataclass(frozen=True)
class ActivityProjection:
    name: str
    description: str
    multiplier: float
    calories: int


ACTIVITY_LEVELS = (
    ActivityLevel("Sedentary", "You're inactive and do little or no exercise per day.", 1.2),
    ActivityLevel(
        "Lightly Active",
        "You're getting the steps in and do light exercise 1-3 times a week.",
        1.375,
    ),
    ActivityLevel(
        "Moderately Active",
        "You like to break a sweat and do moderate exercise 4-5 times a week.",
        1.55,
    ),
    ActivityLevel(
        "Very Active",
        "You're more hare than tortoise and do hard exercise 6-7 times a week.",
        1.725,
    ),
    ActivityLevel(
        "Extra Active",
        "You're seriously pushing for the burn and do intense exercise every day.",
        1.9,
    ),
)


@dataclass(frozen=True)
class DerivedMetrics:
    bmi: float
    bmr: int
    bmi_zone: Optional[BMIZone] = None
    messages: tuple[str, ...] = ()

    @property
    def bmi_available(self) -> bool:
        return self.bmi > 0

    @property
    def bmr_available(self) -> bool:
        return self.bmr > 0


def _positive(value: Any) -> Optional[float]:
    numeric = converters.to_float(value)
    if numeric is None or numeric <= 0:
        return None
    return numeric


def calculate_bmi(height_cm: Any, weight_kg: Any) -> float:
    """BMI rounded to one decimal, or ``0.0`` when an input is unusable."""
    height = _positive(height_cm)
    weight = _positive(weight_kg)
    if height is None or weight is None:
        return 0.0
    height_m = height / 100.0
    return round_half_up(weight / (height_m * height_m), 1)


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Whole years elapsed, using 365.25-day years."""
    reference = today or date.today()
    return math.floor((reference - date_of_birth).days / DAYS_PER_YEAR)


def calculate_bmr(
    weight_kg: Any,
    height_cm: Any,
    date_of_birth: Any,
    sex: Optional[str],
    today: Optional[date] = None,
) -> int:
    """Mifflin-St Jeor basal metabolic rate in kcal/day, or ``0`` when unavailable."""
    weight = _positive(weight_kg)
    height = _positive(height_cm)
    birth_date = converters.to_date(date_of_birth)
    if weight is None or height is None or birth_date is None or not sex:
        return 0

    age = calculate_age(birth_date, today)
    base = 10 * weight + 6.25 * height - 5 * age
    if str(sex).strip().lower() in MALE_SEX_VALUES:
        bmr = base + 5
    else:
        bmr = base - 161
    if bmr <= 0:
        return 0
    return round_to_int(bmr)


def project_daily_calories(bmr: Any) -> List[ActivityProjection]:
    """Suggested daily calories for each activity level; empty when BMR is unavailable."""
    value = _positive(bmr)
    if value is None:
        return []
    return [
        ActivityProjection(
            name=level.name,
            description=level.description,
            multiplier=level.multiplier,
            calories=round_to_int(value * level.multiplier),
        )
        for level in ACTIVITY_LEVELS
    ]


def calculate_derived_metrics(
    *,
    height_cm: Any,
    weight_kg: Any,
    date_of_birth: Any,
    sex: Optional[str],
    today: Optional[date] = None,
) -> DerivedMetrics:
    bmi = calculate_bmi(height_cm, weight_kg)
    bmr = calculate_bmr(weight_kg, height_cm, date_of_birth, sex, today)
    messages = []
    if bmi <= 0:
        messages.append(BMI_UNAVAILABLE_MESSAGE)
    if bmr <= 0:
        messages.append(BMR_UNAVAILABLE_MESSAGE)
    return DerivedMetrics(
        bmi=bmi,
        bmr=bmr,
        bmi_zone=classify_bmi(bmi),
        messages=tuple(messages),
    )
