"""Fetch the inputs for BMI/BMR and compute them without ever raising."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from huginn_metrics.application.exceptions import ApplicationError
from huginn_metrics.domain.data_access import HealthDataSource
from huginn_metrics.domain.derived import DerivedMetrics, calculate_derived_metrics
from huginn_metrics.domain.entities import Profile
from huginn_metrics.infrastructure import log_utils
from huginn_metrics.utils import converters

TAG = "BODY"


def _latest_weight(record: Optional[Mapping[str, Any]]) -> Optional[float]:
    if not record:
        return None
    return converters.to_float(record.get("weight"))


class DerivedMetricsService:
    """Loads the profile, then the latest weight, and derives BMI and BMR."""

    def __init__(self, source: HealthDataSource, *, today: Optional[date] = None):
        self._source = source
        self._today = today

    def calculate(self) -> DerivedMetrics:
        profile = self._fetch_profile()
        weight = self._fetch_weight()
        metrics = calculate_derived_metrics(
            height_cm=profile.height_cm,
            weight_kg=weight,
            date_of_birth=profile.date_of_birth,
            sex=profile.sex,
            today=self._today,
        )
        log_utils.info(f"Derived metrics computed: BMI {metrics.bmi}, BMR {metrics.bmr}.", tag=TAG)
        return metrics

    def _fetch_profile(self) -> Profile:
        try:
            profile = self._source.fetch_profile()
        except ApplicationError as exc:
            log_utils.warn(f"Profile unavailable for derived metrics: {exc}", tag=TAG)
            return Profile()
        return profile or Profile()

    def _fetch_weight(self) -> Optional[float]:
        try:
            record = self._source.fetch_latest_body_composition()
        except ApplicationError as exc:
            log_utils.warn(f"Latest weight unavailable for derived metrics: {exc}", tag=TAG)
            return None
        return _latest_weight(record)
