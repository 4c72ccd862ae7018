"""In-memory HealthDataSource used across tests."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from huginn_metrics.application.exceptions import DataSourceError
from huginn_metrics.domain.data_access import HealthDataSource
from huginn_metrics.domain.entities import HistoryPayload, Profile
from huginn_metrics.domain.metrics import Metric, Period


class StubSource(HealthDataSource):
    """Serves canned payloads and records the order of fetches.

    Set any of the ``*_error`` attributes to make the matching fetch raise.
    """

    def __init__(
        self,
        records: Optional[List[Mapping[str, Any]]] = None,
        *,
        display_unit: Optional[str] = None,
        profile: Optional[Profile] = None,
        latest: Optional[Mapping[str, Any]] = None,
        targets: Optional[Dict[Metric, Any]] = None,
    ) -> None:
        self.records = records or []
        self.display_unit = display_unit
        self.profile = profile
        self.latest = latest
        self.targets = targets or {}
        self.history_error: Optional[Exception] = None
        self.profile_error: Optional[Exception] = None
        self.latest_error: Optional[Exception] = None
        self.target_error: Optional[Exception] = None
        self.calls: List[str] = []

    def fetch_history(self, metric: Metric, period: Period) -> HistoryPayload:
        self.calls.append("history")
        if self.history_error is not None:
            raise self.history_error
        return HistoryPayload(records=list(self.records), display_unit=self.display_unit)

    def fetch_profile(self) -> Optional[Profile]:
        self.calls.append("profile")
        if self.profile_error is not None:
            raise self.profile_error
        return self.profile

    def fetch_latest_body_composition(self) -> Optional[Mapping[str, Any]]:
        self.calls.append("latest")
        if self.latest_error is not None:
            raise self.latest_error
        return self.latest

    def fetch_target(self, metric: Metric) -> Any:
        self.calls.append("target")
        if self.target_error is not None:
            raise self.target_error
        return self.targets.get(metric)


def failing(message: str = "boom") -> DataSourceError:
    return DataSourceError(message)
