"""Abstract source of raw health records, profile data and targets."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from huginn_metrics.domain.entities import HistoryPayload, Profile
from huginn_metrics.domain.metrics import Metric, Period


class HealthDataSource(ABC):
    """
    Everything the chart pipeline and the derived-metric calculator read.
    Implementations raise ``DataSourceError`` when a fetch fails.
    """

    @abstractmethod
    def fetch_history(self, metric: Metric, period: Period) -> HistoryPayload:
        """Raw per-day records for ``metric`` covering at least ``period``."""

    @abstractmethod
    def fetch_profile(self) -> Optional[Profile]:
        pass

    @abstractmethod
    def fetch_latest_body_composition(self) -> Optional[Mapping[str, Any]]:
        """Most recent body-composition record regardless of source."""

    @abstractmethod
    def fetch_target(self, metric: Metric) -> Any:
        """Stored target for ``metric`` in its storage unit, or ``None``."""
