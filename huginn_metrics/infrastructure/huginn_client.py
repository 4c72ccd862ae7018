"""
Client for the huginn.health API.

Reads per-metric history, the user profile, the latest body-composition
reading and stored targets. Transient failures are retried with exponential
backoff; anything else surfaces as :class:`DataSourceError` so the chart
pipeline can tell "failed" apart from "loaded but empty".
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

import requests

from huginn_metrics.application.exceptions import ConfigurationError, DataSourceError
from huginn_metrics.config import settings
from huginn_metrics.domain.data_access import HealthDataSource
from huginn_metrics.domain.entities import HistoryPayload, Profile, unwrap_object, unwrap_records
from huginn_metrics.domain.metrics import Metric, Period
from huginn_metrics.domain.targets import target_endpoint_key
from huginn_metrics.infrastructure import log_utils
from huginn_metrics.infrastructure.decorators import retry_on_network_error

YEAR_LIMIT = 365


def _unwrap_secret(value: Any) -> Any:
    """Return the plain value for SecretStr instances."""
    if hasattr(value, "get_secret_value"):
        return value.get_secret_value()
    return value


class HuginnApiError(RuntimeError):
    """Raised for failed API calls; ``status_code`` is ``None`` for network errors."""

    def __init__(self, msg: str, resp: Optional[requests.Response] = None):
        super().__init__(msg)
        self.resp = resp
        self.status_code = None if resp is None else resp.status_code
        self.text = None if resp is None else (resp.text or "")
        self.retry_after = _parse_retry_after(resp)


def _parse_retry_after(resp: Optional[requests.Response]) -> Optional[float]:
    if resp is None:
        return None
    headers = getattr(resp, "headers", None) or {}
    raw = headers.get("Retry-After")
    try:
        return float(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def _last30_or_history(resource: str) -> Dict[Period, str]:
    return {
        Period.WEEK: f"/api/{resource}/last30days",
        Period.MONTH: f"/api/{resource}/last30days",
        Period.YEAR: f"/api/{resource}/history",
    }


def _fixed(path: str) -> Dict[Period, str]:
    return {period: path for period in Period}


_HISTORY_PATHS: Dict[Metric, Dict[Period, str]] = {
    Metric.WEIGHT: _fixed("/api/weight/converted"),
    Metric.BMI: _fixed("/api/body-composition/history"),
    Metric.BODY_FAT: _fixed("/api/body-composition/history"),
    Metric.MUSCLE_MASS: _fixed("/api/body-composition/history"),
    Metric.WATER_PERCENTAGE: _fixed("/api/body-composition/history"),
    Metric.SLEEP: _last30_or_history("sleep"),
    Metric.MOOD: _last30_or_history("mood"),
    Metric.STRESS: _last30_or_history("mood"),
    Metric.HYDRATION: {
        Period.WEEK: "/api/water/last30days",
        Period.MONTH: "/api/water/last30days",
        Period.YEAR: "/api/water",
    },
    Metric.STEPS: _last30_or_history("steps"),
    Metric.ACTIVE: _last30_or_history("exercise"),
    Metric.CALORIES_BURNED: _last30_or_history("exercise"),
    Metric.HEART_RATE: _fixed("/api/heart-rate/history"),
    Metric.BLOOD_PRESSURE: {
        Period.WEEK: "/api/blood-pressure/last30days",
        Period.MONTH: "/api/blood-pressure/last30days",
        Period.YEAR: "/api/bloodpressure",
    },
    Metric.CALORIES: _fixed("/api/meals/nutrition/history"),
    Metric.PROTEIN: _fixed("/api/meals/nutrition/history"),
    Metric.CARBS: _fixed("/api/meals/nutrition/history"),
    Metric.FAT: _fixed("/api/meals/nutrition/history"),
    Metric.FIBER: _fixed("/api/meals/nutrition/history"),
}

# Endpoints that expect the requested period as a query parameter.
_PERIOD_AWARE = frozenset({Metric.WEIGHT, Metric.BMI}) | frozenset(
    {Metric.CALORIES, Metric.PROTEIN, Metric.CARBS, Metric.FAT, Metric.FIBER}
)


def history_request(metric: Metric, period: Period) -> Tuple[str, Dict[str, Any]]:
    """Path and query parameters for the history of ``metric`` over ``period``."""
    metric, period = Metric(metric), Period(period)
    path = _HISTORY_PATHS[metric][period]
    params: Dict[str, Any] = {}
    if metric in _PERIOD_AWARE:
        params["period"] = period.value
    if period is Period.YEAR:
        params.update({"period": Period.YEAR.value, "limit": YEAR_LIMIT})
    return path, params


class HuginnClient(HealthDataSource):
    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError("Huginn API base URL must include scheme and host.")

        self.token = token if token is not None else _unwrap_secret(settings.HUGINN_AUTH_TOKEN)
        self.timeout = timeout or settings.HUGINN_TIMEOUT
        self.max_retries = settings.HUGINN_MAX_RETRIES
        self.backoff_base = settings.HUGINN_BACKOFF_BASE
        self.debug_api = bool(settings.HUGINN_DEBUG_API)

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            raise ConfigurationError("No auth token configured; set HUGINN_AUTH_TOKEN.")
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _url(self, path: str) -> str:
        normalized = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}{normalized}"

    def _should_retry(self, status: int) -> bool:
        return status in (408, 429, 500, 502, 503, 504)

    @retry_on_network_error(lambda self, status: self._should_retry(status), exception_types=(HuginnApiError,))
    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Internal request handler with retry logic."""
        url = self._url(path)

        if self.debug_api:
            log_utils.debug(f"[huginn.api] {method} {url} kwargs={kwargs}", tag="API")

        try:
            response = requests.request(
                method=method.upper(),
                url=url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as exc:
            raise HuginnApiError(f"{method} {path} failed: {exc!r}") from exc

        if self.debug_api:
            log_utils.debug(f"[huginn.api] <- {response.status_code} {response.text[:500]}", tag="API")

        if response.status_code == 204:
            return None
        if 200 <= response.status_code < 300:
            try:
                return response.json()
            except ValueError as exc:
                raise HuginnApiError(f"{method} {path} returned invalid JSON", response) from exc

        raise HuginnApiError(f"{method} {path} failed with {response.status_code}", response)

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return self._request("GET", path, params=params or None)
        except HuginnApiError as exc:
            raise DataSourceError(str(exc)) from exc

    # --- HealthDataSource ---
    def fetch_history(self, metric: Metric, period: Period) -> HistoryPayload:
        path, params = history_request(metric, period)
        payload = self._get(path, params)
        display_unit = payload.get("display_unit") if isinstance(payload, Mapping) else None
        records = unwrap_records(payload)
        log_utils.debug(
            f"Fetched {len(records)} '{Metric(metric).value}' record(s) from {path}", tag="API"
        )
        return HistoryPayload(records=records, display_unit=display_unit)

    def fetch_profile(self) -> Optional[Profile]:
        data = unwrap_object(self._get("/api/user/profile"))
        return Profile.from_payload(data) if data is not None else None

    def fetch_latest_body_composition(self) -> Optional[Mapping[str, Any]]:
        return unwrap_object(self._get("/api/body-composition/latest"))

    def fetch_target(self, metric: Metric) -> Any:
        path = f"/api/targets/{target_endpoint_key(Metric(metric))}"
        try:
            payload = self._request("GET", path)
        except HuginnApiError as exc:
            if exc.status_code == 404:
                return None
            raise DataSourceError(str(exc)) from exc
        if isinstance(payload, Mapping):
            return payload.get("target_value")
        return payload
