from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from huginn_metrics.application.exceptions import ConfigurationError, DataSourceError
from huginn_metrics.domain.metrics import Metric, Period
from huginn_metrics.infrastructure import huginn_client
from huginn_metrics.infrastructure.huginn_client import HuginnClient, history_request


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, headers=None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = "" if payload is None else str(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeTransport:
    """Replays queued responses and records each request."""

    def __init__(self, *responses: Any) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def transport(monkeypatch: pytest.MonkeyPatch):
    def install(*responses: Any) -> FakeTransport:
        fake = FakeTransport(*responses)
        monkeypatch.setattr(huginn_client.requests, "request", fake)
        return fake

    monkeypatch.setattr("huginn_metrics.infrastructure.decorators.time.sleep", lambda _: None)
    return install


@pytest.fixture
def client() -> HuginnClient:
    return HuginnClient(base_url="https://api.example.test/", token="secret-token", timeout=5)


@pytest.mark.parametrize(
    "metric, period, expected",
    [
        (Metric.SLEEP, Period.WEEK, ("/api/sleep/last30days", {})),
        (Metric.SLEEP, Period.YEAR, ("/api/sleep/history", {"period": "year", "limit": 365})),
        (Metric.WEIGHT, Period.MONTH, ("/api/weight/converted", {"period": "month"})),
        (Metric.HYDRATION, Period.YEAR, ("/api/water", {"period": "year", "limit": 365})),
        (Metric.BLOOD_PRESSURE, Period.WEEK, ("/api/blood-pressure/last30days", {})),
        (Metric.PROTEIN, Period.WEEK, ("/api/meals/nutrition/history", {"period": "week"})),
        (Metric.BODY_FAT, Period.WEEK, ("/api/body-composition/history", {})),
    ],
)
def test_history_request(metric, period, expected):
    assert history_request(metric, period) == expected


def test_fetch_history_unwraps_envelope_and_sends_auth(transport, client):
    fake = transport(
        FakeResponse(
            payload={
                "success": True,
                "display_unit": "lbs",
                "data": [{"date": "2024-01-01", "weight": 176.4}, "junk"],
            }
        )
    )

    history = client.fetch_history(Metric.WEIGHT, Period.WEEK)

    assert history.display_unit == "lbs"
    assert history.records == [{"date": "2024-01-01", "weight": 176.4}]
    call = fake.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.example.test/api/weight/converted"
    assert call["params"] == {"period": "week"}
    assert call["headers"]["Authorization"] == "Bearer secret-token"
    assert call["timeout"] == 5


def test_fetch_history_accepts_bare_lists(transport, client):
    fake = transport(FakeResponse(payload=[{"date": "2024-01-01", "steps": 100}]))

    history = client.fetch_history(Metric.STEPS, Period.WEEK)

    assert len(history.records) == 1
    assert fake.calls[0]["params"] is None


def test_unsuccessful_envelope_is_empty_not_failed(transport, client):
    transport(FakeResponse(payload={"success": False, "data": []}))

    assert client.fetch_history(Metric.MOOD, Period.WEEK).records == []


def test_transient_errors_are_retried(transport, client):
    fake = transport(
        FakeResponse(status_code=503),
        requests.exceptions.ConnectionError("reset"),
        FakeResponse(payload=[]),
    )

    assert client.fetch_history(Metric.STEPS, Period.WEEK).records == []
    assert len(fake.calls) == 3


def test_client_errors_raise_data_source_error(transport, client):
    fake = transport(FakeResponse(status_code=401))

    with pytest.raises(DataSourceError):
        client.fetch_history(Metric.STEPS, Period.WEEK)
    assert len(fake.calls) == 1


def test_invalid_json_is_a_failure(transport, client):
    transport(FakeResponse(payload=ValueError("not json")))

    with pytest.raises(DataSourceError):
        client.fetch_history(Metric.STEPS, Period.WEEK)


def test_fetch_profile(transport, client):
    transport(
        FakeResponse(
            payload={"success": True, "data": {"height": "172.5", "date_of_birth": "1990-04-02", "sex": "female"}}
        )
    )

    profile = client.fetch_profile()

    assert profile.height_cm == 172.5
    assert profile.date_of_birth.year == 1990
    assert profile.sex == "female"


def test_fetch_latest_body_composition(transport, client):
    fake = transport(FakeResponse(payload={"success": True, "data": {"weight": 71.2}}))

    assert client.fetch_latest_body_composition() == {"weight": 71.2}
    assert fake.calls[0]["url"].endswith("/api/body-composition/latest")


def test_fetch_target_uses_endpoint_key(transport, client):
    fake = transport(FakeResponse(payload={"target_value": 2000}))

    assert client.fetch_target(Metric.HYDRATION) == 2000
    assert fake.calls[0]["url"].endswith("/api/targets/water")


def test_missing_target_is_none(transport, client):
    transport(FakeResponse(status_code=404))

    assert client.fetch_target(Metric.WEIGHT) is None


def test_target_server_error_raises(transport, client):
    transport(*[FakeResponse(status_code=500)] * 5)

    with pytest.raises(DataSourceError):
        client.fetch_target(Metric.STEPS)


def test_missing_token_is_a_configuration_error(transport):
    transport(FakeResponse(payload=[]))
    client = HuginnClient(base_url="https://api.example.test", token="")

    with pytest.raises(ConfigurationError):
        client.fetch_profile()


def test_base_url_requires_scheme():
    with pytest.raises(ConfigurationError):
        HuginnClient(base_url="huginn.health", token="t")
