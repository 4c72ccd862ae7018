import json
from datetime import date

from typer.testing import CliRunner

import huginn_metrics.cli.dashboard as dashboard
from huginn_metrics.application.exceptions import ConfigurationError
from huginn_metrics.domain.entities import Profile
from huginn_metrics.domain.metrics import Metric
from tests.stub_source import StubSource, failing

runner = CliRunner()


def _use(monkeypatch, source):
    monkeypatch.setattr(dashboard, "_build_source", lambda: source)
    return source


def test_chart_prints_series_and_viewer_message(monkeypatch):
    _use(
        monkeypatch,
        StubSource(
            [{"date": "2024-01-01", "water_amount": 1500}],
            targets={Metric.HYDRATION: 2000},
        ),
    )

    result = runner.invoke(dashboard.app, ["chart", "hydration", "--period", "week"])

    assert result.exit_code == 0
    assert "Target: 8.0" in result.stdout
    assert "Viewing Water trends for the last week." in result.stdout
    assert "25% below target" in result.stdout


def test_chart_json_output(monkeypatch):
    _use(monkeypatch, StubSource([{"date": "2024-01-01", "steps": 4000}]))

    result = runner.invoke(dashboard.app, ["chart", "steps", "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout[: result.stdout.rindex("}") + 1])
    assert payload["metric"] == "steps"
    assert payload["points"] == [4000.0]
    assert payload["labels"] == ["1/1"]


def test_chart_with_no_history(monkeypatch):
    _use(monkeypatch, StubSource([]))

    result = runner.invoke(dashboard.app, ["chart", "mood", "--period", "month"])

    assert result.exit_code == 0
    assert "No history recorded yet." in result.stdout


def test_chart_failure_exits_non_zero(monkeypatch):
    source = _use(monkeypatch, StubSource())
    source.history_error = failing()

    result = runner.invoke(dashboard.app, ["chart", "weight"])

    assert result.exit_code == 1
    assert "Unable to load chart data. Please try again." in result.stdout


def test_configuration_error_is_reported(monkeypatch):
    def broken():
        raise ConfigurationError("No auth token configured; set HUGINN_AUTH_TOKEN.")

    monkeypatch.setattr(dashboard, "_build_source", broken)

    result = runner.invoke(dashboard.app, ["derived"])

    assert result.exit_code == 1
    assert "Configuration error" in result.stdout


def test_derived_reports_unavailable_metrics(monkeypatch):
    _use(monkeypatch, StubSource())

    result = runner.invoke(dashboard.app, ["derived"])

    assert result.exit_code == 0
    assert "BMI not available" in result.stdout
    assert "BMR not calculated yet" in result.stdout


def test_calorie_needs_lists_activity_levels(monkeypatch):
    _use(
        monkeypatch,
        StubSource(
            profile=Profile(height_cm=175, date_of_birth=date(1990, 1, 1), sex="male"),
            latest={"weight": 70},
        ),
    )

    result = runner.invoke(dashboard.app, ["calorie-needs"])

    assert result.exit_code == 0
    assert "Your BMR:" in result.stdout
    assert "Sedentary" in result.stdout


def test_calorie_needs_without_bmr_exits_non_zero(monkeypatch):
    _use(monkeypatch, StubSource(profile=Profile(height_cm=175)))

    result = runner.invoke(dashboard.app, ["calorie-needs"])

    assert result.exit_code == 1
    assert "BMR not calculated yet" in result.stdout
