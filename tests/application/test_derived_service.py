from datetime import date

from huginn_metrics.application.derived_service import DerivedMetricsService
from huginn_metrics.domain.derived import BMI_UNAVAILABLE_MESSAGE, BMR_UNAVAILABLE_MESSAGE
from huginn_metrics.domain.entities import Profile
from tests.stub_source import StubSource, failing

TODAY = date(2024, 6, 1)


def test_uses_profile_and_latest_weight():
    source = StubSource(
        profile=Profile(height_cm=175, date_of_birth=date(1994, 1, 1), sex="male"),
        latest={"weight": 70, "fat_percentage": 20},
    )

    metrics = DerivedMetricsService(source, today=TODAY).calculate()

    assert metrics.bmi == 22.9
    assert metrics.bmr == 1649
    assert source.calls == ["profile", "latest"]


def test_fetch_failures_degrade_to_unavailable():
    source = StubSource()
    source.profile_error = failing()
    source.latest_error = failing()

    metrics = DerivedMetricsService(source, today=TODAY).calculate()

    assert metrics.bmi == 0.0
    assert metrics.bmr == 0
    assert metrics.messages == (BMI_UNAVAILABLE_MESSAGE, BMR_UNAVAILABLE_MESSAGE)


def test_missing_latest_weight_keeps_messages():
    source = StubSource(profile=Profile(height_cm=175, date_of_birth=date(1994, 1, 1), sex="f"))

    metrics = DerivedMetricsService(source, today=TODAY).calculate()

    assert not metrics.bmi_available
    assert not metrics.bmr_available
