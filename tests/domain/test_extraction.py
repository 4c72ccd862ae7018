from datetime import date

import pytest

from huginn_metrics.domain.entities import SleepStages
from huginn_metrics.domain.extraction import extract_points, extract_value, record_day
from huginn_metrics.domain.metrics import Metric


def test_weight_uses_first_present_field_and_rounds():
    assert extract_value(Metric.WEIGHT, {"weight": "80.04"}) == 80.0
    assert extract_value(Metric.WEIGHT, {"weight_kg": 79.95}) == 80.0


def test_fallback_field_is_used_when_primary_missing():
    assert extract_value(Metric.BODY_FAT, {"body_fat_percentage": 22.35}) == 22.4


def test_present_zero_wins_over_later_fields():
    assert extract_value(Metric.STEPS, {"steps": 0, "step_count": 500}) == 0.0


def test_missing_or_unusable_value_is_none():
    assert extract_value(Metric.STEPS, {}) is None
    assert extract_value(Metric.STEPS, {"steps": "lots"}) is None
    assert extract_value(Metric.MOOD, {"mood_value": None}) is None


def test_positive_only_metrics_drop_zero_readings():
    assert extract_value(Metric.WEIGHT, {"weight": 0}) is None
    assert extract_value(Metric.HEART_RATE, {"resting_heart_rate": -1}) is None


def test_whole_number_metrics_round_half_up():
    assert extract_value(Metric.STEPS, {"steps": 1234.5}) == 1235.0


def test_bmi_needs_height_and_weight():
    assert extract_value(Metric.BMI, {"weight": 70}, height_cm=170) == 24.2
    assert extract_value(Metric.BMI, {"weight": 70}) is None
    assert extract_value(Metric.BMI, {"weight": 0}, height_cm=170) is None
    assert extract_value(Metric.BMI, {"weight": 70}, height_cm=0) is None


def test_sleep_hours_subtract_awake_time():
    assert extract_value(Metric.SLEEP, {"duration_minutes": 480, "awake_minutes": 30}) == 7.5
    assert extract_value(Metric.SLEEP, {"duration_minutes": 480}) == 8.0
    assert extract_value(Metric.SLEEP, {"awake_minutes": 30}) is None


def test_hydration_converts_millilitres_to_glasses():
    assert extract_value(Metric.HYDRATION, {"water_amount": 1500}) == 6.0
    assert extract_value(Metric.HYDRATION, {"amount": 375}) == 1.5


def test_blood_pressure_charts_systolic():
    assert extract_value(Metric.BLOOD_PRESSURE, {"systolic": 121, "diastolic": 80}) == 121.0


def test_record_day_tries_date_fields_in_order():
    assert record_day({"date": "2024-03-02", "recorded_at": "2024-03-05T10:00:00"}) == date(2024, 3, 2)
    assert record_day({"recorded_at": "2024-03-05T10:00:00"}) == date(2024, 3, 5)
    assert record_day({"measured_at": "2024-03-06T07:00:00Z"}) == date(2024, 3, 6)
    assert record_day({"weight": 80}) is None


def test_extract_points_sorts_and_skips_undated_records():
    records = [
        {"date": "2024-01-03", "steps": 9000},
        {"steps": 4000},
        {"date": "2024-01-01", "steps": 6000},
        {"date": "2024-01-02"},
    ]

    points = extract_points(Metric.STEPS, records)

    assert [p.day for p in points] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert [p.value for p in points] == [6000.0, None, 9000.0]


def test_sleep_points_carry_stage_minutes():
    records = [
        {
            "date": "2024-01-01",
            "duration_minutes": 450,
            "deep_minutes": 90,
            "light_minutes": 240,
            "rem_minutes": 100,
            "awake_minutes": 20,
        },
        {"date": "2024-01-02", "duration_minutes": 400},
    ]

    first, second = extract_points(Metric.SLEEP, records)

    assert first.value == pytest.approx(7.2)
    assert first.stages == SleepStages(90.0, 240.0, 100.0, 20.0)
    assert second.stages is None


def test_non_sleep_points_have_no_stages():
    points = extract_points(Metric.MOOD, [{"date": "2024-01-01", "mood_value": 4, "deep_minutes": 10}])
    assert points[0].stages is None


def test_nutrition_totals_keep_one_decimal():
    assert extract_value(Metric.PROTEIN, {"total_protein": 42.35}) == 42.4
    assert extract_value(Metric.FIBER, {"fiber": "18.04"}) == 18.0
