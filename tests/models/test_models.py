"""Tests for engine value objects."""

from datetime import date, datetime

import pytest

from intervalcoach.models.baseline import Baseline, MetricBaseline
from intervalcoach.models.decisions import IllnessProbability
from intervalcoach.models.wellness import (
    ActivitySummary,
    FitnessSnapshot,
    GoalEvent,
    WellnessRecord,
)


class TestWellnessRecord:
    """Tests for WellnessRecord parsing."""

    def test_from_camel_case(self):
        """Upstream camelCase keys are accepted."""
        record = WellnessRecord.from_dict({
            "id": "2024-06-30",
            "sleepHours": 7.5,
            "hrv": 48,
            "restingHR": 52,
            "recoveryScore": 71,
            "skinTempDeltaC": 0.3,
            "respiratoryRate": 14.2,
            "soreness": 2,
        })

        assert record.date == date(2024, 6, 30)
        assert record.sleep_hours == 7.5
        assert record.resting_hr == 52
        assert record.recovery_score == 71
        assert record.skin_temp_delta_c == 0.3
        assert record.respiratory_rate == 14.2
        assert record.soreness == 2
        assert record.mood is None

    def test_from_snake_case_round_trip(self):
        record = WellnessRecord(date=date(2024, 6, 30), hrv=45.0, resting_hr=50.0)
        assert WellnessRecord.from_dict(record.to_dict()) == record

    def test_frozen(self):
        record = WellnessRecord(date=date(2024, 6, 30))
        with pytest.raises(AttributeError):
            record.hrv = 40.0


class TestActivitySummary:
    """Tests for qualifying activity detection."""

    @pytest.mark.parametrize("activity_type", [
        "Ride", "VirtualRide", "GravelRide", "MountainBikeRide", "Run", "TrailRun", "virtual_run", "Cycling",
    ])
    def test_cycling_and_running_qualify(self, activity_type):
        activity = ActivitySummary(date=date(2024, 6, 29), activity_type=activity_type)
        assert activity.is_qualifying

    @pytest.mark.parametrize("activity_type", ["WeightTraining", "Yoga", "Swim", "Walk", ""])
    def test_other_types_do_not_qualify(self, activity_type):
        activity = ActivitySummary(date=date(2024, 6, 29), activity_type=activity_type)
        assert not activity.is_qualifying

    def test_from_intervals_style_dict(self):
        activity = ActivitySummary.from_dict({
            "start_date_local": "2024-06-29T07:15:00",
            "type": "Ride",
            "icu_training_load": 85,
        })

        assert activity.date == date(2024, 6, 29)
        assert activity.activity_type == "Ride"
        assert activity.training_load == 85


class TestFitnessSnapshot:
    """Tests for FitnessSnapshot parsing."""

    def test_tsb_derived_when_missing(self):
        snapshot = FitnessSnapshot.from_dict({"ctl": 60, "atl": 72})
        assert snapshot.tsb == -12

    def test_explicit_tsb_kept(self):
        snapshot = FitnessSnapshot.from_dict({"ctl": 60, "atl": 72, "tsb": -10, "rampRate": 3.5})
        assert snapshot.tsb == -10
        assert snapshot.ramp_rate == 3.5


class TestGoalEvent:
    def test_defaults_to_a_priority(self):
        goal = GoalEvent.from_dict({"date": "2024-09-14", "name": "Gran Fondo"})
        assert goal.priority == "A"
        assert goal.to_dict()["date"] == "2024-09-14"


class TestMetricBaseline:
    """Tests for the z-score spread fallback."""

    def test_uses_std_dev_when_positive(self):
        assert MetricBaseline(mean_30d=50.0, std_dev_30d=3.0).effective_std_dev == 3.0

    def test_zero_std_dev_falls_back_to_ten_percent(self):
        assert MetricBaseline(mean_30d=50.0, std_dev_30d=0.0).effective_std_dev == pytest.approx(5.0)

    def test_missing_std_dev_falls_back_to_ten_percent(self):
        assert MetricBaseline(mean_30d=60.0).effective_std_dev == pytest.approx(6.0)

    def test_no_mean_no_spread(self):
        metric = MetricBaseline(min_30d=40.0, max_30d=50.0, sample_count=3)
        assert metric.effective_std_dev is None
        assert not metric.available


class TestBaseline:
    """Tests for Baseline serialization."""

    def test_round_trip(self, steady_baseline):
        assert Baseline.from_dict(steady_baseline.to_dict()) == steady_baseline

    def test_round_trip_with_missing_metric(self):
        baseline = Baseline(
            hrv=MetricBaseline(min_30d=40.0, max_30d=44.0, sample_count=2),
            calculated_at=datetime(2024, 6, 30, 6, 0, 0, 123456),
        )
        assert Baseline.from_dict(baseline.to_dict()) == baseline

    def test_for_metric(self, steady_baseline):
        assert steady_baseline.for_metric("rhr").mean_30d == 55.0
        with pytest.raises(ValueError):
            steady_baseline.for_metric("sleep")


class TestIllnessProbability:
    def test_rank_order(self):
        ranks = [p.rank for p in IllnessProbability]
        assert ranks == sorted(ranks)
        assert IllnessProbability.HIGH.rank > IllnessProbability.NONE.rank
