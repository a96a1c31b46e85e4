"""Tests for the daily decision cycle."""

import json
from datetime import date, timedelta

import pytest

from intervalcoach.baselines import BaselineStore
from intervalcoach.config import Settings
from intervalcoach.db.baseline_repository import InMemoryBaselineRepository, SqliteBaselineRepository
from intervalcoach.integrations.base import JsonFileSource
from intervalcoach.llm.enhancer import LLMEnhancer
from intervalcoach.models.decisions import (
    Confidence,
    DecisionSource,
    IllnessAssessment,
    IllnessProbability,
    IntensityModifier,
    RampRateAdvice,
    TrainingGapResult,
)
from intervalcoach.models.wellness import ActivitySummary, FitnessSnapshot, GoalEvent, WellnessRecord
from intervalcoach.services.orchestrator import (
    AdaptiveOrchestrator,
    DailyInputs,
    build_orchestrator,
    effective_modifier,
)


TODAY = date(2024, 6, 30)


class ScriptedEnhancer:
    """Returns a canned response per decision; missing decisions decline."""

    def __init__(self, responses):
        self.responses = responses

    def assess(self, decision, context):
        response = self.responses.get(decision)
        if isinstance(response, Exception):
            raise response
        return response


def record(offset=0, **fields):
    values = {"hrv": 50.0, "resting_hr": 55.0, "sleep_hours": 8.0}
    values.update(fields)
    return WellnessRecord(date=TODAY - timedelta(days=offset), **values)


@pytest.fixture
def store(steady_baseline):
    return BaselineStore(repository=InMemoryBaselineRepository(steady_baseline))


@pytest.fixture
def fitness():
    return FitnessSnapshot(ctl=50.0, atl=55.0, tsb=-5.0)


@pytest.fixture
def goal():
    return GoalEvent(date=TODAY + timedelta(weeks=12), name="Gran Fondo")


@pytest.fixture
def ride_yesterday():
    return [ActivitySummary(date=TODAY - timedelta(days=1), activity_type="Ride", training_load=85)]


class TestEffectiveModifier:
    """Tests for combining modifiers with the illness cap."""

    def _combine(self, intensity, gap, probability):
        return effective_modifier(
            IntensityModifier(modifier=intensity, confidence=Confidence.HIGH),
            TrainingGapResult(gap_days=5, interpretation="fresh", intensity_modifier=gap, recommendation=""),
            IllnessAssessment(detected=False, probability=probability),
        )

    def test_product(self):
        assert self._combine(0.9, 0.9, IllnessProbability.NONE) == 0.81

    @pytest.mark.parametrize("probability,cap", [
        (IllnessProbability.POSSIBLE, 0.6),
        (IllnessProbability.LIKELY, 0.5),
        (IllnessProbability.HIGH, 0.0),
    ])
    def test_illness_caps(self, probability, cap):
        assert self._combine(1.05, 1.0, probability) == cap

    def test_cap_only_lowers(self):
        assert self._combine(0.7, 0.7, IllnessProbability.POSSIBLE) == 0.49


class TestAdaptiveOrchestrator:
    """Tests for AdaptiveOrchestrator.decide."""

    def test_well_recovered_day(self, store, fitness, goal, ride_yesterday):
        inputs = DailyInputs(
            today=TODAY,
            wellness=[record(0, hrv=60.0, resting_hr=50.0, recovery_score=80), record(1), record(2)],
            fitness=fitness,
            goal=goal,
            activities=ride_yesterday,
        )

        decision = AdaptiveOrchestrator(baseline_store=store).decide(inputs)

        assert decision.hrv.z_score == 1.0
        assert decision.rhr.z_score == -1.0
        assert decision.intensity.modifier == 1.0
        assert decision.intensity.confidence == Confidence.HIGH
        assert decision.recovery.category == "green"
        assert decision.illness.probability == IllnessProbability.NONE
        assert decision.training_gap.interpretation == "normal"
        assert decision.phase.phase_name == "Build"
        assert decision.load_advice.ramp_rate_advice == RampRateAdvice.BUILD
        assert decision.effective_modifier == 1.0
        assert decision.enhanced == []

    def test_stored_baseline_reused_with_few_records(self, store, steady_baseline):
        decision = AdaptiveOrchestrator(baseline_store=store).decide(
            DailyInputs(today=TODAY, wellness=[record(0, hrv=40.0)])
        )

        assert decision.baseline == steady_baseline
        assert decision.hrv.status == "below_baseline"

    def test_baseline_recomputed_with_enough_records(self):
        store = BaselineStore()
        records = [record(i, hrv=45.0 if i % 2 else 55.0) for i in range(10)]

        decision = AdaptiveOrchestrator(baseline_store=store).decide(
            DailyInputs(today=TODAY, wellness=records)
        )

        assert decision.baseline.hrv.mean_30d == pytest.approx(50.0)
        assert decision.baseline.hrv.std_dev_30d == pytest.approx(5.0)
        assert store.get_baseline() == decision.baseline

    def test_illness_forces_rest(self, store, ride_yesterday):
        sick = {"hrv": 33.0, "resting_hr": 63.0, "sleep_hours": 5.5}
        inputs = DailyInputs(
            today=TODAY,
            wellness=[record(0, **sick), record(1, **sick), record(2)],
            activities=ride_yesterday,
        )

        decision = AdaptiveOrchestrator(baseline_store=store).decide(inputs)

        assert decision.illness.probability == IllnessProbability.HIGH
        assert decision.effective_modifier == 0.0

    def test_no_data_at_all(self):
        """Missing inputs degrade to neutral or unknown outputs."""
        decision = AdaptiveOrchestrator(baseline_store=BaselineStore()).decide(DailyInputs(today=TODAY))

        assert decision.baseline is None
        assert not decision.hrv.available
        assert decision.intensity.confidence == Confidence.LOW
        assert decision.recovery.category == "unknown"
        assert decision.illness.probability == IllnessProbability.NONE
        assert decision.training_gap.interpretation == "unknown"
        assert decision.training_gap.intensity_modifier == pytest.approx(0.72)
        assert decision.phase.phase_name == "Build"
        assert decision.phase.weeks_out is None
        assert decision.load_advice is None
        assert decision.effective_modifier == pytest.approx(0.72)

    def test_low_recovery_average_limits_load(self, store, fitness, goal, ride_yesterday):
        records = [record(i, recovery_score=30) for i in range(3)]
        decision = AdaptiveOrchestrator(baseline_store=store).decide(
            DailyInputs(today=TODAY, wellness=records, fitness=fitness, goal=goal, activities=ride_yesterday)
        )

        assert decision.recovery.category == "red"
        assert decision.load_advice.ramp_rate_advice == RampRateAdvice.RECOVER

    def test_enhancements_override_rules(self, store, fitness, goal, ride_yesterday):
        enhancer = ScriptedEnhancer({
            "recovery": {"status": "Yellow (Recovering)", "category": "yellow", "reasoning": ["Poor sleep"]},
            "phase": {"phase_name": "Specialty", "focus": "Race-specific climbing"},
        })
        inputs = DailyInputs(
            today=TODAY,
            wellness=[record(0, recovery_score=80)],
            fitness=fitness,
            goal=goal,
            activities=ride_yesterday,
        )

        decision = AdaptiveOrchestrator(baseline_store=store, enhancer=enhancer).decide(inputs)

        assert decision.recovery.category == "yellow"
        assert decision.recovery.score == 80
        assert decision.recovery.source == DecisionSource.ENHANCED
        assert decision.phase.phase_name == "Specialty"
        assert decision.phase.weeks_out == 12
        assert decision.training_gap.source == DecisionSource.RULE
        assert decision.enhanced == ["recovery", "phase"]

    def test_failing_enhancer_falls_back(self, store, goal):
        enhancer = ScriptedEnhancer({
            "recovery": RuntimeError("boom"),
            "phase": {"phase_name": ""},
        })
        decision = AdaptiveOrchestrator(baseline_store=store, enhancer=enhancer).decide(
            DailyInputs(today=TODAY, wellness=[record(0, recovery_score=80)], goal=goal)
        )

        assert decision.recovery.category == "green"
        assert decision.phase.phase_name == "Build"
        assert decision.enhanced == []

    def test_no_goal_keeps_weeks_out_unset(self, store, fitness, ride_yesterday):
        """The phase prompt and load advice see no invented goal distance."""
        contexts = {}

        class RecordingEnhancer(ScriptedEnhancer):
            def assess(self, decision, context):
                contexts[decision] = context
                return super().assess(decision, context)

        decision = AdaptiveOrchestrator(baseline_store=store, enhancer=RecordingEnhancer({})).decide(
            DailyInputs(today=TODAY, wellness=[record(0)], fitness=fitness, activities=ride_yesterday)
        )

        assert decision.phase.weeks_out is None
        assert decision.phase.phase_name == "Build"
        assert contexts["phase"]["weeks_out"] is None
        assert contexts["phase"]["goal"] is None
        assert decision.load_advice.weeks_to_goal is None
        assert decision.load_advice.ramp_rate_advice == RampRateAdvice.BUILD

    def test_to_dict_is_json_serializable(self, store, fitness, goal, ride_yesterday):
        decision = AdaptiveOrchestrator(baseline_store=store).decide(
            DailyInputs(today=TODAY, wellness=[record(0)], fitness=fitness, goal=goal, activities=ride_yesterday)
        )

        data = json.loads(json.dumps(decision.to_dict()))

        assert data["date"] == "2024-06-30"
        assert data["recovery"]["source"] == "rule"
        assert data["load_advice"]["ramp_rate_advice"] == "build"


class TestDailyInputs:
    """Tests for collecting inputs from data sources."""

    def test_from_sources(self):
        source = JsonFileSource({
            "wellness": [
                {"date": "2024-06-28", "hrv": 47},
                {"date": "2024-06-30", "hrv": 52},
                {"date": "2024-05-01", "hrv": 60},
            ],
            "fitness": {"ctl": 50, "atl": 60},
            "goal": {"date": "2024-09-14", "name": "Gran Fondo"},
            "activities": [{"date": "2024-06-29", "type": "Ride"}],
        })

        inputs = DailyInputs.from_sources(
            TODAY, wellness=source, fitness=source, goals=source, activities=source
        )

        assert [r.date for r in inputs.wellness] == [date(2024, 6, 30), date(2024, 6, 28)]
        assert inputs.fitness.tsb == -10
        assert inputs.goal.name == "Gran Fondo"
        assert len(inputs.activities) == 1

    def test_wellness_only(self):
        source = JsonFileSource({"wellness": [{"date": "2024-06-30"}]})
        inputs = DailyInputs.from_sources(TODAY, wellness=source)

        assert inputs.fitness is None
        assert inputs.goal is None
        assert inputs.activities == []


class TestBuildOrchestrator:
    """Tests for wiring from settings."""

    def test_rules_only_without_api_key(self, tmp_path):
        settings = Settings(baseline_db_path=tmp_path / "b.db", openai_api_key="")
        orchestrator = build_orchestrator(settings)

        assert orchestrator.enhancer is None
        assert isinstance(orchestrator.baseline_store.repository, SqliteBaselineRepository)
        assert orchestrator.baseline_store.max_age is None

    def test_enhancer_with_api_key(self, tmp_path):
        settings = Settings(
            baseline_db_path=tmp_path / "b.db",
            openai_api_key="sk-test",
            baseline_max_age_hours=36,
        )
        orchestrator = build_orchestrator(settings)

        assert isinstance(orchestrator.enhancer, LLMEnhancer)
        assert orchestrator.baseline_store.max_age == timedelta(hours=36)

    def test_enhancement_disabled(self, tmp_path):
        settings = Settings(
            baseline_db_path=tmp_path / "b.db",
            openai_api_key="sk-test",
            enhancement_enabled=False,
        )
        assert build_orchestrator(settings).enhancer is None
