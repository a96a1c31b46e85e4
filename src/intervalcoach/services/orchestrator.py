"""
Adaptive decision orchestrator.

Runs the daily decision cycle: baseline, HRV/RHR deviations, intensity
modifier, recovery status, illness screening, training gap, periodization
phase and load advice. The combined bundle is what the workout prompt and
email layers consume.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import List, Optional

from ..analysis.deviation import DeviationAnalyzer
from ..analysis.phase import PhaseCalculator
from ..baselines import BaselineStore
from ..config import Settings, get_settings
from ..db.baseline_repository import SqliteBaselineRepository
from ..integrations.base import ActivitySource, FitnessSource, GoalSource, WellnessSource
from ..llm.enhancer import Enhancer, LLMEnhancer, run_with_fallback
from ..llm.providers import LLMClient
from ..metrics.stats import average, numeric_values
from ..models.baseline import Baseline
from ..models.decisions import (
    DecisionSource,
    DeviationResult,
    IllnessAssessment,
    IllnessProbability,
    IntensityModifier,
    LoadAdvice,
    Phase,
    RecoveryAssessment,
    TrainingGapResult,
)
from ..models.enhancement import PhaseEnhancement, RecoveryEnhancement
from ..models.wellness import ActivitySummary, FitnessSnapshot, GoalEvent, WellnessRecord
from ..recommendations.intensity import combine
from ..recommendations.recovery import recovery_status
from .illness import IllnessPatternDetector
from .training_gap import TrainingGapAnalyzer, days_since_last_activity
from .training_load import TrainingLoadAdvisor


logger = logging.getLogger(__name__)


# Upper bound on the effective modifier per illness tier
ILLNESS_MODIFIER_CAPS = {
    IllnessProbability.HIGH: 0.0,
    IllnessProbability.LIKELY: 0.5,
    IllnessProbability.POSSIBLE: 0.6,
}

RECOVERY_AVG_DAYS = 7
HISTORY_DAYS = 30


@dataclass
class DailyInputs:
    """Everything the engine needs for one day."""
    today: date
    wellness: List[WellnessRecord] = field(default_factory=list)  # newest first
    fitness: Optional[FitnessSnapshot] = None
    goal: Optional[GoalEvent] = None
    activities: List[ActivitySummary] = field(default_factory=list)

    @classmethod
    def from_sources(
        cls,
        today: date,
        wellness: WellnessSource,
        fitness: Optional[FitnessSource] = None,
        goals: Optional[GoalSource] = None,
        activities: Optional[ActivitySource] = None,
        days: int = HISTORY_DAYS,
    ) -> "DailyInputs":
        """Collect one day's inputs from the external data sources."""
        return cls(
            today=today,
            wellness=wellness.fetch_wellness(today, days),
            fitness=fitness.fetch_fitness(today) if fitness else None,
            goal=goals.next_goal(today) if goals else None,
            activities=activities.fetch_activities(today, days) if activities else [],
        )


@dataclass
class DailyDecision:
    """Per-day decision bundle."""
    date: date
    baseline: Optional[Baseline]
    hrv: DeviationResult
    rhr: DeviationResult
    intensity: IntensityModifier
    recovery: RecoveryAssessment
    illness: IllnessAssessment
    training_gap: TrainingGapResult
    phase: Phase
    load_advice: Optional[LoadAdvice]
    effective_modifier: float

    @property
    def enhanced(self) -> List[str]:
        """Names of decisions that came from the enhancer."""
        sources = {
            "recovery": self.recovery.source,
            "training_gap": self.training_gap.source,
            "phase": self.phase.source,
        }
        return [name for name, source in sources.items() if source == DecisionSource.ENHANCED]

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "baseline": self.baseline.to_dict() if self.baseline else None,
            "hrv": self.hrv.to_dict(),
            "rhr": self.rhr.to_dict(),
            "intensity": self.intensity.to_dict(),
            "recovery": self.recovery.to_dict(),
            "illness": self.illness.to_dict(),
            "training_gap": self.training_gap.to_dict(),
            "phase": self.phase.to_dict(),
            "load_advice": self.load_advice.to_dict() if self.load_advice else None,
            "effective_modifier": self.effective_modifier,
            "enhanced": self.enhanced,
        }


def effective_modifier(
    intensity: IntensityModifier,
    gap: TrainingGapResult,
    illness: IllnessAssessment,
) -> float:
    """Intensity x gap modifier, capped by the illness tier."""
    value = intensity.modifier * gap.intensity_modifier
    cap = ILLNESS_MODIFIER_CAPS.get(illness.probability)
    if cap is not None:
        value = min(value, cap)
    return round(value, 2)


class AdaptiveOrchestrator:
    """
    Composes the decision components into one daily bundle.

    Each decision with an enhancement path (recovery, training gap, phase)
    starts from its deterministic rule; the enhancer can only replace that
    output with a well-formed alternative.
    """

    def __init__(
        self,
        baseline_store: Optional[BaselineStore] = None,
        enhancer: Optional[Enhancer] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.baseline_store = baseline_store or BaselineStore()
        self.enhancer = enhancer
        self.deviations = DeviationAnalyzer()
        self.illness_detector = IllnessPatternDetector(
            days_to_check=self.settings.illness_days_to_check,
            min_consecutive_days=self.settings.illness_min_consecutive_days,
        )
        self.gap_analyzer = TrainingGapAnalyzer(
            enhancer=enhancer,
            yellow_modifier=self.settings.yellow_recovery_modifier,
        )
        self.load_advisor = TrainingLoadAdvisor(
            target_peak_ctl=self.settings.target_peak_ctl,
            max_target_ctl=self.settings.max_target_ctl,
        )

    def decide(self, inputs: DailyInputs) -> DailyDecision:
        """
        Run the full decision cycle for one day.

        Never raises for missing data: each component degrades to its
        neutral or 'unknown' output.
        """
        records = inputs.wellness
        latest = records[0] if records else None

        baseline = self.baseline_store.refresh(records)

        hrv = self.deviations.deviation(
            latest.hrv if latest else None, baseline.hrv if baseline else None, "hrv"
        )
        rhr = self.deviations.deviation(
            latest.resting_hr if latest else None, baseline.rhr if baseline else None, "rhr"
        )
        intensity = combine(
            hrv.z_score if hrv.available else None,
            rhr.z_score if rhr.available else None,
        )

        recovery = self._recovery(latest, intensity, hrv, rhr)
        illness = self.illness_detector.check(records, baseline)

        gap = self.gap_analyzer.analyze(
            days_since_last_activity(inputs.activities, inputs.today),
            recovery.status,
            has_wellness=bool(records),
        )

        phase = self._phase(inputs)
        load_advice = self._load_advice(inputs, phase, records)

        decision = DailyDecision(
            date=inputs.today,
            baseline=baseline,
            hrv=hrv,
            rhr=rhr,
            intensity=intensity,
            recovery=recovery,
            illness=illness,
            training_gap=gap,
            phase=phase,
            load_advice=load_advice,
            effective_modifier=effective_modifier(intensity, gap, illness),
        )

        logger.info(
            f"Decision for {inputs.today.isoformat()}: recovery={recovery.category}, "
            f"intensity={intensity.modifier:.2f} ({intensity.confidence.value}), "
            f"illness={illness.probability.value}, gap={gap.interpretation}, "
            f"phase={phase.phase_name}, effective={decision.effective_modifier:.2f}"
        )
        return decision

    def _recovery(
        self,
        latest: Optional[WellnessRecord],
        intensity: IntensityModifier,
        hrv: DeviationResult,
        rhr: DeviationResult,
    ) -> RecoveryAssessment:
        score = latest.recovery_score if latest else None
        context = {
            "recovery_score": score,
            "sleep_hours": latest.sleep_hours if latest else None,
            "hrv": hrv.to_dict(),
            "rhr": rhr.to_dict(),
            "intensity_modifier": intensity.modifier,
        }

        def apply(enhanced: RecoveryEnhancement) -> RecoveryAssessment:
            return RecoveryAssessment(
                status=enhanced.status,
                category=enhanced.category,
                score=score,
                reasoning=enhanced.reasoning,
                source=DecisionSource.ENHANCED,
            )

        result, _ = run_with_fallback(
            "recovery",
            self.enhancer,
            context,
            RecoveryEnhancement,
            fallback=lambda: recovery_status(score, intensity),
            apply=apply,
        )
        return result

    def _phase(self, inputs: DailyInputs) -> Phase:
        goal_date = inputs.goal.date if inputs.goal else None
        rule = PhaseCalculator.for_goal(goal_date, inputs.today)
        context = {
            "today": inputs.today,
            "goal": inputs.goal.to_dict() if inputs.goal else None,
            "weeks_out": rule.weeks_out,
            "rule_phase": rule.phase_name,
            "fitness": inputs.fitness.to_dict() if inputs.fitness else None,
        }

        def apply(enhanced: PhaseEnhancement) -> Phase:
            return Phase(
                phase_name=enhanced.phase_name,
                weeks_out=rule.weeks_out,
                focus=enhanced.focus,
                source=DecisionSource.ENHANCED,
            )

        result, _ = run_with_fallback(
            "phase", self.enhancer, context, PhaseEnhancement, fallback=lambda: rule, apply=apply
        )
        return result

    def _load_advice(
        self,
        inputs: DailyInputs,
        phase: Phase,
        records: List[WellnessRecord],
    ) -> Optional[LoadAdvice]:
        if inputs.fitness is None:
            logger.info("No fitness data; skipping load advice")
            return None

        recovery_avg = average(
            numeric_values(r.recovery_score for r in records[:RECOVERY_AVG_DAYS])
        )
        return self.load_advisor.advise(
            ctl=inputs.fitness.ctl,
            atl=inputs.fitness.atl,
            tsb=inputs.fitness.tsb,
            weeks_out=phase.weeks_out,
            phase=phase,
            recovery_avg=recovery_avg,
        )


def build_orchestrator(settings: Optional[Settings] = None) -> AdaptiveOrchestrator:
    """
    Wire the orchestrator from settings.

    Uses SQLite baseline persistence and enables the LLM enhancer only when
    enhancement is switched on and an API key is configured.
    """
    settings = settings or get_settings()
    max_age = (
        timedelta(hours=settings.baseline_max_age_hours)
        if settings.baseline_max_age_hours is not None
        else None
    )
    store = BaselineStore(
        repository=SqliteBaselineRepository(settings.baseline_db_path, settings.athlete_id),
        max_age=max_age,
    )

    enhancer = None
    if settings.enhancement_enabled and settings.openai_api_key:
        enhancer = LLMEnhancer(client=LLMClient(api_key=settings.openai_api_key))
    elif settings.enhancement_enabled:
        logger.info("Enhancement enabled but no OpenAI API key configured; using rules only")

    return AdaptiveOrchestrator(baseline_store=store, enhancer=enhancer, settings=settings)
