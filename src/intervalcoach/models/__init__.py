"""Value objects exchanged by the decision engine."""

from .wellness import WellnessRecord, ActivitySummary, FitnessSnapshot, GoalEvent
from .baseline import Baseline, MetricBaseline
from .decisions import (
    Confidence,
    DayScore,
    DecisionSource,
    DeviationResult,
    GapInterpretation,
    IllnessAssessment,
    IllnessProbability,
    IntensityModifier,
    LoadAdvice,
    Phase,
    RampRateAdvice,
    RecoveryAssessment,
    TrainingGapResult,
)

__all__ = [
    "WellnessRecord",
    "ActivitySummary",
    "FitnessSnapshot",
    "GoalEvent",
    "Baseline",
    "MetricBaseline",
    "Confidence",
    "DayScore",
    "DecisionSource",
    "DeviationResult",
    "GapInterpretation",
    "IllnessAssessment",
    "IllnessProbability",
    "IntensityModifier",
    "LoadAdvice",
    "Phase",
    "RampRateAdvice",
    "RecoveryAssessment",
    "TrainingGapResult",
]
