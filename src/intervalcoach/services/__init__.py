"""Decision services."""

from .illness import IllnessPatternDetector, score_day
from .training_gap import TrainingGapAnalyzer, days_since_last_activity
from .training_load import TrainingLoadAdvisor
from .orchestrator import (
    AdaptiveOrchestrator,
    DailyDecision,
    DailyInputs,
    build_orchestrator,
    effective_modifier,
)

__all__ = [
    "IllnessPatternDetector",
    "score_day",
    "TrainingGapAnalyzer",
    "days_since_last_activity",
    "TrainingLoadAdvisor",
    "AdaptiveOrchestrator",
    "DailyDecision",
    "DailyInputs",
    "build_orchestrator",
    "effective_modifier",
]
