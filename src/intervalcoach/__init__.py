"""IntervalCoach - personal baselines and adaptive training decisions."""

from .baselines import BaselineStore
from .services.orchestrator import AdaptiveOrchestrator, DailyDecision, DailyInputs, build_orchestrator

__version__ = "0.1.0"

__all__ = [
    "BaselineStore",
    "AdaptiveOrchestrator",
    "DailyDecision",
    "DailyInputs",
    "build_orchestrator",
]
