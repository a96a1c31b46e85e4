"""Decision outputs handed to the prompt and email layers."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class Confidence(str, Enum):
    """Confidence in the intensity modifier."""
    LOW = "low"        # No baseline-relative data
    MEDIUM = "medium"  # One metric available
    HIGH = "high"      # HRV and RHR available


class IllnessProbability(str, Enum):
    """Illness probability tiers, lowest first."""
    NONE = "none"
    POSSIBLE = "possible"
    LIKELY = "likely"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return list(IllnessProbability).index(self)


class GapInterpretation(str, Enum):
    """Rule-based interpretations of a break in training."""
    NORMAL = "normal"
    FRESH = "fresh"
    RETURNING_FROM_ILLNESS = "returning_from_illness"
    CAUTIOUS_RETURN = "cautious_return"
    UNKNOWN = "unknown"


class RampRateAdvice(str, Enum):
    """Load progression classification."""
    RECOVER = "recover"
    MAINTAIN = "maintain"
    BUILD = "build"
    AGGRESSIVE = "aggressive"
    UNSAFE = "unsafe"


class DecisionSource(str, Enum):
    """Where a decision came from."""
    RULE = "rule"
    ENHANCED = "enhanced"


@dataclass
class DeviationResult:
    """Today's reading compared to the personal baseline."""
    metric: str
    available: bool
    current: Optional[float] = None
    baseline: Optional[float] = None
    deviation: Optional[float] = None
    deviation_percent: Optional[float] = None
    z_score: Optional[float] = None
    status: str = "unavailable"
    interpretation: str = ""

    def to_dict(self) -> dict:
        return {
            "metric": self.metric,
            "available": self.available,
            "current": self.current,
            "baseline": self.baseline,
            "deviation": self.deviation,
            "deviation_percent": self.deviation_percent,
            "z_score": self.z_score,
            "status": self.status,
            "interpretation": self.interpretation,
        }


@dataclass
class IntensityModifier:
    """Continuous training-intensity multiplier."""
    modifier: float
    confidence: Confidence
    breakdown: Dict[str, Dict[str, float]] = field(default_factory=dict)
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "modifier": self.modifier,
            "confidence": self.confidence.value,
            "breakdown": self.breakdown,
            "description": self.description,
        }


@dataclass
class RecoveryAssessment:
    """Recovery category for today."""
    status: str  # e.g. "Green (Primed)"
    category: str  # green, yellow, red, unknown
    score: Optional[float] = None
    reasoning: List[str] = field(default_factory=list)
    source: DecisionSource = DecisionSource.RULE

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "category": self.category,
            "score": self.score,
            "reasoning": self.reasoning,
            "source": self.source.value,
        }


@dataclass
class DayScore:
    """Illness concern score for one day."""
    date: date
    markers: List[str] = field(default_factory=list)
    score: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def concerning(self) -> bool:
        return self.score >= 3

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "markers": self.markers,
            "score": self.score,
            "details": self.details,
        }


@dataclass
class IllnessAssessment:
    """Multi-day illness pattern assessment."""
    detected: bool
    probability: IllnessProbability
    consecutive_days: int = 0
    symptoms: List[str] = field(default_factory=list)
    daily_analysis: List[DayScore] = field(default_factory=list)
    recommendation: str = ""
    training_guidance: str = ""

    def to_dict(self) -> dict:
        return {
            "detected": self.detected,
            "probability": self.probability.value,
            "consecutive_days": self.consecutive_days,
            "symptoms": self.symptoms,
            "daily_analysis": [d.to_dict() for d in self.daily_analysis],
            "recommendation": self.recommendation,
            "training_guidance": self.training_guidance,
        }


@dataclass
class TrainingGapResult:
    """Interpretation of days without qualifying training."""
    gap_days: Optional[int]
    interpretation: str  # GapInterpretation value, or free text from enhancement
    intensity_modifier: float
    recommendation: str
    reasoning: List[str] = field(default_factory=list)
    source: DecisionSource = DecisionSource.RULE

    def to_dict(self) -> dict:
        return {
            "gap_days": self.gap_days,
            "interpretation": self.interpretation,
            "intensity_modifier": self.intensity_modifier,
            "recommendation": self.recommendation,
            "reasoning": self.reasoning,
            "source": self.source.value,
        }


@dataclass
class Phase:
    """Periodization phase keyed off weeks to the goal."""
    phase_name: str
    weeks_out: Optional[float]  # None without a goal
    focus: str
    source: DecisionSource = DecisionSource.RULE

    def to_dict(self) -> dict:
        return {
            "phase_name": self.phase_name,
            "weeks_out": self.weeks_out,
            "focus": self.focus,
            "source": self.source.value,
        }


@dataclass
class LoadAdvice:
    """Training load targets for the coming week."""
    current_ctl: float
    target_ctl: float
    weeks_to_goal: Optional[float]
    recommended_weekly_tss: int
    tss_range: Dict[str, int]
    daily_tss_range: Dict[str, int]
    ramp_rate_advice: RampRateAdvice
    required_ramp_rate: float
    load_advice: str
    warning: Optional[str] = None
    ctl_trajectory: List[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "current_ctl": self.current_ctl,
            "target_ctl": self.target_ctl,
            "weeks_to_goal": self.weeks_to_goal,
            "recommended_weekly_tss": self.recommended_weekly_tss,
            "tss_range": self.tss_range,
            "daily_tss_range": self.daily_tss_range,
            "ramp_rate_advice": self.ramp_rate_advice.value,
            "required_ramp_rate": self.required_ramp_rate,
            "load_advice": self.load_advice,
            "warning": self.warning,
            "ctl_trajectory": self.ctl_trajectory,
        }
