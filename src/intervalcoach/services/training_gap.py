"""
Training gap analysis.

Interprets unplanned breaks in cycling/running. Recovery status decides
whether the athlete is returning fresh, returning from illness, or should
ease back in. Gaps of a week or more stack an extra caution factor.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from ..config import get_settings
from ..llm.enhancer import Enhancer, run_with_fallback
from ..models.decisions import DecisionSource, GapInterpretation, TrainingGapResult
from ..models.enhancement import TrainingGapEnhancement
from ..models.wellness import ActivitySummary


logger = logging.getLogger(__name__)


NORMAL_MAX_GAP_DAYS = 3
LONG_GAP_DAYS = 7
LONG_GAP_FACTOR = 0.9

FRESH_MODIFIER = 1.0
ILLNESS_RETURN_MODIFIER = 0.7
UNKNOWN_MODIFIER = 0.8

GREEN_MARKERS = ("green", "primed")
RED_MARKERS = ("red", "strained")


def days_since_last_activity(
    activities: Iterable[ActivitySummary],
    today: date,
) -> Optional[int]:
    """
    Whole days since the newest qualifying (cycling or running) activity.

    Returns:
        Days since the last session, or None when there is none
    """
    dates = [a.date for a in activities if a.is_qualifying and a.date <= today]
    if not dates:
        return None
    return (today - max(dates)).days


class TrainingGapAnalyzer:
    """Classifies training gaps and derives an intensity modifier."""

    def __init__(
        self,
        enhancer: Optional[Enhancer] = None,
        yellow_modifier: Optional[float] = None,
    ) -> None:
        self.enhancer = enhancer
        self.yellow_modifier = (
            yellow_modifier if yellow_modifier is not None
            else get_settings().yellow_recovery_modifier
        )

    def analyze(
        self,
        gap_days: Optional[int],
        recovery_status: Optional[str],
        has_wellness: bool = True,
    ) -> TrainingGapResult:
        """
        Interpret a training gap.

        Args:
            gap_days: Days since the last qualifying activity (None = no activity found)
            recovery_status: Recovery label, e.g. "Green (Primed)"
            has_wellness: Whether any wellness data exists

        Returns:
            TrainingGapResult from the enhancer when available, otherwise the rule
        """
        if gap_days is not None and gap_days <= NORMAL_MAX_GAP_DAYS:
            return TrainingGapResult(
                gap_days=gap_days,
                interpretation=GapInterpretation.NORMAL.value,
                intensity_modifier=FRESH_MODIFIER,
                recommendation="Normal training rhythm - no adjustment needed",
                reasoning=[f"{gap_days} days since last session is within normal rest"],
            )

        context = {
            "gap_days": gap_days,
            "recovery_status": recovery_status,
            "has_wellness_data": has_wellness,
        }

        def apply(enhanced: TrainingGapEnhancement) -> TrainingGapResult:
            return TrainingGapResult(
                gap_days=gap_days,
                interpretation=enhanced.interpretation,
                intensity_modifier=round(enhanced.intensity_modifier, 2),
                recommendation=enhanced.recommendation,
                reasoning=enhanced.reasoning,
                source=DecisionSource.ENHANCED,
            )

        result, _ = run_with_fallback(
            "training_gap",
            self.enhancer,
            context,
            TrainingGapEnhancement,
            fallback=lambda: self.fallback(gap_days, recovery_status, has_wellness),
            apply=apply,
        )
        return result

    def fallback(
        self,
        gap_days: Optional[int],
        recovery_status: Optional[str],
        has_wellness: bool = True,
    ) -> TrainingGapResult:
        """Deterministic gap interpretation."""
        gap_text = f"{gap_days} days" if gap_days is not None else "No recent sessions"
        status = (recovery_status or "").lower()
        reasoning = [f"{gap_text} without cycling or running"]

        if not has_wellness:
            interpretation = GapInterpretation.UNKNOWN
            modifier = UNKNOWN_MODIFIER
            recommendation = "No wellness data - return conservatively"
            reasoning.append("No wellness data to explain the break")
        elif any(marker in status for marker in GREEN_MARKERS):
            interpretation = GapInterpretation.FRESH
            modifier = FRESH_MODIFIER
            recommendation = "Recovery is good - treat the break as rest and train normally"
            reasoning.append(f"Recovery status {recovery_status} indicates freshness")
        elif any(marker in status for marker in RED_MARKERS):
            interpretation = GapInterpretation.RETURNING_FROM_ILLNESS
            modifier = ILLNESS_RETURN_MODIFIER
            recommendation = "Likely returning from illness or strain - keep it easy"
            reasoning.append(f"Recovery status {recovery_status} suggests illness or strain")
        else:
            interpretation = GapInterpretation.CAUTIOUS_RETURN
            modifier = self.yellow_modifier
            recommendation = "Ease back in with moderate intensity"
            reasoning.append(f"Recovery status {recovery_status or 'unknown'} is inconclusive")

        if gap_days is None or gap_days >= LONG_GAP_DAYS:
            modifier *= LONG_GAP_FACTOR
            reasoning.append(
                f"Break of a week or more: extra {round((1 - LONG_GAP_FACTOR) * 100)}% reduction"
            )

        return TrainingGapResult(
            gap_days=gap_days,
            interpretation=interpretation.value,
            intensity_modifier=round(modifier, 2),
            recommendation=recommendation,
            reasoning=reasoning,
        )
