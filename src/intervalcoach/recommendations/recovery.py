"""Rule-based recovery status (Green / Yellow / Red)."""

from typing import Optional

from ..models.decisions import IntensityModifier, RecoveryAssessment


GREEN_MIN_SCORE = 67
YELLOW_MIN_SCORE = 34

# Used only when no recovery score was recorded
GREEN_MIN_MODIFIER = 0.94
YELLOW_MIN_MODIFIER = 0.82

STATUS_LABELS = {
    "green": "Green (Primed)",
    "yellow": "Yellow (Recovering)",
    "red": "Red (Strained)",
    "unknown": "Unknown",
}


def recovery_status(
    recovery_score: Optional[float],
    intensity: Optional[IntensityModifier] = None,
) -> RecoveryAssessment:
    """
    Classify today's recovery.

    The wearable recovery score decides when present. Otherwise the
    baseline-relative intensity modifier stands in, provided it was built
    from at least one metric.

    Args:
        recovery_score: Recovery score 0-100, or None
        intensity: Combined HRV/RHR intensity modifier

    Returns:
        RecoveryAssessment from the deterministic rule
    """
    if recovery_score is not None:
        if recovery_score >= GREEN_MIN_SCORE:
            category = "green"
        elif recovery_score >= YELLOW_MIN_SCORE:
            category = "yellow"
        else:
            category = "red"
        return RecoveryAssessment(
            status=STATUS_LABELS[category],
            category=category,
            score=recovery_score,
            reasoning=[f"Recovery score {recovery_score:.0f}%"],
        )

    if intensity is not None and intensity.breakdown:
        if intensity.modifier >= GREEN_MIN_MODIFIER:
            category = "green"
        elif intensity.modifier >= YELLOW_MIN_MODIFIER:
            category = "yellow"
        else:
            category = "red"
        return RecoveryAssessment(
            status=STATUS_LABELS[category],
            category=category,
            reasoning=[
                f"No recovery score; HRV/RHR vs baseline gives modifier {intensity.modifier:.2f}"
            ],
        )

    return RecoveryAssessment(
        status=STATUS_LABELS["unknown"],
        category="unknown",
        reasoning=["No recovery score or baseline comparison available"],
    )
