"""
Intensity modifier curve.

Maps baseline-relative z-scores to a training-intensity multiplier. The
curve falls more steeply below zero than it rises above it: training hard
while under-recovered costs more than training slightly easy while fresh.

    z:        -2     -1      0      1      2
    modifier: 0.70   0.82   0.94   1.00   1.05
"""

import math
from typing import Dict, List, Optional, Tuple

from ..models.decisions import Confidence, IntensityModifier


Z_CLAMP = 3.0
MIN_MODIFIER = 0.70
MAX_MODIFIER = 1.05
NEUTRAL_MODIFIER = 1.0

CURVE_POINTS: List[Tuple[float, float]] = [
    (-2.0, 0.70),
    (-1.0, 0.82),
    (0.0, 0.94),
    (1.0, 1.00),
    (2.0, 1.05),
]

HRV_WEIGHT = 0.6
RHR_WEIGHT = 0.4


def z_score_to_modifier(z_score: float) -> float:
    """
    Piecewise-linear interpolation of the intensity curve.

    Args:
        z_score: Direction-adjusted z-score (higher = better recovered)

    Returns:
        Modifier in [0.70, 1.05]; non-finite input is treated as 0
    """
    if z_score is None or not math.isfinite(z_score):
        z_score = 0.0
    z = max(-Z_CLAMP, min(Z_CLAMP, z_score))

    if z <= CURVE_POINTS[0][0]:
        return CURVE_POINTS[0][1]
    if z >= CURVE_POINTS[-1][0]:
        return CURVE_POINTS[-1][1]

    for (z0, m0), (z1, m1) in zip(CURVE_POINTS, CURVE_POINTS[1:]):
        if z == z0:
            return m0
        if z0 < z < z1:
            return round(m0 + (z - z0) / (z1 - z0) * (m1 - m0), 4)

    return CURVE_POINTS[-1][1]


def _describe(modifier: float) -> str:
    if modifier >= 1.0:
        return "Well recovered - full or slightly increased intensity"
    if modifier >= 0.94:
        return "Normal recovery - train as planned"
    if modifier >= 0.82:
        return "Mild under-recovery - reduce intensity slightly"
    return "Significant under-recovery - substantially reduce intensity"


def combine(hrv_z: Optional[float], rhr_z: Optional[float]) -> IntensityModifier:
    """
    Combine HRV and RHR z-scores into one intensity modifier.

    Args:
        hrv_z: Raw HRV z-score, or None when unavailable
        rhr_z: Raw RHR z-score, or None; negated before lookup since lower RHR is better

    Returns:
        IntensityModifier rounded to 2 decimals
    """
    breakdown: Dict[str, Dict[str, float]] = {}

    if hrv_z is not None:
        breakdown["hrv"] = {"z_score": round(hrv_z, 2), "modifier": z_score_to_modifier(hrv_z)}
    if rhr_z is not None:
        breakdown["rhr"] = {"z_score": round(rhr_z, 2), "modifier": z_score_to_modifier(-rhr_z)}

    if "hrv" in breakdown and "rhr" in breakdown:
        modifier = HRV_WEIGHT * breakdown["hrv"]["modifier"] + RHR_WEIGHT * breakdown["rhr"]["modifier"]
        confidence = Confidence.HIGH
    elif breakdown:
        modifier = next(iter(breakdown.values()))["modifier"]
        confidence = Confidence.MEDIUM
    else:
        return IntensityModifier(
            modifier=NEUTRAL_MODIFIER,
            confidence=Confidence.LOW,
            description="No baseline data - using neutral intensity",
        )

    modifier = round(max(MIN_MODIFIER, min(MAX_MODIFIER, modifier)), 2)
    return IntensityModifier(
        modifier=modifier,
        confidence=confidence,
        breakdown=breakdown,
        description=_describe(modifier),
    )
