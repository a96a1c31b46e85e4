"""
Illness pattern detection.

Scores each of the most recent days against baseline-relative thresholds
and looks for a sustained run of concerning days. A single rough night is
an advisory; two or more concerning days in a row point to illness.
"""

import logging
from typing import List, Optional, Tuple

from ..metrics.stats import average, numeric_values, std_dev
from ..models.baseline import Baseline, MetricBaseline
from ..models.decisions import DayScore, IllnessAssessment, IllnessProbability
from ..models.wellness import WellnessRecord


logger = logging.getLogger(__name__)


DEFAULT_DAYS_TO_CHECK = 3
DEFAULT_MIN_CONSECUTIVE_DAYS = 2

CONCERNING_DAY_SCORE = 3
HIGH_PATTERN_SCORE = 8
LIKELY_PATTERN_SCORE = 5
POSSIBLE_DAY_SCORE = 4

# (threshold, points), checked in order
RHR_Z_LADDER = [(1.5, 3), (1.0, 2), (0.5, 1)]  # z >= threshold
HRV_Z_LADDER = [(-1.5, 3), (-1.0, 2), (-0.5, 1)]  # z <= threshold
SLEEP_HOURS_LADDER = [(5.0, 3), (6.0, 2), (6.5, 1)]  # hours < threshold
SKIN_TEMP_LADDER = [(2.0, 3), (1.0, 2), (0.5, 1)]  # z >= threshold; raw delta in C without a norm
RESPIRATORY_LADDER = [(18.0, 3), (16.0, 2), (14.0, 1)]  # breaths/min >= threshold
RECOVERY_LADDER = [(34.0, 2), (50.0, 1)]  # score < threshold

# Skin-temperature norm from the records being screened
SKIN_TEMP_WINDOW_DAYS = 30
SKIN_TEMP_MIN_SAMPLES = 7
SKIN_TEMP_MIN_STD_C = 0.1


def _ladder_points(value: float, ladder: List[Tuple[float, int]], compare) -> int:
    for threshold, points in ladder:
        if compare(value, threshold):
            return points
    return 0


def _z_score(value: Optional[float], metric: Optional[MetricBaseline]) -> Optional[float]:
    if value is None or metric is None or metric.mean_30d is None:
        return None
    spread = metric.effective_std_dev
    if not spread:
        return None
    return (value - metric.mean_30d) / spread


def skin_temp_norm(records: List[WellnessRecord]) -> Optional[Tuple[float, float]]:
    """
    Mean and spread of skin-temperature deltas across the screened records.

    Returns:
        (mean, std) with the std floored at SKIN_TEMP_MIN_STD_C, or None
        with fewer than SKIN_TEMP_MIN_SAMPLES readings
    """
    values = numeric_values(r.skin_temp_delta_c for r in records[:SKIN_TEMP_WINDOW_DAYS])
    if len(values) < SKIN_TEMP_MIN_SAMPLES:
        return None
    return average(values), max(std_dev(values), SKIN_TEMP_MIN_STD_C)


def score_day(
    record: WellnessRecord,
    baseline: Optional[Baseline],
    skin_temp: Optional[Tuple[float, float]] = None,
) -> DayScore:
    """
    Score one day's concern level across all available signals.

    Args:
        record: The day's wellness record
        baseline: Current baseline; HRV/RHR are skipped without one
        skin_temp: (mean, std) of recent skin-temperature deltas; without
            it the raw delta is scored

    Returns:
        DayScore with markers and per-signal details
    """
    day = DayScore(date=record.date)

    rhr_z = _z_score(record.resting_hr, baseline.rhr if baseline else None)
    if rhr_z is not None:
        points = _ladder_points(rhr_z, RHR_Z_LADDER, lambda v, t: v >= t)
        day.details["rhr"] = {"value": record.resting_hr, "z_score": round(rhr_z, 2), "points": points}
        if points:
            day.score += points
            day.markers.append("Elevated resting HR")

    hrv_z = _z_score(record.hrv, baseline.hrv if baseline else None)
    if hrv_z is not None:
        points = _ladder_points(hrv_z, HRV_Z_LADDER, lambda v, t: v <= t)
        day.details["hrv"] = {"value": record.hrv, "z_score": round(hrv_z, 2), "points": points}
        if points:
            day.score += points
            day.markers.append("Suppressed HRV")

    if record.sleep_hours is not None:
        points = _ladder_points(record.sleep_hours, SLEEP_HOURS_LADDER, lambda v, t: v < t)
        day.details["sleep"] = {"value": record.sleep_hours, "points": points}
        if points:
            day.score += points
            day.markers.append("Poor sleep")

    if record.skin_temp_delta_c is not None:
        details = {"value": record.skin_temp_delta_c}
        signal = record.skin_temp_delta_c
        if skin_temp is not None:
            mean, spread = skin_temp
            signal = (record.skin_temp_delta_c - mean) / spread
            details["z_score"] = round(signal, 2)
        points = _ladder_points(signal, SKIN_TEMP_LADDER, lambda v, t: v >= t)
        details["points"] = points
        day.details["skin_temp"] = details
        if points:
            day.score += points
            day.markers.append("Elevated skin temperature")

    if record.respiratory_rate is not None:
        points = _ladder_points(record.respiratory_rate, RESPIRATORY_LADDER, lambda v, t: v >= t)
        day.details["respiratory_rate"] = {"value": record.respiratory_rate, "points": points}
        if points:
            day.score += points
            day.markers.append("Elevated respiratory rate")

    if record.recovery_score is not None:
        points = _ladder_points(record.recovery_score, RECOVERY_LADDER, lambda v, t: v < t)
        day.details["recovery"] = {"value": record.recovery_score, "points": points}
        if points:
            day.score += points
            day.markers.append("Low recovery score")

    return day


def _unique(items: List[str]) -> List[str]:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


class IllnessPatternDetector:
    """Detects sustained multi-day illness patterns."""

    def __init__(
        self,
        days_to_check: int = DEFAULT_DAYS_TO_CHECK,
        min_consecutive_days: int = DEFAULT_MIN_CONSECUTIVE_DAYS,
    ) -> None:
        self.days_to_check = days_to_check
        self.min_consecutive_days = min_consecutive_days

    def check(
        self,
        records: List[WellnessRecord],
        baseline: Optional[Baseline],
        days_to_check: Optional[int] = None,
        min_consecutive_days: Optional[int] = None,
    ) -> IllnessAssessment:
        """
        Assess illness probability from the most recent days.

        Args:
            records: Wellness records, newest first
            baseline: Current baseline (may be None)
            days_to_check: Override for the number of recent days scored
            min_consecutive_days: Override for the sustained-pattern length

        Returns:
            IllnessAssessment; tiers are checked from most to least severe
        """
        if days_to_check is None:
            days_to_check = self.days_to_check
        min_consecutive = min_consecutive_days
        if min_consecutive is None:
            min_consecutive = self.min_consecutive_days

        skin_temp = skin_temp_norm(records)
        daily = [score_day(r, baseline, skin_temp) for r in records[:days_to_check]]
        if not daily:
            return IllnessAssessment(
                detected=False,
                probability=IllnessProbability.NONE,
                recommendation="No wellness data available for illness screening",
            )

        consecutive = 0
        for day in daily:
            if not day.concerning:
                break
            consecutive += 1

        symptoms = _unique([m for day in daily[:max(consecutive, 1)] for m in day.markers])
        pattern_score = sum(day.score for day in daily[:min_consecutive])
        latest = daily[0]

        assessment = IllnessAssessment(
            detected=False,
            probability=IllnessProbability.NONE,
            consecutive_days=consecutive,
            symptoms=symptoms,
            daily_analysis=daily,
        )

        if consecutive >= min_consecutive and pattern_score >= HIGH_PATTERN_SCORE:
            assessment.detected = True
            assessment.probability = IllnessProbability.HIGH
            assessment.recommendation = (
                f"Strong illness pattern over {consecutive} days: {', '.join(symptoms)}"
            )
            assessment.training_guidance = "Complete rest. No training until markers return to baseline."
        elif consecutive >= min_consecutive and pattern_score >= LIKELY_PATTERN_SCORE:
            assessment.detected = True
            assessment.probability = IllnessProbability.LIKELY
            assessment.recommendation = (
                f"Likely illness: {consecutive} consecutive days of {', '.join(symptoms)}"
            )
            assessment.training_guidance = "Light activity only (easy walk or spin). No structured training."
        elif consecutive >= 1 and latest.score >= POSSIBLE_DAY_SCORE:
            assessment.detected = True
            assessment.probability = IllnessProbability.POSSIBLE
            assessment.recommendation = f"Possible illness onset: {', '.join(symptoms)}"
            assessment.training_guidance = "Reduce intensity 30-50%. Stop if you feel worse."
        elif latest.score >= CONCERNING_DAY_SCORE:
            assessment.recommendation = (
                f"One-off concerning markers ({', '.join(latest.markers)}); monitor tomorrow"
            )
            assessment.training_guidance = "Train as planned but listen to your body."
        else:
            assessment.symptoms = []
            assessment.recommendation = "No illness markers detected"
            assessment.training_guidance = "No illness-related restrictions."

        if assessment.detected:
            logger.warning(
                f"Illness pattern detected: probability={assessment.probability.value}, "
                f"consecutive_days={consecutive}, symptoms={symptoms}"
            )

        return assessment
