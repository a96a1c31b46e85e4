"""
Deviation of today's readings from the personal baseline.

HRV is higher-is-better, RHR is lower-is-better. Status bands are applied
to the direction-adjusted z-score so both metrics share one ladder.
"""

from typing import Dict, Optional, Tuple

from ..models.baseline import MetricBaseline
from ..models.decisions import DeviationResult


# Direction-adjusted z boundaries
BEST_Z = 1.5
GOOD_Z = 0.5

# Status labels from best to worst, describing the raw reading
STATUS_LADDERS: Dict[str, Tuple[str, str, str, str, str]] = {
    "hrv": ("elevated", "above_baseline", "normal", "below_baseline", "suppressed"),
    "rhr": ("excellent", "below_baseline", "normal", "above_baseline", "elevated"),
}

INTERPRETATIONS: Dict[str, Dict[str, str]] = {
    "hrv": {
        "elevated": "HRV well above baseline - well recovered, ready for quality work",
        "above_baseline": "HRV above baseline - good recovery",
        "normal": "HRV within normal range",
        "below_baseline": "HRV below baseline - some residual fatigue",
        "suppressed": "HRV significantly suppressed - prioritize recovery",
    },
    "rhr": {
        "excellent": "Resting HR well below baseline - excellent recovery",
        "below_baseline": "Resting HR below baseline - good recovery",
        "normal": "Resting HR within normal range",
        "above_baseline": "Resting HR above baseline - possible fatigue or stress",
        "elevated": "Resting HR significantly elevated - fatigue, illness or stress likely",
    },
}

# Metrics where a lower reading is better
INVERSE_METRICS = {"rhr"}


def classify_z_score(z_score: float, metric: str) -> str:
    """
    Map a raw z-score to a status label for the metric.

    Args:
        z_score: Raw z-score ((current - mean) / std)
        metric: 'hrv' or 'rhr'

    Returns:
        Status label from the metric's ladder
    """
    if metric not in STATUS_LADDERS:
        raise ValueError(f"Unknown metric: {metric}")

    best, good, normal, low, worst = STATUS_LADDERS[metric]
    z = -z_score if metric in INVERSE_METRICS else z_score

    if z >= BEST_Z:
        return best
    if z >= GOOD_Z:
        return good
    if z > -GOOD_Z:
        return normal
    if z > -BEST_Z:
        return low
    return worst


class DeviationAnalyzer:
    """Compares a reading to its baseline and classifies the difference."""

    def deviation(
        self,
        current: Optional[float],
        baseline: Optional[MetricBaseline],
        metric: str,
    ) -> DeviationResult:
        """
        Compute deviation, percent deviation and z-score for one metric.

        Returns:
            DeviationResult; available=False when the reading or the
            baseline mean is missing
        """
        if current is None or baseline is None or baseline.mean_30d is None:
            return DeviationResult(
                metric=metric,
                available=False,
                current=current,
                baseline=baseline.mean_30d if baseline else None,
                interpretation=f"No {metric.upper()} baseline comparison available",
            )

        mean = baseline.mean_30d
        spread = baseline.effective_std_dev
        deviation = current - mean
        z_score = deviation / spread if spread else 0.0
        status = classify_z_score(z_score, metric)

        return DeviationResult(
            metric=metric,
            available=True,
            current=current,
            baseline=round(mean, 1),
            deviation=round(deviation, 1),
            deviation_percent=round(deviation / mean * 100, 1) if mean else None,
            z_score=round(z_score, 2),
            status=status,
            interpretation=INTERPRETATIONS[metric][status],
        )
