"""Personal baseline calculations for HRV and resting heart rate.

Today's readings are judged against *your* rolling history rather than a
population norm:

- 30-day mean, standard deviation and range for z-scores
- 7-day mean for short-term direction
- HRV and RHR are filtered independently, so their sample counts can differ
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from .db.baseline_repository import BaselineRepository, InMemoryBaselineRepository
from .metrics.stats import average, positive_values, std_dev
from .models.baseline import Baseline, MetricBaseline
from .models.wellness import WellnessRecord


logger = logging.getLogger(__name__)

MIN_RECORDS = 7
MIN_SAMPLES_30D = 7
MIN_SAMPLES_7D = 3
LONG_WINDOW_DAYS = 30
SHORT_WINDOW_DAYS = 7


def calculate_metric_baseline(values: Sequence[Optional[float]]) -> MetricBaseline:
    """Calculate rolling statistics for one metric.

    Args:
        values: Raw values ordered newest-first (may contain None)

    Returns:
        MetricBaseline; mean_30d stays None below MIN_SAMPLES_30D samples
    """
    long_window = positive_values(values[:LONG_WINDOW_DAYS])
    short_window = positive_values(values[:SHORT_WINDOW_DAYS])

    result = MetricBaseline(sample_count=len(long_window))
    if long_window:
        result.min_30d = min(long_window)
        result.max_30d = max(long_window)

    if len(long_window) >= MIN_SAMPLES_30D:
        result.mean_30d = average(long_window)
        result.std_dev_30d = std_dev(long_window)

    if len(short_window) >= MIN_SAMPLES_7D:
        result.mean_7d = average(short_window)

    return result


class BaselineStore:
    """
    Computes and persists the athlete's current baseline.

    Staleness is an explicit policy: with max_age=None (default) a stored
    snapshot stays valid until it is replaced; otherwise get_baseline()
    reports snapshots older than max_age as missing.
    """

    def __init__(
        self,
        repository: Optional[BaselineRepository] = None,
        max_age: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.repository = repository or InMemoryBaselineRepository()
        self.max_age = max_age
        self._clock = clock

    def compute_baseline(self, records: List[WellnessRecord]) -> Optional[Baseline]:
        """
        Compute a new baseline from newest-first records and persist it.

        Returns:
            The new Baseline, or None when fewer than MIN_RECORDS records exist
        """
        if len(records) < MIN_RECORDS:
            logger.warning(
                f"Insufficient data for baseline: {len(records)} records, "
                f"need at least {MIN_RECORDS}"
            )
            return None

        window = records[:LONG_WINDOW_DAYS]
        baseline = Baseline(
            hrv=calculate_metric_baseline([r.hrv for r in window]),
            rhr=calculate_metric_baseline([r.resting_hr for r in window]),
            calculated_at=self._clock(),
        )

        self.repository.save(baseline)
        logger.info(
            f"Baseline updated: HRV {baseline.hrv.mean_30d} "
            f"(n={baseline.hrv.sample_count}), RHR {baseline.rhr.mean_30d} "
            f"(n={baseline.rhr.sample_count})"
        )
        return baseline

    def get_baseline(self) -> Optional[Baseline]:
        """Read the stored baseline, applying the configured freshness policy."""
        baseline = self.repository.load()
        if baseline is None:
            return None

        if self.max_age is not None and self._clock() - baseline.calculated_at > self.max_age:
            logger.info(
                f"Stored baseline from {baseline.calculated_at.isoformat()} "
                f"is older than {self.max_age}; ignoring"
            )
            return None

        return baseline

    def refresh(self, records: List[WellnessRecord]) -> Optional[Baseline]:
        """Recompute when enough records exist, otherwise fall back to the stored snapshot."""
        baseline = self.compute_baseline(records)
        if baseline is not None:
            return baseline
        return self.get_baseline()
