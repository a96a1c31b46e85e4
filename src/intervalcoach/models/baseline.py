"""Personal baseline snapshot for HRV and resting heart rate."""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, Optional


# Fallback spread when the sample standard deviation is missing or zero
STD_DEV_FALLBACK_RATIO = 0.1


@dataclass
class MetricBaseline:
    """Rolling statistics for one metric."""
    mean_30d: Optional[float] = None
    std_dev_30d: Optional[float] = None
    mean_7d: Optional[float] = None
    min_30d: Optional[float] = None
    max_30d: Optional[float] = None
    sample_count: int = 0

    @property
    def available(self) -> bool:
        return self.mean_30d is not None

    @property
    def effective_std_dev(self) -> Optional[float]:
        """Standard deviation used for z-scores, never undefined once a mean exists."""
        if self.std_dev_30d:
            return self.std_dev_30d
        if self.mean_30d is None:
            return None
        return self.mean_30d * STD_DEV_FALLBACK_RATIO

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MetricBaseline":
        if not data:
            return cls()
        return cls(
            mean_30d=data.get("mean_30d"),
            std_dev_30d=data.get("std_dev_30d"),
            mean_7d=data.get("mean_7d"),
            min_30d=data.get("min_30d"),
            max_30d=data.get("max_30d"),
            sample_count=data.get("sample_count", 0),
        )


@dataclass
class Baseline:
    """The athlete's current baseline. Only the most recent snapshot survives."""
    hrv: MetricBaseline = field(default_factory=MetricBaseline)
    rhr: MetricBaseline = field(default_factory=MetricBaseline)
    calculated_at: datetime = field(default_factory=datetime.now)

    def for_metric(self, metric: str) -> MetricBaseline:
        if metric == "hrv":
            return self.hrv
        if metric == "rhr":
            return self.rhr
        raise ValueError(f"Unknown baseline metric: {metric}")

    def to_dict(self) -> dict:
        return {
            "hrv": self.hrv.to_dict(),
            "rhr": self.rhr.to_dict(),
            "calculated_at": self.calculated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Baseline":
        calculated_at = data.get("calculated_at")
        if isinstance(calculated_at, str):
            calculated_at = datetime.fromisoformat(calculated_at)
        return cls(
            hrv=MetricBaseline.from_dict(data.get("hrv")),
            rhr=MetricBaseline.from_dict(data.get("rhr")),
            calculated_at=calculated_at or datetime.now(),
        )
