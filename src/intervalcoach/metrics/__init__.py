"""Statistical and training-load helpers."""

from .stats import average, std_dev, numeric_values, positive_values
from .fitness import calculate_ewma, daily_load_for_ctl_change, project_ctl

__all__ = [
    "average",
    "std_dev",
    "numeric_values",
    "positive_values",
    "calculate_ewma",
    "daily_load_for_ctl_change",
    "project_ctl",
]
