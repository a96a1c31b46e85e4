"""Null-tolerant summary statistics."""

import math
from typing import Iterable, List, Optional


def numeric_values(values: Iterable) -> List[float]:
    """Keep finite numbers, dropping None, booleans and non-numeric entries."""
    result = []
    for v in values:
        if v is None or isinstance(v, bool) or not isinstance(v, (int, float)):
            continue
        if math.isfinite(v):
            result.append(float(v))
    return result


def positive_values(values: Iterable) -> List[float]:
    """Keep finite numbers greater than zero (physiological samples)."""
    return [v for v in numeric_values(values) if v > 0]


def average(values: Iterable) -> Optional[float]:
    """
    Arithmetic mean of the numeric values.

    Returns:
        Mean, or None if no numeric values remain after filtering
    """
    valid = numeric_values(values)
    if not valid:
        return None
    return sum(valid) / len(valid)


def std_dev(values: Iterable) -> Optional[float]:
    """
    Population standard deviation of the numeric values.

    Returns:
        sqrt(mean of squared deviations), or None with fewer than 2 values.
        None means insufficient data, not zero variance.
    """
    valid = numeric_values(values)
    if len(valid) < 2:
        return None
    mean = sum(valid) / len(valid)
    return math.sqrt(sum((v - mean) ** 2 for v in valid) / len(valid))
