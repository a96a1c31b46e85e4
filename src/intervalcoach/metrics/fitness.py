"""Fitness-Fatigue model helpers (CTL projection)."""

import math
from typing import List

CTL_TIME_CONSTANT = 42
ATL_TIME_CONSTANT = 7


def calculate_ewma(
    current_value: float,
    previous_ewma: float,
    time_constant: int,
) -> float:
    """
    Exponentially Weighted Moving Average.

    Uses the formula: EWMA_n = EWMA_{n-1} * decay + value * (1 - decay)
    where decay = e^(-1/time_constant)

    Args:
        current_value: Today's training load
        previous_ewma: Yesterday's EWMA value
        time_constant: Time constant in days (42 for CTL, 7 for ATL)

    Returns:
        New EWMA value
    """
    decay = math.exp(-1 / time_constant)
    return previous_ewma * decay + current_value * (1 - decay)


def daily_load_for_ctl_change(
    current_ctl: float,
    target_ctl: float,
    days: int = 7,
    time_constant: int = CTL_TIME_CONSTANT,
) -> float:
    """
    Constant daily load that moves CTL from current to target in `days`.

    Inverts the EWMA: CTL_n = CTL_0 * d^n + L * (1 - d^n).
    """
    decay_n = math.exp(-days / time_constant)
    return max(0.0, (target_ctl - current_ctl * decay_n) / (1 - decay_n))


def project_ctl(
    current_ctl: float,
    weekly_ramp: float,
    weeks: int,
    ceiling: float,
) -> List[float]:
    """
    Project weekly CTL values for a constant ramp, stopping at the ceiling.

    Each week's daily load is derived from the EWMA so the projection follows
    the same model used to compute CTL.

    Returns:
        CTL at the end of each projected week, rounded to 1 decimal
    """
    trajectory = []
    ctl = current_ctl
    for _ in range(max(0, weeks)):
        week_target = ctl + weekly_ramp
        if weekly_ramp > 0:
            week_target = min(week_target, max(ceiling, ctl))
        daily_load = daily_load_for_ctl_change(ctl, week_target)
        for _ in range(7):
            ctl = calculate_ewma(daily_load, ctl, CTL_TIME_CONSTANT)
        trajectory.append(round(ctl, 1))
    return trajectory
