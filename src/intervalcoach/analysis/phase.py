"""
Periodization phase from goal-date arithmetic.

Phase boundaries (weeks until the goal):
- >= 16: Base
- 8 to <16: Build
- 3 to <8: Specialty
- 1 to <3: Taper
- < 1: Race Week (also past goals; callers handle post-event separately)
"""

import math
from datetime import date
from typing import Optional

from ..models.decisions import Phase


BASE_MIN_WEEKS = 16
BUILD_MIN_WEEKS = 8
SPECIALTY_MIN_WEEKS = 3
TAPER_MIN_WEEKS = 1

# Used when no goal is on the calendar
DEFAULT_PHASE = "Build"

PHASE_FOCUS = {
    "Base": "Aerobic foundation: long endurance rides, tempo and sweet spot, strength",
    "Build": "Raise FTP and threshold: sustained threshold and VO2max intervals",
    "Specialty": "Race-specific intensity: simulate event demands, sharpen top-end",
    "Taper": "Reduce volume, keep short intensity: arrive fresh and sharp",
    "Race Week": "Openers and rest: short efforts with full recovery, prioritize sleep",
}


def weeks_until(goal_date: date, today: date) -> int:
    """Whole weeks until the goal, rounded up. Negative for past goals."""
    return math.ceil((goal_date - today).days / 7)


class PhaseCalculator:
    """Buckets weeks-out into a periodization phase."""

    @staticmethod
    def from_weeks_out(weeks_out: Optional[float]) -> Phase:
        """
        Get the phase for a number of weeks until the goal.

        Args:
            weeks_out: Weeks until the goal; None means no goal set

        Returns:
            Phase with canned focus text. Without a goal the phase is
            DEFAULT_PHASE and weeks_out stays None.
        """
        if weeks_out is None:
            name = DEFAULT_PHASE
        elif weeks_out >= BASE_MIN_WEEKS:
            name = "Base"
        elif weeks_out >= BUILD_MIN_WEEKS:
            name = "Build"
        elif weeks_out >= SPECIALTY_MIN_WEEKS:
            name = "Specialty"
        elif weeks_out >= TAPER_MIN_WEEKS:
            name = "Taper"
        else:
            name = "Race Week"

        return Phase(phase_name=name, weeks_out=weeks_out, focus=PHASE_FOCUS[name])

    @classmethod
    def for_goal(cls, goal_date: Optional[date], today: date) -> Phase:
        """Phase for a goal date, or the default phase without one."""
        if goal_date is None:
            return cls.from_weeks_out(None)
        return cls.from_weeks_out(weeks_until(goal_date, today))
