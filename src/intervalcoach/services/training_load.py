"""
Training load advice.

Derives a target CTL, the weekly TSS needed to move toward it, and a
ramp-rate classification. Ramp-rate bands are fixed (CTL points per week):

- 3-5: safe build
- 5-7: aggressive
- > 8: unsafe
"""

import logging
from typing import Optional

from ..config import get_settings
from ..metrics.fitness import daily_load_for_ctl_change, project_ctl
from ..models.decisions import LoadAdvice, Phase, RampRateAdvice


logger = logging.getLogger(__name__)


SAFE_RAMP_MIN = 3.0
SAFE_RAMP_MAX = 5.0
AGGRESSIVE_RAMP_MAX = 7.0
UNSAFE_RAMP = 8.0
DEFAULT_BUILD_RAMP = 4.0

TAPER_WEEKS = 2
RECOVER_RAMP = -3.0
TAPER_RAMP = -5.0

TSB_WARNING = -25.0
RED_RECOVERY_AVG = 34.0
YELLOW_RECOVERY_AVG = 50.0

TSS_RANGE_PCT = 0.10
REDUCTION_PHASES = {"Taper", "Race Week"}

ADVICE_TEXT = {
    RampRateAdvice.RECOVER: "Reduce load this week to absorb fatigue",
    RampRateAdvice.MAINTAIN: "Hold load steady - fitness is at target",
    RampRateAdvice.BUILD: "Build steadily within the safe ramp range",
    RampRateAdvice.AGGRESSIVE: "Aggressive build - monitor recovery closely",
    RampRateAdvice.UNSAFE: "Target not reachable safely - capped at a safe ramp",
}


class TrainingLoadAdvisor:
    """Turns current load metrics and weeks-to-goal into weekly targets."""

    def __init__(
        self,
        target_peak_ctl: Optional[float] = None,
        max_target_ctl: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.target_peak_ctl = (
            target_peak_ctl if target_peak_ctl is not None else settings.target_peak_ctl
        )
        self.max_target_ctl = (
            max_target_ctl if max_target_ctl is not None else settings.max_target_ctl
        )

    def advise(
        self,
        ctl: float,
        atl: float,
        tsb: float,
        weeks_out: Optional[float],
        phase: Phase,
        target_ctl: Optional[float] = None,
        recovery_avg: Optional[float] = None,
    ) -> LoadAdvice:
        """
        Compute load advice for the coming week.

        Args:
            ctl: Current Chronic Training Load
            atl: Current Acute Training Load
            tsb: Current Training Stress Balance
            weeks_out: Weeks until the goal (None = no goal)
            phase: Current periodization phase
            target_ctl: Explicit peak CTL target; defaults to configuration or a safe build
            recovery_avg: Average recovery score over the last week (0-100)

        Returns:
            LoadAdvice with weekly and daily TSS ranges
        """
        build_weeks = max(1, int(weeks_out) - TAPER_WEEKS) if weeks_out else 1
        target = target_ctl if target_ctl is not None else self.target_peak_ctl
        if target is None:
            target = min(ctl + DEFAULT_BUILD_RAMP * build_weeks, max(self.max_target_ctl, ctl))

        required_ramp = (target - ctl) / build_weeks
        reduction_phase = phase.phase_name in REDUCTION_PHASES
        notes = []

        if reduction_phase:
            advice = RampRateAdvice.RECOVER
            applied_ramp = TAPER_RAMP
            notes.append(f"{phase.phase_name}: shed fatigue before the goal")
        elif tsb < TSB_WARNING:
            advice = RampRateAdvice.RECOVER
            applied_ramp = RECOVER_RAMP
            notes.append(f"TSB {tsb:.0f} is deeply negative")
        elif recovery_avg is not None and recovery_avg < RED_RECOVERY_AVG:
            advice = RampRateAdvice.RECOVER
            applied_ramp = RECOVER_RAMP
            notes.append(f"Average recovery {recovery_avg:.0f}% is low")
        elif required_ramp <= 0:
            advice = RampRateAdvice.MAINTAIN
            applied_ramp = 0.0
        elif required_ramp <= SAFE_RAMP_MAX:
            advice = RampRateAdvice.BUILD
            applied_ramp = required_ramp
            if recovery_avg is not None and recovery_avg < YELLOW_RECOVERY_AVG:
                applied_ramp = min(applied_ramp, SAFE_RAMP_MIN)
                notes.append(
                    f"Average recovery {recovery_avg:.0f}% - ramp limited to {SAFE_RAMP_MIN:.0f}/week"
                )
        elif required_ramp <= UNSAFE_RAMP:
            advice = RampRateAdvice.AGGRESSIVE
            applied_ramp = min(required_ramp, AGGRESSIVE_RAMP_MAX)
        else:
            advice = RampRateAdvice.UNSAFE
            applied_ramp = SAFE_RAMP_MAX

        next_week_ctl = max(0.0, ctl + applied_ramp)
        weekly_tss = round(daily_load_for_ctl_change(ctl, next_week_ctl) * 7)
        tss_min = round(weekly_tss * (1 - TSS_RANGE_PCT))
        tss_max = round(weekly_tss * (1 + TSS_RANGE_PCT))

        warnings = []
        if tsb < TSB_WARNING:
            warnings.append(f"TSB is {tsb:.0f} (below {TSB_WARNING:.0f}): high fatigue, overreaching risk")
        if required_ramp > AGGRESSIVE_RAMP_MAX:
            warnings.append(
                f"Reaching CTL {target:.0f} needs {required_ramp:.1f} CTL/week, "
                f"above the {AGGRESSIVE_RAMP_MAX:.0f}/week ceiling"
            )

        trajectory_weeks = build_weeks if weeks_out and weeks_out > 0 else 0
        trajectory = project_ctl(ctl, applied_ramp, trajectory_weeks, target) if not reduction_phase else []

        load_advice = ADVICE_TEXT[advice]
        if notes:
            load_advice = f"{load_advice} ({'; '.join(notes)})"

        result = LoadAdvice(
            current_ctl=round(ctl, 1),
            target_ctl=round(target, 1),
            weeks_to_goal=weeks_out,
            recommended_weekly_tss=weekly_tss,
            tss_range={"min": tss_min, "max": tss_max},
            daily_tss_range={"min": round(tss_min / 7), "max": round(tss_max / 7)},
            ramp_rate_advice=advice,
            required_ramp_rate=round(required_ramp, 1),
            load_advice=load_advice,
            warning=" | ".join(warnings) if warnings else None,
            ctl_trajectory=trajectory,
        )

        logger.debug(
            f"Load advice: CTL {ctl:.1f} -> {target:.1f}, ramp {applied_ramp:.1f}/week "
            f"({advice.value}), weekly TSS {weekly_tss}"
        )
        return result
