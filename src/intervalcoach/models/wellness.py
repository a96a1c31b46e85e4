"""Input records consumed by the decision engine."""

from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Any, Dict, Optional


def _parse_date(value: Any) -> date:
    """Parse a date from a date, datetime or ISO string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first key present in data (snake_case or upstream camelCase)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class WellnessRecord:
    """One calendar day of wellness data. Sequences arrive newest-first."""
    date: date
    sleep_hours: Optional[float] = None
    hrv: Optional[float] = None  # ms
    resting_hr: Optional[float] = None  # bpm
    recovery_score: Optional[float] = None  # 0-100
    skin_temp_delta_c: Optional[float] = None  # deviation from personal norm
    respiratory_rate: Optional[float] = None  # breaths/min

    # Subjective 1-5 markers
    soreness: Optional[int] = None
    fatigue: Optional[int] = None
    stress: Optional[int] = None
    mood: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WellnessRecord":
        """Create from a dictionary using snake_case or upstream camelCase keys."""
        return cls(
            date=_parse_date(_pick(data, "date", "id")),
            sleep_hours=_pick(data, "sleep_hours", "sleepHours", "sleep"),
            hrv=_pick(data, "hrv"),
            resting_hr=_pick(data, "resting_hr", "restingHR", "rhr"),
            recovery_score=_pick(data, "recovery_score", "recoveryScore", "recovery"),
            skin_temp_delta_c=_pick(data, "skin_temp_delta_c", "skinTempDeltaC", "skinTemp"),
            respiratory_rate=_pick(data, "respiratory_rate", "respiratoryRate", "respiration"),
            soreness=_pick(data, "soreness"),
            fatigue=_pick(data, "fatigue"),
            stress=_pick(data, "stress"),
            mood=_pick(data, "mood"),
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        d["date"] = self.date.isoformat()
        return d


QUALIFYING_ACTIVITY_TYPES = {
    "ride",
    "virtualride",
    "gravelride",
    "mountainbikeride",
    "ebikeride",
    "run",
    "virtualrun",
    "trailrun",
    "cycling",
    "running",
}


@dataclass(frozen=True)
class ActivitySummary:
    """Summary of one recorded training session."""
    date: date
    activity_type: str
    training_load: Optional[float] = None  # TSS
    duration_min: Optional[float] = None

    @property
    def is_qualifying(self) -> bool:
        """Cycling and running sessions count, regardless of duration."""
        normalized = (self.activity_type or "").lower().replace("_", "").replace(" ", "")
        if normalized in QUALIFYING_ACTIVITY_TYPES:
            return True
        return any(token in normalized for token in ("ride", "run", "cycl"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivitySummary":
        """Create from an activity dictionary."""
        return cls(
            date=_parse_date(_pick(data, "date", "start_date_local", "start_date")),
            activity_type=_pick(data, "activity_type", "type") or "",
            training_load=_pick(data, "training_load", "icu_training_load", "tss"),
            duration_min=_pick(data, "duration_min"),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "activity_type": self.activity_type,
            "training_load": self.training_load,
            "duration_min": self.duration_min,
        }


@dataclass(frozen=True)
class FitnessSnapshot:
    """Training load metrics as of one date."""
    ctl: float  # Chronic Training Load (fitness)
    atl: float  # Acute Training Load (fatigue)
    tsb: float  # Training Stress Balance (form)
    ramp_rate: Optional[float] = None
    date: Optional[date] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FitnessSnapshot":
        ctl = float(_pick(data, "ctl") or 0.0)
        atl = float(_pick(data, "atl") or 0.0)
        tsb = _pick(data, "tsb")
        as_of = _pick(data, "date")
        return cls(
            ctl=ctl,
            atl=atl,
            tsb=float(tsb) if tsb is not None else ctl - atl,
            ramp_rate=_pick(data, "ramp_rate", "rampRate"),
            date=_parse_date(as_of) if as_of else None,
        )

    def to_dict(self) -> dict:
        return {
            "ctl": self.ctl,
            "atl": self.atl,
            "tsb": self.tsb,
            "ramp_rate": self.ramp_rate,
            "date": self.date.isoformat() if self.date else None,
        }


@dataclass(frozen=True)
class GoalEvent:
    """Next goal event from the athlete's calendar."""
    date: date
    name: Optional[str] = None
    priority: str = "A"  # A, B or C race
    event_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GoalEvent":
        return cls(
            date=_parse_date(_pick(data, "date", "start_date_local")),
            name=_pick(data, "name"),
            priority=_pick(data, "priority", "category") or "A",
            event_type=_pick(data, "event_type", "type"),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "name": self.name,
            "priority": self.priority,
            "event_type": self.event_type,
        }
