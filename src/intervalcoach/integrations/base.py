"""
Data sources feeding the decision engine.

The engine does not fetch anything itself. Wellness, fitness, goal and
activity data come from collaborators that satisfy these protocols; the
JSON file source below backs the CLI and tests.
"""

import json
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from ..exceptions import InputDataError
from ..models.wellness import ActivitySummary, FitnessSnapshot, GoalEvent, WellnessRecord


logger = logging.getLogger(__name__)


@runtime_checkable
class WellnessSource(Protocol):
    def fetch_wellness(self, end: date, days: int) -> List[WellnessRecord]:
        """Daily wellness records for the `days` days ending at `end`, newest first."""
        ...


@runtime_checkable
class FitnessSource(Protocol):
    def fetch_fitness(self, as_of: date) -> Optional[FitnessSnapshot]:
        """CTL/ATL/TSB as of a date, or None when unknown."""
        ...


@runtime_checkable
class GoalSource(Protocol):
    def next_goal(self, today: date) -> Optional[GoalEvent]:
        """Nearest goal event on or after today, or None."""
        ...


@runtime_checkable
class ActivitySource(Protocol):
    def fetch_activities(self, end: date, days: int) -> List[ActivitySummary]:
        """Activities in the `days` days ending at `end`."""
        ...


class JsonFileSource:
    """
    Reads all four data kinds from one JSON document.

    Expected layout::

        {
          "today": "2024-06-01",
          "wellness": [{"date": "2024-06-01", "hrv": 48, "restingHR": 52, ...}],
          "fitness": {"ctl": 55, "atl": 60, "tsb": -5},
          "goal": {"date": "2024-08-15", "name": "Gran Fondo", "priority": "A"},
          "activities": [{"date": "2024-05-30", "type": "Ride", "tss": 80}]
        }
    """

    def __init__(self, source: Union[str, Path, Dict[str, Any]]) -> None:
        if isinstance(source, dict):
            self.name = "<dict>"
            self.data = source
        else:
            self.name = str(source)
            self.data = self._read(Path(source))

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError:
            raise InputDataError(f"Input file not found: {path}", source=str(path))
        except json.JSONDecodeError as e:
            raise InputDataError(f"Invalid JSON in {path}: {e}", source=str(path))

        if not isinstance(data, dict):
            raise InputDataError("Input document must be a JSON object", source=str(path))
        return data

    @property
    def today(self) -> Optional[date]:
        value = self.data.get("today")
        return self._parse("today", date.fromisoformat, value) if value else None

    def _parse(self, kind: str, parser, payload):
        try:
            return parser(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise InputDataError(f"Malformed {kind} entry: {e}", source=self.name)

    def fetch_wellness(self, end: date, days: int) -> List[WellnessRecord]:
        start = end - timedelta(days=days - 1)
        records = [
            self._parse("wellness", WellnessRecord.from_dict, r)
            for r in self.data.get("wellness") or []
        ]
        records = [r for r in records if start <= r.date <= end]
        return sorted(records, key=lambda r: r.date, reverse=True)

    def fetch_fitness(self, as_of: date) -> Optional[FitnessSnapshot]:
        payload = self.data.get("fitness")
        if not payload:
            return None
        return self._parse("fitness", FitnessSnapshot.from_dict, payload)

    def next_goal(self, today: date) -> Optional[GoalEvent]:
        payload = self.data.get("goal")
        if not payload:
            return None
        goal = self._parse("goal", GoalEvent.from_dict, payload)
        if goal.date < today:
            logger.info(f"Goal {goal.name or goal.date.isoformat()} is in the past; ignoring")
            return None
        return goal

    def fetch_activities(self, end: date, days: int) -> List[ActivitySummary]:
        start = end - timedelta(days=days - 1)
        activities = [
            self._parse("activity", ActivitySummary.from_dict, a)
            for a in self.data.get("activities") or []
        ]
        return [a for a in activities if start <= a.date <= end]
