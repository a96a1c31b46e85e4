"""Data source protocols and the JSON file source."""

from .base import ActivitySource, FitnessSource, GoalSource, JsonFileSource, WellnessSource

__all__ = [
    "ActivitySource",
    "FitnessSource",
    "GoalSource",
    "JsonFileSource",
    "WellnessSource",
]
