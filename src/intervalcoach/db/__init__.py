"""Baseline persistence."""

from .baseline_repository import (
    BaselineRepository,
    InMemoryBaselineRepository,
    SqliteBaselineRepository,
)

__all__ = ["BaselineRepository", "InMemoryBaselineRepository", "SqliteBaselineRepository"]
