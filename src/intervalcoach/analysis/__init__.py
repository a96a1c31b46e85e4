"""Baseline-relative deviation and periodization analysis."""

from .deviation import DeviationAnalyzer, classify_z_score
from .phase import PhaseCalculator, weeks_until

__all__ = ["DeviationAnalyzer", "classify_z_score", "PhaseCalculator", "weeks_until"]
