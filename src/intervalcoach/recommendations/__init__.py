"""Intensity and recovery recommendations."""

from .intensity import combine, z_score_to_modifier
from .recovery import recovery_status

__all__ = ["combine", "z_score_to_modifier", "recovery_status"]
