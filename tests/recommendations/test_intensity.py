"""Tests for the intensity modifier curve."""

import math

import pytest

from intervalcoach.models.decisions import Confidence
from intervalcoach.recommendations.intensity import combine, z_score_to_modifier


class TestZScoreToModifier:
    """Tests for the piecewise-linear curve."""

    @pytest.mark.parametrize("z_score,expected", [
        (-2.0, 0.70),
        (-1.0, 0.82),
        (0.0, 0.94),
        (1.0, 1.00),
        (2.0, 1.05),
    ])
    def test_breakpoints(self, z_score, expected):
        assert z_score_to_modifier(z_score) == pytest.approx(expected)

    def test_interpolates_between_breakpoints(self):
        assert z_score_to_modifier(-1.5) == pytest.approx(0.76)
        assert z_score_to_modifier(0.5) == pytest.approx(0.97)

    def test_clamped_beyond_curve(self):
        assert z_score_to_modifier(-5.0) == pytest.approx(0.70)
        assert z_score_to_modifier(9.0) == pytest.approx(1.05)

    def test_non_finite_treated_as_neutral_z(self):
        assert z_score_to_modifier(float("nan")) == pytest.approx(0.94)
        assert z_score_to_modifier(None) == pytest.approx(0.94)

    def test_bounds_and_monotonic(self):
        """Output stays in [0.70, 1.05] and never decreases as z grows."""
        grid = [i / 20 for i in range(-100, 101)]
        values = [z_score_to_modifier(z) for z in grid]

        assert all(0.70 <= v <= 1.05 for v in values)
        assert all(b >= a for a, b in zip(values, values[1:]))


class TestCombine:
    """Tests for combining HRV and RHR into one modifier."""

    def test_hrv_only(self):
        """HRV 40 vs 50 +/- 10 gives z = -1 and modifier 0.82."""
        result = combine(hrv_z=-1.0, rhr_z=None)

        assert result.modifier == pytest.approx(0.82)
        assert result.confidence == Confidence.MEDIUM
        assert set(result.breakdown) == {"hrv"}

    def test_rhr_only_is_inverted(self):
        """RHR 60 vs 55 +/- 5 gives raw z = +1, inverted to -1, modifier 0.82."""
        result = combine(hrv_z=None, rhr_z=1.0)

        assert result.modifier == pytest.approx(0.82)
        assert result.confidence == Confidence.MEDIUM
        assert result.breakdown["rhr"]["z_score"] == 1.0

    def test_both_metrics_weighted(self):
        result = combine(hrv_z=1.0, rhr_z=-1.0)

        assert result.modifier == pytest.approx(1.00)
        assert result.confidence == Confidence.HIGH

    def test_weighting(self):
        """0.6 x 0.82 + 0.4 x 1.00 = 0.892, rounded to 0.89."""
        result = combine(hrv_z=-1.0, rhr_z=-1.0)
        assert result.modifier == pytest.approx(0.89)

    def test_no_data_is_neutral(self):
        result = combine(None, None)

        assert result.modifier == 1.0
        assert result.confidence == Confidence.LOW
        assert result.breakdown == {}

    def test_higher_rhr_lowers_modifier(self):
        """Holding the baseline fixed, a lower RHR always helps."""
        mean, std = 55.0, 5.0
        modifiers = [
            combine(None, (rhr - mean) / std).modifier
            for rhr in (58.0, 57.0, 56.0, 55.0, 54.0, 53.0, 52.0)
        ]
        assert all(b > a for a, b in zip(modifiers, modifiers[1:]))

    def test_to_dict(self):
        data = combine(hrv_z=0.0, rhr_z=0.0).to_dict()

        assert data["modifier"] == pytest.approx(0.94)
        assert data["confidence"] == "high"
        assert math.isclose(data["breakdown"]["hrv"]["modifier"], 0.94)
