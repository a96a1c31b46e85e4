"""Pytest configuration and fixtures."""

from datetime import date, datetime, timedelta

import pytest

from intervalcoach.config import get_settings
from intervalcoach.llm.providers import reset_llm_client
from intervalcoach.models.baseline import Baseline, MetricBaseline
from intervalcoach.models.wellness import WellnessRecord


TODAY = date(2024, 6, 30)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from the developer's environment and cached singletons."""
    for name in ("INTERVALCOACH_OPENAI_API_KEY", "INTERVALCOACH_TARGET_PEAK_CTL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    reset_llm_client()
    yield
    get_settings.cache_clear()
    reset_llm_client()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_records():
    """Factory for newest-first wellness records with steady values."""

    def _make(count, start=TODAY, hrv=50.0, resting_hr=55.0, **fields):
        return [
            WellnessRecord(
                date=start - timedelta(days=i),
                hrv=hrv,
                resting_hr=resting_hr,
                **fields,
            )
            for i in range(count)
        ]

    return _make


@pytest.fixture
def steady_baseline():
    """HRV 50 +/- 10 ms and RHR 55 +/- 5 bpm."""
    return Baseline(
        hrv=MetricBaseline(mean_30d=50.0, std_dev_30d=10.0, mean_7d=50.0,
                           min_30d=35.0, max_30d=65.0, sample_count=30),
        rhr=MetricBaseline(mean_30d=55.0, std_dev_30d=5.0, mean_7d=55.0,
                           min_30d=48.0, max_30d=62.0, sample_count=30),
        calculated_at=datetime(2024, 6, 30, 6, 0),
    )
