"""Configuration settings for the IntervalCoach decision engine."""

from pathlib import Path
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


# Per-user directory for persisted state
DATA_DIR = Path.home() / ".intervalcoach"


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # OpenAI (optional enhancement layer)
    openai_api_key: str = ""
    llm_model_fast: str = "gpt-4o-mini"  # For quick assessments
    llm_model_smart: str = "gpt-4o"  # For complex analysis
    llm_timeout_seconds: float = 30.0
    enhancement_enabled: bool = True

    # Baseline persistence
    baseline_db_path: Optional[Path] = None
    athlete_id: str = "default"
    # None keeps the stored baseline valid until the next recomputation
    baseline_max_age_hours: Optional[float] = None

    # Decision constants
    yellow_recovery_modifier: float = 0.85
    illness_days_to_check: int = 3
    illness_min_consecutive_days: int = 2

    # Training load
    target_peak_ctl: Optional[float] = None
    max_target_ctl: float = 120.0

    log_level: str = "INFO"

    def model_post_init(self, __context) -> None:
        """Set default database path after initialization."""
        if self.baseline_db_path is None:
            self.baseline_db_path = DATA_DIR / "baselines.db"

    class Config:
        env_prefix = "INTERVALCOACH_"
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
