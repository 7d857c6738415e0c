"""Analytics configuration management."""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Analytics engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EVENTMETRICS_",
        case_sensitive=False,
        extra="ignore"
    )

    # Metric analysis
    anomaly_std_threshold: float = 2.0
    trend_threshold_percent: float = 5.0

    # Event impact windows (days before start / after end)
    impact_window_days: int = 30

    # Legacy averaging drops zero-valued points when enabled
    exclude_zero_values: bool = False

    # Insights
    max_insights: Optional[int] = None  # legacy dashboard endpoint used 8

    # Console progress lines
    verbose: bool = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
