# file: logsynth/core/config.py

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized generator configuration.
    Values are loaded from LOGSYNTH_* environment variables (e.g., from a .env file).
    """
    # --- Key Universes & Skew ---
    USER_UNIVERSE_SIZE: int = 50_000
    USER_SKEW: float = 0.8

    OPERATION_COUNT: int = 40
    OPERATION_SKEW: float = 1.0

    ADDRESS_UNIVERSE_SIZE: int = 20_000
    ADDRESS_SKEW: float = 0.5
    ADDRESS_PER_SESSION: bool = True

    # --- Time Model (milliseconds) ---
    START_MILLIS: int = 1_382_920_800_000
    MEAN_SESSION_GAP_MS: float = 1_500.0
    MEAN_EVENT_GAP_MS: float = 20_000.0
    MEAN_SESSION_LENGTH: float = 4.0
    SESSION_TIMEOUT_MS: int = 30 * 60 * 1000

    # --- Reproducibility ---
    SEED: Optional[int] = None

    model_config = SettingsConfigDict(
        env_prefix="LOGSYNTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

# Create a single settings instance to be used throughout the application
settings = Settings()
