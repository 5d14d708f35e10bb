"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Saturation defaults match the analytics constants (window 50, threshold 2)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out-of-the-box with no .env
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from qualstore.core.domain_types import SATURATION_THRESHOLD, SATURATION_WINDOW


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    app_name: str = "Qualstore API"

    # Coding store
    # ADR: strict by default; lenient mode keeps the permissive UI behavior
    strict_references: bool = True
    saturation_window: int = SATURATION_WINDOW
    saturation_threshold: int = SATURATION_THRESHOLD

    @field_validator("saturation_window", "saturation_threshold")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
