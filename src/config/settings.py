"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_QUESTION_BANK = Path(__file__).resolve().parent.parent / "data" / "questions.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Inflecto Readiness"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001

    # Question bank (blank = bundled catalog)
    question_bank_path: str = ""

    # Assessment settings
    questions_per_session: int = Field(default=5, ge=1)
    completion_close_delay_seconds: float = Field(default=0.2, ge=0)
    expose_score_map: bool = True

    # Point scale every score_map value must fall within
    score_point_min: int = 1
    score_point_max: int = 4

    # CORS - stored as comma-separated string in env
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def question_bank_file(self) -> Path:
        """Resolved path of the question catalog source."""
        if self.question_bank_path:
            return Path(self.question_bank_path)
        return DEFAULT_QUESTION_BANK


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
