"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    API_BASE_URL: str = Field(default="http://localhost:4000")
    REQUEST_TIMEOUT_S: float = Field(default=30.0, gt=0)
    REPORT_TIMEOUT_S: float = Field(default=60.0, gt=0)

    # The question generator is called without a bearer token unless enabled.
    GENERATOR_SENDS_AUTH: bool = False

    AUTH_TOKEN: Optional[str] = None
    TOKEN_FILE: str = ".transparency_lens/token"

    REPORT_DIR: str = "reports"
    EXPECTED_QUESTIONS: int = Field(default=5, ge=1)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
