"""Environment-based configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from breakbot_report.constants import DEFAULT_API_BASE_URL

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Analysis service
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout_seconds: float = 300.0
    producer_max_attempts: int = 3
    retry_initial_wait_seconds: float = 2.0
    retry_max_wait_seconds: float = 30.0

    # Output
    output_dir: Path = Path("breakbot-report-output")

    # Logging
    log_level: str = "INFO"
    debug_mode: bool = False

    # API
    cors_origins: str = "http://localhost:3000"

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("api_base_url must not be empty")
        return v.strip().rstrip("/")

    @field_validator("producer_max_attempts")
    @classmethod
    def _validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError(
                "producer_max_attempts must be at least 1"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}"
            )
        return level

    @property
    def cors_origin_list(self) -> list[str]:
        """Comma-separated ``cors_origins`` as a list."""
        return [
            o.strip() for o in self.cors_origins.split(",") if o.strip()
        ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
