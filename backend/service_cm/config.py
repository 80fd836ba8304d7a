"""
Application configuration using Pydantic Settings.

Supports environment variables and .env files for configuration.
"""

from functools import lru_cache
import json
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # CM repository (GitHub)
    github_token: str | None = None
    github_repo: str = "example-org/service-models"
    github_api_version: str = "2022-11-28"

    # Tag grammar
    feature_tag_prefix: str = Field(default="feature", min_length=1)

    # Annotation thresholds; the change and commit dialogs use different minimums.
    change_annotation_min_length: int = Field(default=4, ge=0)
    commit_annotation_min_length: int = Field(default=8, ge=0)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            value = v.strip()
            if value.startswith("["):
                try:
                    parsed = json.loads(value)
                    if isinstance(parsed, list):
                        return [str(origin).strip() for origin in parsed if str(origin).strip()]
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("feature_tag_prefix")
    @classmethod
    def check_prefix(cls, v: str) -> str:
        if "/" in v:
            raise ValueError("feature_tag_prefix must be a single path segment")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
