"""Application settings using pydantic-settings"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class StudioSettings(BaseSettings):
    """Settings loaded from CLIPFLOW_* environment variables or .env"""

    model_config = SettingsConfigDict(
        env_prefix="CLIPFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider mode
    provider_mode: Literal["mock", "live"] = "mock"

    # Storage
    storage_backend: Literal["memory", "local"] = "local"
    storage_dir: str = "artifacts/storage"
    export_dir: str = "exports"

    # Text generation
    model_id: str = "claude-sonnet-4-20250514"
    max_tokens: int = 2048

    # Workflow defaults
    default_template: Optional[str] = None
    text_timeout: float = 60.0
    export_timeout: float = 600.0

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> StudioSettings:
    return StudioSettings()
