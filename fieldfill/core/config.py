"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Filler settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App settings
    app_name: str = "fieldfill"
    debug: bool = False

    # Generation strategy
    use_ai: bool = True  # False = local patterns and type fallbacks only
    use_local_patterns: bool = True  # Resolve pattern-matched fields without the LLM

    # LLM settings
    default_vendor: Literal["gemini", "openai", "anthropic"] = "gemini"
    temperature: float = 0.7

    # Google Gemini
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Anthropic
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-sonnet-4-20250514"

    # Execution settings
    generation_timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_base_delay_seconds: float = 1.0

    # Cache settings
    cache_enabled: bool = True
    cache_ttl_seconds: int = 86400  # 24 hours
    cache_prefix: str = "ff_"
    cache_persist_path: Optional[str] = None
    cache_max_entries: Optional[int] = None

    # Fill defaults
    array_length: int = 3
    locale: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
