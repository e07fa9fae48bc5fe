"""Admin API routes for service management."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fieldfill.core.config import Settings, get_settings
from fieldfill.services.filler import FieldFiller, get_filler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

_API_KEY_ATTRS = {
    "gemini": "google_api_key",
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}
_MODEL_ATTRS = {
    "gemini": "gemini_model",
    "openai": "openai_model",
    "anthropic": "anthropic_model",
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    use_ai: bool
    ai_configured: bool
    vendor: str


class CacheClearResponse(BaseModel):
    """Cache clear response."""

    status: str
    entries_cleared: int


class ConfigResponse(BaseModel):
    """Effective configuration, without credentials."""

    use_ai: bool
    use_local_patterns: bool
    vendor: str
    model: str
    api_key_configured: bool
    temperature: float
    generation_timeout_seconds: float
    max_retries: int
    cache_enabled: bool
    cache_ttl_seconds: int
    cache_persist_path: Optional[str]
    array_length: int
    locale: Optional[str]


def _api_key_configured(settings: Settings) -> bool:
    return bool(getattr(settings, _API_KEY_ATTRS[settings.default_vendor]))


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check service health and whether AI generation is available."""
    return HealthResponse(
        status="healthy",
        use_ai=settings.use_ai,
        ai_configured=_api_key_configured(settings),
        vendor=settings.default_vendor,
    )


@router.post("/cache/clear", response_model=CacheClearResponse)
async def clear_cache(
    filler: Annotated[FieldFiller, Depends(get_filler)],
) -> CacheClearResponse:
    """Drop every cached generation result."""
    size = filler.cache.stats().size
    filler.clear_cache()
    logger.info(f"Cleared {size} cache entries")
    return CacheClearResponse(status="success", entries_cleared=size)


@router.get("/config", response_model=ConfigResponse)
async def get_config(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConfigResponse:
    """Show effective generation and cache settings."""
    return ConfigResponse(
        use_ai=settings.use_ai,
        use_local_patterns=settings.use_local_patterns,
        vendor=settings.default_vendor,
        model=getattr(settings, _MODEL_ATTRS[settings.default_vendor]),
        api_key_configured=_api_key_configured(settings),
        temperature=settings.temperature,
        generation_timeout_seconds=settings.generation_timeout_seconds,
        max_retries=settings.max_retries,
        cache_enabled=settings.cache_enabled,
        cache_ttl_seconds=settings.cache_ttl_seconds,
        cache_persist_path=settings.cache_persist_path,
        array_length=settings.array_length,
        locale=settings.locale,
    )
