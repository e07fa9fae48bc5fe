"""Pytest configuration and fixtures."""

import os
from typing import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["USE_AI"] = "false"
os.environ["CACHE_PERSIST_PATH"] = ""

from fieldfill.core.config import Settings  # noqa: E402
from fieldfill.models.generation import GenerationResult, TokenUsage  # noqa: E402
from fieldfill.services.filler import FieldFiller  # noqa: E402


@pytest.fixture(autouse=True)
def reset_shared_state() -> Generator[None, None, None]:
    """Reset module-level singletons between tests."""
    import fieldfill
    from fieldfill.services.llm_client import LLMClientFactory

    fieldfill.reset()
    LLMClientFactory.clear_cache()
    yield
    fieldfill.reset()
    LLMClientFactory.clear_cache()


@pytest.fixture
def local_settings() -> Settings:
    """Settings for offline generation with instant retries."""
    return Settings(
        _env_file=None,
        use_ai=False,
        use_local_patterns=True,
        cache_enabled=True,
        cache_persist_path=None,
        max_retries=3,
        retry_base_delay_seconds=0.0,
        generation_timeout_seconds=5.0,
        array_length=3,
    )


@pytest.fixture
def filler(local_settings: Settings) -> FieldFiller:
    """Filler backed by the local provider."""
    return FieldFiller(settings=local_settings)


@pytest.fixture
def mock_provider() -> MagicMock:
    """Cacheable provider that returns a value for 'zorbix'."""
    provider = MagicMock()
    provider.cacheable = True
    provider.generate_for_fields = AsyncMock(
        return_value=GenerationResult(
            success=True,
            data={"zorbix": "generated"},
            token_usage=TokenUsage(input_tokens=100, output_tokens=50, total_tokens=150),
        )
    )
    provider.generate_from_schema = AsyncMock(
        return_value=GenerationResult(success=True, data={"email": "ai@example.com", "plan": "pro"})
    )
    return provider


@pytest.fixture
def ai_filler(local_settings: Settings, mock_provider: MagicMock) -> FieldFiller:
    """Filler whose remaining fields go to the mock provider."""
    return FieldFiller(settings=local_settings, provider=mock_provider)


@pytest.fixture
def mock_llm_client():
    """Mock LLM client that returns JSON data."""
    client = AsyncMock()
    client.extract_json = AsyncMock(
        return_value=(
            {"user.nickname": "Ace"},
            TokenUsage(input_tokens=100, output_tokens=50, total_tokens=150),
        )
    )
    return client


@pytest.fixture
def app_client(local_settings: Settings, filler: FieldFiller) -> Generator[TestClient, None, None]:
    """Create test client wired to a local filler."""
    from fieldfill.core.config import get_settings
    from fieldfill.main import app
    from fieldfill.services.filler import get_filler

    app.dependency_overrides[get_filler] = lambda: filler
    app.dependency_overrides[get_settings] = lambda: local_settings

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
