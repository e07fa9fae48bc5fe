"""fieldfill - fill null, missing and empty values in JSON-like records.

Quick start:
    import fieldfill

    fieldfill.init(settings=Settings(use_ai=False))
    user = await fieldfill.fill({"name": None, "email": ""})

The module-level helpers wrap one shared ``FieldFiller``; construct a
``FieldFiller`` directly to manage instances yourself.
"""

from typing import Any, Iterable, List, Mapping, Optional

from fieldfill.core.config import Settings, get_settings
from fieldfill.core.exceptions import (
    AddressingError,
    CacheError,
    ConfigurationError,
    ExtractionError,
    FieldFillError,
    GenerationError,
)
from fieldfill.interceptors import (
    FillingTransport,
    FillResponseMiddleware,
    InterceptorConfig,
    create_filling_client,
    should_intercept,
)
from fieldfill.models import (
    UNDEFINED,
    EnumOverride,
    FieldDescriptor,
    FillOptions,
    GenerateOptions,
    GeneratorOverride,
    LiteralOverride,
    PatternMatcher,
    RangeOverride,
)
from fieldfill.services.cache import CacheManager
from fieldfill.services.extractor import extract_empty_fields, is_empty
from fieldfill.services.filler import FieldFiller
from fieldfill.services.paths import get_path, set_path
from fieldfill.services.patterns import PatternRegistry, default_registry
from fieldfill.services.providers import BaseGenerationProvider, LLMProvider, LocalProvider

_API_KEY_SETTINGS = {
    "gemini": "google_api_key",
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}

_default_instance: Optional[FieldFiller] = None


def init(
    settings: Optional[Settings] = None,
    provider: Optional[BaseGenerationProvider] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    extra_patterns: Optional[Iterable[PatternMatcher]] = None,
) -> FieldFiller:
    """Create the shared filler, replacing any previous one."""
    global _default_instance
    _default_instance = FieldFiller(
        settings=settings,
        provider=provider,
        overrides=overrides,
        extra_patterns=extra_patterns,
    )
    return _default_instance


def get_instance() -> FieldFiller:
    """Get the shared filler.

    Raises:
        ConfigurationError: If ``init`` or ``quick_setup`` was not called.
    """
    if _default_instance is None:
        raise ConfigurationError(
            "fieldfill not initialized. Call fieldfill.init() first or create a FieldFiller."
        )
    return _default_instance


def reset() -> None:
    """Forget the shared filler."""
    global _default_instance
    _default_instance = None


def quick_setup(api_key: str, vendor: str = "gemini", **settings_values: Any) -> FieldFiller:
    """Initialize the shared filler for AI generation with one credential.

    Args:
        api_key: Credential for ``vendor``.
        vendor: gemini, openai or anthropic.
        **settings_values: Further ``Settings`` fields, e.g. ``locale="de-DE"``.
    """
    if vendor not in _API_KEY_SETTINGS:
        raise ConfigurationError(f"Unknown vendor: {vendor}")

    settings = Settings(
        use_ai=True,
        default_vendor=vendor,
        **{_API_KEY_SETTINGS[vendor]: api_key},
        **settings_values,
    )
    return init(settings=settings)


async def fill(record: Any, options: Optional[FillOptions] = None) -> Any:
    """Fill a record with the shared filler."""
    return await get_instance().fill(record, options)


async def generate(schema: Any, options: Optional[GenerateOptions] = None) -> Any:
    """Generate one record with the shared filler."""
    return await get_instance().generate(schema, options)


async def generate_many(
    schema: Any,
    count: int,
    options: Optional[GenerateOptions] = None,
) -> List[Any]:
    """Generate several records with the shared filler."""
    return await get_instance().generate_many(schema, count, options)


__all__ = [
    # Convenience layer
    "init",
    "get_instance",
    "reset",
    "quick_setup",
    "fill",
    "generate",
    "generate_many",
    # Core
    "FieldFiller",
    "Settings",
    "get_settings",
    "CacheManager",
    "PatternRegistry",
    "default_registry",
    "BaseGenerationProvider",
    "LLMProvider",
    "LocalProvider",
    # Models
    "UNDEFINED",
    "FieldDescriptor",
    "FillOptions",
    "GenerateOptions",
    "PatternMatcher",
    "LiteralOverride",
    "GeneratorOverride",
    "EnumOverride",
    "RangeOverride",
    # Utilities
    "extract_empty_fields",
    "is_empty",
    "get_path",
    "set_path",
    # Interception
    "InterceptorConfig",
    "should_intercept",
    "FillingTransport",
    "create_filling_client",
    "FillResponseMiddleware",
    # Errors
    "FieldFillError",
    "AddressingError",
    "ConfigurationError",
    "ExtractionError",
    "GenerationError",
    "CacheError",
]
