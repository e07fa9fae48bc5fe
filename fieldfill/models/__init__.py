"""Pydantic models package."""

from fieldfill.models.cache import CacheEntry, CacheStats
from fieldfill.models.field import UNDEFINED, FieldDescriptor
from fieldfill.models.generation import GenerationResult, TokenUsage
from fieldfill.models.options import FillOptions, GenerateOptions
from fieldfill.models.pattern import PatternMatcher
from fieldfill.models.overrides import (
    EnumOverride,
    GeneratorOverride,
    LiteralOverride,
    OverrideSpec,
    RangeOverride,
    coerce_override,
    coerce_overrides,
)

__all__ = [
    # Field models
    "UNDEFINED",
    "FieldDescriptor",
    "GenerationResult",
    "TokenUsage",
    # Option models
    "FillOptions",
    "GenerateOptions",
    # Override models
    "OverrideSpec",
    "LiteralOverride",
    "GeneratorOverride",
    "EnumOverride",
    "RangeOverride",
    "coerce_override",
    "coerce_overrides",
    # Cache models
    "CacheEntry",
    "CacheStats",
    # Pattern models
    "PatternMatcher",
]
