"""Override resolution - caller-forced values that bypass generation."""

import logging
import random
import re
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from fieldfill.core.exceptions import ConfigurationError
from fieldfill.models.field import FieldDescriptor
from fieldfill.models.overrides import (
    EnumOverride,
    GeneratorOverride,
    LiteralOverride,
    OverrideSpec,
    RangeOverride,
    coerce_overrides,
)

logger = logging.getLogger(__name__)

_INDEX_SUFFIX = re.compile(r"\[\d+\]")


def resolve_override(spec: OverrideSpec) -> Any:
    """Turn an override into a concrete value.

    Raises:
        ConfigurationError: For an empty enum, or a range that was never
            turned into a generator.
    """
    if isinstance(spec, LiteralOverride):
        return spec.value
    if isinstance(spec, GeneratorOverride):
        return spec.generator()
    if isinstance(spec, EnumOverride):
        if not spec.choices:
            raise ConfigurationError("Enum override has no values to choose from")
        return random.choice(spec.choices)
    if isinstance(spec, RangeOverride):
        raise ConfigurationError(
            f"Range override [{spec.min}, {spec.max}] must be converted with as_generator()"
        )
    raise ConfigurationError(f"Unsupported override type: {type(spec).__name__}")


def merge_overrides(
    base: Optional[Mapping[str, Any]],
    per_call: Optional[Mapping[str, Any]],
) -> Dict[str, OverrideSpec]:
    """Combine instance-wide and per-call overrides; per-call keys win."""
    merged = coerce_overrides(dict(base or {}))
    merged.update(coerce_overrides(dict(per_call or {})))
    return merged


def candidate_keys(key: str, path: str) -> Iterator[str]:
    """Yield override keys that could address a field, most qualified first.

    For ``orders[0].customer.email`` this yields ``orders[0].customer.email``,
    ``orders.customer.email``, ``customer.email`` and finally ``email``.
    """
    segments = path.split(".")
    seen = set()
    for start in range(len(segments)):
        suffix = ".".join(segments[start:])
        for candidate in (suffix, _INDEX_SUFFIX.sub("", suffix)):
            if candidate not in seen:
                seen.add(candidate)
                yield candidate
    if key not in seen:
        yield key


class OverrideResolver:
    """Looks up and resolves overrides for individual fields."""

    def __init__(self, overrides: Optional[Mapping[str, OverrideSpec]] = None):
        self.overrides: Dict[str, OverrideSpec] = dict(overrides or {})

    def __bool__(self) -> bool:
        return bool(self.overrides)

    def lookup(self, key: str, path: str) -> Optional[OverrideSpec]:
        """Find the most qualified override addressing a field."""
        if not self.overrides:
            return None
        for candidate in candidate_keys(key, path):
            spec = self.overrides.get(candidate)
            if spec is not None:
                return spec
        return None

    def resolve_for(self, field: FieldDescriptor) -> Tuple[bool, Any]:
        """Resolve the override for a descriptor.

        Returns:
            ``(True, value)`` when an override applies, else ``(False, None)``.
        """
        spec = self.lookup(field.key, field.path)
        if spec is None:
            return False, None
        logger.debug(f"Override '{spec.kind}' applied to '{field.path}'")
        return True, resolve_override(spec)
