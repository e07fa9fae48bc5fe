"""Override models.

An override replaces pattern-based or AI generation for a field. Callers
usually write overrides in a loose form::

    {"status": {"enum": ["active", "closed"]}, "user.email": "a@b.c"}

``coerce_override`` turns each loose value into exactly one tagged variant, so
resolution downstream dispatches on ``kind`` alone.
"""

import random
from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class LiteralOverride(BaseModel):
    """Use a fixed value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    value: Any = None


class GeneratorOverride(BaseModel):
    """Call a zero-argument function for every fill."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["generator"] = "generator"
    generator: Callable[[], Any]


class EnumOverride(BaseModel):
    """Sample uniformly from a fixed set of values."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["enum"] = "enum"
    choices: List[Any] = Field(default_factory=list)


class RangeOverride(BaseModel):
    """Numeric bounds. Must be turned into a generator before resolution."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["range"] = "range"
    min: Union[int, float]
    max: Union[int, float]
    integer: Optional[bool] = None

    def as_generator(self) -> GeneratorOverride:
        """Build a sampler for these bounds.

        Integers are produced when ``integer`` is set, or when it is unset and
        both bounds are ints.
        """
        low, high = self.min, self.max
        integer = self.integer
        if integer is None:
            integer = isinstance(low, int) and isinstance(high, int)

        if integer:
            return GeneratorOverride(generator=lambda: random.randint(int(low), int(high)))
        return GeneratorOverride(generator=lambda: random.uniform(float(low), float(high)))


OverrideSpec = Annotated[
    Union[LiteralOverride, GeneratorOverride, EnumOverride, RangeOverride],
    Field(discriminator="kind"),
]

_VARIANTS = (LiteralOverride, GeneratorOverride, EnumOverride, RangeOverride)


def coerce_override(raw: Any) -> OverrideSpec:
    """Convert a loosely written override into a tagged variant."""
    if isinstance(raw, _VARIANTS):
        return raw

    if callable(raw):
        return GeneratorOverride(generator=raw)

    if isinstance(raw, dict):
        if callable(raw.get("generator")):
            return GeneratorOverride(generator=raw["generator"])
        if "value" in raw:
            return LiteralOverride(value=raw["value"])
        if isinstance(raw.get("enum"), (list, tuple)):
            return EnumOverride(choices=list(raw["enum"]))
        if "min" in raw and "max" in raw:
            return RangeOverride(min=raw["min"], max=raw["max"]).as_generator()

    return LiteralOverride(value=raw)


def coerce_overrides(raw: Optional[Dict[str, Any]]) -> Dict[str, OverrideSpec]:
    """Coerce every value of an override mapping."""
    return {key: coerce_override(value) for key, value in (raw or {}).items()}
