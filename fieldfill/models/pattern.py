"""Pattern matcher model."""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field


class PatternMatcher(BaseModel):
    """A named, prioritized rule pairing a key predicate with a value generator."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Stable identifier")
    priority: int = Field(default=50, description="Higher wins")
    predicate: Callable[[str], bool] = Field(..., description="Receives the lower-cased key")
    generator: Callable[[], Any] = Field(..., description="Zero-argument sampler")

    def match(self, key: str) -> bool:
        """Check the rule against a field name."""
        return bool(self.predicate(key.lower()))

    def generate(self) -> Any:
        """Sample a fresh value."""
        return self.generator()
