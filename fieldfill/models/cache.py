"""Cache-related models."""

import time
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """A previously generated result. Immutable once written."""

    model_config = ConfigDict(frozen=True)

    value: Any = Field(..., description="Generated path-to-value mapping")
    timestamp: float = Field(default_factory=time.time, description="Creation time (epoch seconds)")
    ttl: float = Field(..., description="Time to live in seconds")

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check whether the entry outlived its ttl."""
        now = time.time() if now is None else now
        return now > self.timestamp + self.ttl


class CacheStats(BaseModel):
    """Snapshot of cache contents."""

    size: int = Field(default=0)
    keys: List[str] = Field(default_factory=list)
