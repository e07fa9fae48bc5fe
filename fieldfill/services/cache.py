"""Cache Manager - reuse generated values for already-seen field sets.

Keys depend only on the *shape* of the missing-field set (paths and keys),
never on record contents. Expiry is lazy: entries are checked when read and
there is no background sweep. The cache is shared by concurrent fills without
locking; concurrent writes to one key are last-write-wins.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from fieldfill.core.exceptions import CacheError
from fieldfill.models.cache import CacheEntry, CacheStats
from fieldfill.models.field import FieldDescriptor

logger = logging.getLogger(__name__)

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = 0xFFFFFFFFFFFFFFFF
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def stable_hash(text: str) -> str:
    """64-bit FNV-1a hash of ``text``, base36 encoded.

    Unlike the built-in ``hash()`` this is identical across processes.
    """
    value = _FNV_OFFSET
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK_64

    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits)) or "0"


def derive_cache_key(fields: Iterable[FieldDescriptor], prefix: str = "") -> str:
    """Build a cache key from a descriptor set, independent of its order."""
    parts = sorted(f"{field.path}:{field.key}" for field in fields)
    return prefix + stable_hash("|".join(parts))


class CacheManager:
    """In-memory TTL cache with optional JSON file persistence."""

    def __init__(
        self,
        enabled: bool = True,
        ttl: float = 86400,
        prefix: str = "ff_",
        persist_path: Optional[str] = None,
        max_entries: Optional[int] = None,
    ):
        self.enabled = enabled
        self.ttl = ttl
        self.prefix = prefix
        self.max_entries = max_entries
        self.persist_path = Path(persist_path) if persist_path else None
        self._entries: Dict[str, CacheEntry] = {}

        if self.persist_path:
            self._load()

    def generate_key(self, fields: Iterable[FieldDescriptor]) -> str:
        """Generate a cache key for a set of fields."""
        return derive_cache_key(fields, self.prefix)

    def get(self, key: str) -> Optional[Any]:
        """Get a cached value, or None on miss or expiry."""
        if not self.enabled:
            return None

        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired():
            logger.debug(f"Cache entry expired: {key}")
            del self._entries[key]
            self._save()
            return None

        return entry.value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, overwriting any existing entry."""
        if not self.enabled:
            return

        self._entries.pop(key, None)
        if self.max_entries and len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k].timestamp)
            del self._entries[oldest]

        self._entries[key] = CacheEntry(value=value, ttl=self.ttl if ttl is None else ttl)
        self._save()

    def has(self, key: str) -> bool:
        """Check if a live entry exists."""
        return self.get(key) is not None

    def delete(self, key: str) -> None:
        """Delete a specific key."""
        self._entries.pop(key, None)
        self._save()

    def clear(self) -> None:
        """Clear all entries."""
        self._entries.clear()
        self._save()

    def stats(self) -> CacheStats:
        """Get cache statistics."""
        return CacheStats(size=len(self._entries), keys=list(self._entries))

    def _read_file(self) -> Dict[str, Any]:
        try:
            return json.loads(self.persist_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CacheError(f"Cannot read cache file {self.persist_path}: {e}") from e

    def _write_file(self, payload: Dict[str, Any]) -> None:
        try:
            self.persist_path.parent.mkdir(parents=True, exist_ok=True)
            self.persist_path.write_text(json.dumps(payload), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise CacheError(f"Cannot write cache file {self.persist_path}: {e}") from e

    def _load(self) -> None:
        """Load non-expired entries from the persistence file."""
        if not self.persist_path.exists():
            return
        try:
            raw = self._read_file()
        except CacheError as e:
            logger.warning(f"{e.message}; using memory only")
            return
        if not isinstance(raw, dict):
            logger.warning(f"Ignoring malformed cache file {self.persist_path}")
            return

        now = time.time()
        for key, data in raw.items():
            if not isinstance(data, dict) or "value" not in data or "ttl" not in data:
                continue
            try:
                entry = CacheEntry(**data)
            except ValidationError as e:
                logger.warning(f"Skipping invalid cache entry '{key}': {e.error_count()} errors")
                continue
            if not entry.is_expired(now):
                self._entries[key] = entry
        logger.info(f"Loaded {len(self._entries)} cache entries from {self.persist_path}")

    def _save(self) -> None:
        """Write all entries to the persistence file."""
        if not self.persist_path:
            return
        payload = {key: entry.model_dump() for key, entry in self._entries.items()}
        try:
            self._write_file(payload)
        except CacheError as e:
            logger.warning(f"{e.message}; cache kept in memory")
