"""Field Filler - orchestrates extraction, overrides, patterns, cache and providers."""

import asyncio
import copy
import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional

from fieldfill.core.config import Settings, get_settings
from fieldfill.core.exceptions import ConfigurationError, GenerationError
from fieldfill.models.field import FieldDescriptor
from fieldfill.models.generation import GenerationResult
from fieldfill.models.options import FillOptions, GenerateOptions
from fieldfill.models.overrides import OverrideSpec, coerce_override, coerce_overrides
from fieldfill.models.pattern import PatternMatcher
from fieldfill.services.cache import CacheManager
from fieldfill.services.extractor import extract_empty_fields
from fieldfill.services.llm_client import LLMClientFactory
from fieldfill.services.overrides import OverrideResolver, merge_overrides, resolve_override
from fieldfill.services.paths import set_path
from fieldfill.services.patterns import PatternRegistry, default_registry, sample_for_type
from fieldfill.services.providers import (
    BaseGenerationProvider,
    LLMProvider,
    LocalProvider,
    Schema,
)

logger = logging.getLogger(__name__)


class FieldFiller:
    """Fills missing values in records and generates records from schemas."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider: Optional[BaseGenerationProvider] = None,
        cache: Optional[CacheManager] = None,
        registry: Optional[PatternRegistry] = None,
        overrides: Optional[Mapping[str, Any]] = None,
        extra_patterns: Optional[Iterable[PatternMatcher]] = None,
    ):
        self.settings = settings or get_settings()

        registry = registry or default_registry()
        if extra_patterns:
            registry = registry.with_matchers(extra_patterns)
        self.registry = registry

        self.provider = provider or self._create_provider()
        self.cache = cache or CacheManager(
            enabled=self.settings.cache_enabled,
            ttl=self.settings.cache_ttl_seconds,
            prefix=self.settings.cache_prefix,
            persist_path=self.settings.cache_persist_path,
            max_entries=self.settings.cache_max_entries,
        )
        self._overrides: Dict[str, OverrideSpec] = coerce_overrides(dict(overrides or {}))

        logger.info(f"FieldFiller initialized with {type(self.provider).__name__}")

    def _create_provider(self) -> BaseGenerationProvider:
        """Create the provider described by settings.

        Raises:
            ConfigurationError: If AI is enabled without a credential.
        """
        if not self.settings.use_ai:
            return LocalProvider(self.registry, array_length=self.settings.array_length)

        client = LLMClientFactory.get_client(settings=self.settings)
        return LLMProvider(
            client,
            temperature=self.settings.temperature,
            locale=self.settings.locale,
        )

    async def fill(self, record: Any, options: Optional[FillOptions] = None) -> Any:
        """Fill null/empty values in a record.

        The input is never mutated; a filled deep copy is returned.

        Args:
            record: Dict (or list of dicts) to fill.
            options: Field filters, context and per-call overrides.

        Returns:
            The filled copy.

        Raises:
            ConfigurationError: For an invalid override.
            GenerationError: If the provider failed on every attempt.
        """
        options = options or FillOptions()
        cloned = copy.deepcopy(record)

        fields = self._filter_fields(extract_empty_fields(cloned), options)
        if not fields:
            logger.debug("No fields to fill")
            return cloned

        logger.debug(f"Found {len(fields)} fields to fill: {[f.path for f in fields]}")

        resolver = OverrideResolver(merge_overrides(self._overrides, options.overrides))
        array_length = options.array_length or self.settings.array_length
        values: Dict[str, Any] = {}
        pending: List[FieldDescriptor] = []

        for field in fields:
            applied, value = resolver.resolve_for(field)
            if applied:
                values[field.path] = value
                continue

            matcher = self.registry.find_match(field.key) if self.settings.use_local_patterns else None
            if matcher:
                values[field.path] = sample_for_type(matcher.generate, field.type, array_length)
                continue

            pending.append(field)

        if pending:
            generated = await self._generate_for_fields(
                pending, options.context, resolver.overrides, array_length
            )
            for field in pending:
                if field.path in generated:
                    values[field.path] = generated[field.path]
                else:
                    logger.debug(f"Provider returned no value for '{field.path}'")

        for field in fields:
            if field.path in values:
                set_path(cloned, field.path, values[field.path])

        return cloned

    async def generate(self, schema: Schema, options: Optional[GenerateOptions] = None) -> Any:
        """Generate one record from a schema or type definition."""
        options = options or GenerateOptions()

        result = await self._with_retry(
            lambda: self.provider.generate_from_schema(schema, 1, options.context),
            "Schema generation",
        )

        data = result.data
        if isinstance(data, list) and data:
            data = data[0]

        resolver = OverrideResolver(merge_overrides(self._overrides, options.overrides))
        return self._apply_overrides(data, resolver)

    async def generate_many(
        self,
        schema: Schema,
        count: int,
        options: Optional[GenerateOptions] = None,
    ) -> List[Any]:
        """Generate ``count`` records from a schema or type definition."""
        if count < 1:
            raise ConfigurationError("count must be at least 1")
        options = options or GenerateOptions()

        result = await self._with_retry(
            lambda: self.provider.generate_from_schema(schema, count, options.context),
            "Schema generation",
        )

        records = result.data if isinstance(result.data, list) else [result.data]
        resolver = OverrideResolver(merge_overrides(self._overrides, options.overrides))
        return [self._apply_overrides(record, resolver) for record in records]

    # Overrides

    def add_override(self, key: str, value: Any) -> None:
        """Add an instance-wide override for a field name or path."""
        self._overrides[key] = coerce_override(value)

    def remove_override(self, key: str) -> None:
        """Remove an instance-wide override."""
        self._overrides.pop(key, None)

    def get_overrides(self) -> Dict[str, OverrideSpec]:
        """Get all instance-wide overrides."""
        return dict(self._overrides)

    def clear_cache(self) -> None:
        """Clear cached generation results."""
        self.cache.clear()

    # Internals

    def _filter_fields(
        self, fields: List[FieldDescriptor], options: FillOptions
    ) -> List[FieldDescriptor]:
        if options.null_only:
            fields = [f for f in fields if f.is_null]
        if options.undefined_only:
            fields = [f for f in fields if f.is_undefined]
        if options.empty_strings_only:
            fields = [f for f in fields if f.value == "" and f.type == "string"]
        if not options.fill_empty_arrays:
            fields = [f for f in fields if f.type != "array"]
        return fields

    async def _generate_for_fields(
        self,
        fields: List[FieldDescriptor],
        context: Optional[str],
        overrides: Mapping[str, OverrideSpec],
        array_length: int,
    ) -> Dict[str, Any]:
        """Generate values for a batch of fields, consulting the cache first."""
        cache_key = self.cache.generate_key(fields) if self.provider.cacheable else None

        if cache_key:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Using cached result for {len(fields)} fields")
                return copy.deepcopy(cached)

        logger.info(f"Generating {len(fields)} fields with {type(self.provider).__name__}")
        result = await self._with_retry(
            lambda: self.provider.generate_for_fields(fields, context, overrides, array_length),
            "Field generation",
        )

        if cache_key:
            self.cache.set(cache_key, copy.deepcopy(result.data))
        return result.data

    async def _with_retry(
        self,
        call: Callable[[], Awaitable[GenerationResult]],
        operation: str,
    ) -> GenerationResult:
        """Run a provider call with timeout and exponential backoff.

        Raises:
            ConfigurationError: Immediately, without retrying.
            GenerationError: When every attempt failed.
        """
        attempts = max(1, self.settings.max_retries)
        timeout = self.settings.generation_timeout_seconds
        last_error: Optional[str] = None

        for attempt in range(attempts):
            try:
                result = await asyncio.wait_for(call(), timeout=timeout)
                if result.success and result.data is not None:
                    return result
                last_error = result.error or "Provider returned no data"
                logger.warning(f"{operation} failed: {last_error}, attempt {attempt + 1}")

            except asyncio.TimeoutError:
                last_error = f"Timeout after {timeout}s"
                logger.warning(f"{operation} timed out, attempt {attempt + 1}")

            except ConfigurationError:
                raise

            except Exception as e:
                last_error = str(e)
                logger.exception(f"{operation} unexpected error: {e}")

            if attempt < attempts - 1:
                await asyncio.sleep(self.settings.retry_base_delay_seconds * (2**attempt))

        raise GenerationError(
            f"{operation} failed after {attempts} attempts: {last_error}",
            attempts=attempts,
        )

    def _apply_overrides(self, record: Any, resolver: OverrideResolver) -> Any:
        """Replace values of existing keys that an override addresses."""
        if not resolver:
            return record
        record = copy.deepcopy(record)
        self._override_walk(record, "", resolver)
        return record

    def _override_walk(self, node: Any, path: str, resolver: OverrideResolver) -> None:
        if isinstance(node, dict):
            for key in list(node):
                child_path = f"{path}.{key}" if path else str(key)
                spec = resolver.lookup(str(key), child_path)
                if spec is not None:
                    node[key] = resolve_override(spec)
                else:
                    self._override_walk(node[key], child_path, resolver)

        elif isinstance(node, list):
            for index, item in enumerate(node):
                item_path = f"{path}[{index}]" if path else str(index)
                self._override_walk(item, item_path, resolver)


@lru_cache
def get_filler() -> FieldFiller:
    """Get the filler instance shared by the HTTP service."""
    return FieldFiller()
