"""Generation providers - produce values for fields the filler cannot resolve itself.

``LLMProvider`` asks a remote model; ``LocalProvider`` uses the pattern
registry plus type-based fallbacks and needs no network access.
"""

import json
import logging
import random
import re
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Union

from fieldfill.models.field import FieldDescriptor
from fieldfill.models.generation import GenerationResult
from fieldfill.models.overrides import EnumOverride, LiteralOverride, OverrideSpec
from fieldfill.services.llm_client import BaseLLMClient, LLMClientError
from fieldfill.services.overrides import OverrideResolver
from fieldfill.services.patterns import (
    GENERATORS,
    PatternRegistry,
    default_registry,
    sample_for_type,
)

logger = logging.getLogger(__name__)

Schema = Union[str, Dict[str, Any]]

FIELDS_SYSTEM_PROMPT = """You are a smart mock data generator. You receive a list of empty \
fields from a JSON document and return realistic values for them.

Rules:
1. Infer the kind of value from the key name and its parent key \
(e.g. "email" -> email address, "firstName" -> person name).
2. Common conventions:
   - *email* -> valid email address
   - *name* -> human name
   - *phone*, *mobile* -> phone number
   - *date*, *At -> ISO 8601 date string
   - *price*, *amount*, *cost* -> decimal number
   - *url*, *link* -> valid URL
   - *id*, *Id -> unique identifier
   - *address*, *city*, *country* -> location values
   - is*, has*, can* -> boolean
   - fields marked as arrays -> non-empty JSON arrays
3. Return a single JSON object whose keys are the field paths exactly as given.

Example output:
{"user.email": "john.doe@example.com", "user.firstName": "John"}"""

SCHEMA_SYSTEM_PROMPT = """You are a mock data generator. You receive a schema or type \
definition and return realistic records that conform to it.

Rules:
1. Generate realistic, contextually appropriate values based on field names.
2. Emails, URLs, phone numbers and ISO 8601 dates must be well formed.
3. Identifiers must be unique across records.
4. Make the data diverse, not repetitive."""


class BaseGenerationProvider(ABC):
    """Abstract base class for generation providers."""

    # Whether results may be reused for another fill with the same field set
    cacheable: bool = True

    @abstractmethod
    async def generate_for_fields(
        self,
        fields: List[FieldDescriptor],
        context: Optional[str] = None,
        overrides: Optional[Mapping[str, OverrideSpec]] = None,
        array_length: Optional[int] = None,
    ) -> GenerationResult:
        """Generate values for missing fields.

        Args:
            array_length: Number of items for empty-array fields; providers
                fall back to their own default when not given.

        Returns:
            Result whose ``data`` maps field paths to values. Paths may be
            missing from ``data``; those fields stay unfilled.
        """
        pass

    @abstractmethod
    async def generate_from_schema(
        self,
        schema: Schema,
        count: int = 1,
        context: Optional[str] = None,
    ) -> GenerationResult:
        """Generate whole records from a schema.

        Returns:
            Result whose ``data`` is one record when ``count`` is 1, else a
            list of records.
        """
        pass


class LLMProvider(BaseGenerationProvider):
    """Remote generation through an LLM client."""

    cacheable = True

    def __init__(
        self,
        client: BaseLLMClient,
        temperature: float = 0.7,
        locale: Optional[str] = None,
    ):
        self.client = client
        self.temperature = temperature
        self.locale = locale

    async def generate_for_fields(
        self,
        fields: List[FieldDescriptor],
        context: Optional[str] = None,
        overrides: Optional[Mapping[str, OverrideSpec]] = None,
        array_length: Optional[int] = None,
    ) -> GenerationResult:
        prompt = self.build_fields_prompt(fields, context, overrides, array_length)
        try:
            data, usage = await self.client.extract_json(
                FIELDS_SYSTEM_PROMPT, prompt, temperature=self.temperature
            )
        except LLMClientError as e:
            return GenerationResult(success=False, error=str(e))

        if not isinstance(data, dict) or not data:
            return GenerationResult(success=False, error="Failed to parse AI response")

        logger.info(
            f"LLM generated {len(data)} values for {len(fields)} fields "
            f"(tokens: {usage.total_tokens})"
        )
        return GenerationResult(success=True, data=data, token_usage=usage)

    async def generate_from_schema(
        self,
        schema: Schema,
        count: int = 1,
        context: Optional[str] = None,
    ) -> GenerationResult:
        prompt = self.build_schema_prompt(schema, count, context)
        try:
            data, usage = await self.client.extract_json(
                SCHEMA_SYSTEM_PROMPT, prompt, temperature=self.temperature
            )
        except LLMClientError as e:
            return GenerationResult(success=False, error=str(e))

        if count == 1 and isinstance(data, list) and len(data) == 1:
            data = data[0]
        if count == 1 and not isinstance(data, dict):
            return GenerationResult(success=False, error="Expected a JSON object")
        if count > 1 and not isinstance(data, list):
            return GenerationResult(success=False, error="Expected a JSON array")

        return GenerationResult(success=True, data=data, token_usage=usage)

    def build_fields_prompt(
        self,
        fields: List[FieldDescriptor],
        context: Optional[str] = None,
        overrides: Optional[Mapping[str, OverrideSpec]] = None,
        array_length: Optional[int] = None,
    ) -> str:
        """Describe the fields to fill, one line per field."""
        lines = ["FIELDS TO FILL:"]
        for field in fields:
            line = f'- "{field.path}": key name is "{field.key}"'
            if field.parent_key:
                line += f', parent is "{field.parent_key}"'
            if field.type not in ("null", "undefined"):
                line += f", expected type: {field.type}"
            lines.append(line)

        if context:
            lines.append(f"\nCONTEXT: {context}")
        if self.locale:
            lines.append(f"LOCALE: {self.locale}")
        if array_length and any(field.type == "array" for field in fields):
            lines.append(f"ARRAY LENGTH: {array_length} items per array")

        constraints = _describe_overrides(overrides or {})
        if constraints:
            lines.append("\nFIELD OVERRIDES (use these exactly):")
            lines.append(json.dumps(constraints, indent=2, default=str))

        return "\n".join(lines)

    def build_schema_prompt(self, schema: Schema, count: int, context: Optional[str]) -> str:
        """Describe the schema and how many records to return."""
        schema_text = schema if isinstance(schema, str) else json.dumps(schema, indent=2)
        parts = [f"SCHEMA:\n{schema_text}"]
        if context:
            parts.append(f"CONTEXT: {context}")
        if self.locale:
            parts.append(f"LOCALE: {self.locale}")
        if count == 1:
            parts.append("Return a single JSON object.")
        else:
            parts.append(f"Return a JSON array with exactly {count} objects.")
        return "\n\n".join(parts)


def _describe_overrides(overrides: Mapping[str, OverrideSpec]) -> Dict[str, Any]:
    described: Dict[str, Any] = {}
    for key, spec in overrides.items():
        if isinstance(spec, LiteralOverride):
            described[key] = spec.value
        elif isinstance(spec, EnumOverride):
            described[key] = {"one_of": spec.choices}
    return described


# Best-effort extraction of "name?: type" members from interface-like text
_PROPERTY = re.compile(r"(\w+)\s*\??\s*:\s*([^;,\n]+)")
_QUOTED = re.compile(r"""^["'](.*)["']$""")


def parse_schema_string(schema: str) -> Dict[str, str]:
    """Extract property names and type strings from a type definition."""
    properties: Dict[str, str] = {}
    for name, type_text in _PROPERTY.findall(schema):
        properties[name] = type_text.strip().strip("{}").strip()
    return properties


class LocalProvider(BaseGenerationProvider):
    """Offline generation from the pattern registry and type fallbacks."""

    cacheable = False

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        array_length: int = 3,
    ):
        self.registry = registry or default_registry()
        self.array_length = array_length

    async def generate_for_fields(
        self,
        fields: List[FieldDescriptor],
        context: Optional[str] = None,
        overrides: Optional[Mapping[str, OverrideSpec]] = None,
        array_length: Optional[int] = None,
    ) -> GenerationResult:
        resolver = OverrideResolver(overrides)
        length = array_length or self.array_length
        data: Dict[str, Any] = {}

        for field in fields:
            applied, value = resolver.resolve_for(field)
            if applied:
                data[field.path] = value
                continue

            matcher = self.registry.find_match(field.key)
            if matcher:
                data[field.path] = sample_for_type(matcher.generate, field.type, length)
            else:
                data[field.path] = self.fallback(field, length)

        return GenerationResult(success=True, data=data)

    async def generate_from_schema(
        self,
        schema: Schema,
        count: int = 1,
        context: Optional[str] = None,
    ) -> GenerationResult:
        schema_obj = parse_schema_string(schema) if isinstance(schema, str) else schema
        if not isinstance(schema_obj, dict):
            return GenerationResult(success=False, error="Schema must be a string or an object")

        records = [self.generate_object(schema_obj) for _ in range(count)]
        return GenerationResult(success=True, data=records[0] if count == 1 else records)

    def generate_object(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        """Generate one record from a schema object."""
        record: Dict[str, Any] = {}

        for key, spec in schema.items():
            matcher = self.registry.find_match(key)
            if matcher:
                record[key] = matcher.generate()
            elif isinstance(spec, dict):
                record[key] = self.generate_object(spec)
            elif isinstance(spec, list):
                if spec and isinstance(spec[0], dict):
                    record[key] = [self.generate_object(spec[0]) for _ in range(self.array_length)]
                else:
                    record[key] = self._sample_list()
            elif isinstance(spec, str):
                record[key] = self.generate_from_type(spec)
            else:
                record[key] = GENERATORS["title"]()

        return record

    def generate_from_type(self, type_name: str) -> Any:
        """Generate a value from a type string such as ``number`` or ``string[]``."""
        normalized = type_name.strip().lower()

        if "|" in type_name:
            options = [part.strip() for part in type_name.split("|") if part.strip()]
            literals = [m.group(1) for m in map(_QUOTED.match, options) if m]
            if literals:
                return random.choice(literals)
            concrete = [o for o in options if o.lower() not in ("null", "undefined")]
            return self.generate_from_type(concrete[0] if concrete else "string")

        if normalized.endswith("[]"):
            inner = type_name.strip()[:-2]
            return [self.generate_from_type(inner) for _ in range(self.array_length)]
        if normalized.startswith("array<") and normalized.endswith(">"):
            inner = type_name.strip()[6:-1]
            return [self.generate_from_type(inner) for _ in range(self.array_length)]

        if normalized == "string":
            return GENERATORS["title"]()
        if normalized in ("number", "int", "integer", "float"):
            return random.randint(1, 1000)
        if normalized in ("boolean", "bool"):
            return random.random() > 0.5
        if normalized == "date":
            return GENERATORS["datetime"]()

        return GENERATORS["title"]()

    def fallback(self, field: FieldDescriptor, array_length: Optional[int] = None) -> Any:
        """Generate a value for a field no pattern matched."""
        if field.type == "string":
            return GENERATORS["title"]()
        if field.type == "number":
            return random.randint(1, 100)
        if field.type == "boolean":
            return random.random() > 0.5
        if field.type == "array":
            return self._sample_list(array_length)
        if field.type == "object":
            return {}

        key = field.key.lower()
        if "id" in key:
            return str(uuid.uuid4())
        if "name" in key:
            return GENERATORS["full_name"]()
        if "email" in key:
            return GENERATORS["email"]()
        if "date" in key or "time" in key:
            return GENERATORS["datetime"]()
        if "url" in key or "link" in key:
            return GENERATORS["url"]()
        if "phone" in key:
            return GENERATORS["phone"]()
        if "price" in key or "amount" in key:
            return GENERATORS["price"]()
        if "count" in key or "total" in key:
            return GENERATORS["count"]()
        if key.startswith("is") or key.startswith("has"):
            return random.random() > 0.5

        return GENERATORS["title"]()

    def _sample_list(self, array_length: Optional[int] = None) -> List[str]:
        return [GENERATORS["title"]() for _ in range(array_length or self.array_length)]
