"""Tests for override coercion and resolution."""

import pytest

from fieldfill.core.exceptions import ConfigurationError
from fieldfill.models.overrides import (
    EnumOverride,
    GeneratorOverride,
    LiteralOverride,
    RangeOverride,
    coerce_override,
)
from fieldfill.services.extractor import extract_empty_fields
from fieldfill.services.overrides import (
    OverrideResolver,
    candidate_keys,
    merge_overrides,
    resolve_override,
)


class TestCoerceOverride:
    """Tests for turning loose override values into variants."""

    def test_plain_value_is_literal(self):
        spec = coerce_override("fixed")
        assert isinstance(spec, LiteralOverride)
        assert resolve_override(spec) == "fixed"

    def test_none_is_literal(self):
        """An explicit None override means 'store None'."""
        assert resolve_override(coerce_override(None)) is None

    def test_callable_is_generator(self):
        spec = coerce_override(lambda: "called")
        assert isinstance(spec, GeneratorOverride)
        assert resolve_override(spec) == "called"

    def test_value_dict(self):
        assert resolve_override(coerce_override({"value": 7})) == 7

    def test_enum_dict(self):
        spec = coerce_override({"enum": ["a", "b"]})
        assert isinstance(spec, EnumOverride)
        assert all(resolve_override(spec) in ("a", "b") for _ in range(20))

    def test_range_dict_becomes_generator(self):
        spec = coerce_override({"min": 1, "max": 3})
        assert isinstance(spec, GeneratorOverride)

        values = [resolve_override(spec) for _ in range(50)]
        assert all(isinstance(v, int) and 1 <= v <= 3 for v in values)

    def test_float_range(self):
        spec = coerce_override({"min": 0.5, "max": 1.5})
        value = resolve_override(spec)
        assert isinstance(value, float)
        assert 0.5 <= value <= 1.5

    def test_unrecognized_dict_is_literal(self):
        assert resolve_override(coerce_override({"city": "Oslo"})) == {"city": "Oslo"}

    def test_variant_passes_through(self):
        spec = EnumOverride(choices=[1])
        assert coerce_override(spec) is spec


class TestResolveOverride:
    """Tests for resolution errors."""

    def test_empty_enum_raises(self):
        with pytest.raises(ConfigurationError):
            resolve_override(EnumOverride(choices=[]))

    def test_raw_range_raises(self):
        with pytest.raises(ConfigurationError):
            resolve_override(RangeOverride(min=1, max=2))


class TestCandidateKeys:
    """Tests for override key precedence."""

    def test_most_qualified_first(self):
        assert list(candidate_keys("email", "orders[0].customer.email")) == [
            "orders[0].customer.email",
            "orders.customer.email",
            "customer.email",
            "email",
        ]

    def test_top_level_key(self):
        assert list(candidate_keys("email", "email")) == ["email"]


class TestOverrideResolver:
    """Tests for OverrideResolver."""

    def test_path_beats_key(self):
        resolver = OverrideResolver(
            merge_overrides({"email": "any@x.io", "customer.email": "cust@x.io"}, None)
        )

        assert resolver.lookup("email", "orders[0].customer.email").value == "cust@x.io"
        assert resolver.lookup("email", "seller.email").value == "any@x.io"
        assert resolver.lookup("phone", "seller.phone") is None

    def test_resolve_for_descriptor(self):
        field = extract_empty_fields({"user": {"status": None}})[0]
        resolver = OverrideResolver(merge_overrides({"status": "active"}, None))

        assert resolver.resolve_for(field) == (True, "active")

    def test_resolve_for_missing(self):
        field = extract_empty_fields({"user": {"status": None}})[0]
        assert OverrideResolver().resolve_for(field) == (False, None)
        assert not OverrideResolver()

    def test_per_call_wins(self):
        merged = merge_overrides({"status": "instance"}, {"status": "call"})
        assert resolve_override(merged["status"]) == "call"
