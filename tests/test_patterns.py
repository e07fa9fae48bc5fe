"""Tests for the pattern registry."""

import uuid

import pytest

from fieldfill.models.pattern import PatternMatcher
from fieldfill.services.patterns import (
    GENERATORS,
    PatternRegistry,
    default_registry,
    sample_for_type,
)


@pytest.fixture
def registry() -> PatternRegistry:
    return default_registry()


class TestBuiltinPatterns:
    """Tests for the built-in pattern table."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("email", "email"),
            ("EMAIL", "email"),
            ("firstName", "first_name"),
            ("first_name", "first_name"),
            ("createdAt", "created_at"),
            ("name", "full_name"),
            ("username", "username"),
            ("contactEmail", "contains_email"),
            ("orderDate", "contains_date"),
            ("productName", "contains_name"),
            ("customerId", "suffix_id"),
            ("isActive", "prefix_is"),
            ("tags", "tags"),
        ],
    )
    def test_match_names(self, registry, key, expected):
        matcher = registry.find_match(key)
        assert matcher is not None
        assert matcher.name == expected

    def test_exclusions(self, registry):
        """Keys containing 'name' alongside 'file' or 'user' are not person names."""
        assert registry.find_match("filename") is None
        assert registry.find_match("user_name") is None

    def test_unknown_key(self, registry):
        assert registry.find_match("zorbix") is None
        assert registry.generate("zorbix") is None

    def test_generated_values(self, registry):
        assert "@" in registry.generate("email")
        assert isinstance(registry.generate("isActive"), bool)
        assert isinstance(registry.generate("price"), float)
        uuid.UUID(registry.generate("uuid"))

        tags = registry.generate("tags")
        assert isinstance(tags, list)
        assert len(tags) >= 2

    def test_orders_by_priority(self, registry):
        priorities = [m.priority for m in registry]
        assert priorities == sorted(priorities, reverse=True)

    def test_generators_are_fresh(self):
        """Each call samples again instead of returning a stored value."""
        values = {GENERATORS["uuid"]() for _ in range(5)}
        assert len(values) == 5


class TestPatternRegistry:
    """Tests for registry ordering and extension."""

    def _matcher(self, name: str, priority: int) -> PatternMatcher:
        return PatternMatcher(
            name=name, priority=priority, predicate=lambda k: True, generator=lambda: name
        )

    def test_equal_priority_keeps_declaration_order(self):
        registry = PatternRegistry([self._matcher("first", 50), self._matcher("second", 50)])
        assert registry.find_match("anything").name == "first"

    def test_higher_priority_wins(self):
        registry = PatternRegistry([self._matcher("low", 10), self._matcher("high", 99)])
        assert registry.find_match("anything").name == "high"
        assert registry.names == ["high", "low"]

    def test_deterministic(self, registry):
        """Repeated lookups of the same key agree."""
        assert len({registry.find_match("contactEmail").name for _ in range(20)}) == 1

    def test_with_matchers_returns_new_registry(self, registry):
        custom = PatternMatcher(
            name="custom_email",
            priority=200,
            predicate=lambda k: k == "email",
            generator=lambda: "fixed@example.com",
        )
        extended = registry.with_matchers([custom])

        assert extended.generate("email") == "fixed@example.com"
        assert registry.find_match("email").name == "email"
        assert len(extended) == len(registry) + 1

    def test_matcher_lowercases_key(self):
        matcher = PatternMatcher(
            name="sku", predicate=lambda k: k == "sku", generator=lambda: "SKU-1"
        )
        assert matcher.match("SKU")


class TestSampleForType:
    """Tests for sample_for_type."""

    def test_scalar_field(self):
        assert sample_for_type(lambda: 7, "null", 3) == 7

    def test_array_field_repeats_generator(self):
        values = iter(range(10))
        assert sample_for_type(lambda: next(values), "array", 3) == [0, 1, 2]

    def test_list_generator_is_kept(self):
        assert sample_for_type(lambda: ["a", "b"], "array", 5) == ["a", "b"]
