"""Tests for the module-level convenience helpers."""

from unittest.mock import patch

import pytest

import fieldfill
from fieldfill.core.exceptions import ConfigurationError
from fieldfill.services.providers import LLMProvider


class TestSharedInstance:
    """Tests for init, get_instance and reset."""

    def test_get_instance_requires_init(self):
        with pytest.raises(ConfigurationError):
            fieldfill.get_instance()

    def test_init_and_reset(self, local_settings):
        filler = fieldfill.init(settings=local_settings)
        assert fieldfill.get_instance() is filler

        fieldfill.reset()
        with pytest.raises(ConfigurationError):
            fieldfill.get_instance()

    @pytest.mark.asyncio
    async def test_module_level_helpers(self, local_settings):
        fieldfill.init(settings=local_settings, overrides={"plan": "basic"})

        filled = await fieldfill.fill({"email": None, "plan": None})
        one = await fieldfill.generate({"email": "string"})
        many = await fieldfill.generate_many({"email": "string"}, 2)

        assert "@" in filled["email"]
        assert filled["plan"] == "basic"
        assert "@" in one["email"]
        assert len(many) == 2


class TestQuickSetup:
    """Tests for quick_setup."""

    def test_quick_setup(self, mock_llm_client):
        with patch("fieldfill.services.filler.LLMClientFactory") as factory:
            factory.get_client.return_value = mock_llm_client
            filler = fieldfill.quick_setup("sk-test", vendor="openai", locale="en-GB")

        settings = factory.get_client.call_args.kwargs["settings"]
        assert settings.openai_api_key == "sk-test"
        assert settings.default_vendor == "openai"
        assert isinstance(filler.provider, LLMProvider)
        assert filler.provider.locale == "en-GB"
        assert fieldfill.get_instance() is filler

    def test_unknown_vendor(self):
        with pytest.raises(ConfigurationError):
            fieldfill.quick_setup("key", vendor="mystery")
