"""Tests for LLM clients and the client factory."""

from typing import Tuple
from unittest.mock import MagicMock, patch

import pytest

from fieldfill.core.config import Settings
from fieldfill.core.exceptions import ConfigurationError
from fieldfill.models.generation import TokenUsage
from fieldfill.services.llm_client import (
    JSON_ONLY,
    BaseLLMClient,
    LLMClientError,
    LLMClientFactory,
    parse_json_reply,
)


class TestParseJsonReply:
    """Tests for JSON recovery from model replies."""

    def test_plain_json(self):
        assert parse_json_reply('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        reply = 'Here you go:\n```json\n{"email": "a@b.c"}\n```\nEnjoy!'
        assert parse_json_reply(reply) == {"email": "a@b.c"}

    def test_bare_fence(self):
        assert parse_json_reply("```\n[1, 2]\n```") == [1, 2]

    def test_prose_around_json(self):
        assert parse_json_reply('Sure! {"name": "Ann"} Hope this helps.') == {"name": "Ann"}

    def test_array(self):
        assert parse_json_reply('[{"id": 1}, {"id": 2}]') == [{"id": 1}, {"id": 2}]

    def test_no_json_raises(self):
        with pytest.raises(LLMClientError):
            parse_json_reply("I cannot help with that.")

    def test_broken_json_raises(self):
        with pytest.raises(LLMClientError):
            parse_json_reply('{"name": "Ann",}')


class _EchoClient(BaseLLMClient):
    """Client returning a canned reply and recording the system prompt."""

    model = "echo"

    def __init__(self, reply: str):
        self.reply = reply
        self.system = None

    async def generate(
        self, system: str, prompt: str, temperature: float = 0.7, max_tokens: int = 4096
    ) -> Tuple[str, TokenUsage]:
        self.system = system
        return self.reply, TokenUsage(input_tokens=1, output_tokens=2, total_tokens=3)


class TestBaseLLMClient:
    """Tests for the shared client behaviour."""

    @pytest.mark.asyncio
    async def test_extract_json(self):
        client = _EchoClient('```json\n{"ok": true}\n```')

        data, usage = await client.extract_json("Generate data.", "prompt")

        assert data == {"ok": True}
        assert usage.total_tokens == 3
        assert client.system.endswith(JSON_ONLY)


class TestLLMClientFactory:
    """Tests for LLMClientFactory."""

    def _settings(self, **values) -> Settings:
        return Settings(_env_file=None, **values)

    def test_unknown_vendor(self):
        with pytest.raises(ConfigurationError):
            LLMClientFactory.get_client(vendor="mystery", settings=self._settings())

    def test_missing_api_key(self):
        settings = self._settings(default_vendor="openai", openai_api_key=None)

        with pytest.raises(ConfigurationError) as exc_info:
            LLMClientFactory.get_client(settings=settings)

        assert "OPENAI_API_KEY" in exc_info.value.message

    def test_clients_are_cached(self):
        client_cls = MagicMock()
        vendors = {"openai": (client_cls, "openai_api_key", "openai_model", "OPENAI_API_KEY")}
        settings = self._settings(default_vendor="openai", openai_api_key="sk-test")

        with patch.dict("fieldfill.services.llm_client._VENDORS", vendors):
            first = LLMClientFactory.get_client(settings=settings)
            second = LLMClientFactory.get_client(settings=settings)

        assert first is second
        client_cls.assert_called_once_with("sk-test", settings.openai_model)

    def test_explicit_key_and_model(self):
        client_cls = MagicMock()
        vendors = {"anthropic": (client_cls, "anthropic_api_key", "anthropic_model", "ANTHROPIC_API_KEY")}

        with patch.dict("fieldfill.services.llm_client._VENDORS", vendors):
            LLMClientFactory.get_client(
                vendor="anthropic",
                model="custom-model",
                settings=self._settings(),
                api_key="key",
            )

        client_cls.assert_called_once_with("key", "custom-model")
