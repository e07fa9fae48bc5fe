"""LLM client abstraction for multiple vendors."""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from fieldfill.core.config import Settings, get_settings
from fieldfill.core.exceptions import ConfigurationError
from fieldfill.models.generation import TokenUsage

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_SPAN = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")

JSON_ONLY = "Respond with valid JSON only, no markdown or explanations."


class LLMClientError(Exception):
    """Error from LLM client."""

    pass


def parse_json_reply(text: str) -> Any:
    """Parse JSON out of a model reply.

    Handles replies wrapped in markdown code fences and replies with prose
    around a single JSON object or array.

    Raises:
        LLMClientError: If no JSON can be recovered.
    """
    fenced = _CODE_FENCE.search(text)
    if fenced:
        text = fenced.group(1)
    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    span = _JSON_SPAN.search(text)
    if span:
        try:
            return json.loads(span.group(1))
        except json.JSONDecodeError as e:
            raise LLMClientError(f"Failed to parse JSON response: {e}")
    raise LLMClientError("Response contained no JSON")


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    model: str

    @abstractmethod
    async def generate(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> Tuple[str, TokenUsage]:
        """Generate a text reply.

        Args:
            system: System instruction.
            prompt: User prompt describing what to generate.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.

        Returns:
            Tuple of (response_text, token_usage).
        """
        pass

    async def extract_json(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> Tuple[Any, TokenUsage]:
        """Generate and parse a JSON reply (object or array)."""
        text, usage = await self.generate(f"{system}\n\n{JSON_ONLY}", prompt, temperature, max_tokens)
        return parse_json_reply(text), usage


class GeminiClient(BaseLLMClient):
    """Google Gemini client."""

    def __init__(self, api_key: str, model: str):
        self.model = model
        try:
            import google.generativeai as genai

            genai.configure(api_key=api_key)
            self.genai = genai
        except ImportError:
            raise LLMClientError("google-generativeai package not installed")

    async def generate(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> Tuple[str, TokenUsage]:
        try:
            model = self.genai.GenerativeModel(
                self.model,
                system_instruction=system,
                generation_config=self.genai.GenerationConfig(
                    temperature=temperature,
                    max_output_tokens=max_tokens,
                ),
            )

            response = await model.generate_content_async(prompt)

            meta = response.usage_metadata
            usage = TokenUsage(
                input_tokens=meta.prompt_token_count if meta else 0,
                output_tokens=meta.candidates_token_count if meta else 0,
                total_tokens=meta.total_token_count if meta else 0,
            )
            return response.text, usage

        except Exception as e:
            raise LLMClientError(f"Gemini API error: {e}")


class OpenAIClient(BaseLLMClient):
    """OpenAI client."""

    def __init__(self, api_key: str, model: str):
        self.model = model
        try:
            import openai

            self.client = openai.AsyncOpenAI(api_key=api_key)
        except ImportError:
            raise LLMClientError("openai package not installed")

    async def generate(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> Tuple[str, TokenUsage]:
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
            )

            text = response.choices[0].message.content or ""
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens if response.usage else 0,
                output_tokens=response.usage.completion_tokens if response.usage else 0,
                total_tokens=response.usage.total_tokens if response.usage else 0,
            )
            return text, usage

        except Exception as e:
            raise LLMClientError(f"OpenAI API error: {e}")


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude client."""

    def __init__(self, api_key: str, model: str):
        self.model = model
        try:
            import anthropic

            self.client = anthropic.AsyncAnthropic(api_key=api_key)
        except ImportError:
            raise LLMClientError("anthropic package not installed")

    async def generate(
        self,
        system: str,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> Tuple[str, TokenUsage]:
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )

            usage = TokenUsage(
                input_tokens=response.usage.input_tokens,
                output_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            )
            return response.content[0].text, usage

        except Exception as e:
            raise LLMClientError(f"Anthropic API error: {e}")


_VENDORS = {
    "gemini": (GeminiClient, "google_api_key", "gemini_model", "GOOGLE_API_KEY"),
    "openai": (OpenAIClient, "openai_api_key", "openai_model", "OPENAI_API_KEY"),
    "anthropic": (AnthropicClient, "anthropic_api_key", "anthropic_model", "ANTHROPIC_API_KEY"),
}


class LLMClientFactory:
    """Factory for creating LLM clients."""

    _clients: Dict[str, BaseLLMClient] = {}

    @classmethod
    def get_client(
        cls,
        vendor: Optional[str] = None,
        model: Optional[str] = None,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
    ) -> BaseLLMClient:
        """Get or create an LLM client.

        Args:
            vendor: LLM vendor (gemini, openai, anthropic). Defaults to settings.
            model: Model name override.
            settings: Settings instance.
            api_key: Explicit credential, taking precedence over settings.

        Returns:
            LLM client instance.

        Raises:
            ConfigurationError: For an unknown vendor or a missing API key.
        """
        settings = settings or get_settings()
        vendor = (vendor or settings.default_vendor).lower()

        if vendor not in _VENDORS:
            raise ConfigurationError(f"Unknown vendor: {vendor}")

        client_cls, key_attr, model_attr, env_name = _VENDORS[vendor]
        model = model or getattr(settings, model_attr)
        api_key = api_key or getattr(settings, key_attr)
        if not api_key:
            raise ConfigurationError(f"{env_name} not configured")

        key = f"{vendor}:{model}"

        if key not in cls._clients:
            cls._clients[key] = client_cls(api_key, model)
            logger.info(f"Created LLM client: {vendor}/{model}")

        return cls._clients[key]

    @classmethod
    def clear_cache(cls) -> None:
        """Clear client cache."""
        cls._clients.clear()
