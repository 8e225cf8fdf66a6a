"""Async LLM provider interface and implementations.

Both google-genai and openai SDK clients are sync, so calls are wrapped in
asyncio.to_thread and bounded by asyncio.wait_for. Calls are never retried;
provider failures are translated into GenerationError subclasses.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from interface_compiler.errors import (
    GenerationError,
    ProviderAuthError,
    ProviderQuotaExceeded,
    ProviderUnavailable,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

_AUTH_MARKERS = ("api key", "api_key", "permission denied", "unauthenticated", "unauthorized")
_QUOTA_MARKERS = ("quota", "resource_exhausted", "resource exhausted", "rate limit")


def classify_provider_error(
    message: str, status_code: Optional[int] = None,
) -> type[GenerationError]:
    """Pick the error kind for a provider failure.

    HTTP status wins when the SDK exposes one; otherwise fall back to the
    wording of the message.
    """
    if status_code in (401, 403):
        return ProviderAuthError
    if status_code == 429:
        return ProviderQuotaExceeded

    lowered = (message or "").lower()
    if any(marker in lowered for marker in _AUTH_MARKERS):
        return ProviderAuthError
    if any(marker in lowered for marker in _QUOTA_MARKERS):
        return ProviderQuotaExceeded
    return GenerationError


class BaseLLMProvider(ABC):
    """Abstract base class for async text-completion providers."""

    name = "base"

    def __init__(self, api_key: str, model_name: str, temperature: float = 1.0,
                 timeout: float = DEFAULT_TIMEOUT):
        self.api_key = api_key
        self.model_name = model_name
        self.temperature = temperature
        self.timeout = timeout

    @abstractmethod
    def _sync_generate(self, prompt: str) -> str:
        """Blocking SDK call returning the raw completion text."""

    def _translate_error(self, exc: Exception) -> GenerationError:
        kind = classify_provider_error(str(exc))
        return kind(details=str(exc))

    async def generate(self, prompt: str) -> str:
        try:
            text = await asyncio.wait_for(
                asyncio.to_thread(self._sync_generate, prompt),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ProviderUnavailable(
                details=f"{self.name} call timed out after {self.timeout}s",
            ) from e
        except GenerationError:
            raise
        except Exception as e:
            error = self._translate_error(e)
            logger.warning(
                "%s call failed (%s): %s", self.name, type(error).__name__, e,
            )
            raise error from e
        return text or ""


class GeminiProvider(BaseLLMProvider):
    """Async Gemini provider using google-genai SDK."""

    name = "gemini"

    def __init__(self, api_key: str, model_name: str, temperature: float = 1.0,
                 timeout: float = DEFAULT_TIMEOUT):
        super().__init__(api_key, model_name, temperature, timeout)
        if not api_key:
            raise ProviderAuthError(details="GEMINI_API_KEY is not set")

        from google import genai
        self.client = genai.Client(api_key=api_key)

    def _sync_generate(self, prompt):
        from google.genai import types

        config = types.GenerateContentConfig(temperature=self.temperature)

        response = self.client.models.generate_content(
            model=self.model_name, contents=prompt, config=config,
        )
        return response.text

    def _translate_error(self, exc):
        import httpx
        from google.genai import errors as genai_errors

        if isinstance(exc, genai_errors.APIError):
            kind = classify_provider_error(
                f"{exc.status or ''} {exc.message or ''}", exc.code,
            )
            return kind(details=str(exc))
        if isinstance(exc, (httpx.TransportError, OSError)):
            return ProviderUnavailable(details=str(exc))
        return super()._translate_error(exc)


class OpenAIProvider(BaseLLMProvider):
    """Async OpenAI provider."""

    name = "openai"

    def __init__(self, api_key: str, model_name: str, temperature: float = 1.0,
                 timeout: float = DEFAULT_TIMEOUT):
        super().__init__(api_key, model_name, temperature, timeout)
        if not api_key:
            raise ProviderAuthError(details="OPENAI_API_KEY is not set")

        from openai import OpenAI
        self.client = OpenAI(api_key=api_key, max_retries=0)

    def _sync_generate(self, prompt):
        messages = [{"role": "user", "content": prompt}]

        response = self.client.chat.completions.create(
            model=self.model_name, messages=messages, temperature=self.temperature,
        )
        return response.choices[0].message.content

    def _translate_error(self, exc):
        import openai

        if isinstance(exc, openai.APIConnectionError):
            return ProviderUnavailable(details=str(exc))
        if isinstance(exc, openai.APIStatusError):
            # insufficient_quota arrives as a 429 too
            kind = classify_provider_error(str(exc), exc.status_code)
            return kind(details=str(exc))
        return super()._translate_error(exc)


def create_llm_provider(
    provider: str, api_key: str = "", model_name: str = "",
    temperature: float = 1.0, timeout: float = DEFAULT_TIMEOUT,
) -> BaseLLMProvider:
    """Factory — dumb constructor, credentials are resolved by the caller."""
    if not model_name:
        raise ValueError("No model configured for the LLM provider")
    if provider == "gemini":
        return GeminiProvider(
            api_key=api_key, model_name=model_name,
            temperature=temperature, timeout=timeout,
        )
    elif provider == "openai":
        return OpenAIProvider(
            api_key=api_key, model_name=model_name,
            temperature=temperature, timeout=timeout,
        )
    else:
        raise ValueError(f"Unknown LLM provider: {provider}")
