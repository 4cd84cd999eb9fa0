"""
Translation providers.

A provider is an opaque text -> text function plus a language listing. Every
provider failure surfaces as ProviderError; deciding what to do about it is
the Translator's job.

Implementations:
- GoogleTranslateProvider: Cloud Translation v2 REST API over httpx
- LLMTranslationProvider: DSPy signature against Gemini/OpenAI
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import dspy
import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from autotranslate.config import Settings
from autotranslate.core.errors import ConfigurationError, ProviderError
from autotranslate.core.models import LanguageInfo
from autotranslate.i18n.client import get_lm
from autotranslate.i18n.languages import LANGUAGE_NAMES, get_language_name, provider_language

logger = logging.getLogger(__name__)


class TranslationProvider(ABC):
    """Interface every translation backend implements."""

    name: str = "provider"

    @abstractmethod
    async def translate_text(self, text: str, source: str, target: str) -> str:
        """Translate one string. Raises ProviderError on failure."""
        pass

    @abstractmethod
    async def list_languages(self) -> list[LanguageInfo]:
        """Languages the provider can translate into. Raises ProviderError."""
        pass

    async def aclose(self) -> None:
        """Release any held resources."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


# =============================================================================
# Google Cloud Translation (v2)
# =============================================================================


def _is_transient(exc: BaseException) -> bool:
    """Network failures, throttling and 5xx are worth another attempt."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class GoogleTranslateProvider(TranslationProvider):
    """
    Cloud Translation v2 over REST.

    Usage:
        provider = GoogleTranslateProvider(api_key="...")
        text = await provider.translate_text("Hello", source="en", target="es")
    """

    name = "google"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://translation.googleapis.com/language/translate/v2",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def translate_text(self, text: str, source: str, target: str) -> str:
        if not self._api_key:
            raise ProviderError("Google Translate API key is not set")
        try:
            payload = await self._post(
                self._base_url,
                {
                    "q": text,
                    "source": provider_language(source),
                    "target": provider_language(target),
                    "format": "text",
                },
            )
            return payload["data"]["translations"][0]["translatedText"]
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(f"Google translation failed: {e}") from e

    async def list_languages(self) -> list[LanguageInfo]:
        if not self._api_key:
            raise ProviderError("Google Translate API key is not set")
        try:
            payload = await self._get(f"{self._base_url}/languages", {"target": "en"})
            return [
                LanguageInfo(code=lang["language"], name=lang.get("name") or lang["language"])
                for lang in payload["data"]["languages"]
            ]
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Could not fetch Google languages: {e}") from e

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    async def _post(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.post(url, params={"key": self._api_key}, json=body)
        response.raise_for_status()
        return response.json()

    @retry(
        retry=retry_if_exception(_is_transient),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    async def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        response = await self._client.get(url, params={"key": self._api_key, **params})
        response.raise_for_status()
        return response.json()

    async def aclose(self) -> None:
        await self._client.aclose()


# =============================================================================
# LLM (DSPy)
# =============================================================================


class TranslateText(dspy.Signature):
    """Translate text while preserving meaning, tone, formatting and markup."""

    text: str = dspy.InputField(desc="Text to translate")
    source_language: str = dspy.InputField(desc="Source language name")
    target_language: str = dspy.InputField(desc="Target language name")

    translated_text: str = dspy.OutputField(desc="Translated text only")


class LLMTranslationProvider(TranslationProvider):
    """Translation through a DSPy predictor."""

    name = "llm"

    def __init__(self, llm_provider: str, model: str, api_key: str):
        self._llm_provider = llm_provider
        self._model = model
        self._api_key = api_key
        self._translate_module: dspy.Predict | None = None

    @property
    def translate_module(self) -> dspy.Predict:
        if self._translate_module is None:
            self._translate_module = dspy.Predict(TranslateText)
        return self._translate_module

    async def translate_text(self, text: str, source: str, target: str) -> str:
        try:
            lm = get_lm(self._llm_provider, self._model, self._api_key)

            def predict():
                # dspy.configure is bound to the first task that calls it; scope the LM per call
                with dspy.context(lm=lm):
                    return self.translate_module(
                        text=text,
                        source_language=get_language_name(source),
                        target_language=get_language_name(target),
                    )

            result = await asyncio.to_thread(predict)
            return result.translated_text.strip()
        except Exception as e:
            raise ProviderError(f"LLM translation failed: {e}") from e

    async def list_languages(self) -> list[LanguageInfo]:
        return [LanguageInfo(code=code, name=name) for code, name in LANGUAGE_NAMES.items()]


# =============================================================================
# Factory
# =============================================================================


def create_provider(settings: Settings) -> TranslationProvider:
    """Build the provider selected by settings."""
    if settings.translation_provider == "google":
        if not settings.google_translate_api_key:
            logger.warning(
                "Google Translate API key is not set. "
                "Please set GOOGLE_TRANSLATE_API_KEY environment variable."
            )
        return GoogleTranslateProvider(
            api_key=settings.google_translate_api_key,
            base_url=settings.google_translate_url,
            timeout=settings.translation_timeout,
        )

    if settings.translation_provider == "llm":
        if settings.llm_provider == "openai":
            return LLMTranslationProvider("openai", settings.openai_model, settings.openai_api_key)
        return LLMTranslationProvider("gemini", settings.gemini_model, settings.gemini_api_key)

    raise ConfigurationError(f"Unknown translation provider: {settings.translation_provider}")
