"""
Fail-open translator with caching.

Wraps a TranslationProvider. A provider failure never propagates: the
original string comes back unchanged, so one bad string cannot block an
entry or a batch. Translations are cached by content hash.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
from typing import Any

from autotranslate.core.models import LanguageInfo
from autotranslate.i18n.languages import normalize_language_code
from autotranslate.i18n.providers import TranslationProvider

logger = logging.getLogger(__name__)


# =============================================================================
# Translation Cache
# =============================================================================


class TranslationCache:
    """
    Simple hash-based translation cache.

    In-memory only; lives as long as the Translator that owns it.
    """

    def __init__(self):
        self._cache: dict[str, str] = {}

    def _make_key(self, text: str, source: str, target: str) -> str:
        """Create cache key from content hash."""
        content = f"{source}:{target}:{text}"
        return hashlib.sha256(content.encode()).hexdigest()[:16]

    def get(self, text: str, source: str, target: str) -> str | None:
        return self._cache.get(self._make_key(text, source, target))

    def set(self, text: str, source: str, target: str, translation: str) -> None:
        self._cache[self._make_key(text, source, target)] = translation

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


# =============================================================================
# Translator
# =============================================================================


class Translator:
    """
    Main translation entry point.

    Usage:
        translator = Translator(provider, default_source="en")

        # Single translation
        es_text = await translator.translate("Hello", target="es")

        # Several strings, order preserved
        de_texts = await translator.translate_batch(["Hello", "Goodbye"], target="de")
    """

    def __init__(
        self,
        provider: TranslationProvider,
        default_source: str = "en",
        use_cache: bool = True,
    ):
        self.provider = provider
        self.default_source = default_source
        self.use_cache = use_cache
        self.cache = TranslationCache()

    async def translate(
        self,
        text: Any,
        target: str | None,
        source: str | None = None,
    ) -> Any:
        """
        Translate text to the target locale.

        Empty text, non-string values, or a missing target are returned as-is.
        On provider failure the original text is returned.
        """
        if not text or not target or not isinstance(text, str) or not text.strip():
            return text

        source = source or self.default_source

        # Same language? Return as-is
        if normalize_language_code(source) == normalize_language_code(target):
            return text

        if self.use_cache:
            cached = self.cache.get(text, source, target)
            if cached is not None:
                return cached

        try:
            translation = await self.provider.translate_text(text, source, target)
        except Exception as e:
            logger.error(f"Translation error ({source} -> {target}): {e}")
            return text

        if self.use_cache:
            self.cache.set(text, source, target, translation)

        return translation

    async def translate_batch(
        self,
        texts: list[Any],
        target: str | None,
        source: str | None = None,
    ) -> list[Any]:
        """Translate several strings concurrently; output order matches input."""
        if not texts:
            return []
        return list(await asyncio.gather(
            *(self.translate(text, target, source) for text in texts)
        ))

    async def list_languages(self) -> list[LanguageInfo]:
        """Languages offered by the provider, or [] if it cannot be reached."""
        try:
            return await self.provider.list_languages()
        except Exception as e:
            logger.error(f"Error fetching languages: {e}")
            return []
