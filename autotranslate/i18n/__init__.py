"""
Internationalization - provider-backed, fail-open translation.

Usage:
    from autotranslate.i18n import Translator, GoogleTranslateProvider

    translator = Translator(GoogleTranslateProvider(api_key="..."))
    text_es = await translator.translate("Hello world", target="es")
"""

from autotranslate.i18n.translator import Translator, TranslationCache
from autotranslate.i18n.providers import (
    TranslationProvider,
    GoogleTranslateProvider,
    LLMTranslationProvider,
    create_provider,
)
from autotranslate.i18n.fields import EntryTranslator, select_translatable_fields
from autotranslate.i18n.languages import get_language_name, provider_language

__all__ = [
    "Translator",
    "TranslationCache",
    "TranslationProvider",
    "GoogleTranslateProvider",
    "LLMTranslationProvider",
    "create_provider",
    "EntryTranslator",
    "select_translatable_fields",
    "get_language_name",
    "provider_language",
]
