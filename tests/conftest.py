"""
Shared fixtures.

FakeProvider stands in for the translation API: it tags text with the
target locale ("[es] Hello") and can be told to fail on specific strings.
"""

from __future__ import annotations

import asyncio

import pytest

from autotranslate.core.models import LanguageInfo, LocaleInfo
from autotranslate.i18n.fields import EntryTranslator
from autotranslate.i18n.providers import TranslationProvider
from autotranslate.i18n.translator import Translator
from autotranslate.services.replication import ReplicationOrchestrator
from autotranslate.services.translation import AutoTranslateService
from autotranslate.storage.local import InMemoryContentStore, InMemoryLocaleRegistry

PUBLISHED_AT = "2024-01-01T00:00:00+00:00"

ARTICLE_ATTRIBUTES = {
    "title": "string",
    "summary": "text",
    "body": "richtext",
    "slug": "uid",
    "views": "integer",
    "tags": "json",
}


class FakeProvider(TranslationProvider):
    name = "fake"

    def __init__(self, fail_on: set[str] | None = None):
        self.fail_on = fail_on or set()
        self.calls: list[tuple[str, str, str]] = []
        self.closed = False

    async def translate_text(self, text: str, source: str, target: str) -> str:
        self.calls.append((text, source, target))
        await asyncio.sleep(0)
        if text in self.fail_on:
            raise RuntimeError(f"provider exploded on {text!r}")
        return f"[{target}] {text}"

    async def list_languages(self) -> list[LanguageInfo]:
        return [LanguageInfo(code="es", name="Spanish"), LanguageInfo(code="fr", name="French")]

    async def aclose(self) -> None:
        self.closed = True


def add_article_collection(store: InMemoryContentStore, **options) -> None:
    store.add_collection(
        "article",
        ARTICLE_ATTRIBUTES,
        {"draftAndPublish": True, "i18n": {"localized": True}, **options},
    )


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def translator(provider):
    return Translator(provider, default_source="en")


@pytest.fixture
def entry_translator(translator):
    return EntryTranslator(translator)


@pytest.fixture
def store():
    """Store with an empty localized, draft & publish `article` collection."""
    store = InMemoryContentStore()
    add_article_collection(store)
    return store


@pytest.fixture
def locales():
    return InMemoryLocaleRegistry([
        LocaleInfo(code="en", name="English", is_default=True),
        LocaleInfo(code="es", name="Spanish"),
        LocaleInfo(code="fr", name="French"),
    ])


@pytest.fixture
def orchestrator(store, locales, entry_translator):
    return ReplicationOrchestrator(store, locales, entry_translator)


@pytest.fixture
def service(store, locales, translator):
    return AutoTranslateService(store, locales, translator, source_locale="en", target_locales=["es", "fr"])
