"""
Tests for the service facade and seed loading.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from autotranslate.config import Settings
from autotranslate.core.errors import CollectionNotFoundError, EntryNotFoundError
from autotranslate.core.models import LocaleInfo
from autotranslate.i18n.translator import Translator
from autotranslate.seed_loader import SeedLoader, load_seed
from autotranslate.services.translation import AutoTranslateService, create_service
from autotranslate.storage.local import InMemoryLocaleRegistry, ResponseShape

from tests.conftest import PUBLISHED_AT, FakeProvider

SEED_FILE = Path(__file__).parent.parent / "config" / "seed.yaml"


# =============================================================================
# Translation operations
# =============================================================================


class TestTranslateSingleEntry:
    @pytest.mark.asyncio
    async def test_returns_translated_copy_without_writing(self, store, service):
        record = store.add_entry("article", {"documentId": "doc-1", "locale": "en", "title": "Hello", "views": 3})

        translated = await service.translate_single_entry("article", record["id"], "es")

        assert translated["title"] == "[es] Hello"
        assert translated["views"] == 3
        assert len(store.all_entries("article")) == 1

    @pytest.mark.asyncio
    async def test_unknown_entry(self, service):
        with pytest.raises(EntryNotFoundError):
            await service.translate_single_entry("article", 404, "es")

    @pytest.mark.asyncio
    async def test_unknown_collection(self, service):
        with pytest.raises(CollectionNotFoundError):
            await service.translate_single_entry("nope", 1, "es")


@pytest.mark.asyncio
async def test_translate_texts(service):
    assert await service.translate_texts(["Hello", "World"], "fr") == ["[fr] Hello", "[fr] World"]


@pytest.mark.asyncio
async def test_list_supported_languages(service):
    languages = await service.list_supported_languages()
    assert [lang.code for lang in languages] == ["es", "fr"]


# =============================================================================
# Locales
# =============================================================================


class TestAvailableLocales:
    @pytest.mark.asyncio
    async def test_default_excluded(self, service):
        locales = await service.list_available_locales()
        assert [locale.code for locale in locales] == ["es", "fr"]

    @pytest.mark.asyncio
    async def test_fallback_to_configured_targets(self, store, translator):
        class Unreachable(InMemoryLocaleRegistry):
            async def list_locales(self):
                raise RuntimeError("down")

        service = AutoTranslateService(store, Unreachable(), translator, target_locales=["es", "de"])

        locales = await service.list_available_locales()

        assert [locale.code for locale in locales] == ["es", "de"]


# =============================================================================
# Replication and repair
# =============================================================================


class TestReplication:
    @pytest.mark.asyncio
    async def test_replicate_all_published(self, store, service):
        store.add_entry("article", {"documentId": "doc-1", "locale": "en", "title": "Hello", "publishedAt": PUBLISHED_AT})

        result = await service.replicate_all_published("es")

        assert (result.success, result.failed, result.skipped) == (1, 0, 0)

    @pytest.mark.asyncio
    async def test_replicate_to_configured_targets(self, store, service):
        store.add_entry("article", {"documentId": "doc-1", "locale": "en", "title": "Hello", "publishedAt": PUBLISHED_AT})

        results = await service.replicate_to_all()

        assert set(results) == {"es", "fr"}
        assert all(result.success == 1 for result in results.values())

    @pytest.mark.asyncio
    async def test_replicate_to_available_locales_when_unconfigured(self, store, locales, translator):
        store.add_entry("article", {"documentId": "doc-1", "locale": "en", "title": "Hello", "publishedAt": PUBLISHED_AT})
        service = AutoTranslateService(store, locales, translator)

        results = await service.replicate_to_all()

        assert set(results) == {"es", "fr"}

    @pytest.mark.asyncio
    async def test_configured_targets_limited_to_store_locales(self, store, locales, translator):
        store.add_entry("article", {"documentId": "doc-1", "locale": "en", "title": "Hello", "publishedAt": PUBLISHED_AT})
        service = AutoTranslateService(store, locales, translator, target_locales=["es", "de"])

        results = await service.replicate_to_all()

        assert set(results) == {"es"}

    @pytest.mark.asyncio
    async def test_explicit_unknown_target_is_aborted(self, store, service):
        results = await service.replicate_to_all(["de"])

        assert results["de"].aborted is not None

    @pytest.mark.asyncio
    async def test_repair_passthrough(self, store, service):
        store.add_entry("article", {"id": 5, "documentId": "doc-5", "locale": "en", "localizations": [5]})

        report = await service.repair_entry("article", 5)
        reports = await service.repair_entries({"article": [5]})

        assert report.self_reference_removed
        assert not reports[0].changed

    @pytest.mark.asyncio
    async def test_find_missing_identities(self, store, service):
        store.add_entry("article", {"locale": "en", "title": "Orphan"})

        missing = await service.find_missing_identities("article")

        assert len(missing) == 1


@pytest.mark.asyncio
async def test_create_service_from_settings(store, locales):
    provider = FakeProvider()
    settings = Settings(_env_file=None, source_locale="en", target_locales="fr", ensure_source_published=False)

    service = create_service(store, locales, settings, provider=provider)

    assert service.target_locales == ["fr"]
    assert service.orchestrator.ensure_source_published is False
    assert service.translator.default_source == "en"

    await service.aclose()
    assert provider.closed


# =============================================================================
# Seed loading
# =============================================================================


class TestSeedLoader:
    @pytest.mark.asyncio
    async def test_load_mapping(self):
        store, locales = SeedLoader().load({
            "shape": "wrapped",
            "locales": [{"code": "en", "default": True}, {"code": "es", "name": "Spanish"}],
            "collections": {
                "article": {
                    "attributes": {"title": "string"},
                    "options": {"draftAndPublish": True, "i18n": {"localized": True}},
                    "entries": [{"documentId": "doc-1", "locale": "en", "title": "Hi"}],
                },
            },
        })

        assert store.default_shape == ResponseShape.WRAPPED
        assert await locales.locale_codes() == ["en", "es"]
        schema = await store.get_schema("article")
        assert schema.draft_and_publish and schema.localized
        assert len(store.all_entries("article")) == 1

    @pytest.mark.asyncio
    async def test_demo_seed_end_to_end(self):
        store, locales = load_seed(SEED_FILE)
        service = AutoTranslateService(store, locales, Translator(FakeProvider()), target_locales=["es"])

        first = (await service.replicate_to_all())["es"]
        second = (await service.replicate_to_all())["es"]

        # article doc-1 and the page are replicated, the identity-less article
        # fails, the draft is never discovered and the setting is skipped
        assert (first.success, first.failed, first.skipped) == (2, 1, 1)
        assert (second.success, second.failed, second.skipped) == (0, 1, 3)

        missing = await service.find_missing_identities("article")
        assert len(missing) == 1

        report = await service.repair_entry("page", 100)
        assert report.dangling_removed == [999]


def test_locale_info_defaults():
    assert LocaleInfo(code="es", name="Spanish").is_default is False
