"""
Service facade.

The operations an API layer (out of scope here) would expose. Everything is
wired explicitly: the store, locale registry and translator are passed in,
`create_service` being the one place that reads settings.
"""

from __future__ import annotations

import logging
from typing import Any

from autotranslate.config import Settings, get_settings
from autotranslate.core.errors import EntryNotFoundError
from autotranslate.core.models import Entry, LanguageInfo, LocaleInfo, RepairReport, ReplicationResult
from autotranslate.i18n.fields import EntryTranslator
from autotranslate.i18n.providers import TranslationProvider, create_provider
from autotranslate.i18n.translator import Translator
from autotranslate.services.repair import ConsistencyRepair
from autotranslate.services.replication import ReplicationOrchestrator
from autotranslate.storage.base import ContentStore, LocaleRegistry

logger = logging.getLogger(__name__)


class AutoTranslateService:
    """
    Translation and replication operations over one content store.

    Usage:
        service = create_service(store=store, locales=locales)

        result = await service.replicate_all_published("es")
        print(result.message)

        await service.repair_entry("article", 27)
    """

    def __init__(
        self,
        store: ContentStore,
        locales: LocaleRegistry,
        translator: Translator,
        source_locale: str = "en",
        target_locales: list[str] | None = None,
        ensure_source_published: bool = True,
    ):
        self.store = store
        self.locales = locales
        self.translator = translator
        self.source_locale = source_locale
        self.target_locales = list(target_locales or [])

        self.entry_translator = EntryTranslator(translator)
        self.orchestrator = ReplicationOrchestrator(
            store,
            locales,
            self.entry_translator,
            ensure_source_published=ensure_source_published,
        )
        self.repair = ConsistencyRepair(store)

    # =========================================================================
    # Translation
    # =========================================================================

    async def translate_single_entry(
        self,
        collection: str,
        entry_id: Any,
        target_locale: str,
        source_locale: str | None = None,
    ) -> dict[str, Any]:
        """Translated copy of one entry. Nothing is written."""
        schema = await self.store.get_schema(collection)
        raw = await self.store.find_one(collection, entry_id)
        if raw is None:
            raise EntryNotFoundError(f"Entry {entry_id} not found in {collection}")
        return await self.entry_translator.translate_entry(
            raw, schema, target_locale, source_locale or self.source_locale
        )

    async def translate_texts(
        self,
        texts: list[str],
        target_locale: str,
        source_locale: str | None = None,
    ) -> list[str]:
        """Translate several strings; failures come back untranslated."""
        return await self.translator.translate_batch(
            texts, target_locale, source_locale or self.source_locale
        )

    async def list_supported_languages(self) -> list[LanguageInfo]:
        return await self.translator.list_languages()

    # =========================================================================
    # Replication
    # =========================================================================

    async def replicate_all_published(
        self,
        target_locale: str,
        source_locale: str | None = None,
    ) -> ReplicationResult:
        """Replicate all published content into one locale. Raises ConfigurationError."""
        return await self.orchestrator.replicate_all(
            target_locale, source_locale or self.source_locale
        )

    async def replicate_to_all(
        self,
        target_locales: list[str] | None = None,
        source_locale: str | None = None,
    ) -> dict[str, ReplicationResult]:
        """
        Replicate into several locales.

        Without explicit targets, the configured targets that the store has
        locales for are used (every non-default locale if none are configured).
        """
        targets = target_locales
        if not targets:
            available = [locale.code for locale in await self.list_available_locales()]
            if self.target_locales:
                targets = [code for code in self.target_locales if code in available]
            else:
                targets = available
        return await self.orchestrator.replicate_to_all(
            targets, source_locale or self.source_locale
        )

    # =========================================================================
    # Repair
    # =========================================================================

    async def repair_entry(self, collection: str, entry_id: Any) -> RepairReport:
        return await self.repair.repair_entry(collection, entry_id)

    async def repair_entries(self, targets: dict[str, list[Any]]) -> list[RepairReport]:
        return await self.repair.repair_entries(targets)

    async def find_missing_identities(self, collection: str) -> list[Entry]:
        return await self.repair.find_missing_identities(collection)

    # =========================================================================
    # Locales
    # =========================================================================

    async def list_available_locales(self) -> list[LocaleInfo]:
        """Configured locales that can be translated into (the default is excluded)."""
        try:
            locales = await self.locales.list_locales()
        except Exception as e:
            logger.warning(f"Could not fetch i18n locales: {e}")
            codes = [self.source_locale, *self.target_locales]
            locales = [
                LocaleInfo(code=code, name=code.upper(), is_default=code == self.source_locale)
                for code in dict.fromkeys(codes)
            ]
        return [locale for locale in locales if not locale.is_default]

    async def aclose(self) -> None:
        await self.translator.provider.aclose()


def create_service(
    store: ContentStore,
    locales: LocaleRegistry,
    settings: Settings | None = None,
    provider: TranslationProvider | None = None,
) -> AutoTranslateService:
    """Wire a service from settings."""
    settings = settings or get_settings()
    provider = provider or create_provider(settings)
    translator = Translator(provider, default_source=settings.source_locale)
    return AutoTranslateService(
        store,
        locales,
        translator,
        source_locale=settings.source_locale,
        target_locales=settings.target_locales_list,
        ensure_source_published=settings.ensure_source_published,
    )
