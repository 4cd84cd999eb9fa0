"""
Replication orchestrator.

Top-level control loop: for every discovered collection and every eligible
source-locale entry, decide skip / replicate, translate, and hand the result
to the collection's variant writer.

Per entry, in order:
    a. not in the source locale         -> skipped
    b. not published                    -> skipped
    c. no documentId                    -> failed ("Missing documentId")
    d. variant already exists           -> skipped
    e. translate
    f. strip store-managed fields
    g. write the variant                -> success / failed

Only a ConfigurationError (unknown target locale) escapes `replicate_all`,
and it is raised before any content is read. Anything that goes wrong for
one entry is recorded and the loop moves on.

Entries are processed one at a time. Steps d-g are also held under a lock
per (collection, documentId, target locale) so that two runs sharing this
orchestrator cannot both pass the existence check for the same key.
"""

from __future__ import annotations

import logging
from typing import Any

from autotranslate.core.errors import ConfigurationError, IntegrityError, MissingIdentityError
from autotranslate.core.models import (
    PUBLISHED_AT_FIELD,
    STORE_MANAGED_FIELDS,
    CollectionSchema,
    Entry,
    ReplicationResult,
)
from autotranslate.core.publication import has_publish_timestamp
from autotranslate.core.utils import KeyedLocks, utc_now
from autotranslate.i18n.fields import EntryTranslator
from autotranslate.services.discovery import ContentDiscovery
from autotranslate.services.writer import VariantWriter, writer_for
from autotranslate.storage.base import ContentStore, LocaleRegistry

logger = logging.getLogger(__name__)


def strip_store_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of `data` without ids, timestamps, locale and the link set."""
    return {k: v for k, v in data.items() if k not in STORE_MANAGED_FIELDS}


class ReplicationOrchestrator:
    """
    Replicates published source-locale content into a target locale.

    Usage:
        orchestrator = ReplicationOrchestrator(store, locales, EntryTranslator(translator))
        result = await orchestrator.replicate_all("es", source_locale="en")
        print(result.message)
    """

    def __init__(
        self,
        store: ContentStore,
        locales: LocaleRegistry,
        entry_translator: EntryTranslator,
        discovery: ContentDiscovery | None = None,
        ensure_source_published: bool = True,
    ):
        self.store = store
        self.locales = locales
        self.entry_translator = entry_translator
        self.discovery = discovery or ContentDiscovery(store)
        self.ensure_source_published = ensure_source_published
        self._locks = KeyedLocks()

    async def check_target_locale(self, target_locale: str) -> None:
        """Raise ConfigurationError unless the store has `target_locale` configured."""
        try:
            codes = await self.locales.locale_codes()
        except Exception as e:
            logger.warning(f"Could not fetch configured locales: {e}")
            codes = []

        logger.info(f"Available locales: {', '.join(codes)}")
        if target_locale not in codes:
            raise ConfigurationError(
                f"Locale '{target_locale}' is not available. "
                f"Configured locales: {', '.join(codes) or 'none'}"
            )

    async def replicate_all(
        self,
        target_locale: str,
        source_locale: str = "en",
    ) -> ReplicationResult:
        """Replicate every eligible entry of every collection into `target_locale`."""
        await self.check_target_locale(target_locale)

        result = ReplicationResult(target_locale=target_locale, source_locale=source_locale)
        collections = await self.discovery.discover()

        if not collections:
            logger.warning("No published content found to translate")
            return result

        for collection in collections:
            schema = collection.schema
            logger.info(
                f"Processing {schema.name} with {len(collection.entries)} entries "
                f"(i18n enabled: {schema.localized})"
            )

            if not schema.localized:
                logger.info(f"Skipping {schema.name} - i18n not enabled")
                result.record_skip(len(collection.entries))
                continue

            writer = writer_for(schema, self.store)
            for entry in collection.entries:
                try:
                    await self.replicate_entry(
                        schema, writer, entry, target_locale, source_locale, result
                    )
                except Exception as e:
                    logger.error(f"Failed to process {schema.name} ID {entry.id}: {e}")
                    result.record_failure(schema.name, entry.id, str(e))

        logger.info(result.message)
        return result

    async def replicate_entry(
        self,
        schema: CollectionSchema,
        writer: VariantWriter,
        entry: Entry,
        target_locale: str,
        source_locale: str,
        result: ReplicationResult,
    ) -> None:
        """Run steps a-h for one entry, recording the outcome in `result`."""
        if entry.locale and entry.locale != source_locale:
            logger.info(
                f"Skipping {schema.name} ID {entry.id} - not source language ({entry.locale})"
            )
            result.record_skip()
            return

        publish = entry.is_published
        if not publish:
            logger.info(f"Skipping {schema.name} ID {entry.id} - not published")
            result.record_skip()
            return

        if entry.document_id is None:
            error = MissingIdentityError(schema.name, entry.id)
            logger.error(
                f"Entry {entry.id} in {schema.name} is missing documentId - "
                f"cannot create locale variant"
            )
            result.record_failure(schema.name, entry.id, str(error))
            return

        async with self._locks.hold((schema.name, entry.document_id, target_locale)):
            existing = await writer.find_existing(schema, entry, target_locale)
            if existing is not None:
                logger.info(
                    f"Locale variant already exists for {schema.name} documentId "
                    f"{entry.document_id} in {target_locale} - skipping"
                )
                result.record_skip()
                return

            translated = await self.entry_translator.translate_entry(
                entry.data, schema, target_locale, source_locale
            )
            data = strip_store_fields(translated)

            try:
                await writer.write_variant(schema, entry, data, target_locale, publish)
            except IntegrityError as e:
                logger.critical(f"CRITICAL: {schema.name} ID {entry.id}: {e}")
                result.record_failure(schema.name, entry.id, str(e))
                return
            except Exception as e:
                logger.error(f"Failed to create locale variant for {schema.name} ID {entry.id}: {e}")
                result.record_failure(schema.name, entry.id, str(e))
                return

        result.record_success()

        if self.ensure_source_published and not has_publish_timestamp(entry.data):
            await self._keep_source_published(schema, entry)

    async def _keep_source_published(self, schema: CollectionSchema, entry: Entry) -> None:
        """Give a loosely-published source a real publish timestamp."""
        logger.info(f"Ensuring original entry {entry.id} remains published...")
        try:
            await self.store.update(
                schema.name, entry.id, {PUBLISHED_AT_FIELD: utc_now().isoformat()}
            )
        except Exception as e:
            logger.warning(f"Could not update original entry publication status: {e}")

    async def replicate_to_all(
        self,
        target_locales: list[str],
        source_locale: str = "en",
    ) -> dict[str, ReplicationResult]:
        """
        Run `replicate_all` once per target.

        A target that is not configured gets an aborted result; the other
        targets still run.
        """
        results: dict[str, ReplicationResult] = {}
        for target in target_locales:
            if target == source_locale:
                continue
            try:
                results[target] = await self.replicate_all(target, source_locale)
            except ConfigurationError as e:
                logger.error(f"Skipping target {target}: {e}")
                results[target] = ReplicationResult(
                    target_locale=target,
                    source_locale=source_locale,
                    aborted=str(e),
                )
        return results
