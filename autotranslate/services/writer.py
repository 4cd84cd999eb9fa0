"""
Variant writers.

Two identity schemes exist in the field and both are supported. Which one a
collection uses is resolved once from its schema (`stable_identity`) and
dispatched through `writer_for`; the orchestrator never branches on it.

- StableIdentityWriter: the variant carries the source's documentId.
- LinkListWriter: the variant gets a fresh documentId and is joined to the
  source through a symmetric `localizations` link.

Both create the variant already published when asked to, and both verify
what the store handed back before reporting success.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from autotranslate.core.errors import AutoTranslateError, IntegrityError
from autotranslate.core.models import (
    DOCUMENT_ID_FIELD,
    LINKS_FIELD,
    LOCALE_FIELD,
    CollectionSchema,
    Entry,
)
from autotranslate.services.discovery import normalize_entries
from autotranslate.storage.base import ContentStore

logger = logging.getLogger(__name__)


class VariantWriter(ABC):
    """Creates target-locale variants for one identity scheme."""

    scheme: str = "base"

    def __init__(self, store: ContentStore):
        self.store = store

    @abstractmethod
    async def find_existing(
        self,
        schema: CollectionSchema,
        source: Entry,
        target_locale: str,
    ) -> Entry | None:
        """Return the source's variant in `target_locale` if one exists."""
        pass

    @abstractmethod
    async def write_variant(
        self,
        schema: CollectionSchema,
        source: Entry,
        data: dict[str, Any],
        target_locale: str,
        publish: bool,
    ) -> Entry:
        """Create the variant from already translated, stripped data."""
        pass

    async def _create(
        self,
        schema: CollectionSchema,
        data: dict[str, Any],
        target_locale: str,
        publish: bool,
    ) -> Entry:
        created = await self.store.create(
            schema.name, data, locale=target_locale, publish=publish
        )
        entry = Entry.from_raw(created)
        if entry is None:
            raise AutoTranslateError("Entry creation failed - no ID returned")
        return entry

    def _check_locale(self, entry: Entry, target_locale: str) -> None:
        if entry.locale != target_locale:
            raise IntegrityError(
                f"Locale variant has wrong locale! Expected: {target_locale}, Got: {entry.locale}",
                entry.data,
            )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(scheme={self.scheme})>"


# =============================================================================
# Stable identity
# =============================================================================


class StableIdentityWriter(VariantWriter):
    """Variants share the source's documentId; no link table involved."""

    scheme = "stable"

    async def find_existing(
        self,
        schema: CollectionSchema,
        source: Entry,
        target_locale: str,
    ) -> Entry | None:
        raw = await self.store.find_many(
            schema.name,
            filters={DOCUMENT_ID_FIELD: source.document_id, LOCALE_FIELD: target_locale},
            limit=1,
        )
        existing = normalize_entries(raw)
        return existing[0] if existing else None

    async def write_variant(
        self,
        schema: CollectionSchema,
        source: Entry,
        data: dict[str, Any],
        target_locale: str,
        publish: bool,
    ) -> Entry:
        create_data = {**data, DOCUMENT_ID_FIELD: source.document_id}

        logger.info(
            f"Creating {target_locale} locale variant for {schema.name} "
            f"documentId {source.document_id} (published: {publish})"
        )
        variant = await self._create(schema, create_data, target_locale, publish)

        if variant.document_id != source.document_id:
            raise IntegrityError(
                f"Locale variant has wrong documentId! "
                f"Expected: {source.document_id}, Got: {variant.document_id}",
                variant.data,
            )
        self._check_locale(variant, target_locale)

        logger.info(
            f"Created {target_locale} locale variant - ID: {variant.id}, "
            f"DocumentID: {variant.document_id}"
        )
        return variant


# =============================================================================
# Legacy link list
# =============================================================================


class LinkListWriter(VariantWriter):
    """Variants get a fresh identity and are linked to the source both ways."""

    scheme = "link_list"

    async def find_existing(
        self,
        schema: CollectionSchema,
        source: Entry,
        target_locale: str,
    ) -> Entry | None:
        for link in source.linked_locales:
            if link.id is None or link.id == source.id:
                continue
            if link.locale is not None and link.locale != target_locale:
                continue
            # Unpopulated links carry no locale; resolve them
            linked = Entry.from_raw(await self.store.find_one(schema.name, link.id))
            if linked is not None and linked.locale == target_locale:
                return linked

        # A variant whose source link was never written still points back
        orphan = await self._find_back_linked(schema, source, target_locale)
        if orphan is not None:
            logger.warning(
                f"Found {target_locale} localization {orphan.id} linked only one way to "
                f"{schema.name} ID {source.id}; completing the link"
            )
            await self._link_source(schema, source, orphan)
        return orphan

    async def _find_back_linked(
        self,
        schema: CollectionSchema,
        source: Entry,
        target_locale: str,
    ) -> Entry | None:
        raw = await self.store.query(
            schema.name, where={LOCALE_FIELD: target_locale}, populate=[LINKS_FIELD]
        )
        for candidate in normalize_entries(raw):
            if candidate.id != source.id and source.id in candidate.linked_ids:
                return candidate
        return None

    async def write_variant(
        self,
        schema: CollectionSchema,
        source: Entry,
        data: dict[str, Any],
        target_locale: str,
        publish: bool,
    ) -> Entry:
        # The store must assign a new identity; the back-link is written with the record
        create_data = {k: v for k, v in data.items() if k != DOCUMENT_ID_FIELD}
        create_data[LINKS_FIELD] = [source.id]

        logger.info(f"Creating {target_locale} localization for {schema.name} ID {source.id}")
        variant = await self._create(schema, create_data, target_locale, publish)

        if source.document_id is not None and variant.document_id == source.document_id:
            raise IntegrityError(
                f"Localization reused the source documentId {source.document_id}; "
                f"expected a fresh identity",
                variant.data,
            )
        self._check_locale(variant, target_locale)

        await self._link_source(schema, source, variant)
        logger.info(f"Created {target_locale} localization for {schema.name} - New ID: {variant.id}")
        return variant

    async def _link_source(self, schema: CollectionSchema, source: Entry, variant: Entry) -> None:
        current = Entry.from_raw(
            await self.store.find_one(schema.name, source.id, populate=[LINKS_FIELD])
        )
        links = current.linked_ids if current is not None else source.linked_ids
        links = [link for link in links if link != source.id]
        if variant.id not in links:
            links.append(variant.id)

        await self.store.update(schema.name, source.id, {LINKS_FIELD: links})


# =============================================================================
# Dispatch
# =============================================================================


def writer_for(schema: CollectionSchema, store: ContentStore) -> VariantWriter:
    """Pick the writer matching the collection's identity scheme."""
    if schema.stable_identity:
        return StableIdentityWriter(store)
    return LinkListWriter(store)
