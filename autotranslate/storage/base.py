"""
Storage abstraction layer.

Replication talks to the content store and the locale registry only through
these interfaces, so a different backend can be swapped in without changing
the services.

Read operations deliberately return the store's raw response. Callers that
need a flat list go through `services.discovery.normalize_entries`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from autotranslate.core.errors import CollectionNotFoundError
from autotranslate.core.models import CollectionSchema, LocaleInfo


# =============================================================================
# Content Store
# =============================================================================


class ContentStore(ABC):
    """
    Collections of locale-aware entries.

    Filters use operator mappings, e.g.
        {"publishedAt": {"$notNull": True}, "locale": "es"}
    """

    # Whether variants created through this store can reuse the source's
    # documentId. Collections may override it in their options.
    supports_stable_identity: bool = True

    # -------------------------------------------------------------------------
    # Schema introspection
    # -------------------------------------------------------------------------

    @abstractmethod
    async def list_collections(self) -> list[str]:
        """Names of all content collections."""
        pass

    @abstractmethod
    async def attributes_of(self, collection: str) -> dict[str, Any] | None:
        """Field name -> attribute definition ({"type": ...}), or None if unknown."""
        pass

    @abstractmethod
    async def options_of(self, collection: str) -> dict[str, Any] | None:
        """Collection options (draftAndPublish, i18n.localized, ...), or None if unknown."""
        pass

    async def get_schema(self, collection: str) -> CollectionSchema:
        """Resolve a collection's schema and capabilities in one call."""
        attributes = await self.attributes_of(collection)
        if attributes is None:
            raise CollectionNotFoundError(f"Content type {collection} not found")
        options = await self.options_of(collection) or {}
        return CollectionSchema.from_store(
            collection,
            attributes,
            options,
            stable_identity_default=self.supports_stable_identity,
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @abstractmethod
    async def find_many(
        self,
        collection: str,
        *,
        filters: dict[str, Any] | None = None,
        publication_state: str | None = None,
        populate: list[str] | None = None,
        limit: int | None = None,
    ) -> Any:
        """
        Query entries through the high-level API.

        The result may be a bare list, {"results": [...]}, {"data": [...]},
        a single entry mapping, or None.
        """
        pass

    @abstractmethod
    async def find_one(
        self,
        collection: str,
        entry_id: Any,
        *,
        populate: list[str] | None = None,
    ) -> dict[str, Any] | None:
        """Get one entry by its local id."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        *,
        where: dict[str, Any] | None = None,
        populate: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Low-level query that bypasses the high-level API. Always a list."""
        pass

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @abstractmethod
    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        *,
        locale: str,
        publish: bool = False,
    ) -> dict[str, Any]:
        """Create an entry in `locale`, published in the same call if `publish`."""
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        entry_id: Any,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Partial update of an entry. Returns the updated entry or None."""
        pass


# =============================================================================
# Locale Registry
# =============================================================================


class LocaleRegistry(ABC):
    """The store's configured locales."""

    @abstractmethod
    async def list_locales(self) -> list[LocaleInfo]:
        pass

    async def locale_codes(self) -> list[str]:
        return [locale.code for locale in await self.list_locales()]
