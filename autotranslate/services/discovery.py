"""
Content discovery.

Finds the entries eligible for replication in every collection. Stores
answer the same question differently depending on version and schema, so
each collection goes through an ordered cascade of fetch strategies; the
first one that returns anything wins and results are never merged.

    draft & publish:  live -> timestamp filter -> fetch all + predicate -> direct query + predicate
    otherwise:        fetch all -> direct query

Raw responses are flattened by `normalize_entries`, so nothing past this
module ever sees a store-specific shape.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from autotranslate.core.errors import DiscoveryError
from autotranslate.core.models import ID_FIELD, LINKS_FIELD, PUBLISHED_AT_FIELD, CollectionSchema, Entry
from autotranslate.storage.base import ContentStore

logger = logging.getLogger(__name__)

POPULATE_LINKS = [LINKS_FIELD]


# =============================================================================
# Response normalisation
# =============================================================================


def normalize_entries(raw: Any) -> list[Entry]:
    """
    Flatten any store response into an ordered list of entries.

    Handles: None, a bare list, {"results": [...]}, a single entry,
    {"data": [...]} and {"data": {...}}. Items without an id are dropped.
    """
    if raw is None:
        items: list[Any] = []
    elif isinstance(raw, list):
        items = raw
    elif isinstance(raw, dict) and isinstance(raw.get("results"), list):
        items = raw["results"]
    elif isinstance(raw, dict) and raw.get(ID_FIELD) is not None:
        items = [raw]
    elif isinstance(raw, dict) and isinstance(raw.get("data"), list):
        items = raw["data"]
    elif isinstance(raw, dict) and isinstance(raw.get("data"), dict):
        items = [raw["data"]]
    else:
        items = []

    entries = []
    for item in items:
        entry = Entry.from_raw(item)
        if entry is not None:
            entries.append(entry)
    return entries


def only_published(entries: list[Entry]) -> list[Entry]:
    return [entry for entry in entries if entry.is_published]


# =============================================================================
# Fetch strategies
# =============================================================================


StrategyFn = Callable[[ContentStore, CollectionSchema], Awaitable[list[Entry]]]


@dataclass(frozen=True)
class FetchStrategy:
    """One way of asking the store for a collection's eligible entries."""

    name: str
    fetch: StrategyFn


async def fetch_live(store: ContentStore, schema: CollectionSchema) -> list[Entry]:
    """Store-level 'published only' view."""
    raw = await store.find_many(
        schema.name, publication_state="live", populate=POPULATE_LINKS
    )
    return normalize_entries(raw)


async def fetch_with_timestamp_filter(store: ContentStore, schema: CollectionSchema) -> list[Entry]:
    """Explicit publish-timestamp-not-null filter."""
    raw = await store.find_many(
        schema.name,
        filters={PUBLISHED_AT_FIELD: {"$notNull": True}},
        populate=POPULATE_LINKS,
    )
    return normalize_entries(raw)


async def fetch_all(store: ContentStore, schema: CollectionSchema) -> list[Entry]:
    """Everything the high-level API returns, unfiltered."""
    raw = await store.find_many(schema.name, populate=POPULATE_LINKS)
    return normalize_entries(raw)


async def fetch_all_published(store: ContentStore, schema: CollectionSchema) -> list[Entry]:
    """Unfiltered fetch, published predicate applied client-side."""
    return only_published(await fetch_all(store, schema))


async def query_all(store: ContentStore, schema: CollectionSchema) -> list[Entry]:
    """Low-level query that bypasses the high-level API."""
    raw = await store.query(schema.name, populate=POPULATE_LINKS)
    return normalize_entries(raw)


async def query_all_published(store: ContentStore, schema: CollectionSchema) -> list[Entry]:
    """Low-level query, published predicate applied client-side."""
    return only_published(await query_all(store, schema))


PUBLISHED_STRATEGIES: tuple[FetchStrategy, ...] = (
    FetchStrategy("live", fetch_live),
    FetchStrategy("timestamp_filter", fetch_with_timestamp_filter),
    FetchStrategy("fetch_all", fetch_all_published),
    FetchStrategy("direct_query", query_all_published),
)

EXISTING_STRATEGIES: tuple[FetchStrategy, ...] = (
    FetchStrategy("fetch_all", fetch_all),
    FetchStrategy("direct_query", query_all),
)


def strategies_for(schema: CollectionSchema) -> tuple[FetchStrategy, ...]:
    return PUBLISHED_STRATEGIES if schema.draft_and_publish else EXISTING_STRATEGIES


# =============================================================================
# Discovery
# =============================================================================


@dataclass
class DiscoveredCollection:
    """A collection and the entries found eligible in it."""

    schema: CollectionSchema
    entries: list[Entry] = field(default_factory=list)
    strategy: str | None = None

    @property
    def name(self) -> str:
        return self.schema.name


class ContentDiscovery:
    """
    Enumerates collections and their eligible entries.

    A collection whose schema or any fetch raises is skipped for the run;
    discovery itself never fails.
    """

    def __init__(self, store: ContentStore):
        self.store = store

    async def discover(self) -> list[DiscoveredCollection]:
        names = await self.store.list_collections()
        logger.info(f"Found {len(names)} content types to check: {', '.join(names)}")

        found: list[DiscoveredCollection] = []
        for name in names:
            try:
                collection = await self.discover_collection(name)
            except DiscoveryError as e:
                logger.warning(f"Failed to fetch content for {e}")
                continue
            if collection.entries:
                found.append(collection)

        logger.info(f"Total content collections found: {len(found)}")
        return found

    async def discover_collection(self, name: str) -> DiscoveredCollection:
        """Run the strategy cascade for one collection. Raises DiscoveryError."""
        try:
            schema = await self.store.get_schema(name)
        except Exception as e:
            raise DiscoveryError(name, f"could not read schema: {e}") from e

        logger.info(f"Checking {name} - Draft & Publish: {schema.draft_and_publish}")

        for strategy in strategies_for(schema):
            try:
                entries = await strategy.fetch(self.store, schema)
            except Exception as e:
                raise DiscoveryError(name, f"{strategy.name} fetch failed: {e}") from e

            if entries:
                logger.info(f"Found {len(entries)} entries in {name} using {strategy.name}")
                return DiscoveredCollection(schema=schema, entries=entries, strategy=strategy.name)

            logger.warning(f"No results for {name} using {strategy.name}")

        return DiscoveredCollection(schema=schema)
