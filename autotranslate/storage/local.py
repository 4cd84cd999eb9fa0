"""
In-memory store implementations for development and tests.

InMemoryContentStore mimics the quirks replication has to cope with: each
collection can be configured to answer `find_many` as a bare list, a
paginated wrapper, a data wrapper or a single object.
"""

from __future__ import annotations

import copy
import itertools
from enum import Enum
from typing import Any

from autotranslate.core.models import (
    CREATED_AT_FIELD,
    DOCUMENT_ID_FIELD,
    ID_FIELD,
    LINKS_FIELD,
    LOCALE_FIELD,
    PUBLISHED_AT_FIELD,
    UPDATED_AT_FIELD,
    LocaleInfo,
)
from autotranslate.core.utils import generate_id, utc_now
from autotranslate.storage.base import ContentStore, LocaleRegistry


class ResponseShape(str, Enum):
    """How `find_many` wraps its results."""

    LIST = "list"
    PAGINATED = "paginated"  # {"results": [...], "pagination": {...}}
    WRAPPED = "wrapped"  # {"data": [...], "meta": {...}}
    SINGLE = "single"  # first matching entry, or None


# =============================================================================
# Filters
# =============================================================================


def _matches(record: dict[str, Any], filters: dict[str, Any] | None) -> bool:
    if not filters:
        return True
    for key, condition in filters.items():
        value = record.get(key)
        if isinstance(condition, dict):
            for op, operand in condition.items():
                if op == "$eq" and value != operand:
                    return False
                if op == "$ne" and value == operand:
                    return False
                if op == "$null" and (value is None) != bool(operand):
                    return False
                if op == "$notNull" and (value is not None) != bool(operand):
                    return False
                if op == "$in" and value not in operand:
                    return False
        elif value != condition:
            return False
    return True


def _link_id(link: Any) -> Any:
    return link.get(ID_FIELD) if isinstance(link, dict) else link


# =============================================================================
# Content Store
# =============================================================================


class InMemoryContentStore(ContentStore):
    """
    In-memory content store for development.

    Like most headless CMS APIs, `find_many` without a locale filter only
    returns entries in `default_locale` (plus entries with no locale at all).
    `query` is the low-level path and returns every locale. Pass
    `default_locale=None` to disable the restriction.
    """

    def __init__(
        self,
        supports_stable_identity: bool = True,
        response_shape: ResponseShape = ResponseShape.LIST,
        default_locale: str | None = "en",
    ):
        self.supports_stable_identity = supports_stable_identity
        self.default_shape = response_shape
        self.default_locale = default_locale
        self._attributes: dict[str, dict[str, Any]] = {}
        self._options: dict[str, dict[str, Any]] = {}
        self._shapes: dict[str, ResponseShape] = {}
        self._entries: dict[str, dict[Any, dict[str, Any]]] = {}
        self._ids = itertools.count(1)

    # -------------------------------------------------------------------------
    # Seeding (synchronous, for fixtures and the demo)
    # -------------------------------------------------------------------------

    def add_collection(
        self,
        name: str,
        attributes: dict[str, Any],
        options: dict[str, Any] | None = None,
        shape: ResponseShape | None = None,
    ) -> None:
        self._attributes[name] = {
            field: attr if isinstance(attr, dict) else {"type": attr}
            for field, attr in attributes.items()
        }
        self._options[name] = dict(options or {})
        if shape is not None:
            self._shapes[name] = ResponseShape(shape)
        self._entries.setdefault(name, {})

    def add_entry(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a record as-is, assigning an id (and timestamps) when missing.

        Unlike `create`, no documentId is generated, so malformed records
        can be seeded.
        """
        record = copy.deepcopy(data)
        if record.get(ID_FIELD) is None:
            record[ID_FIELD] = next(self._ids)
        now = utc_now().isoformat()
        record.setdefault(CREATED_AT_FIELD, now)
        record.setdefault(UPDATED_AT_FIELD, now)
        record[LINKS_FIELD] = [_link_id(link) for link in record.get(LINKS_FIELD) or []]
        self._entries.setdefault(collection, {})[record[ID_FIELD]] = record
        return copy.deepcopy(record)

    def delete_entry(self, collection: str, entry_id: Any) -> bool:
        return self._entries.get(collection, {}).pop(entry_id, None) is not None

    def all_entries(self, collection: str) -> list[dict[str, Any]]:
        """Raw records (links as bare ids), bypassing every API."""
        return [copy.deepcopy(r) for r in self._entries.get(collection, {}).values()]

    # -------------------------------------------------------------------------
    # Schema introspection
    # -------------------------------------------------------------------------

    async def list_collections(self) -> list[str]:
        return list(self._attributes.keys())

    async def attributes_of(self, collection: str) -> dict[str, Any] | None:
        attrs = self._attributes.get(collection)
        return copy.deepcopy(attrs) if attrs is not None else None

    async def options_of(self, collection: str) -> dict[str, Any] | None:
        options = self._options.get(collection)
        return copy.deepcopy(options) if options is not None else None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _render(self, collection: str, record: dict[str, Any], populate: list[str] | None) -> dict[str, Any]:
        out = copy.deepcopy(record)
        if populate and LINKS_FIELD in populate:
            entries = self._entries.get(collection, {})
            out[LINKS_FIELD] = [
                {
                    ID_FIELD: link,
                    LOCALE_FIELD: entries[link].get(LOCALE_FIELD) if link in entries else None,
                }
                for link in record.get(LINKS_FIELD, [])
            ]
        else:
            out.pop(LINKS_FIELD, None)
        return out

    def _select(
        self,
        collection: str,
        filters: dict[str, Any] | None,
        populate: list[str] | None,
        locale: str | None = None,
    ) -> list[dict[str, Any]]:
        return [
            self._render(collection, record, populate)
            for record in self._entries.get(collection, {}).values()
            if _matches(record, filters)
            and (locale is None or record.get(LOCALE_FIELD) in (locale, None))
        ]

    async def find_many(
        self,
        collection: str,
        *,
        filters: dict[str, Any] | None = None,
        publication_state: str | None = None,
        populate: list[str] | None = None,
        limit: int | None = None,
    ) -> Any:
        if collection not in self._attributes:
            raise KeyError(f"Unknown collection: {collection}")

        if publication_state == "live":
            filters = {**(filters or {}), PUBLISHED_AT_FIELD: {"$notNull": True}}

        locale = None if filters and LOCALE_FIELD in filters else self.default_locale
        results = self._select(collection, filters, populate, locale)
        if limit is not None:
            results = results[:limit]

        shape = self._shapes.get(collection, self.default_shape)
        if shape == ResponseShape.PAGINATED:
            return {
                "results": results,
                "pagination": {"page": 1, "pageSize": len(results), "total": len(results)},
            }
        if shape == ResponseShape.WRAPPED:
            return {"data": results, "meta": {"total": len(results)}}
        if shape == ResponseShape.SINGLE:
            return results[0] if results else None
        return results

    async def find_one(
        self,
        collection: str,
        entry_id: Any,
        *,
        populate: list[str] | None = None,
    ) -> dict[str, Any] | None:
        record = self._entries.get(collection, {}).get(entry_id)
        if record is None:
            return None
        return self._render(collection, record, populate)

    async def query(
        self,
        collection: str,
        *,
        where: dict[str, Any] | None = None,
        populate: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        return self._select(collection, where, populate)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _stable_identity(self, collection: str) -> bool:
        return bool(self._options.get(collection, {}).get(
            "stableIdentity", self.supports_stable_identity
        ))

    async def create(
        self,
        collection: str,
        data: dict[str, Any],
        *,
        locale: str,
        publish: bool = False,
    ) -> dict[str, Any]:
        if collection not in self._attributes:
            raise KeyError(f"Unknown collection: {collection}")

        record = copy.deepcopy(data)
        record[ID_FIELD] = next(self._ids)

        # Legacy stores always assign a fresh identity
        if not (self._stable_identity(collection) and record.get(DOCUMENT_ID_FIELD)):
            record[DOCUMENT_ID_FIELD] = generate_id("doc")

        now = utc_now().isoformat()
        record[LOCALE_FIELD] = locale
        record[CREATED_AT_FIELD] = now
        record[UPDATED_AT_FIELD] = now
        record[PUBLISHED_AT_FIELD] = now if publish else None
        record[LINKS_FIELD] = [_link_id(link) for link in record.get(LINKS_FIELD) or []]

        self._entries[collection][record[ID_FIELD]] = record
        return self._render(collection, record, None)

    async def update(
        self,
        collection: str,
        entry_id: Any,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        record = self._entries.get(collection, {}).get(entry_id)
        if record is None:
            return None

        updates = copy.deepcopy(data)
        if LINKS_FIELD in updates:
            updates[LINKS_FIELD] = [_link_id(link) for link in updates[LINKS_FIELD] or []]
        record.update(updates)
        record[UPDATED_AT_FIELD] = utc_now().isoformat()
        return self._render(collection, record, None)


# =============================================================================
# Locale Registry
# =============================================================================


class InMemoryLocaleRegistry(LocaleRegistry):
    """Fixed list of locales."""

    def __init__(self, locales: list[LocaleInfo] | None = None):
        self._locales = list(locales or [])

    @classmethod
    def from_codes(cls, codes: list[str], default: str = "en") -> InMemoryLocaleRegistry:
        return cls([
            LocaleInfo(code=code, name=code.upper(), is_default=code == default)
            for code in codes
        ])

    def add_locale(self, locale: LocaleInfo) -> None:
        self._locales.append(locale)

    async def list_locales(self) -> list[LocaleInfo]:
        return list(self._locales)
