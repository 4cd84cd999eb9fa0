"""
Core data models.

Entries are kept as the raw mapping the store returned, because the store's
shape varies. `Entry` wraps that mapping and exposes the handful of
attributes replication needs; everything else rides along untouched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from autotranslate.core.publication import is_published


# =============================================================================
# Field names used by the store
# =============================================================================


ID_FIELD = "id"
DOCUMENT_ID_FIELD = "documentId"
LOCALE_FIELD = "locale"
LINKS_FIELD = "localizations"
CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"
PUBLISHED_AT_FIELD = "publishedAt"

# Removed from a translated copy before it is written as a new variant.
# The document identity is handled by the variant writer, not here.
STORE_MANAGED_FIELDS: tuple[str, ...] = (
    ID_FIELD,
    CREATED_AT_FIELD,
    UPDATED_AT_FIELD,
    PUBLISHED_AT_FIELD,
    LOCALE_FIELD,
    LINKS_FIELD,
)


# =============================================================================
# Schema
# =============================================================================


class FieldKind(str, Enum):
    """Attribute kinds a collection schema may declare."""

    STRING = "string"
    TEXT = "text"
    RICHTEXT = "richtext"
    BLOCKS = "blocks"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    UID = "uid"
    MEDIA = "media"
    RELATION = "relation"
    COMPONENT = "component"
    JSON = "json"


# Kinds whose values are human-readable text
TEXT_KINDS: frozenset[str] = frozenset(
    {FieldKind.STRING.value, FieldKind.TEXT.value, FieldKind.RICHTEXT.value}
)


class CollectionSchema(BaseModel):
    """
    A named group of entries sharing one schema.

    `attributes` maps field name to the declared kind as the store reports
    it; unknown kinds are kept as plain strings.
    """

    name: str
    attributes: dict[str, str] = Field(default_factory=dict)
    draft_and_publish: bool = False
    localized: bool = False

    # Variants share the source's documentId (True) or get a fresh one and
    # are linked through the localizations list (False).
    stable_identity: bool = True

    @classmethod
    def from_store(
        cls,
        name: str,
        attributes: dict[str, Any],
        options: dict[str, Any],
        stable_identity_default: bool = True,
    ) -> CollectionSchema:
        """Build a schema from the store's attribute and option mappings."""
        kinds: dict[str, str] = {}
        for field_name, attr in attributes.items():
            if isinstance(attr, dict):
                kinds[field_name] = str(attr.get("type", ""))
            else:
                kinds[field_name] = str(attr)

        i18n = options.get("i18n") or {}
        localized = options.get("localized", i18n.get("localized", False))
        stable = options.get("stableIdentity", stable_identity_default)

        return cls(
            name=name,
            attributes=kinds,
            draft_and_publish=options.get("draftAndPublish") is True,
            localized=localized is True,
            stable_identity=bool(stable),
        )


# =============================================================================
# Entries
# =============================================================================


class LinkedLocale(BaseModel):
    """One member of an entry's legacy cross-locale link set."""

    id: Any
    locale: str | None = None


class Entry(BaseModel):
    """One record as returned by the store."""

    data: dict[str, Any]

    @classmethod
    def from_raw(cls, raw: Any) -> Entry | None:
        """Wrap a raw store record; returns None for anything without an id."""
        if not isinstance(raw, dict) or raw.get(ID_FIELD) is None:
            return None
        return cls(data=raw)

    @property
    def id(self) -> Any:
        return self.data.get(ID_FIELD)

    @property
    def document_id(self) -> str | None:
        return self.data.get(DOCUMENT_ID_FIELD) or None

    @property
    def locale(self) -> str | None:
        return self.data.get(LOCALE_FIELD) or None

    @property
    def is_published(self) -> bool:
        return is_published(self.data)

    @property
    def linked_locales(self) -> list[LinkedLocale]:
        """Parse the link set, tolerating bare ids, records, and wrapped lists."""
        raw = self.data.get(LINKS_FIELD) or []
        if isinstance(raw, dict):
            raw = raw.get("data") or []

        links: list[LinkedLocale] = []
        for item in raw:
            if isinstance(item, dict):
                attrs = item.get("attributes") or {}
                links.append(LinkedLocale(
                    id=item.get(ID_FIELD),
                    locale=item.get(LOCALE_FIELD) or attrs.get(LOCALE_FIELD),
                ))
            elif item is not None:
                links.append(LinkedLocale(id=item))
        return links

    @property
    def linked_ids(self) -> list[Any]:
        return [link.id for link in self.linked_locales if link.id is not None]

    def has_locale_link(self, locale: str) -> bool:
        return any(link.locale == locale for link in self.linked_locales)


# =============================================================================
# Locales
# =============================================================================


class LocaleInfo(BaseModel):
    """A locale configured in the store."""

    code: str
    name: str
    is_default: bool = False


class LanguageInfo(BaseModel):
    """A language the translation provider supports."""

    code: str
    name: str


# =============================================================================
# Results
# =============================================================================


class ReplicationFailure(BaseModel):
    """One failed entry, with enough context for an operator."""

    collection: str
    entry_id: Any = None
    error: str


class ReplicationResult(BaseModel):
    """Counters and itemised failures for one orchestration run."""

    target_locale: str
    source_locale: str
    success: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    errors: list[ReplicationFailure] = Field(default_factory=list)

    # Set when the run was refused before touching content (multi-target runs)
    aborted: str | None = None

    def record_success(self) -> None:
        self.success += 1

    def record_skip(self, count: int = 1) -> None:
        self.skipped += count

    def record_failure(self, collection: str, entry_id: Any, error: str) -> None:
        self.failed += 1
        self.errors.append(ReplicationFailure(
            collection=collection,
            entry_id=entry_id,
            error=error,
        ))

    @property
    def total(self) -> int:
        return self.success + self.failed + self.skipped

    @property
    def message(self) -> str:
        return (
            f"Translation completed: {self.success} entries translated successfully, "
            f"{self.failed} failed, {self.skipped} skipped"
        )


class RepairReport(BaseModel):
    """What `repair_entry` found and changed for one entry."""

    collection: str
    entry_id: Any
    found: bool = True
    self_reference_removed: bool = False
    dangling_removed: list[Any] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    links: list[Any] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.self_reference_removed or bool(self.dangling_removed)
