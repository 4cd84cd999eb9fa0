"""
Tests for the variant writers.
"""

from __future__ import annotations

import pytest

from autotranslate.core.errors import IntegrityError
from autotranslate.core.models import CollectionSchema, Entry
from autotranslate.services.writer import LinkListWriter, StableIdentityWriter, writer_for
from autotranslate.storage.local import InMemoryContentStore

from tests.conftest import PUBLISHED_AT, add_article_collection


async def source_entry(store: InMemoryContentStore, **fields) -> Entry:
    record = store.add_entry(
        "article",
        {"documentId": "doc-1", "locale": "en", "title": "Hello", "publishedAt": PUBLISHED_AT, **fields},
    )
    return Entry(data=await store.find_one("article", record["id"], populate=["localizations"]))


@pytest.fixture
def legacy_store():
    store = InMemoryContentStore(supports_stable_identity=False)
    add_article_collection(store)
    return store


def test_writer_for_dispatch(store):
    assert isinstance(writer_for(CollectionSchema(name="a", stable_identity=True), store), StableIdentityWriter)
    assert isinstance(writer_for(CollectionSchema(name="a", stable_identity=False), store), LinkListWriter)


@pytest.mark.asyncio
async def test_schema_picks_up_store_capability(legacy_store):
    schema = await legacy_store.get_schema("article")
    assert schema.stable_identity is False


# =============================================================================
# Stable identity
# =============================================================================


class TestStableIdentityWriter:
    @pytest.mark.asyncio
    async def test_variant_shares_document_id(self, store):
        schema = await store.get_schema("article")
        source = await source_entry(store)
        writer = StableIdentityWriter(store)

        variant = await writer.write_variant(schema, source, {"title": "[es] Hello"}, "es", publish=True)

        assert variant.document_id == "doc-1"
        assert variant.locale == "es"
        assert variant.id != source.id
        assert variant.data["publishedAt"] is not None

    @pytest.mark.asyncio
    async def test_unpublished_variant(self, store):
        schema = await store.get_schema("article")
        source = await source_entry(store)

        variant = await StableIdentityWriter(store).write_variant(schema, source, {}, "es", publish=False)

        assert variant.data["publishedAt"] is None

    @pytest.mark.asyncio
    async def test_find_existing(self, store):
        schema = await store.get_schema("article")
        source = await source_entry(store)
        writer = StableIdentityWriter(store)

        assert await writer.find_existing(schema, source, "es") is None

        await writer.write_variant(schema, source, {"title": "x"}, "es", publish=True)

        existing = await writer.find_existing(schema, source, "es")
        assert existing is not None
        assert existing.locale == "es"
        assert await writer.find_existing(schema, source, "fr") is None

    @pytest.mark.asyncio
    async def test_wrong_document_id_is_integrity_error(self):
        class ForgetfulStore(InMemoryContentStore):
            async def create(self, collection, data, *, locale, publish=False):
                return await super().create(
                    collection, {**data, "documentId": "wrong"}, locale=locale, publish=publish
                )

        store = ForgetfulStore()
        add_article_collection(store)
        schema = await store.get_schema("article")
        source = await source_entry(store)

        with pytest.raises(IntegrityError, match="wrong documentId"):
            await StableIdentityWriter(store).write_variant(schema, source, {}, "es", publish=True)

    @pytest.mark.asyncio
    async def test_wrong_locale_is_integrity_error(self):
        class StubbornStore(InMemoryContentStore):
            async def create(self, collection, data, *, locale, publish=False):
                return await super().create(collection, data, locale="en", publish=publish)

        store = StubbornStore()
        add_article_collection(store)
        schema = await store.get_schema("article")
        source = await source_entry(store)

        with pytest.raises(IntegrityError, match="wrong locale"):
            await StableIdentityWriter(store).write_variant(schema, source, {}, "es", publish=True)


# =============================================================================
# Legacy link list
# =============================================================================


class TestLinkListWriter:
    @pytest.mark.asyncio
    async def test_fresh_identity_and_symmetric_links(self, legacy_store):
        schema = await legacy_store.get_schema("article")
        source = await source_entry(legacy_store)

        variant = await LinkListWriter(legacy_store).write_variant(
            schema, source, {"title": "[es] Hello", "documentId": "doc-1"}, "es", publish=True
        )

        assert variant.document_id != "doc-1"
        records = {r["id"]: r for r in legacy_store.all_entries("article")}
        assert records[source.id]["localizations"] == [variant.id]
        assert records[variant.id]["localizations"] == [source.id]

    @pytest.mark.asyncio
    async def test_links_never_include_self(self, legacy_store):
        schema = await legacy_store.get_schema("article")
        record = legacy_store.add_entry(
            "article",
            {"documentId": "doc-1", "locale": "en", "publishedAt": PUBLISHED_AT},
        )
        legacy_store.add_entry("article", {**record, "localizations": [record["id"]]})
        source = Entry(data=await legacy_store.find_one("article", record["id"], populate=["localizations"]))

        variant = await LinkListWriter(legacy_store).write_variant(schema, source, {}, "es", publish=True)

        links = legacy_store.all_entries("article")[0]["localizations"]
        assert links == [variant.id]

    @pytest.mark.asyncio
    async def test_existing_links_are_kept(self, legacy_store):
        schema = await legacy_store.get_schema("article")
        french = legacy_store.add_entry("article", {"documentId": "doc-fr", "locale": "fr"})
        source = await source_entry(legacy_store, localizations=[french["id"]])

        variant = await LinkListWriter(legacy_store).write_variant(schema, source, {}, "es", publish=True)

        record = next(r for r in legacy_store.all_entries("article") if r["id"] == source.id)
        assert record["localizations"] == [french["id"], variant.id]

    @pytest.mark.asyncio
    async def test_find_existing_by_link_locale(self, legacy_store):
        schema = await legacy_store.get_schema("article")
        source = await source_entry(legacy_store)
        writer = LinkListWriter(legacy_store)

        assert await writer.find_existing(schema, source, "es") is None

        await writer.write_variant(schema, source, {}, "es", publish=True)
        source = Entry(data=await legacy_store.find_one("article", source.id, populate=["localizations"]))

        existing = await writer.find_existing(schema, source, "es")
        assert existing is not None
        assert existing.locale == "es"
        assert await writer.find_existing(schema, source, "fr") is None

    @pytest.mark.asyncio
    async def test_find_existing_resolves_bare_ids(self, legacy_store):
        schema = await legacy_store.get_schema("article")
        spanish = legacy_store.add_entry("article", {"documentId": "doc-es", "locale": "es"})
        source = Entry(data={"id": 99, "documentId": "doc-1", "locale": "en", "localizations": [spanish["id"]]})

        existing = await LinkListWriter(legacy_store).find_existing(schema, source, "es")

        assert existing is not None
        assert existing.id == spanish["id"]

    @pytest.mark.asyncio
    async def test_back_link_survives_failed_source_update(self):
        class SourceLinkFails(InMemoryContentStore):
            async def update(self, collection, entry_id, data):
                if "localizations" in data:
                    raise RuntimeError("connection reset")
                return await super().update(collection, entry_id, data)

        store = SourceLinkFails(supports_stable_identity=False)
        add_article_collection(store)
        schema = await store.get_schema("article")
        source = await source_entry(store)

        with pytest.raises(RuntimeError):
            await LinkListWriter(store).write_variant(schema, source, {}, "es", publish=True)

        spanish = next(r for r in store.all_entries("article") if r["locale"] == "es")
        assert spanish["localizations"] == [source.id]

    @pytest.mark.asyncio
    async def test_find_existing_completes_one_way_link(self, legacy_store):
        schema = await legacy_store.get_schema("article")
        source = await source_entry(legacy_store)
        spanish = legacy_store.add_entry(
            "article", {"documentId": "doc-es", "locale": "es", "localizations": [source.id]}
        )
        legacy_store.add_entry("article", {"documentId": "doc-es-2", "locale": "es", "localizations": [12345]})

        existing = await LinkListWriter(legacy_store).find_existing(schema, source, "es")

        assert existing is not None
        assert existing.id == spanish["id"]
        record = next(r for r in legacy_store.all_entries("article") if r["id"] == source.id)
        assert record["localizations"] == [spanish["id"]]

    @pytest.mark.asyncio
    async def test_reused_document_id_is_integrity_error(self):
        store = InMemoryContentStore(supports_stable_identity=True)
        add_article_collection(store)

        schema = (await store.get_schema("article")).model_copy(update={"stable_identity": False})
        source = await source_entry(store)

        class CopyingWriter(LinkListWriter):
            async def _create(self, schema, data, target_locale, publish):
                return await super()._create(
                    schema, {**data, "documentId": source.document_id}, target_locale, publish
                )

        with pytest.raises(IntegrityError, match="reused"):
            await CopyingWriter(store).write_variant(schema, source, {}, "es", publish=True)
