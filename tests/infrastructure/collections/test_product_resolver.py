"""
🧪 test_product_resolver.py — unit-тести для CollectionProductResolver

Перевіряє:
- Легасі-колонки та таблицю звʼязків у SQLite
- Ескалацію з порожньої таблиці звʼязків до легасі-колонок
- Деградацію до порожньої сторінки при помилці сховища (лог + метрика)
- Наповнення кешу товарів
- Сторінку за межами діапазону без автокорекції
"""

import asyncio
import logging

import pytest

from listing_engine.config.settings import StoreSettings
from listing_engine.domain.catalog.entities import Collection
from listing_engine.infrastructure.collections.product_resolver import CollectionProductResolver
from listing_engine.infrastructure.collections.schema_introspector import SchemaIntrospector
from listing_engine.shared.cache.ttl_cache import TtlCache
from listing_engine.shared.metrics import STORE_QUERY_FAILURES


def _collection(cid, slug, name=None) -> Collection:
    return Collection.from_row({"id": cid, "slug": slug, "name": name})


def _resolver(store, cache=None) -> CollectionProductResolver:
    return CollectionProductResolver(
        store,
        settings=StoreSettings(),
        introspector=SchemaIntrospector(),
        item_cache=cache if cache is not None else TtlCache("test-items", 60),
    )


@pytest.mark.asyncio
async def test_resolves_legacy_membership(legacy_store, catalog):
    catalog.add_item("arm", "Arm", category="Industrial Robots")
    catalog.add_item("gripper", "Gripper", category_slugs=["industrial-robots"])
    catalog.add_item("welder", "Welder", categories="welding")

    page = await _resolver(legacy_store).resolve_collection_items(
        _collection(1, "industrial-robots", "Industrial Robots"), limit=10, offset=0
    )
    assert [i.slug for i in page.items] == ["arm", "gripper"]
    assert page.total_count == 2


@pytest.mark.asyncio
async def test_virtual_collection_matches_by_slug(legacy_store, catalog):
    catalog.add_item("lathe", "Lathe", category="maquinas-cnc")
    page = await _resolver(legacy_store).resolve_collection_items(
        Collection.virtual("maquinas-cnc"), limit=10, offset=0
    )
    assert [i.slug for i in page.items] == ["lathe"]


@pytest.mark.asyncio
async def test_link_table_wins_when_populated(link_store, link_catalog):
    cid = link_catalog.add_collection("robots", "Robots")
    linked = link_catalog.add_item("linked", "Linked")
    link_catalog.add_item("legacy", "Legacy", category="robots")
    link_catalog.link(cid, linked)

    page = await _resolver(link_store).resolve_collection_items(_collection(cid, "robots", "Robots"), limit=10, offset=0)
    assert [i.slug for i in page.items] == ["linked"]


@pytest.mark.asyncio
async def test_empty_link_table_escalates_to_legacy(link_store, link_catalog):
    cid = link_catalog.add_collection("robots", "Robots")
    link_catalog.add_item("legacy", "Legacy", category="robots")

    page = await _resolver(link_store).resolve_collection_items(_collection(cid, "robots", "Robots"), limit=10, offset=0)
    assert [i.slug for i in page.items] == ["legacy"]
    assert page.total_count == 1


@pytest.mark.asyncio
async def test_no_membership_representation_is_empty(bare_store):
    page = await _resolver(bare_store).resolve_collection_items(_collection(1, "robots"), limit=10, offset=0)
    assert page.is_empty


@pytest.mark.asyncio
async def test_page_past_end_keeps_total(legacy_store, catalog):
    for n in range(3):
        catalog.add_item(f"item-{n}", f"Item {n}", category="robots")
    page = await _resolver(legacy_store).resolve_collection_items(_collection(9, "robots"), limit=2, offset=10)
    assert page.items == ()
    assert page.total_count == 3


@pytest.mark.asyncio
async def test_resolved_items_are_cached(legacy_store, catalog):
    catalog.add_item("arm", "Arm", category="robots")
    cache = TtlCache("test-resolver-cache", 60)
    await _resolver(legacy_store, cache).resolve_collection_items(_collection(1, "robots"), limit=10, offset=0)
    cached = cache.get("arm")
    assert cached is not None
    assert cached.title == "Arm"


class ExplodingStore:
    async def query(self, sql, params=()):
        raise RuntimeError("connection reset")

    async def has_column(self, table, column):
        return column == "category"

    async def has_table(self, table):
        return False


@pytest.mark.asyncio
async def test_store_failure_degrades_to_empty(caplog):
    before = STORE_QUERY_FAILURES.labels(operation="resolve_collection_items")._value.get()
    with caplog.at_level(logging.ERROR):
        page = await _resolver(ExplodingStore()).resolve_collection_items(
            _collection(1, "robots"), limit=10, offset=0, request_id="req-42"
        )
    assert page.is_empty
    after = STORE_QUERY_FAILURES.labels(operation="resolve_collection_items")._value.get()
    assert after == before + 1
    record = next(r for r in caplog.records if getattr(r, "error_code", None) == "store_query_failure")
    assert record.request_id == "req-42"
    assert record.slug == "robots"


@pytest.mark.asyncio
async def test_cancellation_is_not_swallowed():
    class CancelledStore(ExplodingStore):
        async def query(self, sql, params=()):
            raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await _resolver(CancelledStore()).resolve_collection_items(_collection(1, "robots"), limit=10, offset=0)
