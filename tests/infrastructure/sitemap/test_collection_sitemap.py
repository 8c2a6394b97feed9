"""
🧪 test_collection_sitemap.py — unit-тести для CollectionSitemapService

Перевіряє:
- Абсолютні URL колекцій та lastmod у UTC
- Пропуск колекцій без slug і невалідних дат
- Кешування документа та його інвалідацію
"""

import xml.etree.ElementTree as ET

import pytest

from listing_engine.domain.catalog.entities import Collection, CollectionKind
from listing_engine.infrastructure.sitemap.collection_sitemap import (
    SITEMAP_NAMESPACE,
    CollectionSitemapService,
    render_urlset,
    to_iso_datetime,
)
from listing_engine.shared.cache.ttl_cache import TtlCache

NS = {"sm": SITEMAP_NAMESPACE}


class FakeLookup:
    def __init__(self, collections) -> None:
        self.collections = collections
        self.calls = 0

    async def find_collection_by_slug(self, slug, *, request_id=None):
        return None

    async def list_collections_by_type(self, kind, *, request_id=None):
        self.calls += 1
        assert kind is CollectionKind.ITEMS
        return list(self.collections)


def _collection(slug, updated_at=None) -> Collection:
    return Collection(id=slug or "x", kind=CollectionKind.ITEMS, slug=slug, name=slug, last_updated_at=updated_at)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-05-01 10:00:00", "2024-05-01T10:00:00Z"),
        ("2024-05-01T12:00:00+02:00", "2024-05-01T10:00:00Z"),
        ("2024-05-01T10:00:00Z", "2024-05-01T10:00:00Z"),
        ("yesterday", None),
        ("", None),
        (None, None),
    ],
)
def test_to_iso_datetime(value, expected):
    assert to_iso_datetime(value) == expected


def test_empty_urlset_is_well_formed():
    root = ET.fromstring(render_urlset([]))
    assert root.tag == f"{{{SITEMAP_NAMESPACE}}}urlset"
    assert list(root) == []


@pytest.mark.asyncio
async def test_build_sitemap_lists_collections():
    lookup = FakeLookup([
        _collection("robots", "2024-05-01 10:00:00"),
        _collection("máquinas cnc", "not a date"),
        _collection(""),
    ])
    service = CollectionSitemapService(lookup, document_cache=TtlCache("test-sitemap", 300))

    xml = await service.build_sitemap("https://example.com")

    urls = ET.fromstring(xml).findall("sm:url", NS)
    assert [u.find("sm:loc", NS).text for u in urls] == [
        "https://example.com/categories/robots",
        "https://example.com/categories/m%C3%A1quinas%20cnc",
    ]
    assert urls[0].find("sm:lastmod", NS).text == "2024-05-01T10:00:00Z"
    assert urls[1].find("sm:lastmod", NS) is None


@pytest.mark.asyncio
async def test_sitemap_is_cached_per_site_until_invalidated():
    lookup = FakeLookup([_collection("robots")])
    service = CollectionSitemapService(lookup, document_cache=TtlCache("test-sitemap-cache", 300))

    first = await service.build_sitemap("https://a.example")
    assert await service.build_sitemap("https://a.example") == first
    assert lookup.calls == 1

    await service.build_sitemap("https://b.example")
    assert lookup.calls == 2

    service.invalidate("https://a.example")
    await service.build_sitemap("https://a.example")
    assert lookup.calls == 3
    assert service.cache_key("https://a.example") == "https://a.example::/sitemaps/categories.xml"


@pytest.mark.asyncio
async def test_custom_prefix():
    service = CollectionSitemapService(
        FakeLookup([_collection("robots")]),
        document_cache=TtlCache("test-sitemap-prefix", 300),
        collection_href_prefix="/c/",
    )
    xml = await service.build_sitemap("https://example.com/")
    assert "<loc>https://example.com/c/robots</loc>" in xml
