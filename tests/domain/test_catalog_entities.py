"""
🧪 test_catalog_entities.py — unit-тести для сутностей каталогу

Перевіряє:
- Нормалізацію рядків сховища у Collection / ItemSummary
- Вибір першого валідного зображення
- Віртуальні колекції та синоніми типів
"""

import json

import pytest

from listing_engine.domain.catalog.entities import (
    Collection,
    CollectionKind,
    CollectionPage,
    ItemSummary,
    extract_primary_image,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ('["https://cdn/a.jpg", "https://cdn/b.jpg"]', "https://cdn/a.jpg"),
        ('["not-a-url", "/img/b.png"]', "/img/b.png"),
        (json.dumps([{"alt": "x"}, {"src": "//cdn/c.webp"}]), "//cdn/c.webp"),
        (json.dumps([{"variantUrlPublic": "https://cdn/v.jpg"}]), "https://cdn/v.jpg"),
        ("{broken", None),
        ("", None),
        (None, None),
        ('{"url": "https://cdn/a.jpg"}', None),
        (["https://cdn/list.jpg"], "https://cdn/list.jpg"),
    ],
)
def test_extract_primary_image(raw, expected) -> None:
    assert extract_primary_image(raw) == expected


def test_collection_kind_synonyms() -> None:
    assert CollectionKind.from_raw("Products") is CollectionKind.ITEMS
    assert CollectionKind.from_raw("blogs") is CollectionKind.ARTICLES
    assert CollectionKind.from_raw(None) is CollectionKind.ITEMS
    assert CollectionKind.ARTICLES.synonyms == ("blog", "blogs")


def test_collection_from_row_normalizes_fields() -> None:
    collection = Collection.from_row(
        {"id": 7, "type": "products", "slug": " maquinas-cnc ", "name": "  ", "updated_at": "2024-01-02 03:04:05"}
    )
    assert collection.id == "7"
    assert collection.kind is CollectionKind.ITEMS
    assert collection.slug == "maquinas-cnc"
    assert collection.name == "Maquinas Cnc"
    assert collection.last_updated_at == "2024-01-02 03:04:05"
    assert not collection.is_virtual


def test_virtual_collection_has_readable_name() -> None:
    collection = Collection.virtual("industrial-robots")
    assert collection.is_virtual
    assert collection.name == "Industrial Robots"
    assert collection.kind is CollectionKind.ITEMS


def test_item_summary_from_row() -> None:
    item = ItemSummary.from_row(
        {
            "id": 3,
            "slug": "robot-arm",
            "title_h1": "Robot Arm",
            "short_summary": "",
            "price": "1200",
            "images_json": '["https://cdn/arm.jpg"]',
        }
    )
    assert item is not None
    assert item.id == "3"
    assert item.title == "Robot Arm"
    assert item.short_summary is None
    assert item.primary_image_url == "https://cdn/arm.jpg"


def test_item_summary_without_slug_is_dropped() -> None:
    assert ItemSummary.from_row({"id": 1, "slug": "  "}) is None


def test_item_summary_title_falls_back_to_slug() -> None:
    item = ItemSummary.from_row({"id": 1, "slug": "bare"})
    assert item is not None and item.title == "bare"


def test_collection_page_empty() -> None:
    assert CollectionPage.empty().is_empty
    assert not CollectionPage((), 3).is_empty
