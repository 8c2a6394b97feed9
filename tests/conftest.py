# tests/conftest.py
import json
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

import pytest

# 1) Додаємо src у sys.path, щоб працював імпорт "listing_engine.…"
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from listing_engine.config.config_service import ConfigService  # noqa: E402
from listing_engine.infrastructure.collections.schema_introspector import reset_schema_caches  # noqa: E402
from listing_engine.infrastructure.store.sqlite_store import SqliteStoreClient  # noqa: E402
from listing_engine.shared.cache.ttl_cache import reset_caches  # noqa: E402


# 2) Ізоляція процесного стану між тестами
@pytest.fixture(autouse=True)
def _isolate_process_state():
    reset_caches()
    reset_schema_caches()
    ConfigService.reset()
    yield
    reset_caches()
    reset_schema_caches()
    ConfigService.reset()


# --- Схема тестового каталогу ---
CATEGORIES_DDL = """
CREATE TABLE categories (
    id INTEGER PRIMARY KEY,
    type TEXT NOT NULL DEFAULT 'product',
    slug TEXT NOT NULL,
    name TEXT,
    short_description TEXT,
    long_description TEXT,
    hero_image_url TEXT,
    updated_at TEXT,
    is_published INTEGER NOT NULL DEFAULT 1
);
"""

PRODUCTS_DDL = """
CREATE TABLE products (
    id INTEGER PRIMARY KEY,
    slug TEXT NOT NULL,
    title_h1 TEXT,
    short_summary TEXT,
    price TEXT,
    images_json TEXT,
    updated_at TEXT,
    is_published INTEGER NOT NULL DEFAULT 1
    {legacy_columns}
);
"""

LEGACY_COLUMNS = ",\n    category TEXT,\n    category_slugs TEXT,\n    categories TEXT"

LINK_DDL = """
CREATE TABLE category_products (
    category_id INTEGER NOT NULL,
    product_id INTEGER NOT NULL
);
"""


class CatalogSeeder:
    """Наповнює SQLite-каталог категоріями та товарами."""

    def __init__(self, store: SqliteStoreClient, *, legacy: bool) -> None:
        self.store = store
        self.legacy = legacy
        self._next_id = 1

    def add_collection(
        self,
        slug: str,
        name: Optional[str] = None,
        *,
        type_: str = "product",
        published: bool = True,
        updated_at: Optional[str] = None,
    ) -> int:
        cid = self._next_id
        self._next_id += 1
        self.store.execute(
            "INSERT INTO categories (id, type, slug, name, updated_at, is_published) VALUES (?, ?, ?, ?, ?, ?)",
            (cid, type_, slug, name, updated_at, 1 if published else 0),
        )
        return cid

    def add_item(
        self,
        slug: str,
        title: Optional[str] = None,
        *,
        category: Optional[str] = None,
        category_slugs: Optional[Any] = None,
        categories: Optional[str] = None,
        published: bool = True,
        images: Optional[Iterable[Any]] = None,
        price: Optional[str] = None,
        summary: Optional[str] = None,
    ) -> int:
        pid = self._next_id
        self._next_id += 1
        images_json = json.dumps(list(images)) if images is not None else None
        if self.legacy:
            slugs_value = category_slugs
            if slugs_value is not None and not isinstance(slugs_value, str):
                slugs_value = json.dumps(slugs_value, ensure_ascii=False)
            self.store.execute(
                "INSERT INTO products (id, slug, title_h1, short_summary, price, images_json, is_published, "
                "category, category_slugs, categories) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (pid, slug, title or slug, summary, price, images_json, 1 if published else 0,
                 category, slugs_value, categories),
            )
        else:
            self.store.execute(
                "INSERT INTO products (id, slug, title_h1, short_summary, price, images_json, is_published) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (pid, slug, title or slug, summary, price, images_json, 1 if published else 0),
            )
        return pid

    def link(self, collection_id: int, item_id: int) -> None:
        self.store.execute(
            "INSERT INTO category_products (category_id, product_id) VALUES (?, ?)",
            (collection_id, item_id),
        )


def make_store(*, legacy: bool = True, link_table: bool = False) -> SqliteStoreClient:
    store = SqliteStoreClient()
    store.executescript(CATEGORIES_DDL)
    store.executescript(PRODUCTS_DDL.format(legacy_columns=LEGACY_COLUMNS if legacy else ""))
    if link_table:
        store.executescript(LINK_DDL)
    return store


@pytest.fixture
def legacy_store():
    store = make_store(legacy=True)
    yield store
    store.close()


@pytest.fixture
def catalog(legacy_store):
    return CatalogSeeder(legacy_store, legacy=True)


@pytest.fixture
def link_store():
    store = make_store(legacy=True, link_table=True)
    yield store
    store.close()


@pytest.fixture
def link_catalog(link_store):
    return CatalogSeeder(link_store, legacy=True)


@pytest.fixture
def bare_store():
    store = make_store(legacy=False)
    yield store
    store.close()
