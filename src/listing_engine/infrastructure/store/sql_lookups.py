# 🔎 listing_engine/infrastructure/store/sql_lookups.py
"""
🔎 SQL-реалізації колабораторів пошуку поверх будь-якого `IStoreClient`.

🔹 `SqlCollectionLookup` — опубліковані колекції за slug або типом (з синонімами типів).
🔹 `SqlItemBatchLookup` — пакетний пошук опублікованих товарів; читання йде через кеш товарів.
🔹 `invalidate_item(slug)` — скидання запису кешу після зміни товару.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # ⏹️ CancelledError
import logging                                                      # 🧾 Логи пошуку
from typing import Any, Dict, List, Optional, Sequence              # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import StoreSettings
from listing_engine.domain.catalog.entities import Collection, CollectionKind, ItemSummary
from listing_engine.domain.catalog.interfaces import ICollectionLookup, IItemBatchLookup, IStoreClient
from listing_engine.domain.catalog.predicates import identifier
from listing_engine.infrastructure.collections.membership_strategies import ITEM_COLUMNS, rows_to_items
from listing_engine.shared.cache.ttl_cache import TtlCache, get_item_cache
from listing_engine.shared.errors import StoreQueryFailure
from listing_engine.shared.metrics import STORE_QUERY_FAILURES

logger = logging.getLogger(__name__)

COLLECTION_COLUMNS = (
    "id",
    "type",
    "slug",
    "name",
    "short_description",
    "long_description",
    "hero_image_url",
    "updated_at",
)


def _columns(names: Sequence[str]) -> str:
    return ", ".join(identifier(name) for name in names)


# ================================
# 🗂️ КОЛЕКЦІЇ
# ================================
class SqlCollectionLookup(ICollectionLookup):
    """🗂️ Пошук опублікованих колекцій. Збої сховища прокидаються викликачу."""

    def __init__(self, store: IStoreClient, settings: Optional[StoreSettings] = None) -> None:
        self._store = store
        self._settings = settings or StoreSettings()

    async def find_collection_by_slug(self, slug: str, *, request_id: Optional[str] = None) -> Optional[Collection]:
        cleaned = (slug or "").strip()
        if not cleaned:
            return None
        table = identifier(self._settings.collection_table)
        sql = f"SELECT {_columns(COLLECTION_COLUMNS)} FROM {table} WHERE slug = ? AND is_published = 1 LIMIT 1"
        try:
            rows = await self._store.query(sql, (cleaned,))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failure = StoreQueryFailure("find_collection_by_slug", slug=cleaned, request_id=request_id, details=str(exc))
            logger.error("❌ %s", failure.message, extra=failure.to_log_extra())
            raise
        if not rows:
            logger.debug("🔎 Колекцію %s не знайдено", cleaned, extra={"slug": cleaned, "request_id": request_id})
            return None
        return Collection.from_row(rows[0])

    async def list_collections_by_type(
        self, kind: CollectionKind, *, request_id: Optional[str] = None
    ) -> List[Collection]:
        synonyms = kind.synonyms
        table = identifier(self._settings.collection_table)
        placeholders = ", ".join("?" for _ in synonyms)
        sql = (
            f"SELECT {_columns(COLLECTION_COLUMNS)} FROM {table} "
            f"WHERE LOWER(type) IN ({placeholders}) AND is_published = 1 ORDER BY name ASC, slug ASC"
        )
        rows = await self._store.query(sql, synonyms)
        collections = [Collection.from_row(row) for row in rows]
        result = [collection for collection in collections if collection.slug]
        logger.info("🗂️ Колекцій типу %s: %d", kind.value, len(result), extra={"request_id": request_id})
        return result


# ================================
# 🛒 ТОВАРИ
# ================================
class SqlItemBatchLookup(IItemBatchLookup):
    """🛒 Пакетний пошук товарів із кешем за slug."""

    def __init__(
        self,
        store: IStoreClient,
        settings: Optional[StoreSettings] = None,
        item_cache: Optional[TtlCache[Any]] = None,
    ) -> None:
        self._store = store
        self._settings = settings or StoreSettings()
        self._cache = item_cache if item_cache is not None else get_item_cache()

    async def find_items_by_slugs(
        self, slugs: Sequence[str], *, request_id: Optional[str] = None
    ) -> List[ItemSummary]:
        """
        🛒 Опубліковані товари за списком slug-ів.

        Збій запиту деградує до того, що вже є в кеші (`StoreQueryFailure` у логах).
        """
        wanted = list(dict.fromkeys(s.strip() for s in slugs if s and s.strip()))
        found: Dict[str, ItemSummary] = {}
        missing: List[str] = []
        for slug in wanted:
            cached = self._cache.get(slug)
            if cached is not None:
                found[slug] = cached
            else:
                missing.append(slug)

        if missing:
            table = identifier(self._settings.item_table)
            placeholders = ", ".join("?" for _ in missing)
            sql = f"SELECT {_columns(ITEM_COLUMNS)} FROM {table} WHERE is_published = 1 AND slug IN ({placeholders})"
            try:
                rows = await self._store.query(sql, missing)
            except asyncio.CancelledError:
                raise
            except Exception as exc:                                 # noqa: BLE001
                failure = StoreQueryFailure("find_items_by_slugs", request_id=request_id, details=str(exc))
                STORE_QUERY_FAILURES.labels(operation=failure.operation).inc()
                logger.error("❌ %s", failure.message, extra=failure.to_log_extra())
                rows = []
            for item in rows_to_items(rows):
                self._cache.set(item.slug, item)
                found[item.slug] = item

        logger.debug(
            "🛒 Товари: %d запитано, %d із кешу, %d знайдено",
            len(wanted),
            len(wanted) - len(missing),
            len(found),
            extra={"request_id": request_id},
        )
        return [found[slug] for slug in wanted if slug in found]

    def invalidate_item(self, slug: str) -> None:
        """♻️ Прибирає товар із кешу (після редагування чи зняття з публікації)."""
        self._cache.invalidate((slug or "").strip())


__all__ = ["COLLECTION_COLUMNS", "SqlCollectionLookup", "SqlItemBatchLookup"]
