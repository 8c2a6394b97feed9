# 🧺 listing_engine/infrastructure/collections/product_resolver.py
"""
🧺 Повертає сторінку опублікованих товарів колекції разом із загальною кількістю.

🔹 Послідовність стратегій: таблиця звʼязків → легасі-колонки (через `first_applicable`).
🔹 Жодної автокорекції сторінки: за межами діапазону повертається порожня сторінка з total > 0.
🔹 Будь-яка помилка запиту логується з контекстом і деградує до порожнього результату.
🔹 Знайдені товари записуються в ефемерний кеш товарів за slug.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # ⏹️ CancelledError
import logging                                                      # 🧾 Логи резолвера
from typing import Any, Optional, Sequence                          # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import StoreSettings
from listing_engine.domain.catalog.entities import Collection, CollectionPage
from listing_engine.domain.catalog.interfaces import IStoreClient
from listing_engine.infrastructure.collections.collection_matcher import CollectionMatcher
from listing_engine.infrastructure.collections.membership_strategies import (
    LegacyColumnStrategy,
    LinkTableStrategy,
    MembershipStrategy,
    first_applicable,
)
from listing_engine.infrastructure.collections.schema_introspector import (
    SchemaIntrospector,
    get_schema_introspector,
)
from listing_engine.shared.cache.ttl_cache import TtlCache, get_item_cache
from listing_engine.shared.errors import StoreQueryFailure
from listing_engine.shared.metrics import STORE_QUERY_FAILURES

logger = logging.getLogger(__name__)


class CollectionProductResolver:
    """🧺 Чиста функція пагінованого запиту товарів колекції (best-effort)."""

    def __init__(
        self,
        store: IStoreClient,
        *,
        settings: Optional[StoreSettings] = None,
        introspector: Optional[SchemaIntrospector] = None,
        matcher: Optional[CollectionMatcher] = None,
        item_cache: Optional[TtlCache[Any]] = None,
        strategies: Optional[Sequence[MembershipStrategy]] = None,
    ) -> None:
        self._store = store
        self._settings = settings or StoreSettings()
        self._introspector = introspector or get_schema_introspector(self._settings)
        self._item_cache = item_cache if item_cache is not None else get_item_cache()
        self._strategies: Sequence[MembershipStrategy] = strategies or (
            LinkTableStrategy(store, self._introspector, self._settings),
            LegacyColumnStrategy(store, self._introspector, self._settings, matcher),
        )
        logger.debug("⚙️ CollectionProductResolver init (strategies=%s)", [s.name for s in self._strategies])

    async def resolve_collection_items(
        self,
        collection: Collection,
        *,
        limit: int,
        offset: int,
        request_id: Optional[str] = None,
    ) -> CollectionPage:
        """
        🧺 Сторінка товарів колекції.

        Args:
            collection: Збережена або віртуальна колекція (зіставлення йде за її slug/name).
            limit: Розмір сторінки.
            offset: Зсув від початку (без автокорекції).
            request_id: Кореляційний ідентифікатор для логів.

        Returns:
            CollectionPage: Товари сторінки та загальна кількість; порожня при помилці.
        """
        limit = max(0, int(limit))
        offset = max(0, int(offset))
        extra = {"slug": collection.slug, "request_id": request_id}
        try:
            result = await first_applicable(self._strategies, collection, limit=limit, offset=offset)
        except asyncio.CancelledError:
            raise
        except Exception as exc:                                     # noqa: BLE001
            failure = StoreQueryFailure(
                "resolve_collection_items",
                slug=collection.slug,
                request_id=request_id,
                details=str(exc),
            )
            STORE_QUERY_FAILURES.labels(operation=failure.operation).inc()
            logger.error("❌ %s", failure.message, extra=failure.to_log_extra(), exc_info=True)
            return CollectionPage.empty()

        for item in result.page.items:
            self._item_cache.set(item.slug, item)

        logger.info(
            "✅ Колекція %s: %d товарів на сторінці, всього %d (стратегія=%s)",
            collection.slug,
            len(result.page.items),
            result.page.total_count,
            result.strategy or "none",
            extra={**extra, "strategy": result.strategy},
        )
        return result.page


__all__ = ["CollectionProductResolver"]
