# 🪜 listing_engine/infrastructure/collections/membership_strategies.py
"""
🪜 Впорядковані стратегії визначення членства та комбінатор «перша застосовна».

🔹 `LinkTableStrategy` — явна таблиця звʼязків колекція→товар; порожній результат ескалює далі.
🔹 `LegacyColumnStrategy` — предикат поверх легасі-колонок; порожній результат остаточний.
🔹 `first_applicable()` — єдине місце, де живе політика ескалації: неприйнятні стратегії
   пропускаються, застосовна й непорожня (або неескалююча) повертається одразу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🧵 Паралельні page/count запити
import logging                                                      # 🧾 Логи ескалації
from abc import ABC, abstractmethod                                 # 🏛️ Контракт стратегії
from dataclasses import dataclass                                   # 📦 Результат комбінатора
from decimal import Decimal                                         # 🔢 COUNT(*) з деяких драйверів
from typing import Any, List, Optional, Sequence, Tuple             # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import StoreSettings            # ⚙️ Імена таблиць
from listing_engine.domain.catalog.entities import Collection, CollectionPage, ItemSummary
from listing_engine.domain.catalog.interfaces import IStoreClient, Row
from listing_engine.domain.catalog.predicates import Predicate, identifier
from listing_engine.infrastructure.collections.collection_matcher import CollectionMatcher
from listing_engine.infrastructure.collections.schema_introspector import SchemaIntrospector

logger = logging.getLogger(__name__)

ITEM_COLUMNS: Tuple[str, ...] = (
    "id",
    "slug",
    "title_h1",
    "short_summary",
    "price",
    "images_json",
    "updated_at",
)


def normalize_count(rows: Sequence[Row]) -> int:
    """`COUNT(*)` у вигляді int незалежно від драйвера (int/str/Decimal)."""
    if not rows:
        return 0
    value: Any = rows[0].get("total")
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, Decimal)):
        return max(0, int(value))
    try:
        return max(0, int(str(value).strip()))
    except (TypeError, ValueError):
        return 0


def rows_to_items(rows: Sequence[Row]) -> Tuple[ItemSummary, ...]:
    items = (ItemSummary.from_row(row) for row in rows)
    return tuple(item for item in items if item is not None)


def _select_list(alias: Optional[str] = None) -> str:
    prefix = f"{alias}." if alias else ""
    return ", ".join(f"{prefix}{identifier(column)}" for column in ITEM_COLUMNS)


# ================================
# 🏛️ КОНТРАКТ СТРАТЕГІЇ
# ================================
class MembershipStrategy(ABC):
    """Один спосіб отримати сторінку товарів колекції."""

    name: str = "strategy"
    escalate_on_empty: bool = False

    @abstractmethod
    async def is_applicable(self) -> bool:
        """Чи підтримує сховище цей спосіб (структурна перевірка, не «чи є дані»)."""

    @abstractmethod
    async def fetch(self, collection: Collection, *, limit: int, offset: int) -> CollectionPage:
        """Сторінка товарів і загальна кількість."""


@dataclass(frozen=True, slots=True)
class StrategyResult:
    strategy: Optional[str]
    page: CollectionPage


async def first_applicable(
    strategies: Sequence[MembershipStrategy],
    collection: Collection,
    *,
    limit: int,
    offset: int,
) -> StrategyResult:
    """
    🪜 Оцінює стратегії по черзі.

    Неприйнятна стратегія пропускається. Застосовна повертає результат, якщо він непорожній
    або якщо стратегія не ескалює порожнечу. Інакше наступна стратегія.
    """
    for strategy in strategies:
        if not await strategy.is_applicable():
            logger.debug("⏭️ %s неприйнятна для %s", strategy.name, collection.slug)
            continue
        page = await strategy.fetch(collection, limit=limit, offset=offset)
        if page.is_empty and strategy.escalate_on_empty:
            logger.debug("🪜 %s порожня для %s → ескалація", strategy.name, collection.slug)
            continue
        return StrategyResult(strategy.name, page)
    return StrategyResult(None, CollectionPage.empty())


# ================================
# 🔗 ТАБЛИЦЯ ЗВʼЯЗКІВ
# ================================
class LinkTableStrategy(MembershipStrategy):
    """🔗 Членство як перші-класні звʼязки `category_products(category_id, product_id)`."""

    name = "link_table"
    escalate_on_empty = True

    def __init__(self, store: IStoreClient, introspector: SchemaIntrospector, settings: StoreSettings) -> None:
        self._store = store
        self._introspector = introspector
        self._settings = settings

    async def is_applicable(self) -> bool:
        return await self._introspector.detect_link_table(self._store)

    async def fetch(self, collection: Collection, *, limit: int, offset: int) -> CollectionPage:
        items_table = identifier(self._settings.item_table)
        link_table = identifier(self._settings.link_table)
        source = (
            f"FROM {items_table} p JOIN {link_table} cp ON cp.product_id = p.id "
            f"WHERE cp.category_id = ? AND p.is_published = 1"
        )
        page_sql = f"SELECT {_select_list('p')} {source} ORDER BY p.title_h1 ASC, p.id ASC LIMIT ? OFFSET ?"
        count_sql = f"SELECT COUNT(*) AS total {source}"
        rows, count_rows = await asyncio.gather(
            self._store.query(page_sql, (collection.id, limit, offset)),
            self._store.query(count_sql, (collection.id,)),
        )
        return CollectionPage(rows_to_items(rows), normalize_count(count_rows))


# ================================
# 🧬 ЛЕГАСІ-КОЛОНКИ
# ================================
class LegacyColumnStrategy(MembershipStrategy):
    """🧬 Нечітке зіставлення через легасі-колонки (скалярна / JSON / CSV)."""

    name = "legacy_columns"
    escalate_on_empty = False

    def __init__(
        self,
        store: IStoreClient,
        introspector: SchemaIntrospector,
        settings: StoreSettings,
        matcher: Optional[CollectionMatcher] = None,
    ) -> None:
        self._store = store
        self._introspector = introspector
        self._settings = settings
        self._matcher = matcher or CollectionMatcher()

    async def is_applicable(self) -> bool:
        return bool(await self._introspector.detect_membership_columns(self._store))

    async def fetch(self, collection: Collection, *, limit: int, offset: int) -> CollectionPage:
        representations = await self._introspector.detect_membership_columns(self._store)
        predicate: Predicate = self._matcher.build_for_collection(collection, representations)
        if predicate.is_false:
            return CollectionPage.empty()

        fragment, params = predicate.render()
        items_table = identifier(self._settings.item_table)
        where = f"WHERE is_published = 1 AND ({fragment})"
        page_sql = f"SELECT {_select_list()} FROM {items_table} {where} ORDER BY title_h1 ASC, id ASC LIMIT ? OFFSET ?"
        count_sql = f"SELECT COUNT(*) AS total FROM {items_table} {where}"
        page_params: List[Any] = [*params, limit, offset]
        rows, count_rows = await asyncio.gather(
            self._store.query(page_sql, page_params),
            self._store.query(count_sql, list(params)),
        )
        return CollectionPage(rows_to_items(rows), normalize_count(count_rows))


__all__ = [
    "ITEM_COLUMNS",
    "LegacyColumnStrategy",
    "LinkTableStrategy",
    "MembershipStrategy",
    "StrategyResult",
    "first_applicable",
    "normalize_count",
    "rows_to_items",
]
