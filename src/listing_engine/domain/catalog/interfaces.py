# listing_engine/domain/catalog/interfaces.py
"""
🧩 Контракти зовнішніх колабораторів рушія.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence

from .entities import Collection, CollectionKind, ItemSummary

Row = Mapping[str, Any]


# ================================
# 🏛️ ИНТЕРФЕЙСЫ
# ================================

class IStoreClient(ABC):
    """Параметризований доступ до реляційного сховища."""

    @abstractmethod
    async def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        """Виконує запит і повертає рядки як мапи."""

    @abstractmethod
    async def has_column(self, table: str, column: str) -> bool:
        """Проба існування колонки."""

    @abstractmethod
    async def has_table(self, table: str) -> bool:
        """Проба існування таблиці."""


class ICollectionLookup(ABC):
    """Пошук колекцій."""

    @abstractmethod
    async def find_collection_by_slug(self, slug: str, *, request_id: Optional[str] = None) -> Optional[Collection]:
        pass

    @abstractmethod
    async def list_collections_by_type(
        self, kind: CollectionKind, *, request_id: Optional[str] = None
    ) -> List[Collection]:
        pass


class IItemBatchLookup(ABC):
    """Пакетний пошук опублікованих товарів; порядок не гарантовано."""

    @abstractmethod
    async def find_items_by_slugs(
        self, slugs: Sequence[str], *, request_id: Optional[str] = None
    ) -> List[ItemSummary]:
        pass


__all__ = ["ICollectionLookup", "IItemBatchLookup", "IStoreClient", "Row"]
