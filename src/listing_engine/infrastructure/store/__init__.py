# 🗄️ listing_engine/infrastructure/store/__init__.py
"""
🗄️ Адаптери сховища: SQLite-клієнт та SQL-реалізації пошуку колекцій і товарів.
"""

from .sql_lookups import SqlCollectionLookup, SqlItemBatchLookup
from .sqlite_store import SqliteStoreClient

__all__ = ["SqlCollectionLookup", "SqlItemBatchLookup", "SqliteStoreClient"]
