# 🗄️ listing_engine/infrastructure/store/sqlite_store.py
"""
🗄️ Асинхронний клієнт SQLite, сумісний із MySQL-діалектом предикатів членства.

🔹 Запити виконуються в потоці (`asyncio.to_thread`), доступ до зʼєднання серіалізовано.
🔹 Реєструє функції `JSON_VALID`, `JSON_CONTAINS`, `FIND_IN_SET`, `CONCAT` та Unicode-`LOWER`,
   тож ті самі SQL-фрагменти працюють і в MySQL/TiDB, і тут.
🔹 Проби схеми: `PRAGMA table_info` для колонок, `sqlite_master` для таблиць.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🧵 Виконання у потоці
import json                                                         # 📄 JSON-функції
import logging                                                      # 🧾 Логи клієнта
import sqlite3                                                      # 🗄️ Драйвер SQLite
import threading                                                    # 🔒 Серіалізація доступу
from typing import Any, Iterable, List, Optional, Sequence          # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.domain.catalog.interfaces import IStoreClient, Row
from listing_engine.domain.catalog.predicates import identifier

logger = logging.getLogger(__name__)


# ================================
# 🧮 MYSQL-СУМІСНІ ФУНКЦІЇ
# ================================
def _json_or_invalid(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8", errors="replace")
    if not isinstance(value, str):
        raise ValueError("not a JSON document")
    return json.loads(value)


def sql_json_valid(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        _json_or_invalid(value)
    except ValueError:
        return 0
    return 1


def sql_json_contains(target: Any, candidate: Any) -> Optional[int]:
    """`JSON_CONTAINS(target, candidate)` для скалярів та масивів."""
    if target is None or candidate is None:
        return None
    try:
        document = _json_or_invalid(target)
        needle = _json_or_invalid(candidate)
    except ValueError:
        return None
    if isinstance(document, list):
        needles = needle if isinstance(needle, list) else [needle]
        return int(all(item in document for item in needles))
    return int(document == needle)


def sql_find_in_set(needle: Any, haystack: Any) -> Optional[int]:
    """1-based позиція `needle` у списку через кому (0, якщо не знайдено)."""
    if needle is None or haystack is None:
        return None
    for index, token in enumerate(str(haystack).split(","), start=1):
        if token == str(needle):
            return index
    return 0


def sql_concat(*parts: Any) -> Optional[str]:
    if any(part is None for part in parts):
        return None
    return "".join(str(part) for part in parts)


def sql_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


# ================================
# 🗄️ КЛІЄНТ
# ================================
class SqliteStoreClient(IStoreClient):
    """🗄️ Реалізація `IStoreClient` поверх `sqlite3`."""

    def __init__(self, path: str = ":memory:") -> None:
        self._path = path
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._register_functions(self._conn)
        logger.debug("🗄️ SQLite підключено: %s", path)

    @staticmethod
    def _register_functions(conn: sqlite3.Connection) -> None:
        conn.create_function("JSON_VALID", 1, sql_json_valid, deterministic=True)
        conn.create_function("JSON_CONTAINS", 2, sql_json_contains, deterministic=True)
        conn.create_function("FIND_IN_SET", 2, sql_find_in_set, deterministic=True)
        conn.create_function("CONCAT", -1, sql_concat, deterministic=True)
        conn.create_function("LOWER", 1, sql_lower, deterministic=True)

    # ================================
    # 🔁 СИНХРОННЕ ЯДРО
    # ================================
    def _fetch(self, sql: str, params: Sequence[Any]) -> List[Row]:
        with self._lock:
            cursor = self._conn.execute(sql, tuple(params))
            try:
                return [dict(row) for row in cursor.fetchall()]
            finally:
                cursor.close()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Запит на запис (фікстури, міграції)."""
        with self._lock:
            self._conn.execute(sql, tuple(params))
            self._conn.commit()

    def executemany(self, sql: str, rows: Iterable[Sequence[Any]]) -> None:
        with self._lock:
            self._conn.executemany(sql, [tuple(row) for row in rows])
            self._conn.commit()

    def executescript(self, script: str) -> None:
        with self._lock:
            self._conn.executescript(script)
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ================================
    # 🌐 ASYNC API
    # ================================
    async def query(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        return await asyncio.to_thread(self._fetch, sql, params)

    async def has_column(self, table: str, column: str) -> bool:
        rows = await self.query(f"PRAGMA table_info({identifier(table)})")
        return any(row.get("name") == column for row in rows)

    async def has_table(self, table: str) -> bool:
        rows = await self.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
        )
        return bool(rows)


__all__ = [
    "SqliteStoreClient",
    "sql_concat",
    "sql_find_in_set",
    "sql_json_contains",
    "sql_json_valid",
    "sql_lower",
]
