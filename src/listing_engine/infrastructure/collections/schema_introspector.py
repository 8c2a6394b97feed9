# 🔬 listing_engine/infrastructure/collections/schema_introspector.py
"""
🔬 Визначає, які легасі-представлення членства існують у таблиці товарів.

🔹 Пробує три відомі колонки (скалярна, JSON-масив, CSV-текст) у фіксованому пріоритеті.
🔹 Результат кешується на весь час життя процесу; `reset()` очищує памʼять для тестів.
🔹 Збій проби не фатальний: колонку пропускаємо, пишемо попередження з контекстом.
🔹 Окремо (з тим самим життєвим циклом) перевіряє наявність таблиці звʼязків колекція→товар.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # ⏹️ CancelledError не ковтаємо
import logging                                                      # 🧾 Логи проб
from threading import RLock                                         # 🔒 Захист процесного реєстру
from typing import List, Optional, Tuple                            # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import StoreSettings            # ⚙️ Імена таблиць та колонок
from listing_engine.domain.catalog.entities import (
    MembershipRepresentation,
    RepresentationKind,
)
from listing_engine.domain.catalog.interfaces import IStoreClient   # 🗄️ Контракт сховища
from listing_engine.shared.errors import SchemaProbeFailure          # 🚨 Нефатальна помилка проби

logger = logging.getLogger(__name__)

Representations = Tuple[MembershipRepresentation, ...]


class SchemaIntrospector:
    """🔬 Одноразова (на процес) інтроспекція схеми з явним скиданням."""

    def __init__(self, settings: Optional[StoreSettings] = None) -> None:
        self._settings = settings or StoreSettings()
        self._representations: Optional[Representations] = None
        self._link_table: Optional[bool] = None

    @property
    def candidates(self) -> Representations:
        """Кандидати у порядку пріоритету."""
        s = self._settings
        return (
            MembershipRepresentation(RepresentationKind.SCALAR_COLUMN, s.scalar_column),
            MembershipRepresentation(RepresentationKind.JSON_ARRAY_COLUMN, s.json_array_column),
            MembershipRepresentation(RepresentationKind.CSV_COLUMN, s.csv_column),
        )

    @property
    def is_detected(self) -> bool:
        return self._representations is not None

    async def detect_membership_columns(self, store: IStoreClient) -> Representations:
        """
        🔬 Повертає наявні представлення членства (memoized).

        Args:
            store: Клієнт сховища з пробою `has_column`.

        Returns:
            Tuple[MembershipRepresentation, ...]: Порожній кортеж означає «представлень немає».
        """
        if self._representations is not None:
            return self._representations

        table = self._settings.item_table
        found: List[MembershipRepresentation] = []
        failures = 0
        for candidate in self.candidates:
            try:
                exists = await store.has_column(table, candidate.column)
            except asyncio.CancelledError:
                raise
            except Exception as exc:                                 # noqa: BLE001
                failures += 1
                failure = SchemaProbeFailure(candidate.column, table=table, details=str(exc))
                logger.warning("⚠️ %s", failure.message, extra=failure.to_log_extra())
                continue
            if exists:
                found.append(candidate)
                logger.debug("🔬 Колонка %s.%s присутня (%s)", table, candidate.column, candidate.kind.value)

        detected = tuple(found)
        if failures == len(self.candidates):
            logger.warning("⚠️ Усі проби колонок %s впали; результат не кешуємо", table)
            return detected

        self._representations = detected
        logger.info(
            "✅ Представлення членства: %s",
            ", ".join(f"{r.kind.value}:{r.column}" for r in detected) or "none",
        )
        return detected

    async def detect_link_table(self, store: IStoreClient) -> bool:
        """🔗 Чи моделює сховище членство окремою таблицею звʼязків (memoized)."""
        if self._link_table is not None:
            return self._link_table
        table = self._settings.link_table
        try:
            exists = bool(await store.has_table(table))
        except asyncio.CancelledError:
            raise
        except Exception as exc:                                     # noqa: BLE001
            failure = SchemaProbeFailure("*", table=table, details=str(exc))
            logger.warning("⚠️ Проба таблиці звʼязків не вдалася", extra=failure.to_log_extra())
            return False
        self._link_table = exists
        logger.info("🔗 Таблиця звʼязків %s: %s", table, "є" if exists else "відсутня")
        return exists

    def reset(self) -> None:
        """🧹 Очищує закешований результат інтроспекції."""
        self._representations = None
        self._link_table = None


# ================================
# 🌍 ПРОЦЕСНИЙ ЕКЗЕМПЛЯР
# ================================
_registry_lock = RLock()
_introspector: Optional[SchemaIntrospector] = None


def get_schema_introspector(settings: Optional[StoreSettings] = None) -> SchemaIntrospector:
    """Процесний інтроспектор (створюється при першому зверненні)."""
    global _introspector
    with _registry_lock:
        if _introspector is None:
            _introspector = SchemaIntrospector(settings)
        return _introspector


def reset_schema_caches() -> None:
    """Скидає процесний інтроспектор (ізоляція тестів)."""
    global _introspector
    with _registry_lock:
        if _introspector is not None:
            _introspector.reset()
        _introspector = None


__all__ = ["SchemaIntrospector", "get_schema_introspector", "reset_schema_caches"]
