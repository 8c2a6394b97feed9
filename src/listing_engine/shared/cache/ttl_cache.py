# 💾 listing_engine/shared/cache/ttl_cache.py
"""
💾 Thread-safe in-memory кеш з фіксованим TTL для нормалізованих записів.

🔹 Один TTL на екземпляр: кеш товарів і кеш похідних документів (sitemap) живуть окремо.
🔹 `lookup()` розрізняє hit / miss / expired (для метрик), `get()` для викликача дає лише «значення або None».
🔹 `invalidate(key)` прибирає один запис, `invalidate()` без ключа очищує весь кеш.
🔹 Жодного виселення окрім TTL: простір ключів обмежений розміром каталогу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи роботи кешу
import time                                                         # ⏱️ Монотонний годинник
from dataclasses import dataclass                                   # 📦 Внутрішні структури
from enum import Enum                                               # 🔖 Результат звернення
from threading import RLock                                         # 🔒 Потокобезпечний доступ
from typing import Any, Callable, Dict, Generic, Optional, TypeVar   # 📐 Типи API

# 🧩 Внутрішні модулі проєкту
from listing_engine.shared.metrics import CACHE_LOOKUPS             # 📊 Лічильники hit/miss/expired

logger = logging.getLogger(__name__)                                # 🧾 Локальний логер кешу

T = TypeVar("T")


# ================================
# 🔖 РЕЗУЛЬТАТ ЗВЕРНЕННЯ
# ================================
class CacheOutcome(str, Enum):
    """Чим закінчилось звернення до кешу."""

    HIT = "hit"
    MISS = "miss"
    EXPIRED = "expired"


@dataclass(frozen=True, slots=True)
class CacheLookup(Generic[T]):
    outcome: CacheOutcome
    value: Optional[T] = None

    @property
    def found(self) -> bool:
        return self.outcome is CacheOutcome.HIT


@dataclass(frozen=True, slots=True)
class _CacheItem:
    data: Any                                                        # 📄 Незмінний знімок значення
    expires_at: float                                                # ⏳ Момент закінчення (monotonic)


# ================================
# 💾 ОСНОВНИЙ КЕШ
# ================================
class TtlCache(Generic[T]):
    """💾 Процесний кеш з фіксованим TTL (last-write-wins)."""

    def __init__(self, name: str, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.name = name
        self.ttl_seconds = max(0.0, float(ttl_seconds))
        self._clock = clock
        self._cache: Dict[str, _CacheItem] = {}
        self._lock = RLock()
        self._hits = 0
        self._misses = 0
        self._expired = 0
        logger.debug("⚙️ TtlCache init name=%s ttl=%s", name, self.ttl_seconds)

    def lookup(self, key: str) -> CacheLookup[T]:
        """🔍 Звернення з розрізненням hit / miss / expired."""
        with self._lock:
            item = self._cache.get(key)
            if item is None:
                self._misses += 1
                outcome = CacheLookup(CacheOutcome.MISS)
            elif self._clock() >= item.expires_at:
                self._cache.pop(key, None)                            # 🧹 Прострочене прибираємо одразу
                self._expired += 1
                outcome = CacheLookup(CacheOutcome.EXPIRED)
            else:
                self._hits += 1
                outcome = CacheLookup(CacheOutcome.HIT, item.data)
        CACHE_LOOKUPS.labels(cache=self.name, outcome=outcome.outcome.value).inc()
        logger.debug("🔍 cache %s: %s key=%s", outcome.outcome.value, self.name, key)
        return outcome

    def get(self, key: str) -> Optional[T]:
        """Значення або None (miss і expired поводяться однаково)."""
        return self.lookup(key).value

    def set(self, key: str, value: T) -> None:
        """💾 Зберігає знімок значення з TTL екземпляра."""
        with self._lock:
            self._cache[key] = _CacheItem(data=value, expires_at=self._clock() + self.ttl_seconds)
        logger.debug("💾 set: %s key=%s", self.name, key)

    def invalidate(self, key: Optional[str] = None) -> None:
        """🧹 Видаляє один ключ або (без ключа) весь кеш."""
        with self._lock:
            if key is None:
                self._cache.clear()
                logger.info("🧼 Cache cleared: %s", self.name)
                return
            removed = self._cache.pop(key, None)
        logger.debug("🧹 invalidate %s key=%s removed=%s", self.name, key, removed is not None)

    def stats(self) -> Dict[str, int]:
        """📈 Прості лічильники для діагностики."""
        with self._lock:
            return {
                "items_total": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "expired": self._expired,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            item = self._cache.get(key)
            return item is not None and self._clock() < item.expires_at


# ================================
# 🌍 ПРОЦЕСНІ ЕКЗЕМПЛЯРИ
# ================================
ITEM_CACHE_NAME = "items"
DOCUMENT_CACHE_NAME = "documents"
DEFAULT_ITEM_TTL_SECONDS = 60.0
DEFAULT_DOCUMENT_TTL_SECONDS = 300.0

_registry_lock = RLock()
_item_cache: Optional[TtlCache[Any]] = None
_document_cache: Optional[TtlCache[Any]] = None


def get_item_cache(ttl_seconds: Optional[float] = None) -> TtlCache[Any]:
    """Кеш нормалізованих товарів (створюється при першому зверненні)."""
    global _item_cache
    with _registry_lock:
        if _item_cache is None:
            _item_cache = TtlCache(ITEM_CACHE_NAME, ttl_seconds or DEFAULT_ITEM_TTL_SECONDS)
        return _item_cache


def get_document_cache(ttl_seconds: Optional[float] = None) -> TtlCache[Any]:
    """Кеш похідних документів (sitemap та інші індекси)."""
    global _document_cache
    with _registry_lock:
        if _document_cache is None:
            _document_cache = TtlCache(DOCUMENT_CACHE_NAME, ttl_seconds or DEFAULT_DOCUMENT_TTL_SECONDS)
        return _document_cache


def reset_caches() -> None:
    """Скидає процесні кеші (ізоляція тестів)."""
    global _item_cache, _document_cache
    with _registry_lock:
        _item_cache = None
        _document_cache = None


__all__ = [
    "CacheLookup",
    "CacheOutcome",
    "TtlCache",
    "get_document_cache",
    "get_item_cache",
    "reset_caches",
]
