# 📦 listing_engine/config/setup/container.py
"""
📦 Контейнер залежностей рушія лістингів.

🔹 Створює кеші, інтроспектор, резолвер, композитор і sitemap у правильному порядку DI
🔹 Отримує клієнт сховища ззовні: рушій не володіє підключенням
🔹 За прапорцем конфігу піднімає Prometheus-експортер
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from typing import TYPE_CHECKING, Any, Optional                          # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import EngineSettings                # ⚙️ Типізовані налаштування
from listing_engine.domain.catalog.interfaces import IStoreClient        # 🗄️ Контракт сховища
from listing_engine.infrastructure.collections.collection_matcher import CollectionMatcher  # 🎯 Предикати
from listing_engine.infrastructure.collections.product_resolver import CollectionProductResolver  # 🧺 Товари колекції
from listing_engine.infrastructure.collections.schema_introspector import get_schema_introspector  # 🔬 Схема
from listing_engine.infrastructure.content.listing_composer import ListingComposer  # 🧵 Композиція
from listing_engine.infrastructure.content.listing_renderer import ListingRenderer  # 🎨 HTML
from listing_engine.infrastructure.sitemap.collection_sitemap import CollectionSitemapService  # 🗺️ Sitemap
from listing_engine.infrastructure.store.sql_lookups import SqlCollectionLookup, SqlItemBatchLookup  # 🔎 Пошук
from listing_engine.shared.cache.ttl_cache import get_document_cache, get_item_cache  # ♻️ Кеші
from listing_engine.shared.metrics import maybe_start_prometheus         # 📈 Bootstrap метрик
from listing_engine.shared.utils.logger import LOG_NAME, init_logging_from_config  # 🧾 Конфіг логування

if TYPE_CHECKING:
    from listing_engine.config.config_service import ConfigService       # 🗂️ Тип під час перевірки

logger = logging.getLogger(LOG_NAME)


def _int_or_default(value: Any, default: int) -> int:
    """Ціле число або запасне значення."""
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def bootstrap_logging() -> logging.Logger:
    """
    Зчитує конфіг логування і запускає кореневий логер пакета.
    """
    from listing_engine.config.config_service import ConfigService       # 🧭 Локальний імпорт для уникнення циклів

    node = ConfigService().get("logging", {}) or {}
    return init_logging_from_config(node)


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class Container:
    """
    Координує створення сервісів рушія поверх наданого клієнта сховища.
    """

    def __init__(self, config: "ConfigService", store: IStoreClient, *, settings: Optional[EngineSettings] = None):
        self.config = config
        self.store = store
        self.settings = settings or EngineSettings.from_config(config)
        logger.info("🚀 Стартуємо побудову контейнера listing_engine")
        self._bootstrap_metrics_if_enabled()
        self._setup_caches()
        self._setup_collections()
        self._setup_content()
        logger.info("✅ Контейнер listing_engine готовий")

    # ================================
    # 📈 МЕТРИКИ
    # ================================
    def _bootstrap_metrics_if_enabled(self) -> None:
        """
        Стартує Prometheus-експортер, якщо це дозволено конфігурацією.
        """
        if not bool(self.config.get("metrics.enabled", False)):
            logger.debug("📉 Prometheus вимкнено конфігом")
            return
        exporter_name = str(self.config.get("metrics.exporter", "prometheus") or "prometheus").lower()
        if exporter_name != "prometheus":
            logger.debug("📉 Експортер %s не підтримується", exporter_name)
            return
        port = _int_or_default(self.config.get("metrics.prometheus.port"), 9118)
        try:
            maybe_start_prometheus(port)
        except OSError:
            logger.exception("⚠️ Не вдалося стартувати експортер метрик")

    # ================================
    # ♻️ КЕШІ
    # ================================
    def _setup_caches(self) -> None:
        self.item_cache = get_item_cache(self.settings.cache.item_ttl_seconds)
        self.document_cache = get_document_cache(self.settings.cache.document_ttl_seconds)

    # ================================
    # 🧺 КОЛЕКЦІЇ
    # ================================
    def _setup_collections(self) -> None:
        store_settings = self.settings.store
        self.introspector = get_schema_introspector(store_settings)
        self.matcher = CollectionMatcher()
        self.resolver = CollectionProductResolver(
            self.store,
            settings=store_settings,
            introspector=self.introspector,
            matcher=self.matcher,
            item_cache=self.item_cache,
        )
        self.collection_lookup = SqlCollectionLookup(self.store, store_settings)
        self.item_lookup = SqlItemBatchLookup(self.store, store_settings, self.item_cache)

    # ================================
    # 🧵 КОНТЕНТ ТА SITEMAP
    # ================================
    def _setup_content(self) -> None:
        listing_settings = self.settings.listing
        self.renderer = ListingRenderer(listing_settings)
        self.composer = ListingComposer(
            self.collection_lookup,
            self.item_lookup,
            self.resolver,
            renderer=self.renderer,
            settings=listing_settings,
        )
        self.sitemap = CollectionSitemapService(
            self.collection_lookup,
            document_cache=self.document_cache,
            collection_href_prefix=listing_settings.collection_href_prefix,
        )


__all__ = ["Container", "bootstrap_logging"]
