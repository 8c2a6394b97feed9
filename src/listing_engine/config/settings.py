# 📖 listing_engine/config/settings.py
"""
📖 Типобезпечні налаштування рушія, зібрані з `ConfigService`.

🔹 Імутабельні (`dataclass(frozen=True, slots=True)`), щоб сервіси не змінювали їх на льоту.
🔹 Валідує імена таблиць/колонок: у SQL вони потрапляють як ідентифікатори.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                     # 🧾 Логування збирання налаштувань
import re                                                          # 🔍 Перевірка SQL-ідентифікаторів
from dataclasses import dataclass                                  # 🧱 Опис імутабельних структур
from typing import Any, Optional                                   # 🧮 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.config_service import ConfigService    # ⚙️ Джерело сирих значень
from listing_engine.shared.errors import ConfigurationError        # 🚨 Некоректні значення

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def validate_identifier(value: str, *, field_name: str) -> str:
    """Гарантує, що значення можна безпечно вставити в SQL як ідентифікатор."""
    if not isinstance(value, str) or not _IDENTIFIER_RE.match(value):
        raise ConfigurationError(f"Invalid SQL identifier for {field_name}", details=repr(value))
    return value


def _int_or_default(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        logger.warning("⚠️ Некоректне ціле значення %r → %s", value, default)
        return default
    return parsed if parsed > 0 else default


def _float_or_default(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("⚠️ Некоректне дробове значення %r → %s", value, default)
        return default
    return parsed if parsed >= 0 else default


# ================================
# 🗄️ НАЛАШТУВАННЯ СХОВИЩА
# ================================
@dataclass(frozen=True, slots=True)
class StoreSettings:
    item_table: str = "products"
    collection_table: str = "categories"
    link_table: str = "category_products"
    scalar_column: str = "category"
    json_array_column: str = "category_slugs"
    csv_column: str = "categories"

    def __post_init__(self) -> None:
        for name in ("item_table", "collection_table", "link_table", "scalar_column", "json_array_column", "csv_column"):
            validate_identifier(getattr(self, name), field_name=name)


# ================================
# 🧩 НАЛАШТУВАННЯ ЛІСТИНГІВ
# ================================
@dataclass(frozen=True, slots=True)
class ListingSettings:
    page_size: int = 10
    heading: str = "Productos relacionados"
    empty_collection_message: str = "Todavía no hay productos publicados en {name}."
    empty_manual_message: str = "Todavía no hay productos seleccionados para esta sección."
    collection_href_prefix: str = "/categories/"
    item_href_prefix: str = "/p/"


@dataclass(frozen=True, slots=True)
class CacheSettings:
    item_ttl_seconds: float = 60.0
    document_ttl_seconds: float = 300.0


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """⚙️ Повний набір налаштувань рушія."""

    store: StoreSettings = StoreSettings()
    listing: ListingSettings = ListingSettings()
    cache: CacheSettings = CacheSettings()

    @classmethod
    def from_config(cls, config: Optional[ConfigService] = None) -> "EngineSettings":
        """🏗️ Збирає налаштування з `ConfigService` із дефолтами на кожне поле."""
        cfg = config or ConfigService()
        defaults = cls()
        columns = cfg.get("store.membership_columns", {}) or {}
        store = StoreSettings(
            item_table=cfg.get("store.item_table", defaults.store.item_table),
            collection_table=cfg.get("store.collection_table", defaults.store.collection_table),
            link_table=cfg.get("store.link_table", defaults.store.link_table),
            scalar_column=columns.get("scalar", defaults.store.scalar_column),
            json_array_column=columns.get("json_array", defaults.store.json_array_column),
            csv_column=columns.get("csv", defaults.store.csv_column),
        )
        listing = ListingSettings(
            page_size=_int_or_default(cfg.get("listing.page_size"), defaults.listing.page_size),
            heading=str(cfg.get("listing.heading", defaults.listing.heading)),
            empty_collection_message=str(
                cfg.get("listing.empty_collection_message", defaults.listing.empty_collection_message)
            ),
            empty_manual_message=str(cfg.get("listing.empty_manual_message", defaults.listing.empty_manual_message)),
            collection_href_prefix=str(
                cfg.get("listing.collection_href_prefix", defaults.listing.collection_href_prefix)
            ),
            item_href_prefix=str(cfg.get("listing.item_href_prefix", defaults.listing.item_href_prefix)),
        )
        cache = CacheSettings(
            item_ttl_seconds=_float_or_default(cfg.get("cache.item_ttl_seconds"), defaults.cache.item_ttl_seconds),
            document_ttl_seconds=_float_or_default(
                cfg.get("cache.document_ttl_seconds"), defaults.cache.document_ttl_seconds
            ),
        )
        logger.debug("⚙️ EngineSettings зібрано: page_size=%s", listing.page_size)
        return cls(store=store, listing=listing, cache=cache)


__all__ = [
    "CacheSettings",
    "EngineSettings",
    "ListingSettings",
    "StoreSettings",
    "validate_identifier",
]
