# 📦 listing_engine/domain/catalog/entities.py
"""
📦 Доменно-чисті сутності каталогу: колекції, товари, директиви та лістинги.

🔹 Усі сутності іммʼютабельні (frozen dataclass + tuple замість list).
🔹 `from_row()` нормалізує «сирі» рядки сховища: синоніми типів, порожні рядки → None.
🔹 `extract_primary_image()` знаходить перше валідне посилання у полі зображень
   (JSON-масив рядків, JSON-масив обʼєктів або відсутнє значення).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import json                                                         # 📄 Розбір images_json
import logging                                                      # 🧾 Логування нормалізації
from dataclasses import dataclass, field                            # 🧱 Опис сутностей
from enum import Enum                                               # 🔖 Переліки
from typing import Any, Mapping, Optional, Tuple                    # 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.shared.utils.slug_norm import title_from_slug   # 🏷️ Назва віртуальної колекції

# ================================
# 🪵 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(__name__)

_IMAGE_OBJECT_KEYS = ("url", "src", "href", "variantUrlPublic")     # 🖼️ Ключі посилань в обʼєктах зображень
_URL_PREFIXES = ("http://", "https://", "//", "/")


# ================================
# 🔖 ПЕРЕЛІКИ
# ================================
class CollectionKind(str, Enum):
    """Тип колекції: товарна категорія або категорія блогу."""

    ITEMS = "product"
    ARTICLES = "blog"

    @classmethod
    def from_raw(cls, value: Any) -> "CollectionKind":
        """Зводить сирі значення (`products`, `Blog`, …) до переліку; невідоме → ITEMS."""
        normalized = str(value or "").strip().lower()
        if normalized in ("blog", "blogs"):
            return cls.ARTICLES
        return cls.ITEMS

    @property
    def synonyms(self) -> Tuple[str, ...]:
        if self is CollectionKind.ARTICLES:
            return ("blog", "blogs")
        return ("product", "products")


class RepresentationKind(str, Enum):
    """Історичні способи зберігання членства товару в колекції."""

    SCALAR_COLUMN = "scalar"
    JSON_ARRAY_COLUMN = "json_array"
    CSV_COLUMN = "csv"


class DirectiveKind(str, Enum):
    """Різновид директиви лістингу в контенті статті."""

    COLLECTION_BOUND = "collection"
    EXPLICIT_LIST = "manual"


# ================================
# 🧽 НОРМАЛІЗАЦІЙНІ ХЕЛПЕРИ
# ================================
def _trimmed_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_id(value: Any, fallback: str) -> str:
    """Ідентифікатор як рядок (int, bigint-рядок, тощо)."""
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value == value:
        return str(int(value))
    text = _trimmed_or_none(value)
    return text or fallback


def _looks_like_url(value: Any) -> bool:
    return isinstance(value, str) and value.strip().startswith(_URL_PREFIXES)


def extract_primary_image(raw: Any) -> Optional[str]:
    """
    🖼️ Перше валідне посилання з поля зображень товару.

    Args:
        raw: JSON-рядок, уже розібраний список або None.

    Returns:
        Optional[str]: URL або None, якщо нічого придатного немає.
    """
    entries: Any = raw
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return None
        try:
            entries = json.loads(raw)
        except ValueError:
            logger.debug("🖼️ images_json не є валідним JSON: %.60r", raw)
            return None
    if not isinstance(entries, list):
        return None

    for entry in entries:
        if _looks_like_url(entry):
            return entry.strip()
        if isinstance(entry, Mapping):
            for key in _IMAGE_OBJECT_KEYS:
                candidate = entry.get(key)
                if _looks_like_url(candidate):
                    return candidate.strip()
    return None


# ================================
# 🗂️ КОЛЕКЦІЯ
# ================================
@dataclass(frozen=True, slots=True)
class Collection:
    """Колекція (категорія). Ідентичність: пара `(kind, slug)`."""

    id: str
    kind: CollectionKind
    slug: str
    name: str
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    hero_image_url: Optional[str] = None
    last_updated_at: Optional[str] = None
    is_virtual: bool = False

    @classmethod
    def virtual(cls, slug: str) -> "Collection":
        """Синтетична колекція зі slug, щоб порожній стан мав людиночитну назву."""
        return cls(
            id="0",
            kind=CollectionKind.ITEMS,
            slug=slug,
            name=title_from_slug(slug) or slug,
            is_virtual=True,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Collection":
        slug = str(row.get("slug") or "").strip()
        last_updated = _trimmed_or_none(row.get("updated_at")) or _trimmed_or_none(row.get("last_tidb_update_at"))
        return cls(
            id=_normalize_id(row.get("id"), slug),
            kind=CollectionKind.from_raw(row.get("type")),
            slug=slug,
            name=_trimmed_or_none(row.get("name")) or title_from_slug(slug),
            short_description=_trimmed_or_none(row.get("short_description")),
            long_description=_trimmed_or_none(row.get("long_description")),
            hero_image_url=_trimmed_or_none(row.get("hero_image_url")),
            last_updated_at=last_updated,
        )


# ================================
# 🛒 ТОВАР
# ================================
@dataclass(frozen=True, slots=True)
class ItemSummary:
    """Коротке представлення товару для карток лістингу."""

    id: str
    slug: str
    title: str
    short_summary: Optional[str] = None
    price: Optional[str] = None
    primary_image_url: Optional[str] = None
    last_updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Optional["ItemSummary"]:
        """Рядок сховища → `ItemSummary`; без slug повертає None."""
        slug = _trimmed_or_none(row.get("slug"))
        if not slug:
            return None
        last_updated = _trimmed_or_none(row.get("updated_at")) or _trimmed_or_none(row.get("last_tidb_update_at"))
        return cls(
            id=_normalize_id(row.get("id"), slug),
            slug=slug,
            title=_trimmed_or_none(row.get("title_h1")) or _trimmed_or_none(row.get("title")) or slug,
            short_summary=_trimmed_or_none(row.get("short_summary")),
            price=_trimmed_or_none(row.get("price")),
            primary_image_url=extract_primary_image(row.get("images_json")),
            last_updated_at=last_updated,
        )


# ================================
# 🧬 ПРЕДСТАВЛЕННЯ ЧЛЕНСТВА
# ================================
@dataclass(frozen=True, slots=True)
class MembershipRepresentation:
    """Тегований варіант: яким чином колонка `column` кодує членство."""

    kind: RepresentationKind
    column: str


# ================================
# 🧩 ДИРЕКТИВИ ТА ЛІСТИНГИ
# ================================
@dataclass(frozen=True, slots=True)
class Directive:
    """Директива лістингу, витягнута з контенту статті."""

    kind: DirectiveKind
    marker: str
    collection_slug: Optional[str] = None
    collection_label: Optional[str] = None
    explicit_slugs: Tuple[str, ...] = ()

    @property
    def is_explicit(self) -> bool:
        return self.kind is DirectiveKind.EXPLICIT_LIST


@dataclass(frozen=True, slots=True)
class Pagination:
    page_key: str
    current_page: int
    total_pages: int


@dataclass(frozen=True, slots=True)
class ListingResult:
    """Готовий до рендеру лістинг. Порожній лістинг представлено як None."""

    key: str
    heading: str
    items: Tuple[ItemSummary, ...]
    subtitle: Optional[str] = None
    view_all_href: Optional[str] = None
    pagination: Optional[Pagination] = None


@dataclass(frozen=True, slots=True)
class CollectionPage:
    """Сторінка товарів колекції разом із загальною кількістю."""

    items: Tuple[ItemSummary, ...] = field(default_factory=tuple)
    total_count: int = 0

    @classmethod
    def empty(cls) -> "CollectionPage":
        return cls((), 0)

    @property
    def is_empty(self) -> bool:
        return not self.items and self.total_count <= 0


__all__ = [
    "Collection",
    "CollectionKind",
    "CollectionPage",
    "Directive",
    "DirectiveKind",
    "ItemSummary",
    "ListingResult",
    "MembershipRepresentation",
    "Pagination",
    "RepresentationKind",
    "extract_primary_image",
]
