# 🗺️ listing_engine/infrastructure/sitemap/collection_sitemap.py
"""
🗺️ Sitemap опублікованих товарних колекцій з кешуванням у кеші документів.

🔹 Джерело: `ICollectionLookup.list_collections_by_type(CollectionKind.ITEMS)`.
🔹 Ключ кешу: `{site_url}::{path}`; TTL задає кеш документів (типово 5 хвилин).
🔹 Невалідні slug-и пропускаються з попередженням; `lastmod` лише для коректних дат.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи побудови
from datetime import datetime, timezone                             # 🕒 Нормалізація lastmod
from typing import Any, List, Optional                              # 📐 Типізація
from urllib.parse import quote, urljoin                             # 🔗 Абсолютні URL
from xml.sax.saxutils import escape                                 # 🧼 Екранування XML

# 🧩 Внутрішні модулі проєкту
from listing_engine.domain.catalog.entities import Collection, CollectionKind
from listing_engine.domain.catalog.interfaces import ICollectionLookup
from listing_engine.shared.cache.ttl_cache import TtlCache, get_document_cache

logger = logging.getLogger(__name__)

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"
COLLECTIONS_SITEMAP_PATH = "/sitemaps/categories.xml"


def to_iso_datetime(value: Optional[str]) -> Optional[str]:
    """ISO-8601 у UTC або None для порожніх/непридатних значень."""
    if not value:
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def render_urlset(entries: List[str]) -> str:
    content = "\n" + "\n".join(entries) + "\n" if entries else ""
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns="{SITEMAP_NAMESPACE}">{content}</urlset>'


class CollectionSitemapService:
    """🗺️ Будує (і кешує) XML-sitemap колекцій."""

    def __init__(
        self,
        collection_lookup: ICollectionLookup,
        *,
        document_cache: Optional[TtlCache[Any]] = None,
        collection_href_prefix: str = "/categories/",
    ) -> None:
        self._collections = collection_lookup
        self._cache = document_cache if document_cache is not None else get_document_cache()
        self._prefix = collection_href_prefix

    @staticmethod
    def cache_key(site_url: str, path: str = COLLECTIONS_SITEMAP_PATH) -> str:
        return f"{site_url}::{path}"

    def _entry(self, site_url: str, collection: Collection) -> Optional[str]:
        slug = (collection.slug or "").strip()
        if not slug:
            logger.warning("⚠️ Колекцію id=%s пропущено: порожній slug", collection.id)
            return None
        loc = urljoin(site_url, f"{self._prefix}{quote(slug)}")
        lines = ["  <url>", f"    <loc>{escape(loc)}</loc>"]
        lastmod = to_iso_datetime(collection.last_updated_at)
        if lastmod:
            lines.append(f"    <lastmod>{lastmod}</lastmod>")
        lines.append("  </url>")
        return "\n".join(lines)

    async def build_sitemap(self, site_url: str, *, request_id: Optional[str] = None) -> str:
        """
        🗺️ XML-sitemap товарних колекцій для `site_url`.

        Args:
            site_url: Базовий URL сайту (`https://example.com`).
            request_id: Кореляційний ідентифікатор для логів.

        Returns:
            str: Документ `<urlset>`; з кешу, якщо він ще не прострочений.
        """
        key = self.cache_key(site_url)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        collections = await self._collections.list_collections_by_type(CollectionKind.ITEMS, request_id=request_id)
        entries = [entry for entry in (self._entry(site_url, c) for c in collections) if entry]
        xml = render_urlset(entries)
        self._cache.set(key, xml)
        logger.info("🗺️ Sitemap колекцій: %d URL", len(entries), extra={"request_id": request_id})
        return xml

    def invalidate(self, site_url: Optional[str] = None) -> None:
        """♻️ Скидає кешований sitemap сайту (або весь кеш документів)."""
        self._cache.invalidate(self.cache_key(site_url) if site_url else None)


__all__ = [
    "COLLECTIONS_SITEMAP_PATH",
    "CollectionSitemapService",
    "render_urlset",
    "to_iso_datetime",
]
