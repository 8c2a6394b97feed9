# 🗺️ listing_engine/infrastructure/sitemap/__init__.py
"""
🗺️ Похідні документи каталогу (sitemap колекцій).
"""

from .collection_sitemap import CollectionSitemapService

__all__ = ["CollectionSitemapService"]
