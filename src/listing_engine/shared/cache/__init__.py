# ♻️ listing_engine/shared/cache/__init__.py
"""
♻️ Ефемерні процесні кеші з TTL.
"""

from __future__ import annotations

from .ttl_cache import (
    CacheLookup,
    CacheOutcome,
    TtlCache,
    get_document_cache,
    get_item_cache,
    reset_caches,
)

__all__ = [
    "CacheLookup",
    "CacheOutcome",
    "TtlCache",
    "get_document_cache",
    "get_item_cache",
    "reset_caches",
]
