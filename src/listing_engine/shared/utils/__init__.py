# 🧰 listing_engine/shared/utils/__init__.py
"""
🧰 Пакет спільних утиліт: логування, нормалізація slug-ів, query-параметри.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# 🔤 Slug-и
from .slug_norm import (
    SLUG_MAX_LENGTH,
    collapse_whitespace,
    slugify,
    strip_diacritics,
    title_from_slug,
    to_slug_or_none,
)

# 🔗 Query-параметри
from .query_params import build_listing_page_href, parse_page_param, resolve_query_param

__all__ = [
    "LOG_NAME",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "SLUG_MAX_LENGTH",
    "collapse_whitespace",
    "slugify",
    "strip_diacritics",
    "title_from_slug",
    "to_slug_or_none",
    "build_listing_page_href",
    "parse_page_param",
    "resolve_query_param",
]
