# 🧺 listing_engine/infrastructure/collections/__init__.py
"""
🧺 Визначення членства товарів у колекціях.

🔹 `schema_introspector` — які легасі-колонки членства існують.
🔹 `collection_matcher` — SQL-предикат «товар належить колекції».
🔹 `membership_strategies` — таблиця звʼязків → легасі-колонки.
🔹 `product_resolver` — сторінка товарів колекції з загальною кількістю.
"""

from .collection_matcher import CollectionMatcher, build_match_predicate
from .membership_strategies import LegacyColumnStrategy, LinkTableStrategy, MembershipStrategy, first_applicable
from .product_resolver import CollectionProductResolver
from .schema_introspector import SchemaIntrospector, get_schema_introspector, reset_schema_caches

__all__ = [
    "CollectionMatcher",
    "CollectionProductResolver",
    "LegacyColumnStrategy",
    "LinkTableStrategy",
    "MembershipStrategy",
    "SchemaIntrospector",
    "build_match_predicate",
    "first_applicable",
    "get_schema_introspector",
    "reset_schema_caches",
]
