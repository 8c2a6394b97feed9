# 🧩 listing_engine/domain/catalog/__init__.py
"""
🧩 Пакет `domain.catalog` публікує сутності каталогу, контракти колабораторів та чисті алгоритми.

🔹 `entities.py` — `Collection`, `ItemSummary`, `Directive`, `ListingResult`, представлення членства.
🔹 `interfaces.py` — `IStoreClient`, `ICollectionLookup`, `IItemBatchLookup`.
🔹 `variants.py` — варіанти назви колекції для нечіткого зіставлення.
🔹 `predicates.py` — структурний конструктор SQL-предикатів.
"""

from .entities import (
    Collection,
    CollectionKind,
    CollectionPage,
    Directive,
    DirectiveKind,
    ItemSummary,
    ListingResult,
    MembershipRepresentation,
    Pagination,
    RepresentationKind,
    extract_primary_image,
)
from .interfaces import ICollectionLookup, IItemBatchLookup, IStoreClient
from .predicates import FALSE, TRUE, AllOf, AnyOf, Condition, Predicate, all_of, any_of
from .variants import build_raw_variants, build_variants

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
    "ICollectionLookup",
    "IItemBatchLookup",
    "IStoreClient",
    "FALSE",
    "TRUE",
    "AllOf",
    "AnyOf",
    "Condition",
    "Predicate",
    "all_of",
    "any_of",
    "build_raw_variants",
    "build_variants",
]
