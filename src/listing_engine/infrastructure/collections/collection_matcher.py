# 🎯 listing_engine/infrastructure/collections/collection_matcher.py
"""
🎯 Будує SQL-предикат «товар належить колекції» поверх легасі-представлень членства.

🔹 Скалярна колонка: `LOWER(TRIM(col))` дорівнює одному з варіантів.
🔹 JSON-масив: валідний JSON і `JSON_CONTAINS` для сирих варіантів та `LOWER(col)` для нижньорегістрових.
🔹 CSV-текст: токен через `FIND_IN_SET` або `,token,` у нормалізованій копії поля.
🔹 Під-предикати обʼєднуються через OR; без представлень чи варіантів → `1 = 0`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import json                                                         # 📄 Кодування значень для JSON_CONTAINS
import logging                                                      # 🧾 Діагностика предикатів
import re                                                           # 🧪 Прибирання пробілів у токенах
from typing import Iterable, List, Sequence                         # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.domain.catalog.entities import (
    Collection,
    MembershipRepresentation,
    RepresentationKind,
)
from listing_engine.domain.catalog.predicates import (
    FALSE,
    Condition,
    Predicate,
    all_of,
    any_of,
    identifier,
)
from listing_engine.domain.catalog.variants import build_raw_variants, build_variants

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")
LIKE_ESCAPE = "!"
# 🧽 Символи, що вирізаються з копії CSV-поля (передаються як параметри)
CSV_BLANKS = (" ", "\t", "\n", "\r", "\u00a0")


def _escape_like(value: str) -> str:
    """Екранує метасимволи LIKE (`%`, `_`) через `!`."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


# ================================
# 🧱 ПІД-ПРЕДИКАТИ ПРЕДСТАВЛЕНЬ
# ================================
def scalar_predicate(column: str, variants: Sequence[str]) -> Predicate:
    if not variants:
        return FALSE
    col = identifier(column)
    placeholders = ", ".join("?" for _ in variants)
    return Condition(f"LOWER(TRIM({col})) IN ({placeholders})", tuple(variants))


def json_array_predicate(column: str, variants: Sequence[str], raw_variants: Sequence[str] = ()) -> Predicate:
    """Сирі варіанти шукаються в колонці як є; нижньорегістрові у `LOWER(col)`."""
    if not variants and not raw_variants:
        return FALSE
    col = identifier(column)
    branches: List[Predicate] = [
        Condition(f"JSON_CONTAINS({col}, ?)", (json.dumps(variant, ensure_ascii=False),))
        for variant in raw_variants
    ]
    branches.extend(
        Condition(f"JSON_CONTAINS(LOWER({col}), ?)", (json.dumps(variant, ensure_ascii=False),))
        for variant in variants
    )
    return all_of((Condition(f"JSON_VALID({col}) = 1"), any_of(branches)))


def csv_predicate(column: str, variants: Sequence[str]) -> Predicate:
    """Токени й поле порівнюються без пробілів, табуляцій, переносів рядка та NBSP."""
    tokens = sorted({_WHITESPACE_RE.sub("", variant) for variant in variants} - {""})
    if not tokens:
        return FALSE
    col = identifier(column)
    stripped = f"LOWER({col})"
    for _ in CSV_BLANKS:
        stripped = f"REPLACE({stripped}, ?, '')"
    branches: List[Predicate] = []
    for token in tokens:
        branches.append(Condition(f"FIND_IN_SET(?, {stripped}) > 0", (token, *CSV_BLANKS)))
        branches.append(
            Condition(
                f"CONCAT(',', {stripped}, ',') LIKE ? ESCAPE '{LIKE_ESCAPE}'",
                (*CSV_BLANKS, f"%,{_escape_like(token)},%"),
            )
        )
    return any_of(branches)


# ================================
# 🎯 ПУБЛІЧНИЙ API
# ================================
def build_match_predicate(
    representations: Iterable[MembershipRepresentation],
    variants: Iterable[str],
    raw_variants: Iterable[str] = (),
) -> Predicate:
    """
    🎯 Предикат членства для всіх наявних представлень.

    Args:
        representations: Результат інтроспекції схеми (у порядку пріоритету).
        variants: Нижньорегістрові варіанти назви колекції.
        raw_variants: Варіанти без зміни регістру (для JSON-масивів).

    Returns:
        Predicate: OR-комбінація під-предикатів; `FALSE`, якщо зіставляти нічого.
    """
    folded = sorted({v for v in variants if v})
    raw = sorted({v for v in raw_variants if v} - set(folded))
    if not folded:
        return FALSE

    branches: List[Predicate] = []
    for representation in representations:
        if representation.kind is RepresentationKind.SCALAR_COLUMN:
            branches.append(scalar_predicate(representation.column, folded))
        elif representation.kind is RepresentationKind.JSON_ARRAY_COLUMN:
            branches.append(json_array_predicate(representation.column, folded, raw))
        elif representation.kind is RepresentationKind.CSV_COLUMN:
            branches.append(csv_predicate(representation.column, folded))
    return any_of(branches)


class CollectionMatcher:
    """🎯 Поєднує генератор варіантів і побудову предиката для конкретної колекції."""

    def build_for_collection(
        self,
        collection: Collection,
        representations: Sequence[MembershipRepresentation],
    ) -> Predicate:
        variants = build_variants(collection.slug, collection.name)
        raw_variants = build_raw_variants(collection.slug, collection.name)
        predicate = build_match_predicate(representations, variants, raw_variants)
        logger.debug(
            "🎯 Предикат для %s: %d варіантів, %d представлень, false=%s",
            collection.slug,
            len(variants),
            len(representations),
            predicate.is_false,
        )
        return predicate


__all__ = [
    "CSV_BLANKS",
    "CollectionMatcher",
    "build_match_predicate",
    "csv_predicate",
    "json_array_predicate",
    "scalar_predicate",
]
