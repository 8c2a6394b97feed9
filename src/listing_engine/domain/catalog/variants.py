# 🔀 listing_engine/domain/catalog/variants.py
"""
🔀 Генератор варіантів назви колекції для нечіткого зіставлення з легасі-полями.

🔹 Сирі slug та назва (обрізані), slug-подібна форма назви без діакритики.
🔹 Для slug-подібних форм також варіанти через пробіл і через підкреслення.
🔹 Усе приводиться до нижнього регістру; порожні рядки не потрапляють у результат.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import FrozenSet, Iterable, Iterator, Optional           # 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.shared.utils.slug_norm import collapse_whitespace, slugify


def _slug_forms(slug_like: str) -> Iterator[str]:
    """Сам slug, а також його варіанти з пробілами та підкресленнями."""
    yield slug_like
    yield slug_like.replace("-", " ")
    yield slug_like.replace("-", "_")


def _candidate_forms(slug: Optional[str], name: Optional[str]) -> Iterator[str]:
    raw_slug = (slug or "").strip()
    raw_name = (name or "").strip()

    # 1) сирі значення
    yield raw_slug
    yield raw_name

    # 2-3) slug-подібна форма назви та її варіанти
    name_slug = slugify(raw_name)
    if name_slug:
        yield from _slug_forms(name_slug)

    # 4) варіанти сирого slug
    if raw_slug:
        yield from _slug_forms(raw_slug)


def _expand(forms: Iterable[str]) -> Iterator[str]:
    """Додає до кожної форми версію зі схлопнутими пробілами."""
    for form in forms:
        yield form.strip()
        yield collapse_whitespace(form)


def build_raw_variants(slug: Optional[str], name: Optional[str]) -> FrozenSet[str]:
    """
    🔀 Варіанти без зміни регістру.

    Потрібні для JSON-масивів у сховищах з регістрозалежним порівнянням.
    """
    return frozenset(form for form in _expand(_candidate_forms(slug, name)) if form)


def build_variants(slug: Optional[str], name: Optional[str]) -> FrozenSet[str]:
    """
    🔀 Повний набір варіантів у нижньому регістрі.

    Args:
        slug: Slug колекції (`industrial-robots`).
        name: Відображувана назва (`Industrial Robots`).

    Returns:
        FrozenSet[str]: Детермінований набір (порядок не важливий).
    """
    return frozenset(form.lower() for form in build_raw_variants(slug, name) if form.lower())


__all__ = ["build_raw_variants", "build_variants"]
