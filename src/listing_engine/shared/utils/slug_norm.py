# 🔤 listing_engine/shared/utils/slug_norm.py
"""
🔤 slug_norm.py — уніфікована нормалізація slug-ів та назв колекцій.

🔹 Прибирає діакритику (`Máquinas` → `Maquinas`) через NFKD-розклад.
🔹 Зводить будь-який текст до slug-форми `[a-z0-9]+(-[a-z0-9]+)*`.
🔹 Відновлює людиночитну назву зі slug (`maquinas-cnc` → `Maquinas Cnc`).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import re                                                   # 🧪 Регулярні вирази для очищення
import unicodedata                                          # 🔡 Розклад символів на базу + діакритику
from typing import Optional                                 # 🧰 Типізація

__all__ = [
    "SLUG_MAX_LENGTH",
    "collapse_whitespace",
    "slugify",
    "strip_diacritics",
    "title_from_slug",
    "to_slug_or_none",
]

# ================================
# ⚙️ КОНСТАНТИ МОДУЛЯ
# ================================
SLUG_MAX_LENGTH = 80                                        # ✂️ Максимальна довжина slug
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_EDGE_HYPHENS_RE = re.compile(r"^-+|-+$")
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_SEGMENT_RE = re.compile(r"[-_\s]+")


# ================================
# 🧹 ПУБЛІЧНІ ФУНКЦІЇ
# ================================
def strip_diacritics(value: str) -> str:
    """
    🧹 Видаляє діакритичні знаки, зберігаючи базові літери.

    Args:
        value (str): Вхідний рядок.

    Returns:
        str: Рядок без combining-символів.
    """
    decomposed = unicodedata.normalize("NFKD", value or "")
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collapse_whitespace(value: str, joiner: str = " ") -> str:
    """Схлопує послідовності пробілів у один `joiner` і обрізає краї."""
    return _WHITESPACE_RE.sub(joiner, (value or "").strip())


def slugify(value: Optional[str]) -> str:
    """
    🔤 Перетворює довільний текст на slug.

    Args:
        value (str | None): Назва колекції, токен директиви чи slug.

    Returns:
        str: Slug (може бути порожнім, якщо в тексті немає [a-z0-9]).
    """
    base = strip_diacritics(value or "").lower()            # 🔡 Нижній регістр без діакритики
    base = _NON_ALNUM_RE.sub("-", base)                     # ➖ Будь-які інші символи → дефіс
    base = _EDGE_HYPHENS_RE.sub("", base)                   # ✂️ Прибираємо дефіси з країв
    return base[:SLUG_MAX_LENGTH].strip("-")


def to_slug_or_none(value: Optional[str]) -> Optional[str]:
    """Slug або None для порожнього/нерелевантного тексту."""
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    return slugify(trimmed) or None


def title_from_slug(slug: str) -> str:
    """
    🏷️ Людиночитна назва зі slug: сегменти з великої літери.

    >>> title_from_slug("maquinas-cnc")
    'Maquinas Cnc'
    """
    segments = [segment for segment in _SLUG_SEGMENT_RE.split(slug or "") if segment]
    return " ".join(segment[:1].upper() + segment[1:] for segment in segments)
