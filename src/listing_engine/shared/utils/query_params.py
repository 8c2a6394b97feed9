# 🔗 listing_engine/shared/utils/query_params.py
"""
🔗 Хелпери для query-параметрів пагінації (`?page=2&page2=3`).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Mapping, Optional, Sequence, Union       # 🧰 Типізація
from urllib.parse import urlencode                          # 🌐 Серіалізація query-рядка

QueryValue = Union[str, Sequence[str], None]
MAX_PAGE_NUMBER = 1_000_000


def resolve_query_param(value: QueryValue) -> Optional[str]:
    """Перше значення параметра (для `?page=1&page=2` береться `1`)."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    for item in value:
        if isinstance(item, str):
            return item
    return None


def parse_page_param(value: Optional[str]) -> int:
    """Номер сторінки в межах 1..MAX_PAGE_NUMBER; все некоректне → 1."""
    if not value:
        return 1
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return 1
    if parsed < 1:
        return 1
    return min(parsed, MAX_PAGE_NUMBER)


def build_listing_page_href(
    base_path: str,
    page_key: str,
    page: int,
    query: Optional[Mapping[str, QueryValue]] = None,
) -> str:
    """
    🔗 Посилання на сторінку лістингу, що зберігає інші параметри.

    Для першої сторінки ключ прибирається, щоб канонічний URL лишався чистим.
    """
    pairs = []
    for key, value in (query or {}).items():
        if key == page_key or value is None:
            continue
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value if isinstance(item, str))
    if page > 1:
        pairs.append((page_key, str(page)))
    encoded = urlencode(pairs)
    return f"{base_path}?{encoded}" if encoded else base_path


__all__ = ["MAX_PAGE_NUMBER", "build_listing_page_href", "parse_page_param", "resolve_query_param"]
