# 🧱 listing_engine/domain/catalog/predicates.py
"""
🧱 Невеликий конструктор SQL-предикатів: пари `(fragment, params)` складаються структурно.

🔹 `Condition` — листок із готовим фрагментом і параметрами.
🔹 `AnyOf` / `AllOf` — OR / AND вузли; порожній OR дорівнює `FALSE`, порожній AND — `TRUE`.
🔹 Значення завжди йдуть у параметри; у фрагмент потрапляють лише перевірені ідентифікатори.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import re                                                           # 🔍 Перевірка ідентифікаторів
from abc import ABC, abstractmethod                                 # 🏛️ Базовий вузол
from dataclasses import dataclass                                   # 🧱 Імутабельні вузли
from typing import Any, Iterable, List, Tuple                       # 🧰 Типізація

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def identifier(name: str) -> str:
    """Повертає імʼя колонки/таблиці, якщо воно безпечне для вставки у SQL."""
    if not isinstance(name, str) or not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Unsafe SQL identifier: {name!r}")
    return name


# ================================
# 🏛️ ВУЗЛИ ПРЕДИКАТІВ
# ================================
class Predicate(ABC):
    """Базовий вузол дерева предикатів."""

    @abstractmethod
    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        """Фрагмент SQL та впорядковані параметри."""

    @property
    def fragment(self) -> str:
        return self.render()[0]

    @property
    def params(self) -> Tuple[Any, ...]:
        return self.render()[1]

    @property
    def is_false(self) -> bool:
        return False

    @property
    def is_true(self) -> bool:
        return False


@dataclass(frozen=True)
class Condition(Predicate):
    sql: str
    values: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if self.sql.count("?") != len(self.values):
            raise ValueError(f"Placeholder count mismatch in {self.sql!r}")

    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        return self.sql, self.values

    @property
    def is_false(self) -> bool:
        return self.sql == _FALSE_SQL

    @property
    def is_true(self) -> bool:
        return self.sql == _TRUE_SQL


_FALSE_SQL = "1 = 0"
_TRUE_SQL = "1 = 1"
FALSE = Condition(_FALSE_SQL)
TRUE = Condition(_TRUE_SQL)


@dataclass(frozen=True)
class _Compound(Predicate):
    children: Tuple[Predicate, ...]

    _joiner = ""

    def _effective(self) -> List[Predicate]:
        raise NotImplementedError

    def _render_children(self, children: List[Predicate]) -> Tuple[str, Tuple[Any, ...]]:
        fragments: List[str] = []
        params: List[Any] = []
        for child in children:
            fragment, child_params = child.render()
            fragments.append(fragment)
            params.extend(child_params)
        if len(fragments) == 1:
            return fragments[0], tuple(params)
        return "(" + f" {self._joiner} ".join(fragments) + ")", tuple(params)


@dataclass(frozen=True)
class AnyOf(_Compound):
    """OR-вузол. Гілки `FALSE` відкидаються; жодної гілки → `FALSE`."""

    _joiner = "OR"

    def _effective(self) -> List[Predicate]:
        return [child for child in self.children if not child.is_false]

    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        children = self._effective()
        if not children:
            return FALSE.render()
        if any(child.is_true for child in children):
            return TRUE.render()
        return self._render_children(children)

    @property
    def is_false(self) -> bool:
        return not self._effective()


@dataclass(frozen=True)
class AllOf(_Compound):
    """AND-вузол. Гілки `TRUE` відкидаються; будь-яка `FALSE` → `FALSE`."""

    _joiner = "AND"

    def _effective(self) -> List[Predicate]:
        return [child for child in self.children if not child.is_true]

    def render(self) -> Tuple[str, Tuple[Any, ...]]:
        children = self._effective()
        if any(child.is_false for child in children):
            return FALSE.render()
        if not children:
            return TRUE.render()
        return self._render_children(children)

    @property
    def is_false(self) -> bool:
        return any(child.is_false for child in self.children)


def any_of(children: Iterable[Predicate]) -> AnyOf:
    return AnyOf(tuple(children))


def all_of(children: Iterable[Predicate]) -> AllOf:
    return AllOf(tuple(children))


__all__ = [
    "AllOf",
    "AnyOf",
    "Condition",
    "FALSE",
    "Predicate",
    "TRUE",
    "all_of",
    "any_of",
    "identifier",
]
