# 🔣 listing_engine/infrastructure/content/directive_syntax.py
"""
🔣 Зводить альтернативні синтаксиси директив лістингу до канонічного коментаря.

🔹 `[[product listing …]]`, `{{product listing …}}`, `%%product listing …%%`, `[product listing …]`
   → `<!-- product-listing … -->`.
🔹 Таблиця синтаксисів: кортеж `BracketSyntax`; новий синтаксис додається одним записом,
   граматика дескриптора при цьому не змінюється.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import re                                                           # 🧪 Шаблони синтаксисів
from dataclasses import dataclass                                   # 🧱 Запис таблиці
from typing import Callable, Iterable, Optional, Tuple              # 📐 Типізація

KEYWORD = r"product[\s_-]*listing"
CANONICAL_KEYWORD = "product-listing"


@dataclass(frozen=True, slots=True)
class BracketSyntax:
    """Один альтернативний синтаксис: група 1 шаблону є необовʼязковим дескриптор."""

    name: str
    pattern: re.Pattern[str]


def _syntax(name: str, regex: str) -> BracketSyntax:
    return BracketSyntax(name, re.compile(regex, re.IGNORECASE))


# 📋 Порядок важливий: подвійні дужки до одинарних
BRACKET_SYNTAXES: Tuple[BracketSyntax, ...] = (
    _syntax("double_square", rf"\[\[\s*{KEYWORD}(?:\s*(?::|=|\s+)\s*([^\]]+))?\s*\]\]"),
    _syntax("double_curly", rf"\{{\{{\s*{KEYWORD}(?:\s*(?::|=|\s+)\s*([^}}]+))?\s*\}}\}}"),
    _syntax("percent", rf"%%\s*{KEYWORD}(?:\s*(?::|=|\s+)([^%]+))?%%"),
    _syntax("single_square", rf"\[\s*{KEYWORD}(?:\s*(?::|=|\s+)\s*([^\]]+))?\s*\]"),
)


def to_canonical_comment(descriptor: Optional[str]) -> str:
    """Канонічна форма директиви з (обрізаним) дескриптором."""
    text = (descriptor or "").strip()
    return f"<!-- {CANONICAL_KEYWORD} {text} -->" if text else f"<!-- {CANONICAL_KEYWORD} -->"


def normalize_directive_syntax(
    content: str,
    syntaxes: Iterable[BracketSyntax] = BRACKET_SYNTAXES,
    *,
    accept: Optional[Callable[[str], bool]] = None,
) -> str:
    """
    🔣 Замінює всі альтернативні синтаксиси на канонічний коментар.

    Якщо `accept(descriptor)` повертає False, фрагмент лишається в тексті в авторському вигляді.
    """
    if not content:
        return content

    def _convert(match: re.Match[str]) -> str:
        descriptor = (match.group(1) or "").strip()
        if accept is not None and not accept(descriptor):
            return match.group(0)
        return to_canonical_comment(descriptor)

    for syntax in syntaxes:
        content = syntax.pattern.sub(_convert, content)
    return content


__all__ = [
    "BRACKET_SYNTAXES",
    "BracketSyntax",
    "CANONICAL_KEYWORD",
    "KEYWORD",
    "normalize_directive_syntax",
    "to_canonical_comment",
]
