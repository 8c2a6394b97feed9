# 🧩 listing_engine/infrastructure/content/directive_parser.py
"""
🧩 Витягує директиви лістингу з HTML-контенту статті.

🔹 Етап 1: `normalize_directive_syntax()` зводить усі синтаксиси до `<!-- product-listing … -->`.
🔹 Етап 2: скан зліва направо; кожен дескриптор розбирає `parse_descriptor()`.
🔹 Етап 3: кожне входження замінюється унікальним маркером `__PRODUCT_LISTING_{n}__`.
🔹 Невалідний дескриптор (вкладений `<!--` або > 512 символів) лишається в тексті як є,
   у тому синтаксисі, яким його записав автор.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                      # 🧾 Логи розбору
import re                                                           # 🧪 Скан та атрибути
import secrets                                                      # 🎲 Nonce для префікса маркерів
from dataclasses import dataclass                                   # 🧱 Результати розбору
from typing import List, Optional, Tuple                            # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from listing_engine.domain.catalog.entities import Directive, DirectiveKind
from listing_engine.infrastructure.content.directive_syntax import KEYWORD, normalize_directive_syntax
from listing_engine.shared.errors import ParseAmbiguity, ValidationFailure
from listing_engine.shared.metrics import DIRECTIVES_PARSED
from listing_engine.shared.utils.slug_norm import to_slug_or_none

logger = logging.getLogger(__name__)

# ================================
# ⚙️ СЛОВНИК ТА ШАБЛОНИ
# ================================
EXPLICIT_LIST_KEYWORDS = frozenset(
    {
        "manual",
        "products",
        "productslugs",
        "product_slugs",
        "manualproducts",
        "manual-listing",
        "manualproductslisting",
        "productlistingmanual",
        "productos",
        "lista-manual",
    }
)
MARKER_PREFIX = "__PRODUCT_LISTING_"
MAX_DESCRIPTOR_LENGTH = 512

_VALUE = r"""(?:"([^"]+)"|'([^']+)'|([^\s]+))"""
_SCAN_RE = re.compile(rf"<!--\s*{KEYWORD}(?P<details>.*?)-->", re.IGNORECASE | re.DOTALL)
_MODE_ATTR_RE = re.compile(rf"(?:type|source|mode)\s*(?::|=)\s*{_VALUE}", re.IGNORECASE)
_SLUG_ATTR_RE = re.compile(
    rf"(?:category(?:[-_]slug)?|slug|categoria(?:[-_]slug)?|cat)\s*(?::|=)\s*{_VALUE}",
    re.IGNORECASE,
)
_KEY_VALUE_SPLIT_RE = re.compile(r"[:=]")
_WHITESPACE_RE = re.compile(r"\s+")
_KEY_SEPARATORS_RE = re.compile(r"[-\s]+")

_MODE_KEYS = frozenset({"type", "source", "mode"})
_SLUG_KEYS = frozenset({"slug", "category", "category_slug", "categoria", "categoria_slug", "cat"})


# ================================
# 🧱 РЕЗУЛЬТАТИ
# ================================
@dataclass(frozen=True, slots=True)
class ParsedDescriptor:
    kind: DirectiveKind
    collection_slug: Optional[str] = None
    collection_label: Optional[str] = None

    @classmethod
    def explicit(cls) -> "ParsedDescriptor":
        return cls(DirectiveKind.EXPLICIT_LIST)

    @classmethod
    def unbound(cls) -> "ParsedDescriptor":
        return cls(DirectiveKind.COLLECTION_BOUND)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Переписаний контент із маркерами та впорядкований список директив."""

    content: str
    directives: Tuple[Directive, ...] = ()


# ================================
# 🔍 ГРАМАТИКА ДЕСКРИПТОРА
# ================================
def _folded(value: str) -> str:
    return _WHITESPACE_RE.sub("", value).lower()


def _first_group(match: re.Match[str]) -> str:
    return match.group(1) or match.group(2) or match.group(3) or ""


def _label(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.replace("-->", "").strip()
    return text or None


def _bound(value: str) -> Optional[ParsedDescriptor]:
    slug = to_slug_or_none(value)
    if not slug:
        return None
    return ParsedDescriptor(DirectiveKind.COLLECTION_BOUND, slug, _label(value))


def validate_descriptor(details: str) -> None:
    """🚫 Кидає `ValidationFailure`, якщо дескриптор неможливо безпечно розібрати."""
    if "<!--" in details:
        raise ValidationFailure("nested comment opener", fragment=details)
    if len(details.strip()) > MAX_DESCRIPTOR_LENGTH:
        raise ValidationFailure(f"descriptor longer than {MAX_DESCRIPTOR_LENGTH} chars", fragment=details)


def _accepts(details: str) -> bool:
    try:
        validate_descriptor(details)
    except ValidationFailure as failure:
        logger.warning("🚫 %s", failure.message, extra=failure.to_log_extra())
        return False
    return True


def parse_descriptor(details: Optional[str]) -> ParsedDescriptor:
    """
    🔍 Класифікує текст дескриптора директиви.

    Порядок правил:
        1. Увесь дескриптор (без пробілів, у нижньому регістрі) у словнику ручних списків → EXPLICIT_LIST.
        2. Атрибут `type=`/`source=`/`mode=` зі значенням зі словника → EXPLICIT_LIST.
           Те саме для будь-якого голого токена зі словника.
        3. Атрибут `category=`/`slug=`/`cat=`/… → slug колекції + сирий підпис.
        4. Токени: `key=value` та голі токени; єдиний голий токен стає slug-ом.
        5. Кілька голих токенів: жоден не вгадується окремо, увесь дескриптор стає назвою.
        6. Інакше COLLECTION_BOUND без slug (вирішує контекст).

    Args:
        details: Текст між ключовим словом і `-->`.

    Returns:
        ParsedDescriptor: Класифікація директиви.
    """
    trimmed = (details or "").replace("-->", "").strip()
    if not trimmed:
        return ParsedDescriptor.unbound()

    if _folded(trimmed) in EXPLICIT_LIST_KEYWORDS:
        return ParsedDescriptor.explicit()

    mode_match = _MODE_ATTR_RE.search(trimmed)
    if mode_match and _folded(_first_group(mode_match)) in EXPLICIT_LIST_KEYWORDS:
        return ParsedDescriptor.explicit()

    tokens = trimmed.split()
    # ✋ Голе ключове слово ручного списку переважає будь-які інші атрибути
    if any(not _KEY_VALUE_SPLIT_RE.search(token) and token.lower() in EXPLICIT_LIST_KEYWORDS for token in tokens):
        return ParsedDescriptor.explicit()

    slug_match = _SLUG_ATTR_RE.search(trimmed)
    if slug_match:
        parsed = _bound(_first_group(slug_match))
        if parsed:
            return parsed

    single_token = len(tokens) == 1
    for token in tokens:
        parts = _KEY_VALUE_SPLIT_RE.split(token, maxsplit=1)
        if len(parts) == 2:
            raw_key, raw_value = parts
            value = raw_value.strip()
            key = raw_key.strip().lower()
            if key in _MODE_KEYS:
                if _folded(value) in EXPLICIT_LIST_KEYWORDS:
                    return ParsedDescriptor.explicit()
                continue
            if _KEY_SEPARATORS_RE.sub("_", key) in _SLUG_KEYS:
                parsed = _bound(value)
                if parsed:
                    return parsed
            continue

        if single_token:
            parsed = _bound(token)
            if parsed:
                return parsed

    parsed = _bound(trimmed)
    if parsed:
        return parsed

    ambiguity = ParseAmbiguity(trimmed, details="no slug-like text in descriptor")
    logger.debug("🌫️ %s", ambiguity.message, extra=ambiguity.to_log_extra())
    return ParsedDescriptor.unbound()


# ================================
# 🏷️ МАРКЕРИ
# ================================
def choose_marker_prefix(content: str) -> str:
    """Префікс маркерів, якого гарантовано немає в документі."""
    prefix = MARKER_PREFIX
    while prefix in content:
        prefix = f"{MARKER_PREFIX}{secrets.token_hex(4).upper()}_"
    return prefix


def format_marker(prefix: str, index: int) -> str:
    return f"{prefix}{index}__"


# ================================
# 🧩 ПУБЛІЧНИЙ API
# ================================
def extract_directives(content: Optional[str]) -> ExtractionResult:
    """
    🧩 Замінює директиви маркерами та повертає їх у порядку появи.

    Args:
        content: Сирий HTML статті.

    Returns:
        ExtractionResult: Контент без директив (але з маркерами) + кортеж `Directive`.
    """
    if not content:
        return ExtractionResult(content or "", ())

    # 🚫 Невалідні фрагменти не конвертуються, тож лишаються в авторському синтаксисі
    normalized = normalize_directive_syntax(content, accept=_accepts)
    if not _SCAN_RE.search(normalized):
        return ExtractionResult(content, ())

    prefix = choose_marker_prefix(normalized)
    directives: List[Directive] = []

    def _replace(match: re.Match[str]) -> str:
        details = match.group("details") or ""
        if not _accepts(details):
            return match.group(0)

        parsed = parse_descriptor(details)
        marker = format_marker(prefix, len(directives))
        directives.append(
            Directive(
                kind=parsed.kind,
                marker=marker,
                collection_slug=parsed.collection_slug,
                collection_label=parsed.collection_label,
            )
        )
        DIRECTIVES_PARSED.labels(kind=parsed.kind.value).inc()
        return marker

    rewritten = _SCAN_RE.sub(_replace, normalized)
    if directives:
        logger.info(
            "🧩 Знайдено директив: %d (%s)",
            len(directives),
            ", ".join(d.collection_slug or d.kind.value for d in directives),
        )
    return ExtractionResult(rewritten, tuple(directives))


__all__ = [
    "EXPLICIT_LIST_KEYWORDS",
    "ExtractionResult",
    "MARKER_PREFIX",
    "MAX_DESCRIPTOR_LENGTH",
    "ParsedDescriptor",
    "choose_marker_prefix",
    "extract_directives",
    "format_marker",
    "parse_descriptor",
    "validate_descriptor",
]
