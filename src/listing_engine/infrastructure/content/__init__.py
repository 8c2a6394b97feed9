# 🧩 listing_engine/infrastructure/content/__init__.py
"""
🧩 Директиви лістингів у контенті статей: розбір, композиція, рендер.
"""

from .directive_parser import ExtractionResult, extract_directives, parse_descriptor
from .directive_syntax import BRACKET_SYNTAXES, BracketSyntax, normalize_directive_syntax
from .listing_composer import ListingComposer, ListingContext, page_resolver_from_query
from .listing_renderer import ListingRenderer

__all__ = [
    "BRACKET_SYNTAXES",
    "BracketSyntax",
    "ExtractionResult",
    "ListingComposer",
    "ListingContext",
    "ListingRenderer",
    "extract_directives",
    "normalize_directive_syntax",
    "page_resolver_from_query",
    "parse_descriptor",
]
