"""
🧪 test_directive_parser.py — unit-тести для розбору директив лістингу

Перевіряє:
- Усі синтаксиси (коментар, [[…]], {{…}}, %%…%%, […]) дають ту саму директиву
- Ручний список у будь-якому регістрі та поруч з іншими атрибутами
- Дескриптор з кількох слів (`Máquinas CNC`) стає однією назвою
- Контент без директив не змінюється
- Невалідний дескриптор лишається в тексті як є
- Маркери не конфліктують з текстом документа
"""

import re

import pytest

from listing_engine.domain.catalog.entities import DirectiveKind
from listing_engine.infrastructure.content.directive_parser import (
    MARKER_PREFIX,
    MAX_DESCRIPTOR_LENGTH,
    choose_marker_prefix,
    extract_directives,
    parse_descriptor,
    validate_descriptor,
)
from listing_engine.infrastructure.content.directive_syntax import normalize_directive_syntax
from listing_engine.shared.errors import ValidationFailure


@pytest.mark.parametrize(
    "source",
    [
        "<!-- product-listing category=industrial-robots -->",
        "<!-- PRODUCT LISTING category: industrial-robots -->",
        "[[product listing category=industrial-robots]]",
        "{{product_listing category=industrial-robots}}",
        "%%product-listing category=industrial-robots%%",
        "[product listing category=industrial-robots]",
        "[[ productlisting: industrial-robots ]]",
    ],
)
def test_every_syntax_yields_same_directive(source):
    result = extract_directives(f"<p>Intro</p>{source}<p>Outro</p>")
    assert len(result.directives) == 1
    directive = result.directives[0]
    assert directive.kind is DirectiveKind.COLLECTION_BOUND
    assert directive.collection_slug == "industrial-robots"
    assert result.content == f"<p>Intro</p>{directive.marker}<p>Outro</p>"


def test_normalize_directive_syntax_produces_canonical_comment():
    assert normalize_directive_syntax("{{product listing: robots}}") == "<!-- product-listing robots -->"
    assert normalize_directive_syntax("[[product-listing]]") == "<!-- product-listing -->"
    assert normalize_directive_syntax("[not a listing]") == "[not a listing]"


def test_normalize_leaves_rejected_spans_untouched():
    content = "{{product listing robots}} %%product listing cnc%%"
    result = normalize_directive_syntax(content, accept=lambda descriptor: descriptor != "robots")
    assert result == "{{product listing robots}} <!-- product-listing cnc -->"


@pytest.mark.parametrize(
    "descriptor",
    ["manual", "MANUAL", "Manual Products", "type=manual", "mode: 'productos'", "source=\"lista-manual\"",
     "manual category=robots", "category=robots manual"],
)
def test_explicit_list_keywords(descriptor):
    parsed = parse_descriptor(descriptor)
    assert parsed.kind is DirectiveKind.EXPLICIT_LIST
    assert parsed.collection_slug is None


@pytest.mark.parametrize(
    ("descriptor", "slug", "label"),
    [
        ('category="Máquinas CNC"', "maquinas-cnc", "Máquinas CNC"),
        ("categoria_slug='robots-industriales'", "robots-industriales", "robots-industriales"),
        ("cat=welding", "welding", "welding"),
        ("robots", "robots", "robots"),
        ("Máquinas CNC", "maquinas-cnc", "Máquinas CNC"),
        ("category-slug: robots", "robots", "robots"),
    ],
)
def test_collection_bound_descriptors(descriptor, slug, label):
    parsed = parse_descriptor(descriptor)
    assert parsed.kind is DirectiveKind.COLLECTION_BOUND
    assert parsed.collection_slug == slug
    assert parsed.collection_label == label


@pytest.mark.parametrize("descriptor", [None, "", "   ", "!!!"])
def test_unbound_descriptors(descriptor):
    parsed = parse_descriptor(descriptor)
    assert parsed.kind is DirectiveKind.COLLECTION_BOUND
    assert parsed.collection_slug is None


def test_content_without_directives_is_unchanged():
    content = "<p>Hello [world] {{name}} %%x%%</p>"
    result = extract_directives(content)
    assert result.content is content
    assert result.directives == ()
    assert extract_directives(None).content == ""


def test_directives_are_numbered_in_document_order():
    content = (
        "<!-- product-listing robots -->"
        "<p>a</p>[[product listing manual]]"
        "<p>b</p>{{product listing category=cnc}}"
    )
    result = extract_directives(content)
    assert [d.kind for d in result.directives] == [
        DirectiveKind.COLLECTION_BOUND,
        DirectiveKind.EXPLICIT_LIST,
        DirectiveKind.COLLECTION_BOUND,
    ]
    assert [d.marker for d in result.directives] == [f"{MARKER_PREFIX}{n}__" for n in range(3)]
    assert result.content == (
        f"{MARKER_PREFIX}0__<p>a</p>{MARKER_PREFIX}1__<p>b</p>{MARKER_PREFIX}2__"
    )


def test_removing_markers_restores_surrounding_text():
    content = "<h1>T</h1><!-- product-listing robots --><p>body</p>[product listing]<footer/>"
    result = extract_directives(content)
    stripped = result.content
    for directive in result.directives:
        stripped = stripped.replace(directive.marker, "")
    assert stripped == "<h1>T</h1><p>body</p><footer/>"


def test_invalid_descriptor_passes_through_verbatim():
    nested = "<!-- product-listing <!-- robots -->"
    too_long = f"<!-- product-listing {'x' * (MAX_DESCRIPTOR_LENGTH + 1)} -->"
    result = extract_directives(f"{nested}<p>ok</p>{too_long}<!-- product-listing cnc -->")
    assert len(result.directives) == 1
    assert result.directives[0].collection_slug == "cnc"
    assert nested in result.content
    assert too_long in result.content


@pytest.mark.parametrize(
    "template",
    [
        "[[product listing {}]]",
        "{{{{product listing {}}}}}",
        "%%product listing {}%%",
        "[product listing {}]",
    ],
)
@pytest.mark.parametrize("descriptor", ["x" * (MAX_DESCRIPTOR_LENGTH + 88), "<!-- robots"])
def test_invalid_bracket_directive_keeps_author_syntax(template, descriptor):
    original = template.format(descriptor)
    result = extract_directives(f"<p>a</p>{original}<p>b</p>[[product listing cnc]]")
    assert [d.collection_slug for d in result.directives] == ["cnc"]
    assert f"<p>a</p>{original}<p>b</p>" in result.content
    assert "<!-- product-listing" not in result.content


def test_invalid_bracket_directive_alone_returns_content_unchanged():
    original = "<p>a</p>[[product listing " + "x" * 600 + "]]"
    result = extract_directives(original)
    assert result.directives == ()
    assert result.content == original


def test_descriptor_length_ignores_surrounding_whitespace():
    validate_descriptor("  " + "y" * MAX_DESCRIPTOR_LENGTH + "  ")
    bracketed = "[[product listing " + "y" * MAX_DESCRIPTOR_LENGTH + "]]"
    assert len(extract_directives(bracketed).directives) == 1


def test_validate_descriptor():
    validate_descriptor(" category=robots ")
    with pytest.raises(ValidationFailure):
        validate_descriptor(" <!-- x")
    with pytest.raises(ValidationFailure):
        validate_descriptor("y" * (MAX_DESCRIPTOR_LENGTH + 1))


def test_marker_prefix_avoids_collisions_with_document_text():
    content = f"<code>{MARKER_PREFIX}0__</code><!-- product-listing robots -->"
    result = extract_directives(content)
    marker = result.directives[0].marker
    assert marker != f"{MARKER_PREFIX}0__"
    assert re.fullmatch(rf"{MARKER_PREFIX}[0-9A-F]{{8}}_0__", marker)
    assert result.content.startswith(f"<code>{MARKER_PREFIX}0__</code>")
    assert choose_marker_prefix("plain text") == MARKER_PREFIX
