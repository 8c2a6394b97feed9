import pytest

from listing_engine.shared.utils.query_params import (
    MAX_PAGE_NUMBER,
    build_listing_page_href,
    parse_page_param,
    resolve_query_param,
)


def test_resolve_query_param_takes_first_value() -> None:
    assert resolve_query_param(None) is None
    assert resolve_query_param("3") == "3"
    assert resolve_query_param(["2", "5"]) == "2"
    assert resolve_query_param([]) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 1),
        ("", 1),
        ("abc", 1),
        ("0", 1),
        ("-4", 1),
        (" 7 ", 7),
        ("2", 2),
        ("99999999999999999999", MAX_PAGE_NUMBER),
        (str(MAX_PAGE_NUMBER + 1), MAX_PAGE_NUMBER),
    ],
)
def test_parse_page_param(raw, expected) -> None:
    assert parse_page_param(raw) == expected


def test_build_listing_page_href_preserves_other_params() -> None:
    href = build_listing_page_href("/b/guia", "page2", 3, {"page": "2", "utm": ["x", "y"]})
    assert href == "/b/guia?page=2&utm=x&utm=y&page2=3"


def test_build_listing_page_href_drops_key_for_first_page() -> None:
    assert build_listing_page_href("/b/guia", "page", 1, {"page": "4"}) == "/b/guia"
    assert build_listing_page_href("/b/guia", "page2", 1, {"page": "4", "page2": "2"}) == "/b/guia?page=4"
