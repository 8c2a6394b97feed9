"""
🧪 test_listing_renderer.py — unit-тести для ListingRenderer

Перевіряє:
- Картки товарів (зображення, заголовок, ціна, посилання)
- Пагінацію лише для кількох сторінок та збереження query-параметрів
- Екранування HTML
- Два різні порожні стани
"""

from bs4 import BeautifulSoup

from listing_engine.config.settings import ListingSettings
from listing_engine.domain.catalog.entities import ItemSummary, ListingResult, Pagination
from listing_engine.infrastructure.content.listing_renderer import ListingRenderer


def _item(slug, title=None, **kwargs) -> ItemSummary:
    return ItemSummary(id=slug, slug=slug, title=title or slug.title(), **kwargs)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_renders_cards_with_links():
    listing = ListingResult(
        key="category-robots",
        heading="Productos relacionados",
        items=(
            _item("arm", price="1200 €", short_summary="Brazo", primary_image_url="https://cdn/arm.jpg"),
            _item("gripper"),
        ),
        subtitle="Robots",
        view_all_href="/categories/robots",
    )
    soup = _soup(ListingRenderer().render_listing(listing))

    section = soup.select_one("section.related-products")
    assert section["data-listing-key"] == "category-robots"
    assert soup.select_one("h2").get_text() == "Productos relacionados"
    assert soup.select_one(".related-products__subtitle").get_text() == "Robots"
    assert soup.select_one(".related-products__view-all")["href"] == "/categories/robots"

    cards = soup.select("article.related-products__card")
    assert [c["data-slug"] for c in cards] == ["arm", "gripper"]
    assert cards[0].select_one("img")["src"] == "https://cdn/arm.jpg"
    assert cards[0].select_one(".related-products__price").get_text() == "1200 €"
    assert cards[0].select_one("a.related-products__link")["href"] == "/p/arm"
    assert cards[1].select_one("img") is None
    assert soup.select_one("nav") is None


def test_item_href_prefix_from_settings():
    renderer = ListingRenderer(ListingSettings(item_href_prefix="/producto/"))
    listing = ListingResult(key="manual-products", heading="H", items=(_item("arm"),))
    soup = _soup(renderer.render_listing(listing))
    assert soup.select_one("a.related-products__link")["href"] == "/producto/arm"
    assert soup.select_one(".related-products__view-all") is None


def test_pagination_links_keep_other_params():
    listing = ListingResult(
        key="category-cnc",
        heading="H",
        items=(_item("lathe"),),
        pagination=Pagination("page2", 2, 3),
    )
    html = ListingRenderer().render_listing(listing, base_path="/b/guia", query={"page": "4", "page2": "2"})
    links = _soup(html).select("nav.related-products__pagination a")
    assert [a.get_text() for a in links] == ["1", "2", "3"]
    assert [a["href"] for a in links] == ["/b/guia?page=4", "/b/guia?page=4&page2=2", "/b/guia?page=4&page2=3"]
    assert [a.get("aria-current") for a in links] == [None, "page", None]


def test_single_page_has_no_pagination():
    listing = ListingResult(key="k", heading="H", items=(_item("a"),), pagination=Pagination("page", 1, 1))
    assert "related-products__pagination" not in ListingRenderer().render_listing(listing)
    assert "<nav" not in ListingRenderer().render_listing(ListingResult(key="k", heading="H", items=(_item("a"),)))


def test_html_is_escaped():
    listing = ListingResult(
        key="k",
        heading="H",
        items=(_item("x", title="<script>alert(1)</script>"),),
        subtitle='A & "B"',
    )
    html = ListingRenderer().render_listing(listing)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert _soup(html).select_one(".related-products__subtitle").get_text() == 'A & "B"'


def test_empty_states_differ():
    renderer = ListingRenderer()
    collection = _soup(renderer.render_empty_collection("Máquinas CNC")).select_one(".related-products__empty")
    manual = _soup(renderer.render_empty_explicit()).select_one(".related-products__empty")
    assert collection["data-listing-kind"] == "collection"
    assert "Máquinas CNC" in collection.get_text()
    assert manual["data-listing-kind"] == "manual"
    assert collection.get_text() != manual.get_text()
