# 🎨 listing_engine/infrastructure/content/listing_renderer.py
"""
🎨 Рендерить лістинг товарів у мінімальний безпечний HTML-блок.

🔹 Картки товарів: зображення, заголовок, короткий опис, ціна, посилання на товар.
🔹 Пагінація лише коли сторінок більше однієї; посилання зберігають інші query-параметри.
🔹 Два різні порожні стани: ручний список та колекція (з назвою колекції).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from html import escape                                             # 🧼 Екранування HTML-символів
from typing import Final, List, Mapping, Optional                   # 🧰 Типізація та константи

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import ListingSettings          # ⚙️ Тексти та префікси посилань
from listing_engine.domain.catalog.entities import ItemSummary, ListingResult, Pagination
from listing_engine.shared.utils.query_params import QueryValue, build_listing_page_href

# ================================
# 🔧 КОНСТАНТИ МОДУЛЯ
# ================================
_LBL_VIEW_ALL: Final[str] = "Ver todos"                             # 🔗 Посилання на всю колекцію
_LBL_VIEW_ITEM: Final[str] = "Ver producto"                         # 🔗 Посилання на товар
_LBL_PAGINATION: Final[str] = "Paginación de productos relacionados"
_EMPTY_COLLECTION_KIND: Final[str] = "collection"
_EMPTY_EXPLICIT_KIND: Final[str] = "manual"


# ================================
# 🖼️ РЕНДЕРЕР ЛІСТИНГІВ
# ================================
class ListingRenderer:
    """📦 Перетворює `ListingResult` у HTML без бізнес-логіки."""

    def __init__(self, settings: Optional[ListingSettings] = None) -> None:
        self._settings = settings or ListingSettings()

    # ================================
    # 🧩 ЛІСТИНГ
    # ================================
    def render_listing(
        self,
        listing: ListingResult,
        *,
        base_path: str = "",
        query: Optional[Mapping[str, QueryValue]] = None,
    ) -> str:
        """
        Повний блок лістингу.

        Args:
            listing: Готовий лістинг (завжди з ≥ 1 товаром).
            base_path: Шлях сторінки статті для посилань пагінації.
            query: Поточні query-параметри запиту (зберігаються у посиланнях).
        """
        parts: List[str] = [f'<section class="related-products" data-listing-key="{escape(listing.key)}">']
        parts.append(self._render_header(listing))
        parts.append('<div class="related-products__grid">')
        parts.extend(self._render_card(item) for item in listing.items)
        parts.append("</div>")
        if listing.pagination and listing.pagination.total_pages > 1:
            parts.append(self._render_pagination(listing.pagination, base_path=base_path, query=query))
        parts.append("</section>")
        return "".join(parts)

    @staticmethod
    def _render_header(listing: ListingResult) -> str:
        header = ['<header class="related-products__header"><div>']
        header.append(f"<h2>{escape(listing.heading)}</h2>")
        if listing.subtitle:
            header.append(f'<p class="related-products__subtitle">{escape(listing.subtitle)}</p>')
        header.append("</div>")
        if listing.view_all_href:
            header.append(
                f'<a class="related-products__view-all" href="{escape(listing.view_all_href, quote=True)}">'
                f"{_LBL_VIEW_ALL}</a>"
            )
        header.append("</header>")
        return "".join(header)

    def _render_card(self, item: ItemSummary) -> str:
        card = [f'<article class="related-products__card" data-slug="{escape(item.slug, quote=True)}">']
        if item.primary_image_url:
            card.append(
                f'<img src="{escape(item.primary_image_url, quote=True)}" alt="{escape(item.title, quote=True)}">'
            )
        card.append(f"<h3>{escape(item.title)}</h3>")
        if item.short_summary:
            card.append(f'<p class="related-products__summary">{escape(item.short_summary)}</p>')
        if item.price:
            card.append(f'<div class="related-products__price">{escape(item.price)}</div>')
        href = f"{self._settings.item_href_prefix}{item.slug}"
        card.append(f'<a class="related-products__link" href="{escape(href, quote=True)}">{_LBL_VIEW_ITEM}</a>')
        card.append("</article>")
        return "".join(card)

    @staticmethod
    def _render_pagination(
        pagination: Pagination,
        *,
        base_path: str,
        query: Optional[Mapping[str, QueryValue]],
    ) -> str:
        links = [f'<nav class="related-products__pagination" aria-label="{_LBL_PAGINATION}">']
        for page in range(1, pagination.total_pages + 1):
            href = build_listing_page_href(base_path, pagination.page_key, page, query)
            current = ' aria-current="page"' if page == pagination.current_page else ""
            links.append(f'<a href="{escape(href, quote=True)}"{current}>{page}</a>')
        links.append("</nav>")
        return "".join(links)

    # ================================
    # 🫙 ПОРОЖНІ СТАНИ
    # ================================
    def render_empty_collection(self, name: str) -> str:
        """Порожній стан колекції, що називає колекцію."""
        message = self._settings.empty_collection_message.format(name=name)
        return self._empty_block(_EMPTY_COLLECTION_KIND, message)

    def render_empty_explicit(self) -> str:
        """Порожній стан ручного списку товарів."""
        return self._empty_block(_EMPTY_EXPLICIT_KIND, self._settings.empty_manual_message)

    @staticmethod
    def _empty_block(kind: str, message: str) -> str:
        return f'<div class="related-products__empty" data-listing-kind="{kind}"><p>{escape(message)}</p></div>'


__all__ = ["ListingRenderer"]
