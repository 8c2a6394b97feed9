# 🧵 listing_engine/infrastructure/content/listing_composer.py
"""
🧵 Композиція лістингів: директиви → конкретні сторінки товарів → HTML на місці маркерів.

🔹 Колекційним директивам по порядку видаються ключі пагінації `page`, `page2`, `page3`, …
🔹 Ручний список розвʼязується один раз на документ і зберігає порядок slug-ів.
🔹 Відсутня або не-товарна колекція → віртуальна колекція зі slug (для порожнього стану).
🔹 Сторінка за межами діапазону перезапитується як остання валідна.
🔹 Повтори `(slug, page_key)` розвʼязуються один раз, директиви паралельно (`asyncio.gather`).
🔹 Документ без директив, але з дефолтною колекцією чи ручним списком, отримує лістинг у кінці.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🧵 Паралельне розвʼязання директив
import logging                                                      # 🧾 Логи композиції
import math                                                         # ➗ Кількість сторінок
import re                                                           # 🔁 Однопрохідна заміна маркерів
from dataclasses import dataclass, field, replace                   # 🧱 Контекст та проміжні результати
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from listing_engine.config.settings import ListingSettings
from listing_engine.domain.catalog.entities import (
    Collection,
    CollectionKind,
    Directive,
    DirectiveKind,
    ListingResult,
    Pagination,
)
from listing_engine.domain.catalog.interfaces import ICollectionLookup, IItemBatchLookup
from listing_engine.infrastructure.collections.product_resolver import CollectionProductResolver
from listing_engine.infrastructure.content.directive_parser import (
    choose_marker_prefix,
    extract_directives,
    format_marker,
)
from listing_engine.infrastructure.content.listing_renderer import ListingRenderer
from listing_engine.shared.metrics import LISTING_RENDER_SECONDS
from listing_engine.shared.utils.query_params import (
    MAX_PAGE_NUMBER,
    QueryValue,
    parse_page_param,
    resolve_query_param,
)

logger = logging.getLogger(__name__)

PageResolver = Callable[[str], int]
EXPLICIT_LISTING_KEY = "manual-products"


def _first_page(_page_key: str) -> int:
    return 1


def page_resolver_from_query(query: Optional[Mapping[str, QueryValue]]) -> PageResolver:
    """Номер сторінки для ключа пагінації з query-параметрів (`?page2=3`)."""
    params = query or {}

    def _resolve(page_key: str) -> int:
        return parse_page_param(resolve_query_param(params.get(page_key)))

    return _resolve


def page_key_for(index: int) -> str:
    """0 → `page`, 1 → `page2`, 2 → `page3`, …"""
    return "page" if index == 0 else f"page{index + 1}"


# ================================
# 🧾 КОНТЕКСТ ЗАПИТУ
# ================================
@dataclass(frozen=True)
class ListingContext:
    """Дані запиту, потрібні для розвʼязання директив одного документа."""

    default_collection_slug: Optional[str] = None
    explicit_slugs: Tuple[str, ...] = ()
    page_resolver: PageResolver = _first_page
    request_id: Optional[str] = None
    page_size: Optional[int] = None
    base_path: str = ""
    query: Mapping[str, QueryValue] = field(default_factory=dict)

    @classmethod
    def from_query(cls, query: Optional[Mapping[str, QueryValue]] = None, **kwargs) -> "ListingContext":
        """Контекст, у якому сторінки беруться з query-параметрів запиту."""
        params = dict(query or {})
        kwargs.setdefault("page_resolver", page_resolver_from_query(params))
        return cls(query=params, **kwargs)


@dataclass(frozen=True, slots=True)
class _PlannedRequest:
    directive: Directive
    page_key: Optional[str]


@dataclass(frozen=True, slots=True)
class ResolvedListing:
    """Результат для одного маркера: лістинг або дані для порожнього стану."""

    kind: DirectiveKind
    listing: Optional[ListingResult] = None
    empty_name: Optional[str] = None
    skipped: bool = False


# ================================
# 🧵 КОМПОЗИТОР
# ================================
class ListingComposer:
    """🧵 Розвʼязує директиви документа та вставляє відрендерені лістинги."""

    def __init__(
        self,
        collection_lookup: ICollectionLookup,
        item_lookup: IItemBatchLookup,
        resolver: CollectionProductResolver,
        *,
        renderer: Optional[ListingRenderer] = None,
        settings: Optional[ListingSettings] = None,
    ) -> None:
        self._collections = collection_lookup
        self._items = item_lookup
        self._resolver = resolver
        self._settings = settings or ListingSettings()
        self._renderer = renderer or ListingRenderer(self._settings)

    # ================================
    # 📋 ПЛАН
    # ================================
    @staticmethod
    def plan_requests(directives: Sequence[Directive]) -> List[_PlannedRequest]:
        """Ключі пагінації отримують лише колекційні директиви, у порядку документа."""
        planned: List[_PlannedRequest] = []
        collection_index = 0
        for directive in directives:
            if directive.is_explicit:
                planned.append(_PlannedRequest(directive, None))
                continue
            planned.append(_PlannedRequest(directive, page_key_for(collection_index)))
            collection_index += 1
        return planned

    # ================================
    # 🔎 РОЗВʼЯЗАННЯ
    # ================================
    async def resolve_listings(
        self,
        directives: Sequence[Directive],
        context: ListingContext,
    ) -> Dict[str, ResolvedListing]:
        """
        🔎 Розвʼязує всі директиви документа.

        Returns:
            Dict[str, ResolvedListing]: Маркер → результат.
        """
        jobs: Dict[str, Awaitable[ResolvedListing]] = {}
        job_for_marker: Dict[str, str] = {}

        for request in self.plan_requests(directives):
            directive = request.directive
            if directive.is_explicit:
                job_key = "explicit"
                if job_key not in jobs:
                    jobs[job_key] = self._resolve_explicit(directive, context)
            else:
                slug = directive.collection_slug or context.default_collection_slug
                if not slug:
                    job_key = f"skip|{directive.marker}"
                    jobs[job_key] = _skipped()
                else:
                    job_key = f"{slug}|{request.page_key}"
                    if job_key not in jobs:
                        jobs[job_key] = self._resolve_collection(
                            slug,
                            directive.collection_label if directive.collection_slug else None,
                            request.page_key or page_key_for(0),
                            context,
                        )
            job_for_marker[directive.marker] = job_key

        keys = list(jobs)
        tasks = [asyncio.ensure_future(jobs[key]) for key in keys]
        try:
            results = await asyncio.gather(*tasks)
        except Exception:
            # 🛑 Перший збій зупиняє решту розвʼязань до прокидання помилки
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        by_key = dict(zip(keys, results))
        return {marker: by_key[key] for marker, key in job_for_marker.items()}

    async def _resolve_explicit(self, directive: Directive, context: ListingContext) -> ResolvedListing:
        slugs = _unique(directive.explicit_slugs or context.explicit_slugs)
        if not slugs:
            return ResolvedListing(DirectiveKind.EXPLICIT_LIST)

        found = await self._items.find_items_by_slugs(slugs, request_id=context.request_id)
        by_slug = {item.slug: item for item in found}
        ordered = tuple(by_slug[slug] for slug in slugs if slug in by_slug)
        logger.debug(
            "📋 Ручний список: %d із %d slug-ів знайдено",
            len(ordered),
            len(slugs),
            extra={"request_id": context.request_id},
        )
        if not ordered:
            return ResolvedListing(DirectiveKind.EXPLICIT_LIST)
        listing = ListingResult(key=EXPLICIT_LISTING_KEY, heading=self._settings.heading, items=ordered)
        return ResolvedListing(DirectiveKind.EXPLICIT_LIST, listing=listing)

    async def _resolve_collection(
        self,
        slug: str,
        label: Optional[str],
        page_key: str,
        context: ListingContext,
    ) -> ResolvedListing:
        label = (label or "").strip() or None
        stored = await self._collections.find_collection_by_slug(slug, request_id=context.request_id)
        collection = stored if stored is not None and stored.kind is CollectionKind.ITEMS else Collection.virtual(slug)
        matching = replace(collection, name=label) if collection.is_virtual and label else collection
        display_name = label or (stored.name if stored is not None else collection.name)

        page_size = max(1, context.page_size or self._settings.page_size)
        requested_page = min(max(1, context.page_resolver(page_key)), MAX_PAGE_NUMBER)
        page = await self._resolver.resolve_collection_items(
            matching,
            limit=page_size,
            offset=(requested_page - 1) * page_size,
            request_id=context.request_id,
        )
        if page.total_count <= 0:
            return ResolvedListing(DirectiveKind.COLLECTION_BOUND, empty_name=display_name)

        total_pages = max(1, math.ceil(page.total_count / page_size))
        current_page = requested_page
        if requested_page > total_pages:
            current_page = total_pages
            logger.info(
                "↩️ Сторінка %d > %d для %s → остання сторінка",
                requested_page,
                total_pages,
                slug,
                extra={"slug": slug, "request_id": context.request_id},
            )
            page = await self._resolver.resolve_collection_items(
                matching,
                limit=page_size,
                offset=(total_pages - 1) * page_size,
                request_id=context.request_id,
            )
        if not page.items:
            return ResolvedListing(DirectiveKind.COLLECTION_BOUND, empty_name=display_name)

        listing = ListingResult(
            key=f"category-{collection.slug}",
            heading=self._settings.heading,
            items=page.items,
            subtitle=display_name,
            view_all_href=f"{self._settings.collection_href_prefix}{collection.slug}",
            pagination=Pagination(page_key, current_page, total_pages) if total_pages > 1 else None,
        )
        return ResolvedListing(DirectiveKind.COLLECTION_BOUND, listing=listing)

    # ================================
    # 🪡 ВСТАВКА
    # ================================
    def _render(self, resolved: ResolvedListing, context: ListingContext, *, empty_states: bool) -> str:
        if resolved.skipped:
            return ""
        if resolved.listing is not None:
            return self._renderer.render_listing(resolved.listing, base_path=context.base_path, query=context.query)
        if not empty_states:
            return ""
        if resolved.kind is DirectiveKind.EXPLICIT_LIST:
            return self._renderer.render_empty_explicit()
        return self._renderer.render_empty_collection(resolved.empty_name or "")

    def _splice(
        self,
        content: str,
        resolved: Mapping[str, ResolvedListing],
        context: ListingContext,
        *,
        empty_states: bool = True,
    ) -> str:
        if not resolved:
            return content
        rendered = {marker: self._render(result, context, empty_states=empty_states) for marker, result in resolved.items()}
        pattern = re.compile("|".join(re.escape(marker) for marker in sorted(rendered, key=len, reverse=True)))
        return pattern.sub(lambda match: rendered[match.group(0)], content)

    # ================================
    # 🧩 ПУБЛІЧНИЙ API
    # ================================
    async def compose_listings(
        self,
        content: str,
        directives: Sequence[Directive],
        context: ListingContext,
    ) -> str:
        """
        🧩 Замінює маркери директив відрендереними лістингами.

        Args:
            content: Контент із маркерами (результат `extract_directives`).
            directives: Директиви у порядку документа.
            context: Контекст запиту (дефолти, сторінки, request id).

        Returns:
            str: Контент, де кожен маркер замінено лістингом, порожнім станом або нічим.
        """
        with LISTING_RENDER_SECONDS.time():
            resolved = await self.resolve_listings(directives, context)
            return self._splice(content, resolved, context)

    async def render_document(self, raw_content: Optional[str], context: ListingContext) -> str:
        """
        🧩 Повний цикл: розбір директив, fallback-лістинг, композиція.

        Документ без директив отримує рівно один неявний лістинг у кінці, якщо запис має ручний
        список (пріоритет) або дефолтну колекцію. Порожній неявний лістинг нічого не додає.
        """
        raw_content = raw_content or ""
        extraction = extract_directives(raw_content)
        if extraction.directives:
            return await self.compose_listings(extraction.content, extraction.directives, context)

        fallback = self._fallback_directive(extraction.content, context)
        if fallback is None:
            return raw_content

        logger.debug("🧷 Неявний лістинг (%s) для документа без директив", fallback.kind.value)
        with LISTING_RENDER_SECONDS.time():
            resolved = await self.resolve_listings((fallback,), context)
            return self._splice(extraction.content + fallback.marker, resolved, context, empty_states=False)

    @staticmethod
    def _fallback_directive(content: str, context: ListingContext) -> Optional[Directive]:
        marker = format_marker(choose_marker_prefix(content), 0)
        if context.explicit_slugs:
            return Directive(kind=DirectiveKind.EXPLICIT_LIST, marker=marker)
        if context.default_collection_slug:
            return Directive(
                kind=DirectiveKind.COLLECTION_BOUND,
                marker=marker,
                collection_slug=context.default_collection_slug,
            )
        return None


async def _skipped() -> ResolvedListing:
    return ResolvedListing(DirectiveKind.COLLECTION_BOUND, skipped=True)


def _unique(slugs: Sequence[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for slug in slugs:
        cleaned = (slug or "").strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return list(seen)


__all__ = [
    "EXPLICIT_LISTING_KEY",
    "ListingComposer",
    "ListingContext",
    "ResolvedListing",
    "page_key_for",
    "page_resolver_from_query",
]
