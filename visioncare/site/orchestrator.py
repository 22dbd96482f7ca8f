"""
Per-request page orchestration.

Loads both catalogs concurrently, then fills the mount points of the
requested page: home previews, the full products list or the full gallery.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from visioncare.catalog.store import CatalogStore, GalleryCatalog, ProductCatalog, TableClient
from visioncare.error_handler import ErrorHandler
from visioncare.integrations.contracts.records import EntityKind, Record
from visioncare.site.renderer import RenderedList, Renderer
from visioncare.utils.config_loader import SiteConfig

logger = logging.getLogger(__name__)

HOME = "home"
PRODUCTS = "products"
GALLERY = "gallery"

FEATURED_PRODUCTS = "featured-products"
FEATURED_GALLERY = "featured-gallery"
PRODUCTS_CONTAINER = "products-container"
GALLERY_CONTAINER = "gallery-container"

PAGE_MOUNTS: Dict[str, Tuple[str, ...]] = {
    HOME: (FEATURED_PRODUCTS, FEATURED_GALLERY),
    PRODUCTS: (PRODUCTS_CONTAINER,),
    GALLERY: (GALLERY_CONTAINER,),
}


def route_for_path(path: str) -> str:
    """'/products.html' -> 'products', '/' -> 'home'; unknown paths map to their own name."""
    name = (path or "/").strip().strip("/")
    if name.endswith(".html"):
        name = name[: -len(".html")]
    if name in ("", "index"):
        return HOME
    return name


@dataclass
class PageContent:
    route: str
    sections: Dict[str, str] = field(default_factory=dict)
    lists: Dict[str, RenderedList] = field(default_factory=dict)
    banner: Optional[Dict] = None


class SiteOrchestrator:
    def __init__(
        self,
        products: ProductCatalog,
        gallery: GalleryCatalog,
        renderer: Renderer,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.products = products
        self.gallery = gallery
        self.renderer = renderer
        self.error_handler = error_handler or ErrorHandler()
        self.started = False

    def catalog(self, kind: EntityKind) -> CatalogStore:
        return self.products if kind == EntityKind.PRODUCT else self.gallery

    async def start(self) -> Tuple[List[Record], List[Record]]:
        # load() never raises, so one catalog failing cannot block the other.
        products, gallery = await asyncio.gather(self.products.load(), self.gallery.load())
        self.started = True
        return products, gallery

    @property
    def startup_failed(self) -> bool:
        return self.products.failed and self.gallery.failed

    def banner(self) -> Optional[Dict]:
        if not self.startup_failed:
            return None
        return self.error_handler.startup_banner(
            {self.products.table_name: self.products.error or "", self.gallery.table_name: self.gallery.error or ""}
        )

    def _render_mount(self, kind: EntityKind, records: List[Record], page: PageContent, mount: str) -> None:
        store = self.catalog(kind)
        if store.failed:
            page.sections[mount] = self.renderer.render_load_error(kind)
            return
        rendered = self.renderer.render_list(kind, records)
        page.sections[mount] = rendered.markup
        page.lists[mount] = rendered

    def render_home_previews(self, page: PageContent, mounts: Iterable[str]) -> None:
        mounts = set(mounts)
        if FEATURED_PRODUCTS in mounts:
            self._render_mount(EntityKind.PRODUCT, self.products.preview(), page, FEATURED_PRODUCTS)
        if FEATURED_GALLERY in mounts:
            self._render_mount(EntityKind.GALLERY, self.gallery.preview(), page, FEATURED_GALLERY)

    def render_products_page(self, page: PageContent, query: Optional[str] = None) -> None:
        records = self.products.search(query)
        self._render_mount(EntityKind.PRODUCT, records, page, PRODUCTS_CONTAINER)

    def render_gallery_page(self, page: PageContent, category: Optional[str] = None) -> None:
        records = self.gallery.filter_by_category(category)
        self._render_mount(EntityKind.GALLERY, records, page, GALLERY_CONTAINER)

    async def build_page(
        self,
        route: str,
        query: Optional[str] = None,
        category: Optional[str] = None,
        mounts: Optional[Iterable[str]] = None,
    ) -> PageContent:
        if not self.started:
            await self.start()

        mounts = tuple(mounts) if mounts is not None else PAGE_MOUNTS.get(route, ())
        page = PageContent(route=route, banner=self.banner())

        self.render_home_previews(page, mounts)
        if route == PRODUCTS and PRODUCTS_CONTAINER in mounts:
            self.render_products_page(page, query)
        elif route == GALLERY and GALLERY_CONTAINER in mounts:
            self.render_gallery_page(page, category)
        return page

    async def find(self, kind: EntityKind, row_id: int) -> Optional[Record]:
        if not self.started:
            await self.start()
        return self.catalog(kind).by_id(row_id)


def build_orchestrator(
    client: TableClient,
    config: SiteConfig,
    renderer: Renderer,
    error_handler: Optional[ErrorHandler] = None,
) -> SiteOrchestrator:
    timeout = config.startup.load_timeout_seconds
    products = ProductCatalog(
        client,
        config.sheets.tables.products,
        config.columns.products,
        preview_limit=config.preview_limit.products,
        timeout_seconds=timeout,
    )
    gallery = GalleryCatalog(
        client,
        config.sheets.tables.gallery,
        config.columns.gallery,
        preview_limit=config.preview_limit.gallery,
        timeout_seconds=timeout,
    )
    return SiteOrchestrator(
        products,
        gallery,
        renderer,
        error_handler or ErrorHandler(banner_dismiss_ms=config.startup.banner_dismiss_ms),
    )
