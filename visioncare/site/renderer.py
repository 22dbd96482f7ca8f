"""
Markup for catalog cards, modals and detail pages.

Every field lookup goes through the configured column mapping, and every
missing value resolves to a display fallback instead of raising.
"""

from __future__ import annotations

import html as html_lib
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from visioncare.integrations.contracts.records import EntityKind, Record
from visioncare.site.messaging import MessagingLinks
from visioncare.site.selection import SELECT_ROUTES
from visioncare.utils.config_loader import ColumnsConfig, PlaceholderConfig

NO_DESCRIPTION = "No description available."
NOT_SPECIFIED = "Not specified"
NOT_AVAILABLE = "N/A"

NO_RESULTS = {
    EntityKind.PRODUCT: "No products found.",
    EntityKind.GALLERY: "No gallery items found.",
}

NOTHING_SELECTED = {
    EntityKind.PRODUCT: ("No product selected.", "/products", "Browse Products"),
    EntityKind.GALLERY: ("No surgery selected.", "/gallery", "Browse Gallery"),
}

LOAD_FAILED = {
    EntityKind.PRODUCT: "We couldn't load our products right now. Please try again shortly.",
    EntityKind.GALLERY: "We couldn't load the surgery gallery right now. Please try again shortly.",
}

# (label, icon, column attribute) in display order
MODAL_SPEC_ROWS = [
    ("Dimensions:", "fa-ruler", "dimensions"),
    ("Color:", "fa-palette", "color"),
    ("Weight:", "fa-weight", "weight"),
    ("Brand:", "fa-tag", "brand"),
    ("Age Range:", "fa-users", "age_range"),
    ("Frame Shape:", "fa-shapes", "shape"),
    ("Material:", "fa-cube", "material"),
]

DETAIL_SPEC_ROWS = [
    ("Brand", "fa-tag", "brand"),
    ("Dimensions", "fa-ruler", "dimensions"),
    ("Color", "fa-palette", "color"),
    ("Weight", "fa-weight", "weight"),
    ("Age Range", "fa-users", "age_range"),
    ("Shape", "fa-shapes", "shape"),
    ("Material", "fa-cube", "material"),
]


def esc(value: str) -> str:
    return html_lib.escape(value or "", quote=True)


def select_thumbnail(images: Sequence[str], index: int = 0) -> Tuple[str, List[Tuple[str, bool]]]:
    """Main image plus (image, active) pairs with exactly one active entry."""
    if not images:
        return "", []
    if index < 0 or index >= len(images):
        index = 0
    return images[index], [(image, i == index) for i, image in enumerate(images)]


@dataclass
class RenderedList:
    """Markup of a list view and the records behind each card, in display order."""

    kind: EntityKind
    markup: str
    records: List[Record] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.records


class Renderer:
    def __init__(self, columns: ColumnsConfig, placeholders: PlaceholderConfig, links: MessagingLinks) -> None:
        self.products = columns.products
        self.gallery = columns.gallery
        self.placeholders = placeholders
        self.links = links

    # --- Images -------------------------------------------------------------

    def product_images(self, record: Record, placeholder: Optional[str] = None) -> List[str]:
        """Non-empty trimmed image URLs in column order, or a single placeholder."""
        images = [record.get(key).strip() for key in self.products.image_fields if record.get(key).strip()]
        return images or [placeholder or self.placeholders.card]

    def _product_images_no_placeholder(self, record: Record) -> List[str]:
        return [record.get(key).strip() for key in self.products.image_fields if record.get(key).strip()]

    # --- List views ---------------------------------------------------------

    def render_list(self, kind: EntityKind, records: Sequence[Record]) -> RenderedList:
        if not records:
            return RenderedList(kind=kind, markup=f'<div class="no-results">{NO_RESULTS[kind]}</div>')

        card = self._product_card if kind == EntityKind.PRODUCT else self._gallery_card
        markup = "".join(card(record) for record in records)
        return RenderedList(kind=kind, markup=markup, records=list(records))

    def render_products(self, records: Sequence[Record]) -> RenderedList:
        return self.render_list(EntityKind.PRODUCT, records)

    def render_gallery(self, records: Sequence[Record]) -> RenderedList:
        return self.render_list(EntityKind.GALLERY, records)

    def render_load_error(self, kind: EntityKind) -> str:
        return f'<div class="error-message">{LOAD_FAILED[kind]}</div>'

    def _product_card(self, record: Record) -> str:
        cols = self.products
        main_image = self.product_images(record)[0]
        name = record.get(cols.name)
        brand = record.get(cols.brand)
        badge = f'<span class="product-brand">{esc(brand)}</span>' if brand else ""
        href = SELECT_ROUTES[EntityKind.PRODUCT].format(row_id=record.row_id)
        return (
            f'<a class="product-card" href="{href}" data-row-id="{record.row_id}">'
            f'<div class="product-image"><img src="{esc(main_image)}" alt="{esc(name or "Product")}"></div>'
            f'<div class="product-info">'
            f"<h3>{esc(name or 'Product Name')}</h3>"
            f"<p>{esc(record.get(cols.description) or NO_DESCRIPTION)}</p>"
            f"{badge}"
            f"</div></a>"
        )

    def _gallery_card(self, record: Record) -> str:
        cols = self.gallery
        image = record.get(cols.image) or self.placeholders.card
        name = record.get(cols.name) or "Gallery Item"
        category = record.get(cols.category)
        badge = f'<p class="category-badge">{esc(category)}</p>' if category else ""
        href = SELECT_ROUTES[EntityKind.GALLERY].format(row_id=record.row_id)
        return (
            f'<a class="gallery-card" href="{href}" data-row-id="{record.row_id}">'
            f'<div class="gallery-image"><img src="{esc(image)}" alt="{esc(name)}"></div>'
            f'<div class="gallery-info">'
            f"<h3>{esc(name)}</h3>"
            f"<p>{esc(record.get(cols.description) or NO_DESCRIPTION)}</p>"
            f"{badge}"
            f"</div></a>"
        )

    # --- Detail views -------------------------------------------------------

    def render_detail(self, kind: EntityKind, record: Record, *, modal: bool = False, active_image: int = 0) -> str:
        if kind == EntityKind.PRODUCT:
            if modal:
                return self.render_product_modal(record, active_image=active_image)
            return self.render_product_detail(record, active_image=active_image)
        if modal:
            return self.render_gallery_modal(record)
        return self.render_gallery_detail(record)

    def detail_title(self, kind: EntityKind, record: Optional[Record]) -> str:
        if kind == EntityKind.PRODUCT:
            return (record.get(self.products.name) if record else "") or "Product Details"
        return (record.get(self.gallery.name) if record else "") or "Surgery Details"

    def render_nothing_selected(self, kind: EntityKind) -> str:
        message, href, label = NOTHING_SELECTED[kind]
        return f'<div class="no-results">{message} <a href="{href}">{label}</a></div>'

    def _thumbnails(
        self,
        images: Sequence[str],
        active_image: int,
        container_class: str,
        href_for: Optional[Callable[[int], str]] = None,
        alt_prefix: str = "Image",
    ) -> str:
        _, states = select_thumbnail(images, active_image)
        items = []
        for i, (image, active) in enumerate(states):
            css = "thumbnail active" if active else "thumbnail"
            inner = f'<img src="{esc(image)}" alt="{alt_prefix} {i + 1}">'
            if href_for is not None:
                items.append(f'<a class="{css}" href="{esc(href_for(i))}" data-index="{i}" data-src="{esc(image)}">{inner}</a>')
            else:
                items.append(f'<div class="{css}" data-index="{i}" data-src="{esc(image)}">{inner}</div>')
        return f'<div class="{container_class}">{"".join(items)}</div>'

    def _spec_rows(self, record: Record, rows, fallback: str) -> str:
        out = []
        for label, icon, attr in rows:
            value = record.get(getattr(self.products, attr)) or fallback
            out.append(
                f'<div class="spec-item">'
                f'<span class="spec-label"><i class="fas {icon}"></i> {label}</span>'
                f'<span class="spec-value" data-field="{attr}">{esc(value)}</span>'
                f"</div>"
            )
        return "".join(out)

    def _actions(self, whatsapp_url: str, label: str) -> str:
        return (
            f'<div class="detail-actions">'
            f'<a href="{esc(whatsapp_url)}" target="_blank" rel="noopener" class="btn-whatsapp">'
            f'<i class="fab fa-whatsapp"></i> {label}</a>'
            f'<a href="{esc(self.links.tel_url())}" class="btn-call"><i class="fas fa-phone"></i> Call Us</a>'
            f"</div>"
        )

    def render_product_modal(self, record: Record, active_image: int = 0) -> str:
        cols = self.products
        images = self.product_images(record, placeholder=self.placeholders.product_modal)
        main_image, _ = select_thumbnail(images, active_image)
        name = record.get(cols.name)
        modal_href = f"/products/{record.row_id}/modal"
        thumbnails = self._thumbnails(
            images,
            active_image,
            "thumbnail-images",
            href_for=lambda i: f"{modal_href}?image={i}",
            alt_prefix="Product image",
        )
        return (
            f'<div class="modal-content" data-row-id="{record.row_id}">'
            f'<a class="close-modal" href="/products" aria-label="Close">&times;</a>'
            f'<div class="modal-body">'
            f'<div class="modal-images">'
            f'<div class="main-image"><img id="modal-main-image" src="{esc(main_image)}" alt="{esc(name or "Product")}"></div>'
            f"{thumbnails}"
            f"</div>"
            f'<div class="modal-details">'
            f"<h2>{esc(name or 'Product Name')}</h2>"
            f'<p id="modal-basic-description" class="modal-description">{esc(record.get(cols.description) or NO_DESCRIPTION)}</p>'
            f'<div class="product-specs"><h3>Specifications</h3>{self._spec_rows(record, MODAL_SPEC_ROWS, NOT_SPECIFIED)}</div>'
            f"</div></div></div>"
        )

    def render_product_detail(self, record: Record, active_image: int = 0) -> str:
        cols = self.products
        images = self._product_images_no_placeholder(record)
        main_image, _ = select_thumbnail(images, active_image)
        main_image = main_image or self.placeholders.detail
        name = record.get(cols.name) or "Product"
        thumbnails = self._thumbnails(images, active_image, "detail-thumbnails") if len(images) > 1 else ""
        return (
            f'<div class="detail-grid" data-row-id="{record.row_id}">'
            f'<div class="detail-images">'
            f'<div class="detail-main-image"><img id="detail-main-img" src="{esc(main_image)}" alt="{esc(name)}"></div>'
            f"{thumbnails}"
            f"</div>"
            f'<div class="detail-info">'
            f"<h2>{esc(name)}</h2>"
            f'<p class="detail-description">{esc(record.get(cols.description) or NO_DESCRIPTION)}</p>'
            f'<div class="product-specs"><h3>Specifications</h3>{self._spec_rows(record, DETAIL_SPEC_ROWS, NOT_AVAILABLE)}</div>'
            f"{self._actions(self.links.product_inquiry(name), 'Book on WhatsApp')}"
            f"</div></div>"
        )

    def render_gallery_modal(self, record: Record) -> str:
        cols = self.gallery
        image = record.get(cols.image) or self.placeholders.gallery_modal
        name = record.get(cols.name) or "Gallery Item"
        return (
            f'<div class="modal-content" data-row-id="{record.row_id}">'
            f'<a class="close-modal" href="/gallery" aria-label="Close">&times;</a>'
            f'<div class="modal-body gallery-modal-body">'
            f'<div class="gallery-modal-image"><img id="gallery-modal-image" src="{esc(image)}" alt="{esc(name)}"></div>'
            f'<div class="gallery-modal-details">'
            f'<h2 id="gallery-modal-title">{esc(name)}</h2>'
            f'<p id="gallery-modal-category" class="category-badge">{esc(record.get(cols.category) or "Uncategorized")}</p>'
            f'<p id="gallery-modal-description" class="modal-description">{esc(record.get(cols.description) or NO_DESCRIPTION)}</p>'
            f"</div></div></div>"
        )

    def render_gallery_detail(self, record: Record) -> str:
        cols = self.gallery
        image = record.get(cols.image) or self.placeholders.detail
        name = record.get(cols.name) or "Surgery"
        category = record.get(cols.category)
        badge = f'<span class="category-badge">{esc(category)}</span>' if category else ""
        return (
            f'<div class="detail-grid" data-row-id="{record.row_id}">'
            f'<div class="detail-images">'
            f'<div class="detail-main-image"><img src="{esc(image)}" alt="{esc(name)}"></div>'
            f"</div>"
            f'<div class="detail-info">'
            f"<h2>{esc(name)}</h2>"
            f"{badge}"
            f'<p class="detail-description">{esc(record.get(cols.description) or NO_DESCRIPTION)}</p>'
            f"{self._actions(self.links.surgery_consultation(name), 'Book Consultation')}"
            f"</div></div>"
        )
