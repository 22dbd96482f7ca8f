"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlencode

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import ValidationError

from visioncare import __version__
from visioncare.cache.offline_cache import OfflineCache
from visioncare.error_handler import ErrorHandler
from visioncare.integrations.clients.mocks.local_sheets import LocalSheetsClient
from visioncare.integrations.clients.real_http.google_sheets import GoogleSheetsClient
from visioncare.integrations.contracts.records import EntityKind, Record
from visioncare.site.forms import AppointmentRequest, ContactFormHandler, appointment_link
from visioncare.site.layout import render_page
from visioncare.site.messaging import MessagingLinks
from visioncare.site.orchestrator import (
    GALLERY,
    GALLERY_CONTAINER,
    HOME,
    PRODUCTS,
    PRODUCTS_CONTAINER,
    SiteOrchestrator,
    build_orchestrator,
)
from visioncare.site.renderer import RenderedList, Renderer, esc
from visioncare.site.selection import SelectionBridge
from visioncare.utils.config_loader import SiteConfig, load_site_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).parent.parent.parent
STATIC_DIR = Path(__file__).parent.parent / "site" / "static"
SESSION_COOKIE = "vc_session"

STATIC_CONTENT_TYPES = {
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
}

# Initialize FastAPI app
app = FastAPI(
    title="Vision Care Centre Website",
    description="Eye-care clinic site rendered from the catalog spreadsheet",
    version=__version__,
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

config: SiteConfig = load_site_config()


def _should_use_real_integrations(cfg: SiteConfig) -> bool:
    mode = os.getenv("INTEGRATIONS_MODE", "").strip().lower()
    if mode in {"real", "live"}:
        return True
    if mode in {"mock", "test", "local"}:
        return False
    return bool(cfg.sheets.api_key and cfg.sheets.spreadsheet_id)


def _sample_data_path(cfg: SiteConfig) -> Optional[Path]:
    if not cfg.sample_data_path:
        return None
    path = Path(cfg.sample_data_path)
    return path if path.is_absolute() else ROOT_DIR / path


def build_table_client(cfg: SiteConfig, cache: Optional[OfflineCache] = None):
    if _should_use_real_integrations(cfg):
        logger.info("Using Google Sheets table client (spreadsheet=%s)", cfg.sheets.spreadsheet_id)
        return GoogleSheetsClient(
            spreadsheet_id=cfg.sheets.spreadsheet_id,
            api_key=cfg.sheets.api_key,
            base_url=cfg.sheets.base_url,
            timeout_seconds=cfg.sheets.timeout_seconds,
            cache=cache,
        )
    logger.info("Sheets credentials not configured; using local sample catalog")
    return LocalSheetsClient(path=_sample_data_path(cfg))


offline_cache = OfflineCache(config.cache.name, assets=config.cache.assets) if config.cache.enabled else None
table_client = build_table_client(config, offline_cache)

if os.getenv("REDIS_URL"):
    from visioncare.storage.redis_store import RedisSessionStore

    session_store = RedisSessionStore(url=os.environ["REDIS_URL"])
else:
    from visioncare.storage.session_store import SessionStore

    session_store = SessionStore()

messaging = MessagingLinks(config.business.whatsapp_phone, config.business.call_phone)
renderer = Renderer(config.columns, config.placeholders, messaging)
error_handler = ErrorHandler(banner_dismiss_ms=config.startup.banner_dismiss_ms)
selection_bridge = SelectionBridge(session_store)
contact_handler = ContactFormHandler(delay_seconds=config.contact.submit_delay_seconds)


def get_table_client():
    """Dependency for the catalog table source"""
    return table_client


def get_orchestrator(client=Depends(get_table_client)) -> SiteOrchestrator:
    """Fresh catalogs for every page load"""
    return build_orchestrator(client, config, renderer, error_handler)


def get_selection_bridge() -> SelectionBridge:
    return selection_bridge


def get_contact_handler() -> ContactFormHandler:
    return contact_handler


# ============================================================================
# HELPERS
# ============================================================================


def _session_id(request: Request) -> Tuple[str, bool]:
    existing = request.cookies.get(SESSION_COOKIE)
    if existing:
        return existing, False
    return str(uuid.uuid4()), True


def _remember_session(response: Response, session_id: str, is_new: bool) -> Response:
    if is_new:
        # No max_age: the cookie ends with the browser session.
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


async def _form_data(request: Request) -> Dict[str, str]:
    body = (await request.body()).decode("utf-8")
    return {key: values[0] for key, values in parse_qs(body, keep_blank_values=True).items()}


def _page(title: str, sections: Dict[str, str], path: str, banner=None, heading: Optional[str] = None, status_code: int = 200) -> HTMLResponse:
    full_title = f"{title} - {config.business.name}" if title else config.business.name
    markup = render_page(full_title, config.business.name, sections, active_path=path, banner=banner, heading=heading)
    return HTMLResponse(markup, status_code=status_code)


def _error_page(exc: Exception, path: str) -> HTMLResponse:
    payload = error_handler.handle_exception(exc, context={"path": path})
    return _page("Error", {"error": f'<div class="error-message">{esc(payload["message"])}</div>'}, path, status_code=500)


def _record_payload(record: Record) -> Dict[str, Any]:
    return {"row_id": record.row_id, "fields": record.to_dict()}


def _search_form(query: Optional[str]) -> str:
    return (
        '<form class="search-bar" method="get" action="/products">'
        f'<input type="search" name="q" placeholder="Search frames, brands, shapes..." value="{esc(query or "")}">'
        '<button type="submit"><i class="fas fa-search"></i></button>'
        "</form>"
    )


def _results_summary(rendered: Optional[RenderedList], term: Optional[str]) -> str:
    """Result count shown above a searched or filtered list; empty otherwise."""
    if rendered is None or rendered.empty or not (term or "").strip():
        return ""
    count = len(rendered.records)
    noun = "result" if count == 1 else "results"
    return f'<p class="results-count">{count} {noun} for &quot;{esc(term.strip())}&quot;</p>'


def _category_filters(categories, active: Optional[str]) -> str:
    active_key = (active or "").strip().lower()
    links = ['<a href="/gallery" class="filter-btn{}">All</a>'.format(" active" if not active_key else "")]
    for category in categories:
        css = " active" if category.lower() == active_key else ""
        links.append(f'<a href="/gallery?{esc(urlencode({"category": category}))}" class="filter-btn{css}">{esc(category)}</a>')
    return f'<div class="gallery-filters">{"".join(links)}</div>'


HERO = (
    '<div class="hero"><h1>Clear Vision, Better Life</h1>'
    "<p>Eye examinations, spectacles and advanced eye surgery under one roof.</p>"
    '<a class="btn-primary" href="/products">Browse Frames</a></div>'
)

CONTACT_FORM = (
    '<form id="contact-form" method="post" action="/contact">'
    '<input type="text" name="name" placeholder="Your Name" required>'
    '<input type="email" name="email" placeholder="Your Email" required>'
    '<input type="tel" name="phone" placeholder="Phone (optional)">'
    '<input type="text" name="subject" placeholder="Subject" required>'
    '<textarea name="message" placeholder="Your Message" required></textarea>'
    '<button type="submit" class="btn-primary">Send Message</button>'
    "</form>"
)


# ============================================================================
# PAGES
# ============================================================================


@app.get("/", response_class=HTMLResponse, tags=["Pages"])
@app.get("/index.html", response_class=HTMLResponse, tags=["Pages"])
async def home_page(orchestrator: SiteOrchestrator = Depends(get_orchestrator)):
    try:
        page = await orchestrator.build_page(HOME)
        return _page("", {"hero": HERO, **page.sections}, "/", banner=page.banner)
    except Exception as e:
        return _error_page(e, "/")


@app.get("/products", response_class=HTMLResponse, tags=["Pages"])
@app.get("/products.html", response_class=HTMLResponse, tags=["Pages"])
async def products_page(
    q: Optional[str] = Query(default=None, description="Search name, description, brand, shape or material"),
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
):
    try:
        page = await orchestrator.build_page(PRODUCTS, query=q)
        summary = _results_summary(page.lists.get(PRODUCTS_CONTAINER), q)
        return _page("Products", {"search": _search_form(q) + summary, **page.sections}, "/products", banner=page.banner)
    except Exception as e:
        return _error_page(e, "/products")


@app.get("/gallery", response_class=HTMLResponse, tags=["Pages"])
@app.get("/gallery.html", response_class=HTMLResponse, tags=["Pages"])
async def gallery_page(
    category: Optional[str] = Query(default=None),
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
):
    try:
        page = await orchestrator.build_page(GALLERY, category=category)
        filters = _category_filters(orchestrator.gallery.categories(), category)
        summary = _results_summary(page.lists.get(GALLERY_CONTAINER), category)
        return _page("Surgery Gallery", {"filters": filters + summary, **page.sections}, "/gallery", banner=page.banner)
    except Exception as e:
        return _error_page(e, "/gallery")


@app.get("/contact", response_class=HTMLResponse, tags=["Pages"])
@app.get("/contact.html", response_class=HTMLResponse, tags=["Pages"])
async def contact_page():
    return _page("Contact", {"contact": CONTACT_FORM + '<div id="form-message" class="form-message"></div>'}, "/contact")


@app.post("/contact", response_class=HTMLResponse, tags=["Forms"])
async def submit_contact(request: Request, handler: ContactFormHandler = Depends(get_contact_handler)):
    data = await _form_data(request)
    result = await handler.submit(data)
    message = f'<div id="form-message" class="form-message {result.status}">{esc(result.message)}</div>'
    status_code = 200 if result.status == "success" else 400
    return _page("Contact", {"contact": CONTACT_FORM + message}, "/contact", status_code=status_code)


APPOINTMENT_INVALID_MESSAGE = "Please fill in name, phone, date and service, then try again."


@app.post("/appointment", tags=["Forms"])
async def book_appointment(request: Request):
    data = await _form_data(request)
    try:
        appointment = AppointmentRequest(**data)
    except ValidationError as e:
        logger.info("Rejected appointment request: %s", e.errors())
        message = f'<div class="form-message error">{APPOINTMENT_INVALID_MESSAGE}</div>'
        return _page("Book Appointment", {"appointment": message}, "/", status_code=400)
    return RedirectResponse(appointment_link(appointment, messaging), status_code=303)


# ============================================================================
# SELECTION HANDOFF + DETAIL PAGES
# ============================================================================


async def _select(kind: EntityKind, row_id: int, request: Request, orchestrator: SiteOrchestrator, bridge: SelectionBridge):
    record = await orchestrator.find(kind, row_id)
    if record is None:
        logger.warning("No %s with row_id=%s; returning to list", kind.value, row_id)
        return RedirectResponse("/products" if kind == EntityKind.PRODUCT else "/gallery", status_code=303)
    session_id, is_new = _session_id(request)
    target = bridge.handoff(session_id, kind, record)
    return _remember_session(RedirectResponse(target, status_code=303), session_id, is_new)


@app.get("/products/select/{row_id}", tags=["Navigation"])
async def select_product(
    row_id: int,
    request: Request,
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
    bridge: SelectionBridge = Depends(get_selection_bridge),
):
    return await _select(EntityKind.PRODUCT, row_id, request, orchestrator, bridge)


@app.get("/gallery/select/{row_id}", tags=["Navigation"])
async def select_gallery_item(
    row_id: int,
    request: Request,
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
    bridge: SelectionBridge = Depends(get_selection_bridge),
):
    return await _select(EntityKind.GALLERY, row_id, request, orchestrator, bridge)


def _detail_page(kind: EntityKind, request: Request, bridge: SelectionBridge, path: str) -> HTMLResponse:
    record = bridge.retrieve(request.cookies.get(SESSION_COOKIE), kind)
    heading = renderer.detail_title(kind, record)
    if record is None:
        return _page(heading, {"details-container": renderer.render_nothing_selected(kind)}, path, heading=heading)
    fallback = "Product" if kind == EntityKind.PRODUCT else "Surgery"
    title = record.get(renderer.products.name if kind == EntityKind.PRODUCT else renderer.gallery.name) or fallback
    return _page(title, {"details-container": renderer.render_detail(kind, record)}, path, heading=heading)


@app.get("/product-details", response_class=HTMLResponse, tags=["Pages"])
@app.get("/product-details.html", response_class=HTMLResponse, tags=["Pages"])
async def product_details(request: Request, bridge: SelectionBridge = Depends(get_selection_bridge)):
    return _detail_page(EntityKind.PRODUCT, request, bridge, "/product-details")


@app.get("/surgery-details", response_class=HTMLResponse, tags=["Pages"])
@app.get("/surgery-details.html", response_class=HTMLResponse, tags=["Pages"])
async def surgery_details(request: Request, bridge: SelectionBridge = Depends(get_selection_bridge)):
    return _detail_page(EntityKind.GALLERY, request, bridge, "/surgery-details")


@app.get("/products/{row_id}/modal", response_class=HTMLResponse, tags=["Fragments"])
async def product_modal(
    row_id: int,
    image: int = Query(default=0, ge=0),
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
):
    record = await orchestrator.find(EntityKind.PRODUCT, row_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return HTMLResponse(renderer.render_detail(EntityKind.PRODUCT, record, modal=True, active_image=image))


@app.get("/gallery/{row_id}/modal", response_class=HTMLResponse, tags=["Fragments"])
async def gallery_modal(row_id: int, orchestrator: SiteOrchestrator = Depends(get_orchestrator)):
    record = await orchestrator.find(EntityKind.GALLERY, row_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Gallery item not found")
    return HTMLResponse(renderer.render_detail(EntityKind.GALLERY, record, modal=True))


# ============================================================================
# JSON API
# ============================================================================


@app.get("/api/v1/products", tags=["Catalog"])
async def api_list_products(
    q: Optional[str] = Query(default=None),
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.start()
    items = orchestrator.products.search(q)
    return {
        "state": orchestrator.products.state.value,
        "count": len(items),
        "items": [_record_payload(r) for r in items],
    }


@app.get("/api/v1/gallery", tags=["Catalog"])
async def api_list_gallery(
    category: Optional[str] = Query(default=None),
    orchestrator: SiteOrchestrator = Depends(get_orchestrator),
):
    await orchestrator.start()
    items = orchestrator.gallery.filter_by_category(category)
    return {
        "state": orchestrator.gallery.state.value,
        "count": len(items),
        "categories": orchestrator.gallery.categories(),
        "items": [_record_payload(r) for r in items],
    }


# ============================================================================
# HEALTH + STATIC
# ============================================================================


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check (table source mode, session store)."""
    return {
        "status": "healthy",
        "version": __version__,
        "table_source": type(table_client).__name__,
        "session_store": session_store.ping(),
        "timestamp": datetime.now().isoformat(),
    }


async def _read_static(asset: str) -> Optional[bytes]:
    path = STATIC_DIR / asset
    if path.parent != STATIC_DIR or not path.is_file():
        return None
    return path.read_bytes()


@app.get("/static/{asset}", tags=["Static"])
async def static_asset(asset: str):
    if offline_cache is not None:
        content = await offline_cache.cache_first(asset, lambda: _read_static(asset))
    else:
        content = await _read_static(asset)
    if content is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    media_type = STATIC_CONTENT_TYPES.get(Path(asset).suffix, "application/octet-stream")
    return Response(content, media_type=media_type)


@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info("Starting Vision Care Centre site (table source: %s)", type(table_client).__name__)
    if offline_cache is not None:
        await offline_cache.install(_read_static)
        offline_cache.activate()
    if session_store.ping():
        logger.info("Session store ready: %s", type(session_store).__name__)
    else:
        logger.warning("Session store ping failed")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Vision Care Centre site...")
