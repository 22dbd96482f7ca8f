"""Pytest fixtures for the catalog, rendering and site tests."""

import httpx
import pytest

from visioncare.integrations.clients.mocks.local_sheets import LocalSheetsClient
from visioncare.site.messaging import MessagingLinks
from visioncare.site.renderer import Renderer
from visioncare.storage.session_store import SessionStore
from visioncare.utils.config_loader import SiteConfig

PRODUCT_HEADER = [
    "Image URL 1", "Image URL 2", "Image URL 3", "Product Name", "Basic Description",
    "Frame Dimensions", "Frame Color", "Frame Weight", "Brand Name", "Age Range",
    "Frame Shape", "Material Type",
]

GALLERY_HEADER = ["Image URL", "Surgery Name", "Description", "Category"]


@pytest.fixture
def config():
    """Default site config (no YAML file involved)."""
    return SiteConfig()


@pytest.fixture
def links(config):
    return MessagingLinks(config.business.whatsapp_phone, config.business.call_phone)


@pytest.fixture
def renderer(config, links):
    return Renderer(config.columns, config.placeholders, links)


@pytest.fixture
def session_store():
    """In-memory session store stub for tests."""
    return SessionStore()


@pytest.fixture
def sample_grid():
    return [["name", "desc"], ["Frame A", "Nice"], ["Frame B", ""]]


@pytest.fixture
def catalog_tables():
    return {
        "Products": [
            PRODUCT_HEADER,
            ["a1.jpg", "a2.jpg", "", "Classic Aviator", "Metal aviator", "52-18-140", "Gold", "18g", "Ray-Ban", "Adults", "Aviator", "Metal"],
            ["", "", "", "Kids Flex", "", "", "Blue", "", "", "", "Rectangle", "TR90"],
            ["t1.jpg", "", "", "Titanium Frame", "Rimless frame", "54-17-145", "Gunmetal", "10g", "Titan", "Adults", "Rimless", "Titanium"],
            ["r1.jpg", "", "", "Round Acetate", "Retro round frame", "", "Tortoise", "", "Vincent Chase", "", "Round", "Acetate"],
        ],
        "Surgery_Gallery": [
            GALLERY_HEADER,
            ["lasik.jpg", "LASIK", "Laser vision correction", "Refractive"],
            ["cataract.jpg", "Cataract Surgery", "Phaco with IOL", "Cataract"],
            ["", "Pterygium Excision", "", ""],
        ],
    }


@pytest.fixture
def local_client(catalog_tables):
    return LocalSheetsClient(tables=catalog_tables)


@pytest.fixture
def sheets_transport():
    """Build an httpx.MockTransport answering every request with the given JSON/status."""

    def _build(payload=None, status_code=200, raise_exc=None, text=None):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if raise_exc is not None:
                raise raise_exc
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=payload if payload is not None else {})

        transport = httpx.MockTransport(handler)
        transport.calls = calls
        return transport

    return _build
