import os

os.environ["INTEGRATIONS_MODE"] = "mock"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient

from visioncare.api.main import SESSION_COOKIE, app, get_contact_handler, get_table_client
from visioncare.integrations.contracts.records import FetchError
from visioncare.site.forms import ContactFormHandler


class DownClient:
    async def fetch(self, table_name):
        raise FetchError("Network error: offline")


class BrokenClient:
    async def fetch(self, table_name):
        raise RuntimeError("unexpected")


@pytest.fixture
def client(local_client):
    app.dependency_overrides[get_table_client] = lambda: local_client
    app.dependency_overrides[get_contact_handler] = lambda: ContactFormHandler(delay_seconds=0)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_home_page_has_both_previews(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert '<section id="featured-products">' in resp.text
    assert '<section id="featured-gallery">' in resp.text
    assert resp.text.count('class="product-card"') == 3
    assert "global-error" not in resp.text
    assert client.get("/index.html").status_code == 200


def test_products_search_and_html_alias(client):
    resp = client.get("/products.html", params={"q": "tita"})

    assert resp.status_code == 200
    assert resp.text.count('class="product-card"') == 1
    assert "Titanium Frame" in resp.text
    assert 'value="tita"' in resp.text


def test_gallery_category_filter(client):
    resp = client.get("/gallery", params={"category": "cataract"})

    assert resp.text.count('class="gallery-card"') == 1
    assert "Cataract Surgery" in resp.text
    assert 'class="filter-btn active">Cataract<' in resp.text


def test_selecting_third_card_opens_its_detail_page(client):
    listing = client.get("/products")
    assert 'href="/products/select/4"' in listing.text

    resp = client.get("/products/select/4", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/product-details"
    assert SESSION_COOKIE in resp.cookies

    detail = client.get("/product-details")
    assert '<h1 id="detail-page-title">Titanium Frame</h1>' in detail.text
    assert "<title>Titanium Frame - Upadhyay Vision Care Centre</title>" in detail.text
    assert "Gunmetal" in detail.text

    # handoff is consumed by the first read
    again = client.get("/product-details")
    assert "No product selected." in again.text


def test_gallery_selection_and_unknown_row(client):
    resp = client.get("/gallery/select/4")
    assert "Pterygium Excision" in resp.text
    assert "Consultation%20for%20Pterygium%20Excision" in resp.text

    missing = client.get("/gallery/select/99", follow_redirects=False)
    assert missing.status_code == 303
    assert missing.headers["location"] == "/gallery"


def test_detail_page_without_selection(client):
    resp = client.get("/surgery-details.html")

    assert resp.status_code == 200
    assert "No surgery selected." in resp.text
    assert "Surgery Details" in resp.text


def test_product_modal_fragment(client):
    resp = client.get("/products/2/modal", params={"image": 1})

    assert resp.status_code == 200
    assert 'id="modal-main-image" src="a2.jpg"' in resp.text
    assert client.get("/products/99/modal").status_code == 404
    assert "Refractive" in client.get("/gallery/2/modal").text


def test_appointment_redirects_to_whatsapp(client):
    resp = client.post(
        "/appointment",
        data={"name": "Asha", "phone": "9876543210", "date": "2026-11-02", "service": "cataract"},
        follow_redirects=False,
    )

    assert resp.status_code == 303
    assert resp.headers["location"].startswith("https://wa.me/917055502333?text=Hi%2C")
    assert "Cataract%20Checkup" in resp.headers["location"]


def test_contact_form_submission(client):
    ok = client.post("/contact", data={"name": "A", "email": "a@b.co", "subject": "Hi", "message": "Hello"})
    bad = client.post("/contact", data={"name": "A", "email": "nope", "subject": "Hi", "message": "Hello"})

    assert ok.status_code == 200 and "form-message success" in ok.text
    assert bad.status_code == 400 and "Please enter a valid email address." in bad.text


def test_json_catalog_endpoints(client):
    products = client.get("/api/v1/products", params={"q": "ray-ban"}).json()
    gallery = client.get("/api/v1/gallery").json()

    assert products["state"] == "LOADED"
    assert products["count"] == 1
    assert products["items"][0]["row_id"] == 2
    assert gallery["categories"] == ["Refractive", "Cataract"]


def test_banner_when_sheets_unreachable(client):
    app.dependency_overrides[get_table_client] = lambda: DownClient()
    resp = client.get("/")

    assert resp.status_code == 200
    assert 'class="global-error"' in resp.text
    assert "Failed to load data." in resp.text
    assert client.get("/api/v1/products").json()["state"] == "FAILED"


def test_unexpected_error_renders_error_page(client):
    app.dependency_overrides[get_table_client] = lambda: BrokenClient()
    resp = client.get("/products")

    assert resp.status_code == 500
    assert "Something went wrong" in resp.text


def test_static_assets_and_health(client):
    css = client.get("/static/styles.css")

    assert css.status_code == 200
    assert css.headers["content-type"].startswith("text/css")
    assert client.get("/static/missing.css").status_code == 404
    assert client.get("/health").json()["status"] == "healthy"


def test_category_filter_link_round_trips_special_characters(client, catalog_tables):
    catalog_tables["Surgery_Gallery"][2][3] = "Cataract & Lens"

    listing = client.get("/gallery")
    assert 'href="/gallery?category=Cataract+%26+Lens"' in listing.text

    resp = client.get("/gallery?category=Cataract+%26+Lens")
    assert resp.text.count('class="gallery-card"') == 1
    assert 'class="filter-btn active">Cataract &amp; Lens<' in resp.text


def test_search_shows_result_count(client):
    assert '<p class="results-count">1 result for &quot;tita&quot;</p>' in client.get("/products", params={"q": "tita"}).text
    assert "results-count" not in client.get("/products").text
    assert "results-count" not in client.get("/products", params={"q": "zzz"}).text
    assert "1 result for &quot;Refractive&quot;" in client.get("/gallery", params={"category": "Refractive"}).text


def test_invalid_appointment_renders_html_error_page(client):
    resp = client.post("/appointment", data={"name": "Asha", "service": "lasik"}, follow_redirects=False)

    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith("text/html")
    assert '<div class="form-message error">Please fill in name, phone, date and service' in resp.text
