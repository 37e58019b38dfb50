from pathlib import Path

import pytest
import requests
from streamlit.testing.v1 import AppTest

from storefront.checkout import CheckoutFlow
from storefront.samples import SAMPLE_STORIES
from tests.test_storefront_api import StubResponse

APP = str(Path(__file__).resolve().parents[1] / "storefront" / "app.py")
PRODUCT = {"id": "p1", "name": "Clay Lamp", "price": 450.0, "artisan_id": "a1", "artisan_name": "Rajesh Kumar"}
BREAKDOWN = {"product_price": 450.0, "platform_fee": 22.5, "payment_gateway_fee": 9.0,
             "artisan_share": 418.5, "total_amount": 450.0}


class FakeBackend:
    """Canned responses per (method, path); anything unrouted is a connection error."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def request(self, method, url, timeout=None, **kwargs):
        path = "/" + url.split("://", 1)[-1].split("/", 1)[-1]
        self.calls.append((method, path, kwargs.get("json")))
        if (method, path) not in self.routes:
            raise requests.ConnectionError("connection refused")
        status_code, body = self.routes[(method, path)]
        return StubResponse(status_code, body)


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(requests, "request", fake.request)
    return fake


def run_page(page, **state):
    at = AppTest.from_file(APP, default_timeout=30)
    at.session_state["page"] = page
    for key, value in state.items():
        at.session_state[key] = value
    return at.run()


def texts(elements):
    return [e.value for e in elements]


def test_artisans_page_falls_back_to_samples_when_backend_down(backend):
    at = run_page("Artisans")
    assert not at.exception
    assert at.header[0].value == "Meet Our Talented Artisans"
    assert "Showing sample artisans." in texts(at.info)
    shown = " ".join(texts(at.markdown))
    for name in ("Priya Sharma", "Rajesh Kumar", "Meera Devi"):
        assert name in shown
    assert any("Error contacting backend" in e for e in texts(at.error))


def test_stories_page_falls_back_to_samples_with_featured_hero(backend):
    at = run_page("Stories")
    assert not at.exception
    assert "Showing sample stories." in texts(at.info)
    shown = texts(at.markdown)
    assert "### ✨ Featured" in shown
    assert f"## {SAMPLE_STORIES[0]['title']}" in shown
    assert SAMPLE_STORIES[0]["ai_summary"] in shown


def test_featured_hero_uses_content_excerpt_without_summary(backend):
    story = {"id": "s1", "title": "Loom Songs", "content": "w" * 200, "artisan_name": "Priya Sharma",
             "featured": True, "ai_summary": None, "views": 3, "likes": 1}
    backend.routes[("GET", "/stories")] = (200, [story])
    backend.routes[("GET", "/stories/facets")] = (200, {"crafts": []})
    at = run_page("Stories")
    assert not at.exception
    assert not at.info
    shown = texts(at.markdown)
    assert "## Loom Songs" in shown
    assert "w" * 150 + "..." in shown


def test_checkout_try_again_returns_to_details(backend):
    flow = CheckoutFlow(PRODUCT)
    flow.step = "status"
    flow.status = {"transaction_id": "TXN1", "status": "failed"}
    at = run_page("Checkout", checkout=flow)
    assert at.header[0].value == "Payment Status"
    assert any(e.startswith("Payment Failed.") for e in texts(at.error))

    next(b for b in at.button if b.label == "Try Again").click().run()
    assert not at.exception
    assert at.header[0].value == "Order Details"
    assert flow.step == "details"
    assert flow.status is None


def test_checkout_expired_offers_try_again(backend):
    flow = CheckoutFlow(PRODUCT)
    flow.step = "status"
    flow.status = {"transaction_id": "TXN1", "status": "expired"}
    at = run_page("Checkout", checkout=flow)
    assert any(e.startswith("Payment Expired.") for e in texts(at.error))
    assert "Try Again" in [b.label for b in at.button]


def test_checkout_fetches_breakdown_once_per_flow(backend):
    backend.routes[("GET", "/payments/breakdown")] = (200, BREAKDOWN)
    flow = CheckoutFlow(PRODUCT)
    at = run_page("Checkout", checkout=flow)
    at.run()
    assert "**Total Amount: ₹450.00**" in texts(at.markdown)
    assert [c for c in backend.calls if c[1] == "/payments/breakdown"] == [("GET", "/payments/breakdown", None)]
    assert flow.breakdown == BREAKDOWN


def test_checkout_simulated_razorpay_completes(backend):
    backend.routes[("GET", "/payments/breakdown")] = (200, BREAKDOWN)
    backend.routes[("POST", "/payments/TXN7/confirm")] = (200, {"transaction_id": "TXN7", "status": "completed"})
    flow = CheckoutFlow(PRODUCT)
    flow.method = "Razorpay"
    flow.start_razorpay({"order_id": "order_abc", "amount": 45000, "currency": "INR",
                         "transaction_id": "TXN7", "simulated": True})
    at = run_page("Checkout", checkout=flow)
    assert at.header[0].value == "Complete Payment"

    next(b for b in at.button if b.label == "Simulate successful payment").click().run()
    assert not at.exception
    assert at.header[0].value == "Payment Status"
    assert at.success[0].value.startswith("Payment Successful!")
    confirm = [c for c in backend.calls if c[1] == "/payments/TXN7/confirm"]
    assert confirm[0][2]["status"] == "completed"
