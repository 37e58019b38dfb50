import os
import tempfile

# Configure before kalasetu reads the environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MEDIA_DIR"] = tempfile.mkdtemp(prefix="kalasetu-media-")
os.environ["BACKEND_ORIGIN"] = ""
for var in ("GEMINI_API_KEY", "GENAI_API_KEY", "GOOGLE_API_KEY", "RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"):
    os.environ[var] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from kalasetu import ai  # noqa: E402
from kalasetu.app import app  # noqa: E402
from kalasetu.db import Base, SessionLocal, engine  # noqa: E402


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, replies):
        self.replies = list(replies)
        self.prompts = []

    def generate_content(self, model, contents):
        self.prompts.append(contents)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return FakeResponse(reply)


class FakeGenaiClient:
    def __init__(self, *replies):
        self.models = FakeModels(replies or ["generated text"])


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def fake_ai(monkeypatch):
    """Install a fake Gemini client; call with replies to control its output."""
    def install(*replies):
        fake = FakeGenaiClient(*replies)
        monkeypatch.setattr(ai, "genai_client", fake)
        return fake.models
    return install


@pytest.fixture
def artisan(client):
    resp = client.post("/artisans", json={
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "phone": "+91 9876543210",
        "location": "Varanasi, Uttar Pradesh",
        "craft": "Handloom Weaving",
        "experience": 25,
        "specialties": ["Banarasi Silk"],
        "verified": True,
    })
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
def product(client, artisan):
    resp = client.post("/products", json={
        "artisan_id": artisan["id"],
        "name": "Banarasi Silk Saree",
        "price": 12000,
        "category": "Textiles",
        "materials": ["silk", "zari"],
        "stock": 3,
    })
    assert resp.status_code == 201
    return resp.json()
