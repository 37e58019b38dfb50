import requests

from storefront import api


class StubResponse:
    def __init__(self, status_code, body=None, reason="", text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body
        self.reason = reason
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


def test_to_abs(monkeypatch):
    monkeypatch.setattr(api, "BACKEND", "http://backend:8000/")
    assert api.to_abs("/static/a.jpg") == "http://backend:8000/static/a.jpg"
    assert api.to_abs("https://cdn/x.jpg") == "https://cdn/x.jpg"
    assert api.to_abs("") == ""


def test_json_or_none():
    assert api.json_or_none(StubResponse(200, {"a": 1})) == {"a": 1}
    assert api.json_or_none(StubResponse(404, {"detail": "x"})) is None
    assert api.json_or_none(None) is None


def test_error_detail():
    assert api.error_detail(None) == "backend unreachable"
    assert api.error_detail(StubResponse(404, {"detail": "Artisan not found"})) == "Artisan not found"
    assert api.error_detail(StubResponse(500, None, reason="Internal Server Error")) == "500 Internal Server Error"


def test_request_failure_returns_none(monkeypatch):
    errors = []

    def boom(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(api.requests, "request", boom)
    monkeypatch.setattr(api.st, "error", errors.append)
    assert api.api_get("/artisans") is None
    assert "refused" in errors[0]
