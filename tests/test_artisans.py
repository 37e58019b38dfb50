import pytest


def test_create_and_get_artisan(client, artisan):
    assert artisan["rating"] == 5
    assert artisan["review_count"] == 0
    resp = client.get(f"/artisans/{artisan['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Priya Sharma"
    assert body["specialties"] == ["Banarasi Silk"]
    assert body["products"] == []
    assert body["stories"] == []


def test_missing_required_fields_are_rejected(client):
    resp = client.post("/artisans", json={"name": "No Email", "location": "Jaipur", "craft": "Pottery"})
    assert resp.status_code == 422


def test_invalid_email_is_rejected(client):
    resp = client.post("/artisans", json={
        "name": "Bad", "email": "not-an-email", "location": "Jaipur", "craft": "Pottery",
    })
    assert resp.status_code == 422


def test_unknown_artisan_returns_404(client):
    assert client.get("/artisans/nope").status_code == 404
    assert client.put("/artisans/nope", json={"bio": "x"}).status_code == 404
    assert client.delete("/artisans/nope").status_code == 404


def test_update_only_touches_given_fields(client, artisan):
    resp = client.put(f"/artisans/{artisan['id']}", json={"bio": "Weaving since 1999", "rating": 4.5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["bio"] == "Weaving since 1999"
    assert body["rating"] == 4.5
    assert body["craft"] == "Handloom Weaving"


@pytest.mark.parametrize("payload", [
    {"email": None},
    {"name": None},
    {"location": ""},
    {"craft": ""},
    {"location": "", "craft": ""},
])
def test_update_cannot_blank_required_fields(client, artisan, payload):
    resp = client.put(f"/artisans/{artisan['id']}", json=payload)
    assert resp.status_code == 422
    body = client.get(f"/artisans/{artisan['id']}").json()
    assert body["email"] == "priya@example.com"
    assert body["location"] == "Varanasi, Uttar Pradesh"
    assert body["craft"] == "Handloom Weaving"


def test_delete_artisan(client, artisan):
    resp = client.delete(f"/artisans/{artisan['id']}")
    assert resp.json() == {"status": "deleted", "id": artisan["id"]}
    assert client.get(f"/artisans/{artisan['id']}").status_code == 404


def _add(client, name, craft, location):
    resp = client.post("/artisans", json={"name": name, "email": "a@example.com", "craft": craft, "location": location})
    assert resp.status_code == 201


def test_list_filters(client):
    _add(client, "Rajesh Kumar", "Pottery", "Khurja, Uttar Pradesh")
    _add(client, "Meera Devi", "Jewelry Making", "Jaipur, Rajasthan")
    _add(client, "Arjun Rao", "Pottery", "Jaipur, Rajasthan")

    names = lambda resp: sorted(a["name"] for a in resp.json())  # noqa: E731
    assert len(client.get("/artisans").json()) == 3
    assert names(client.get("/artisans", params={"q": "POTTERY"})) == ["Arjun Rao", "Rajesh Kumar"]
    assert names(client.get("/artisans", params={"q": "meera"})) == ["Meera Devi"]
    assert names(client.get("/artisans", params={"craft": "Pottery", "location": "Jaipur"})) == ["Arjun Rao"]
    assert client.get("/artisans", params={"craft": "Woodwork"}).json() == []


def test_facets(client):
    _add(client, "Rajesh Kumar", "Pottery", "Khurja, Uttar Pradesh")
    _add(client, "Arjun Rao", "Pottery", "Jaipur, Rajasthan")
    facets = client.get("/artisans/facets").json()
    assert facets["crafts"] == ["Pottery"]
    assert sorted(facets["locations"]) == ["Jaipur", "Khurja"]


def test_artisan_detail_lists_products_and_stories(client, artisan, product):
    client.post("/stories", json={"artisan_id": artisan["id"], "title": "Threads", "content": "A story"})
    body = client.get(f"/artisans/{artisan['id']}").json()
    assert [p["id"] for p in body["products"]] == [product["id"]]
    assert [s["title"] for s in body["stories"]] == ["Threads"]
    assert client.get(f"/artisans/{artisan['id']}/products").json()[0]["name"] == "Banarasi Silk Saree"
    assert len(client.get(f"/artisans/{artisan['id']}/stories").json()) == 1


def test_database_errors_become_503(client, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from kalasetu.store import artisan_service

    def broken(db):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(artisan_service, "get_all", broken)
    resp = client.get("/artisans")
    assert resp.status_code == 503
    assert resp.json()["detail"].startswith("Database unavailable")
