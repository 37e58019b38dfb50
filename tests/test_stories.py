import pytest


@pytest.fixture
def story(client, artisan):
    resp = client.post("/stories", json={
        "artisan_id": artisan["id"],
        "title": "Threads of Time",
        "content": "Priya learned weaving from her grandmother.",
        "tags": ["Weaving", "Heritage"],
    })
    assert resp.status_code == 201
    return resp.json()


def test_create_copies_artisan_fields(story, artisan):
    assert story["artisan_name"] == artisan["name"]
    assert story["craft"] == "Handloom Weaving"
    assert story["location"] == "Varanasi, Uttar Pradesh"
    assert story["views"] == 0 and story["likes"] == 0
    assert story["ai_enhanced"] is False and story["ai_summary"] is None


def test_create_requires_title_and_content(client, artisan):
    assert client.post("/stories", json={"artisan_id": artisan["id"], "title": "", "content": "x"}).status_code == 422
    assert client.post("/stories", json={"artisan_id": artisan["id"], "title": "T"}).status_code == 422


def test_views_and_likes(client, story):
    assert client.post(f"/stories/{story['id']}/views").json()["views"] == 1
    assert client.post(f"/stories/{story['id']}/views").json()["views"] == 2
    assert client.post(f"/stories/{story['id']}/like").json()["likes"] == 1
    body = client.get(f"/stories/{story['id']}").json()
    assert body["views"] == 2 and body["likes"] == 1


def test_counters_on_missing_story(client):
    assert client.post("/stories/missing/views").status_code == 404
    assert client.post("/stories/missing/like").status_code == 404


def test_list_search_and_craft(client, artisan, story):
    other = client.post("/artisans", json={
        "name": "Rajesh Kumar", "email": "r@example.com", "craft": "Pottery", "location": "Khurja, Uttar Pradesh",
    }).json()
    client.post("/stories", json={"artisan_id": other["id"], "title": "From Clay to Soul", "content": "The wheel spins."})

    titles = lambda params: sorted(s["title"] for s in client.get("/stories", params=params).json())  # noqa: E731
    assert titles({"q": "grandmother"}) == ["Threads of Time"]
    assert titles({"q": "rajesh"}) == ["From Clay to Soul"]
    assert titles({"craft": "Pottery"}) == ["From Clay to Soul"]
    assert sorted(client.get("/stories/facets").json()["crafts"]) == ["Handloom Weaving", "Pottery"]


def test_update_and_delete(client, story):
    resp = client.put(f"/stories/{story['id']}", json={"featured": True, "tags": ["Silk"]})
    assert resp.json()["featured"] is True
    assert resp.json()["tags"] == ["Silk"]
    assert client.delete(f"/stories/{story['id']}").json()["status"] == "deleted"
    assert client.get(f"/stories/{story['id']}").status_code == 404


@pytest.mark.parametrize("payload", [{"title": None}, {"content": None}, {"content": ""}, {"tags": None}])
def test_update_rejects_null_and_blank_fields(client, story, payload):
    assert client.put(f"/stories/{story['id']}", json=payload).status_code == 422
    assert client.get(f"/stories/{story['id']}").json()["title"] == story["title"]


def test_enhance_replaces_content_and_adds_summary(client, story, fake_ai):
    prompts = fake_ai("An enhanced tale of Banarasi silk.", "A short summary.")
    resp = client.post(f"/stories/{story['id']}/enhance")
    assert resp.status_code == 200
    body = resp.json()
    assert body["content"] == "An enhanced tale of Banarasi silk."
    assert body["ai_summary"] == "A short summary."
    assert body["ai_enhanced"] is True
    assert "Varanasi, Uttar Pradesh" in prompts.prompts[0]
    assert "An enhanced tale" in prompts.prompts[1]


def test_enhance_keeps_story_when_summary_fails(client, story, fake_ai):
    fake_ai("Enhanced content.", RuntimeError("quota"))
    body = client.post(f"/stories/{story['id']}/enhance").json()
    assert body["content"] == "Enhanced content."
    assert body["ai_enhanced"] is True
    assert body["ai_summary"] is None


def test_enhance_without_ai_is_502_and_leaves_story(client, story):
    resp = client.post(f"/stories/{story['id']}/enhance")
    assert resp.status_code == 502
    assert "not configured" in resp.json()["detail"]
    assert client.get(f"/stories/{story['id']}").json()["content"] == story["content"]


def test_dashboard_summary(client, artisan, product, story):
    client.post(f"/stories/{story['id']}/views")
    client.put(f"/products/{product['id']}", json={"featured": True})
    client.put(f"/stories/{story['id']}", json={"ai_enhanced": True})
    summary = client.get("/dashboard/summary").json()
    assert summary == {
        "artisans": 1,
        "stories": 1,
        "products": 1,
        "total_views": 1,
        "ai_enhanced_stories": 1,
        "featured_products": 1,
    }
