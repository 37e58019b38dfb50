from kalasetu import ai


def test_not_configured_returns_failure():
    result = ai.generate_story_summary("Some story")
    assert result.success is False
    assert result.error == "AI service not configured"
    assert result.text == ""


def test_generated_text_is_stripped(fake_ai):
    fake_ai("  A warm bio.\n")
    result = ai.generate_artisan_bio("Priya", "Weaving", 25, "Varanasi")
    assert result.success is True
    assert result.text == "A warm bio."


def test_prompt_carries_inputs(fake_ai):
    models = fake_ai("desc")
    ai.generate_product_description("Clay Lamp", "Pottery", ["terracotta", "natural dyes"])
    prompt = models.prompts[0]
    assert "Clay Lamp" in prompt
    assert "terracotta, natural dyes" in prompt


def test_errors_are_reported_not_raised(fake_ai):
    fake_ai(RuntimeError("503 UNAVAILABLE"))
    result = ai.enhance_story("content", "Pottery", "Khurja")
    assert result.success is False
    assert "503" in result.error


def test_empty_reply_is_a_failure(fake_ai):
    fake_ai("   ")
    result = ai.enhance_story("content", "Pottery", "Khurja")
    assert result.success is False
    assert result.error == "No content generated"


def test_ai_endpoints(client, fake_ai):
    fake_ai("ok")
    assert client.post("/ai/artisan-bio", json={
        "name": "Priya", "craft": "Weaving", "experience": 3, "location": "Varanasi",
    }).json() == {"text": "ok", "success": True, "error": None}
    assert client.post("/ai/story-summary", json={"content": "story"}).json()["success"] is True
    assert client.post("/ai/enhance-story", json={"content": "c", "craft": "k", "location": "l"}).json()["text"] == "ok"


def test_product_description_requires_materials(client, fake_ai):
    fake_ai("ok")
    resp = client.post("/ai/product-description", json={"name": "Pot", "craft": "Pottery", "materials": []})
    assert resp.status_code == 422


def test_health_reports_ai_state(client, fake_ai):
    assert client.get("/").json()["gemini_loaded"] is False
    fake_ai("ok")
    assert client.get("/").json()["gemini_loaded"] is True
    assert client.get("/check-gemini").json()["key_present"] is False
