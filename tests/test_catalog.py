from kalasetu import catalog
from storefront.samples import SAMPLE_ARTISANS, SAMPLE_STORIES


def test_artisan_search_matches_name_or_craft():
    assert [a["name"] for a in catalog.filter_artisans(SAMPLE_ARTISANS, "pottery")] == ["Rajesh Kumar"]
    assert [a["name"] for a in catalog.filter_artisans(SAMPLE_ARTISANS, "MEERA")] == ["Meera Devi"]
    assert len(catalog.filter_artisans(SAMPLE_ARTISANS, "")) == 3


def test_artisan_location_is_substring_and_craft_is_exact():
    assert [a["name"] for a in catalog.filter_artisans(SAMPLE_ARTISANS, location="Uttar")] == ["Priya Sharma", "Rajesh Kumar"]
    assert catalog.filter_artisans(SAMPLE_ARTISANS, craft="Potter") == []


def test_facets_keep_first_seen_order():
    assert catalog.craft_types(SAMPLE_ARTISANS) == ["Handloom Weaving", "Pottery", "Jewelry Making"]
    assert catalog.locations(SAMPLE_ARTISANS) == ["Varanasi", "Khurja", "Jaipur"]


def test_story_search_covers_title_content_and_artisan():
    assert [s["id"] for s in catalog.filter_stories(SAMPLE_STORIES, "pashmina")] == ["sample-story-3"]
    assert [s["id"] for s in catalog.filter_stories(SAMPLE_STORIES, "rajesh")] == ["sample-story-2"]
    assert [s["id"] for s in catalog.filter_stories(SAMPLE_STORIES, craft="Pottery")] == ["sample-story-2"]


def test_excerpt_prefers_summary():
    assert catalog.story_excerpt(SAMPLE_STORIES[0]) == SAMPLE_STORIES[0]["ai_summary"]
    excerpt = catalog.story_excerpt(SAMPLE_STORIES[2])
    assert excerpt.endswith("...")
    assert len(excerpt) == 153
    assert catalog.story_excerpt({"content": "short"}) == "short"


def test_split_featured_only_uses_first_story():
    hero, rest = catalog.split_featured(SAMPLE_STORIES)
    assert hero["id"] == "sample-story-1"
    assert len(rest) == 2

    hero, rest = catalog.split_featured(SAMPLE_STORIES[1:])
    assert hero is None
    assert len(rest) == 2
    assert catalog.split_featured([]) == (None, [])


def test_product_filters():
    products = [
        {"name": "Silk Saree", "category": "Textiles", "status": "active", "artisan_id": "a", "featured": True},
        {"name": "Clay Lamp", "category": "Pottery", "status": "sold_out", "artisan_id": "b", "featured": False},
    ]
    assert [p["name"] for p in catalog.filter_products(products, status="active")] == ["Silk Saree"]
    assert [p["name"] for p in catalog.filter_products(products, featured=False)] == ["Clay Lamp"]
    assert [p["name"] for p in catalog.filter_products(products, artisan_id="b", search="lamp")] == ["Clay Lamp"]
    assert len(catalog.filter_products(products, category="all")) == 2
