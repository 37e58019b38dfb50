# storefront/samples.py
# Shown when the backend is unreachable or has no records yet.

SAMPLE_ARTISANS = [
    {
        "id": "sample-1",
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "phone": "+91 9876543210",
        "location": "Varanasi, Uttar Pradesh",
        "craft": "Handloom Weaving",
        "experience": 25,
        "bio": (
            "Master weaver from Varanasi specializing in Banarasi silk sarees. Priya learned handloom "
            "weaving from her grandmother and mentors young weavers in her community."
        ),
        "profile_image": "",
        "rating": 4.9,
        "review_count": 127,
        "specialties": ["Banarasi Silk", "Traditional Motifs", "Wedding Sarees"],
        "verified": True,
    },
    {
        "id": "sample-2",
        "name": "Rajesh Kumar",
        "email": "rajesh@example.com",
        "phone": "+91 9876543211",
        "location": "Khurja, Uttar Pradesh",
        "craft": "Pottery",
        "experience": 18,
        "bio": (
            "Third-generation potter from Khurja, known for terracotta and ceramic pieces that pair "
            "family techniques with modern forms."
        ),
        "profile_image": "",
        "rating": 4.7,
        "review_count": 89,
        "specialties": ["Terracotta", "Blue Pottery", "Decorative Vases"],
        "verified": True,
    },
    {
        "id": "sample-3",
        "name": "Meera Devi",
        "email": "meera@example.com",
        "phone": "+91 9876543212",
        "location": "Jaipur, Rajasthan",
        "craft": "Jewelry Making",
        "experience": 15,
        "bio": (
            "Jewelry artisan from Jaipur working in kundan and meenakari, blending Rajasthani motifs "
            "with contemporary styling."
        ),
        "profile_image": "",
        "rating": 4.8,
        "review_count": 156,
        "specialties": ["Kundan Work", "Meenakari", "Bridal Jewelry"],
        "verified": True,
    },
]

SAMPLE_STORIES = [
    {
        "id": "sample-story-1",
        "title": "The Ancient Art of Madhubani: Colors That Tell Stories",
        "content": (
            "In the heart of Bihar, Priya Sharma sits cross-legged on her courtyard floor, her fingers "
            "dancing across handmade paper with a bamboo brush. Deep reds from hibiscus, yellows from "
            "turmeric and blues from indigo carry a 2,500-year-old tradition passed down through the "
            "women of her family.\n\nToday she has trained over 200 women in her village, giving them "
            "an income while keeping the tradition alive."
        ),
        "artisan_id": "sample-1",
        "artisan_name": "Priya Sharma",
        "craft": "Madhubani Painting",
        "location": "Varanasi, Uttar Pradesh",
        "images": [],
        "tags": ["Madhubani", "Traditional Art", "Bihar", "Heritage"],
        "ai_enhanced": True,
        "ai_summary": (
            "Discover how Priya Sharma preserves the 2500-year-old tradition of Madhubani painting, "
            "passing down techniques from her grandmother while empowering women in her village."
        ),
        "featured": True,
        "views": 1247,
        "likes": 234,
    },
    {
        "id": "sample-story-2",
        "title": "From Clay to Soul: A Potter's Journey Through Generations",
        "content": (
            "The pottery wheel spins rhythmically in Rajesh Kumar's workshop in Khurja, as it has for "
            "three generations. \"My grandfather used to say that clay has memory,\" Rajesh shares. "
            "Today he makes both traditional terracotta and contemporary ceramic art."
        ),
        "artisan_id": "sample-2",
        "artisan_name": "Rajesh Kumar",
        "craft": "Pottery",
        "location": "Khurja, Uttar Pradesh",
        "images": [],
        "tags": ["Pottery", "Family Tradition", "Terracotta"],
        "ai_enhanced": True,
        "ai_summary": (
            "Rajesh Kumar shares how his family's pottery tradition has evolved while maintaining its "
            "authentic roots in the heart of Uttar Pradesh."
        ),
        "featured": False,
        "views": 892,
        "likes": 189,
    },
    {
        "id": "sample-story-3",
        "title": "Threads of Time: The Kashmiri Pashmina Legacy",
        "content": (
            "High in the mountains of Kashmir lies the secret to Pashmina. Each shawl takes months, with "
            "every thread hand-spun and woven on wooden looms. \"Pashmina is not just a fabric,\" Meera "
            "explains. \"It is poetry written in wool.\""
        ),
        "artisan_id": "sample-3",
        "artisan_name": "Meera Devi",
        "craft": "Textile Weaving",
        "location": "Jaipur, Rajasthan",
        "images": [],
        "tags": ["Pashmina", "Kashmir", "Weaving"],
        "ai_enhanced": False,
        "ai_summary": None,
        "featured": False,
        "views": 654,
        "likes": 312,
    },
]


def is_sample(record: dict) -> bool:
    return str(record.get("id", "")).startswith("sample-")
