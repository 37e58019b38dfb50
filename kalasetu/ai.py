# kalasetu/ai.py
"""
Gemini-backed text generation for stories, product copy and artisan bios.

Every helper returns an AIResponse and never raises: callers surface
``error`` to the user and keep whatever text they already had.
"""
import logging
from typing import List

from .config import GEMINI_API_KEY, GEMINI_MODEL
from .schemas import AIResponse

logger = logging.getLogger(__name__)

# Optional GenAI (Gemini) client
genai_client = None
if GEMINI_API_KEY:
    try:
        from google import genai  # type: ignore
        genai_client = genai.Client(api_key=GEMINI_API_KEY)
    except Exception as e:
        logger.warning("genai client init failed: %s", e)
        genai_client = None


def is_available() -> bool:
    return genai_client is not None


def generate_text(prompt: str, purpose: str = "generate") -> AIResponse:
    if genai_client is None:
        return AIResponse(success=False, error="AI service not configured")
    try:
        resp = genai_client.models.generate_content(model=GEMINI_MODEL, contents=prompt)
        text = (resp.text or "").strip()
    except Exception as e:
        logger.error("GenAI error during %s: %s", purpose, e)
        return AIResponse(success=False, error=str(e))
    if not text:
        logger.warning("GenAI returned no content for %s", purpose)
        return AIResponse(success=False, error="No content generated")
    return AIResponse(text=text, success=True)


def enhance_story(content: str, craft: str, location: str) -> AIResponse:
    prompt = f"""
Enhance this artisan story with cultural context and an engaging narrative while preserving authenticity.

Original Story: {content}
Craft: {craft}
Location: {location}

Please:
1. Add rich cultural context about the craft tradition
2. Include its historical significance
3. Make it more engaging while keeping it authentic
4. Highlight the artisan's skill and dedication
5. Keep the tone respectful and celebratory

Return only the enhanced story content, no additional formatting.
"""
    return generate_text(prompt, "enhance_story")


def generate_product_description(name: str, craft: str, materials: List[str]) -> AIResponse:
    prompt = f"""
Create an engaging product description for this handcrafted item.

Product: {name}
Craft Type: {craft}
Materials: {", ".join(materials)}

The description should highlight the craftsmanship involved, mention its cultural
significance, describe the materials and techniques, and appeal to buyers who value
authentic handmade work. Keep it to 2-3 paragraphs.

Return only the product description, no additional formatting.
"""
    return generate_text(prompt, "product_description")


def generate_artisan_bio(name: str, craft: str, experience: int, location: str) -> AIResponse:
    prompt = f"""
Create a compelling artisan biography.

Name: {name}
Craft: {craft}
Experience: {experience} years
Location: {location}

Tell their story with respect, highlight their expertise and the cultural tradition
they are preserving, and keep it personal. 2-3 paragraphs.

Return only the biography, no additional formatting.
"""
    return generate_text(prompt, "artisan_bio")


def generate_story_summary(content: str) -> AIResponse:
    prompt = f"""
Write a compelling 2-3 sentence summary of this artisan story that captures its essence
and makes people want to read more.

Full Story: {content}

Return only the summary, no additional formatting.
"""
    return generate_text(prompt, "story_summary")
