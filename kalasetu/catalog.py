# kalasetu/catalog.py
"""
Listing filters shared by the API and the storefront's sample fallback.

All helpers take plain dict records (``Model.to_dict()`` on the API side),
treat an empty value or ``"all"`` as "no filter", and keep input order.
"""
from typing import Iterable, List, Optional, Tuple


def _matches(value: Optional[str], needle: str) -> bool:
    return needle in (value or "").lower()


def _unfiltered(choice: Optional[str]) -> bool:
    return not choice or choice == "all"


def filter_artisans(artisans: Iterable[dict], search: str = "", craft: str = "all", location: str = "all") -> List[dict]:
    needle = (search or "").strip().lower()
    out = []
    for a in artisans:
        if needle and not (_matches(a.get("name"), needle) or _matches(a.get("craft"), needle)):
            continue
        if not _unfiltered(craft) and a.get("craft") != craft:
            continue
        if not _unfiltered(location) and location not in (a.get("location") or ""):
            continue
        out.append(a)
    return out


def filter_stories(stories: Iterable[dict], search: str = "", craft: str = "all") -> List[dict]:
    needle = (search or "").strip().lower()
    out = []
    for s in stories:
        if needle and not (
            _matches(s.get("title"), needle)
            or _matches(s.get("content"), needle)
            or _matches(s.get("artisan_name"), needle)
        ):
            continue
        if not _unfiltered(craft) and s.get("craft") != craft:
            continue
        out.append(s)
    return out


def filter_products(
    products: Iterable[dict],
    search: str = "",
    category: Optional[str] = None,
    status: Optional[str] = None,
    artisan_id: Optional[str] = None,
    featured: Optional[bool] = None,
) -> List[dict]:
    needle = (search or "").strip().lower()
    out = []
    for p in products:
        if needle and not _matches(p.get("name"), needle):
            continue
        if not _unfiltered(category) and p.get("category") != category:
            continue
        if not _unfiltered(status) and p.get("status") != status:
            continue
        if artisan_id and p.get("artisan_id") != artisan_id:
            continue
        if featured is not None and bool(p.get("featured")) != featured:
            continue
        out.append(p)
    return out


def craft_types(records: Iterable[dict]) -> List[str]:
    seen = []
    for r in records:
        craft = r.get("craft")
        if craft and craft not in seen:
            seen.append(craft)
    return seen


def locations(records: Iterable[dict]) -> List[str]:
    """Distinct cities: the part of each location before the first comma."""
    seen = []
    for r in records:
        city = (r.get("location") or "").split(",")[0].strip()
        if city and city not in seen:
            seen.append(city)
    return seen


def story_excerpt(story: dict, length: int = 150) -> str:
    if story.get("ai_summary"):
        return story["ai_summary"]
    content = story.get("content") or ""
    return content[:length] + "..." if len(content) > length else content


def split_featured(stories: List[dict]) -> Tuple[Optional[dict], List[dict]]:
    """Only the first story can be the hero, and only if it is featured."""
    if stories and stories[0].get("featured"):
        return stories[0], stories[1:]
    return None, list(stories)
