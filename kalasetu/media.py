# kalasetu/media.py
import logging
import uuid
from pathlib import Path

from PIL import Image, ImageFilter, ImageOps  # pip install pillow

from .config import BACKEND_ORIGIN, MEDIA_DIR

logger = logging.getLogger(__name__)

ALLOWED_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp"}

MEDIA_DIR.mkdir(parents=True, exist_ok=True)


def _unique_name(suffix: str = ".jpg") -> str:
    return f"{uuid.uuid4().hex}{suffix}"


def absolute_image_url(filename: str) -> str:
    """
    Build the public URL for an image under /static.
    Requires BACKEND_ORIGIN in production so the storefront gets absolute links.
    """
    return f"{BACKEND_ORIGIN}/static/{filename}" if BACKEND_ORIGIN else f"/static/{filename}"


def save_image_and_enhance(upload_file) -> Path:
    """
    Save an UploadFile into MEDIA_DIR and apply light enhancement with Pillow.
    Raises ValueError for unsupported extensions; enhancement problems are
    logged and the raw upload is kept.
    """
    ext = (Path(getattr(upload_file, "filename", "") or "").suffix or ".jpg").lower()
    if ext not in ALLOWED_SUFFIXES:
        raise ValueError(f"Unsupported image type: {ext}")
    out_path = MEDIA_DIR / _unique_name(ext)

    content = upload_file.file.read()
    with open(out_path, "wb") as f:
        f.write(content)

    try:
        img = Image.open(out_path)
        img = ImageOps.exif_transpose(img)
        img = img.convert("RGB")
        img = ImageOps.autocontrast(img)
        img = img.filter(ImageFilter.UnsharpMask(radius=1, percent=150, threshold=3))
        img.thumbnail((1200, 1200))
        fmt = "PNG" if ext == ".png" else "WEBP" if ext == ".webp" else "JPEG"
        img.save(out_path, format=fmt, quality=90)
    except Exception as e:
        logger.warning("Image enhancement skipped for %s: %s", out_path.name, e)

    return out_path
