"""
Photo compression for uploads.
Car photos and vehicle photos are resized (max 1600px) and re-encoded as WebP
at quality 80 before they go to blob storage.
"""

import io

from PIL import Image, UnidentifiedImageError

from app.core.exceptions import ValidationError

MAX_PIXEL_DIMENSION = 1600
WEBP_QUALITY = 80
WEBP_CONTENT_TYPE = "image/webp"


def compress_to_webp(image_bytes: bytes) -> bytes:
    """
    Resize (max 1600px on the long side) and convert to WebP.

    Raises:
        ValidationError: If the bytes are not a readable image
    """
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("Uploaded photo is not a valid image") from e

    if img.mode in ("RGBA", "P"):
        img = img.convert("RGBA")
    else:
        img = img.convert("RGB")

    w, h = img.size
    if w > MAX_PIXEL_DIMENSION or h > MAX_PIXEL_DIMENSION:
        if w >= h:
            new_w = MAX_PIXEL_DIMENSION
            new_h = int(h * MAX_PIXEL_DIMENSION / w)
        else:
            new_h = MAX_PIXEL_DIMENSION
            new_w = int(w * MAX_PIXEL_DIMENSION / h)
        img = img.resize((new_w, new_h), Image.Resampling.LANCZOS)

    out = io.BytesIO()
    img.save(out, format="WEBP", quality=WEBP_QUALITY)
    return out.getvalue()


def webp_file_name(file_name: str) -> str:
    """Same base name with a .webp extension."""
    base_name = (file_name or "photo").rsplit(".", 1)[0] or "photo"
    return f"{base_name}.webp"
