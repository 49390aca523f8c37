"""Image decoding and encoding utilities."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

_MAX_IMAGE_SIZE_BYTES = 50 * 1024 * 1024  # 50 MB


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded PIL image.

    Raises ValueError for empty, oversized or undecodable data.
    """
    if not data:
        raise ValueError("Empty image data")
    if len(data) > _MAX_IMAGE_SIZE_BYTES:
        raise ValueError(f"Image too large ({len(data)} bytes, max {_MAX_IMAGE_SIZE_BYTES})")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        raise ValueError(f"Cannot decode image: {e}") from e
    return img


def encode_jpeg(img: Image.Image, quality: int = 80) -> bytes:
    """Encode an image as JPEG at the given quality.

    Modes JPEG cannot hold (alpha, palette) are flattened to RGB first.
    """
    if img.mode not in ("RGB", "L", "CMYK"):
        img = img.convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def image_cost(img: Image.Image) -> int:
    """Decoded size in bytes: width * height * bands."""
    width, height = img.size
    return width * height * len(img.getbands())
