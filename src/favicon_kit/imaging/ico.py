from __future__ import annotations

import io
from collections.abc import Sequence

from PIL import Image, UnidentifiedImageError

from favicon_kit.errors import FormatError

FAVICON_SIZES = (16, 32, 48)


def _open_part(png: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(png))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise FormatError(f"icon image could not be read: {e}") from e
    return image.convert("RGBA")


def pack(buffers: Sequence[bytes]) -> bytes:
    """Pack ordered PNG buffers into one multi-size ICO container."""
    if not buffers:
        raise FormatError("cannot pack an icon container with no images")

    parts = [_open_part(png) for png in buffers]
    # Pillow drops sizes larger than the image being saved, so save from the largest part.
    largest = max(parts, key=lambda im: im.size)
    others = [im for im in parts if im is not largest]

    buf = io.BytesIO()
    largest.save(buf, format="ICO", sizes=[im.size for im in parts], append_images=others)
    return buf.getvalue()
