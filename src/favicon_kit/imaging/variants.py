from __future__ import annotations

import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from PIL import Image, UnidentifiedImageError

from favicon_kit.errors import ConfigError
from favicon_kit.imaging.svg import rasterize_svg

logger = logging.getLogger(__name__)

MIN_SOURCE_SIZE = 32

Purpose = Literal["ico-part", "android-icon", "apple-touch-icon"]


@dataclass(frozen=True)
class VariantRequest:
    size: int
    purpose: Purpose
    name: str


@dataclass(frozen=True)
class FailureRecord:
    size: int
    name: str


@dataclass
class SourceImage:
    path: Path
    image: Image.Image
    width: int
    height: int
    is_vector: bool = False
    svg_text: str | None = None


def open_source(path: Path | str | None, *, svg_density: int = 512) -> SourceImage:
    if not path:
        raise ConfigError('Missing "path" - should point to the source favicon image.')
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f'"{path}" does not exist.')

    svg_text = None
    try:
        if path.suffix.lower() == ".svg":
            svg_text = path.read_text(encoding="utf-8")
            image = rasterize_svg(svg_text, density=svg_density)
        else:
            with Image.open(path) as opened:
                image = opened.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
        raise ConfigError(f'"{path}" could not be decoded: {e}') from e

    # convert() returns a fully loaded copy, so clones never touch the file again.
    width, height = image.size
    return SourceImage(
        path=path,
        image=image,
        width=width,
        height=height,
        is_vector=svg_text is not None,
        svg_text=svg_text,
    )


def validate_source(source: SourceImage) -> None:
    if source.width != source.height:
        raise ConfigError(f'"{source.path}" must be a square image (is {source.width}x{source.height})')
    if source.width < MIN_SOURCE_SIZE:
        raise ConfigError(f'"{source.path}" must be at least {MIN_SOURCE_SIZE}x{MIN_SOURCE_SIZE} pixels.')


def encode_png(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG", optimize=True)
    return buf.getvalue()


class VariantGenerator:
    """Resizes one validated source into PNG variants. Never upscales."""

    def __init__(self, source: SourceImage, max_workers: int = 4) -> None:
        self.source = source
        self.max_workers = max(1, max_workers)

    def produce(self, request: VariantRequest) -> bytes | FailureRecord:
        if request.size > self.source.width:
            return FailureRecord(size=request.size, name=request.name)
        image = self.source.image.copy()
        if image.size != (request.size, request.size):
            image = image.resize((request.size, request.size), Image.Resampling.LANCZOS)
        return encode_png(image)

    def produce_many(self, requests: list[VariantRequest]) -> list[bytes | FailureRecord]:
        if self.max_workers == 1 or len(requests) < 2:
            return [self.produce(r) for r in requests]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            results = list(pool.map(self.produce, requests))
        logger.debug("produced %d variants from %s", len(results), self.source.path)
        return results
