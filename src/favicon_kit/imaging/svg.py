from __future__ import annotations

import io
import logging

from PIL import Image
from scour import scour

logger = logging.getLogger(__name__)


def optimize_svg(svg_text: str) -> str:
    options = scour.sanitizeOptions()
    options.strip_xml_prolog = True
    options.remove_metadata = True
    options.strip_comments = True
    options.strip_ids = True
    options.shorten_ids = True
    options.indent_type = "none"
    options.newlines = False
    optimized = scour.scourString(svg_text, options)
    logger.debug("optimized svg %d -> %d chars", len(svg_text), len(optimized))
    return optimized


def rasterize_svg(svg_text: str, density: int = 512) -> Image.Image:
    """
    Render an SVG to an RGBA image.

    `density` is a DPI relative to the 72 DPI baseline, so the default of 512
    renders a 24x24 viewport at roughly 170x170 pixels.
    """
    # cairosvg needs the native cairo library; only vector sources pay for it.
    import cairosvg

    png = cairosvg.svg2png(bytestring=svg_text.encode("utf-8"), scale=density / 72)
    image = Image.open(io.BytesIO(png))
    image.load()
    return image.convert("RGBA")
