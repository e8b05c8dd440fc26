"""Rasterizer — converts the serialized SVG document into the 1200×630 PNG.

Invariants:
    - Deterministic: same document → same pixels, always fit to width 1200
    - Output dimensions are verified; a mismatch is a RenderFailure, never a
      partially correct image
    - Any converter error is mapped to RenderFailureError

Design Decisions:
    - CairoSVG does the vector → raster work; no custom rasterization here
    - cairosvg imported lazily: it loads the native cairo library at import time,
      which must not break application startup or unrelated routes
    - Pillow reads back the PNG header to check dimensions
"""

import logging
from io import BytesIO

from PIL import Image

from cardpreview.core.assets import OutputBitmap, RenderedDocument
from cardpreview.core.errors import RenderFailureError

logger = logging.getLogger(__name__)


def rasterize(doc: RenderedDocument, cache_control: str) -> OutputBitmap:
    """Render the SVG to PNG bytes fit to the document width."""
    try:
        import cairosvg

        png = cairosvg.svg2png(
            bytestring=doc.svg.encode("utf-8"),
            output_width=doc.width,
            output_height=doc.height,
        )
        with Image.open(BytesIO(png)) as image:
            size = image.size
    except Exception as e:
        logger.error(f"Rasterization failed: {e}", exc_info=True)
        raise RenderFailureError("Failed to rasterize preview", "rasterize") from e
    if size != (doc.width, doc.height):
        raise RenderFailureError(
            f"Rasterized size {size[0]}x{size[1]} != {doc.width}x{doc.height}",
            "rasterize",
        )
    return OutputBitmap(
        data=png, cache_control=cache_control,
        width=doc.width, height=doc.height,
    )
