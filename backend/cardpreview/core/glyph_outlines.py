"""Glyph Outlines — SVG path data for each character of a cached font face.

Invariants:
    - Outlines come from the same font bytes the layout engine measured with
    - Path data is in font units with the y axis pointing up; callers scale by
      size / units_per_em and flip y
    - Characters missing from the cmap draw the face's .notdef glyph
    - One GlyphOutlines per render pass; never shared across threads

Design Decisions:
    - Text becomes <path> outlines rather than <text>: the rasterizer cannot load
      in-memory font bytes, so outlines are the only way the fetched face reaches
      the bitmap
    - Paths are memoized per character for the pass; a card repeats few glyphs
"""

from io import BytesIO

from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.ttLib import TTFont

from cardpreview.core.assets import FontAsset

NOTDEF = ".notdef"


class GlyphOutlines:
    """Character → SVG path data for one FontAsset."""

    def __init__(self, asset: FontAsset):
        font = TTFont(BytesIO(asset.data), lazy=True)
        self.units_per_em = font["head"].unitsPerEm
        self._cmap = font.getBestCmap() or {}
        self._glyphs = font.getGlyphSet()
        self._paths: dict[str, str] = {}

    def path(self, char: str) -> str:
        """Outline of `char` as path data; "" for blank glyphs such as space."""
        cached = self._paths.get(char)
        if cached is not None:
            return cached
        name = self._cmap.get(ord(char), NOTDEF)
        if name not in self._glyphs:
            path = ""
        else:
            pen = SVGPathPen(self._glyphs)
            self._glyphs[name].draw(pen)
            path = pen.getCommands()
        self._paths[char] = path
        return path
