"""SVG Serializer — emits a fully laid-out tree as one 1200×630 SVG document.

Invariants:
    - Output width/height/viewBox are exactly the canvas size
    - Paint order per node: background → image → border → children → text
    - rgba() colors are decomposed into color + *-opacity attributes
    - Text is drawn as glyph outline paths from the cached font bytes, placed at the
      pen positions the layout engine measured; each line is a <g> whose
      aria-label holds the XML-escaped line text
    - Images are embedded as data URIs

Design Decisions:
    - Plain string assembly over an XML library: the element set is small and fixed
    - Gradients use objectBoundingBox units with the CSS angle convention
      (0deg = to top, 90deg = to right, 180deg = to bottom)
    - xlink:href for images: understood by every SVG rasterizer
    - Outlines over <text font-family>: the bitmap never depends on which fonts
      the rasterizing host has installed
    - Italic runs are an oblique skew of the upright outlines; no italic face is fetched
"""

import math
import re
from xml.sax.saxutils import quoteattr

from cardpreview.core.assets import FontSet, RenderedDocument
from cardpreview.core.domain_types import CANVAS_HEIGHT, CANVAS_WIDTH
from cardpreview.core.glyph_outlines import GlyphOutlines
from cardpreview.core.layout_engine import PlacedNode, layout, resolve_length
from cardpreview.core.layout_tree import Border, LayoutNode, LinearGradient

ITALIC_SKEW_DEGREES = -12

_RGBA = re.compile(
    r"^rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9.]+)\s*\)$",
)


def layout_and_serialize(root: LayoutNode, fonts: FontSet) -> RenderedDocument:
    """Lay out the tree on the canvas and serialize it. Pure."""
    return serialize(layout(root, fonts), fonts)


def serialize(
    placed: PlacedNode,
    fonts: FontSet,
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
) -> RenderedDocument:
    writer = _SvgWriter(fonts)
    writer.node(placed)
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'xmlns:xlink="http://www.w3.org/1999/xlink" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
        f'<defs>{"".join(writer.defs)}</defs>'
        f'{"".join(writer.body)}</svg>'
    )
    return RenderedDocument(svg=svg, width=width, height=height)


def split_color(color: str) -> tuple[str, float]:
    """'rgba(r,g,b,a)' → ('rgb(r,g,b)', a); anything else passes through at 1.0."""
    match = _RGBA.match(color.strip())
    if not match:
        return color, 1.0
    r, g, b, a = match.groups()
    return f"rgb({r},{g},{b})", min(1.0, max(0.0, float(a)))


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _paint(attr: str, color: str) -> str:
    rgb, alpha = split_color(color)
    out = f' {attr}="{rgb}"'
    if alpha < 1.0:
        out += f' {attr}-opacity="{_num(alpha)}"'
    return out


class _SvgWriter:
    def __init__(self, fonts: FontSet):
        self.fonts = fonts
        self._outlines: dict[int, GlyphOutlines] = {}
        self.defs: list[str] = []
        self.body: list[str] = []
        self._ids = 0

    def _next_id(self, prefix: str) -> str:
        self._ids += 1
        return f"{prefix}{self._ids}"

    # ─── Shapes ─────────────────────────────────────────────────

    def _radius(self, p: PlacedNode) -> float:
        limit = min(p.width, p.height) / 2
        radius = resolve_length(p.node.style.radius, min(p.width, p.height)) or 0.0
        return min(radius, limit)

    def _shape(self, x, y, w, h, r, attrs: str) -> str:
        if w == h and r >= w / 2:
            return (
                f'<circle cx="{_num(x + w / 2)}" cy="{_num(y + h / 2)}" '
                f'r="{_num(w / 2)}"{attrs}/>'
            )
        rounded = f' rx="{_num(r)}" ry="{_num(r)}"' if r > 0 else ""
        return (
            f'<rect x="{_num(x)}" y="{_num(y)}" width="{_num(w)}" '
            f'height="{_num(h)}"{rounded}{attrs}/>'
        )

    def _gradient(self, gradient: LinearGradient) -> str:
        gid = self._next_id("g")
        rad = math.radians(gradient.angle)
        dx, dy = math.sin(rad) / 2, -math.cos(rad) / 2
        stops = []
        for stop in gradient.stops:
            rgb, alpha = split_color(stop.color)
            opacity = f' stop-opacity="{_num(alpha)}"' if alpha < 1.0 else ""
            stops.append(
                f'<stop offset="{_num(stop.offset)}" stop-color="{rgb}"{opacity}/>'
            )
        self.defs.append(
            f'<linearGradient id="{gid}" '
            f'x1="{0.5 - dx:.4f}" y1="{0.5 - dy:.4f}" '
            f'x2="{0.5 + dx:.4f}" y2="{0.5 + dy:.4f}">'
            f'{"".join(stops)}</linearGradient>'
        )
        return gid

    # ─── Nodes ──────────────────────────────────────────────────

    def node(self, p: PlacedNode) -> None:
        style = p.node.style
        radius = self._radius(p)

        if isinstance(style.background, LinearGradient):
            gid = self._gradient(style.background)
            self.body.append(
                self._shape(p.x, p.y, p.width, p.height, radius, f' fill="url(#{gid})"')
            )
        elif style.background:
            self.body.append(
                self._shape(p.x, p.y, p.width, p.height, radius, _paint("fill", style.background))
            )

        if p.node.image is not None:
            self._image(p, radius)
        if style.border is not None:
            self._border(p, style.border, radius)
        if style.border_top is not None:
            self._border_top(p, style.border_top)

        for child in p.children:
            self.node(child)
        if p.node.text is not None:
            self._text(p)

    def _image(self, p: PlacedNode, radius: float) -> None:
        clip = ""
        if radius > 0:
            cid = self._next_id("c")
            self.defs.append(
                f'<clipPath id="{cid}">'
                f'{self._shape(p.x, p.y, p.width, p.height, radius, "")}</clipPath>'
            )
            clip = f' clip-path="url(#{cid})"'
        self.body.append(
            f'<image x="{_num(p.x)}" y="{_num(p.y)}" width="{_num(p.width)}" '
            f'height="{_num(p.height)}" preserveAspectRatio="xMidYMid slice" '
            f'xlink:href={quoteattr(p.node.image.data_uri)}{clip}/>'
        )

    def _border(self, p: PlacedNode, border: Border, radius: float) -> None:
        half = border.width / 2
        attrs = (
            f' fill="none"{_paint("stroke", border.color)}'
            f' stroke-width="{_num(border.width)}"'
        )
        self.body.append(self._shape(
            p.x + half, p.y + half,
            max(0.0, p.width - border.width), max(0.0, p.height - border.width),
            max(0.0, radius - half), attrs,
        ))

    def _border_top(self, p: PlacedNode, border: Border) -> None:
        y = p.y + border.width / 2
        self.body.append(
            f'<line x1="{_num(p.x)}" y1="{_num(y)}" x2="{_num(p.x + p.width)}" '
            f'y2="{_num(y)}"{_paint("stroke", border.color)} '
            f'stroke-width="{_num(border.width)}"/>'
        )

    def _glyphs(self, weight: int) -> GlyphOutlines:
        asset = self.fonts.for_weight(weight)
        outlines = self._outlines.get(asset.weight)
        if outlines is None:
            outlines = GlyphOutlines(asset)
            self._outlines[asset.weight] = outlines
        return outlines

    def _text(self, p: PlacedNode) -> None:
        run = p.node.text
        outlines = self._glyphs(run.weight)
        scale = run.size / outlines.units_per_em
        skew = f" skewX({ITALIC_SKEW_DEGREES})" if run.italic else ""
        for line in p.lines:
            paths = []
            for char, offset in zip(line.text, line.offsets):
                d = outlines.path(char)
                if not d:
                    continue
                # Font units are y-up; flip into SVG space at the baseline
                paths.append(
                    f'<path transform="translate({_num(line.x + offset)} {_num(line.baseline)})'
                    f'{skew} scale({scale:.6g} {-scale:.6g})" d="{d}"/>'
                )
            self.body.append(
                f'<g class="text-line" aria-label={quoteattr(line.text)}'
                f'{_paint("fill", run.color)}>{"".join(paths)}</g>'
            )
