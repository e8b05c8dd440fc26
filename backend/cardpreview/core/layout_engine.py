"""Layout Engine — single top-down flow-layout pass over the 1200×630 canvas.

Invariants:
    - Pure: returns a new PlacedNode tree; the input LayoutNode tree is never mutated
    - Exactly one placement pass — no reflow; intrinsic sizes of auto-sized subtrees
      are measured on demand and memoized for the duration of the pass
    - Text is shaped with the cached font bytes (nearest weight) before its box is final
    - Root always occupies the full canvas regardless of its declared size

Design Decisions:
    - Flex subset: fixed/percentage/auto main size, grow by `flex`, proportional shrink
      of `shrink=True` children on overflow (a row child never shrinks below its
      min-content width), cross-axis start/center/end/stretch,
      main-axis start/center/end/space-between, gaps, padding, margins, absolute children
    - Borders are painted inside the box and do not take layout space (border-box)
    - FreeType faces are opened per pass: they are not safe to share across threads
    - Greedy word wrap; a `max_lines` overflow ends in an ellipsis
"""

from dataclasses import dataclass

from PIL import ImageFont

from cardpreview.core.assets import FontSet
from cardpreview.core.domain_types import CANVAS_HEIGHT, CANVAS_WIDTH
from cardpreview.core.layout_tree import Length, LayoutNode, TextRun

ELLIPSIS = "…"


@dataclass(frozen=True)
class PlacedLine:
    text: str
    x: float
    baseline: float
    width: float
    # Pen position of each character relative to x, from the same advances as width
    offsets: tuple[float, ...] = ()


@dataclass(frozen=True)
class PlacedNode:
    """A LayoutNode with its resolved border box in canvas coordinates."""
    node: LayoutNode
    x: float
    y: float
    width: float
    height: float
    children: tuple["PlacedNode", ...] = ()
    lines: tuple[PlacedLine, ...] = ()

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> "PlacedNode | None":
        return next((p for p in self.walk() if p.node.name == name), None)


@dataclass(frozen=True)
class _Shaped:
    lines: tuple[str, ...]
    widths: tuple[float, ...]
    line_height: float
    ascent: float
    descent: float

    @property
    def width(self) -> float:
        return max(self.widths, default=0.0)

    @property
    def height(self) -> float:
        return self.line_height * len(self.lines)


def layout(
    root: LayoutNode,
    fonts: FontSet,
    width: float = CANVAS_WIDTH,
    height: float = CANVAS_HEIGHT,
) -> PlacedNode:
    """Resolve every box in the tree. Pure."""
    return _LayoutPass(fonts).place(root, 0.0, 0.0, float(width), float(height))


def resolve_length(length: Length, basis: float | None) -> float | None:
    """px number → float; "NN%" → share of basis; None/auto → None."""
    if length is None:
        return None
    if isinstance(length, str):
        if length == "auto":
            return None
        if length.endswith("%"):
            if basis is None:
                return None
            return basis * float(length[:-1]) / 100.0
        raise ValueError(f"Unsupported length: {length!r}")
    return float(length)


class _LayoutPass:
    """State for one layout pass: opened faces and measurement memo."""

    def __init__(self, fonts: FontSet):
        self.fonts = fonts
        self._faces: dict[tuple[int, int], ImageFont.FreeTypeFont] = {}
        self._measured: dict[tuple[int, float | None], tuple[float, float]] = {}
        self._shaped: dict[tuple[int, float | None], _Shaped] = {}
        self._min_widths: dict[int, float] = {}

    # ─── Text shaping ───────────────────────────────────────────

    def _face(self, run: TextRun) -> ImageFont.FreeTypeFont:
        asset = self.fonts.for_weight(run.weight)
        key = (asset.weight, max(1, round(run.size)))
        face = self._faces.get(key)
        if face is None:
            face = asset.open_face(run.size)
            self._faces[key] = face
        return face

    def _line_width(self, face, run: TextRun, line: str) -> float:
        return face.getlength(line) + run.letter_spacing * len(line)

    def shape(self, node: LayoutNode, max_width: float | None) -> _Shaped:
        key = (id(node), None if max_width is None else round(max_width, 3))
        cached = self._shaped.get(key)
        if cached is not None:
            return cached
        run = node.text
        face = self._face(run)
        lines = self._wrap(face, run, max_width)
        if run.max_lines is not None and len(lines) > run.max_lines:
            lines = lines[:run.max_lines]
            lines[-1] = self._ellipsize(face, run, lines[-1] + ELLIPSIS, max_width)
        elif (
            run.max_lines is not None and max_width is not None
            and self._line_width(face, run, lines[-1]) > max_width
        ):
            lines[-1] = self._ellipsize(face, run, lines[-1], max_width)
        ascent, descent = face.getmetrics()
        shaped = _Shaped(
            lines=tuple(lines),
            widths=tuple(self._line_width(face, run, ln) for ln in lines),
            line_height=run.size * run.line_height,
            ascent=float(ascent),
            descent=float(descent),
        )
        self._shaped[key] = shaped
        return shaped

    def _wrap(self, face, run: TextRun, max_width: float | None) -> list[str]:
        words = run.content.split()
        if not words:
            return [run.content]
        if max_width is None:
            return [" ".join(words)]
        lines: list[str] = []
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if self._line_width(face, run, candidate) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines

    def _ellipsize(self, face, run: TextRun, line: str, max_width: float | None) -> str:
        """Trim characters until `line` (ending in an ellipsis) fits max_width."""
        body = line[:-1] if line.endswith(ELLIPSIS) else line
        if max_width is None:
            return body + ELLIPSIS
        while body and self._line_width(face, run, body.rstrip() + ELLIPSIS) > max_width:
            body = body[:-1]
        return body.rstrip() + ELLIPSIS

    # ─── Intrinsic measurement ──────────────────────────────────

    def measure(self, node: LayoutNode, avail_width: float | None) -> tuple[float, float]:
        """Natural border-box size given the width available to it."""
        key = (id(node), None if avail_width is None else round(avail_width, 3))
        cached = self._measured.get(key)
        if cached is not None:
            return cached
        style = node.style
        fixed_w = resolve_length(style.width, avail_width)
        fixed_h = resolve_length(style.height, None)

        if node.text is not None:
            shaped = self.shape(node, fixed_w if fixed_w is not None else avail_width)
            size = (
                fixed_w if fixed_w is not None else shaped.width,
                fixed_h if fixed_h is not None else shaped.height,
            )
        else:
            outer_w = fixed_w if fixed_w is not None else avail_width
            inner_w = None if outer_w is None else max(0.0, outer_w - style.padding.horizontal)
            content_w, content_h = self._measure_content(node, inner_w)
            size = (
                fixed_w if fixed_w is not None else content_w + style.padding.horizontal,
                fixed_h if fixed_h is not None else content_h + style.padding.vertical,
            )
        self._measured[key] = size
        return size

    def _measure_content(self, node: LayoutNode, inner_w: float | None) -> tuple[float, float]:
        flow = [c for c in node.children if c.style.absolute is None]
        if not flow:
            return 0.0, 0.0
        gaps = node.style.gap * (len(flow) - 1)
        if node.style.direction == "column":
            widths, heights = [], []
            for child in flow:
                m = child.style.margin
                avail = None if inner_w is None else max(0.0, inner_w - m.horizontal)
                w, h = self.measure(child, avail)
                widths.append(w + m.horizontal)
                heights.append(h + m.vertical)
            return max(widths), sum(heights) + gaps
        widths, heights = [], []
        for child in flow:
            m = child.style.margin
            w, h = self.measure(child, inner_w)
            widths.append(w + m.horizontal)
            heights.append(h + m.vertical)
        return sum(widths) + gaps, max(heights)

    def min_width(self, node: LayoutNode) -> float:
        """Narrowest border-box width the node can take without breaking a word.

        Truncatable text (max_lines set) can give way down to the ellipsis.
        A fixed px width caps the result, as with CSS `min-width: auto`.
        """
        cached = self._min_widths.get(id(node))
        if cached is not None:
            return cached
        style = node.style
        if node.text is not None:
            run = node.text
            face = self._face(run)
            if run.max_lines is not None:
                content = self._line_width(face, run, ELLIPSIS)
            else:
                content = max(
                    (self._line_width(face, run, w) for w in run.content.split()),
                    default=0.0,
                )
        else:
            floors = [
                self.min_width(c) + c.style.margin.horizontal
                if c.style.shrink else self.measure(c, None)[0] + c.style.margin.horizontal
                for c in node.children if c.style.absolute is None
            ]
            if not floors:
                content = 0.0
            elif style.direction == "row":
                content = sum(floors) + style.gap * (len(floors) - 1)
            else:
                content = max(floors)
            content += style.padding.horizontal
        fixed = resolve_length(style.width, None)
        result = content if fixed is None else min(fixed, content)
        self._min_widths[id(node)] = result
        return result

    # ─── Placement ──────────────────────────────────────────────

    def place(self, node: LayoutNode, x: float, y: float, w: float, h: float) -> PlacedNode:
        if node.text is not None:
            return self._place_text(node, x, y, w, h)
        style = node.style
        inner_x = x + style.padding.left
        inner_y = y + style.padding.top
        inner_w = max(0.0, w - style.padding.horizontal)
        inner_h = max(0.0, h - style.padding.vertical)

        flow = [c for c in node.children if c.style.absolute is None]
        placed_flow = iter(self._place_flow(node, flow, inner_x, inner_y, inner_w, inner_h))
        children = []
        for child in node.children:
            if child.style.absolute is None:
                children.append(next(placed_flow))
            else:
                children.append(self._place_absolute(child, x, y, w, h))
        return PlacedNode(node, x, y, w, h, children=tuple(children))

    def _place_text(self, node: LayoutNode, x: float, y: float, w: float, h: float) -> PlacedNode:
        shaped = self.shape(node, w)
        run = node.text
        face = self._face(run)
        top = y + max(0.0, (h - shaped.height) / 2)
        glyph_h = shaped.ascent + shaped.descent
        lines = []
        for i, (line, lw) in enumerate(zip(shaped.lines, shaped.widths)):
            line_top = top + i * shaped.line_height
            baseline = line_top + (shaped.line_height - glyph_h) / 2 + shaped.ascent
            offsets = tuple(
                self._line_width(face, run, line[:k]) for k in range(len(line))
            )
            lines.append(PlacedLine(line, x, baseline, lw, offsets))
        return PlacedNode(node, x, y, w, h, lines=tuple(lines))

    def _place_absolute(
        self, child: LayoutNode, x: float, y: float, w: float, h: float,
    ) -> PlacedNode:
        style = child.style
        offsets = style.absolute
        cw = resolve_length(style.width, w)
        ch = resolve_length(style.height, h)
        if cw is None or ch is None:
            mw, mh = self.measure(child, w if cw is None else cw)
            cw = mw if cw is None else cw
            ch = mh if ch is None else ch
        if offsets.left is not None:
            cx = x + offsets.left
        elif offsets.right is not None:
            cx = x + w - offsets.right - cw
        else:
            cx = x
        if offsets.top is not None:
            cy = y + offsets.top
        elif offsets.bottom is not None:
            cy = y + h - offsets.bottom - ch
        else:
            cy = y
        return self.place(child, cx, cy, cw, ch)

    def _place_flow(
        self,
        parent: LayoutNode,
        flow: list[LayoutNode],
        x: float, y: float, w: float, h: float,
    ) -> list[PlacedNode]:
        if not flow:
            return []
        style = parent.style
        is_row = style.direction == "row"
        main_total, cross_total = (w, h) if is_row else (h, w)

        mains: list[float] = []
        crosses: list[float | None] = []
        for child in flow:
            cs = child.style
            m = cs.margin
            main_margin = m.horizontal if is_row else m.vertical
            cross_margin = m.vertical if is_row else m.horizontal
            fixed_main = resolve_length(cs.width if is_row else cs.height, main_total)
            fixed_cross = resolve_length(cs.height if is_row else cs.width, cross_total)
            if fixed_cross is None and style.align == "stretch":
                fixed_cross = max(0.0, cross_total - cross_margin)
            if is_row:
                main = fixed_main
                if main is None:
                    main = self.measure(child, max(0.0, main_total - main_margin))[0]
            else:
                width = fixed_cross
                if width is None:
                    width = min(
                        self.measure(child, max(0.0, cross_total - cross_margin))[0],
                        max(0.0, cross_total - cross_margin),
                    )
                    fixed_cross = width
                main = fixed_main
                if main is None:
                    main = self.measure(child, width)[1]
            mains.append(main)
            crosses.append(fixed_cross)

        margins_main = [
            (c.style.margin.horizontal if is_row else c.style.margin.vertical) for c in flow
        ]
        gaps = style.gap * (len(flow) - 1)
        free = main_total - sum(mains) - sum(margins_main) - gaps

        if free > 0:
            total_flex = sum(c.style.flex for c in flow)
            if total_flex > 0:
                mains = [
                    m + free * c.style.flex / total_flex for m, c in zip(mains, flow)
                ]
                free = 0.0
        elif free < 0:
            if is_row:
                floors = [min(m, self.min_width(c)) for m, c in zip(mains, flow)]
            else:
                floors = [0.0] * len(flow)
            mains = _shrink(mains, floors, [c.style.shrink for c in flow], -free)
            free = main_total - sum(mains) - sum(margins_main) - gaps

        cursor, between = 0.0, 0.0
        if free > 0:
            if style.justify == "center":
                cursor = free / 2
            elif style.justify == "end":
                cursor = free
            elif style.justify == "space-between" and len(flow) > 1:
                between = free / (len(flow) - 1)

        placed = []
        for child, main, cross in zip(flow, mains, crosses):
            m = child.style.margin
            if cross is None:
                cross = self.measure(child, main)[1] if is_row else 0.0
            cross_margin_start = m.top if is_row else m.left
            cross_margin_total = m.vertical if is_row else m.horizontal
            slack = cross_total - cross - cross_margin_total
            if style.align == "center":
                cross_pos = cross_margin_start + slack / 2
            elif style.align == "end":
                cross_pos = cross_margin_start + slack
            else:
                cross_pos = cross_margin_start
            main_margin_start = m.left if is_row else m.top
            main_margin_end = m.right if is_row else m.bottom
            main_pos = cursor + main_margin_start
            if is_row:
                placed.append(self.place(child, x + main_pos, y + cross_pos, main, cross))
            else:
                placed.append(self.place(child, x + cross_pos, y + main_pos, cross, main))
            cursor = main_pos + main + main_margin_end + style.gap + between
        return placed


def _shrink(
    mains: list[float], floors: list[float], shrinkable: list[bool], overflow: float,
) -> list[float]:
    """Take `overflow` from shrinkable sizes in proportion, clamping each at its floor."""
    mains = list(mains)
    active = [i for i, s in enumerate(shrinkable) if s and mains[i] > floors[i]]
    while overflow > 1e-9 and active:
        total = sum(mains[i] for i in active)
        if total <= 0:
            break
        clamped = [i for i in active if mains[i] - overflow * mains[i] / total < floors[i]]
        if not clamped:
            for i in active:
                mains[i] -= overflow * mains[i] / total
            break
        for i in clamped:
            overflow -= mains[i] - floors[i]
            mains[i] = floors[i]
        active = [i for i in active if i not in clamped]
    return mains
