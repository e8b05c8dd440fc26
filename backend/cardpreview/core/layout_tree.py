"""Layout Tree — explicit, serializable box-model tree built per request.

Invariants:
    - A LayoutNode has children XOR a text run, never both
    - Leaves are text runs or decorative boxes (optionally filled with an image)
    - Nodes are frozen: the layout engine never mutates the tree it is given
    - Lengths are px numbers, "NN%" strings, or None (auto)

Design Decisions:
    - Tagged dataclass tree over a UI framework: the builder is a pure function and
      the engine is a separate walk (box vs. text leaf)
    - Every node carries a semantic name so tests and the debug endpoint can
      inspect the tree without knowing its exact shape
    - box()/text() helpers drop None children, so optional content is expressed
      as `node if value else None` and never reserves space
"""

from dataclasses import dataclass, field, fields
from typing import Iterator, Literal, Union

from cardpreview.core.assets import InlinedImage

Length = Union[int, float, str, None]
Direction = Literal["row", "column"]
Align = Literal["start", "center", "end", "stretch"]
Justify = Literal["start", "center", "end", "space-between"]


@dataclass(frozen=True)
class Edges:
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    @classmethod
    def all(cls, value: float) -> "Edges":
        return cls(value, value, value, value)

    @classmethod
    def xy(cls, vertical: float, horizontal: float) -> "Edges":
        return cls(vertical, horizontal, vertical, horizontal)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


@dataclass(frozen=True)
class Offsets:
    """Absolute-position offsets relative to the parent's border box."""
    top: float | None = None
    right: float | None = None
    bottom: float | None = None
    left: float | None = None


@dataclass(frozen=True)
class Border:
    width: float
    color: str


@dataclass(frozen=True)
class GradientStop:
    offset: float  # 0.0–1.0
    color: str


@dataclass(frozen=True)
class LinearGradient:
    """CSS-style linear gradient; angle in degrees, 180 = top to bottom."""
    angle: float
    stops: tuple[GradientStop, ...]


Background = Union[str, LinearGradient, None]


@dataclass(frozen=True)
class NodeStyle:
    width: Length = None
    height: Length = None
    flex: float = 0
    shrink: bool = True
    direction: Direction = "row"
    align: Align = "stretch"
    justify: Justify = "start"
    gap: float = 0
    padding: Edges = Edges()
    margin: Edges = Edges()
    background: Background = None
    border: Border | None = None
    border_top: Border | None = None
    radius: Length = 0
    absolute: Offsets | None = None


@dataclass(frozen=True)
class TextRun:
    content: str
    size: float
    color: str
    weight: int = 400
    italic: bool = False
    letter_spacing: float = 0
    line_height: float = 1.2
    max_lines: int | None = None


@dataclass(frozen=True)
class LayoutNode:
    name: str
    style: NodeStyle = NodeStyle()
    children: tuple["LayoutNode", ...] = ()
    text: TextRun | None = None
    image: InlinedImage | None = field(default=None, repr=False)

    def __post_init__(self):
        if self.children and self.text is not None:
            raise ValueError(f"Node '{self.name}' has both children and text")
        if self.text is not None and self.image is not None:
            raise ValueError(f"Text node '{self.name}' cannot carry an image")

    @property
    def is_text(self) -> bool:
        return self.text is not None

    def walk(self) -> Iterator["LayoutNode"]:
        """Depth-first, document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, name: str) -> list["LayoutNode"]:
        return [node for node in self.walk() if node.name == name]

    def find(self, name: str) -> "LayoutNode | None":
        return next((node for node in self.walk() if node.name == name), None)

    def texts(self) -> list[str]:
        """All text contents in document order."""
        return [node.text.content for node in self.walk() if node.text is not None]

    def to_dict(self) -> dict:
        """JSON-friendly view (image bytes summarized, not embedded)."""
        out: dict = {"name": self.name, "style": _style_dict(self.style)}
        if self.text is not None:
            out["text"] = {f.name: getattr(self.text, f.name) for f in fields(TextRun)}
        if self.image is not None:
            out["image"] = {
                "content_type": self.image.content_type,
                "base64_length": len(self.image.data),
            }
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


def _style_dict(style: NodeStyle) -> dict:
    """Non-default style fields only."""
    default = NodeStyle()
    out = {}
    for f in fields(NodeStyle):
        value = getattr(style, f.name)
        if value == getattr(default, f.name):
            continue
        out[f.name] = _plain(value)
    return out


def _plain(value):
    if isinstance(value, (Edges, Offsets, Border, GradientStop)):
        return {f.name: getattr(value, f.name) for f in fields(value)}
    if isinstance(value, LinearGradient):
        return {"angle": value.angle, "stops": [_plain(s) for s in value.stops]}
    return value


# ─── Builder helpers ─────────────────────────────────────────────

def box(
    name: str,
    *children: "LayoutNode | None",
    image: InlinedImage | None = None,
    **style,
) -> LayoutNode:
    """Box node; None children are dropped."""
    return LayoutNode(
        name=name,
        style=NodeStyle(**style),
        children=tuple(c for c in children if c is not None),
        image=image,
    )


def text(
    name: str,
    content: str,
    *,
    size: float,
    color: str,
    weight: int = 400,
    italic: bool = False,
    letter_spacing: float = 0,
    line_height: float = 1.2,
    max_lines: int | None = None,
    **style,
) -> LayoutNode:
    """Text leaf node."""
    run = TextRun(
        content=content, size=size, color=color, weight=weight,
        italic=italic, letter_spacing=letter_spacing,
        line_height=line_height, max_lines=max_lines,
    )
    return LayoutNode(name=name, style=NodeStyle(**style), text=run)
