"""Render Assets — immutable value types that flow through the render pipeline.

Invariants:
    - FontAsset holds raw font bytes only; shaping faces are opened per render pass
      and never shared across requests (FreeType faces are not thread-safe)
    - InlinedImage is transient: created per request, never cached
    - RenderedDocument and OutputBitmap are always 1200×630

Design Decisions:
    - Frozen dataclasses: safe to share FontAsset across concurrent requests
"""

from dataclasses import dataclass
from io import BytesIO

from PIL import ImageFont

from cardpreview.core.domain_types import CANVAS_HEIGHT, CANVAS_WIDTH

PNG_CONTENT_TYPE = "image/png"


@dataclass(frozen=True)
class FontAsset:
    """A named font face bound to a weight."""
    family: str
    weight: int
    data: bytes

    def open_face(self, size: float) -> ImageFont.FreeTypeFont:
        """Open a fresh FreeType face at the given pixel size."""
        return ImageFont.truetype(BytesIO(self.data), size=max(1, round(size)))


@dataclass(frozen=True)
class FontSet:
    regular: FontAsset
    bold: FontAsset

    def for_weight(self, weight: int) -> FontAsset:
        """Nearest available weight; ties go to the heavier face."""
        if abs(weight - self.bold.weight) <= abs(weight - self.regular.weight):
            return self.bold
        return self.regular


@dataclass(frozen=True)
class InlinedImage:
    """A fetched photo embedded as base64."""
    content_type: str
    data: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.content_type};base64,{self.data}"


@dataclass(frozen=True)
class RenderedDocument:
    svg: str
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT


@dataclass(frozen=True)
class OutputBitmap:
    """The only artifact returned across the service boundary."""
    data: bytes
    cache_control: str
    width: int = CANVAS_WIDTH
    height: int = CANVAS_HEIGHT
    content_type: str = PNG_CONTENT_TYPE
