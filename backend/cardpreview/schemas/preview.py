"""Preview Schemas — Pydantic models documenting the preview API's JSON shapes.

Invariants:
    - ErrorEnvelope mirrors CardPreviewError.to_response()
    - LayoutResponse.layout is LayoutNode.to_dict() (image bytes summarized)

Design Decisions:
    - Schemas describe responses only: the sole input is a path parameter
"""

from typing import Any, Literal

from pydantic import BaseModel


class ErrorBody(BaseModel):
    code: Literal["BAD_REQUEST", "NOT_FOUND", "RENDER_FAILURE"]
    message: str
    category: str
    severity: str
    timestamp: str | None = None


class ErrorEnvelope(BaseModel):
    """Error response — never cached by intermediaries."""
    error: ErrorBody


class LayoutResponse(BaseModel):
    """Pre-raster layout tree of a card preview."""
    identifier: str
    layout: dict[str, Any]
