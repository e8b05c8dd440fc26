"""Preview Image — GET /api/og/{identifier} returns the 1200×630 social-preview PNG.

Invariants:
    - Success: image/png body, Content-Length, one-hour fresh cache with a
      24-hour stale-while-revalidate window
    - Errors go through the global handlers: JSON envelope, no Cache-Control
    - Routes never contain business logic (delegate to PreviewRenderer)

Design Decisions:
    - Missing identifier (GET /api/og/) is a BAD_REQUEST, not a routing 404
    - /layout variant returns the pre-raster layout tree as JSON for debugging
      template changes without decoding PNGs
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from cardpreview.api.dependencies import get_preview_renderer
from cardpreview.core.errors import InvalidIdentifierError
from cardpreview.schemas.preview import ErrorEnvelope, LayoutResponse
from cardpreview.services.preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/og",
    tags=["preview"],
    responses={
        400: {"model": ErrorEnvelope},
        404: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)


@router.get("/")
async def missing_identifier():
    """No identifier supplied."""
    raise InvalidIdentifierError(None)


@router.get(
    "/{identifier}",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def preview_image(
    identifier: str,
    renderer: PreviewRenderer = Depends(get_preview_renderer),
):
    """Render the card's social-preview image."""
    bitmap = await renderer.render(identifier)
    return Response(
        content=bitmap.data,
        media_type=bitmap.content_type,
        headers={
            "Cache-Control": bitmap.cache_control,
            "Content-Length": str(len(bitmap.data)),
        },
    )


@router.get("/{identifier}/layout", response_model=LayoutResponse)
async def preview_layout(
    identifier: str,
    renderer: PreviewRenderer = Depends(get_preview_renderer),
):
    """Pre-raster layout tree of the card's preview."""
    root = await renderer.render_layout(identifier)
    return {"identifier": identifier, "layout": root.to_dict()}
