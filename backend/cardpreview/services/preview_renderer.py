"""Preview Renderer — the request pipeline from identifier to PNG.

Invariants:
    - Identifier validated before any lookup (BAD_REQUEST, no IO)
    - Pipeline: resolve → (engagement count ∥ photo inline ∥ fonts) → build →
      layout/serialize → rasterize
    - Photo and count failures degrade silently; NotFound and RenderFailure are
      the only failures the caller sees
    - No partial image: any unexpected layout/serialize/rasterize error becomes
      RenderFailureError and nothing is returned
    - Stateless per request apart from the shared FontCache

Design Decisions:
    - CPU-bound layout and rasterization run in a worker thread (asyncio.to_thread)
      so one slow render never stalls the event loop
    - render_layout() exposes the pre-raster tree for the debug endpoint and tests
    - TaskGroup over gather for the fan-out: a font failure cancels the count query
      and photo fetch, so the request's DB session is idle before it is closed
"""

import asyncio
import logging
import re
import time

from cardpreview.core.assets import FontSet, OutputBitmap
from cardpreview.core.card_snapshot import ResolvedCard
from cardpreview.core.errors import (
    ErrorContext, InvalidIdentifierError, RenderFailureError,
)
from cardpreview.core.layout_builder import build_layout
from cardpreview.core.layout_tree import LayoutNode
from cardpreview.core.svg_serializer import layout_and_serialize
from cardpreview.infrastructure.font_cache import FontCache
from cardpreview.infrastructure.image_inliner import ImageInliner
from cardpreview.infrastructure.rasterizer import rasterize
from cardpreview.services.card_resolver import CardResolver

logger = logging.getLogger(__name__)

# Slugs and domain names: alphanumeric start, then letters, digits, dot, dash, underscore
_IDENTIFIER = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,252}$")


def validate_identifier(identifier: str | None) -> str:
    """Trimmed identifier, or InvalidIdentifierError."""
    value = (identifier or "").strip()
    if not _IDENTIFIER.match(value):
        raise InvalidIdentifierError(identifier)
    return value


class PreviewRenderer:
    """Orchestrates one preview render."""

    def __init__(
        self,
        resolver: CardResolver,
        inliner: ImageInliner,
        fonts: FontCache,
        cache_control: str,
    ):
        self.resolver = resolver
        self.inliner = inliner
        self.fonts = fonts
        self.cache_control = cache_control

    async def _prepare(self, identifier: str) -> tuple[LayoutNode, FontSet, ResolvedCard]:
        value = validate_identifier(identifier)
        snapshot = await self.resolver.resolve(value)
        try:
            async with asyncio.TaskGroup() as group:
                count = group.create_task(
                    self.resolver.engagement_count(snapshot.card_id),
                )
                photo = group.create_task(
                    self.inliner.inline(snapshot.profile_photo_url),
                )
                fonts = group.create_task(self.fonts.load_fonts())
        except ExceptionGroup as failed:
            # Siblings are already cancelled and awaited by the group
            raise failed.exceptions[0]
        resolved = ResolvedCard(snapshot=snapshot, engagement_count=count.result())
        try:
            root = build_layout(resolved, photo.result())
        except Exception as e:
            raise self._failure(e, "build", value, snapshot.card_id) from e
        return root, fonts.result(), resolved

    async def render_layout(self, identifier: str) -> LayoutNode:
        root, _, _ = await self._prepare(identifier)
        return root

    async def render(self, identifier: str) -> OutputBitmap:
        started = time.perf_counter()
        root, fonts, resolved = await self._prepare(identifier)
        card_id = resolved.snapshot.card_id
        try:
            bitmap = await asyncio.to_thread(self._draw, root, fonts)
        except RenderFailureError as e:
            e.context.identifier = identifier
            e.context.card_id = card_id
            raise
        except Exception as e:
            raise self._failure(e, "layout", identifier, card_id) from e
        logger.info(
            "Preview rendered",
            extra={
                "identifier": identifier,
                "card_id": card_id,
                "variant": resolved.snapshot.variant.value,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return bitmap

    def _draw(self, root: LayoutNode, fonts: FontSet) -> OutputBitmap:
        document = layout_and_serialize(root, fonts)
        return rasterize(document, self.cache_control)

    @staticmethod
    def _failure(
        exc: Exception, stage: str, identifier: str, card_id: str | None,
    ) -> RenderFailureError:
        logger.error(
            f"Preview {stage} failed: {exc}", exc_info=True,
            extra={"identifier": identifier, "card_id": card_id, "stage": stage},
        )
        return RenderFailureError(
            "Failed to generate preview image", stage,
            ErrorContext(identifier=identifier, card_id=card_id),
        )
