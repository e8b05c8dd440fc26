"""Route Dependencies — wires process-wide singletons into per-request services.

Invariants:
    - FontCache and ImageInliner are process-wide (app.state), created in lifespan
    - CardResolver/PreviewRenderer are per-request and bound to one DB session

Design Decisions:
    - FastAPI Depends over globals in routes: tests swap any layer via
      app.dependency_overrides
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cardpreview.config import Settings, get_settings
from cardpreview.infrastructure.database import get_db
from cardpreview.infrastructure.font_cache import FontCache
from cardpreview.infrastructure.image_inliner import ImageInliner
from cardpreview.services.card_resolver import CardResolver
from cardpreview.services.card_store import SqlCardStore
from cardpreview.services.preview_renderer import PreviewRenderer


def get_font_cache(request: Request) -> FontCache:
    return request.app.state.font_cache


def get_image_inliner(request: Request) -> ImageInliner:
    return request.app.state.image_inliner


def get_preview_renderer(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    fonts: FontCache = Depends(get_font_cache),
    inliner: ImageInliner = Depends(get_image_inliner),
) -> PreviewRenderer:
    store = SqlCardStore(db, active_status=settings.card_active_status)
    return PreviewRenderer(
        resolver=CardResolver(store, civic_prefix=settings.civic_layout_prefix),
        inliner=inliner,
        fonts=fonts,
        cache_control=settings.preview_cache_control,
    )
