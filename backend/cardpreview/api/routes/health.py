"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /api/v1/health/ always returns 200 if process is up (liveness)
    - GET /api/v1/health/ready returns 503 if the card store is unreachable (readiness)
    - Readiness also reports which fonts are already cached (informational only)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
    - Fonts never gate readiness: they load lazily on the first render
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

import cardpreview.infrastructure.database as db_module
from cardpreview.api.dependencies import get_font_cache
from cardpreview.infrastructure.font_cache import FontCache

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness check. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "card-preview-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(fonts: FontCache = Depends(get_font_cache)):
    """Readiness check — includes card store connectivity."""
    manager = db_module.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    cached = [
        f"{family}:{weight}" for family, weight in fonts.sources
        if fonts.cached(family, weight) is not None
    ]
    return {
        "status": "ready",
        "checks": {"database": "healthy", "fonts_cached": cached},
    }
