"""HTTP Client Builder — one shared httpx.AsyncClient for font and photo fetches.

Invariants:
    - Every request made through the client is bounded by a timeout
    - Redirects are followed (photo CDNs and font hosts redirect routinely)
    - No retries: each render is single-shot; crawlers retry at their own cadence

Design Decisions:
    - Builder function over module-level client: the lifespan owns open/close and
      tests inject an httpx.MockTransport
"""

import httpx

from cardpreview.config import Settings


def build_async_client(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient with the service's defaults."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.photo_fetch_timeout_seconds),
        follow_redirects=True,
        headers={
            "User-Agent": settings.http_user_agent,
            "Accept": "image/*,font/*,*/*;q=0.8",
        },
        transport=transport,
    )
