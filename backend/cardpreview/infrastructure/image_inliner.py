"""Remote Image Inliner — fetches a profile photo and embeds it as base64.

Invariants:
    - inline(None) / inline("") returns None without any IO
    - Any failure (non-2xx, timeout, transport error, bad URL, oversized body)
      returns None — never raises past this component
    - timeout_seconds bounds the whole fetch (connect, headers and body), not
      each socket operation
    - The body is streamed; reading stops as soon as it passes max_bytes
    - Results are never cached: photo URLs change and staleness must not leak

Design Decisions:
    - Blanket degrade-to-initials: timeouts, 4xx, 5xx and malformed responses are
      all treated the same; a broken photo must only cost the photo
    - Content type taken from the response header (parameters stripped),
      defaulting to image/png
"""

import asyncio
import base64
import logging

import httpx

from cardpreview.core.assets import InlinedImage
from cardpreview.core.card_text import clean

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TYPE = "image/png"


class ImageInliner:
    """Best-effort photo fetcher bound to a shared httpx client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        timeout_seconds: float = 5.0,
        max_bytes: int = 5 * 1024 * 1024,
    ):
        self.client = client
        self.timeout_seconds = timeout_seconds
        self.max_bytes = max_bytes

    async def inline(self, url: str | None) -> InlinedImage | None:
        url = clean(url)
        if url is None:
            return None
        try:
            async with asyncio.timeout(self.timeout_seconds):
                fetched = await self._fetch(url)
        except Exception as e:
            logger.warning(
                f"Photo fetch failed: {type(e).__name__}: {e}",
                extra={"url": url},
            )
            return None
        if fetched is None:
            return None
        body, content_type = fetched
        return InlinedImage(
            content_type=_content_type(content_type),
            data=base64.b64encode(body).decode("ascii"),
        )

    async def _fetch(self, url: str) -> tuple[bytes, str | None] | None:
        async with self.client.stream("GET", url, timeout=self.timeout_seconds) as response:
            if not response.is_success:
                logger.warning(
                    f"Photo fetch returned HTTP {response.status_code}",
                    extra={"url": url},
                )
                return None
            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > self.max_bytes:
                logger.warning(
                    f"Photo body rejected ({declared} bytes declared)",
                    extra={"url": url},
                )
                return None
            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > self.max_bytes:
                    logger.warning(
                        f"Photo body rejected (over {self.max_bytes} bytes)",
                        extra={"url": url},
                    )
                    return None
            if not body:
                logger.warning("Photo body rejected (empty)", extra={"url": url})
                return None
            return bytes(body), response.headers.get("content-type")


def _content_type(header: str | None) -> str:
    if not header:
        return DEFAULT_IMAGE_TYPE
    return header.split(";", 1)[0].strip().lower() or DEFAULT_IMAGE_TYPE
