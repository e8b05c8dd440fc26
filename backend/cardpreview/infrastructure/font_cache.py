"""Font Asset Cache — process-wide, lazily populated font bytes for text shaping.

Invariants:
    - Sources are a fixed, compiled-in map of (family, weight) → URL
    - Each (family, weight) is fetched at most once per process after a success;
      never evicted, never refetched — identical inputs yield the identical object
    - A failed first fetch is NOT cached: the next request retries
    - Unknown (family, weight) pairs fail without IO
    - Each fetch is bounded by a total deadline, not only per-operation timeouts
    - Per-key asyncio.Lock guards first population only; readers of a populated
      entry never wait

Design Decisions:
    - One-time-init cell per key over a global lock: the two fonts populate
      independently and a slow font host cannot block an already-cached face
    - Font bytes are immutable and shared across all concurrent requests
"""

import asyncio
import logging

import httpx

from cardpreview.config import Settings
from cardpreview.core.assets import FontAsset, FontSet
from cardpreview.core.domain_types import FontWeight
from cardpreview.core.errors import FontUnavailableError

logger = logging.getLogger(__name__)

FontKey = tuple[str, int]


def font_sources(settings: Settings) -> dict[FontKey, str]:
    """The compiled-in font list: one typeface, regular and bold."""
    return {
        (settings.font_family, FontWeight.REGULAR.value): settings.font_regular_url,
        (settings.font_family, FontWeight.BOLD.value): settings.font_bold_url,
    }


class FontCache:
    """Populate-once, read-many cache of FontAsset objects."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        sources: dict[FontKey, str],
        timeout_seconds: float = 10.0,
    ):
        self.client = client
        self.sources = dict(sources)
        self.timeout_seconds = timeout_seconds
        self._assets: dict[FontKey, FontAsset] = {}
        self._locks: dict[FontKey, asyncio.Lock] = {
            key: asyncio.Lock() for key in self.sources
        }

    @property
    def family(self) -> str:
        return next(iter(self.sources))[0]

    def cached(self, family: str, weight: int) -> FontAsset | None:
        return self._assets.get((family, weight))

    async def get_or_load(self, family: str, weight: int) -> FontAsset:
        key = (family, int(weight))
        asset = self._assets.get(key)
        if asset is not None:
            return asset
        if key not in self.sources:
            raise FontUnavailableError(family, weight)
        async with self._locks[key]:
            asset = self._assets.get(key)
            if asset is None:
                asset = FontAsset(family, key[1], await self._fetch(key))
                self._assets[key] = asset
                logger.info(f"Font cached: {family} {weight} ({len(asset.data)} bytes)")
        return asset

    async def load_fonts(self) -> FontSet:
        """Regular + bold faces of the configured family."""
        family = self.family
        try:
            async with asyncio.TaskGroup() as group:
                regular = group.create_task(
                    self.get_or_load(family, FontWeight.REGULAR.value),
                )
                bold = group.create_task(
                    self.get_or_load(family, FontWeight.BOLD.value),
                )
        except ExceptionGroup as failed:
            raise failed.exceptions[0]
        return FontSet(regular=regular.result(), bold=bold.result())

    async def _fetch(self, key: FontKey) -> bytes:
        url = self.sources[key]
        try:
            async with asyncio.timeout(self.timeout_seconds):
                response = await self.client.get(url, timeout=self.timeout_seconds)
                response.raise_for_status()
        except (httpx.HTTPError, TimeoutError) as e:
            logger.error(
                f"Font fetch failed for {key[0]} {key[1]}: {e}",
                extra={"url": url},
            )
            raise FontUnavailableError(*key) from e
        if not response.content:
            raise FontUnavailableError(*key)
        return response.content
