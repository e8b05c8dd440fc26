"""Service test fixtures — async DB, seeded cards, font/photo doubles, test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - db_manager patched so the readiness check uses the test DB
    - Fonts and photos are served by httpx.MockTransport: no network access

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features are not exercised here)
    - Photo URLs on photos.test succeed; anything else is unreachable
"""

import uuid
from io import BytesIO

import httpx
import pytest
from PIL import Image
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from cardpreview.api.dependencies import get_font_cache, get_image_inliner
from cardpreview.db.base import Base
from cardpreview.infrastructure.database import get_db, DatabaseSessionManager
from cardpreview.infrastructure.font_cache import FontCache
from cardpreview.infrastructure.image_inliner import ImageInliner
from cardpreview.models import CustomDomain, DigitalCard, EndorsementSignal
import cardpreview.infrastructure.database as db_module
from cardpreview.main import app

FONT_SOURCES = {
    ("Inter", 400): "https://fonts.test/inter-400.ttf",
    ("Inter", 700): "https://fonts.test/inter-700.ttf",
}
PHOTO_HOST = "photos.test"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_card(test_db):
    """Factory: insert a card (plus optional domains/endorsements) and return it."""

    async def _seed(
        slug: str,
        *,
        domains: tuple[str, ...] = (),
        endorsements: int = 0,
        **fields,
    ) -> DigitalCard:
        card = DigitalCard(id=uuid.uuid4(), slug=slug, **fields)
        test_db.add(card)
        await test_db.flush()
        for domain in domains:
            test_db.add(CustomDomain(domain=domain, card_id=card.id))
        for _ in range(endorsements):
            test_db.add(EndorsementSignal(card_id=card.id, signal_type="endorse"))
        await test_db.commit()
        return card

    return _seed


@pytest.fixture
def photo_png() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (8, 8), (200, 40, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def fetch_log() -> list[str]:
    """Every URL requested through the test HTTP client."""
    return []


@pytest.fixture
async def http_client(font_bytes, photo_png, fetch_log):
    def handler(request: httpx.Request) -> httpx.Response:
        fetch_log.append(str(request.url))
        if request.url.host == "fonts.test":
            return httpx.Response(200, content=font_bytes)
        if request.url.host == PHOTO_HOST:
            return httpx.Response(
                200, content=photo_png, headers={"content-type": "image/png"},
            )
        raise httpx.ConnectError("unreachable", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        yield client


@pytest.fixture
def font_cache(http_client) -> FontCache:
    return FontCache(http_client, FONT_SOURCES, timeout_seconds=1)


@pytest.fixture
def image_inliner(http_client) -> ImageInliner:
    return ImageInliner(http_client, timeout_seconds=1, max_bytes=1024 * 1024)


@pytest.fixture
async def client(test_engine, test_session_factory, font_cache, image_inliner):
    """FastAPI test client with DB, font and photo dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_font_cache] = lambda: font_cache
    app.dependency_overrides[get_image_inliner] = lambda: image_inliner

    # Patch db_manager for the readiness check, which uses it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
