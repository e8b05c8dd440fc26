"""Root conftest — shared test configuration and font fixtures."""

import os

import pytest

# Ensure tests never reach a real card store
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture(scope="session")
def requires_cairo():
    """Skip when CairoSVG or the native cairo library is missing."""
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        pytest.skip("native cairo library not installed")


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    """TrueType bytes of Pillow's bundled default face (stands in for Inter)."""
    from PIL import ImageFont

    face = ImageFont.load_default(size=12)
    data = getattr(face, "font_bytes", None)
    if not data:
        pytest.skip("Pillow built without FreeType support")
    return data


@pytest.fixture
def font_set(font_bytes):
    from cardpreview.core.assets import FontAsset, FontSet

    return FontSet(
        regular=FontAsset("Inter", 400, font_bytes),
        bold=FontAsset("Inter", 700, font_bytes),
    )
