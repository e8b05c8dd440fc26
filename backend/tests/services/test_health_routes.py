"""Health Routes — liveness and readiness checks."""

import cardpreview.infrastructure.database as db_module


async def test_liveness(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_readiness_reports_cached_fonts(client, font_cache):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["fonts_cached"] == []

    await font_cache.load_fonts()
    resp = await client.get("/api/v1/health/ready")
    assert resp.json()["checks"] == {
        "database": "healthy",
        "fonts_cached": ["Inter:400", "Inter:700"],
    }


async def test_readiness_503_when_database_down(client, monkeypatch):
    async def _down():
        return False

    monkeypatch.setattr(db_module.db_manager, "health_check", _down)
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503
    assert resp.json()["reason"] == "database_unavailable"
