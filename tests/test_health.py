"""Smoke tests for health and app wiring."""

from httpx import ASGITransport, AsyncClient

from compliancehub.main import create_app


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok when the store is ready."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["store_backend"] == "memory"
    assert data["store_ready"] is True


async def test_missing_store_degrades_health_and_returns_503() -> None:
    """Without a record store, /health says degraded and store-backed routes answer 503."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        health = await ac.get("/api/v1/health")
        resolved = await ac.get("/api/v1/subjects/U1/effective-access")
    assert health.json()["status"] == "degraded"
    assert resolved.status_code == 503
    assert resolved.json()["error"] == "SERVICE_UNAVAILABLE"
