"""Tests for health check endpoint and request-scope middleware."""

from httpx import AsyncClient


async def test_health_returns_200(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_correlation_id_is_generated(client: AsyncClient) -> None:
    """Every response carries a correlation id."""
    response = await client.get("/api/v1/health")
    assert response.headers.get("X-Correlation-ID")


async def test_correlation_id_is_forwarded(client: AsyncClient) -> None:
    """A client-supplied correlation id is echoed back unchanged."""
    response = await client.get("/api/v1/health", headers={"X-Correlation-ID": "req-123"})
    assert response.headers["X-Correlation-ID"] == "req-123"
