import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/auth/session"])
async def test_security_headers_on_every_response(client: AsyncClient, path):
    response = await client.get(path)

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"
    assert response.headers["permissions-policy"] == "camera=(), microphone=(), geolocation=()"
    assert response.headers["strict-transport-security"] == "max-age=31536000; includeSubDomains"
    csp = response.headers["content-security-policy"]
    assert "default-src 'self'" in csp
    assert "https://cdn.plaid.com" in csp
    assert "frame-ancestors 'none'" in csp
