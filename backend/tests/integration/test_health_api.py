"""
Integration Tests for health probes and pagination metadata
"""
from httpx import AsyncClient

from edupro.utils.pagination import pagination_meta


class TestHealth:

    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_readiness_without_redis(self, client: AsyncClient):
        response = await client.get("/health/ready")

        assert response.status_code == 200
        checks = response.json()["checks"]
        assert checks["database"]["status"] == "healthy"
        assert checks["rate_limit_store"] == "memory"

    async def test_root(self, client: AsyncClient):
        response = await client.get("/")
        assert response.json()["health"] == "/health/live"


class TestPaginationMeta:

    def test_partial_last_page(self):
        assert pagination_meta(25, 2, 10) == {"currentPage": 2, "totalPages": 3, "totalItems": 25}

    def test_empty(self):
        assert pagination_meta(0, 1, 10)["totalPages"] == 1
