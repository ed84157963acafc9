"""
Unit tests for the admin guard, rate limiting and metrics
"""

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from app.config import settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    RateLimitError,
)
from app.core.metrics import metrics_collector
from app.core.redis import redis_manager
from app.core.security import RateLimiter, require_admin, verify_admin_token


def make_request(host="203.0.113.9"):
    return Request({"type": "http", "method": "POST", "path": "/", "headers": [], "client": (host, 1234)})


@pytest.mark.unit
@pytest.mark.asyncio
class TestAdminGuard:
    """Test admin token checks"""

    async def test_verify_token(self):
        assert verify_admin_token(settings.ADMIN_API_TOKEN) is True
        assert verify_admin_token("nope") is False

    async def test_missing_credentials(self):
        with pytest.raises(AuthenticationError):
            await require_admin(None)

    async def test_wrong_token(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="x" * 40)
        with pytest.raises(AuthorizationError):
            await require_admin(credentials)

    async def test_valid_token(self):
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=settings.ADMIN_API_TOKEN)
        assert await require_admin(credentials) == "admin"


@pytest.mark.unit
@pytest.mark.asyncio
class TestRateLimiter:
    """Test rate limiter dependency"""

    async def test_disabled_limiter_never_calls_redis(self, monkeypatch):
        async def fail(*args, **kwargs):
            raise AssertionError("redis should not be called")

        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)
        monkeypatch.setattr(redis_manager, "is_rate_limited", fail)

        await RateLimiter("test", 1)(make_request())

    async def test_limit_exceeded(self, monkeypatch):
        calls = []

        async def limited(key, limit, window):
            calls.append(key)
            return True, limit + 1

        monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
        monkeypatch.setattr(redis_manager, "is_rate_limited", limited)

        with pytest.raises(RateLimitError) as exc_info:
            await RateLimiter("reservations", 5)(make_request())

        assert calls == ["reservations:203.0.113.9"]
        assert exc_info.value.status_code == 429
        metrics = await metrics_collector.get_metrics()
        assert metrics["rate_limiting"]["rate_limited_requests"] == 1

    async def test_redis_failure_fails_open(self, monkeypatch):
        async def broken_client():
            raise ConnectionError("redis down")

        monkeypatch.setattr(redis_manager, "get_client", broken_client)

        assert await redis_manager.is_rate_limited("k", 1, 60) == (False, 0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestMetricsCollector:
    """Test in-process metrics"""

    async def test_track_reservation(self):
        async with metrics_collector.track_reservation():
            pass

        with pytest.raises(ConflictError):
            async with metrics_collector.track_reservation():
                raise ConflictError(1, "day1")

        metrics = await metrics_collector.get_metrics()
        assert metrics["reservation_attempts"] == 2
        assert metrics["reservations_created"] == 1
        assert metrics["seat_conflicts"] == 1
        assert metrics["concurrency"]["current_concurrent_reservations"] == 0
        assert metrics["success_rate_percent"] == 50.0
