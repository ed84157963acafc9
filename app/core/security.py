"""
Admin access guard and request rate limiting
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.core.exceptions import AuthenticationError, AuthorizationError, RateLimitError
from app.core.redis import redis_manager
from app.core.metrics import metrics_collector

logger = logging.getLogger(__name__)

# auto_error=False so a missing header surfaces as our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


def verify_admin_token(token: str) -> bool:
    """
    Constant-time comparison against the configured admin token
    """
    return secrets.compare_digest(token.encode(), settings.ADMIN_API_TOKEN.encode())


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """
    Require the admin bearer token for endpoint
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Admin token required")

    if not verify_admin_token(credentials.credentials):
        logger.warning("Rejected admin request with invalid token")
        raise AuthorizationError("Invalid admin token")

    return "admin"


class RateLimiter:
    """
    Rate limiter for API endpoints, keyed by client address
    """

    def __init__(self, scope: str, max_requests: int, window: int = 60):
        self.scope = scope
        self.max_requests = max_requests
        self.window = window

    async def __call__(self, request: Request):
        if not settings.RATE_LIMIT_ENABLED:
            return

        client_host = request.client.host if request.client else "anonymous"
        key = f"{self.scope}:{client_host}"
        is_limited, count = await redis_manager.is_rate_limited(
            key, self.max_requests, self.window
        )

        if is_limited:
            await metrics_collector.record_rate_limit_hit()
            logger.info(f"Rate limit hit for {key} ({count}/{self.max_requests})")
            raise RateLimitError(self.max_requests, self.window)


reservation_rate_limiter = RateLimiter(
    "reservations", settings.RATE_LIMIT_RESERVATIONS_PER_MINUTE
)
scan_rate_limiter = RateLimiter(
    "ticket-scans", settings.RATE_LIMIT_SCANS_PER_MINUTE
)
