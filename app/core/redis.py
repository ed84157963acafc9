"""
Redis connection management and request rate limiting
"""

import redis.asyncio as redis
from typing import Optional
import logging
import uuid

from app.config import settings

logger = logging.getLogger(__name__)

# Global Redis client
redis_client: Optional[redis.Redis] = None

# Sliding window: drop entries older than the window, admit if under the limit
RATE_LIMIT_SCRIPT = """
local rate_key = KEYS[1]
local limit = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local timestamp = tonumber(ARGV[3])
local unique_id = ARGV[4]

local window_start = timestamp - (window * 1000)

redis.call("zremrangebyscore", rate_key, 0, window_start)

local current_count = redis.call("zcard", rate_key)

if current_count < limit then
    redis.call("zadd", rate_key, timestamp, unique_id)
    redis.call("expire", rate_key, window + 1)
    return {0, current_count + 1}
else
    return {1, current_count}
end
"""


async def init_redis():
    """
    Initialize Redis connection
    """
    global redis_client
    try:
        redis_client = redis.from_url(
            settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            decode_responses=True
        )
        await redis_client.ping()
        logger.info("Redis connection established")
    except Exception as e:
        logger.error(f"Failed to connect to Redis: {e}")
        raise


async def close_redis():
    """
    Close Redis connection
    """
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
        logger.info("Redis connection closed")


async def get_redis() -> redis.Redis:
    """
    Get Redis client
    """
    if not redis_client:
        await init_redis()
    return redis_client


class RedisManager:
    """
    Thin wrapper over the shared client for rate limiting
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def get_client(self) -> redis.Redis:
        return await get_redis()

    async def is_rate_limited(
        self,
        key: str,
        limit: int,
        window: int = 60
    ) -> tuple[bool, int]:
        """
        Check if rate limit is exceeded using atomic Lua script

        Args:
            key: Rate limit key (e.g., "reservations:203.0.113.9")
            limit: Maximum number of requests
            window: Time window in seconds

        Returns:
            Tuple of (is_limited, current_count)
        """
        rate_key = f"rate:{key}"

        try:
            client = await self.get_client()
            now = await client.time()
            timestamp = now[0] * 1000 + now[1] // 1000
            result = await client.eval(
                RATE_LIMIT_SCRIPT,
                1,
                rate_key,
                limit,
                window,
                timestamp,
                str(uuid.uuid4())
            )
            return bool(result[0]), int(result[1])
        except Exception as e:
            self.logger.warning(f"Error checking rate limit for {key}: {e}")
            return False, 0  # Fail open for rate limiting


# Create global Redis manager
redis_manager = RedisManager()
