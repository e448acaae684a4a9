"""Shared Redis connection for the validation cache."""

from loguru import logger
from redis.asyncio import Redis

from config.settings import settings

_redis_client: Redis | None = None


async def get_redis() -> Redis:
    """Lazily create the process-wide client (string responses)."""
    global _redis_client
    if _redis_client is None:
        _redis_client = Redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


async def ping_redis() -> bool:
    """True when a client exists and answers PING."""
    if _redis_client is None:
        return False
    try:
        return bool(await _redis_client.ping())
    except Exception as e:
        logger.debug(f"[REDIS] Ping failed: {e}")
        return False


async def close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
