"""TTL cache for full validation results.

Keyed by (address, chain_id, fingerprint); the fingerprint covers the
validation config and the supplied metadata. Last write wins, entries are
independent, so no cross-key locking is needed.

Cache errors never fail a validation: a broken backend behaves as a miss.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from loguru import logger
from pydantic import ValidationError

from src.security.models import TokenSecurityValidation

if TYPE_CHECKING:
    from redis.asyncio import Redis

KEY_PREFIX = "tokensec"


def make_cache_key(address: str, chain_id: int, fingerprint: str) -> str:
    return f"{KEY_PREFIX}:{chain_id}:{address.lower()}:{fingerprint}"


class ValidationCache(Protocol):
    async def get(self, key: str) -> TokenSecurityValidation | None:
        ...

    async def set(self, key: str, value: TokenSecurityValidation) -> None:
        ...


class MemoryValidationCache:
    """In-process cache with monotonic-clock expiry and a soft size bound."""

    def __init__(
        self,
        ttl_sec: float = 300.0,
        *,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_sec
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, TokenSecurityValidation]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> TokenSecurityValidation | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: TokenSecurityValidation) -> None:
        if len(self._entries) >= self._max_entries and key not in self._entries:
            self._evict_expired()
            if len(self._entries) >= self._max_entries:
                # Drop the oldest insertion
                self._entries.pop(next(iter(self._entries)))
        self._entries[key] = (self._clock() + self._ttl, value)

    def clear(self) -> None:
        self._entries.clear()

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (exp, _) in self._entries.items() if now >= exp]
        for k in expired:
            del self._entries[k]


class RedisValidationCache:
    """Redis-backed cache storing results as JSON with ``SET ... EX ttl``."""

    def __init__(self, redis: Redis, ttl_sec: int = 300) -> None:
        self._redis = redis
        self._ttl = ttl_sec

    async def get(self, key: str) -> TokenSecurityValidation | None:
        try:
            raw = await self._redis.get(key)
        except Exception as e:
            logger.debug(f"[CACHE] Redis get failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return TokenSecurityValidation.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"[CACHE] Dropping unreadable entry {key}: {e.error_count()} errors")
            return None

    async def set(self, key: str, value: TokenSecurityValidation) -> None:
        try:
            await self._redis.set(key, value.model_dump_json(), ex=self._ttl)
        except Exception as e:
            logger.debug(f"[CACHE] Redis set failed for {key}: {e}")


async def create_validation_cache() -> ValidationCache:
    """Build the cache backend selected in settings."""
    from config.settings import settings

    if settings.cache_backend == "redis":
        from src.db.redis import get_redis

        redis = await get_redis()
        logger.info(f"[CACHE] Using Redis cache (ttl={settings.cache_ttl_sec}s)")
        return RedisValidationCache(redis, ttl_sec=settings.cache_ttl_sec)

    logger.info(f"[CACHE] Using in-memory cache (ttl={settings.cache_ttl_sec}s)")
    return MemoryValidationCache(ttl_sec=settings.cache_ttl_sec)
