"""Token list registry: listed or banned status from a standard token list.

Token lists (tokenlists.org schema) enumerate curated tokens per chain:
- Listed: strong positive signal (curated by the list maintainer)
- Tagged "banned"/"spam"/"scam": strong negative
- Not found: neutral, most long-tail tokens are not listed

The list is fetched once and re-fetched after ``refresh_sec``. Lookups are
in-memory after the first fetch.

Cost: $0 (free, no key needed).
Default source: https://tokens.uniswap.org
"""

from __future__ import annotations

import asyncio
import time

import httpx
from loguru import logger

from src.security.models import ExternalSignal

_TIMEOUT = 10.0
_BAD_TAGS = frozenset({"banned", "spam", "scam"})


class TokenListRegistry:
    """ExternalRegistryProvider backed by a token list JSON document."""

    def __init__(
        self,
        url: str = "https://tokens.uniswap.org",
        *,
        refresh_sec: float = 6 * 60 * 60,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._refresh_sec = refresh_sec
        self._client = client or httpx.AsyncClient(timeout=_TIMEOUT)
        self._lock = asyncio.Lock()
        self._source = "tokenlist"
        # (chain_id, lowercase address) → tags
        self._tokens: dict[tuple[int, str], frozenset[str]] | None = None
        self._loaded_at = 0.0

    @property
    def source(self) -> str:
        return self._source

    async def close(self) -> None:
        await self._client.aclose()

    async def lookup(self, address: str, chain_id: int) -> ExternalSignal | None:
        """Listing status for a token. None when the list itself is unavailable."""
        tokens = await self._ensure_loaded()
        if tokens is None:
            return None

        tags = tokens.get((chain_id, address.lower()))
        if tags is None:
            return ExternalSignal(source=self._source, listed=False)

        return ExternalSignal(
            source=self._source,
            listed=True,
            flagged=bool(tags & _BAD_TAGS),
        )

    async def _ensure_loaded(self) -> dict[tuple[int, str], frozenset[str]] | None:
        if self._tokens is not None and time.monotonic() - self._loaded_at < self._refresh_sec:
            return self._tokens

        async with self._lock:
            # Another waiter may have refreshed while we queued on the lock
            if self._tokens is not None and time.monotonic() - self._loaded_at < self._refresh_sec:
                return self._tokens

            fetched = await self._fetch()
            if fetched is not None:
                self._tokens = fetched
                self._loaded_at = time.monotonic()
            # Serve a stale list rather than nothing when a refresh fails
            return self._tokens

    async def _fetch(self) -> dict[tuple[int, str], frozenset[str]] | None:
        try:
            resp = await self._client.get(self._url, headers={"Accept": "application/json"})
            if resp.status_code == 429:
                logger.debug("[TOKENLIST] Rate limited")
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.debug(f"[TOKENLIST] HTTP {e.response.status_code} from {self._url}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"[TOKENLIST] Fetch failed from {self._url}: {e}")
            return None

        tokens = _parse_token_list(data)
        name = data.get("name") if isinstance(data, dict) else None
        if name:
            self._source = f"tokenlist:{name}"
        logger.info(f"[TOKENLIST] Loaded {len(tokens)} tokens from {self._url}")
        return tokens


def _parse_token_list(data: object) -> dict[tuple[int, str], frozenset[str]]:
    """Index a tokenlists.org document by (chainId, lowercase address)."""
    if not isinstance(data, dict):
        return {}

    tokens: dict[tuple[int, str], frozenset[str]] = {}
    for entry in data.get("tokens", []):
        try:
            key = (int(entry["chainId"]), str(entry["address"]).lower())
        except (KeyError, TypeError, ValueError):
            continue
        tokens[key] = frozenset(str(t).lower() for t in entry.get("tags", []))
    return tokens
