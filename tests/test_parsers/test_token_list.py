"""Tests for the token-list registry."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.parsers.token_list import TokenListRegistry, _parse_token_list

USDT = "0xdac17f958d2ee523a2206206994597c13d831ec7"
SCAM = "0x00000000000000000000000000000000000000aa"

TOKEN_LIST = {
    "name": "Uniswap Labs Default",
    "tokens": [
        {"chainId": 1, "address": "0xdAC17F958D2ee523a2206206994597C13D831ec7", "symbol": "USDT"},
        {"chainId": 1, "address": SCAM, "symbol": "SCAM", "tags": ["Spam"]},
        {"chainId": 137, "address": "0xc2132D05D31c914a87C6611C10748AEb04B58e8F", "tags": ["stablecoin"]},
        {"chainId": "bad", "address": "0x1"},
        {"symbol": "NOADDR"},
    ],
}


def _response(status: int = 200, payload: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else TOKEN_LIST
    if status >= 400:
        resp.raise_for_status.side_effect = httpx.HTTPStatusError(
            "error", request=MagicMock(), response=resp,
        )
    return resp


def _registry(*responses, refresh_sec: float = 3600) -> tuple[TokenListRegistry, AsyncMock]:
    client = AsyncMock()
    client.get = AsyncMock(side_effect=list(responses))
    return TokenListRegistry("https://example.org/list.json", client=client, refresh_sec=refresh_sec), client


class TestParseTokenList:
    def test_index(self) -> None:
        tokens = _parse_token_list(TOKEN_LIST)
        assert (1, USDT) in tokens
        assert tokens[(1, SCAM)] == frozenset({"spam"})
        assert (137, "0xc2132d05d31c914a87c6611c10748aeb04b58e8f") in tokens
        assert len(tokens) == 3

    def test_not_a_dict(self) -> None:
        assert _parse_token_list([1, 2, 3]) == {}


class TestTokenListRegistry:
    @pytest.mark.asyncio
    async def test_listed(self) -> None:
        registry, _ = _registry(_response())
        signal = await registry.lookup(USDT, 1)

        assert signal is not None
        assert signal.listed
        assert not signal.flagged
        assert signal.source == "tokenlist:Uniswap Labs Default"

    @pytest.mark.asyncio
    async def test_flagged_by_tag(self) -> None:
        registry, _ = _registry(_response())
        signal = await registry.lookup(SCAM, 1)
        assert signal.listed
        assert signal.flagged

    @pytest.mark.asyncio
    async def test_not_listed_is_neutral(self) -> None:
        registry, _ = _registry(_response())
        signal = await registry.lookup(USDT, 137)
        assert signal is not None
        assert not signal.listed
        assert not signal.flagged

    @pytest.mark.asyncio
    async def test_fetched_once(self) -> None:
        registry, client = _registry(_response())
        await registry.lookup(USDT, 1)
        await registry.lookup(SCAM, 1)
        assert client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_unavailable_list(self) -> None:
        registry, _ = _registry(_response(503))
        assert await registry.lookup(USDT, 1) is None

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        registry, _ = _registry(httpx.ConnectError("down"))
        assert await registry.lookup(USDT, 1) is None

    @pytest.mark.asyncio
    async def test_stale_list_served_on_refresh_failure(self) -> None:
        registry, client = _registry(_response(), _response(503), refresh_sec=0)
        assert (await registry.lookup(USDT, 1)).listed

        signal = await registry.lookup(USDT, 1)
        assert client.get.await_count == 2
        assert signal is not None
        assert signal.listed
