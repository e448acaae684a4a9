"""GoPlus Security API client for EVM token contract analysis.

Implements BatchContractAnalysisProvider for the full validator. The
``token_security/{chain_id}`` endpoint accepts several comma-separated
contract addresses per call; ``analyze_contracts`` uses that so a batch
validation spends one request per chain instead of one per token.
"""

import asyncio
from collections.abc import Iterable

import httpx
from loguru import logger

from src.parsers.goplus.models import GoPlusReport
from src.parsers.rate_limiter import RateLimiter
from src.security.models import ContractSecurity

BASE_URL = "https://api.gopluslabs.io/api/v1/token_security"
MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]
MAX_ADDRESSES_PER_CALL = 20


class GoPlusClient:
    """Async HTTP client for GoPlus Security API (free tier, no key)."""

    def __init__(
        self,
        max_rps: float = 0.5,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def analyze_contract(self, address: str, chain_id: int) -> ContractSecurity | None:
        report = await self.get_token_security(address, chain_id)
        return report.to_contract_security() if report else None

    async def analyze_contracts(
        self, addresses: Iterable[str], chain_id: int,
    ) -> dict[str, ContractSecurity]:
        reports = await self.get_token_securities(addresses, chain_id)
        return {addr: report.to_contract_security() for addr, report in reports.items()}

    async def get_token_security(self, address: str, chain_id: int) -> GoPlusReport | None:
        """Security report for one token, None if GoPlus has no data."""
        reports = await self.get_token_securities([address], chain_id)
        return reports.get(address.lower())

    async def get_token_securities(
        self, addresses: Iterable[str], chain_id: int,
    ) -> dict[str, GoPlusReport]:
        """Reports keyed by lowercase address. Tokens GoPlus doesn't know are absent."""
        wanted = list(dict.fromkeys(a.lower() for a in addresses))
        reports: dict[str, GoPlusReport] = {}

        for i in range(0, len(wanted), MAX_ADDRESSES_PER_CALL):
            chunk = wanted[i:i + MAX_ADDRESSES_PER_CALL]
            data = await self._get_json(
                f"{BASE_URL}/{chain_id}",
                {"contract_addresses": ",".join(chunk)},
                label=chunk[0][:12] if len(chunk) == 1 else f"{len(chunk)} tokens",
            )
            if data is None:
                continue
            for addr in chunk:
                report = _parse_report(data, addr)
                if report is not None:
                    reports[addr] = report

        return reports

    async def _get_json(self, url: str, params: dict, *, label: str) -> dict | None:
        """GET with rate limiting; retries 429s and transport timeouts."""
        attempt = 0
        while attempt <= MAX_RETRIES:
            delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
            attempt += 1
            await self._rate_limiter.acquire()
            try:
                resp = await self._client.get(url, params=params)
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                if attempt > MAX_RETRIES:
                    logger.warning(f"[GOPLUS] Giving up on {label} after {attempt} attempts: {e}")
                    return None
                logger.debug(f"[GOPLUS] {type(e).__name__} for {label}, retry in {delay}s")
                await asyncio.sleep(delay)
                continue

            if resp.status_code == 429:
                logger.debug(f"[GOPLUS] Rate limited on {label}, waiting {delay}s")
                await asyncio.sleep(delay)
                continue
            if resp.status_code != 200:
                logger.debug(f"[GOPLUS] HTTP {resp.status_code} for {label}")
                return None
            try:
                return resp.json()
            except ValueError:
                logger.debug(f"[GOPLUS] Non-JSON body for {label}")
                return None

        return None


def _parse_bool(val: str | None) -> bool | None:
    """GoPlus flags are "0"/"1" strings; empty means unknown."""
    if val is None or val == "":
        return None
    return val == "1"


def _parse_tax(val: str | None) -> float | None:
    """GoPlus tax fraction (0.0-1.0) as a percentage."""
    if val in (None, ""):
        return None
    try:
        return float(val) * 100
    except (ValueError, TypeError):
        return None


def _parse_int(val: str | int | None) -> int | None:
    if val in (None, ""):
        return None
    try:
        return int(val)
    except (ValueError, TypeError):
        return None


def _parse_report(data: dict, address: str) -> GoPlusReport | None:
    """Extract one token from a GoPlus response. ``code != 1`` means the lookup failed."""
    if data.get("code") not in (1, None):
        logger.debug(f"[GOPLUS] API code {data.get('code')}: {data.get('message')}")
        return None

    # Result is keyed by lowercase contract address
    fields = (data.get("result") or {}).get(address.lower())
    if not fields:
        return None

    flag = lambda name: _parse_bool(fields.get(name))  # noqa: E731
    return GoPlusReport(
        is_open_source=flag("is_open_source"),
        is_proxy=flag("is_proxy"),
        is_mintable=flag("is_mintable"),
        owner_can_change_balance=flag("owner_change_balance"),
        hidden_owner=flag("hidden_owner"),
        can_take_back_ownership=flag("can_take_back_ownership"),
        is_honeypot=flag("is_honeypot"),
        honeypot_with_same_creator=flag("honeypot_with_same_creator"),
        buy_tax=_parse_tax(fields.get("buy_tax")),
        sell_tax=_parse_tax(fields.get("sell_tax")),
        cannot_sell_all=flag("cannot_sell_all"),
        transfer_pausable=flag("transfer_pausable"),
        trading_cooldown=flag("trading_cooldown"),
        is_blacklisted=flag("is_blacklisted"),
        slippage_modifiable=flag("slippage_modifiable"),
        is_airdrop_scam=flag("is_airdrop_scam"),
        holder_count=_parse_int(fields.get("holder_count")),
    )
