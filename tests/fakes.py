"""Fake providers and fixture addresses for validator tests."""

import asyncio

from src.security.models import ContractSecurity, ExternalSignal

TETHER = "0xdac17f958d2ee523a2206206994597c13d831ec7"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
UNKNOWN = "0x1234567890123456789012345678901234567890"
BLACKLISTED = "0x000000000000000000000000000000000000dead"
RISKY = "0x00000000000000000000000000000000000000bb"
BLACKLISTED_AND_VERIFIED = "0x00000000000000000000000000000000000000cc"


class FakeContractProvider:
    """Returns a fixed ContractSecurity and records calls."""

    def __init__(self, result: ContractSecurity | None = None) -> None:
        self.result = result
        self.calls: list[tuple[str, int]] = []

    async def analyze_contract(self, address: str, chain_id: int) -> ContractSecurity | None:
        self.calls.append((address, chain_id))
        return self.result


class FakeExternalProvider:
    def __init__(self, result: ExternalSignal | None = None) -> None:
        self.result = result
        self.calls: list[tuple[str, int]] = []

    async def lookup(self, address: str, chain_id: int) -> ExternalSignal | None:
        self.calls.append((address, chain_id))
        return self.result


class SlowContractProvider:
    """Answers far later than any test deadline."""

    def __init__(self, delay: float = 5.0) -> None:
        self.delay = delay
        self.cancelled = False

    async def analyze_contract(self, address: str, chain_id: int) -> ContractSecurity | None:
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return ContractSecurity(is_honeypot=True)


class FailingContractProvider:
    async def analyze_contract(self, address: str, chain_id: int) -> ContractSecurity | None:
        raise RuntimeError("analysis backend exploded")


class FailingExternalProvider:
    async def lookup(self, address: str, chain_id: int) -> ExternalSignal | None:
        raise ConnectionError("registry unreachable")


class FakeBatchContractProvider(FakeContractProvider):
    """Answers batch lookups from a per-address table."""

    def __init__(self, results: dict[str, ContractSecurity]) -> None:
        super().__init__()
        self.results = results
        self.batch_calls: list[tuple[list[str], int]] = []

    async def analyze_contracts(self, addresses, chain_id: int) -> dict[str, ContractSecurity]:
        self.batch_calls.append((list(addresses), chain_id))
        return {a: self.results[a] for a in addresses if a in self.results}


class FailingBatchContractProvider(FakeContractProvider):
    async def analyze_contracts(self, addresses, chain_id: int) -> dict[str, ContractSecurity]:
        raise ConnectionError("batch endpoint down")
