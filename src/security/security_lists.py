"""Per-chain registries of verified, blacklisted and risky token addresses.

Stored in the canonical list format (``TOKEN_SECURITY_LISTS``) and indexed
as chain-scoped lowercase frozensets for O(1) membership tests.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType


class ListStatus(StrEnum):
    VERIFIED = "verified"
    BLACKLISTED = "blacklisted"
    RISKY = "risky"
    UNLISTED = "unlisted"


TOKEN_SECURITY_LISTS: Mapping[str, Mapping[int, tuple[str, ...]]] = MappingProxyType({
    "verified": MappingProxyType({
        1: (  # Ethereum mainnet
            "0xdac17f958d2ee523a2206206994597c13d831ec7",  # USDT
            "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",  # USDC
            "0x6b175474e89094c44da98b954eedeac495271d0f",  # DAI
            "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",  # WETH
            "0x2260fac5e5542a773aa44fbcfedf7c193bc2c599",  # WBTC
            "0x514910771af9ca656af840dff83e8264ecf986ca",  # LINK
            "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984",  # UNI
        ),
        137: (  # Polygon
            "0x2791bca1f2de4661ed88a30c99a7a9449aa84174",  # USDC.e
            "0xc2132d05d31c914a87c6611c10748aeb04b58e8f",  # USDT
            "0x7ceb23fd6bc0add59e62ac25578270cff1b9f619",  # WETH
            "0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",  # WMATIC
        ),
        42161: (  # Arbitrum
            "0xff970a61a04b1ca14834a43f5de4533ebddb5cc8",  # USDC.e
            "0xfd086bc7cd5c481dcc9c85ebe478a1c0b69fcbb9",  # USDT
            "0x82af49447d8a07e3bd95bd0d56f35241523fbab1",  # WETH
            "0xda10009cbd5d07dd0cecc66161fc93d7c9000da1",  # DAI
        ),
    }),
    "blacklisted": MappingProxyType({
        1: (),
        137: (),
        42161: (),
    }),
    "risky": MappingProxyType({
        1: (),
        137: (),
        42161: (),
    }),
})


def _index(lists: Mapping[int, Iterable[str]] | None) -> dict[int, frozenset[str]]:
    if not lists:
        return {}
    return {
        int(chain_id): frozenset(addr.strip().lower() for addr in addresses)
        for chain_id, addresses in lists.items()
    }


@dataclass(frozen=True)
class SecurityLists:
    """Read-only, chain-scoped address registries.

    Build with ``SecurityLists.from_mapping`` from the canonical list format.
    Lookups accept any address casing.
    """

    verified: Mapping[int, frozenset[str]]
    blacklisted: Mapping[int, frozenset[str]]
    risky: Mapping[int, frozenset[str]]

    @classmethod
    def from_mapping(
        cls, lists: Mapping[str, Mapping[int, Iterable[str]]]
    ) -> SecurityLists:
        return cls(
            verified=MappingProxyType(_index(lists.get("verified"))),
            blacklisted=MappingProxyType(_index(lists.get("blacklisted"))),
            risky=MappingProxyType(_index(lists.get("risky"))),
        )

    @property
    def chains(self) -> frozenset[int]:
        return frozenset(self.verified) | frozenset(self.blacklisted) | frozenset(self.risky)

    def is_verified(self, address: str, chain_id: int) -> bool:
        return address.lower() in self.verified.get(chain_id, frozenset())

    def is_blacklisted(self, address: str, chain_id: int) -> bool:
        return address.lower() in self.blacklisted.get(chain_id, frozenset())

    def is_risky(self, address: str, chain_id: int) -> bool:
        return address.lower() in self.risky.get(chain_id, frozenset())

    def status(self, address: str, chain_id: int) -> ListStatus:
        """Most severe list membership. Blacklist wins over a verified entry."""
        if self.is_blacklisted(address, chain_id):
            return ListStatus.BLACKLISTED
        if self.is_verified(address, chain_id):
            return ListStatus.VERIFIED
        if self.is_risky(address, chain_id):
            return ListStatus.RISKY
        return ListStatus.UNLISTED


DEFAULT_SECURITY_LISTS = SecurityLists.from_mapping(TOKEN_SECURITY_LISTS)
