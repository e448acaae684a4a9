"""Collaborator interfaces consumed by the full validator.

Implementations live in ``src.parsers`` (GoPlus, token lists). Both calls
are best-effort: returning ``None`` or raising means "signal unavailable".
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from src.security.models import ContractSecurity, ExternalSignal


@runtime_checkable
class ContractAnalysisProvider(Protocol):
    async def analyze_contract(self, address: str, chain_id: int) -> ContractSecurity | None:
        ...


@runtime_checkable
class ExternalRegistryProvider(Protocol):
    async def lookup(self, address: str, chain_id: int) -> ExternalSignal | None:
        ...


@runtime_checkable
class BatchContractAnalysisProvider(Protocol):
    """Contract provider that can analyze many tokens of one chain in a call.

    The result is keyed by lowercase address; tokens without data are absent.
    """

    async def analyze_contract(self, address: str, chain_id: int) -> ContractSecurity | None:
        ...

    async def analyze_contracts(
        self, addresses: Sequence[str], chain_id: int,
    ) -> dict[str, ContractSecurity]:
        ...
