"""Data models for GoPlus Security API (EVM token_security) responses."""

from dataclasses import dataclass

from src.security.models import ContractSecurity


@dataclass
class GoPlusReport:
    """Token security report from GoPlus API."""

    is_open_source: bool | None = None
    is_proxy: bool | None = None
    is_mintable: bool | None = None
    owner_can_change_balance: bool | None = None
    hidden_owner: bool | None = None
    can_take_back_ownership: bool | None = None
    is_honeypot: bool | None = None
    honeypot_with_same_creator: bool | None = None
    buy_tax: float | None = None  # percentage (0-100)
    sell_tax: float | None = None  # percentage (0-100)
    cannot_sell_all: bool | None = None
    transfer_pausable: bool | None = None
    trading_cooldown: bool | None = None
    is_blacklisted: bool | None = None  # contract has a blacklist function
    slippage_modifiable: bool | None = None
    is_airdrop_scam: bool | None = None
    holder_count: int | None = None

    @property
    def deployer_risk(self) -> str:
        """Owner/deployer privilege level as low/medium/high."""
        if (
            self.owner_can_change_balance
            or self.hidden_owner
            or self.can_take_back_ownership
            or self.honeypot_with_same_creator
        ):
            return "high"
        if self.is_mintable or self.slippage_modifiable:
            return "medium"
        return "low"

    def to_contract_security(self) -> ContractSecurity:
        # Unknown (None) flags are treated as absent; only is_open_source
        # must be positively reported to count as verified.
        return ContractSecurity(
            analyzed=True,
            is_verified=self.is_open_source is True,
            is_proxy=bool(self.is_proxy),
            has_mint_function=bool(self.is_mintable),
            has_transfer_restrictions=bool(
                self.transfer_pausable
                or self.cannot_sell_all
                or self.trading_cooldown
                or self.is_blacklisted
            ),
            is_honeypot=self.is_honeypot is True,
            deployer_risk=self.deployer_risk,
            buy_tax=self.buy_tax,
            sell_tax=self.sell_tax,
        )
