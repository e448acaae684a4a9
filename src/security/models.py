"""Value objects for token security validation.

All models are frozen: a validation result is never mutated after it is
returned, re-validating produces a new object.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class RiskLevel(StrEnum):
    """Discrete risk classification, ordered by severity via ``rank``."""

    VERIFIED = "verified"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
    UNKNOWN = "unknown"  # no signal applied

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]


# UNKNOWN ranks with MEDIUM: an unassessed token is treated like an unclassified one
_RISK_RANK: dict[RiskLevel, int] = {
    RiskLevel.VERIFIED: 0,
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.UNKNOWN: 2,
    RiskLevel.HIGH: 3,
    RiskLevel.CRITICAL: 4,
}


MAX_NAME_LENGTH = 200
MAX_SYMBOL_LENGTH = 50


class IssueSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueKind(StrEnum):
    """Kinds of security issues. Each maps to a penalty in ``scoring``."""

    # Metadata
    SPAM_NAME = "spam_name"
    SPAM_SYMBOL = "spam_symbol"
    IMPERSONATION = "impersonation"
    SUSPICIOUS_DECIMALS = "suspicious_decimals"
    PROMOTIONAL_CONTENT = "promotional_content"

    # Distribution
    AIRDROP_SPAM = "airdrop_spam"

    # Lists
    BLACKLISTED = "blacklisted"
    KNOWN_RISK = "known_risk"

    # Contract
    HONEYPOT = "honeypot"
    HIGH_TAX = "high_tax"
    UNVERIFIED_CONTRACT = "unverified_contract"
    PROXY_CONTRACT = "proxy_contract"
    MINT_FUNCTION = "mint_function"
    TRANSFER_RESTRICTIONS = "transfer_restrictions"
    SUSPICIOUS_OWNER = "suspicious_owner"

    # External registry
    EXTERNAL_FLAG = "external_flag"


def _freeze(value: Any) -> Any:
    """Read-only copy of nested evidence: mappings become proxies, sequences tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class SecurityIssue(_Frozen):
    """A single finding produced during validation."""

    kind: IssueKind
    severity: IssueSeverity
    message: str
    recommendation: str | None = None
    evidence: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("evidence", mode="after")
    @classmethod
    def _freeze_evidence(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(value)

    @field_serializer("evidence")
    def _dump_evidence(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)


class TokenMetadataInput(_Frozen):
    """Token metadata supplied by the caller (fetched elsewhere)."""

    name: str = Field(default="", max_length=MAX_NAME_LENGTH)
    symbol: str = Field(default="", max_length=MAX_SYMBOL_LENGTH)
    decimals: int = 18
    balance: int | None = None
    total_supply: int | None = None


class ContractSecurity(_Frozen):
    """Contract-level signals. ``analyzed=False`` means the signal was unavailable."""

    analyzed: bool = False
    is_verified: bool = False
    is_proxy: bool = False
    has_mint_function: bool = False
    has_transfer_restrictions: bool = False
    is_honeypot: bool = False
    deployer_risk: str = "medium"  # "low", "medium", "high"
    buy_tax: float | None = None  # percentage (0-100)
    sell_tax: float | None = None  # percentage (0-100)


class MetadataSecurity(_Frozen):
    has_spam_name: bool = False
    has_spam_symbol: bool = False
    is_impersonating: bool = False
    has_suspicious_decimals: bool = False
    has_promotional_content: bool = False
    metadata_quality: int = 50  # 0-100, 50 = not assessed


class ExternalSignal(_Frozen):
    """Verification/price signal from an external registry."""

    source: str
    listed: bool = False
    flagged: bool = False
    price_usd: float | None = None


class ValidationConfig(_Frozen):
    """Per-call validation options. ``validation_timeout`` is in milliseconds."""

    enable_contract_analysis: bool = False
    enable_metadata_validation: bool = True
    enable_external_validation: bool = False
    validation_timeout: int = Field(default=10_000, gt=0)
    enable_caching: bool = True
    strict_mode: bool = False

    @classmethod
    def from_settings(cls) -> ValidationConfig:
        from config.settings import settings

        return cls(
            enable_contract_analysis=settings.enable_contract_analysis,
            enable_metadata_validation=settings.enable_metadata_validation,
            enable_external_validation=settings.enable_external_validation,
            validation_timeout=settings.validation_timeout_ms,
            enable_caching=settings.enable_caching,
            strict_mode=settings.strict_mode,
        )

    @property
    def timeout_sec(self) -> float:
        return self.validation_timeout / 1000

    def fingerprint(self, metadata: TokenMetadataInput | None = None) -> str:
        """Stable digest of everything besides the address that shapes a result."""
        payload = self.model_dump(exclude={"enable_caching"})
        if metadata is not None:
            payload["metadata"] = metadata.model_dump(mode="json")
        raw = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.sha256(raw.encode()).hexdigest()[:16]


class TokenSecurityValidation(_Frozen):
    """Result of a full validation."""

    address: str
    chain_id: int
    risk_level: RiskLevel
    security_score: int = Field(ge=0, le=100)
    issues: tuple[SecurityIssue, ...] = ()
    is_verified: bool = False
    validated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    contract_security: ContractSecurity = Field(default_factory=ContractSecurity)
    metadata_security: MetadataSecurity = Field(default_factory=MetadataSecurity)
    external_signal: ExternalSignal | None = None

    def has_issue(self, kind: IssueKind) -> bool:
        return any(issue.kind == kind for issue in self.issues)


class QuickCheckResult(_Frozen):
    risk_level: RiskLevel
    trusted: bool
    reason: str


class ValidationRequest(_Frozen):
    """One token to validate in a batch."""

    address: str
    chain_id: int
    metadata: TokenMetadataInput | None = None
    config: ValidationConfig | None = None


class BatchItemResult(_Frozen):
    """One entry of a batch validation. Exactly one of validation/error is set."""

    address: str
    chain_id: int
    validation: TokenSecurityValidation | None = None
    error: str | None = None
