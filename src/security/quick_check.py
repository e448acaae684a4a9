"""Quick security check, a list-and-pattern pre-filter.

Pure and synchronous: no I/O, safe to call for every row of a token list
where full validation's latency is unacceptable.
"""

from __future__ import annotations

from loguru import logger

from src.security.address import normalize_address
from src.security.metrics import validation_metrics
from src.security.models import QuickCheckResult, RiskLevel, TokenMetadataInput
from src.security.patterns import ADVANCED_SPAM_PATTERNS, PatternLibrary
from src.security.security_lists import DEFAULT_SECURITY_LISTS, SecurityLists


def quick_security_check(
    address: str,
    chain_id: int,
    metadata: TokenMetadataInput | None = None,
    *,
    lists: SecurityLists = DEFAULT_SECURITY_LISTS,
    patterns: PatternLibrary = ADVANCED_SPAM_PATTERNS,
) -> QuickCheckResult:
    """Fast risk assessment from list membership and name/symbol patterns.

    Order: blacklist → verified list → risky list → spam patterns → unknown.

    Raises:
        InvalidTokenAddressError: if the address is malformed.
    """
    try:
        addr = normalize_address(address)
    except ValueError:
        validation_metrics.record_input_error()
        raise
    validation_metrics.record_quick_check()

    if lists.is_blacklisted(addr, chain_id):
        logger.debug(f"[QUICK] {addr[:10]} chain={chain_id} is blacklisted")
        return QuickCheckResult(
            risk_level=RiskLevel.CRITICAL,
            trusted=False,
            reason="Token is on security blacklist",
        )

    if lists.is_verified(addr, chain_id):
        return QuickCheckResult(
            risk_level=RiskLevel.VERIFIED,
            trusted=True,
            reason="Token is on verified safe list",
        )

    if lists.is_risky(addr, chain_id):
        return QuickCheckResult(
            risk_level=RiskLevel.HIGH,
            trusted=False,
            reason="Token has known security concerns",
        )

    if metadata is not None and (
        patterns.matches_scam_name(metadata.name)
        or patterns.matches_scam_symbol(metadata.symbol)
    ):
        return QuickCheckResult(
            risk_level=RiskLevel.HIGH,
            trusted=False,
            reason="Token metadata matches spam patterns",
        )

    return QuickCheckResult(
        risk_level=RiskLevel.MEDIUM,
        trusted=False,
        reason="Unknown token - exercise caution",
    )
