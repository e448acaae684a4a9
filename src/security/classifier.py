"""Tolerance-based filtering on the ordered risk scale."""

from __future__ import annotations

from collections.abc import Iterable

from src.security.models import RiskLevel, TokenSecurityValidation


def is_more_severe(level: RiskLevel, than: RiskLevel) -> bool:
    return level.rank > than.rank


def should_filter_token(
    validation: TokenSecurityValidation,
    user_tolerance: RiskLevel = RiskLevel.MEDIUM,
) -> bool:
    """True when the token's risk is strictly more severe than the user accepts."""
    return is_more_severe(validation.risk_level, user_tolerance)


def filter_tokens(
    validations: Iterable[TokenSecurityValidation],
    user_tolerance: RiskLevel = RiskLevel.MEDIUM,
) -> list[TokenSecurityValidation]:
    """Keep only validations within the user's tolerance, preserving order."""
    return [v for v in validations if not should_filter_token(v, user_tolerance)]
