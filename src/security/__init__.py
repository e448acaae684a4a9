"""Token security risk engine.

Public surface: quick_security_check, validate_token_security,
should_filter_token, get_risk_description, get_security_recommendation,
TOKEN_SECURITY_LISTS and ADVANCED_SPAM_PATTERNS.
"""

from src.security.advisory import get_risk_description, get_security_recommendation
from src.security.classifier import filter_tokens, should_filter_token
from src.security.exceptions import InvalidTokenAddressError, TokenSecurityError
from src.security.models import (
    QuickCheckResult,
    RiskLevel,
    TokenMetadataInput,
    TokenSecurityValidation,
    ValidationConfig,
)
from src.security.patterns import ADVANCED_SPAM_PATTERNS, PatternLibrary
from src.security.quick_check import quick_security_check
from src.security.security_lists import TOKEN_SECURITY_LISTS, SecurityLists
from src.security.validator import TokenSecurityValidator, validate_token_security

__all__ = [
    "ADVANCED_SPAM_PATTERNS",
    "TOKEN_SECURITY_LISTS",
    "InvalidTokenAddressError",
    "PatternLibrary",
    "QuickCheckResult",
    "RiskLevel",
    "SecurityLists",
    "TokenMetadataInput",
    "TokenSecurityError",
    "TokenSecurityValidation",
    "TokenSecurityValidator",
    "ValidationConfig",
    "filter_tokens",
    "get_risk_description",
    "get_security_recommendation",
    "quick_security_check",
    "should_filter_token",
    "validate_token_security",
]
