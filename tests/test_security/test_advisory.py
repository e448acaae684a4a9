"""Tests for user-facing risk text."""

from src.security.advisory import (
    UNKNOWN_DESCRIPTION,
    UNKNOWN_RECOMMENDATION,
    get_risk_description,
    get_security_recommendation,
)
from src.security.models import RiskLevel


def test_every_classified_level_has_text():
    for level in RiskLevel:
        if level == RiskLevel.UNKNOWN:
            continue
        assert get_risk_description(level) != UNKNOWN_DESCRIPTION
        assert get_security_recommendation(level) != UNKNOWN_RECOMMENDATION


def test_critical_text():
    assert get_risk_description(RiskLevel.CRITICAL) == "Dangerous - do not interact"
    assert get_security_recommendation(RiskLevel.CRITICAL) == "Do not interact with this token"


def test_verified_text():
    assert get_risk_description(RiskLevel.VERIFIED) == "Verified and safe to interact with"


def test_unknown_fallback():
    assert get_risk_description(RiskLevel.UNKNOWN) == UNKNOWN_DESCRIPTION
    assert get_security_recommendation(RiskLevel.UNKNOWN) == UNKNOWN_RECOMMENDATION
