"""User-facing description and recommendation text per risk level."""

from __future__ import annotations

from src.security.models import RiskLevel

RISK_DESCRIPTIONS: dict[RiskLevel, str] = {
    RiskLevel.VERIFIED: "Verified and safe to interact with",
    RiskLevel.LOW: "Generally safe with minimal risk factors",
    RiskLevel.MEDIUM: "Some risk factors present - exercise caution",
    RiskLevel.HIGH: "Multiple risk factors - high caution advised",
    RiskLevel.CRITICAL: "Dangerous - do not interact",
}

SECURITY_RECOMMENDATIONS: dict[RiskLevel, str] = {
    RiskLevel.VERIFIED: "Safe to interact with normal precautions",
    RiskLevel.LOW: "Generally safe, verify token details before large transactions",
    RiskLevel.MEDIUM: "Research token thoroughly before interacting",
    RiskLevel.HIGH: "Only interact if you fully understand the risks",
    RiskLevel.CRITICAL: "Do not interact with this token",
}

UNKNOWN_DESCRIPTION = "Unknown risk level"
UNKNOWN_RECOMMENDATION = "Unknown risk - exercise extreme caution"


def get_risk_description(level: RiskLevel) -> str:
    return RISK_DESCRIPTIONS.get(level, UNKNOWN_DESCRIPTION)


def get_security_recommendation(level: RiskLevel) -> str:
    return SECURITY_RECOMMENDATIONS.get(level, UNKNOWN_RECOMMENDATION)
