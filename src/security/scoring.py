"""Score tables and risk banding.

Scoring is data-driven: every issue kind maps to a fixed penalty deducted
from a baseline of 100. Severity overrides (blacklist, honeypot) are applied
after banding, never folded into the score formula.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from src.security.models import IssueKind, IssueSeverity, RiskLevel, SecurityIssue

BASELINE_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100

ISSUE_PENALTIES: dict[IssueKind, int] = {
    IssueKind.SPAM_NAME: 20,
    IssueKind.SPAM_SYMBOL: 15,
    IssueKind.IMPERSONATION: 25,
    IssueKind.SUSPICIOUS_DECIMALS: 5,
    IssueKind.PROMOTIONAL_CONTENT: 10,
    IssueKind.AIRDROP_SPAM: 15,
    IssueKind.BLACKLISTED: 100,
    IssueKind.KNOWN_RISK: 30,
    IssueKind.HONEYPOT: 0,  # handled by SCORE_CAPS
    IssueKind.HIGH_TAX: 0,  # scaled by tax, see MAX_TAX_PENALTY
    IssueKind.UNVERIFIED_CONTRACT: 15,
    IssueKind.PROXY_CONTRACT: 5,
    IssueKind.MINT_FUNCTION: 5,
    IssueKind.TRANSFER_RESTRICTIONS: 10,
    IssueKind.SUSPICIOUS_OWNER: 20,
    IssueKind.EXTERNAL_FLAG: 20,
}

# Upper bound on the final score while the issue is present
SCORE_CAPS: dict[IssueKind, int] = {
    IssueKind.BLACKLISTED: 0,
    IssueKind.HONEYPOT: 10,
}

HIGH_TAX_THRESHOLD_PCT = 10.0
MAX_TAX_PENALTY = 20

EXTERNAL_LISTING_BOOST = 5
STRICT_MODE_PENALTY = 10


@dataclass(frozen=True)
class ScoreBands:
    """Minimum score for each level. Anything below ``high`` is CRITICAL."""

    low: int = 80
    medium: int = 60
    high: int = 30

    @classmethod
    def from_settings(cls) -> ScoreBands:
        from config.settings import settings

        return cls(
            low=settings.score_band_low,
            medium=settings.score_band_medium,
            high=settings.score_band_high,
        )


DEFAULT_BANDS = ScoreBands()


def clamp_score(score: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, round(score))))


def issue_penalty(issue: SecurityIssue) -> int:
    """Points deducted for a single issue."""
    if issue.kind == IssueKind.HIGH_TAX:
        tax = float(issue.evidence.get("tax_pct", 0.0))
        return int(min(tax, MAX_TAX_PENALTY))
    return ISSUE_PENALTIES.get(issue.kind, 0)


def compute_score(issues: Iterable[SecurityIssue], *, adjustment: int = 0) -> int:
    """Baseline minus penalties plus adjustment, then caps, clamped to [0, 100]."""
    issues = list(issues)
    score = BASELINE_SCORE - sum(issue_penalty(i) for i in issues) + adjustment
    for issue in issues:
        cap = SCORE_CAPS.get(issue.kind)
        if cap is not None:
            score = min(score, cap)
    return clamp_score(score)


def classify_score(score: int, bands: ScoreBands = DEFAULT_BANDS) -> RiskLevel:
    """Map a score to a risk level using fixed bands."""
    if score >= bands.low:
        return RiskLevel.LOW
    if score >= bands.medium:
        return RiskLevel.MEDIUM
    if score >= bands.high:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def has_critical_issue(issues: Iterable[SecurityIssue]) -> bool:
    return any(i.severity == IssueSeverity.CRITICAL for i in issues)


def apply_severity_override(level: RiskLevel, issues: Iterable[SecurityIssue]) -> RiskLevel:
    """Any CRITICAL-severity issue forces CRITICAL regardless of score."""
    if has_critical_issue(issues):
        return RiskLevel.CRITICAL
    return level
