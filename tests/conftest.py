"""Shared test fixtures."""

import pytest

from src.security.metrics import ValidationMetrics
from src.security.security_lists import SecurityLists
from tests.fakes import BLACKLISTED, BLACKLISTED_AND_VERIFIED, RISKY, TETHER, USDC


@pytest.fixture
def security_lists() -> SecurityLists:
    """Small per-chain lists, independent of the shipped defaults."""
    return SecurityLists.from_mapping({
        "verified": {
            1: [TETHER, USDC, BLACKLISTED_AND_VERIFIED],
            137: ["0xc2132d05d31c914a87c6611c10748aeb04b58e8f"],
        },
        "blacklisted": {1: [BLACKLISTED, BLACKLISTED_AND_VERIFIED]},
        "risky": {1: [RISKY]},
    })


@pytest.fixture
def metrics() -> ValidationMetrics:
    return ValidationMetrics()
