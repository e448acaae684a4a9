"""Tests for spam, phishing and impersonation rule sets."""

import re
import time

import pytest

from src.security.patterns import ADVANCED_SPAM_PATTERNS, ImpersonationPattern, PatternLibrary

P = ADVANCED_SPAM_PATTERNS


class TestScamNames:
    @pytest.mark.parametrize("name", [
        "Free USDT Claim Token",
        "Claim your FREE tokens",
        "Visit site to claim",
        "Bonus Reward Pool",
        "Airdrop - claim now",
        "1000$ USDT",
        "USDT-500",
        "www.scam-drop.io",
        "Join our Telegram",
        "Fake Token",
        "Pepe scam",
    ])
    def test_spam_names_match(self, name: str) -> None:
        assert P.matches_scam_name(name)

    @pytest.mark.parametrize("name", ["Tether USD", "USD Coin", "Chainlink", "Wrapped Ether"])
    def test_legit_names_pass(self, name: str) -> None:
        assert not P.matches_scam_name(name)


class TestScamSymbols:
    @pytest.mark.parametrize("symbol", ["1000", "$100", "CLAIM", "free", "www", "US DT", "T$"])
    def test_spam_symbols_match(self, symbol: str) -> None:
        assert P.matches_scam_symbol(symbol)

    @pytest.mark.parametrize("symbol", ["USDT", "WETH", "UNI", "LINK"])
    def test_legit_symbols_pass(self, symbol: str) -> None:
        assert not P.matches_scam_symbol(symbol)


class TestMalicious:
    def test_phishing_phrases(self) -> None:
        assert P.matches_malicious("Connect your wallet to receive")
        assert P.matches_malicious("enter seed phrase")
        assert P.matches_malicious("MetaMask support")

    def test_plain_text(self) -> None:
        assert not P.matches_malicious("Tether USD")


class TestImpersonation:
    def test_misspelled_brand(self) -> None:
        assert P.is_impersonating("Etherium Classic")
        assert P.is_impersonating("Uniswp Token")

    def test_real_brand_present_is_not_impersonation(self) -> None:
        """A name carrying the canonical brand is not a spoof."""
        assert not P.is_impersonating("Ethereum Classic")
        assert not P.is_impersonating("Chainlink Oracle")

    def test_unrelated_name(self) -> None:
        assert not P.is_impersonating("Tether USD")

    def test_cyrillic_homoglyph(self) -> None:
        spoofed = "\u0415thereum"  # Cyrillic Е
        assert P.is_impersonating(spoofed)
        assert P.homoglyph_chars(spoofed) == ["\u0415\u2192E"]

    def test_fold_homoglyphs(self) -> None:
        assert P.fold_homoglyphs("B\u0456tc\u043Ein") == "Bitcoin"


class TestDecimals:
    @pytest.mark.parametrize("decimals,expected", [
        (0, True),
        (2, True),
        (3, False),
        (6, False),
        (18, False),
        (24, False),
        (25, True),
    ])
    def test_boundaries(self, decimals: int, expected: bool) -> None:
        assert PatternLibrary.has_suspicious_decimals(decimals) is expected


class TestInjectedLibrary:
    def test_custom_rules_replace_defaults(self) -> None:
        lib = PatternLibrary(
            scam_names=(re.compile(r"rugpull", re.IGNORECASE),),
            impersonation_patterns=(ImpersonationPattern("tether", ("tehter",)),),
        )
        assert lib.matches_scam_name("RugPull Inu")
        assert not lib.matches_scam_name("Free USDT Claim Token")
        assert lib.is_impersonating("Tehter USD")
        assert not lib.is_impersonating("Etherium")

    def test_library_is_immutable(self) -> None:
        with pytest.raises(AttributeError):
            P.scam_names = ()  # type: ignore[misc]


class TestLongInput:
    """Keyword rules must stay linear on long names that almost match."""

    @pytest.mark.parametrize("text", [
        "visit to " * 2000,
        "claim " * 5000,
        "bonus " * 5000,
        "connect " * 5000,
        "seed " * 5000,
    ])
    def test_near_miss_is_fast(self, text: str) -> None:
        start = time.monotonic()
        P.matches_scam_name(text)
        P.matches_malicious(text)
        assert time.monotonic() - start < 0.5

    def test_long_text_still_matches(self) -> None:
        text = "x" * 10_000 + " visit " + "y" * 10_000 + " to claim"
        assert P.matches_scam_name(text)
        assert P.matches_malicious("a\n" * 1000 + "approve the\ntransaction")
