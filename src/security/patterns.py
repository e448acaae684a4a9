"""Spam, phishing and impersonation rule sets for token metadata.

Rule families:
- scam_names: promotional/urgency language in a token's display name
- scam_symbols: numeric, currency-prefixed or imperative-word symbols
- malicious_patterns: phishing phrasing ("connect wallet", "seed phrase")
- impersonation_patterns: brand → common misspellings

Impersonation only fires when a variant is present AND the canonical brand
is absent, so "Ethereum Classic" or "Chainlink Oracle" are not flagged.
Cyrillic lookalike characters are folded to Latin before the brand check
to catch homoglyph spoofing ("Еthereum" with a Cyrillic Е).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ImpersonationPattern:
    """A canonical brand and its common misspellings."""

    original: str
    variants: tuple[str, ...]


# Cyrillic/Greek chars that render like Latin letters
HOMOGLYPH_MAP: dict[str, str] = {
    "\u0410": "A",  # Cyrillic А
    "\u0412": "B",  # Cyrillic В
    "\u0421": "C",  # Cyrillic С
    "\u0415": "E",  # Cyrillic Е
    "\u041D": "H",  # Cyrillic Н
    "\u041A": "K",  # Cyrillic К
    "\u041C": "M",  # Cyrillic М
    "\u041E": "O",  # Cyrillic О
    "\u0420": "P",  # Cyrillic Р
    "\u0422": "T",  # Cyrillic Т
    "\u0425": "X",  # Cyrillic Х
    "\u0430": "a",  # Cyrillic а
    "\u0435": "e",  # Cyrillic е
    "\u043E": "o",  # Cyrillic о
    "\u0440": "p",  # Cyrillic р
    "\u0441": "c",  # Cyrillic с
    "\u0443": "y",  # Cyrillic у
    "\u0445": "x",  # Cyrillic х
    "\u0456": "i",  # Cyrillic і
    "\u03BF": "o",  # Greek ο
    "\u03B1": "a",  # Greek α
}


def _compile(*patterns: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def _in_order(*words: str) -> str:
    """Regex matching the words in sequence, anywhere in the text.

    Anchored, and each step is atomic, so the earliest occurrence of every
    word is committed to and a miss fails in one linear pass. The naive
    ``a.*b.*c`` form backtracks in cubic time on long adversarial names.
    """
    steps = "".join(f"(?>.*?{re.escape(w)})" for w in words)
    return rf"\A(?s:{steps})"


SCAM_NAME_PATTERNS = _compile(
    # Common scam phrases
    _in_order("claim", "free"),
    _in_order("free", "claim"),
    _in_order("visit", "to", "claim"),
    _in_order("bonus", "reward"),
    _in_order("reward", "bonus"),
    _in_order("airdrop", "claim"),
    # Currency amount glued to a ticker: "1000$ USDT", "USDC-500"
    r"^\d+[$€£¥]?\s*(?:usdt|usdc|eth|btc|bnb|ada|dot|sol)",
    r"^(?:usdt|usdc|eth|btc)[\s\-_]*\d+",
    # Website / promotional content
    r"(?:www|http|\.com|\.org|\.io|\.net)",
    r"telegram|discord|twitter",
    # Self-declared fakes
    r"^(?:fake|scam|test)[\s\-_]",
    r"[\s\-_](?:fake|scam|test)$",
)

SCAM_SYMBOL_PATTERNS = _compile(
    r"^\d+$",  # only digits
    r"\$\d+",  # dollar sign with digits
    r"^(?:visit|claim|free|bonus|reward)$",
    r"^(?:www|http)",
    r"\W",  # any non-alphanumeric character
)

MALICIOUS_PATTERNS = _compile(
    _in_order("connect", "wallet"),
    _in_order("approve", "transaction"),
    _in_order("private", "key"),
    _in_order("seed", "phrase"),
    r"metamask|trustwallet|coinbase",
    _in_order("verify", "wallet"),
    _in_order("confirm", "identity"),
)

IMPERSONATION_PATTERNS: tuple[ImpersonationPattern, ...] = (
    ImpersonationPattern("ethereum", ("etherium", "etherem", "ethrium")),
    ImpersonationPattern("bitcoin", ("bitcon", "bitcoln", "biitcoin")),
    ImpersonationPattern("chainlink", ("chainlnk", "chainlk", "chainiink")),
    ImpersonationPattern("uniswap", ("uniswp", "unisawp", "umiswap")),
    ImpersonationPattern("polygon", ("polygoin", "poygon", "polygan")),
)

# Legitimate tokens use 6-18; very low or very high counts are typical of spam
MIN_PLAUSIBLE_DECIMALS = 3
MAX_PLAUSIBLE_DECIMALS = 24


@dataclass(frozen=True)
class PatternLibrary:
    """Immutable rule sets, injected into the quick check and the validator."""

    scam_names: tuple[re.Pattern[str], ...] = SCAM_NAME_PATTERNS
    scam_symbols: tuple[re.Pattern[str], ...] = SCAM_SYMBOL_PATTERNS
    malicious_patterns: tuple[re.Pattern[str], ...] = MALICIOUS_PATTERNS
    impersonation_patterns: tuple[ImpersonationPattern, ...] = IMPERSONATION_PATTERNS
    homoglyphs: dict[str, str] = field(default_factory=lambda: dict(HOMOGLYPH_MAP))

    def matches_scam_name(self, name: str) -> bool:
        return any(p.search(name) for p in self.scam_names)

    def matches_scam_symbol(self, symbol: str) -> bool:
        return any(p.search(symbol) for p in self.scam_symbols)

    def matches_malicious(self, text: str) -> bool:
        return any(p.search(text) for p in self.malicious_patterns)

    def is_impersonating(self, name: str) -> bool:
        """Misspelled or homoglyph-spoofed brand without the real brand present."""
        name_lower = name.lower()
        folded = self.fold_homoglyphs(name).lower()

        for pattern in self.impersonation_patterns:
            if pattern.original in name_lower:
                continue
            if any(v in name_lower for v in pattern.variants):
                return True
            # Brand only appears once lookalikes are folded → spoofed
            if pattern.original in folded:
                return True
        return False

    def fold_homoglyphs(self, text: str) -> str:
        return text.translate(str.maketrans(self.homoglyphs))

    def homoglyph_chars(self, text: str) -> list[str]:
        """Lookalike characters found in text, as "Е→E" pairs."""
        return [f"{c}→{self.homoglyphs[c]}" for c in text if c in self.homoglyphs]

    @staticmethod
    def has_suspicious_decimals(decimals: int) -> bool:
        return decimals < MIN_PLAUSIBLE_DECIMALS or decimals > MAX_PLAUSIBLE_DECIMALS


ADVANCED_SPAM_PATTERNS = PatternLibrary()
