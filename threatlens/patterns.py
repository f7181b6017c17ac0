"""
PATTERN LIBRARY - Static regex table for the security pattern scorer

Three categories of scam language:
- SOCIAL ENGINEERING: urgency, fake verification, account threats
- FINANCIAL FRAUD: wire transfers, crypto, advance fee, refunds
- PHISHING: brand impersonation, credential harvesting, fake notices

MATCHING RULES:
- Every matcher is case-insensitive
- Phrase fragments may be separated by 0-20 characters (".{0,20}")
- Only bounded repetition is allowed, so no matcher can backtrack
  catastrophically on long input

Table order is significant: it is the order matches are reported in.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

# Maximum number of characters allowed between two phrase fragments
MAX_GAP = 20
_GAP = f".{{0,{MAX_GAP}}}"


class PatternCategory(str, Enum):
    """Pattern groups used by the security scorer"""
    SOCIAL_ENGINEERING = "social-engineering"
    FINANCIAL_FRAUD = "financial-fraud"
    PHISHING = "phishing"


@dataclass(frozen=True)
class Pattern:
    """One registered (matcher, base risk, label) record"""
    matcher: re.Pattern
    base_risk: int
    label: str
    category: PatternCategory

    def count_matches(self, text: str) -> int:
        """Number of non-overlapping matches in text"""
        return sum(1 for _ in self.matcher.finditer(text))


def _pattern(regex: str, base_risk: int, label: str, category: PatternCategory) -> Pattern:
    return Pattern(
        matcher=re.compile(regex.replace("<gap>", _GAP), re.IGNORECASE),
        base_risk=base_risk,
        label=label,
        category=category,
    )


SOCIAL_ENGINEERING_PATTERNS: Tuple[Pattern, ...] = (
    _pattern(r"urgent(?:ly)?|immediate(?:ly)?|asap",
             15, "Urgency tactics", PatternCategory.SOCIAL_ENGINEERING),
    _pattern(r"verify<gap>account|confirm<gap>identity",
             20, "Identity verification scam", PatternCategory.SOCIAL_ENGINEERING),
    _pattern(r"click<gap>here<gap>now|click<gap>link<gap>below",
             18, "Suspicious call-to-action", PatternCategory.SOCIAL_ENGINEERING),
    _pattern(r"suspended<gap>account|account<gap>(?:locked|suspended)|will be (?:suspended|locked)",
             25, "Account threat scam", PatternCategory.SOCIAL_ENGINEERING),
    _pattern(r"limited<gap>time<gap>offer|expires<gap>soon",
             12, "False scarcity", PatternCategory.SOCIAL_ENGINEERING),
)

FINANCIAL_FRAUD_PATTERNS: Tuple[Pattern, ...] = (
    _pattern(r"wire<gap>transfer|bank<gap>transfer",
             30, "Wire transfer request", PatternCategory.FINANCIAL_FRAUD),
    _pattern(r"bitcoin|cryptocurrency|crypto",
             20, "Cryptocurrency mention", PatternCategory.FINANCIAL_FRAUD),
    _pattern(r"inheritance|lottery<gap>winner|prize",
             35, "Advance fee fraud", PatternCategory.FINANCIAL_FRAUD),
    _pattern(r"tax<gap>refund|irs<gap>refund",
             25, "Tax refund scam", PatternCategory.FINANCIAL_FRAUD),
    _pattern(r"free<gap>money|easy<gap>money",
             22, "Money scam indicators", PatternCategory.FINANCIAL_FRAUD),
)

PHISHING_PATTERNS: Tuple[Pattern, ...] = (
    _pattern(r"paypal|amazon|microsoft|google",
             15, "Brand impersonation", PatternCategory.PHISHING),
    _pattern(r"(?:login|password)<gap>expire",
             20, "Credential harvesting", PatternCategory.PHISHING),
    _pattern(r"security<gap>(?:alert|notice)",
             18, "Fake security notice", PatternCategory.PHISHING),
    _pattern(r"update<gap>(?:payment|billing)",
             22, "Payment update scam", PatternCategory.PHISHING),
)

PATTERN_LIBRARY: Tuple[Pattern, ...] = (
    SOCIAL_ENGINEERING_PATTERNS + FINANCIAL_FRAUD_PATTERNS + PHISHING_PATTERNS
)

# Scheme + host, used by the URL density heuristic
URL_PATTERN = re.compile(r"https?://[^\s]+", re.IGNORECASE)
