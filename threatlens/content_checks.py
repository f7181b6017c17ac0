"""
CONTENT CHECKS - Local heuristic fallbacks for each analysis option

These run when an external provider is disabled or fails, and are the
only implementation for scam and ethics checks. All are deterministic.
"""

import re
from typing import List

from .models import AnalysisResult
from .security_analyzer import security_analyzer

PROFANITY_WORDS = ["stupid", "damn", "hate"]
MISINFORMATION_TERMS = ["fake news", "conspiracy", "hoax"]

SCAM_PATTERNS: List[re.Pattern] = [
    re.compile(r"urgent.{0,20}transfer", re.IGNORECASE),
    re.compile(r"free.{0,10}money", re.IGNORECASE),
    re.compile(r"click.{0,10}here.{0,10}win", re.IGNORECASE),
    re.compile(r"congratulations.{0,20}winner", re.IGNORECASE),
    re.compile(r"verify.{0,10}account.{0,10}suspended", re.IGNORECASE),
]

HARMFUL_PATTERNS: List[re.Pattern] = [
    re.compile(r"kill.{0,20}yourself", re.IGNORECASE),
    re.compile(r"hate.{0,20}(jews|muslims|christians|blacks|whites)", re.IGNORECASE),
    re.compile(r"(bomb|attack).{0,20}(school|building)", re.IGNORECASE),
]

# Scorer tiers that escalate the scam check to danger
SCAM_RISK_LEVELS = ("high", "critical")


def check_profanity(text: str) -> AnalysisResult:
    lowered = text.lower()
    found = any(word in lowered for word in PROFANITY_WORDS)
    return AnalysisResult(
        type="profanity check",
        status="warning" if found else "clean",
        message="Potentially inappropriate language detected" if found
        else "No inappropriate language detected",
    )


def check_facts(text: str) -> AnalysisResult:
    lowered = text.lower()
    suspicious = any(term in lowered for term in MISINFORMATION_TERMS)
    return AnalysisResult(
        type="fact check",
        status="warning" if suspicious else "clean",
        message="Claims may need verification" if suspicious else "No factual concerns detected",
    )


def check_scam(text: str) -> AnalysisResult:
    """Phrase patterns first, then the security scorer as a second opinion."""
    report = security_analyzer.analyze(text)
    has_pattern = any(p.search(text) for p in SCAM_PATTERNS)
    risky = report.riskLevel in SCAM_RISK_LEVELS

    if has_pattern or risky:
        return AnalysisResult(
            type="scam detection",
            status="danger",
            message=f"Potential scam patterns detected (risk level: {report.riskLevel})",
            confidence=round(1 - report.overallScore / 100, 2),
        )
    return AnalysisResult(
        type="scam detection",
        status="clean",
        message="No scam indicators found",
    )


def check_ethics(text: str) -> AnalysisResult:
    harmful = any(p.search(text) for p in HARMFUL_PATTERNS)
    return AnalysisResult(
        type="ethical analysis",
        status="danger" if harmful else "clean",
        message="Harmful content detected" if harmful else "No ethical concerns detected",
    )
