"""
SECURITY PATTERN ANALYZER - Heuristic risk scoring for free text

PIPELINE ORDER:
Text → Pattern Scan → URL Density Check → Score Aggregation →
Risk Tier → Threats + Recommendations → SecurityAnalysisResult

SCORING MATH:
- Every matched pattern contributes min(base_risk * count, base_risk * 2)
- overallScore = max(0, 100 - sum(contributions) - url_penalty)
- Risk tier is a fixed step function of overallScore

The analyzer is pure: no I/O, no shared mutable state. It is the fallback
tier of the text analysis pipeline and never raises for string input.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .models import PatternMatch, SecurityAnalysisResult, SecurityThreat
from .patterns import PATTERN_LIBRARY, URL_PATTERN, Pattern

logger = logging.getLogger(__name__)

MAX_SCORE = 100

MITIGATION_ADVICE: Dict[str, str] = {
    "Urgency tactics": "Take time to verify claims independently",
    "Identity verification scam": "Contact the organization directly through official channels",
    "Suspicious call-to-action": "Avoid clicking suspicious links",
    "Account threat scam": "Log in through the official website, not through links",
    "Wire transfer request": "Never send money to unknown parties",
    "Cryptocurrency mention": "Be cautious of crypto-related requests",
    "Advance fee fraud": "Legitimate organizations do not ask for upfront fees",
    "Brand impersonation": "Verify sender authenticity through official channels",
}
DEFAULT_MITIGATION = "Exercise caution and verify independently"

MULTIPLE_URLS_THREAT = "Multiple URLs"
MULTIPLE_URLS_MITIGATION = "Verify all URLs before clicking"

RECOMMEND_VERIFY_SENDER = "Always verify sender identity through independent channels"
RECOMMEND_SCAN_URLS = "Scan URLs with security tools before visiting"
RECOMMEND_HIGH_RISK = "Consider this content high-risk and avoid any requested actions"
RECOMMEND_RED_FLAGS = "This content shows multiple red flags typical of scams"


@dataclass(frozen=True)
class ScoringConfig:
    """Tuning constants for the scorer."""

    # Risk contribution saturates at base_risk * this
    contribution_cap_multiplier: int = 2

    # Threat severity: danger if contribution > danger, warning if > warning
    danger_threshold: int = 25
    warning_threshold: int = 15

    # Any pattern contribution above this adds the "red flags" recommendation
    red_flag_threshold: int = 20

    # confidence = min(base + step * count, cap)
    confidence_base: float = 0.6
    confidence_step: float = 0.1
    confidence_cap: float = 0.95

    # URL density: more than url_threshold URLs costs min(per_url * n, max)
    url_threshold: int = 3
    url_penalty_per_url: int = 5
    url_penalty_max: int = 25
    url_confidence: float = 0.7

    # (minimum score, tier), checked top down
    risk_tiers: Tuple[Tuple[int, str], ...] = (
        (90, "minimal"),
        (75, "low"),
        (50, "medium"),
        (25, "high"),
    )
    fallback_tier: str = "critical"


DEFAULT_CONFIG = ScoringConfig()


def classify_risk_level(score: int, config: ScoringConfig = DEFAULT_CONFIG) -> str:
    """Map an overall score onto its risk tier (stateless)."""
    for minimum, tier in config.risk_tiers:
        if score >= minimum:
            return tier
    return config.fallback_tier


def get_mitigation_advice(label: str) -> str:
    return MITIGATION_ADVICE.get(label, DEFAULT_MITIGATION)


class SecurityPatternAnalyzer:
    """
    Pattern-based security scorer.

    Scans text for social engineering, financial fraud and phishing
    language and turns the matches into a 0-100 safety score.
    """

    def __init__(
        self,
        patterns: Sequence[Pattern] = PATTERN_LIBRARY,
        config: Optional[ScoringConfig] = None,
    ):
        self.patterns = tuple(patterns)
        self.config = config or DEFAULT_CONFIG

    def analyze(self, content: str) -> SecurityAnalysisResult:
        """
        Analyze content and assemble the full report.

        Raises TypeError for non-string input; every string (including the
        empty string) is valid.
        """
        if not isinstance(content, str):
            raise TypeError(f"content must be str, got {type(content).__name__}")

        patterns = self.scan_patterns(content)
        threats = [self._build_threat(match) for match in patterns]

        url_penalty, url_threat = self._check_url_density(content)
        if url_threat is not None:
            threats.append(url_threat)

        overall_score = self._aggregate_score(patterns, url_penalty)
        risk_level = classify_risk_level(overall_score, self.config)
        recommendations = self.generate_recommendations(threats, patterns)

        if patterns or url_threat is not None:
            logger.debug(
                f"Security analysis: score={overall_score} level={risk_level} "
                f"patterns={[p.pattern for p in patterns]}"
            )

        return SecurityAnalysisResult(
            overallScore=overall_score,
            riskLevel=risk_level,
            threats=threats,
            patterns=patterns,
            recommendations=recommendations,
        )

    def scan_patterns(self, content: str) -> List[PatternMatch]:
        """One PatternMatch per pattern that matched; misses are omitted."""
        matches = []
        for pattern in self.patterns:
            count = pattern.count_matches(content)
            if count == 0:
                continue
            matches.append(PatternMatch(
                pattern=pattern.label,
                matches=count,
                riskScore=self._risk_contribution(pattern.base_risk, count),
            ))
        return matches

    def _risk_contribution(self, base_risk: int, count: int) -> int:
        cap = base_risk * self.config.contribution_cap_multiplier
        return min(base_risk * count, cap)

    def _check_url_density(self, content: str) -> Tuple[int, Optional[SecurityThreat]]:
        """Penalty and synthetic threat for link-flooded content."""
        url_count = len(URL_PATTERN.findall(content))
        if url_count <= self.config.url_threshold:
            return 0, None

        penalty = min(url_count * self.config.url_penalty_per_url, self.config.url_penalty_max)
        threat = SecurityThreat(
            type=MULTIPLE_URLS_THREAT,
            severity="warning",
            confidence=self.config.url_confidence,
            description=f"Content contains {url_count} URLs, which may indicate spam or phishing",
            mitigation=MULTIPLE_URLS_MITIGATION,
        )
        return penalty, threat

    def _aggregate_score(self, patterns: List[PatternMatch], url_penalty: int) -> int:
        score = MAX_SCORE
        for match in patterns:
            score -= match.riskScore
        score -= url_penalty
        return max(0, score)

    def _severity(self, contribution: int) -> str:
        if contribution > self.config.danger_threshold:
            return "danger"
        if contribution > self.config.warning_threshold:
            return "warning"
        return "info"

    def _confidence(self, count: int) -> float:
        raw = self.config.confidence_base + self.config.confidence_step * count
        return round(min(raw, self.config.confidence_cap), 4)

    def _build_threat(self, match: PatternMatch) -> SecurityThreat:
        return SecurityThreat(
            type=match.pattern,
            severity=self._severity(match.riskScore),
            confidence=self._confidence(match.matches),
            description=f"Detected {match.matches} instance(s) of {match.pattern.lower()}",
            mitigation=get_mitigation_advice(match.pattern),
        )

    def generate_recommendations(
        self,
        threats: List[SecurityThreat],
        patterns: List[PatternMatch],
    ) -> List[str]:
        """
        Ordered, additive advice list. Each condition fires at most once and
        the order is fixed; it is not sorted by severity.
        """
        recommendations = [RECOMMEND_VERIFY_SENDER]

        if any("URL" in t.type for t in threats):
            recommendations.append(RECOMMEND_SCAN_URLS)

        if any(t.severity == "danger" for t in threats):
            recommendations.append(RECOMMEND_HIGH_RISK)

        if any(p.riskScore > self.config.red_flag_threshold for p in patterns):
            recommendations.append(RECOMMEND_RED_FLAGS)

        return recommendations


# Singleton instance
security_analyzer = SecurityPatternAnalyzer()


def analyze_security_patterns(content: str) -> SecurityAnalysisResult:
    """Score content with the default pattern library and configuration."""
    return security_analyzer.analyze(content)
