"""
THREAT INTELLIGENCE - Indicator reputation lookup with TTL cache

Looks up URLs, domains, IPs and hashes against a local reputation
heuristic. Results are cached per (type, indicator) for a fixed TTL.

CACHE DESIGN:
- The cache is an explicit object passed to the service (no global state)
- TTL, clock and size bound are constructor parameters so tests can control time
- Expired entries are purged on every write, so memory stays bounded
- Concurrent writers can at worst store the same entry twice
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from .models import IndicatorReport, ThreatIntelligenceData
from .patterns import URL_PATTERN

logger = logging.getLogger(__name__)

INDICATOR_TYPES = ("url", "domain", "ip", "hash")
DEFAULT_CACHE_TTL = 5 * 60  # seconds
DEFAULT_MAX_ENTRIES = 10000

# Markers that flag an indicator as malicious (case-insensitive substring)
SUSPICIOUS_MARKERS = [
    "bit.ly", "tinyurl.com", "goo.gl",  # URL shorteners
    "phishing", "malware", "scam", "fraud",
    "bitcoin", "cryptocurrency", "urgent",
    "click here", "verify account", "suspended",
]


@dataclass
class CacheEntry:
    data: ThreatIntelligenceData
    timestamp: float


class ThreatIntelligenceCache:
    """
    Time-keyed map with a fixed expiry and a size bound.

    Entries are kept in write order, so the oldest entry is always first:
    expired entries are purged from the front on every write, and the
    oldest entry is evicted once max_entries is reached.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.max_entries = max_entries
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def make_key(indicator_type: str, indicator: str) -> str:
        return f"{indicator_type}:{indicator}"

    def get(self, key: str) -> Optional[ThreatIntelligenceData]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() - entry.timestamp >= self.ttl_seconds:
            # Expired entries are dropped lazily on read
            self._entries.pop(key, None)
            return None
        return entry.data

    def set(self, key: str, data: ThreatIntelligenceData):
        now = self.clock()
        # Re-inserting moves the key to the end, keeping write order
        self._entries.pop(key, None)
        self._purge_expired(now)
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        self._entries[key] = CacheEntry(data=data, timestamp=now)

    def _purge_expired(self, now: float):
        while self._entries:
            oldest = next(iter(self._entries))
            if now - self._entries[oldest].timestamp < self.ttl_seconds:
                break
            del self._entries[oldest]

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class ThreatIntelligenceService:
    """
    Indicator reputation lookup.

    The reputation source is a deterministic marker heuristic; the cache
    sits in front of it the same way it would in front of a real feed.
    """

    def __init__(self, cache: ThreatIntelligenceCache, now: Callable[[], datetime] = None):
        self.cache = cache
        self._now = now or (lambda: datetime.now(timezone.utc))

    async def lookup(self, indicator: str, indicator_type: str) -> ThreatIntelligenceData:
        """Reputation for one indicator, served from cache while fresh."""
        if indicator_type not in INDICATOR_TYPES:
            raise ValueError(
                f"Unknown indicator type '{indicator_type}', expected one of {INDICATOR_TYPES}"
            )

        key = self.cache.make_key(indicator_type, indicator)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Threat intel cache hit: {key}")
            return cached

        result = self.evaluate_indicator(indicator)
        self.cache.set(key, result)

        if result.isMalicious:
            logger.info(f"Indicator flagged as {result.threatLevel}: {key}")
        return result

    async def lookup_many(self, indicators: List[Tuple[str, str]]) -> List[IndicatorReport]:
        """Look up (indicator, type) pairs in order."""
        reports = []
        for indicator, indicator_type in indicators:
            data = await self.lookup(indicator, indicator_type)
            reports.append(IndicatorReport(indicator=indicator, type=indicator_type, intelligence=data))
        return reports

    def evaluate_indicator(self, indicator: str) -> ThreatIntelligenceData:
        """Score an indicator against the suspicious marker list."""
        lowered = indicator.lower()
        hits = [marker for marker in SUSPICIOUS_MARKERS if marker in lowered]

        if hits:
            return ThreatIntelligenceData(
                isMalicious=True,
                threatLevel="high" if len(hits) >= 2 else "medium",
                categories=["phishing", "social_engineering"],
                confidence=round(min(0.7 + 0.1 * (len(hits) - 1), 0.95), 4),
                sources=["Community Feed", "Security Vendor"],
                lastSeen=self._now().isoformat(),
                description="Identified as potentially malicious based on known attack patterns",
            )

        return ThreatIntelligenceData(
            isMalicious=False,
            threatLevel="low",
            categories=[],
            confidence=0.1,
            sources=["Clean Feed"],
            description="No known threats associated with this indicator",
        )


def extract_indicators(text: str) -> List[Tuple[str, str]]:
    """URLs found in text as (indicator, "url") pairs, first occurrence order."""
    seen = []
    for url in URL_PATTERN.findall(text):
        url = url.rstrip(".,;:!?)\"'")
        if url not in seen:
            seen.append(url)
    return [(url, "url") for url in seen]
