from __future__ import annotations

from datetime import datetime, timezone

import pytest

from threatlens.threat_intel import (
    ThreatIntelligenceCache,
    ThreatIntelligenceService,
    extract_indicators,
)

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def cache(clock) -> ThreatIntelligenceCache:
    return ThreatIntelligenceCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def service(cache) -> ThreatIntelligenceService:
    return ThreatIntelligenceService(cache, now=lambda: FIXED_NOW)


@pytest.mark.asyncio
async def test_clean_indicator(service) -> None:
    data = await service.lookup("https://example.org/docs", "url")

    assert data.isMalicious is False
    assert data.threatLevel == "low"
    assert data.categories == []
    assert data.sources == ["Clean Feed"]
    assert data.confidence == pytest.approx(0.1)


@pytest.mark.asyncio
async def test_single_marker_is_medium(service) -> None:
    data = await service.lookup("http://bit.ly/abc123", "url")

    assert data.isMalicious is True
    assert data.threatLevel == "medium"
    assert data.categories == ["phishing", "social_engineering"]
    assert data.confidence == pytest.approx(0.7)
    assert data.lastSeen == FIXED_NOW.isoformat()


@pytest.mark.asyncio
async def test_several_markers_are_high(service) -> None:
    data = await service.lookup("http://tinyurl.com/account-suspended-fraud", "url")

    assert data.threatLevel == "high"
    assert data.confidence == pytest.approx(0.9)


@pytest.mark.asyncio
async def test_lookup_is_deterministic(cache, clock) -> None:
    first = ThreatIntelligenceService(cache, now=lambda: FIXED_NOW)
    other = ThreatIntelligenceService(ThreatIntelligenceCache(clock=clock), now=lambda: FIXED_NOW)

    a = await first.lookup("malware.example.net", "domain")
    b = await other.lookup("malware.example.net", "domain")

    assert a == b


@pytest.mark.asyncio
async def test_cache_hit_within_ttl(service, cache, clock, monkeypatch) -> None:
    first = await service.lookup("http://scam.example", "url")

    def _fail(_indicator):
        raise AssertionError("cache should have answered")

    monkeypatch.setattr(service, "evaluate_indicator", _fail)
    clock.advance(299)

    assert await service.lookup("http://scam.example", "url") is first
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_cache_expires_after_ttl(service, cache, clock) -> None:
    first = await service.lookup("http://scam.example", "url")
    clock.advance(300)

    second = await service.lookup("http://scam.example", "url")

    assert second is not first
    assert second == first


@pytest.mark.asyncio
async def test_cache_key_includes_type(service, cache) -> None:
    await service.lookup("203.0.113.9", "ip")
    await service.lookup("203.0.113.9", "domain")

    assert len(cache) == 2
    assert cache.get("ip:203.0.113.9") is not None


@pytest.mark.asyncio
async def test_unknown_indicator_type(service) -> None:
    with pytest.raises(ValueError):
        await service.lookup("abc", "email")


@pytest.mark.asyncio
async def test_lookup_many_keeps_order(service) -> None:
    reports = await service.lookup_many([
        ("https://example.org", "url"),
        ("http://bit.ly/x", "url"),
    ])

    assert [r.indicator for r in reports] == ["https://example.org", "http://bit.ly/x"]
    assert [r.intelligence.isMalicious for r in reports] == [False, True]


def test_cache_rejects_negative_ttl() -> None:
    with pytest.raises(ValueError):
        ThreatIntelligenceCache(ttl_seconds=-1)


def test_cache_clear(cache, service) -> None:
    cache.set("url:x", service.evaluate_indicator("x"))
    cache.clear()

    assert len(cache) == 0
    assert cache.get("url:x") is None


def test_extract_indicators_dedupes_and_strips_punctuation() -> None:
    text = "Go to http://bit.ly/abc, then https://example.org/a. Again: http://bit.ly/abc"

    assert extract_indicators(text) == [
        ("http://bit.ly/abc", "url"),
        ("https://example.org/a", "url"),
    ]


def test_extract_indicators_without_urls() -> None:
    assert extract_indicators("no links here") == []


@pytest.mark.asyncio
async def test_expired_entries_are_purged_on_write(service, cache, clock) -> None:
    for i in range(50):
        await service.lookup(f"https://old-{i}.example", "url")
    assert len(cache) == 50

    clock.advance(301)
    for i in range(50):
        await service.lookup(f"https://new-{i}.example", "url")

    assert len(cache) == 50
    assert cache.get(cache.make_key("url", "https://old-0.example")) is None
    assert cache.get(cache.make_key("url", "https://new-49.example")) is not None


def test_cache_evicts_oldest_entry_when_full(clock, service) -> None:
    cache = ThreatIntelligenceCache(ttl_seconds=300, clock=clock, max_entries=3)
    for key in ("url:a", "url:b", "url:c", "url:d"):
        cache.set(key, service.evaluate_indicator(key))

    assert len(cache) == 3
    assert cache.get("url:a") is None
    assert cache.get("url:d") is not None


def test_cache_rewrite_refreshes_entry_position(clock, service) -> None:
    cache = ThreatIntelligenceCache(ttl_seconds=300, clock=clock, max_entries=2)
    cache.set("url:a", service.evaluate_indicator("a"))
    cache.set("url:b", service.evaluate_indicator("b"))
    cache.set("url:a", service.evaluate_indicator("a"))
    cache.set("url:c", service.evaluate_indicator("c"))

    assert cache.get("url:a") is not None
    assert cache.get("url:b") is None


def test_cache_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        ThreatIntelligenceCache(max_entries=0)
