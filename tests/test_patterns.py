from __future__ import annotations

import re

import pytest

from threatlens.patterns import (
    FINANCIAL_FRAUD_PATTERNS,
    MAX_GAP,
    PATTERN_LIBRARY,
    PHISHING_PATTERNS,
    SOCIAL_ENGINEERING_PATTERNS,
    PatternCategory,
)

UNBOUNDED = re.compile(r"(?<!\\)[.\]\)]?[*+]|\{\d+,\}")


def _by_label(label: str):
    return next(p for p in PATTERN_LIBRARY if p.label == label)


def test_library_groups_and_order() -> None:
    assert PATTERN_LIBRARY == SOCIAL_ENGINEERING_PATTERNS + FINANCIAL_FRAUD_PATTERNS + PHISHING_PATTERNS
    assert {p.category for p in SOCIAL_ENGINEERING_PATTERNS} == {PatternCategory.SOCIAL_ENGINEERING}
    assert {p.category for p in FINANCIAL_FRAUD_PATTERNS} == {PatternCategory.FINANCIAL_FRAUD}
    assert {p.category for p in PHISHING_PATTERNS} == {PatternCategory.PHISHING}
    assert len({p.label for p in PATTERN_LIBRARY}) == len(PATTERN_LIBRARY)


def test_patterns_are_immutable() -> None:
    pattern = PATTERN_LIBRARY[0]

    with pytest.raises(AttributeError):
        pattern.base_risk = 0


@pytest.mark.parametrize("pattern", PATTERN_LIBRARY, ids=lambda p: p.label)
def test_every_matcher_is_case_insensitive_and_bounded(pattern) -> None:
    assert pattern.matcher.flags & re.IGNORECASE
    assert pattern.base_risk > 0
    assert not UNBOUNDED.search(pattern.matcher.pattern)


def test_gap_tolerance_is_bounded() -> None:
    identity = _by_label("Identity verification scam")

    assert identity.count_matches("verify" + "x" * MAX_GAP + "account") == 1
    assert identity.count_matches("verify" + "x" * (MAX_GAP + 1) + "account") == 0


def test_paraphrased_phrases_match() -> None:
    wire = _by_label("Wire transfer request")
    scarcity = _by_label("False scarcity")

    assert wire.count_matches("Please WIRE the funds via transfer today") == 1
    assert scarcity.count_matches("limited-time only, this offer") == 1


def test_matches_are_counted_without_overlap() -> None:
    urgency = _by_label("Urgency tactics")

    assert urgency.count_matches("urgently urgent immediately ASAP") == 4
    assert urgency.count_matches("nothing to see") == 0


def test_long_input_does_not_backtrack_catastrophically() -> None:
    text = "verify " + "a" * 50000

    assert _by_label("Identity verification scam").count_matches(text) == 0
