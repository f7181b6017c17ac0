"""
ASCII ART DETECTION - Local heuristic, no external API

Looks for box drawing / block / symbol characters, the shrug emoticon,
long runs of one repeated character and a high ratio of non-alphanumeric
characters.
"""

import re
from dataclasses import dataclass, field
from typing import List

from .models import AnalysisResult

ASCII_PATTERNS = [
    ("Box drawing", re.compile(r"[┌┐└┘├┤┬┴┼]")),
    ("Block elements", re.compile(r"[▀▄█▌▐░▒▓]")),
    ("Double box drawing", re.compile(r"[╔╗╚╝╠╣╦╩╬]")),
    ("Arrows", re.compile(r"[◄►▲▼]")),
    ("Symbols", re.compile(r"[☺☻♠♣♥♦]")),
    ("Shrug emoticon", re.compile(r"¯\\?_?\(ツ\)_?/¯")),
    ("Line drawing", re.compile(r"[─│┌┐└┘├┤┬┴┼]")),
]

REPEATED_CHARS = re.compile(r"(.)\1{5,}")
TEXT_CHARS = re.compile(r"[a-zA-Z0-9\s]")

NON_TEXT_RATIO_THRESHOLD = 0.3
MAX_CONFIDENCE = 0.9


@dataclass
class ASCIIDetectionResult:
    has_ascii: bool
    patterns: List[str] = field(default_factory=list)
    confidence: float = 0.0
    non_text_ratio: float = 0.0


def detect_ascii_patterns(text: str) -> ASCIIDetectionResult:
    found = []
    total_matches = 0

    for name, pattern in ASCII_PATTERNS:
        matches = pattern.findall(text)
        if matches:
            found.append(name)
            total_matches += len(matches)

    repeated = REPEATED_CHARS.findall(text)
    if repeated:
        found.append("Repeated characters")
        total_matches += len(repeated)

    non_text = len(TEXT_CHARS.sub("", text))
    ratio = non_text / len(text) if text else 0.0

    return ASCIIDetectionResult(
        has_ascii=bool(found) or ratio > NON_TEXT_RATIO_THRESHOLD,
        patterns=found,
        confidence=round(min(MAX_CONFIDENCE, total_matches / 10 + ratio * 0.5), 4),
        non_text_ratio=round(ratio, 4),
    )


def analyze_ascii(text: str) -> AnalysisResult:
    """ASCII art is reported but never treated as harmful."""
    detection = detect_ascii_patterns(text)
    if detection.has_ascii:
        names = ", ".join(detection.patterns) or "high symbol density"
        message = f"ASCII art patterns detected ({names})"
    else:
        message = "No special ASCII patterns found"
    return AnalysisResult(
        type="ascii detection",
        status="clean",
        message=message,
        confidence=detection.confidence,
    )
