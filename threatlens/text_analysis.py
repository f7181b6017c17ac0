"""
TEXT ANALYSIS PIPELINE - Layered analysis with heuristic fallback

PIPELINE ORDER:
Request → Input Validation/Sanitization → Option Filtering →
per option: External Provider (if configured) → Local Heuristic (fallback)

FAILURE POLICY:
- A provider failure (timeout, HTTP error, malformed body, open circuit)
  is logged and the local heuristic answers instead
- An unexpected error inside one option yields a canned warning result
  and never aborts the remaining options
- Only invalid input is reported to the caller (ValidationError)
"""

import logging
import re
from typing import Callable, Dict, List, Optional

from .ascii_detection import analyze_ascii
from .config import Settings, get_settings
from .content_checks import check_ethics, check_facts, check_profanity, check_scam
from .errors import ValidationError
from .models import MAX_CONTENT_LENGTH, AnalysisResult
from .providers import GroqFactChecker, PerspectiveClient

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = MAX_CONTENT_LENGTH
ALLOWED_OPTIONS = ["profanity", "fact-check", "scam", "ethics", "ascii"]

SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
HTML_TAG = re.compile(r"<[^>]*>")

UNAVAILABLE_MESSAGE = "Analysis temporarily unavailable"


def validate_text(text) -> str:
    """Reject non-string, empty or oversized text; strip markup."""
    if not text or not isinstance(text, str):
        raise ValidationError("Invalid text input")
    if len(text) > MAX_TEXT_LENGTH:
        raise ValidationError(f"Text too long (max {MAX_TEXT_LENGTH} characters)")

    sanitized = SCRIPT_BLOCK.sub("", text)
    sanitized = HTML_TAG.sub("", sanitized).strip()
    if not sanitized:
        raise ValidationError("Invalid text input")
    return sanitized


def validate_options(options) -> List[str]:
    """Keep known options in request order; at least one is required."""
    if not isinstance(options, list):
        raise ValidationError("Options must be an array")
    valid = [o for o in options if isinstance(o, str) and o in ALLOWED_OPTIONS]
    if not valid:
        raise ValidationError("At least one valid analysis option is required")
    return valid


class TextAnalysisPipeline:
    """
    Runs the requested analysis options over one piece of text.

    Providers are optional; pass them explicitly or build them from
    settings with from_settings().
    """

    def __init__(
        self,
        perspective: Optional[PerspectiveClient] = None,
        fact_checker: Optional[GroqFactChecker] = None,
    ):
        self.perspective = perspective
        self.fact_checker = fact_checker

        self._handlers: Dict[str, Callable] = {
            "profanity": self._profanity,
            "fact-check": self._fact_check,
            "scam": self._scam,
            "ethics": self._ethics,
            "ascii": self._ascii,
        }

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TextAnalysisPipeline":
        settings = settings or get_settings()

        perspective = None
        if settings.perspective_api_key:
            perspective = PerspectiveClient(settings.perspective_api_key, timeout=settings.provider_timeout)
        else:
            logger.info("PERSPECTIVE_API_KEY not set, profanity check uses local heuristic")

        fact_checker = None
        if settings.groq_api_key:
            fact_checker = GroqFactChecker(
                api_key=settings.groq_api_key,
                model=settings.groq_model,
                timeout=settings.provider_timeout,
            )
        else:
            logger.info("GROQ_API_KEY not set, fact check uses local heuristic")

        return cls(perspective=perspective, fact_checker=fact_checker)

    async def analyze(self, text, options) -> List[AnalysisResult]:
        """Validate input, then evaluate each option in order."""
        sanitized = validate_text(text)
        valid_options = validate_options(options)

        logger.info(f"Analyzing text with options: {', '.join(valid_options)}")

        results = []
        for option in valid_options:
            try:
                result = await self._handlers[option](sanitized)
            except Exception as e:
                logger.error(f"Error in {option} analysis: {e}")
                result = AnalysisResult(type=option, status="warning", message=UNAVAILABLE_MESSAGE)
            results.append(result)
        return results

    # =====================================================================
    # Option handlers
    # =====================================================================

    async def _profanity(self, text: str) -> AnalysisResult:
        if self.perspective is None:
            return check_profanity(text)
        try:
            return await self.perspective.analyze_profanity(text)
        except Exception as e:
            logger.warning(f"Perspective unavailable, using local heuristic: {e}")
            return check_profanity(text)

    async def _fact_check(self, text: str) -> AnalysisResult:
        if self.fact_checker is None:
            return check_facts(text)
        try:
            return await self.fact_checker.check_facts(text)
        except Exception as e:
            logger.warning(f"Fact checker unavailable, using local heuristic: {e}")
            return check_facts(text)

    async def _scam(self, text: str) -> AnalysisResult:
        return check_scam(text)

    async def _ethics(self, text: str) -> AnalysisResult:
        return check_ethics(text)

    async def _ascii(self, text: str) -> AnalysisResult:
        return analyze_ascii(text)
