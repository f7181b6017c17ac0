"""
EXTERNAL PROVIDERS - Third-party AI analysis clients

- PerspectiveClient: toxicity/profanity scoring over HTTP (httpx)
- GroqFactChecker: LLM fact-check assessment (Groq)

Both raise on failure (ProviderError, httpx errors, CircuitOpenError).
Falling back to the local heuristics is the pipeline's job, not theirs.
"""

import logging
from typing import Optional

import httpx
from groq import AsyncGroq

from .errors import ProviderError
from .models import AnalysisResult
from .resilience import CircuitBreaker, retry_async

logger = logging.getLogger(__name__)

PERSPECTIVE_URL = "https://commentanalyzer.googleapis.com/v1alpha1/comments:analyze"
PERSPECTIVE_ATTRIBUTES = ["TOXICITY", "SEVERE_TOXICITY", "IDENTITY_ATTACK", "INSULT", "PROFANITY", "THREAT"]
# Attributes that decide the profanity verdict
PERSPECTIVE_SCORED = ["TOXICITY", "PROFANITY", "INSULT"]

FACT_CHECK_FLAGS = ["false", "misleading", "inaccurate"]


class PerspectiveClient:
    """Toxicity scoring via the Perspective comment analyzer."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        max_attempts: int = 2,
        retry_delay: float = 1.0,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker("perspective", failure_threshold=3, reset_timeout=30.0)
        self.transport = transport
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    async def analyze_profanity(self, text: str) -> AnalysisResult:
        data = await self.breaker.call(
            lambda: retry_async(
                lambda: self._request(text),
                max_attempts=self.max_attempts,
                base_delay=self.retry_delay,
            )
        )
        return self._to_result(data)

    async def _request(self, text: str) -> dict:
        payload = {
            "comment": {"text": text},
            "requestedAttributes": {name: {} for name in PERSPECTIVE_ATTRIBUTES},
            "languages": ["en"],
        }
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            response = await client.post(
                PERSPECTIVE_URL,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        if response.status_code != 200:
            raise ProviderError("perspective", f"HTTP {response.status_code}", response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError("perspective", f"malformed response: {e}")

    @staticmethod
    def _to_result(data: dict) -> AnalysisResult:
        scores = data.get("attributeScores")
        if not isinstance(scores, dict):
            raise ProviderError("perspective", "response has no attributeScores")

        max_score = 0.0
        for name in PERSPECTIVE_SCORED:
            value = scores.get(name, {}).get("summaryScore", {}).get("value", 0) or 0
            max_score = max(max_score, float(value))

        if max_score > 0.7:
            status, message = "danger", "Inappropriate content detected"
        elif max_score > 0.4:
            status, message = "warning", "Potentially inappropriate content"
        else:
            status, message = "clean", "No inappropriate content detected"

        return AnalysisResult(
            type="profanity check",
            status=status,
            message=message,
            confidence=round(max_score, 4),
        )


class GroqFactChecker:
    """Asks an LLM for a short factual-accuracy assessment."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "llama-3.1-8b-instant",
        timeout: float = 10.0,
        client: Optional[AsyncGroq] = None,
        breaker: Optional[CircuitBreaker] = None,
        max_attempts: int = 2,
        retry_delay: float = 1.0,
    ):
        # Retries are driven by retry_async, not the SDK
        self.client = client or AsyncGroq(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.breaker = breaker or CircuitBreaker("groq", failure_threshold=3, reset_timeout=30.0)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    async def check_facts(self, text: str) -> AnalysisResult:
        assessment = await self.breaker.call(
            lambda: retry_async(
                lambda: self._ask(text),
                max_attempts=self.max_attempts,
                base_delay=self.retry_delay,
            )
        )
        lowered = assessment.lower()
        problematic = any(flag in lowered for flag in FACT_CHECK_FLAGS)
        return AnalysisResult(
            type="fact check",
            status="warning" if problematic else "clean",
            message="Claims may need verification" if problematic else "No factual concerns detected",
        )

    async def _ask(self, text: str) -> str:
        response = await self.client.chat.completions.create(
            messages=[
                {
                    "role": "system",
                    "content": "You are a fact-checking assistant. Assess factual accuracy briefly and plainly.",
                },
                {
                    "role": "user",
                    "content": f'Analyze this text for factual accuracy and misinformation: "{text}". '
                               "Respond with a brief assessment.",
                },
            ],
            model=self.model,
            temperature=0.3,
            max_tokens=200,
        )
        if not response.choices or not response.choices[0].message.content:
            raise ProviderError("groq", "empty completion")
        return response.choices[0].message.content.strip()
