"""Exception types shared by the analysis pipeline and the API layer."""

from typing import Optional


class ValidationError(ValueError):
    """Rejected request input (bad text or no usable options)."""


class ProviderError(Exception):
    """An external analysis provider returned an unusable response."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class CircuitOpenError(Exception):
    """Raised instead of calling a provider whose circuit breaker is open."""

    def __init__(self, name: str):
        super().__init__(f"Circuit breaker '{name}' is OPEN - service unavailable")
        self.name = name
