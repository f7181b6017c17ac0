from __future__ import annotations

import pytest


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def no_provider_keys(monkeypatch):
    """Tests never talk to real providers or require an API key."""
    for name in ("THREATLENS_API_KEY", "PERSPECTIVE_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(name, raising=False)
