"""
CONFIGURATION - Environment-driven settings

Values come from the process environment, optionally seeded from a .env
file. Provider keys are optional: a missing key disables that provider and
the local heuristic is used instead.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    perspective_api_key: Optional[str]
    groq_api_key: Optional[str]
    groq_model: str
    cache_ttl_seconds: float
    cache_max_entries: int
    provider_timeout: float
    log_level: str


def get_settings() -> Settings:
    """Read settings from the environment on every call (tests monkeypatch env)."""
    return Settings(
        api_key=os.getenv("THREATLENS_API_KEY") or None,
        perspective_api_key=os.getenv("PERSPECTIVE_API_KEY") or None,
        groq_api_key=os.getenv("GROQ_API_KEY") or None,
        groq_model=os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"),
        cache_ttl_seconds=float(os.getenv("THREAT_INTEL_CACHE_TTL", "300")),
        cache_max_entries=int(os.getenv("THREAT_INTEL_CACHE_MAX_ENTRIES", "10000")),
        provider_timeout=float(os.getenv("PROVIDER_TIMEOUT", "10")),
        log_level=_log_level(os.getenv("LOG_LEVEL", "INFO")),
    )


def _log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in VALID_LOG_LEVELS:
        # Logging is not configured yet, so report on stderr directly
        print(f"Unknown LOG_LEVEL '{value}', using INFO", file=sys.stderr)
        return "INFO"
    return level
