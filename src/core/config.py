"""Configuration helpers for API keys and environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple


def _split_csv(raw: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if not raw:
        return default
    parts = tuple(item.strip() for item in raw.split(",") if item.strip())
    return parts or default


@dataclass(slots=True)
class ApiSettings:
    """Centralised container for the external service credentials and tunables."""

    openai_api_key: Optional[str] = None
    google_maps_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 4000
    maps_timeout_s: float = 10.0
    cors_origins: Tuple[str, ...] = ("*",)
    sentry_dsn: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ApiSettings":
        """Load settings from the process environment."""

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            google_maps_api_key=os.getenv("GOOGLE_MAPS_API_KEY"),
            openai_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4o"),
            openai_temperature=float(os.getenv("OPENAI_TEMPERATURE", "0.7")),
            openai_max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "4000")),
            maps_timeout_s=float(os.getenv("GOOGLE_MAPS_TIMEOUT_S", "10.0")),
            cors_origins=_split_csv(os.getenv("CORS_ORIGINS"), ("*",)),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
        )

    def ensure(self, field: str) -> str:
        """Return the requested field and fail fast if it is missing."""

        value = getattr(self, field)
        if not value:
            raise RuntimeError(f"Missing configuration value: {field}")
        return value
