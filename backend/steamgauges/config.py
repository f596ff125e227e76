"""Configuration — reads all settings from environment variables."""

import os
from typing import Optional


def _env_csv(name: str) -> list[str]:
    raw = os.getenv(name, "")
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return float(raw)


STEAMGAUGES_URL: str = os.getenv("STEAMGAUGES_URL", "https://steamgaug.es/api/v2")
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "4"))
CACHE_TTL_SECONDS: float = float(os.getenv("CACHE_TTL_SECONDS", "10"))
# None means "wait one TTL after a failed refresh before contacting steamgaug.es again".
RETRY_COOLDOWN_SECONDS: Optional[float] = _env_optional_float("RETRY_COOLDOWN_SECONDS")
CORS_ORIGINS: list[str] = _env_csv("CORS_ORIGINS")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
