from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from agent.core.errors import ConfigError


load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


DEVELOPMENT_ENVS = {"dev", "development", "local"}


def is_development_env(app_env: str) -> bool:
    return app_env.lower() in DEVELOPMENT_ENVS


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

        key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        self.google_api_key: Optional[str] = key.strip() if key and key.strip() else None

        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
        self.max_output_tokens: int = _int("MAX_OUTPUT_TOKENS", 1000)
        self.temperature: Optional[float] = _optional_float("MODEL_TEMPERATURE")
        self.top_p: Optional[float] = _optional_float("MODEL_TOP_P")

    @property
    def is_development(self) -> bool:
        return is_development_env(self.app_env)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
