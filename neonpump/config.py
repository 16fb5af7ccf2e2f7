from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL: str = "llama-3.3-70b-versatile"
    GROQ_TEMPERATURE: float = 0.7

    # Durable storage: one text blob per key under DATA_DIR
    DATA_DIR: Path = Path.home() / ".neonpump"
    PLANS_KEY: str = "neon_plans"
    WEIGHT_LOG_KEY: str = "neon_weight_log"


_SECRET_KEYS = ["APP_ENV", "LOG_LEVEL", "GROQ_API_KEY", "GROQ_MODEL", "GROQ_TEMPERATURE", "DATA_DIR"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Allow Streamlit Cloud secrets to override or provide env values
    overrides: dict = {}
    try:
        import streamlit as _st  # type: ignore
        sec = getattr(_st, "secrets", None)
        if sec:
            for k in _SECRET_KEYS:
                if k in sec and sec[k] is not None and sec[k] != "":
                    overrides[k] = sec[k]
    except Exception:
        # No secrets.toml, or not running under Streamlit
        pass
    s = Settings(**overrides)  # type: ignore[call-arg]
    # Extra fallback: if GROQ_API_KEY is blank/None but present in process env, use it
    if not s.GROQ_API_KEY:
        env_key = os.environ.get("GROQ_API_KEY")
        if env_key:
            s.GROQ_API_KEY = env_key
    return s


_LOGGING_CONFIGURED = False


def configure_logging(settings: Settings | None = None) -> None:
    """Apply LOG_LEVEL to the root logger once per process."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _LOGGING_CONFIGURED = True
