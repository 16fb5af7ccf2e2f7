from __future__ import annotations

import logging

import pytest

from neonpump import config
from neonpump.config import Settings, configure_logging, get_settings


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("GROQ_API_KEY", "GROQ_TEMPERATURE", "PLANS_KEY", "WEIGHT_LOG_KEY", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    s = Settings(_env_file=None)  # type: ignore[call-arg]

    assert s.GROQ_API_KEY is None
    assert s.GROQ_TEMPERATURE == 0.7
    assert s.PLANS_KEY == "neon_plans"
    assert s.WEIGHT_LOG_KEY == "neon_weight_log"
    assert s.LOG_LEVEL == "INFO"


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("GROQ_API_KEY", "gsk-test")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    s = Settings(_env_file=None)  # type: ignore[call-arg]

    assert s.GROQ_API_KEY == "gsk-test"
    assert s.DATA_DIR == tmp_path


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    get_settings.cache_clear()
    monkeypatch.setenv("GROQ_API_KEY", "gsk-cached")
    try:
        first = get_settings()
        assert first is get_settings()
        assert first.GROQ_API_KEY == "gsk-cached"
    finally:
        get_settings.cache_clear()


def test_configure_logging_applies_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "_LOGGING_CONFIGURED", False)
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)

    configure_logging(Settings(LOG_LEVEL="debug", _env_file=None))  # type: ignore[call-arg]

    assert root.level == logging.DEBUG
    assert config._LOGGING_CONFIGURED is True
