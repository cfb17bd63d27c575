"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from hearth.config import HearthSettings


def test_defaults_disable_ai() -> None:
    settings = HearthSettings(_env_file=None)
    assert settings.ai_enabled is False
    assert settings.expiring_soon_days == 7
    assert settings.match_typo_threshold is None


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HEARTH_AI_ENDPOINT", "https://worker.example")
    monkeypatch.setenv("HEARTH_SUGGESTION_POOL_SIZE", "8")

    settings = HearthSettings(_env_file=None)

    assert settings.ai_enabled is True
    assert settings.suggestion_pool_size == 8


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        HearthSettings(_env_file=None, suggestion_pool_size=0)
    with pytest.raises(ValidationError):
        HearthSettings(_env_file=None, log_level="LOUD")
