"""Tests for settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from chiptheory import config
from chiptheory.config import RESOLUTION_SECONDS, Settings, configure, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("CHIPTHEORY_BEATS_PER_MEASURE", raising=False)
    settings = Settings(_env_file=None)

    assert settings.resolution_seconds == RESOLUTION_SECONDS
    assert settings.beats_per_measure == 4
    assert settings.cursor_lag_ms == 70


def test_environment_override(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("CHIPTHEORY_BEATS_PER_MEASURE", "3")
    monkeypatch.setenv("CHIPTHEORY_STORE_DIR", "/tmp/chiptheory-test")

    settings = Settings(_env_file=None)

    assert settings.beats_per_measure == 3
    assert settings.store_dir == Path("/tmp/chiptheory-test")


def test_rejects_non_positive_resolution():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, resolution_seconds=0)


def test_configure_replaces_global(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(config, "_settings", None)

    configured = configure(beats_per_measure=6)

    assert get_settings() is configured
    assert get_settings().beats_per_measure == 6
