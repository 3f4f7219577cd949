"""Tests for environment-driven settings."""

from __future__ import annotations

import os

import pytest

from app.config import get_settings
from app.utils.env import load_env_file, parse_env_lines


def _fresh_settings():
  return get_settings.__wrapped__()


def test_parse_env_lines_handles_comments_exports_and_quotes() -> None:
  parsed = parse_env_lines(["# comment", "", "export GEMINI_API_KEY='abc'", 'MOCKUP_ENV="staging"', "MALFORMED", "=value", "MOCKUP_DEBUG = true "])
  assert parsed == {"GEMINI_API_KEY": "abc", "MOCKUP_ENV": "staging", "MOCKUP_DEBUG": "true"}


def test_load_env_file_does_not_override_by_default(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
  env_file = tmp_path / ".env"
  env_file.write_text("MOCKUP_ENV=production\nMOCKUP_IMAGE_MODEL=custom-model\n", encoding="utf-8")
  # Isolate the process environment from values the file loads.
  monkeypatch.setattr(os, "environ", dict(os.environ))
  os.environ["MOCKUP_ENV"] = "test"
  os.environ.pop("MOCKUP_IMAGE_MODEL", None)

  load_env_file(env_file)

  assert _fresh_settings().environment == "test"
  assert _fresh_settings().image_model == "custom-model"


def test_defaults_match_upstream_quota(monkeypatch: pytest.MonkeyPatch) -> None:
  for name in ("MOCKUP_MAX_CONCURRENT_JOBS", "MOCKUP_RATE_LIMIT_PER_MINUTE", "MOCKUP_MAX_RETRIES", "MOCKUP_RETRY_DELAY_SECONDS", "MOCKUP_JOB_TIMEOUT_SECONDS", "MOCKUP_PERSONA_HEADSHOT"):
    monkeypatch.delenv(name, raising=False)
  settings = _fresh_settings()
  assert settings.max_concurrent_jobs == 3
  assert settings.rate_limit_per_minute == 10
  assert settings.max_retries == 3
  assert settings.retry_delay_seconds == 2.0
  assert settings.job_timeout_seconds == 60.0
  assert settings.persona_headshot_enabled is True
  assert settings.gemini_api_key is None


@pytest.mark.parametrize(
  ("name", "value"),
  [
    ("MOCKUP_MAX_CONCURRENT_JOBS", "0"),
    ("MOCKUP_RATE_LIMIT_PER_MINUTE", "-1"),
    ("MOCKUP_JOB_TIMEOUT_SECONDS", "0"),
    ("MOCKUP_LOG_BACKUP_COUNT", "-2"),
    ("MOCKUP_ALLOWED_ORIGINS", "*"),
    ("MOCKUP_ALLOWED_ORIGINS", " , "),
  ],
)
def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
  monkeypatch.setenv(name, value)
  with pytest.raises(ValueError):
    _fresh_settings()


def test_origins_and_flags_are_parsed(monkeypatch: pytest.MonkeyPatch) -> None:
  monkeypatch.setenv("MOCKUP_ALLOWED_ORIGINS", "https://a.example, https://b.example")
  monkeypatch.setenv("MOCKUP_PERSONA_HEADSHOT", "off")
  monkeypatch.setenv("GEMINI_API_KEY", "  ")
  settings = _fresh_settings()
  assert settings.allowed_origins == ("https://a.example", "https://b.example")
  assert settings.persona_headshot_enabled is False
  assert settings.gemini_api_key is None
