"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)


@dataclass(frozen=True)
class Settings:
  """Typed settings for the mockup service."""

  environment: str
  debug: bool
  allowed_origins: tuple[str, ...]
  log_max_bytes: int
  log_backup_count: int
  gemini_api_key: str | None
  image_model: str
  analysis_model: str
  max_concurrent_jobs: int
  rate_limit_per_minute: int
  max_retries: int
  retry_delay_seconds: float
  job_timeout_seconds: float
  max_jobs_per_batch: int
  persona_max_retries: int
  persona_headshot_enabled: bool
  strict_knowledge: bool
  sse_keepalive_seconds: float


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    return ("http://localhost:5173",)

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("MOCKUP_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("MOCKUP_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None, *, default: bool = False) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None or raw.strip() == "":
    return default

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _positive_int(name: str, default: str) -> int:
  value = int(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive integer.")
  return value


def _positive_float(name: str, default: str) -> float:
  value = float(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive number.")
  return value


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("MOCKUP_ENV", "development").lower()
  debug = _parse_bool(os.getenv("MOCKUP_DEBUG"))

  log_max_bytes = _positive_int("MOCKUP_LOG_MAX_BYTES", "5242880")  # 5MB default
  log_backup_count = int(os.getenv("MOCKUP_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("MOCKUP_LOG_BACKUP_COUNT must be zero or a positive integer.")

  # Scheduling limits mirror the upstream quota; they are shared across every batch in the process.
  max_concurrent_jobs = _positive_int("MOCKUP_MAX_CONCURRENT_JOBS", "3")
  rate_limit_per_minute = _positive_int("MOCKUP_RATE_LIMIT_PER_MINUTE", "10")
  max_retries = _positive_int("MOCKUP_MAX_RETRIES", "3")
  retry_delay_seconds = _positive_float("MOCKUP_RETRY_DELAY_SECONDS", "2.0")
  job_timeout_seconds = _positive_float("MOCKUP_JOB_TIMEOUT_SECONDS", "60.0")
  max_jobs_per_batch = _positive_int("MOCKUP_MAX_JOBS_PER_BATCH", "50")
  persona_max_retries = _positive_int("MOCKUP_PERSONA_MAX_RETRIES", "3")

  return Settings(
    environment=environment,
    debug=debug,
    allowed_origins=_parse_origins(os.getenv("MOCKUP_ALLOWED_ORIGINS")),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    gemini_api_key=_optional_str(os.getenv("GEMINI_API_KEY")),
    image_model=os.getenv("MOCKUP_IMAGE_MODEL", "gemini-3-pro-image-preview"),
    analysis_model=os.getenv("MOCKUP_ANALYSIS_MODEL", "gemini-2.5-flash"),
    max_concurrent_jobs=max_concurrent_jobs,
    rate_limit_per_minute=rate_limit_per_minute,
    max_retries=max_retries,
    retry_delay_seconds=retry_delay_seconds,
    job_timeout_seconds=job_timeout_seconds,
    max_jobs_per_batch=max_jobs_per_batch,
    persona_max_retries=persona_max_retries,
    persona_headshot_enabled=_parse_bool(os.getenv("MOCKUP_PERSONA_HEADSHOT"), default=True),
    strict_knowledge=_parse_bool(os.getenv("MOCKUP_STRICT_KNOWLEDGE")),
    sse_keepalive_seconds=_positive_float("MOCKUP_SSE_KEEPALIVE_SECONDS", "8.0"),
  )
