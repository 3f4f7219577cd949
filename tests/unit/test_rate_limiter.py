from __future__ import annotations

import asyncio

import pytest

from app.mockups.limits import RateLimiter, SchedulerPolicy


@pytest.mark.anyio
async def test_acquire_waits_for_the_window_to_slide(fake_clock) -> None:
  limiter = RateLimiter(2, 60.0, clock=fake_clock)

  await limiter.acquire()
  fake_clock.now = 10.0
  await limiter.acquire()
  assert fake_clock.sleeps == []

  # The third token frees up when the first one ages out at t=60.
  await limiter.acquire()
  assert fake_clock.sleeps == [50.0]
  assert fake_clock.now == 60.0
  assert limiter.in_window == 2


@pytest.mark.anyio
async def test_concurrent_callers_never_exceed_the_window(fake_clock) -> None:
  limiter = RateLimiter(3, 60.0, clock=fake_clock)
  granted: list[float] = []

  async def _take() -> None:
    await limiter.acquire()
    granted.append(fake_clock.now)

  await asyncio.gather(*(_take() for _ in range(7)))

  assert len(granted) == 7
  for start in granted:
    in_window = [moment for moment in granted if start <= moment < start + 60.0]
    assert len(in_window) <= 3


def test_invalid_limits_are_rejected() -> None:
  with pytest.raises(ValueError):
    RateLimiter(0)
  with pytest.raises(ValueError):
    RateLimiter(1, period=0)


def test_policy_projects_settings(monkeypatch: pytest.MonkeyPatch) -> None:
  from app.config import get_settings

  monkeypatch.setenv("MOCKUP_MAX_CONCURRENT_JOBS", "5")
  monkeypatch.setenv("MOCKUP_RETRY_DELAY_SECONDS", "0.5")
  policy = SchedulerPolicy.from_settings(get_settings.__wrapped__())
  assert policy.max_concurrent_jobs == 5
  assert policy.retry_delay_seconds == 0.5
  assert policy.strict_knowledge is True
