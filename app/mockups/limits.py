"""Process-wide admission limits: clock, sliding-window rate limiter and scheduling policy."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from app.config import Settings

logger = logging.getLogger(__name__)


class Clock(Protocol):
  """Time source used for rate windows, backoff and deadlines."""

  def monotonic(self) -> float: ...

  async def sleep(self, seconds: float) -> None: ...


class MonotonicClock:
  """Real clock backed by time.monotonic and asyncio.sleep."""

  def monotonic(self) -> float:
    return time.monotonic()

  async def sleep(self, seconds: float) -> None:
    await asyncio.sleep(seconds)


class RateLimiter:
  """Sliding-window limiter: at most `max_calls` acquisitions in any `period` seconds.

  Shared by every batch in the process. Exhaustion delays the caller; it never raises.
  Waiters are served in arrival order because the lock is held while sleeping.
  """

  def __init__(self, max_calls: int, period: float = 60.0, *, clock: Clock | None = None) -> None:
    if max_calls <= 0:
      raise ValueError("max_calls must be positive.")
    if period <= 0:
      raise ValueError("period must be positive.")
    self.max_calls = max_calls
    self.period = period
    self._clock = clock or MonotonicClock()
    self._calls: deque[float] = deque()
    self._lock = asyncio.Lock()

  def _evict(self, now: float) -> None:
    while self._calls and now - self._calls[0] >= self.period:
      self._calls.popleft()

  @property
  def in_window(self) -> int:
    """Number of acquisitions inside the current window."""
    self._evict(self._clock.monotonic())
    return len(self._calls)

  async def acquire(self) -> None:
    """Take one token, waiting for the window to slide when exhausted."""
    async with self._lock:
      while True:
        now = self._clock.monotonic()
        self._evict(now)
        if len(self._calls) < self.max_calls:
          self._calls.append(now)
          return
        wait = self._calls[0] + self.period - now
        logger.debug("Rate limit reached (%s/%ss); waiting %.2fs", self.max_calls, self.period, wait)
        await self._clock.sleep(wait)


@dataclass(frozen=True)
class SchedulerPolicy:
  """Scheduling knobs applied to one batch run."""

  max_concurrent_jobs: int = 3
  max_retries: int = 3
  retry_delay_seconds: float = 2.0
  job_timeout_seconds: float = 60.0
  strict_knowledge: bool = False

  @classmethod
  def from_settings(cls, settings: Settings) -> SchedulerPolicy:
    return cls(
      max_concurrent_jobs=settings.max_concurrent_jobs,
      max_retries=settings.max_retries,
      retry_delay_seconds=settings.retry_delay_seconds,
      job_timeout_seconds=settings.job_timeout_seconds,
      strict_knowledge=settings.strict_knowledge,
    )
