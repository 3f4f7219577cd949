"""Retry logic with linear backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)


class RetryExhaustedError(Exception):
  """Raised when every attempt failed."""

  def __init__(self, attempts: int, last_error: BaseException) -> None:
    super().__init__(f"Failed after {attempts} attempts: {last_error}")
    self.attempts = attempts
    self.last_error = last_error


async def retry_with_backoff(
  func: Callable[[], Awaitable[T]],
  *,
  attempts: int,
  base_delay: float,
  sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
  label: str = "call",
) -> T:
  """
  Await `func()` up to `attempts` times.

  Waits `base_delay * attempt` between attempts and raises RetryExhaustedError at the end.
  """
  last_error: BaseException | None = None
  for attempt in range(1, attempts + 1):
    try:
      return await func()
    except Exception as e:
      last_error = e
      if attempt == attempts:
        break
      delay = base_delay * attempt
      logger.warning("%s attempt %s/%s failed: %s. Retrying in %.1fs...", label, attempt, attempts, e, delay)
      await sleep(delay)

  assert last_error is not None
  raise RetryExhaustedError(attempts, last_error) from last_error
