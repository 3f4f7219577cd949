"""Error taxonomy for batch mockup generation."""

from __future__ import annotations


class MockupError(Exception):
  """Base class for mockup generation errors."""


class BatchValidationError(MockupError):
  """Raised when a batch request is malformed or exceeds the job-count bound."""


class UnknownKnowledgeKeyError(MockupError, KeyError):
  """Raised in strict mode when a product, style or preset key is not in the knowledge tables."""

  def __init__(self, table: str, key: str) -> None:
    super().__init__(f"Unknown {table} key '{key}'.")
    self.table = table
    self.key = key

  def __str__(self) -> str:
    # KeyError quotes its argument; keep the plain message instead.
    return str(self.args[0])


class PersonaLockFailedError(MockupError):
  """Raised when the persona reference could not be produced; fatal to the whole batch."""

  reason = "persona_lock_failed"

  def __init__(self, message: str, *, attempts: int = 0, last_error: BaseException | None = None) -> None:
    super().__init__(message)
    self.attempts = attempts
    self.last_error = last_error


class JobTransientError(MockupError):
  """Raised for a retryable upstream failure (empty response, 5xx, quota)."""


class JobTimeoutError(JobTransientError):
  """Raised when a single upstream attempt exceeds its deadline."""


class JobFailedError(MockupError):
  """Terminal failure of one job after its retry budget is exhausted."""

  def __init__(self, job_id: str, message: str) -> None:
    super().__init__(message)
    self.job_id = job_id


class InvalidJobTransitionError(MockupError):
  """Raised when a job state change is not allowed by the job state machine."""


class RefinementFailedError(MockupError):
  """Raised when every attempt to refine a delivered mockup failed."""

  def __init__(self, message: str, *, attempts: int = 0, last_error: BaseException | None = None) -> None:
    super().__init__(message)
    self.attempts = attempts
    self.last_error = last_error
