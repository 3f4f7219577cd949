"""Bounded, rate-limited execution of generation jobs with per-job retries."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from app.ai.providers.base import ImageModel
from app.mockups.errors import JobTimeoutError, MockupError
from app.mockups.limits import Clock, MonotonicClock, RateLimiter, SchedulerPolicy
from app.mockups.locks import RenderInputs, compile_locks
from app.mockups.models import GenerationJob, ReferenceImage

logger = logging.getLogger(__name__)

CANCELED_ERROR = "canceled"

# (completed_count, total_count, job) after every job transition.
ProgressCallback = Callable[[int, int, GenerationJob], None]


@dataclass
class RetryState:
  """Attempt bookkeeping for one job while it is processing."""

  attempt: int = 0
  last_error: BaseException | None = None


def reference_images_for(job: GenerationJob) -> tuple[ReferenceImage, ...]:
  """Design upload first, then the persona headshot when the batch has one."""
  shared = job.shared
  references = [ReferenceImage(shared.design_image, shared.design_mime_type, "design")]
  persona_lock = shared.persona_lock
  if persona_lock is not None and persona_lock.headshot is not None:
    references.append(ReferenceImage(persona_lock.headshot, persona_lock.headshot_mime_type or "image/png", "persona"))
  return tuple(references)


class Scheduler:
  """Run one batch's jobs through a fixed pool of workers.

  Each worker holds a slot of the shared semaphore while its job is processing and takes one
  rate-limiter token per upstream attempt. The persona is never generated here.
  """

  def __init__(self, image_model: ImageModel, *, rate_limiter: RateLimiter, slots: asyncio.Semaphore, policy: SchedulerPolicy, clock: Clock | None = None) -> None:
    self._image_model = image_model
    self._rate_limiter = rate_limiter
    self._slots = slots
    self._policy = policy
    self._clock = clock or MonotonicClock()
    self._pending: deque[GenerationJob] = deque()
    self._workers: list[asyncio.Task[None]] = []
    self._stopping = False
    self._finished = 0
    self._total = 0
    self._on_progress: ProgressCallback | None = None

  async def run(self, jobs: Sequence[GenerationJob], on_progress: ProgressCallback | None = None) -> list[GenerationJob]:
    """Process every job until it is terminal, or until stop() is called."""
    self._pending = deque(job for job in jobs if job.status == "pending")
    self._total = len(jobs)
    self._finished = sum(1 for job in jobs if job.is_terminal)
    self._on_progress = on_progress

    worker_count = min(self._policy.max_concurrent_jobs, len(self._pending))
    self._workers = [asyncio.create_task(self._worker(index), name=f"mockup-worker-{index}") for index in range(worker_count)]
    results = await asyncio.gather(*self._workers, return_exceptions=True)
    for result in results:
      if isinstance(result, Exception):
        logger.error("Worker crashed: %s", result, exc_info=result)
    return list(jobs)

  def stop(self) -> None:
    """Stop admitting jobs and cancel in-flight attempts; unadmitted jobs stay pending."""
    if self._stopping:
      return
    self._stopping = True
    for task in self._workers:
      task.cancel()

  def _report(self, job: GenerationJob) -> None:
    if self._on_progress is not None:
      self._on_progress(self._finished, self._total, job)

  def _finish(self, job: GenerationJob) -> None:
    self._finished += 1
    self._report(job)

  async def _worker(self, index: int) -> None:
    while True:
      async with self._slots:
        if self._stopping or not self._pending:
          return
        job = self._pending.popleft()
        logger.debug("Worker %s admitted %s (%s)", index, job.id, job.variant.label)
        await self._process(job)

  async def _process(self, job: GenerationJob) -> None:
    job.mark_processing()
    self._report(job)
    try:
      await self._attempt_until_terminal(job)
    except asyncio.CancelledError:
      if not job.is_terminal:
        job.mark_failed(CANCELED_ERROR)
        logger.info("Job %s canceled", job.id)
        self._finish(job)
      raise

  async def _attempt_until_terminal(self, job: GenerationJob) -> None:
    policy = self._policy
    try:
      spec = compile_locks(RenderInputs.from_job(job), strict=policy.strict_knowledge)
    except MockupError as exc:
      # Bad knowledge keys will not improve with retries.
      job.mark_failed(str(exc))
      logger.error("Job %s failed before generation: %s", job.id, exc)
      self._finish(job)
      return

    job.prompt = spec.prompt
    references = reference_images_for(job)
    state = RetryState()
    while True:
      state.attempt += 1
      await self._rate_limiter.acquire()
      try:
        image = await asyncio.wait_for(
          self._image_model.generate_image(spec.prompt, negative_prompt=spec.negative_prompt, reference_images=references),
          timeout=policy.job_timeout_seconds,
        )
      except asyncio.TimeoutError:
        state.last_error = JobTimeoutError(f"Attempt {state.attempt} exceeded {policy.job_timeout_seconds}s deadline.")
      except Exception as exc:
        state.last_error = exc
      else:
        job.mark_completed(image)
        logger.info("Job %s completed on attempt %s", job.id, state.attempt)
        self._finish(job)
        return

      retry_count = job.record_retry()
      if retry_count >= policy.max_retries:
        job.mark_failed(str(state.last_error) or type(state.last_error).__name__)
        logger.error("Job %s failed after %s attempts: %s", job.id, state.attempt, state.last_error)
        self._finish(job)
        return

      delay = policy.retry_delay_seconds * retry_count
      logger.warning("Job %s attempt %s failed: %s. Retrying in %.1fs", job.id, state.attempt, state.last_error, delay)
      self._report(job)
      await self._clock.sleep(delay)
