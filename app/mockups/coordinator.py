"""Batch coordinator: owns one batch lifecycle from request to aggregated result."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass

from app.ai.providers.base import DesignAnalyzer, ImageModel
from app.config import Settings
from app.mockups.errors import MockupError, PersonaLockFailedError
from app.mockups.events import BatchComplete, BatchEvent, BatchFailed, EventStream, JobFailed, JobResult, JobUpdate, PersonaReady
from app.mockups.knowledge import get_product
from app.mockups.limits import Clock, MonotonicClock, RateLimiter, SchedulerPolicy
from app.mockups.models import DEFAULT_DESIGN_ANALYSIS, BatchRequest, BatchStatus, CreditUsage, DesignAnalysis, GeneratedImage, GenerationJob, MockupBatch, PersonaLock, SharedLocks
from app.mockups.persona import generate_persona_description, generate_persona_headshot
from app.mockups.queue import build_jobs, validate_variants
from app.mockups.refine import RefinementRequest, refine_mockup
from app.mockups.scheduler import Scheduler
from app.utils.ids import generate_batch_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
  """Final outcome of a batch run."""

  batch: MockupBatch
  status: BatchStatus
  credits: CreditUsage
  error: MockupError | None = None


class BatchRun:
  """Handle returned by BatchCoordinator.start()."""

  def __init__(self, batch: MockupBatch) -> None:
    self.batch = batch
    self._stream = EventStream()
    self._task: asyncio.Task[BatchResult] | None = None
    self._scheduler: Scheduler | None = None
    self._cancel_requested = False

  @property
  def id(self) -> str:
    return self.batch.id

  @property
  def cancel_requested(self) -> bool:
    return self._cancel_requested

  def events(self) -> AsyncIterator[BatchEvent]:
    """Iterate events in emission order until the batch reaches a final state."""
    return self._stream.__aiter__()

  async def next_event(self, timeout: float | None = None) -> BatchEvent | None:
    """Next event or None when the batch is over; raises TimeoutError after `timeout` seconds."""
    return await self._stream.next_event(timeout)

  @property
  def done(self) -> bool:
    return self._task is not None and self._task.done()

  async def result(self) -> BatchResult:
    """Wait for the final outcome; a canceled awaiter does not cancel the batch."""
    if self._task is None:
      raise RuntimeError(f"Batch {self.batch.id} was never started.")
    try:
      return await asyncio.shield(self._task)
    except asyncio.CancelledError:
      if not self._task.cancelled():
        raise
      return BatchResult(batch=self.batch, status="canceled", credits=self.batch.credits())

  def _attach(self, task: asyncio.Task[BatchResult]) -> None:
    self._task = task
    task.add_done_callback(self._on_done)

  def _on_done(self, task: asyncio.Task[BatchResult]) -> None:
    if task.cancelled():
      # A task canceled before its first step never reaches its own cleanup.
      if not self._stream.closed:
        self.batch.status = "canceled"
        self._stream.publish(BatchFailed("canceled"))
    elif task.exception() is not None:
      # Marks the exception retrieved; it was already streamed as internal_error.
      logger.debug("Batch %s task ended with %s", self.batch.id, type(task.exception()).__name__)
    self._stream.close()

  def cancel(self) -> None:
    """Stop the batch; jobs already delivered stay delivered."""
    if self._cancel_requested or self.done:
      return
    self._cancel_requested = True
    logger.info("Cancel requested for batch %s", self.batch.id)
    if self._scheduler is not None:
      self._scheduler.stop()
    elif self._task is not None:
      self._task.cancel()


class BatchCoordinator:
  """Validate a request, lock the persona, run the scheduler and relay events."""

  def __init__(
    self,
    image_model: ImageModel,
    *,
    rate_limiter: RateLimiter,
    slots: asyncio.Semaphore,
    policy: SchedulerPolicy,
    design_analyzer: DesignAnalyzer | None = None,
    clock: Clock | None = None,
    max_jobs_per_batch: int = 50,
    persona_max_retries: int = 3,
    persona_headshot_enabled: bool = True,
  ) -> None:
    self._image_model = image_model
    self._rate_limiter = rate_limiter
    self._slots = slots
    self._policy = policy
    self._design_analyzer = design_analyzer
    self._clock = clock or MonotonicClock()
    self._max_jobs_per_batch = max_jobs_per_batch
    self._persona_max_retries = persona_max_retries
    self._persona_headshot_enabled = persona_headshot_enabled

  @classmethod
  def from_settings(
    cls,
    settings: Settings,
    image_model: ImageModel,
    *,
    rate_limiter: RateLimiter,
    slots: asyncio.Semaphore,
    design_analyzer: DesignAnalyzer | None = None,
    clock: Clock | None = None,
  ) -> BatchCoordinator:
    return cls(
      image_model,
      rate_limiter=rate_limiter,
      slots=slots,
      policy=SchedulerPolicy.from_settings(settings),
      design_analyzer=design_analyzer,
      clock=clock,
      max_jobs_per_batch=settings.max_jobs_per_batch,
      persona_max_retries=settings.persona_max_retries,
      persona_headshot_enabled=settings.persona_headshot_enabled,
    )

  def start(self, request: BatchRequest) -> BatchRun:
    """Validate synchronously, then run the batch in a background task."""
    total = validate_variants(request.colors, request.angles, request.sizes, max_jobs=self._max_jobs_per_batch)
    product = get_product(request.product_key, strict=self._policy.strict_knowledge)

    batch = MockupBatch(id=generate_batch_id(), jobs=[], requested=total)
    run = BatchRun(batch)
    run._attach(asyncio.create_task(self._execute(run, request, requires_persona=product.is_wearable), name=f"mockup-{batch.id}"))
    logger.info("Batch %s started: product=%s jobs=%s", batch.id, product.id, total)
    return run

  async def refine(self, request: RefinementRequest) -> GeneratedImage:
    """Re-render one delivered mockup with extra instructions, sharing the batch limits."""
    return await refine_mockup(request, self._image_model, rate_limiter=self._rate_limiter, slots=self._slots, policy=self._policy, clock=self._clock)

  async def _analyze_design(self, request: BatchRequest) -> DesignAnalysis:
    if request.design_analysis is not None:
      return request.design_analysis
    if self._design_analyzer is None:
      return DEFAULT_DESIGN_ANALYSIS
    try:
      return await self._design_analyzer.analyze(request.design_image, request.design_mime_type)
    except Exception as exc:
      logger.warning("Design analysis failed; using default analysis: %s", exc)
      return DEFAULT_DESIGN_ANALYSIS

  async def _resolve_persona(self, request: BatchRequest) -> PersonaLock:
    if request.persona_lock is not None:
      persona_lock = request.persona_lock
      logger.info("Reusing persona %s", persona_lock.persona.id)
    else:
      assert request.model_details is not None
      persona_lock = generate_persona_description(request.model_details, request.persona_seed)

    if self._persona_headshot_enabled and not persona_lock.has_headshot:
      persona_lock = await generate_persona_headshot(
        persona_lock,
        self._image_model,
        max_retries=self._persona_max_retries,
        retry_delay=self._policy.retry_delay_seconds,
        timeout=self._policy.job_timeout_seconds,
        rate_limiter=self._rate_limiter,
        clock=self._clock,
      )
    return persona_lock

  def _relay(self, run: BatchRun, completed: int, total: int, job: GenerationJob) -> None:
    stream = run._stream
    variant = job.variant
    stream.publish(JobUpdate(job.id, job.status, job.retry_count, variant.color.name, variant.angle, variant.size, completed, total))
    if job.status == "completed" and job.result is not None:
      stream.publish(JobResult(job.id, job.result.data, job.result.mime_type, job.prompt))
    elif job.status == "failed":
      stream.publish(JobFailed(job.id, job.error or "Generation failed"))

  def _finish(self, run: BatchRun, status: BatchStatus, error: MockupError | None = None) -> BatchResult:
    batch = run.batch
    batch.status = status
    batch.completed_at = time.time()
    credits = batch.credits()
    logger.info("Batch %s %s: %s/%s succeeded, %s refundable", batch.id, status, credits.succeeded, credits.requested, credits.refundable)
    return BatchResult(batch=batch, status=status, credits=credits, error=error)

  async def _execute(self, run: BatchRun, request: BatchRequest, *, requires_persona: bool) -> BatchResult:
    batch = run.batch
    stream = run._stream
    batch.status = "processing"
    try:
      design = await self._analyze_design(request)

      persona_lock: PersonaLock | None = None
      if requires_persona and (request.persona_lock is not None or request.model_details is not None):
        try:
          persona_lock = await self._resolve_persona(request)
        except PersonaLockFailedError as exc:
          stream.publish(BatchFailed(exc.reason, str(exc)))
          return self._finish(run, "failed", exc)
        batch.persona_lock = persona_lock
        stream.publish(PersonaReady(persona_lock.persona.id, persona_lock.persona.name, persona_lock.has_headshot, persona_lock.headshot, persona_lock.headshot_mime_type))

      shared = SharedLocks(
        product_key=request.product_key,
        design_image=request.design_image,
        design_mime_type=request.design_mime_type,
        design=design,
        brand_style=request.brand_style,
        journey=request.journey,
        material_condition=request.material_condition,
        lighting_preset=request.lighting_preset,
        environment_prompt=request.environment_prompt,
        persona_lock=persona_lock,
      )
      batch.jobs = build_jobs(request.colors, request.angles, request.sizes, shared, max_jobs=self._max_jobs_per_batch)

      scheduler = Scheduler(self._image_model, rate_limiter=self._rate_limiter, slots=self._slots, policy=self._policy, clock=self._clock)
      run._scheduler = scheduler
      if run.cancel_requested:
        scheduler.stop()
      await scheduler.run(batch.jobs, lambda completed, total, job: self._relay(run, completed, total, job))

      if run.cancel_requested:
        stream.publish(BatchFailed("canceled"))
        return self._finish(run, "canceled")

      stream.publish(BatchComplete(succeeded=batch.succeeded, failed=batch.failed, total=batch.total))
      if batch.succeeded > 0:
        return self._finish(run, "completed")
      failures = batch.failures()
      return self._finish(run, "failed", failures[0] if failures else None)
    except asyncio.CancelledError:
      if not run.cancel_requested:
        raise
      stream.publish(BatchFailed("canceled"))
      return self._finish(run, "canceled")
    except Exception as exc:
      logger.error("Batch %s crashed: %s", batch.id, exc, exc_info=True)
      batch.status = "failed"
      stream.publish(BatchFailed("internal_error", str(exc)))
      raise
    finally:
      stream.close()
