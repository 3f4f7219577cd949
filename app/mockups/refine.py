"""Refine a delivered mockup by re-rendering its prompt with extra instructions."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from app.ai.backoff import RetryExhaustedError, retry_with_backoff
from app.ai.providers.base import ImageModel
from app.mockups.errors import BatchValidationError, RefinementFailedError
from app.mockups.limits import Clock, MonotonicClock, RateLimiter, SchedulerPolicy
from app.mockups.locks import compile_refinement_prompt
from app.mockups.models import GeneratedImage, ReferenceImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefinementRequest:
  """A previous render's prompt plus the change the caller wants."""

  original_prompt: str
  refinement: str
  design_image: bytes = field(repr=False)
  design_mime_type: str = "image/png"
  persona_headshot: bytes | None = field(default=None, repr=False)
  persona_headshot_mime_type: str = "image/png"

  def reference_images(self) -> tuple[ReferenceImage, ...]:
    references = [ReferenceImage(self.design_image, self.design_mime_type, "design")]
    if self.persona_headshot is not None:
      references.append(ReferenceImage(self.persona_headshot, self.persona_headshot_mime_type, "persona"))
    return tuple(references)


async def refine_mockup(
  request: RefinementRequest,
  image_model: ImageModel,
  *,
  rate_limiter: RateLimiter,
  slots: asyncio.Semaphore,
  policy: SchedulerPolicy,
  clock: Clock | None = None,
) -> GeneratedImage:
  """Render the refined image under the same slot, rate and retry limits as batch jobs.

  Raises BatchValidationError for empty instructions and RefinementFailedError once every attempt failed.
  """
  clock = clock or MonotonicClock()
  try:
    prompt = compile_refinement_prompt(request.original_prompt, request.refinement)
  except ValueError as exc:
    raise BatchValidationError(str(exc)) from exc
  references = request.reference_images()

  async def _attempt() -> GeneratedImage:
    await rate_limiter.acquire()
    return await asyncio.wait_for(image_model.generate_image(prompt, reference_images=references), timeout=policy.job_timeout_seconds)

  async with slots:
    try:
      image = await retry_with_backoff(_attempt, attempts=policy.max_retries, base_delay=policy.retry_delay_seconds, sleep=clock.sleep, label="Refinement")
    except RetryExhaustedError as exc:
      logger.error("Refinement failed after %s attempts: %s", exc.attempts, exc.last_error)
      raise RefinementFailedError(f"Refinement failed after {exc.attempts} attempts: {exc.last_error}", attempts=exc.attempts, last_error=exc.last_error) from exc

  logger.info("Refinement ready (%s bytes, persona reference=%s)", len(image.data), request.persona_headshot is not None)
  return image
