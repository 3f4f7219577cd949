import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import Settings
from app.core.logging import _initialize_logging
from app.mockups.coordinator import BatchCoordinator
from app.mockups.limits import RateLimiter


def build_coordinator(settings: Settings, *, rate_limiter: RateLimiter, slots: asyncio.Semaphore) -> BatchCoordinator | None:
  """Wire the Gemini models into a coordinator; None when no API key is configured."""
  from app.ai.providers.gemini import GeminiDesignAnalyzer, GeminiImageModel

  logger = logging.getLogger("app.core.lifespan")
  if not settings.gemini_api_key:
    logger.warning("GEMINI_API_KEY is not set; mockup generation is disabled.")
    return None

  image_model = GeminiImageModel(settings.image_model, api_key=settings.gemini_api_key)
  analyzer = GeminiDesignAnalyzer(settings.analysis_model, api_key=settings.gemini_api_key)
  return BatchCoordinator.from_settings(settings, image_model, rate_limiter=rate_limiter, slots=slots, design_analyzer=analyzer)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging and the process-wide scheduling limits."""
  from app.config import get_settings

  settings = get_settings()
  logger = logging.getLogger("app.core.lifespan")

  try:
    _initialize_logging(settings)
    logger.info("Startup complete - logging verified.")
  except Exception:
    # Log initialization failures but allow the app to continue starting.
    logger.warning("Initial logging setup failed; continuing with default handlers.", exc_info=True)

  # Every batch in this process shares one quota and one pool of slots.
  rate_limiter = RateLimiter(settings.rate_limit_per_minute, 60.0)
  slots = asyncio.Semaphore(settings.max_concurrent_jobs)
  app.state.rate_limiter = rate_limiter
  app.state.job_slots = slots
  app.state.coordinator = build_coordinator(settings, rate_limiter=rate_limiter, slots=slots)

  yield

  logger.info("Shutting down mockup service.")
