"""Persona lock generation: one consistent virtual model per batch."""

from __future__ import annotations

import asyncio
import logging
import random

from app.ai.backoff import RetryExhaustedError, retry_with_backoff
from app.ai.providers.base import ImageModel
from app.mockups.errors import PersonaLockFailedError
from app.mockups.knowledge import ETHNIC_FEATURES, get_negative_prompts, sample_persona, somatic_profile
from app.mockups.knowledge.personas import AGE_MODIFIERS
from app.mockups.limits import Clock, MonotonicClock, RateLimiter
from app.mockups.models import GeneratedImage, ModelDetails, PersonaLock

logger = logging.getLogger(__name__)


def generate_persona_description(details: ModelDetails, seed: int | None = None) -> PersonaLock:
  """Sample a persona for the demographics; the same seed always yields the same persona."""
  rng = random.Random(seed)
  persona = sample_persona(details, rng)
  profile = somatic_profile(details)
  somatic_description = f"{persona.full_description} {profile.description} Height: {profile.height}, weight: {profile.weight}, {profile.build}."
  logger.info("Persona %s (%s) sampled for %s %s %s size %s", persona.id, persona.name, details.age, details.ethnicity, details.sex, details.size)
  return PersonaLock(persona=persona, somatic_description=somatic_description)


def build_headshot_prompt(persona_lock: PersonaLock) -> str:
  """Passport-style portrait prompt that anchors the persona's face."""
  persona = persona_lock.persona
  features = ETHNIC_FEATURES[persona.ethnicity]
  age_years = AGE_MODIFIERS[persona.age][3]
  prompt = f"""Professional passport-style headshot photograph of a {age_years}-year-old {persona.sex.lower()} {persona.ethnicity} person.

===== IDENTITY ANCHOR =====
This headshot is the visual reference for every mockup in the batch.
- Name: {persona.name}
- {persona_lock.somatic_description}

Typical traits for {persona.ethnicity}:
- Hair colors: {", ".join(features.hair_colors)}
- Eye colors: {", ".join(features.eye_colors)}
- Hair styles: {", ".join(features.hair_styles)}

Exact appearance:
- Hair: {persona.hair_style}, {persona.hair_color}
- Eyes: {persona.eye_color}
- Skin tone: {persona.skin_tone}
- Facial features: {persona.facial_features}
===== END IDENTITY ANCHOR =====

CAMERA: 85mm portrait lens at f/2.8, head and shoulders centered, neutral gray studio backdrop, neutral pleasant expression.
LIGHTING: three-point studio lighting, soft key at 45 degrees, fill at 1:3, subtle rim light.
STYLE: clean ID-photo quality, sharp focus on the eyes, natural skin texture with pores and small imperfections, no retouching artifacts."""
  return f"{prompt}\n\nMUST AVOID: {get_negative_prompts('dtg-apparel', True)}"


async def generate_persona_headshot(
  persona_lock: PersonaLock,
  image_model: ImageModel,
  *,
  max_retries: int = 3,
  retry_delay: float = 2.0,
  timeout: float = 60.0,
  rate_limiter: RateLimiter | None = None,
  clock: Clock | None = None,
) -> PersonaLock:
  """Render the reference headshot and return a new lock carrying it.

  Raises PersonaLockFailedError once every attempt has failed.
  """
  clock = clock or MonotonicClock()
  prompt = build_headshot_prompt(persona_lock)

  async def _attempt() -> GeneratedImage:
    if rate_limiter is not None:
      await rate_limiter.acquire()
    return await asyncio.wait_for(image_model.generate_image(prompt), timeout=timeout)

  try:
    image = await retry_with_backoff(_attempt, attempts=max_retries, base_delay=retry_delay, sleep=clock.sleep, label="Persona headshot")
  except RetryExhaustedError as exc:
    logger.error("Persona headshot for %s failed after %s attempts: %s", persona_lock.persona.id, exc.attempts, exc.last_error)
    raise PersonaLockFailedError(f"Persona headshot generation failed after {exc.attempts} attempts: {exc.last_error}", attempts=exc.attempts, last_error=exc.last_error) from exc

  logger.info("Persona headshot ready for %s (%s bytes)", persona_lock.persona.id, len(image.data))
  return persona_lock.with_headshot(image.data, image.mime_type)
