"""Test configuration and shared fakes for the mockup service."""

from __future__ import annotations

import asyncio
import io
import os
from collections.abc import Awaitable, Callable, Sequence

# Ensure required settings are available before importing the app.
os.environ["MOCKUP_ALLOWED_ORIGINS"] = "http://localhost"
os.environ["MOCKUP_STRICT_KNOWLEDGE"] = "1"
os.environ.pop("GEMINI_API_KEY", None)

import pytest  # noqa: E402
from PIL import Image  # noqa: E402

from app.ai.providers.base import ImageModel  # noqa: E402
from app.mockups.coordinator import BatchCoordinator  # noqa: E402
from app.mockups.limits import RateLimiter, SchedulerPolicy  # noqa: E402
from app.mockups.models import GeneratedImage, ReferenceImage  # noqa: E402

Handler = Callable[[int, str, Sequence[ReferenceImage]], Awaitable[GeneratedImage]]


class FakeClock:
  """Deterministic clock: sleeping advances time instantly and is recorded."""

  def __init__(self) -> None:
    self.now = 0.0
    self.sleeps: list[float] = []

  def monotonic(self) -> float:
    return self.now

  async def sleep(self, seconds: float) -> None:
    self.sleeps.append(seconds)
    self.now += max(seconds, 0.0)
    # Still yield so other tasks interleave as they would on a real clock.
    await asyncio.sleep(0)


async def _png_handler(call_index: int, prompt: str, references: Sequence[ReferenceImage]) -> GeneratedImage:
  return GeneratedImage(data=f"image-{call_index}".encode(), mime_type="image/png")


class FakeImageModel(ImageModel):
  """Image model driven by an async handler; records every call."""

  def __init__(self, handler: Handler | None = None) -> None:
    self.name = "fake-image-model"
    self._handler = handler or _png_handler
    self.calls: list[tuple[str, tuple[ReferenceImage, ...]]] = []

  @property
  def headshot_calls(self) -> int:
    return sum(1 for _, references in self.calls if not references)

  @property
  def job_calls(self) -> int:
    return sum(1 for _, references in self.calls if references)

  async def generate_image(self, prompt: str, *, negative_prompt: str = "", reference_images: Sequence[ReferenceImage] = ()) -> GeneratedImage:
    self.calls.append((prompt, tuple(reference_images)))
    return await self._handler(len(self.calls), prompt, tuple(reference_images))


def make_png(size: tuple[int, int] = (4, 4)) -> bytes:
  buffer = io.BytesIO()
  Image.new("RGB", size, (255, 0, 0)).save(buffer, format="PNG")
  return buffer.getvalue()


@pytest.fixture
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture
def fake_clock() -> FakeClock:
  return FakeClock()


@pytest.fixture
def png_bytes() -> bytes:
  return make_png()


@pytest.fixture
def policy() -> SchedulerPolicy:
  return SchedulerPolicy(max_concurrent_jobs=3, max_retries=3, retry_delay_seconds=2.0, job_timeout_seconds=5.0, strict_knowledge=True)


@pytest.fixture
def coordinator_factory(fake_clock: FakeClock, policy: SchedulerPolicy) -> Callable[..., BatchCoordinator]:
  """Build a coordinator around a fake model with fresh process-wide limits."""

  def _build(image_model: ImageModel, **overrides: object) -> BatchCoordinator:
    options: dict[str, object] = {
      "rate_limiter": RateLimiter(1000, 60.0, clock=fake_clock),
      "slots": asyncio.Semaphore(policy.max_concurrent_jobs),
      "policy": policy,
      "clock": fake_clock,
      "max_jobs_per_batch": 50,
      "persona_max_retries": 3,
    }
    options.update(overrides)
    return BatchCoordinator(image_model, **options)

  return _build


@pytest.fixture
def make_image_model() -> Callable[..., FakeImageModel]:
  return FakeImageModel
