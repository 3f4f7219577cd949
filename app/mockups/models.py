"""Domain models for batch mockup generation."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Literal

from app.mockups.errors import InvalidJobTransitionError, JobFailedError

AgeGroup = Literal["Teen", "Young Adult", "Adult", "Senior"]
Sex = Literal["Male", "Female"]
Ethnicity = Literal["White", "Black", "Hispanic", "Asian", "Indian", "Southeast Asian", "Middle Eastern", "Indigenous", "Diverse"]
ModelSize = Literal["XS", "S", "M", "L", "XL", "XXL", "XXXL"]
MockupAngle = Literal["front", "back", "three-quarter", "side", "closeup"]
JourneyType = Literal["DTG", "AOP"]
JobStatus = Literal["pending", "processing", "completed", "failed"]
BatchStatus = Literal["pending", "processing", "completed", "failed", "canceled"]
LockCategory = Literal["product", "color", "camera", "lighting", "design", "persona", "size_fit", "aop_physics", "contour"]

TERMINAL_JOB_STATUSES: frozenset[str] = frozenset({"completed", "failed"})


@dataclass(frozen=True)
class ProductColor:
  """A named product base color."""

  name: str
  hex: str
  category: Literal["light", "dark", "neutral"] | None = None


@dataclass(frozen=True)
class ModelDetails:
  """Demographic inputs for the virtual model."""

  age: AgeGroup
  sex: Sex
  ethnicity: Ethnicity
  size: ModelSize


@dataclass(frozen=True)
class DesignAnalysis:
  """Placement-relevant facts about the uploaded design."""

  dominant_colors: tuple[str, ...]
  style: str
  complexity: str
  suggested_placement: str
  has_transparency: bool
  design_type: str
  aop_accent_color: str | None = None


DEFAULT_DESIGN_ANALYSIS = DesignAnalysis(
  dominant_colors=("#000000", "#FFFFFF"),
  style="modern",
  complexity="moderate",
  suggested_placement="center chest",
  has_transparency=False,
  design_type="graphic",
)


@dataclass(frozen=True)
class VariantLock:
  """Immutable, named fragment of generation instructions."""

  category: LockCategory
  summary: str
  details: Mapping[str, Any] = field(default_factory=dict, hash=False)

  def __post_init__(self) -> None:
    # Publish a read-only view so jobs can share the lock without synchronization.
    object.__setattr__(self, "details", MappingProxyType(dict(self.details)))


@dataclass(frozen=True)
class Persona:
  """A concrete virtual model identity sampled from the persona tables."""

  id: str
  name: str
  age: AgeGroup
  sex: Sex
  ethnicity: Ethnicity
  size: ModelSize
  height: str
  weight: str
  build: str
  facial_features: str
  hair_style: str
  hair_color: str
  eye_color: str
  skin_tone: str
  full_description: str


@dataclass(frozen=True)
class PersonaLock:
  """The shared model identity every job in a batch must reproduce."""

  persona: Persona
  somatic_description: str
  headshot: bytes | None = field(default=None, repr=False)
  headshot_mime_type: str | None = None

  @property
  def has_headshot(self) -> bool:
    return self.headshot is not None

  def with_headshot(self, data: bytes, mime_type: str) -> PersonaLock:
    """Return a copy carrying the reference headshot."""
    return replace(self, headshot=data, headshot_mime_type=mime_type)


@dataclass(frozen=True)
class GeneratedImage:
  """Bytes returned by the upstream image model."""

  data: bytes = field(repr=False)
  mime_type: str = "image/png"


@dataclass(frozen=True)
class JobVariant:
  """One color/angle/size combination."""

  color: ProductColor
  angle: MockupAngle
  size: ModelSize

  @property
  def label(self) -> str:
    return f"{self.color.name}/{self.angle}/{self.size}"


@dataclass(frozen=True)
class SharedLocks:
  """Per-batch inputs shared by reference across every job."""

  product_key: str
  design_image: bytes = field(repr=False)
  design_mime_type: str = "image/png"
  design: DesignAnalysis = DEFAULT_DESIGN_ANALYSIS
  brand_style: str = "ECOMMERCE_CLEAN"
  journey: JourneyType = "DTG"
  material_condition: str = "BRAND_NEW"
  lighting_preset: str = "three-point-classic"
  environment_prompt: str | None = None
  persona_lock: PersonaLock | None = None


@dataclass
class GenerationJob:
  """A single mockup render tracked through pending -> processing -> completed|failed."""

  id: str
  variant: JobVariant
  shared: SharedLocks
  status: JobStatus = "pending"
  retry_count: int = 0
  result: GeneratedImage | None = None
  error: str | None = None
  prompt: str | None = field(default=None, repr=False)
  created_at: float = field(default_factory=time.time)
  started_at: float | None = None
  completed_at: float | None = None

  @property
  def is_terminal(self) -> bool:
    return self.status in TERMINAL_JOB_STATUSES

  def _require(self, expected: JobStatus, target: str) -> None:
    if self.status != expected:
      raise InvalidJobTransitionError(f"Job {self.id} cannot move from {self.status} to {target}.")

  def mark_processing(self) -> None:
    self._require("pending", "processing")
    self.status = "processing"
    self.started_at = time.time()

  def record_retry(self) -> int:
    """Count one failed attempt; the job stays processing."""
    self._require("processing", "processing")
    self.retry_count += 1
    return self.retry_count

  def mark_completed(self, image: GeneratedImage) -> None:
    self._require("processing", "completed")
    self.status = "completed"
    self.result = image
    self.completed_at = time.time()

  def mark_failed(self, error: str) -> None:
    self._require("processing", "failed")
    self.status = "failed"
    self.error = error
    self.completed_at = time.time()


@dataclass(frozen=True)
class CreditUsage:
  """Billing signal: how many of the requested images were delivered."""

  requested: int
  succeeded: int

  @property
  def refundable(self) -> int:
    return self.requested - self.succeeded


@dataclass
class MockupBatch:
  """Aggregate root for one batch request lifecycle."""

  id: str
  jobs: list[GenerationJob]
  status: BatchStatus = "pending"
  persona_lock: PersonaLock | None = None
  requested: int = 0
  created_at: float = field(default_factory=time.time)
  completed_at: float | None = None

  @property
  def total(self) -> int:
    return len(self.jobs)

  @property
  def succeeded(self) -> int:
    return sum(1 for job in self.jobs if job.status == "completed")

  @property
  def failed(self) -> int:
    return sum(1 for job in self.jobs if job.status == "failed")

  @property
  def persona_lock_image(self) -> bytes | None:
    return self.persona_lock.headshot if self.persona_lock else None

  def failures(self) -> list[JobFailedError]:
    """Return terminal job failures as errors for reporting."""
    return [JobFailedError(job.id, job.error or "Generation failed") for job in self.jobs if job.status == "failed"]

  def credits(self) -> CreditUsage:
    # Jobs are never built when the persona fails, yet the whole batch was requested.
    return CreditUsage(requested=max(self.requested, self.total), succeeded=self.succeeded)


@dataclass(frozen=True)
class BatchRequest:
  """Validated input for one batch run."""

  design_image: bytes = field(repr=False)
  product_key: str
  colors: tuple[ProductColor, ...]
  angles: tuple[MockupAngle, ...]
  sizes: tuple[ModelSize, ...]
  model_details: ModelDetails | None = None
  brand_style: str = "ECOMMERCE_CLEAN"
  journey: JourneyType = "DTG"
  material_condition: str = "BRAND_NEW"
  lighting_preset: str = "three-point-classic"
  environment_prompt: str | None = None
  design_mime_type: str = "image/png"
  design_analysis: DesignAnalysis | None = None
  persona_lock: PersonaLock | None = None
  persona_seed: int | None = None


@dataclass(frozen=True)
class ReferenceImage:
  """An image sent alongside a prompt (design upload or persona headshot)."""

  data: bytes = field(repr=False)
  mime_type: str
  role: Literal["design", "persona"] = "design"
