"""Expand a batch request into its ordered list of generation jobs."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from app.mockups.errors import BatchValidationError
from app.mockups.models import GenerationJob, JobVariant, MockupAngle, ModelSize, ProductColor, SharedLocks
from app.utils.ids import generate_job_id

logger = logging.getLogger(__name__)


def _require_unique(name: str, values: Sequence[object]) -> None:
  if not values:
    raise BatchValidationError(f"At least one {name} is required.")
  seen: set[object] = set()
  for value in values:
    if value in seen:
      raise BatchValidationError(f"Duplicate {name}: {value}.")
    seen.add(value)


def expected_job_count(colors: Sequence[object], angles: Sequence[object], sizes: Sequence[object]) -> int:
  return len(colors) * len(angles) * len(sizes)


def validate_variants(colors: Sequence[ProductColor], angles: Sequence[MockupAngle], sizes: Sequence[ModelSize], *, max_jobs: int) -> int:
  """Check the variant lists and job-count bound; return the job count."""
  # Colors are keyed by name so two hex spellings of "Black" still count as duplicates.
  _require_unique("color", [color.name.lower() for color in colors])
  _require_unique("angle", list(angles))
  _require_unique("size", list(sizes))

  total = expected_job_count(colors, angles, sizes)
  if total > max_jobs:
    raise BatchValidationError(f"Batch would create {total} jobs; the limit is {max_jobs}.")
  return total


def build_jobs(colors: Sequence[ProductColor], angles: Sequence[MockupAngle], sizes: Sequence[ModelSize], shared: SharedLocks, *, max_jobs: int) -> list[GenerationJob]:
  """Build one pending job per size x color x angle, in that nesting order."""
  total = validate_variants(colors, angles, sizes, max_jobs=max_jobs)

  jobs = [GenerationJob(id=generate_job_id(), variant=JobVariant(color=color, angle=angle, size=size), shared=shared) for size in sizes for color in colors for angle in angles]
  logger.debug("Built %s jobs (%s sizes x %s colors x %s angles)", total, len(sizes), len(colors), len(angles))
  return jobs
