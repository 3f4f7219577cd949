from __future__ import annotations

import pytest

from app.mockups.errors import BatchValidationError
from app.mockups.models import ModelDetails, ProductColor, SharedLocks
from app.mockups.persona import generate_persona_description
from app.mockups.queue import build_jobs

BLACK = ProductColor("Black", "#000000")
WHITE = ProductColor("White", "#FFFFFF")


def _shared(with_persona: bool = False) -> SharedLocks:
  persona_lock = generate_persona_description(ModelDetails(age="Adult", sex="Female", ethnicity="White", size="M"), seed=5) if with_persona else None
  return SharedLocks(product_key="t-shirt", design_image=b"design", persona_lock=persona_lock)


def test_job_count_is_the_cross_product_ordered_size_color_angle() -> None:
  jobs = build_jobs([BLACK, WHITE], ["front", "back"], ["S", "M", "L"], _shared(), max_jobs=50)

  assert len(jobs) == 12
  assert [job.variant.label for job in jobs[:4]] == ["Black/front/S", "Black/back/S", "White/front/S", "White/back/S"]
  assert jobs[-1].variant.label == "White/back/L"
  assert all(job.status == "pending" and job.retry_count == 0 for job in jobs)
  assert len({job.id for job in jobs}) == 12


def test_persona_lock_is_shared_by_reference() -> None:
  shared = _shared(with_persona=True)
  jobs = build_jobs([BLACK, WHITE], ["front"], ["M"], shared, max_jobs=50)
  assert all(job.shared.persona_lock is shared.persona_lock for job in jobs)


@pytest.mark.parametrize(
  ("colors", "angles", "sizes", "message"),
  [
    ([], ["front"], ["M"], "At least one color"),
    ([BLACK], [], ["M"], "At least one angle"),
    ([BLACK, ProductColor("black", "#111111")], ["front"], ["M"], "Duplicate color"),
    ([BLACK], ["front", "front"], ["M"], "Duplicate angle"),
  ],
)
def test_invalid_variant_lists_are_rejected(colors, angles, sizes, message) -> None:
  with pytest.raises(BatchValidationError, match=message):
    build_jobs(colors, angles, sizes, _shared(), max_jobs=50)


def test_job_count_bound_is_enforced() -> None:
  colors = [ProductColor(f"Color {index}", "#000000") for index in range(6)]
  with pytest.raises(BatchValidationError, match="limit is 20"):
    build_jobs(colors, ["front", "back"], ["S", "M"], _shared(), max_jobs=20)
