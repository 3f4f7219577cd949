from __future__ import annotations

import pytest

from app.mockups.errors import InvalidJobTransitionError
from app.mockups.models import GeneratedImage, GenerationJob, JobVariant, MockupBatch, ProductColor, SharedLocks


def _job(job_id: str = "job_1") -> GenerationJob:
  return GenerationJob(id=job_id, variant=JobVariant(ProductColor("Black", "#000000"), "front", "M"), shared=SharedLocks(product_key="t-shirt", design_image=b"d"))


def test_job_moves_through_processing_to_completed() -> None:
  job = _job()
  job.mark_processing()
  assert job.record_retry() == 1
  assert job.status == "processing"
  job.mark_completed(GeneratedImage(b"img"))
  assert job.status == "completed"
  assert job.is_terminal
  assert job.retry_count == 1


def test_illegal_transitions_raise() -> None:
  job = _job()
  with pytest.raises(InvalidJobTransitionError):
    job.mark_completed(GeneratedImage(b"img"))
  with pytest.raises(InvalidJobTransitionError):
    job.record_retry()

  job.mark_processing()
  job.mark_failed("boom")
  with pytest.raises(InvalidJobTransitionError):
    job.mark_processing()
  with pytest.raises(InvalidJobTransitionError):
    job.mark_completed(GeneratedImage(b"img"))


def test_batch_credits_report_refundable_jobs() -> None:
  done, failed, pending = _job("a"), _job("b"), _job("c")
  done.mark_processing()
  done.mark_completed(GeneratedImage(b"img"))
  failed.mark_processing()
  failed.mark_failed("timeout")
  batch = MockupBatch(id="batch_1", jobs=[done, failed, pending])

  credits = batch.credits()
  assert (credits.requested, credits.succeeded, credits.refundable) == (3, 1, 2)
  assert [error.job_id for error in batch.failures()] == ["b"]
