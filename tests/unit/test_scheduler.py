from __future__ import annotations

import asyncio
from collections import Counter

import pytest

from app.mockups.limits import RateLimiter, SchedulerPolicy
from app.mockups.models import GeneratedImage, ProductColor, SharedLocks
from app.mockups.queue import build_jobs
from app.mockups.scheduler import Scheduler

COLORS = [ProductColor("Black", "#000000"), ProductColor("White", "#FFFFFF"), ProductColor("Navy", "#1F2937")]


def _jobs(colors=COLORS, angles=("front", "back")):
  return build_jobs(list(colors), list(angles), ["M"], SharedLocks(product_key="hoodie", design_image=b"design"), max_jobs=50)


def _scheduler(model, fake_clock, *, policy: SchedulerPolicy, slots: asyncio.Semaphore | None = None, limiter: RateLimiter | None = None) -> Scheduler:
  return Scheduler(
    model,
    rate_limiter=limiter or RateLimiter(1000, 60.0, clock=fake_clock),
    slots=slots or asyncio.Semaphore(policy.max_concurrent_jobs),
    policy=policy,
    clock=fake_clock,
  )


@pytest.mark.anyio
async def test_all_jobs_complete_and_progress_is_reported(make_image_model, fake_clock, policy) -> None:
  model = make_image_model()
  jobs = _jobs()
  reports: list[tuple[int, int, str, str]] = []

  await _scheduler(model, fake_clock, policy=policy).run(jobs, lambda done, total, job: reports.append((done, total, job.id, job.status)))

  assert all(job.status == "completed" and job.retry_count == 0 for job in jobs)
  assert model.job_calls == len(jobs)
  assert reports[-1][:2] == (len(jobs), len(jobs))
  # Each job reports processing before its terminal state.
  for job in jobs:
    statuses = [status for _, _, job_id, status in reports if job_id == job.id]
    assert statuses == ["processing", "completed"]


@pytest.mark.anyio
async def test_job_succeeding_on_third_attempt_has_two_retries(make_image_model, fake_clock, policy) -> None:
  attempts: Counter[str] = Counter()

  async def _flaky(call_index, prompt, references):
    attempts[prompt] += 1
    if attempts[prompt] < 3:
      raise RuntimeError("503 Service Unavailable")
    return GeneratedImage(b"ok")

  jobs = _jobs(colors=COLORS[:1], angles=("front",))
  limiter = RateLimiter(1000, 60.0, clock=fake_clock)
  reports: list[tuple[str, int]] = []

  await _scheduler(make_image_model(_flaky), fake_clock, policy=policy, limiter=limiter).run(jobs, lambda done, total, job: reports.append((job.status, job.retry_count)))

  job = jobs[0]
  assert job.status == "completed"
  assert job.retry_count == 2
  assert fake_clock.sleeps == [2.0, 4.0]
  assert limiter.in_window == 3
  assert reports == [("processing", 0), ("processing", 1), ("processing", 2), ("completed", 2)]


@pytest.mark.anyio
async def test_failures_are_isolated_and_exhaust_the_retry_budget(make_image_model, fake_clock, policy) -> None:
  async def _navy_breaks(call_index, prompt, references):
    if "Navy" in prompt:
      raise RuntimeError("Resource Exhausted")
    return GeneratedImage(b"ok")

  jobs = _jobs()
  await _scheduler(make_image_model(_navy_breaks), fake_clock, policy=policy).run(jobs)

  failed = [job for job in jobs if job.status == "failed"]
  assert len(failed) == 2
  assert all(job.variant.color.name == "Navy" for job in failed)
  assert all(job.retry_count == policy.max_retries for job in failed)
  assert all(job.error == "Resource Exhausted" for job in failed)
  assert sum(job.status == "completed" for job in jobs) == 4


@pytest.mark.anyio
async def test_timeout_cancels_the_in_flight_call(make_image_model, fake_clock) -> None:
  cancelled = 0

  async def _hang(call_index, prompt, references):
    nonlocal cancelled
    try:
      await asyncio.Event().wait()
    except asyncio.CancelledError:
      cancelled += 1
      raise
    return GeneratedImage(b"never")

  policy = SchedulerPolicy(max_concurrent_jobs=1, max_retries=2, retry_delay_seconds=1.0, job_timeout_seconds=0.01, strict_knowledge=True)
  jobs = _jobs(colors=COLORS[:1], angles=("front",))

  await _scheduler(make_image_model(_hang), fake_clock, policy=policy).run(jobs)

  assert jobs[0].status == "failed"
  assert jobs[0].retry_count == 2
  assert "deadline" in jobs[0].error
  assert cancelled == 2


@pytest.mark.anyio
async def test_shared_slots_bound_concurrency_across_batches(make_image_model, fake_clock) -> None:
  in_flight = 0
  peak = 0

  async def _slow(call_index, prompt, references):
    nonlocal in_flight, peak
    in_flight += 1
    peak = max(peak, in_flight)
    await asyncio.sleep(0.005)
    in_flight -= 1
    return GeneratedImage(b"ok")

  policy = SchedulerPolicy(max_concurrent_jobs=2, max_retries=3, retry_delay_seconds=1.0, job_timeout_seconds=5.0, strict_knowledge=True)
  slots = asyncio.Semaphore(2)
  model = make_image_model(_slow)
  first, second = _jobs(), _jobs()

  await asyncio.gather(
    _scheduler(model, fake_clock, policy=policy, slots=slots).run(first),
    _scheduler(model, fake_clock, policy=policy, slots=slots).run(second),
  )

  assert peak == 2
  assert all(job.status == "completed" for job in first + second)


@pytest.mark.anyio
async def test_stop_cancels_in_flight_and_leaves_unadmitted_jobs_pending(make_image_model, fake_clock) -> None:
  started = asyncio.Event()

  async def _block(call_index, prompt, references):
    started.set()
    await asyncio.Event().wait()
    return GeneratedImage(b"never")

  policy = SchedulerPolicy(max_concurrent_jobs=1, max_retries=3, retry_delay_seconds=1.0, job_timeout_seconds=5.0, strict_knowledge=True)
  slots = asyncio.Semaphore(1)
  scheduler = _scheduler(make_image_model(_block), fake_clock, policy=policy, slots=slots)
  jobs = _jobs()

  run = asyncio.create_task(scheduler.run(jobs))
  await started.wait()
  scheduler.stop()
  await run

  assert jobs[0].status == "failed"
  assert jobs[0].error == "canceled"
  assert jobs[0].retry_count == 0
  assert all(job.status == "pending" for job in jobs[1:])
  assert not slots.locked()


@pytest.mark.anyio
async def test_unknown_style_fails_job_without_calling_upstream(make_image_model, fake_clock, policy) -> None:
  model = make_image_model()
  jobs = build_jobs([COLORS[0]], ["front"], ["M"], SharedLocks(product_key="hoodie", design_image=b"d", brand_style="NOPE"), max_jobs=50)

  await _scheduler(model, fake_clock, policy=policy).run(jobs)

  assert jobs[0].status == "failed"
  assert "Unknown brand style key" in jobs[0].error
  # Knowledge errors fail before any attempt, so no retries are counted.
  assert jobs[0].retry_count == 0
  assert model.calls == []
