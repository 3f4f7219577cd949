"""Typed progress events and the in-memory channel that carries them to the caller."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True)
class BatchEvent:
  """Base class for events emitted during a batch run."""

  type: ClassVar[str] = "event"

  def payload(self) -> dict[str, Any]:
    raise NotImplementedError


@dataclass(frozen=True)
class PersonaReady(BatchEvent):
  type: ClassVar[str] = "persona_ready"

  persona_id: str
  name: str
  has_headshot: bool
  headshot: bytes | None = field(default=None, repr=False)
  headshot_mime_type: str | None = None

  def payload(self) -> dict[str, Any]:
    return {"persona_id": self.persona_id, "name": self.name, "has_headshot": self.has_headshot, "headshot_mime_type": self.headshot_mime_type}


@dataclass(frozen=True)
class JobUpdate(BatchEvent):
  type: ClassVar[str] = "job_update"

  id: str
  status: str
  retry_count: int
  color: str
  angle: str
  size: str
  completed: int
  total: int

  def payload(self) -> dict[str, Any]:
    return {
      "id": self.id,
      "status": self.status,
      "retry_count": self.retry_count,
      "color": self.color,
      "angle": self.angle,
      "size": self.size,
      "completed": self.completed,
      "total": self.total,
    }


@dataclass(frozen=True)
class JobResult(BatchEvent):
  type: ClassVar[str] = "job_result"

  id: str
  image_bytes: bytes = field(repr=False)
  mime_type: str
  prompt: str | None = field(default=None, repr=False)

  def payload(self) -> dict[str, Any]:
    # Binary data is framed by the transport; the prompt lets callers request a refinement.
    return {"id": self.id, "mime_type": self.mime_type, "size_bytes": len(self.image_bytes), "prompt": self.prompt}


@dataclass(frozen=True)
class JobFailed(BatchEvent):
  type: ClassVar[str] = "job_failed"

  id: str
  error: str

  def payload(self) -> dict[str, Any]:
    return {"id": self.id, "error": self.error}


@dataclass(frozen=True)
class BatchComplete(BatchEvent):
  type: ClassVar[str] = "batch_complete"

  succeeded: int
  failed: int
  total: int

  def payload(self) -> dict[str, Any]:
    return {"succeeded": self.succeeded, "failed": self.failed, "total": self.total}


@dataclass(frozen=True)
class BatchFailed(BatchEvent):
  type: ClassVar[str] = "batch_failed"

  reason: str
  message: str | None = None

  def payload(self) -> dict[str, Any]:
    return {"reason": self.reason, "message": self.message}


_CLOSED = object()


class EventStream:
  """Single-consumer event channel; iteration ends after close()."""

  def __init__(self) -> None:
    self._queue: asyncio.Queue[object] = asyncio.Queue()
    self._closed = False

  @property
  def closed(self) -> bool:
    return self._closed

  def publish(self, event: BatchEvent) -> None:
    if self._closed:
      raise RuntimeError("Cannot publish to a closed event stream.")
    self._queue.put_nowait(event)

  def close(self) -> None:
    if not self._closed:
      self._closed = True
      self._queue.put_nowait(_CLOSED)

  async def next_event(self, timeout: float | None = None) -> BatchEvent | None:
    """Return the next event, or None once closed; raise TimeoutError if nothing arrives in time."""
    item = await asyncio.wait_for(self._queue.get(), timeout)
    if item is _CLOSED:
      # Leave the marker in place so later readers also see the end.
      self._queue.put_nowait(_CLOSED)
      return None
    return item

  async def __aiter__(self) -> AsyncIterator[BatchEvent]:
    while True:
      event = await self.next_event()
      if event is None:
        return
      yield event
