"""Server-Sent Events framing for batch progress."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from fastapi import Request

from app.mockups.coordinator import BatchRun
from app.mockups.events import BatchEvent, JobResult, PersonaReady

logger = logging.getLogger(__name__)

KEEPALIVE_FRAME = ": keepalive\n\n"


def format_sse(event_type: str, data: dict[str, Any]) -> str:
  return f"event: {event_type}\ndata: {json.dumps(data, ensure_ascii=True)}\n\n"


def event_frame(event: BatchEvent) -> str:
  """Frame one event; binary payloads are sent as base64."""
  data = event.payload()
  if isinstance(event, JobResult):
    data["image_base64"] = base64.b64encode(event.image_bytes).decode("ascii")
  elif isinstance(event, PersonaReady) and event.headshot is not None:
    data["headshot_base64"] = base64.b64encode(event.headshot).decode("ascii")
  return format_sse(event.type, data)


async def stream_batch_events(run: BatchRun, request: Request, *, keepalive_seconds: float) -> AsyncIterator[str]:
  """Relay batch events until the batch ends; a disconnected client cancels the batch."""
  try:
    while True:
      try:
        event = await run.next_event(timeout=keepalive_seconds)
      except asyncio.TimeoutError:
        if await request.is_disconnected():
          logger.info("Client disconnected from batch %s", run.id)
          return
        yield KEEPALIVE_FRAME
        continue

      if event is None:
        return
      yield event_frame(event)
  finally:
    # No-op once the batch has finished.
    run.cancel()
