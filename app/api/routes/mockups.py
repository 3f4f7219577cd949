import base64
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from app.api.deps import get_coordinator
from app.api.models import MockupBatchRequest, MockupRefineRequest, MockupRefineResponse
from app.api.streaming import stream_batch_events
from app.config import Settings, get_settings
from app.mockups.coordinator import BatchCoordinator
from app.mockups.errors import RefinementFailedError

router = APIRouter()
logger = logging.getLogger("app.api.routes.mockups")


@router.post("/batches")
async def create_batch(  # noqa: B008
  payload: MockupBatchRequest,
  request: Request,
  settings: Settings = Depends(get_settings),  # noqa: B008
  coordinator: BatchCoordinator = Depends(get_coordinator),  # noqa: B008
) -> StreamingResponse:
  """Start a mockup batch and stream its progress as Server-Sent Events."""
  # Validation errors raise here, before the stream opens, and map to 422.
  run = coordinator.start(payload.to_batch_request())
  logger.info("Streaming batch %s request_id=%s", run.id, getattr(request.state, "request_id", None))
  headers = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no", "X-Batch-Id": run.id}
  return StreamingResponse(stream_batch_events(run, request, keepalive_seconds=settings.sse_keepalive_seconds), media_type="text/event-stream", headers=headers)


@router.post("/refine", response_model=MockupRefineResponse)
async def refine_mockup(  # noqa: B008
  payload: MockupRefineRequest,
  request: Request,
  coordinator: BatchCoordinator = Depends(get_coordinator),  # noqa: B008
) -> MockupRefineResponse:
  """Re-render one delivered mockup with extra instructions."""
  try:
    image = await coordinator.refine(payload.to_refinement_request())
  except RefinementFailedError as exc:
    logger.error("Refinement failed request_id=%s: %s", getattr(request.state, "request_id", None), exc)
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Refinement failed; the image model did not return an image.") from exc
  return MockupRefineResponse(image_base64=base64.b64encode(image.data).decode("ascii"), mime_type=image.mime_type, size_bytes=len(image.data))
