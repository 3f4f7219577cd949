"""Shared FastAPI dependencies."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from app.mockups.coordinator import BatchCoordinator

logger = logging.getLogger(__name__)


def get_coordinator(request: Request) -> BatchCoordinator:
  """Return the process-wide coordinator built by the lifespan."""
  coordinator = getattr(request.app.state, "coordinator", None)
  if coordinator is None:
    logger.error("Mockup coordinator unavailable; is GEMINI_API_KEY configured?")
    raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Mockup generation is not configured.")
  return coordinator
