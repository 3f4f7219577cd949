"""Base interfaces for upstream image and analysis models."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.mockups.models import DesignAnalysis, GeneratedImage, ReferenceImage


class ImageModel(ABC):
  """Abstract base class for image generation models."""

  name: str

  @abstractmethod
  async def generate_image(self, prompt: str, *, negative_prompt: str = "", reference_images: Sequence[ReferenceImage] = ()) -> GeneratedImage:
    """Render one image; raise on any upstream failure or empty response."""


class DesignAnalyzer(ABC):
  """Abstract base class for design image analysis."""

  name: str

  @abstractmethod
  async def analyze(self, image: bytes, mime_type: str) -> DesignAnalysis:
    """Describe the colors, style and placement of an uploaded design."""
