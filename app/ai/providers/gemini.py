"""Gemini image and design-analysis models using the google-genai SDK."""

from __future__ import annotations

import json
import logging
import os
import warnings
from collections.abc import Sequence
from typing import Any

from pydantic.warnings import ArbitraryTypeWarning

with warnings.catch_warnings():
  warnings.filterwarnings("ignore", message=r"<built-in function any> is not a Python type.*", category=ArbitraryTypeWarning)
  from google import genai
  from google.genai import types

from app.ai.providers.base import DesignAnalyzer, ImageModel
from app.mockups.errors import JobTransientError
from app.mockups.models import DEFAULT_DESIGN_ANALYSIS, DesignAnalysis, GeneratedImage, ReferenceImage

logger = logging.getLogger(__name__)

DESIGN_ANALYSIS_PROMPT = """Analyze this design image for print-on-demand product mockups.
Return JSON with exactly these keys:
- dominant_colors: array of up to 5 hex colors, most prominent first
- style: short style label (e.g. "minimalist", "vintage", "streetwear")
- complexity: one of "simple", "moderate", "complex"
- suggested_placement: where the design should sit on a garment
- has_transparency: true when the background is transparent
- design_type: one of "text", "graphic", "illustration", "photo", "pattern"
- aop_accent_color: hex color suitable for collars and cuffs when tiled all over, or null"""


def _client(api_key: str | None) -> genai.Client:
  api_key = api_key or os.getenv("GEMINI_API_KEY")
  if not api_key:
    raise ValueError("GEMINI_API_KEY environment variable is required")
  return genai.Client(api_key=api_key)


def strip_json_fences(text: str) -> str:
  """Remove a surrounding ```json fence if the model added one."""
  cleaned = text.strip()
  if cleaned.startswith("```"):
    cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
    if cleaned.rstrip().endswith("```"):
      cleaned = cleaned.rstrip()[:-3]
  return cleaned.strip()


class GeminiImageModel(ImageModel):
  """Image generation through Gemini's multimodal image output."""

  def __init__(self, name: str, api_key: str | None = None) -> None:
    self.name = name
    self._client = _client(api_key)

  async def generate_image(self, prompt: str, *, negative_prompt: str = "", reference_images: Sequence[ReferenceImage] = ()) -> GeneratedImage:
    """Generate one image; empty responses raise JobTransientError."""
    # Gemini has no negative prompt field, so exclusions travel in the text.
    if negative_prompt and negative_prompt not in prompt:
      prompt = f"{prompt}\n\nMUST AVOID: {negative_prompt}"

    parts = [types.Part.from_bytes(data=image.data, mime_type=image.mime_type) for image in reference_images]
    parts.append(types.Part.from_text(text=prompt))

    # Use the async client to avoid blocking the asyncio event loop.
    response = await self._client.aio.models.generate_content(
      model=self.name,
      contents=[types.Content(role="user", parts=parts)],
      config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
    )

    for candidate in response.candidates or []:
      content = candidate.content
      if content is None or not content.parts:
        continue
      for part in content.parts:
        if part.inline_data and part.inline_data.data:
          return GeneratedImage(data=part.inline_data.data, mime_type=part.inline_data.mime_type or "image/png")

    raise JobTransientError("No image data in Gemini response.")


class GeminiDesignAnalyzer(DesignAnalyzer):
  """Design analysis using Gemini's JSON mode."""

  def __init__(self, name: str, api_key: str | None = None) -> None:
    self.name = name
    self._client = _client(api_key)

  async def analyze(self, image: bytes, mime_type: str) -> DesignAnalysis:
    response = await self._client.aio.models.generate_content(
      model=self.name,
      contents=[types.Part.from_bytes(data=image, mime_type=mime_type), DESIGN_ANALYSIS_PROMPT],
      config={"response_mime_type": "application/json"},
    )
    logger.debug("Gemini design analysis (raw):\n%s", response.text)
    try:
      parsed = json.loads(strip_json_fences(response.text or ""))
    except json.JSONDecodeError as e:
      raise RuntimeError(f"Gemini returned invalid JSON: {e}") from e
    return design_analysis_from_payload(parsed)


def design_analysis_from_payload(payload: dict[str, Any]) -> DesignAnalysis:
  """Coerce a loosely-typed analysis payload, keeping defaults for missing fields."""
  default = DEFAULT_DESIGN_ANALYSIS
  colors = payload.get("dominant_colors")
  if not isinstance(colors, list) or not colors:
    colors = list(default.dominant_colors)
  accent = payload.get("aop_accent_color")
  return DesignAnalysis(
    dominant_colors=tuple(str(color) for color in colors[:5]),
    style=str(payload.get("style") or default.style),
    complexity=str(payload.get("complexity") or default.complexity),
    suggested_placement=str(payload.get("suggested_placement") or default.suggested_placement),
    has_transparency=bool(payload.get("has_transparency", default.has_transparency)),
    design_type=str(payload.get("design_type") or default.design_type),
    aop_accent_color=str(accent) if accent else None,
  )
