from __future__ import annotations

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from app.mockups.knowledge import find_color, normalize_size, resolve_color
from app.mockups.models import AgeGroup, BatchRequest, Ethnicity, JourneyType, MockupAngle, ModelDetails, ModelSize, ProductColor, Sex
from app.mockups.refine import RefinementRequest
from app.utils.images import detect_image_mime

MAX_DESIGN_BYTES = 10 * 1024 * 1024


def _validate_base64_image(value: str, field_name: str) -> str:
  """Check a base64 image field and return it without any data-URL prefix."""
  # Strip data-URL prefixes sent by browsers.
  if value.startswith("data:") and "," in value:
    value = value.split(",", 1)[1]
  try:
    decoded = base64.b64decode(value, validate=True)
  except (binascii.Error, ValueError) as exc:
    raise ValueError(f"{field_name} must be base64-encoded.") from exc
  if len(decoded) > MAX_DESIGN_BYTES:
    raise ValueError(f"{field_name} exceeds the 10MB limit.")
  detect_image_mime(decoded)
  return value


def _decode_image(value: str) -> tuple[bytes, str]:
  data = base64.b64decode(value)
  return data, detect_image_mime(data)


def _normalize_size_value(value: Any) -> Any:
  if isinstance(value, str):
    return normalize_size(value) or value
  return value


class ColorInput(BaseModel):
  """A product color given by name, optionally with an explicit hex."""

  name: StrictStr = Field(min_length=1, max_length=60)
  hex: StrictStr | None = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
  model_config = ConfigDict(extra="forbid")

  def to_color(self) -> ProductColor:
    if self.hex:
      catalog = find_color(self.name)
      return ProductColor(self.name.strip(), self.hex.upper(), catalog.category if catalog else None)
    return resolve_color(self.name, strict=True)


class ModelDetailsInput(BaseModel):
  """Demographics of the virtual model for wearable products."""

  age: AgeGroup
  sex: Sex
  ethnicity: Ethnicity
  size: ModelSize = "M"
  model_config = ConfigDict(extra="forbid")

  @field_validator("size", mode="before")
  @classmethod
  def coerce_size(cls, value: Any) -> Any:
    return _normalize_size_value(value)


class MockupBatchRequest(BaseModel):
  """Request payload for a batch of product mockups."""

  design_image: StrictStr = Field(min_length=1, description="Base64-encoded PNG, JPEG or WebP design (a data: URL prefix is accepted).")
  product_key: StrictStr = Field(default="t-shirt", min_length=1, description="Catalog product id or storefront name.", examples=["t-shirt", "gildan-18500"])
  colors: list[ColorInput | StrictStr] = Field(min_length=1, max_length=20, description="Product colors by name or {name, hex}.")
  angles: list[MockupAngle] = Field(min_length=1, max_length=5, description="Camera angles to render.")
  sizes: list[ModelSize] = Field(default_factory=lambda: ["M"], min_length=1, max_length=7, description="Model sizes to render.")
  model_details: ModelDetailsInput | None = Field(default=None, description="Virtual model demographics; required for an on-model shot.")
  brand_style: StrictStr = Field(default="ECOMMERCE_CLEAN", min_length=1)
  journey: JourneyType = "DTG"
  material_condition: StrictStr = Field(default="BRAND_NEW", min_length=1)
  lighting_preset: StrictStr = Field(default="three-point-classic", min_length=1)
  environment_prompt: StrictStr | None = Field(default=None, max_length=500)
  persona_seed: StrictInt | None = Field(default=None, description="Seed that pins the sampled persona.")
  model_config = ConfigDict(extra="forbid", protected_namespaces=())

  @field_validator("sizes", mode="before")
  @classmethod
  def normalize_sizes(cls, value: Any) -> Any:
    if isinstance(value, list):
      return [_normalize_size_value(item) for item in value]
    return value

  @field_validator("colors")
  @classmethod
  def require_known_color_names(cls, value: list[ColorInput | str]) -> list[ColorInput | str]:
    for color in value:
      if isinstance(color, ColorInput):
        if color.hex:
          continue
        name = color.name
      else:
        name = color
      if find_color(name) is None:
        raise ValueError(f"Unknown color '{name.strip()}'; send {{name, hex}} for custom colors.")
    return value

  @field_validator("design_image")
  @classmethod
  def validate_design_image(cls, value: str) -> str:
    return _validate_base64_image(value, "design_image")

  def to_batch_request(self) -> BatchRequest:
    design, design_mime_type = _decode_image(self.design_image)
    colors = tuple(color.to_color() if isinstance(color, ColorInput) else resolve_color(color, strict=True) for color in self.colors)
    details = self.model_details
    return BatchRequest(
      design_image=design,
      design_mime_type=design_mime_type,
      product_key=self.product_key,
      colors=colors,
      angles=tuple(self.angles),
      sizes=tuple(self.sizes),
      model_details=ModelDetails(age=details.age, sex=details.sex, ethnicity=details.ethnicity, size=details.size) if details else None,
      brand_style=self.brand_style,
      journey=self.journey,
      material_condition=self.material_condition,
      lighting_preset=self.lighting_preset,
      environment_prompt=self.environment_prompt,
      persona_seed=self.persona_seed,
    )


class MockupRefineRequest(BaseModel):
  """Request payload for refining one delivered mockup."""

  design_image: StrictStr = Field(min_length=1, description="The design uploaded for the original batch, base64-encoded.")
  original_prompt: StrictStr = Field(min_length=1, max_length=50_000, description="The `prompt` of the job_result being refined.")
  refinement: StrictStr = Field(min_length=1, max_length=1000, description="What to change, e.g. 'make the shadow softer'.")
  persona_headshot: StrictStr | None = Field(default=None, description="Base64 headshot from persona_ready; keeps the same model.")
  model_config = ConfigDict(extra="forbid")

  @field_validator("design_image")
  @classmethod
  def validate_design_image(cls, value: str) -> str:
    return _validate_base64_image(value, "design_image")

  @field_validator("persona_headshot")
  @classmethod
  def validate_persona_headshot(cls, value: str | None) -> str | None:
    if value is None:
      return None
    return _validate_base64_image(value, "persona_headshot")

  @field_validator("refinement")
  @classmethod
  def require_instructions(cls, value: str) -> str:
    if not value.strip():
      raise ValueError("refinement must not be blank.")
    return value

  def to_refinement_request(self) -> RefinementRequest:
    design, design_mime_type = _decode_image(self.design_image)
    headshot, headshot_mime_type = _decode_image(self.persona_headshot) if self.persona_headshot else (None, "image/png")
    return RefinementRequest(
      original_prompt=self.original_prompt,
      refinement=self.refinement,
      design_image=design,
      design_mime_type=design_mime_type,
      persona_headshot=headshot,
      persona_headshot_mime_type=headshot_mime_type,
    )


class MockupRefineResponse(BaseModel):
  """A refined mockup image."""

  image_base64: str
  mime_type: str
  size_bytes: int
