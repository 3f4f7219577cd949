"""Camera specs per angle and lighting setups."""

from __future__ import annotations

from dataclasses import dataclass

from app.mockups.knowledge.lookup import lookup

DEFAULT_ANGLE = "front"
DEFAULT_LIGHTING = "three-point-classic"


@dataclass(frozen=True)
class CameraSpec:
  angle: str
  lens_type: str
  focal_length: str
  aperture: str
  depth_of_field: str
  perspective: str
  prompt_addition: str


@dataclass(frozen=True)
class LightingSetup:
  id: str
  name: str
  color_temperature: str
  light_ratio: str
  shadow_type: str
  highlights: str
  prompt_phrase: str


CAMERA_SPECS: dict[str, CameraSpec] = {
  spec.angle: spec
  for spec in (
    CameraSpec(
      "front",
      "85mm portrait lens",
      "85mm",
      "f/8",
      "deep, entire product sharp",
      "straight-on at chest height",
      "Subject faces the camera squarely; shoulders level; full print area visible.",
    ),
    CameraSpec(
      "back",
      "85mm portrait lens",
      "85mm",
      "f/8",
      "deep, entire product sharp",
      "straight-on from behind at chest height",
      "Subject faces away from the camera; back panel fully visible; no face shown.",
    ),
    CameraSpec(
      "three-quarter",
      "70mm short telephoto",
      "70mm",
      "f/5.6",
      "moderate, product sharp with soft falloff",
      "45 degrees off axis at eye level",
      "Body rotated 45 degrees; print still readable with natural perspective foreshortening.",
    ),
    CameraSpec(
      "side",
      "70mm short telephoto",
      "70mm",
      "f/5.6",
      "moderate",
      "90 degree profile at chest height",
      "Strict side profile showing garment silhouette, sleeve and side seam.",
    ),
    CameraSpec(
      "closeup",
      "100mm macro lens",
      "100mm",
      "f/11",
      "shallow band focused on the print surface",
      "slightly above, filling the frame with the print area",
      "Tight crop on the printed design revealing fabric weave and ink texture.",
    ),
  )
}

LIGHTING_SETUPS: dict[str, LightingSetup] = {
  setup.id: setup
  for setup in (
    LightingSetup(
      "three-point-classic",
      "Three-point studio lighting",
      "5500K",
      "3:1",
      "soft, graduated",
      "controlled specular",
      "Professional three-point studio lighting with soft key at 45 degrees, fill opposite and a subtle rim light.",
    ),
    LightingSetup(
      "high-key-white",
      "High-key white",
      "6000K",
      "1.5:1",
      "minimal, nearly shadowless",
      "bright, even",
      "Bright high-key lighting on a white sweep with minimal shadows.",
    ),
    LightingSetup(
      "softbox-diffused",
      "Large softbox diffusion",
      "5600K",
      "2:1",
      "very soft, wrapping",
      "broad and gentle",
      "Large overhead softbox producing wrapping, flattering light.",
    ),
    LightingSetup(
      "golden-hour",
      "Golden hour natural light",
      "3500K",
      "4:1",
      "long, warm",
      "warm rim highlights",
      "Low warm sun behind the subject with natural bounce fill.",
    ),
    LightingSetup(
      "dramatic-rim",
      "Dramatic rim light",
      "5000K",
      "8:1",
      "deep, defined",
      "strong edge highlights",
      "Low-key lighting with strong rim lights separating the subject from a dark background.",
    ),
  )
}


def get_camera_spec(angle: str, *, strict: bool = False) -> CameraSpec:
  return lookup("camera angle", CAMERA_SPECS, angle, default=DEFAULT_ANGLE, strict=strict)


def get_lighting_setup(key: str, *, strict: bool = False) -> LightingSetup:
  return lookup("lighting preset", LIGHTING_SETUPS, key, default=DEFAULT_LIGHTING, strict=strict)
