"""Negative prompts plus contour and human realism guidance."""

from __future__ import annotations

TECHNICAL_FLAWS: tuple[str, ...] = ("blurry", "out of focus", "low resolution", "jpeg artifacts", "overexposed", "underexposed", "noise")
AI_ARTIFACTS: tuple[str, ...] = ("distorted text", "warped design", "melted edges", "duplicated design", "floating print", "misaligned seams")
UNWANTED_STYLES: tuple[str, ...] = ("cartoon", "illustration", "3d render", "cgi look", "plastic look", "watermark", "logo overlay")
APPAREL_NEGATIVES: tuple[str, ...] = ("design on sleeve", "off-center print", "wrong garment type", "extra pockets", "visible tags", "wrinkled print")
HUMAN_SUBJECT_NEGATIVES: tuple[str, ...] = (
  "extra fingers",
  "deformed hands",
  "asymmetric eyes",
  "waxy skin",
  "airbrushed skin",
  "different person",
  "changing face",
  "mannequin look",
)

CONTOUR_DISTORTION = (
  "The print must wrap the body: compress slightly in fold valleys, stretch over the chest curvature, "
  "follow cylindrical mapping around the torso edges and keep vertical perspective consistent with the camera height."
)

HUMAN_REALISM = (
  "HUMAN REALISM: natural skin texture with visible pores and subtle imperfections, realistic hair strands, "
  "anatomically correct hands with five fingers, natural relaxed posture, catchlights in both eyes, no retouching artifacts."
)


def get_negative_prompts(product_type: str, has_human: bool) -> str:
  """Combine the negative prompt groups that apply to a product and subject."""
  groups: list[str] = [*TECHNICAL_FLAWS, *AI_ARTIFACTS, *UNWANTED_STYLES]
  if product_type.endswith("apparel"):
    groups.extend(APPAREL_NEGATIVES)
  if has_human:
    groups.extend(HUMAN_SUBJECT_NEGATIVES)
  return ", ".join(groups)
