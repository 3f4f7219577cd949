"""Material condition presets, fabric physics and print methods."""

from __future__ import annotations

from dataclasses import dataclass

from app.mockups.knowledge.lookup import lookup

DEFAULT_MATERIAL = "BRAND_NEW"


@dataclass(frozen=True)
class MaterialPreset:
  id: str
  name: str
  description: str
  prompt_addition: str


@dataclass(frozen=True)
class FabricPhysics:
  fabric_type: str
  weight: str
  drape_factor: int
  texture_density: str
  print_absorption: str
  fold_characteristics: str


@dataclass(frozen=True)
class PrintMethod:
  id: str
  name: str
  technical_description: str


MATERIAL_PRESETS: dict[str, MaterialPreset] = {
  preset.id: preset
  for preset in (
    MaterialPreset(
      "BRAND_NEW",
      "Brand New",
      "Crisp, freshly unpacked garment",
      "Fabric is crisp and new with sharp factory folds relaxed out, vivid print, no pilling or fading.",
    ),
    MaterialPreset(
      "LIVED_IN",
      "Lived In",
      "Soft, washed a few times",
      "Fabric is softened from a few washes with gentle natural creasing; print slightly integrated into the fibers.",
    ),
    MaterialPreset(
      "VINTAGE_DISTRESSED",
      "Vintage Distressed",
      "Heavily worn vintage look",
      "Fabric shows authentic wear: faded color, light pilling, cracked print texture consistent with years of washing.",
    ),
  )
}

FABRIC_PHYSICS: dict[str, FabricPhysics] = {
  "T-Shirts": FabricPhysics("100% combed ring-spun cotton jersey", "4.2 oz/yd²", 70, "fine jersey knit", "high, ink sits close to fibers", "soft rolling folds at waist and elbows"),
  "Sweatshirts": FabricPhysics("cotton/polyester fleece", "8.0 oz/yd²", 40, "smooth face, brushed interior", "moderate", "thick rounded folds, minimal fine wrinkles"),
  "Hoodies": FabricPhysics("cotton/polyester fleece", "8.0 oz/yd²", 40, "smooth face, brushed interior", "moderate", "heavy folds around pocket and hood base"),
  "Leggings": FabricPhysics("polyester/spandex", "7.5 oz/yd²", 20, "smooth performance knit", "full dye sublimation", "compression folds behind knees only"),
}

PRINT_METHODS: dict[str, PrintMethod] = {
  "DTG": PrintMethod(
    "DTG",
    "Direct-to-Garment",
    "Water-based ink jetted into the fabric; matte finish, soft hand feel, slight fiber texture visible through the print.",
  ),
  "AOP": PrintMethod(
    "AOP",
    "Dye Sublimation",
    "Dye sublimated into polyester fibers; zero surface build-up, fabric texture fully visible, edge-to-edge coverage.",
  ),
}


def get_material_preset(key: str, *, strict: bool = False) -> MaterialPreset:
  return lookup("material condition", MATERIAL_PRESETS, key, default=DEFAULT_MATERIAL, strict=strict)


def get_fabric_physics(subcategory: str) -> FabricPhysics | None:
  # Hard goods have no fabric behavior to describe.
  return FABRIC_PHYSICS.get(subcategory)


def get_print_method(journey: str) -> PrintMethod:
  return PRINT_METHODS[journey]
