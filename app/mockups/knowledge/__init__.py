"""Read-only knowledge tables consumed by the lock compiler and persona generator."""

from app.mockups.knowledge.materials import get_fabric_physics, get_material_preset, get_print_method
from app.mockups.knowledge.negatives import CONTOUR_DISTORTION, HUMAN_REALISM, get_negative_prompts
from app.mockups.knowledge.personas import ETHNIC_FEATURES, sample_persona, somatic_profile
from app.mockups.knowledge.photography import get_camera_spec, get_lighting_setup
from app.mockups.knowledge.products import Product, find_color, garment_blueprint_prompt, get_product, normalize_size, resolve_color
from app.mockups.knowledge.styles import get_brand_style

__all__ = [
  "CONTOUR_DISTORTION",
  "ETHNIC_FEATURES",
  "HUMAN_REALISM",
  "Product",
  "find_color",
  "garment_blueprint_prompt",
  "get_brand_style",
  "get_camera_spec",
  "get_fabric_physics",
  "get_lighting_setup",
  "get_material_preset",
  "get_negative_prompts",
  "get_print_method",
  "get_product",
  "normalize_size",
  "resolve_color",
  "sample_persona",
  "somatic_profile",
]
