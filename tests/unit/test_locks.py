from __future__ import annotations

import pytest

from app.mockups.errors import UnknownKnowledgeKeyError
from app.mockups.locks import RenderInputs, compile_locks, compile_refinement_prompt
from app.mockups.models import DEFAULT_DESIGN_ANALYSIS, DesignAnalysis, ModelDetails, ProductColor
from app.mockups.persona import generate_persona_description

BLACK = ProductColor("Black", "#000000", "dark")


def _persona_lock():
  return generate_persona_description(ModelDetails(age="Adult", sex="Female", ethnicity="Asian", size="M"), seed=7)


def test_same_inputs_produce_identical_prompts() -> None:
  persona_lock = _persona_lock()
  first = compile_locks(RenderInputs(product="t-shirt", color=BLACK, angle="front", size="M", persona_lock=persona_lock), strict=True)
  second = compile_locks(RenderInputs(product="t-shirt", color=BLACK, angle="front", size="M", persona_lock=persona_lock), strict=True)
  assert first.prompt == second.prompt
  assert first.negative_prompt == second.negative_prompt
  assert first.locks == second.locks


def test_wearable_with_persona_carries_identity_fit_and_contour_locks() -> None:
  persona_lock = _persona_lock()
  spec = compile_locks(RenderInputs(product="t-shirt", color=BLACK, angle="three-quarter", size="L", persona_lock=persona_lock), strict=True)

  categories = [lock.category for lock in spec.locks]
  assert categories == ["product", "color", "design", "camera", "lighting", "persona", "size_fit", "contour"]
  assert "PERSONA LOCK" in spec.prompt
  assert persona_lock.persona.id in spec.prompt
  assert "Model size: L" in spec.prompt
  assert "Black (#000000)" in spec.prompt
  assert "View: THREE-QUARTER" in spec.prompt
  assert "extra fingers" in spec.negative_prompt
  assert spec.lock("persona").details["persona_id"] == persona_lock.persona.id


def test_wearable_without_persona_uses_display_mode() -> None:
  spec = compile_locks(RenderInputs(product="hoodie", color=BLACK, angle="front", size="M"), strict=True)
  assert "DISPLAY MODE" in spec.prompt
  assert "PERSONA LOCK" not in spec.prompt
  assert spec.lock("persona") is None
  assert "extra fingers" not in spec.negative_prompt


def test_hard_goods_skip_garment_and_persona_blocks() -> None:
  spec = compile_locks(RenderInputs(product="mug", color=ProductColor("White", "#FFFFFF"), angle="front", size="M", persona_lock=_persona_lock()), strict=True)
  assert "DISPLAY MODE" not in spec.prompt
  assert "GARMENT CONSTRUCTION" not in spec.prompt
  assert spec.lock("persona") is None


def test_aop_journey_adds_physics_lock_and_accent_color() -> None:
  design = DesignAnalysis(
    dominant_colors=("#112233",),
    style="floral",
    complexity="complex",
    suggested_placement="all over",
    has_transparency=False,
    design_type="pattern",
    aop_accent_color="#AA0000",
  )
  spec = compile_locks(RenderInputs(product="aop-tshirt", color=ProductColor("All-Over Print", "#FFFFFF"), angle="back", size="M", journey="AOP", design=design), strict=True)
  assert spec.lock("aop_physics") is not None
  assert "AOP accent color (collar/cuffs): #AA0000" in spec.prompt
  assert "AOP PRINT METHOD" in spec.prompt
  assert "DTG PRINT METHOD" not in spec.prompt


def test_environment_prompt_overrides_style_setting() -> None:
  spec = compile_locks(RenderInputs(product="t-shirt", color=BLACK, angle="front", size="M", environment_prompt="rooftop at dusk"), strict=True)
  assert "Setting: rooftop at dusk" in spec.prompt


def test_lock_details_are_read_only() -> None:
  spec = compile_locks(RenderInputs(product="t-shirt", color=BLACK, angle="front", size="M", design=DEFAULT_DESIGN_ANALYSIS), strict=True)
  with pytest.raises(TypeError):
    spec.lock("color").details["product_hex"] = "#FFFFFF"  # type: ignore[index]


def test_strict_mode_rejects_unknown_lighting() -> None:
  with pytest.raises(UnknownKnowledgeKeyError):
    compile_locks(RenderInputs(product="t-shirt", color=BLACK, angle="front", size="M", lighting_preset="neon"), strict=True)


def test_refinement_prompt_keeps_original_and_appends_instruction() -> None:
  prompt = compile_refinement_prompt("ORIGINAL PROMPT", "  make the shadow softer ")
  assert prompt.startswith("ORIGINAL PROMPT")
  assert "make the shadow softer" in prompt
  assert prompt.endswith("apply only the refinement above.")
  with pytest.raises(ValueError):
    compile_refinement_prompt("ORIGINAL PROMPT", "   ")
