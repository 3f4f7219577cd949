"""Compile per-job render specifications from immutable lock fragments."""

from __future__ import annotations

from dataclasses import dataclass

from app.mockups.knowledge import (
  CONTOUR_DISTORTION,
  HUMAN_REALISM,
  garment_blueprint_prompt,
  get_brand_style,
  get_camera_spec,
  get_fabric_physics,
  get_lighting_setup,
  get_material_preset,
  get_negative_prompts,
  get_print_method,
  get_product,
)
from app.mockups.knowledge.materials import FabricPhysics
from app.mockups.models import (
  DEFAULT_DESIGN_ANALYSIS,
  DesignAnalysis,
  GenerationJob,
  JourneyType,
  MockupAngle,
  ModelSize,
  PersonaLock,
  ProductColor,
  VariantLock,
)

PROMPT_HEADER = "MOCKUP RENDER SPECIFICATION\n" + "=" * 64


@dataclass(frozen=True)
class RenderInputs:
  """Everything that determines the prompt for one render."""

  product: str
  color: ProductColor
  angle: MockupAngle
  size: ModelSize
  brand_style: str = "ECOMMERCE_CLEAN"
  material_condition: str = "BRAND_NEW"
  lighting_preset: str = "three-point-classic"
  journey: JourneyType = "DTG"
  design: DesignAnalysis = DEFAULT_DESIGN_ANALYSIS
  environment_prompt: str | None = None
  persona_lock: PersonaLock | None = None

  @classmethod
  def from_job(cls, job: GenerationJob) -> RenderInputs:
    shared = job.shared
    return cls(
      product=shared.product_key,
      color=job.variant.color,
      angle=job.variant.angle,
      size=job.variant.size,
      brand_style=shared.brand_style,
      material_condition=shared.material_condition,
      lighting_preset=shared.lighting_preset,
      journey=shared.journey,
      design=shared.design,
      environment_prompt=shared.environment_prompt,
      persona_lock=shared.persona_lock,
    )


@dataclass(frozen=True)
class RenderSpecification:
  """Ordered locks plus the final prompt pair sent upstream."""

  locks: tuple[VariantLock, ...]
  prompt: str
  negative_prompt: str

  def lock(self, category: str) -> VariantLock | None:
    for lock in self.locks:
      if lock.category == category:
        return lock
    return None


def _block(title: str, body: str) -> str:
  return f"===== {title} =====\n{body.strip()}\n===== END {title} ====="


def _fabric_lines(physics: FabricPhysics | None, *, include_absorption: bool) -> str:
  if physics is None:
    return ""
  lines = [
    f"- Weight: {physics.weight}",
    f"- Drape factor: {physics.drape_factor}%",
    f"- Surface texture: {physics.texture_density}",
  ]
  if include_absorption:
    lines.append(f"- Print absorption: {physics.print_absorption}")
  lines.append(f"- Fold characteristics: {physics.fold_characteristics}")
  return "\n".join(lines)


def _persona_block(persona_lock: PersonaLock) -> str:
  persona = persona_lock.persona
  other_sex = "female" if persona.sex == "Male" else "male"
  body = f"""[LOCKED - DO NOT DEVIATE FROM THESE IDENTITY DETAILS]
- Persona ID: {persona.id}
- Name: {persona.name}
- Age: {persona.age}
- Sex: {persona.sex}
- Ethnicity: {persona.ethnicity}
- Height: {persona.height}
- Weight: {persona.weight}
- Build: {persona.build}
- Hair: {persona.hair_style}, {persona.hair_color}
- Eyes: {persona.eye_color}
- Skin tone: {persona.skin_tone}
- Facial features: {persona.facial_features}
- Full description: {persona_lock.somatic_description}

IDENTITY ENFORCEMENT:
- The model MUST be {persona.sex.lower()}; never show a {other_sex}.
- The model MUST have {persona.ethnicity} appearance with matching skin tone, facial features and hair.
- The body MUST match the build ({persona.build}) and weight ({persona.weight}).
- When a reference headshot is attached, the model MUST be exactly that person.

{HUMAN_REALISM}"""
  return _block("PERSONA LOCK", body)


def _color_block(inputs: RenderInputs) -> str:
  lines = [
    "[LOCKED - EXACT COLORS REQUIRED]",
    f"- Product base color: {inputs.color.name} ({inputs.color.hex})",
    "- This exact color must be visible on every non-printed area of the product",
    f"- Design colors: {', '.join(inputs.design.dominant_colors)}",
    "- Reproduce the design colors without any color shift",
  ]
  if inputs.journey == "AOP" and inputs.design.aop_accent_color:
    lines.append(f"- AOP accent color (collar/cuffs): {inputs.design.aop_accent_color}")
  return _block("COLOR LOCK", "\n".join(lines))


def _design_block(inputs: RenderInputs, physics: FabricPhysics | None, print_description: str) -> str:
  design = inputs.design
  lines = [
    "[LOCKED - DESIGN APPLICATION RULES]",
    f"- Design style: {design.style}",
    f"- Design complexity: {design.complexity}",
    f"- Design type: {design.design_type}",
    f"- Placement: {design.suggested_placement}",
    "",
  ]
  if inputs.journey == "DTG":
    lines.extend(
      [
        "DTG PRINT METHOD:",
        "- Printed directly onto the fabric surface, following its contours and folds",
        "- Original colors and proportions are preserved",
        "- The design sits centered on the chest, below the collar and above the stomach",
        "- Never place the design on a side, shoulder or sleeve",
      ]
    )
    fabric = _fabric_lines(physics, include_absorption=False)
    if fabric:
      lines.extend(["", "FABRIC BEHAVIOR:", fabric])
  else:
    lines.extend(
      [
        "AOP PRINT METHOD:",
        "- Seamless edge-to-edge sublimation print",
        "- The pattern tiles continuously across the whole garment",
        "- Dye is infused into the fibers with no texture difference",
        "- Pattern scale stays consistent across seams",
      ]
    )
  lines.append(print_description)
  return _block("DESIGN LOCK", "\n".join(lines))


def _aop_block(physics: FabricPhysics | None) -> str:
  body = """[LOCKED - AOP-SPECIFIC REQUIREMENTS]

CONSTRUCTION:
- The pattern tiles seamlessly across every panel
- The pattern aligns at side seams, shoulder seams and armholes

SCALE:
- Pattern elements keep the same physical size on front and back panels
- Scale never distorts at edges or seams

PHYSICS:
- Drape matches sublimation polyester
- Folds compress the pattern in valleys and stretch it on peaks"""
  fabric = _fabric_lines(physics, include_absorption=True)
  if fabric:
    body += f"\n\nFABRIC PHYSICS DETAILS:\n{fabric}"
  return _block("AOP CONSTRUCTION/SCALE/PHYSICS LOCK", body)


def compile_locks(inputs: RenderInputs, *, strict: bool = False) -> RenderSpecification:
  """Build the locks and prompt for one render; equal inputs give identical output."""
  product = get_product(inputs.product, strict=strict)
  style = get_brand_style(inputs.brand_style, strict=strict)
  camera = get_camera_spec(inputs.angle, strict=strict)
  lighting = get_lighting_setup(inputs.lighting_preset, strict=strict)
  material = get_material_preset(inputs.material_condition, strict=strict)
  print_method = get_print_method(inputs.journey)
  physics = get_fabric_physics(product.subcategory)
  design = inputs.design
  has_human = product.is_wearable and inputs.persona_lock is not None

  locks: list[VariantLock] = [
    VariantLock(
      "product",
      f"{product.name} - {product.category}",
      {
        "product_id": product.id,
        "product_name": product.name,
        "category": product.category,
        "subcategory": product.subcategory,
        "product_type": product.product_type,
        "is_wearable": product.is_wearable,
        "print_method": inputs.journey,
        "material_condition": material.id,
        "material_preset_name": material.name,
      },
    ),
    VariantLock(
      "color",
      f"{inputs.color.name} ({inputs.color.hex})",
      {
        "product_color": inputs.color.name,
        "product_hex": inputs.color.hex,
        "design_colors": design.dominant_colors,
        "aop_accent_color": design.aop_accent_color,
      },
    ),
    VariantLock(
      "design",
      f"{design.design_type} - {design.style}",
      {
        "style": design.style,
        "complexity": design.complexity,
        "design_type": design.design_type,
        "placement": design.suggested_placement,
        "print_method": inputs.journey,
        "has_transparency": design.has_transparency,
      },
    ),
    VariantLock(
      "camera",
      f"{camera.angle} view",
      {
        "angle": camera.angle,
        "lens_type": camera.lens_type,
        "focal_length": camera.focal_length,
        "aperture": camera.aperture,
        "depth_of_field": camera.depth_of_field,
      },
    ),
    VariantLock(
      "lighting",
      lighting.name,
      {
        "setup_name": lighting.name,
        "color_temperature": lighting.color_temperature,
        "light_ratio": lighting.light_ratio,
        "shadow_type": lighting.shadow_type,
      },
    ),
  ]

  blocks: list[str] = []
  if has_human:
    persona_lock = inputs.persona_lock
    persona = persona_lock.persona
    locks.append(
      VariantLock(
        "persona",
        f"{persona.name} ({persona.age} {persona.ethnicity} {persona.sex})",
        {
          "persona_id": persona.id,
          "name": persona.name,
          "age": persona.age,
          "sex": persona.sex,
          "ethnicity": persona.ethnicity,
          "has_headshot": persona_lock.has_headshot,
        },
      )
    )
    locks.append(VariantLock("size_fit", f"Size {inputs.size}", {"size": inputs.size, "build": persona.build, "material_condition": material.id}))
    blocks.append(_persona_block(persona_lock))
  elif product.is_wearable:
    blocks.append(_block("DISPLAY MODE", "Product displayed on an invisible mannequin or as a flat lay (no human model)."))

  blocks.append(_color_block(inputs))

  if has_human:
    fit_body = f"""[LOCKED - GARMENT MUST FIT AS SPECIFIED]
- Model size: {inputs.size}
- Build type: {inputs.persona_lock.persona.build}
- The garment is properly fitted for this body, neither baggy nor overly tight
{material.prompt_addition}"""
    blocks.append(_block("SIZE/FIT LOCK", fit_body))

  blocks.append(_design_block(inputs, physics, print_method.technical_description))

  camera_body = f"""[LOCKED - EXACT CAMERA SETTINGS]
- View: {camera.angle.upper()}
- Lens type: {camera.lens_type}
- Focal length: {camera.focal_length}
- Aperture: {camera.aperture}
- Depth of field: {camera.depth_of_field}
- Perspective: {camera.perspective}
{camera.prompt_addition}"""
  blocks.append(_block("CAMERA/POSE LOCK", camera_body))

  lighting_body = f"""[LOCKED - CONSISTENT LIGHTING ACROSS ALL SHOTS]
- Setup: {lighting.name}
- Color temperature: {lighting.color_temperature}
- Key to fill ratio: {lighting.light_ratio}
- Shadow type: {lighting.shadow_type}
- Highlights: {lighting.highlights}
{lighting.prompt_phrase}"""
  blocks.append(_block("LIGHTING LOCK", lighting_body))

  if inputs.journey == "AOP":
    locks.append(VariantLock("aop_physics", "Seamless AOP tiling", {"fabric_type": physics.fabric_type if physics else None}))
    blocks.append(_aop_block(physics))

  if product.is_wearable:
    blueprint = garment_blueprint_prompt(product)
    if blueprint:
      blocks.append(_block("GARMENT CONSTRUCTION", blueprint))

  if has_human:
    locks.append(VariantLock("contour", "Print follows body contours", {"angle": camera.angle}))
    blocks.append(_block("CONTOUR DISTORTION RULES", CONTOUR_DISTORTION))

  environment_body = f"""- Brand style: {style.name}
- Mood: {style.description}
- Atmosphere: {style.atmosphere}
- Setting: {inputs.environment_prompt or style.preferred_environment}
- Color palette mood: {style.color_palette}
{style.platform_notes}"""
  blocks.append(_block("ENVIRONMENT", environment_body))

  requirements = f"""- Output: photorealistic commercial product photography
- Quality: 8K resolution, sharp focus, professional studio standards
- Design follows fabric contours with accurate color reproduction
- Style: {style.technical_notes}"""
  blocks.append(_block("TECHNICAL REQUIREMENTS", requirements))

  negative_prompt = get_negative_prompts(product.product_type, has_human)
  blocks.append(_block("NEGATIVE PROMPTS (MUST AVOID)", negative_prompt))

  prompt = "\n\n".join([PROMPT_HEADER, *blocks])
  return RenderSpecification(locks=tuple(locks), prompt=prompt, negative_prompt=negative_prompt)


def compile_refinement_prompt(original_prompt: str, refinement: str) -> str:
  """Prompt for refining an existing render while keeping every lock in place."""
  refinement = refinement.strip()
  if not refinement:
    raise ValueError("Refinement instructions must not be empty.")
  return f"{original_prompt.rstrip()}\n\n{_block('REFINEMENT', refinement)}\n\nKeep every other aspect of the original image unchanged and apply only the refinement above."
