"""Brand style presets that drive environment and mood."""

from __future__ import annotations

from dataclasses import dataclass

from app.mockups.knowledge.lookup import lookup

DEFAULT_BRAND_STYLE = "ECOMMERCE_CLEAN"


@dataclass(frozen=True)
class BrandStyle:
  id: str
  name: str
  description: str
  atmosphere: str
  preferred_environment: str
  color_palette: str
  technical_notes: str
  platform_notes: str = ""


BRAND_STYLES: dict[str, BrandStyle] = {
  style.id: style
  for style in (
    BrandStyle(
      "ECOMMERCE_CLEAN",
      "E-commerce Clean",
      "Neutral, catalog-ready product presentation",
      "Bright, calm and uncluttered",
      "Seamless white or light grey studio sweep",
      "Neutral whites and soft greys",
      "True-to-life color, even exposure, no stylized grading",
      "Marketplace compliant: product fills most of the frame, no props.",
    ),
    BrandStyle(
      "EDITORIAL_FASHION",
      "Editorial Fashion",
      "Magazine-style fashion storytelling",
      "Confident and aspirational",
      "Minimal architectural interior with directional light",
      "Muted tones with one accent color",
      "Subtle film grain, controlled contrast, editorial crop",
    ),
    BrandStyle(
      "VINTAGE_RETRO",
      "Vintage Retro",
      "Nostalgic 70s-90s photographic feel",
      "Warm and relaxed",
      "Retro diner, record shop or sunlit suburban street",
      "Warm ambers, faded teals and creams",
      "Slightly lifted blacks and warm white balance",
    ),
    BrandStyle(
      "STREET_URBAN",
      "Street Urban",
      "Street-culture lifestyle imagery",
      "Energetic and raw",
      "City sidewalk, concrete walls, graffiti or skate park",
      "Concrete greys with saturated accents",
      "Crisp detail, punchy contrast, documentary framing",
    ),
    BrandStyle(
      "MINIMALIST_MODERN",
      "Minimalist Modern",
      "Clean modern design language",
      "Quiet and precise",
      "Plain colored backdrop with soft shadow",
      "Monochrome with pastel accents",
      "Generous negative space, symmetrical composition",
    ),
    BrandStyle(
      "BOLD_PLAYFUL",
      "Bold Playful",
      "Fun, colorful and youthful",
      "Joyful and loud",
      "Color-blocked studio set with simple geometric props",
      "Saturated primaries and candy tones",
      "High saturation, hard light allowed, dynamic angles",
    ),
    BrandStyle(
      "PREMIUM_LUXE",
      "Premium Luxe",
      "High-end luxury presentation",
      "Refined and exclusive",
      "Dark textured backdrop, marble or brushed metal surfaces",
      "Deep charcoals, gold and ivory",
      "Low-key lighting, rich blacks, precise specular control",
    ),
    BrandStyle(
      "NATURAL_ORGANIC",
      "Natural Organic",
      "Earthy, sustainable lifestyle",
      "Warm, honest and grounded",
      "Outdoor meadow, wooden interior or linen backdrop",
      "Earth tones, sage greens and sand",
      "Natural light look, soft contrast, organic textures",
    ),
  )
}

# Short labels accepted from the storefront.
STYLE_ALIASES: dict[str, str] = {
  "minimal": "MINIMALIST_MODERN",
  "editorial": "EDITORIAL_FASHION",
  "vintage": "VINTAGE_RETRO",
  "street": "STREET_URBAN",
  "ecommerce": "ECOMMERCE_CLEAN",
  "clean": "ECOMMERCE_CLEAN",
  "bold": "BOLD_PLAYFUL",
  "playful": "BOLD_PLAYFUL",
  "premium": "PREMIUM_LUXE",
  "luxe": "PREMIUM_LUXE",
  "natural": "NATURAL_ORGANIC",
  "organic": "NATURAL_ORGANIC",
}


def get_brand_style(key: str, *, strict: bool = False) -> BrandStyle:
  style_id = STYLE_ALIASES.get(key.strip().lower(), key)
  return lookup("brand style", BRAND_STYLES, style_id, default=DEFAULT_BRAND_STYLE, strict=strict)
