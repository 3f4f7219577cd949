"""Product catalog, base colors and garment construction text."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.mockups.errors import UnknownKnowledgeKeyError
from app.mockups.knowledge.lookup import lookup
from app.mockups.models import ProductColor

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = "bella-3001"
DEFAULT_COLOR_HEX = "#FFFFFF"

STANDARD_COLORS: tuple[ProductColor, ...] = (
  ProductColor("White", "#FFFFFF", "light"),
  ProductColor("Black", "#000000", "dark"),
  ProductColor("Navy", "#1E3A5F", "dark"),
  ProductColor("Royal Blue", "#2E5090", "dark"),
  ProductColor("Carolina Blue", "#7BAFD4", "light"),
  ProductColor("Red", "#B22222", "dark"),
  ProductColor("Maroon", "#5D1A1A", "dark"),
  ProductColor("Forest Green", "#228B22", "dark"),
  ProductColor("Military Green", "#4B5320", "dark"),
  ProductColor("Charcoal", "#36454F", "dark"),
  ProductColor("Sport Grey", "#9EA1A1", "neutral"),
  ProductColor("Ash Grey", "#C4C4C4", "light"),
  ProductColor("Sand", "#C2B280", "light"),
  ProductColor("Natural", "#F5F5DC", "light"),
  ProductColor("Light Pink", "#FFB6C1", "light"),
  ProductColor("Purple", "#663399", "dark"),
  ProductColor("Orange", "#FF6600", "dark"),
  ProductColor("Gold", "#FFD700", "light"),
  ProductColor("Brown", "#654321", "dark"),
)

AOP_BASE_COLORS: tuple[ProductColor, ...] = (ProductColor("All-Over Print", "#FFFFFF", "light"),)

BAG_COLORS: tuple[ProductColor, ...] = (
  ProductColor("Natural", "#F5F5DC", "light"),
  ProductColor("Black", "#000000", "dark"),
  ProductColor("Navy", "#1E3A5F", "dark"),
  ProductColor("Red", "#B22222", "dark"),
)

HARD_GOOD_COLORS: tuple[ProductColor, ...] = (
  ProductColor("White", "#FFFFFF", "light"),
  ProductColor("Black", "#000000", "dark"),
)

_COLOR_INDEX: dict[str, ProductColor] = {color.name.lower(): color for color in STANDARD_COLORS + AOP_BASE_COLORS + BAG_COLORS}

SIZE_ALIASES: dict[str, str] = {"XS": "XS", "S": "S", "M": "M", "L": "L", "XL": "XL", "2XL": "XXL", "XXL": "XXL", "3XL": "XXXL", "XXXL": "XXXL", "4XL": "XXXL", "5XL": "XXXL"}


@dataclass(frozen=True)
class GarmentBlueprint:
  """Construction details that keep the garment identical across shots."""

  fit: str
  hem: str
  collar: str
  sleeves: str
  extra_features: str | None = None


@dataclass(frozen=True)
class Product:
  """A printable product from the catalog."""

  id: str
  name: str
  category: str
  subcategory: str
  product_type: str
  is_wearable: bool
  colors: tuple[ProductColor, ...]
  default_placement: str
  blueprint: GarmentBlueprint | None = None

  @property
  def is_aop(self) -> bool:
    return self.product_type == "aop-apparel"


_TEE = GarmentBlueprint(
  fit="Regular fit (not slim, not oversized)",
  hem="Straight hem with no side slits",
  collar="Ribbed crewneck (rounded collar, no buttons, no placket)",
  sleeves="Set-in short sleeves",
)
_SWEATSHIRT = GarmentBlueprint(fit="Regular fit", hem="Ribbed waistband", collar="Ribbed crewneck", sleeves="Set-in long sleeves with ribbed cuffs")
_HOODIE = GarmentBlueprint(
  fit="Regular fit",
  hem="Ribbed waistband",
  collar="Hood with drawstrings, attached to crewneck base",
  sleeves="Set-in long sleeves with ribbed cuffs",
  extra_features="Kangaroo pocket on front",
)
_LEGGINGS = GarmentBlueprint(
  fit="Form-fitting, high-waisted",
  hem="Flatlock seams at ankles",
  collar="N/A - Wide elastic waistband (3-4 inches)",
  sleeves="N/A - Full-length legs tapering to ankle",
  extra_features="82% Polyester/18% Spandex blend, flatlock seams for comfort",
)

PRODUCTS: dict[str, Product] = {
  product.id: product
  for product in (
    Product("gildan-5000", "Gildan 5000 Classic T-Shirt", "Apparel", "T-Shirts", "dtg-apparel", True, STANDARD_COLORS, "center-chest", _TEE),
    Product("bella-3001", "Bella+Canvas 3001 Unisex Jersey Tee", "Apparel", "T-Shirts", "dtg-apparel", True, STANDARD_COLORS, "center-chest", _TEE),
    Product("gildan-18000", "Gildan 18000 Crewneck Sweatshirt", "Apparel", "Sweatshirts", "dtg-apparel", True, STANDARD_COLORS, "center-chest-large", _SWEATSHIRT),
    Product("gildan-18500", "Gildan 18500 Pullover Hoodie", "Apparel", "Hoodies", "dtg-apparel", True, STANDARD_COLORS, "above-pocket", _HOODIE),
    Product("aop-tshirt", "All-Over Print T-Shirt", "Apparel", "T-Shirts", "aop-apparel", True, AOP_BASE_COLORS, "full-coverage", _TEE),
    Product("aop-hoodie", "All-Over Print Hoodie", "Apparel", "Hoodies", "aop-apparel", True, AOP_BASE_COLORS, "full-coverage-panels", _HOODIE),
    Product("aop-leggings", "All-Over Print Leggings", "Apparel", "Leggings", "aop-apparel", True, AOP_BASE_COLORS, "360-coverage", _LEGGINGS),
    Product("tote-bag", "Tote Bag", "Accessories", "Bags", "accessory-bag", False, BAG_COLORS, "front-center"),
    Product("ceramic-mug-11oz", "Ceramic Mug 11oz", "Home & Living", "Drinkware", "hard-good-mug", False, HARD_GOOD_COLORS, "wrap-around"),
    Product("phone-case", "Tough Phone Case", "Accessories", "Tech", "hard-good-phone-case", False, HARD_GOOD_COLORS, "back-full"),
    Product("poster", "Matte Poster", "Home & Living", "Wall Art", "home-decor-wall-art", False, HARD_GOOD_COLORS[:1], "full-bleed"),
  )
}

# Names the storefront sends, mapped onto catalog ids.
PRODUCT_NAME_MAP: dict[str, str] = {
  "t-shirt": "bella-3001",
  "tshirt": "bella-3001",
  "sweatshirt": "gildan-18000",
  "hoodie": "gildan-18500",
  "aop-t-shirt": "aop-tshirt",
  "aop-hoodie": "aop-hoodie",
  "leggings": "aop-leggings",
  "tote": "tote-bag",
  "mug": "ceramic-mug-11oz",
  "phone-case": "phone-case",
  "poster": "poster",
}


def get_product(key: str, *, strict: bool = False) -> Product:
  """Resolve a catalog id or storefront name to a product."""
  product_id = PRODUCT_NAME_MAP.get(key.strip().lower(), key)
  return lookup("product", PRODUCTS, product_id, default=DEFAULT_PRODUCT, strict=strict)


def find_color(name: str) -> ProductColor | None:
  """Return the catalog color for `name`, or None when it is not in any palette."""
  return _COLOR_INDEX.get(name.strip().lower())


def resolve_color(name: str, *, strict: bool = False) -> ProductColor:
  """Return the catalog color for `name`; unknown names raise in strict mode and fall back to white otherwise."""
  color = find_color(name)
  if color is not None:
    return color
  if strict:
    raise UnknownKnowledgeKeyError("color", name.strip())
  logger.warning("Unknown color key '%s'; falling back to '%s'.", name.strip(), DEFAULT_COLOR_HEX)
  return ProductColor(name.strip(), DEFAULT_COLOR_HEX)


def normalize_size(raw: str) -> str | None:
  """Map storefront size labels (2XL, 3XL...) onto model sizes."""
  return SIZE_ALIASES.get(raw.strip().upper())


def garment_blueprint_prompt(product: Product) -> str:
  """Describe garment construction so every shot shows the same garment."""
  blueprint = product.blueprint
  if blueprint is None:
    return ""
  prompt = f"Garment Construction: {blueprint.fit}. {blueprint.collar}. {blueprint.sleeves}. {blueprint.hem}."
  if blueprint.extra_features:
    prompt += f" Features: {blueprint.extra_features}."
  if product.is_aop:
    prompt += " AOP: Panel construction with solid color trims using the dominant accent color from the pattern."
  return prompt
