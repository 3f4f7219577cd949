"""Persona tables: names, ethnic features and somatic profiles."""

from __future__ import annotations

import random
from dataclasses import dataclass

from app.mockups.models import AgeGroup, Ethnicity, ModelDetails, ModelSize, Persona, Sex

NAMES_BY_SEX_AND_ETHNICITY: dict[Sex, dict[Ethnicity, tuple[str, ...]]] = {
  "Female": {
    "White": ("Chloe", "Isabelle", "Emma", "Olivia", "Sophia", "Ava", "Mia"),
    "Black": ("Amara", "Zoe", "Nia", "Maya", "Aaliyah", "Imani", "Keisha"),
    "Hispanic": ("Sofia", "Elena", "Isabella", "Valentina", "Camila", "Lucia", "Maria"),
    "Asian": ("Mei", "Hana", "Yuki", "Li Wei", "Ji-won", "Sakura", "Aiko"),
    "Indian": ("Priya", "Anjali", "Kavya", "Isha", "Neha", "Diya", "Aisha"),
    "Southeast Asian": ("Linh", "Mai", "Anh", "Siti", "Dara", "Putri", "Mei Lin"),
    "Middle Eastern": ("Fatima", "Layla", "Yasmin", "Noor", "Salma", "Zahra", "Maryam"),
    "Indigenous": ("Kaya", "Aiyana", "Nizhoni", "Chenoa", "Takoda", "Aponi", "Winona"),
    "Diverse": ("Nia", "Alex", "Jordan", "Casey", "Riley", "Avery", "Sage"),
  },
  "Male": {
    "White": ("Ethan", "Noah", "Liam", "Mason", "Lucas", "James", "Oliver"),
    "Black": ("Jamal", "Marcus", "Darius", "Terrell", "Isaiah", "DeShawn", "Andre"),
    "Hispanic": ("Diego", "Carlos", "Miguel", "Alejandro", "Luis", "Fernando", "Mateo"),
    "Asian": ("Kenji", "Hiro", "Jin", "Tao", "Wei", "Ryu", "Kai"),
    "Indian": ("Arjun", "Rohan", "Raj", "Vikram", "Aditya", "Karan", "Dev"),
    "Southeast Asian": ("Nguyen", "Somchai", "Dimas", "Budi", "Kiet", "Ahmad", "Tan"),
    "Middle Eastern": ("Omar", "Hassan", "Yusuf", "Khalid", "Tariq", "Amir", "Karim"),
    "Indigenous": ("Chayton", "Kai", "Ahanu", "Tahoma", "Dakota", "Enapay", "Makya"),
    "Diverse": ("River", "Phoenix", "Sage", "Atlas", "Canyon", "Sterling", "Cruz"),
  },
}


@dataclass(frozen=True)
class EthnicFeatures:
  hair_colors: tuple[str, ...]
  eye_colors: tuple[str, ...]
  hair_styles: tuple[str, ...]
  skin_tones: tuple[str, ...]


ETHNIC_FEATURES: dict[Ethnicity, EthnicFeatures] = {
  "White": EthnicFeatures(
    ("sandy blonde", "golden blonde", "ash brown", "chestnut brown", "auburn red", "jet black"),
    ("bright blue", "emerald green", "grey", "hazel", "light brown"),
    ("long and wavy", "a short, chic bob", "shoulder-length with soft layers", "short textured crop"),
    ("fair with pink undertones", "light with neutral undertones", "light olive"),
  ),
  "Black": EthnicFeatures(
    ("jet black", "dark brown", "deep auburn"),
    ("deep brown", "dark brown", "amber"),
    ("natural afro curls", "tightly coiled hair", "braided cornrows", "a stylish short crop", "locs"),
    ("deep brown with warm undertones", "rich ebony", "medium brown with golden undertones"),
  ),
  "Hispanic": EthnicFeatures(
    ("jet black", "dark brown", "chestnut brown", "caramel highlights"),
    ("deep brown", "hazel", "honey brown"),
    ("long and wavy", "thick and straight", "curly layers", "short fade"),
    ("tan with golden undertones", "light brown", "olive"),
  ),
  "Asian": EthnicFeatures(
    ("jet black", "darkest brown"),
    ("deep brown", "dark brown"),
    ("long and straight", "a short, sharp bob", "soft waves", "short layered cut"),
    ("light with warm undertones", "medium with neutral undertones"),
  ),
  "Indian": EthnicFeatures(
    ("jet black", "deep dark brown"),
    ("dark brown", "deep brown"),
    ("long, thick, and wavy", "in a traditional braid", "voluminous and straight", "short neat side part"),
    ("light brown with warm undertones", "medium brown", "deep brown"),
  ),
  "Southeast Asian": EthnicFeatures(
    ("jet black", "dark brown"),
    ("dark brown", "deep brown"),
    ("long and straight", "shoulder-length layers", "a soft, natural look"),
    ("tan with golden undertones", "medium brown"),
  ),
  "Middle Eastern": EthnicFeatures(
    ("jet black", "dark brown", "black with subtle highlights"),
    ("deep brown", "hazel", "amber", "green"),
    ("long and thick", "voluminous curls", "sleek and straight", "short groomed cut"),
    ("olive", "light brown with warm undertones"),
  ),
  "Indigenous": EthnicFeatures(
    ("jet black", "dark brown"),
    ("deep brown", "dark brown"),
    ("long and straight, worn down or in braids", "thick and full"),
    ("medium brown with warm undertones", "copper brown"),
  ),
  "Diverse": EthnicFeatures(
    ("dark brown", "caramel blonde", "jet black", "auburn"),
    ("hazel", "light brown", "green", "amber"),
    ("a mix of curly and wavy textures", "voluminous curls", "a fashionable bob", "long layers"),
    ("warm beige", "golden tan", "medium caramel"),
  ),
}

FACIAL_FEATURES: tuple[str, ...] = (
  "defined cheekbones, straight nose, full lips",
  "soft rounded face, warm smile lines, gentle brow",
  "strong jawline, high forehead, slightly arched brows",
  "oval face, almond-shaped eyes, light freckles",
  "heart-shaped face, dimples, expressive eyebrows",
)

HEIGHT_BASE_INCHES: dict[Sex, dict[Ethnicity, int]] = {
  "Male": {"White": 70, "Black": 70, "Hispanic": 67, "Asian": 67, "Indian": 66, "Southeast Asian": 65, "Middle Eastern": 68, "Indigenous": 68, "Diverse": 68},
  "Female": {"White": 65, "Black": 64, "Hispanic": 62, "Asian": 62, "Indian": 61, "Southeast Asian": 60, "Middle Eastern": 63, "Indigenous": 63, "Diverse": 63},
}

SIZE_HEIGHT_MODIFIER: dict[ModelSize, int] = {"XS": -2, "S": -1, "M": 0, "L": 1, "XL": 2, "XXL": 2, "XXXL": 2}

SIZE_WEIGHT_MULTIPLIER: dict[ModelSize, tuple[float, float]] = {
  "XS": (0.75, 0.85),
  "S": (0.85, 0.95),
  "M": (0.95, 1.05),
  "L": (1.05, 1.20),
  "XL": (1.20, 1.40),
  "XXL": (1.40, 1.60),
  "XXXL": (1.60, 1.85),
}

SIZE_BUILD: dict[ModelSize, str] = {
  "XS": "very slender, petite frame",
  "S": "slender, lean build",
  "M": "athletic, average build",
  "L": "solid, sturdy build",
  "XL": "stocky, fuller build",
  "XXL": "heavyset, broad frame",
  "XXXL": "plus-size, very broad frame",
}

# (height modifier inches, weight multiplier, build note, representative age)
AGE_MODIFIERS: dict[AgeGroup, tuple[int, float, str, int]] = {
  "Teen": (-3, 0.80, "developing proportions, maturing features", 17),
  "Young Adult": (0, 1.0, "peak physical form, developed musculature", 24),
  "Adult": (0, 1.05, "mature proportions, settled physique", 35),
  "Senior": (-1, 0.95, "mature proportions, possible slight posture changes", 67),
}

ETHNICITY_DESCRIPTIONS: dict[Ethnicity, str] = {
  "White": "light skin, varied eye colors",
  "Black": "brown to dark skin, dark eyes",
  "Hispanic": "tan to light brown skin, dark eyes",
  "Asian": "light to medium skin, dark eyes",
  "Indian": "light brown to brown skin, dark eyes",
  "Southeast Asian": "tan skin, dark eyes",
  "Middle Eastern": "olive to light brown skin, dark or hazel eyes, prominent features",
  "Indigenous": "medium brown skin, dark eyes, prominent cheekbones",
  "Diverse": "blended skin tones, varied eye colors",
}


@dataclass(frozen=True)
class SomaticProfile:
  height: str
  weight: str
  build: str
  description: str


def _feet(inches: int) -> str:
  return f"{inches // 12}'{inches % 12}\""


def somatic_profile(details: ModelDetails) -> SomaticProfile:
  """Derive height, weight and build for the requested demographics."""
  height_mod, weight_mod, build_note, _ = AGE_MODIFIERS[details.age]
  height = HEIGHT_BASE_INCHES[details.sex][details.ethnicity] + SIZE_HEIGHT_MODIFIER[details.size] + height_mod

  # Base weight scales with height; the size band then widens or narrows it.
  base_weight = (height - 60) * 5 + 140 if details.sex == "Male" else (height - 60) * 4.5 + 110
  low, high = SIZE_WEIGHT_MULTIPLIER[details.size]
  weight_min = round(base_weight * low * weight_mod)
  weight_max = round(base_weight * high * weight_mod)

  build = f"{SIZE_BUILD[details.size]}, {build_note}"
  description = f"{details.sex} {details.age.lower()} with {build}. {ETHNICITY_DESCRIPTIONS[details.ethnicity]}."
  return SomaticProfile(height=f"{_feet(height - 1)}-{_feet(height + 1)}", weight=f"{weight_min}-{weight_max} lbs", build=build, description=description)


def sample_persona(details: ModelDetails, rng: random.Random) -> Persona:
  """Pick a concrete identity for the demographics using `rng`."""
  features = ETHNIC_FEATURES[details.ethnicity]
  profile = somatic_profile(details)
  name = rng.choice(NAMES_BY_SEX_AND_ETHNICITY[details.sex][details.ethnicity])
  hair_style = rng.choice(features.hair_styles)
  hair_color = rng.choice(features.hair_colors)
  eye_color = rng.choice(features.eye_colors)
  skin_tone = rng.choice(features.skin_tones)
  facial_features = rng.choice(FACIAL_FEATURES)
  age_years = AGE_MODIFIERS[details.age][3]
  persona_id = f"persona_{rng.getrandbits(32):08x}"

  full_description = (
    f"{name} is a {age_years}-year-old {details.ethnicity} {details.sex.lower()} with {skin_tone} skin, "
    f"{hair_color} hair worn {hair_style}, {eye_color} eyes and {facial_features}."
  )
  return Persona(
    id=persona_id,
    name=name,
    age=details.age,
    sex=details.sex,
    ethnicity=details.ethnicity,
    size=details.size,
    height=profile.height,
    weight=profile.weight,
    build=profile.build,
    facial_features=facial_features,
    hair_style=hair_style,
    hair_color=hair_color,
    eye_color=eye_color,
    skin_tone=skin_tone,
    full_description=full_description,
  )
